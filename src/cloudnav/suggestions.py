from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from openai import OpenAI

from .config import DEFAULT_AI_MODEL
from .datamodels import DEFAULT_CATEGORY_ID, Category

logger = logging.getLogger("cloudnav")

DESCRIBE_PROMPT = """I have a website bookmark.
Title: {title}
URL: {url}

Please write a very short description (max 15 words) that explains what this website is for.
Return ONLY the description text. No quotes."""

CATEGORY_PROMPT = """Task: Categorize this website.
Website: "{title}" ({url})

Available Categories:
{categories}

Return ONLY the 'id' of the best matching category. If unsure, return '{fallback}'."""


@dataclass
class Suggestion:
    description: str = ""
    category_id: Optional[str] = None


class SuggestionService:
    """AI assist for the link form. No method raises; failure means no suggestion."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_AI_MODEL,
        client: Optional[Any] = None,
    ):
        self.model = model
        self.client = client
        if self.client is None and api_key:
            self.client = OpenAI(api_key=api_key)

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _complete(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": "You are a helpful assistant that organizes bookmarks."},
                {"role": "user", "content": prompt},
            ],
            temperature=0.3,
        )
        content = response.choices[0].message.content
        return content.strip() if content else ""

    def describe(self, title: str, url: str) -> str:
        if not self.enabled:
            logger.warning("AI API key missing; no description generated.")
            return ""
        try:
            text = self._complete(DESCRIBE_PROMPT.format(title=title, url=url))
        except Exception as e:
            logger.error("Description generation failed for %s: %s", url, e)
            return ""
        return text.strip("\"'")

    def suggest_category(
        self, title: str, url: str, categories: Sequence[Category]
    ) -> Optional[str]:
        if not self.enabled or not categories:
            return None
        listing = "\n".join(f"{c.id}: {c.name}" for c in categories)
        try:
            answer = self._complete(
                CATEGORY_PROMPT.format(
                    title=title,
                    url=url,
                    categories=listing,
                    fallback=DEFAULT_CATEGORY_ID,
                )
            )
        except Exception as e:
            logger.error("Category suggestion failed for %s: %s", url, e)
            return None

        answer = answer.strip().strip("\"'`")
        known = {c.id for c in categories}
        if answer in known:
            return answer
        logger.debug("Ignoring unknown category suggestion %r", answer)
        return None

    def assist(self, title: str, url: str, categories: Sequence[Category]) -> Suggestion:
        """Ask for a description and a category at the same time."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            describe_future = executor.submit(self.describe, title, url)
            category_future = executor.submit(self.suggest_category, title, url, list(categories))
            return Suggestion(
                description=describe_future.result(),
                category_id=category_future.result(),
            )
