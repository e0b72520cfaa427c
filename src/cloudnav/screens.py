from __future__ import annotations

from typing import Any, Dict, List, Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.worker import Worker, WorkerState
from textual.widgets import Button, Input, Label, LoadingIndicator, Select, Static

from .config import logger
from .controller import BookmarkStore
from .datamodels import DEFAULT_CATEGORY_ID, Category, Link
from .suggestions import Suggestion, SuggestionService


class LinkFormScreen(ModalScreen[Optional[Dict[str, Any]]]):
    """Add or edit a link. Dismisses with the form fields, or None on cancel."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(
        self,
        categories: List[Category],
        suggestions: SuggestionService,
        link: Optional[Link] = None,
    ):
        super().__init__()
        self.categories = categories
        self.suggestions = suggestions
        self.link = link

    def compose(self) -> ComposeResult:
        link = self.link
        default_category = self.categories[0].id if self.categories else Select.BLANK
        with Vertical(id="link-form", classes="dialog"):
            yield Label("Edit link" if link else "Add link", classes="dialog-title")
            yield Label("Title", classes="form-label")
            yield Input(value=link.title if link else "", placeholder="Site name", id="link-title")
            yield Label("URL", classes="form-label")
            yield Input(value=link.url if link else "", placeholder="https://...", id="link-url")
            yield Label("Description", classes="form-label")
            yield Input(
                value=(link.description or "") if link else "",
                placeholder="Short description...",
                id="link-description",
            )
            yield Label("Category", classes="form-label")
            yield Select(
                [(c.name, c.id) for c in self.categories],
                value=link.category_id if link and self._known(link.category_id) else default_category,
                allow_blank=not self.categories,
                id="link-category",
            )
            yield Static("", id="form-error", classes="form-error")
            yield LoadingIndicator(id="ai-loading")
            with Horizontal(classes="dialog-buttons"):
                yield Button("AI fill", id="ai-assist", disabled=not self.suggestions.enabled)
                yield Button("Save", id="save-link", variant="primary")
                yield Button("Cancel", id="cancel-link")

    def on_mount(self) -> None:
        self.query_one("#ai-loading", LoadingIndicator).display = False
        self.query_one("#link-title", Input).focus()

    def _known(self, category_id: str) -> bool:
        return any(c.id == category_id for c in self.categories)

    def _value(self, widget_id: str) -> str:
        return self.query_one(widget_id, Input).value.strip()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "save-link":
            self.save()
        elif event.button.id == "cancel-link":
            self.dismiss(None)
        elif event.button.id == "ai-assist":
            self.start_assist()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.save()

    def save(self) -> None:
        title = self._value("#link-title")
        url = self._value("#link-url")
        if not title or not url:
            self.query_one("#form-error", Static).update("Title and URL are required.")
            return
        category_id = self.query_one("#link-category", Select).value
        if category_id is Select.BLANK:
            category_id = DEFAULT_CATEGORY_ID
        self.dismiss(
            {
                "title": title,
                "url": url,
                "description": self._value("#link-description") or None,
                "category_id": category_id,
            }
        )

    def start_assist(self) -> None:
        title = self._value("#link-title")
        url = self._value("#link-url")
        if not title or not url:
            self.query_one("#form-error", Static).update("Enter a title and URL first.")
            return
        self.query_one("#ai-loading", LoadingIndicator).display = True
        self.query_one("#ai-assist", Button).disabled = True
        self.run_worker(
            lambda: self.suggestions.assist(title, url, self.categories),
            name="ai_assist",
            thread=True,
        )

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "ai_assist":
            return
        if event.state in (WorkerState.PENDING, WorkerState.RUNNING):
            return

        try:
            self.query_one("#ai-loading", LoadingIndicator).display = False
            self.query_one("#ai-assist", Button).disabled = False
        except NoMatches:
            return

        if event.state is not WorkerState.SUCCESS:
            logger.error("AI assist worker failed: %s", getattr(event.worker, "error", None))
            return

        suggestion: Suggestion = event.worker.result or Suggestion()
        if suggestion.description:
            self.query_one("#link-description", Input).value = suggestion.description
        if suggestion.category_id and self._known(suggestion.category_id):
            self.query_one("#link-category", Select).value = suggestion.category_id

    def action_cancel(self) -> None:
        self.dismiss(None)


class LoginScreen(ModalScreen[bool]):
    """Ask for the shared secret and verify it with a real save."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def __init__(self, store: BookmarkStore):
        super().__init__()
        self.store = store

    def compose(self) -> ComposeResult:
        with Vertical(id="login-dialog", classes="dialog"):
            yield Label("Sign in to sync", classes="dialog-title")
            yield Label("Enter the access password configured on the server.")
            yield Input(placeholder="Password", password=True, id="login-password")
            yield Static("", id="login-error", classes="form-error")
            yield LoadingIndicator(id="login-loading")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Sign in", id="login-submit", variant="primary")
                yield Button("Cancel", id="login-cancel")

    def on_mount(self) -> None:
        self.query_one("#login-loading", LoadingIndicator).display = False
        self.query_one("#login-password", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login-submit":
            self.submit()
        elif event.button.id == "login-cancel":
            self.dismiss(False)

    def submit(self) -> None:
        secret = self.query_one("#login-password", Input).value
        if not secret:
            return
        self.query_one("#login-error", Static).update("")
        self.query_one("#login-loading", LoadingIndicator).display = True
        self.query_one("#login-submit", Button).disabled = True
        self.run_worker(lambda: self.store.login(secret), name="login", thread=True)

    def on_worker_state_changed(self, event: Worker.StateChanged) -> None:
        if getattr(event.worker, "name", None) != "login":
            return
        if event.state in (WorkerState.PENDING, WorkerState.RUNNING):
            return

        self.query_one("#login-loading", LoadingIndicator).display = False
        self.query_one("#login-submit", Button).disabled = False
        if event.state is WorkerState.SUCCESS and event.worker.result:
            self.dismiss(True)
            return

        password = self.query_one("#login-password", Input)
        password.value = ""
        password.focus()
        self.query_one("#login-error", Static).update("Wrong password or server unreachable.")

    def action_cancel(self) -> None:
        self.dismiss(False)


class ImportScreen(ModalScreen[Optional[str]]):
    """Ask for the path of a browser bookmark export."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="import-dialog", classes="dialog"):
            yield Label("Import browser bookmarks", classes="dialog-title")
            yield Label("Path to an exported bookmarks .html file")
            yield Input(placeholder="~/Downloads/bookmarks.html", id="import-path")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Import", id="import-submit", variant="primary")
                yield Button("Cancel", id="import-cancel")

    def on_mount(self) -> None:
        self.query_one("#import-path", Input).focus()

    def _submit(self) -> None:
        path = self.query_one("#import-path", Input).value.strip()
        if path:
            self.dismiss(path)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "import-submit":
            self._submit()
        else:
            self.dismiss(None)

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmScreen(ModalScreen[bool]):
    BINDINGS = [
        Binding("y", "confirm", "Yes"),
        Binding("n,escape", "cancel", "No"),
    ]

    def __init__(self, question: str):
        super().__init__()
        self.question = question

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog", classes="dialog"):
            yield Label(self.question, classes="dialog-title")
            with Horizontal(classes="dialog-buttons"):
                yield Button("Yes", id="confirm-yes", variant="error")
                yield Button("No", id="confirm-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "confirm-yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
