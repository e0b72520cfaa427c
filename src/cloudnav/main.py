#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import CloudNavApp
from .config import (
    get_ai_settings,
    get_data_dir,
    get_http_timeout,
    get_server_url,
    load_config,
    setup_logging,
)
from .controller import BookmarkStore
from .remote import RemoteStore
from .storage import LocalStorage
from .suggestions import SuggestionService

logger = logging.getLogger("cloudnav")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="CloudNav bookmark manager")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--server", type=str, help="Base URL of the storage server")
    parser.add_argument(
        "--theme",
        choices=["light", "dark"],
        help="Set the colour theme for this run",
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    server_url = args.server or get_server_url(config)
    logger.info("Using storage server: %s", server_url)

    storage = LocalStorage(get_data_dir(config))
    remote = RemoteStore(server_url, timeout=get_http_timeout(config))
    store = BookmarkStore(remote, storage)

    ai = get_ai_settings(config)
    suggestions = SuggestionService(ai["api_key"], model=ai["model"])
    if not suggestions.enabled:
        logger.info("No AI API key configured; AI assist disabled.")

    theme_mode = args.theme or store.theme_mode or config.get("theme")

    try:
        app = CloudNavApp(store, suggestions, theme_mode=theme_mode, config=config)
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
