from __future__ import annotations

import importlib.resources
import json
import logging
import os
import shutil
from datetime import datetime
from typing import Any, Dict, Optional

# --- Configuration ---
DEFAULT_SERVER_URL = "http://localhost:8788"
STORAGE_ENDPOINT = "/api/storage"
AUTH_HEADER = "x-auth-password"
HTTP_TIMEOUT = 15
SAVED_STATUS_SECONDS = 2.0

CONFIG_DIR = os.path.expanduser("~/.config/cloudnav")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")

# Local persistence keys
DATA_CACHE_KEY = "cloudnav_data_cache"
AUTH_TOKEN_KEY = "cloudnav_auth_token"
THEME_KEY = "theme"

DEFAULT_AI_MODEL = "gpt-4o-mini"

REQUEST_HEADERS = {
    "User-Agent": "cloudnav/1.0",
    "Accept": "application/json",
}
RETRY_ATTEMPTS = 3
RETRY_BACKOFF = 0.3

# Default UI settings
UI_DEFAULTS = {
    "statusbar_keybindings": "[b]a[/] add  [b]e[/] edit  [b]d[/] delete  [b]/[/] search",
}

# --- Logging ---
logger = logging.getLogger("cloudnav")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Configure logging."""
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/cloudnav_debug_{ts}_{pid}.log"

    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    logger.debug("Debug logging enabled to %s", debug_path)
    return debug_path


def ensure_config_file_exists() -> None:
    """Copy the default config file if the user's config file is not found."""
    if not os.path.exists(CONFIG_PATH):
        logger.info("Config file not found at %s, creating default.", CONFIG_PATH)
        try:
            os.makedirs(os.path.dirname(CONFIG_PATH), exist_ok=True)
            default_config = importlib.resources.files("cloudnav") / "default_config.json"
            with importlib.resources.as_file(default_config) as default_config_path:
                shutil.copy(default_config_path, CONFIG_PATH)
        except (IOError, OSError) as e:
            logger.error("Failed to create default config file: %s", e)


def load_config() -> Dict[str, Any]:
    """Load the main configuration file."""
    ensure_config_file_exists()
    try:
        with open(CONFIG_PATH, "r") as f:
            config = json.load(f)
            logger.info("Loaded config from %s", CONFIG_PATH)
            return config
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
        return {}


def get_server_url(config: Dict[str, Any]) -> str:
    """Environment beats the config file; the config file beats the default."""
    url = os.environ.get("CLOUDNAV_SERVER_URL") or config.get("server_url") or DEFAULT_SERVER_URL
    return url.rstrip("/")


def get_data_dir(config: Dict[str, Any]) -> str:
    return os.path.expanduser(config.get("data_dir") or CONFIG_DIR)


def get_http_timeout(config: Dict[str, Any]) -> float:
    try:
        return float(config.get("http_timeout", HTTP_TIMEOUT))
    except (TypeError, ValueError):
        logger.warning("Invalid http_timeout %r, using %s", config.get("http_timeout"), HTTP_TIMEOUT)
        return HTTP_TIMEOUT


def get_ai_settings(config: Dict[str, Any]) -> Dict[str, Optional[str]]:
    ai = config.get("ai") or {}
    return {
        "api_key": ai.get("api_key") or os.environ.get("OPENAI_API_KEY"),
        "model": ai.get("model") or DEFAULT_AI_MODEL,
    }
