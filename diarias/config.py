"""
Client-side configuration: where the store lives, stored credentials, and
where local files (preferences, config.json) are kept.

Priority for every value:
1. Environment variables (DIARIAS_API_BASE_URL, DIARIAS_API_USERNAME, ...)
2. <data dir>/config.json
3. Built-in defaults
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://127.0.0.1:8000"


def data_dir() -> Path:
    """Directory for client files; ``DIARIAS_HOME`` or ``~/.diarias``."""
    env_dir = os.getenv("DIARIAS_HOME")
    return Path(env_dir).expanduser() if env_dir else Path.home() / ".diarias"


def _read_config_file() -> Dict[str, Any]:
    config_path = data_dir() / "config.json"
    if not config_path.exists():
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable %s: %s", config_path, exc)
        return {}
    return data if isinstance(data, dict) else {}


def load_base_url() -> str:
    env_url = os.getenv("DIARIAS_API_BASE_URL")
    if env_url:
        return env_url.rstrip("/")
    cfg_url = _read_config_file().get("api_base_url")
    if cfg_url:
        return str(cfg_url).rstrip("/")
    return DEFAULT_BASE_URL


def load_default_credentials() -> Dict[str, Optional[str]]:
    """
    Credentials for signing in without prompting.

    Environment variables win over config.json:
      - DIARIAS_API_USERNAME
      - DIARIAS_API_PASSWORD
      - DIARIAS_API_TOKEN (optional shortcut to skip login)
    """
    env_credentials = {
        "username": os.getenv("DIARIAS_API_USERNAME"),
        "password": os.getenv("DIARIAS_API_PASSWORD"),
        "access_token": os.getenv("DIARIAS_API_TOKEN"),
    }
    if any(env_credentials.values()):
        return env_credentials

    data = _read_config_file()
    return {
        "username": data.get("api_username"),
        "password": data.get("api_password"),
        "access_token": data.get("api_access_token"),
    }


LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
            "level": "WARNING",
        },
    },
    "loggers": {
        "diarias": {"handlers": ["console"], "level": os.getenv("LOG_LEVEL", "INFO")},
    },
}
