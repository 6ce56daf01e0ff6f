from __future__ import annotations

import hashlib
import json
import logging
import os
from logging.config import dictConfig
from typing import Any, Dict

logger = logging.getLogger(__name__)

_OBS_SALT = (os.getenv("OBS_HASH_SALT") or "obs-salt").encode("utf-8")

# Conversation text never goes to the logs.
REDACTED_KEYS = ("text", "user_text", "response", "greeting", "trace", "payload", "body")


def logging_config(level: str = "INFO") -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "format": "%(asctime)s %(levelname)s %(name)s %(message)s",
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
            }
        },
        "root": {
            "level": level,
            "handlers": ["console"],
        },
    }


def configure_logging(level: str = "INFO") -> None:
    dictConfig(logging_config(level))


def hash_session_id(session_id: str | None) -> str:
    h = hashlib.sha256()
    h.update(_OBS_SALT)
    h.update((session_id or "none").encode("utf-8"))
    return h.hexdigest()[:16]


def safe_redact(event: Dict[str, Any]) -> Dict[str, Any]:
    # Shallow redact conversation content
    redacted = dict(event) if isinstance(event, dict) else {}
    for key in REDACTED_KEYS:
        if key in redacted:
            redacted.pop(key)
    return redacted


def structured_log(event: Dict[str, Any]) -> None:
    try:
        safe_event = safe_redact(event)
        logger.info(json.dumps(safe_event, separators=(",", ":"), default=str))
    except (TypeError, ValueError):
        # logging must never break the request path
        logger.warning("[Obs] structured event could not be encoded")


__all__ = [
    "REDACTED_KEYS",
    "configure_logging",
    "hash_session_id",
    "logging_config",
    "safe_redact",
    "structured_log",
]
