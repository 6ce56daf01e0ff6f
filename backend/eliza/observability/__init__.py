from __future__ import annotations

from .logging import configure_logging, hash_session_id, logging_config, safe_redact, structured_log
from .request_id import REQUEST_ID_HEADER, get_request_id

__all__ = [
    "REQUEST_ID_HEADER",
    "configure_logging",
    "get_request_id",
    "hash_session_id",
    "logging_config",
    "safe_redact",
    "structured_log",
]
