from __future__ import annotations

from .session import DEFAULT_MAX_LINK_HOPS, Session, SessionError, new_session, respond
from .state import NOMATCH_MESSAGES, MemoryQueue, SessionState
from .trace import NullTracer, PreTracer, StringTracer

__all__ = [
    "DEFAULT_MAX_LINK_HOPS",
    "NOMATCH_MESSAGES",
    "MemoryQueue",
    "NullTracer",
    "PreTracer",
    "Session",
    "SessionError",
    "SessionState",
    "StringTracer",
    "new_session",
    "respond",
]
