"""
In-memory session registry for the HTTP surface.

All sessions share one loaded Script; each Session owns its turn counter,
reassembly cycles and memory queue. When the registry is full the least
recently used session is evicted.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Optional, Tuple

from backend.eliza.engine.session import DEFAULT_MAX_LINK_HOPS, Session, new_session
from backend.eliza.observability.logging import hash_session_id
from backend.eliza.script.parser import Script

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(
        self,
        script: Script,
        *,
        max_sessions: int = 1000,
        use_nomatch_msgs: bool = True,
        max_link_hops: int = DEFAULT_MAX_LINK_HOPS,
    ) -> None:
        self._script = script
        self._max_sessions = max(1, max_sessions)
        self._use_nomatch_msgs = use_nomatch_msgs
        self._max_link_hops = max_link_hops
        self._sessions: "OrderedDict[str, Session]" = OrderedDict()
        self._lock = threading.Lock()

    @property
    def script(self) -> Script:
        return self._script

    def create(self) -> Tuple[str, Session]:
        session = new_session(
            self._script,
            use_nomatch_msgs=self._use_nomatch_msgs,
            max_link_hops=self._max_link_hops,
        )
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = session
            while len(self._sessions) > self._max_sessions:
                evicted, _ = self._sessions.popitem(last=False)
                logger.info("[Sessions] Evicted", extra={"session": hash_session_id(evicted)})
        return session_id, session

    def get(self, session_id: str) -> Optional[Session]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None:
                self._sessions.move_to_end(session_id)
            return session

    def delete(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions


__all__ = ["SessionRegistry"]
