"""
Per-session conversation state

A loaded Script is shared read-only. Everything a conversation changes
lives here, one SessionState per session:
- limit: the turn counter, cycling 1..4
- cycles: reassembly round-robin pointers
- memories: FIFO of memories laid down by the MEMORY rule
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List

from backend.eliza.rules.model import ReassemblyCycles

# Hard-coded in the original ELIZA, selected by limit - 1.
NOMATCH_MESSAGES = (
    "PLEASE CONTINUE",
    "HMMM",
    "GO ON, PLEASE",
    "I SEE",
)

LIMIT_CYCLE = 4
INITIAL_LIMIT = 1
# A memory is only recalled on a turn with no keyword when limit has this value.
MEMORY_RECALL_LIMIT = 4


class MemoryQueue:
    def __init__(self) -> None:
        self._memories: Deque[str] = deque()

    def add(self, memory: str) -> None:
        self._memories.append(memory)

    def has_memory(self) -> bool:
        return bool(self._memories)

    def recall_memory(self) -> str:
        """Remove and return the oldest memory; "" when there is none."""
        if not self._memories:
            return ""
        return self._memories.popleft()

    def snapshot(self) -> List[str]:
        return list(self._memories)

    def __len__(self) -> int:
        return len(self._memories)


@dataclass
class SessionState:
    limit: int = INITIAL_LIMIT
    cycles: ReassemblyCycles = field(default_factory=ReassemblyCycles)
    memories: MemoryQueue = field(default_factory=MemoryQueue)
    turns: int = 0

    def advance_limit(self) -> int:
        self.limit = self.limit % LIMIT_CYCLE + 1
        self.turns += 1
        return self.limit

    def nomatch_message(self) -> str:
        return NOMATCH_MESSAGES[self.limit - 1]


__all__ = [
    "NOMATCH_MESSAGES",
    "LIMIT_CYCLE",
    "INITIAL_LIMIT",
    "MEMORY_RECALL_LIMIT",
    "MemoryQueue",
    "SessionState",
]
