from __future__ import annotations

from typing import Optional


class ScriptError(ValueError):
    """Raised when script text cannot be loaded."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        self.reason = message
        if line is None:
            super().__init__(f"Script error: {message}")
        else:
            super().__init__(f"Script error on line {line}: {message}")


__all__ = ["ScriptError"]
