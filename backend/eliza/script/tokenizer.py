"""
Script tokenizer

Splits script text into brackets, numbers and symbols.

Contract guarantees:
- Any character <= 0x20, and DEL, is whitespace
- LF, VT, FF and CR end a line; CR LF counts as one line end
- ';' starts a comment that runs to the end of the line
- A number is a run of ASCII digits
- A symbol is a run of anything else up to a bracket, ';' or whitespace
- line is the line the tokenizer has read up to, for error messages
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

NEWLINE_CHARS = frozenset("\x0a\x0b\x0c\x0d")
COMMENT_MARK = ";"
OPEN_BRACKET = "("
CLOSE_BRACKET = ")"


class TokenType(str, Enum):
    OPEN = "OPEN"
    CLOSE = "CLOSE"
    NUMBER = "NUMBER"
    SYMBOL = "SYMBOL"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str = ""

    @property
    def is_open(self) -> bool:
        return self.type is TokenType.OPEN

    @property
    def is_close(self) -> bool:
        return self.type is TokenType.CLOSE

    @property
    def is_number(self) -> bool:
        return self.type is TokenType.NUMBER

    @property
    def is_eof(self) -> bool:
        return self.type is TokenType.EOF

    def is_symbol(self, value: Optional[str] = None) -> bool:
        if self.type is not TokenType.SYMBOL:
            return False
        return value is None or self.value == value


def _is_whitespace(ch: str) -> bool:
    return ch <= "\x20" or ch == "\x7f"


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _ends_symbol(ch: str) -> bool:
    return ch in (OPEN_BRACKET, CLOSE_BRACKET, COMMENT_MARK) or _is_whitespace(ch)


class Tokenizer:
    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._line = 1
        self._peeked: Optional[Token] = None

    @property
    def line(self) -> int:
        return self._line

    def peek(self) -> Token:
        if self._peeked is None:
            self._peeked = self._read()
        return self._peeked

    def next(self) -> Token:
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token
        return self._read()

    # ------------------------------------------------------------------

    def _read(self) -> Token:
        text = self._text
        while True:
            self._skip_whitespace()
            if self._pos == len(text):
                return Token(TokenType.EOF)
            if text[self._pos] != COMMENT_MARK:
                break
            while self._pos < len(text) and text[self._pos] not in NEWLINE_CHARS:
                self._pos += 1

        ch = text[self._pos]
        self._pos += 1
        if ch == OPEN_BRACKET:
            return Token(TokenType.OPEN)
        if ch == CLOSE_BRACKET:
            return Token(TokenType.CLOSE)

        start = self._pos - 1
        if _is_digit(ch):
            while self._pos < len(text) and _is_digit(text[self._pos]):
                self._pos += 1
            return Token(TokenType.NUMBER, text[start:self._pos])

        while self._pos < len(text) and not _ends_symbol(text[self._pos]):
            self._pos += 1
        return Token(TokenType.SYMBOL, text[start:self._pos])

    def _skip_whitespace(self) -> None:
        text = self._text
        while self._pos < len(text) and _is_whitespace(text[self._pos]):
            ch = text[self._pos]
            self._pos += 1
            if ch in NEWLINE_CHARS:
                if ch == "\r" and self._pos < len(text) and text[self._pos] == "\n":
                    self._pos += 1
                self._line += 1


__all__ = ["Token", "TokenType", "Tokenizer"]
