from __future__ import annotations

from typing import Iterable, List

# A comma or a period ends a clause. The MAD-SLIP listing also treats the
# word BUT as a clause delimiter.
PUNCTUATION = frozenset(",.")
DELIMITER_WORDS = frozenset(["BUT"])

NOT_A_NUMBER = -1

_ASCII_UPPER = str.maketrans("abcdefghijklmnopqrstuvwxyz", "ABCDEFGHIJKLMNOPQRSTUVWXYZ")


def to_upper(text: str) -> str:
    """ASCII-only uppercase; non-ASCII letters are left for the filter to drop."""
    return text.translate(_ASCII_UPPER)


def is_punctuation(ch: str) -> bool:
    return ch in PUNCTUATION


def is_delimiter(word: str) -> bool:
    return word in DELIMITER_WORDS or (len(word) == 1 and is_punctuation(word))


def tokenize(text: str) -> List[str]:
    """
    Split text into words; punctuation marks are words of their own.

    e.g. tokenize("one   two, three.") -> ["one", "two", ",", "three", "."]
    """
    words: List[str] = []
    current: List[str] = []
    for ch in text:
        if ch == " " or is_punctuation(ch):
            if current:
                words.append("".join(current))
                current = []
            if ch != " ":
                words.append(ch)
        else:
            current.append(ch)
    if current:
        words.append("".join(current))
    return words


def join(words: Iterable[str]) -> str:
    """Single-space the non-empty words."""
    return " ".join(word for word in words if word)


def parse_int(token: str) -> int:
    """Return the value of an all-digit token, else NOT_A_NUMBER."""
    if not token.isascii() or not token.isdigit():
        return NOT_A_NUMBER if token else 0
    return int(token)


__all__ = [
    "PUNCTUATION",
    "DELIMITER_WORDS",
    "NOT_A_NUMBER",
    "to_upper",
    "is_punctuation",
    "is_delimiter",
    "tokenize",
    "join",
    "parse_int",
]
