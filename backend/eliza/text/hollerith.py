"""
Hollerith (IBM 7090 BCD) character set

ELIZA ran on a machine whose six-bit character code had 64 slots, of which
48 carry a printable character. Input text is reduced to that set before
any matching happens, and the memory hash works on six-character words
packed in this encoding.

Contract guarantees:
- filter_text() output contains only Hollerith characters
- filter_text() is idempotent
- pack_word_as_datum() always yields a 36-bit value
"""

from __future__ import annotations

from typing import Dict


# ============================================================================
# ENCODING TABLE
# ============================================================================

# Offset is the BCD code (octal 00..77); None marks an unused code.
# Code 014 is a single quote (prime), not a double quote.
_BCD_TABLE = (
    "0", "1", "2", "3", "4", "5", "6", "7", "8", "9", None, "=", "'", None, None, None,
    "+", "A", "B", "C", "D", "E", "F", "G", "H", "I", None, ".", ")", None, None, None,
    "-", "J", "K", "L", "M", "N", "O", "P", "Q", "R", None, "$", "*", None, None, None,
    " ", "/", "S", "T", "U", "V", "W", "X", "Y", "Z", None, ",", "(", None, None, None,
)

HOLLERITH_ENCODING: Dict[str, int] = {
    ch: code for code, ch in enumerate(_BCD_TABLE) if ch is not None
}

HOLLERITH_CHARACTERS = frozenset(HOLLERITH_ENCODING)

CHARS_PER_WORD = 6
BITS_PER_CHAR = 6
DATUM_BITS = CHARS_PER_WORD * BITS_PER_CHAR  # 36


def hollerith_defined(ch: str) -> bool:
    """Return True iff ch is in the Hollerith character set."""
    return ch in HOLLERITH_CHARACTERS


def filter_text(text: str) -> str:
    """
    Reduce text to the Hollerith character set.

    '?' and '!' become '.', anything else outside the set becomes a space.
    Lower-case letters are not in the set, so callers uppercase first.
    """
    out = []
    for ch in text:
        if ch == "?" or ch == "!":
            out.append(".")
        elif ch in HOLLERITH_CHARACTERS:
            out.append(ch)
        else:
            out.append(" ")
    return "".join(out)


def pack_word_as_datum(word: str) -> int:
    """
    Encode the last six-character chunk of word as a 36-bit datum.

    SLIP stored a word in consecutive six-character cells; the hash used by
    the memory rule sees only the final cell. That cell starts at offset
    ((len - 1) // 6) * 6 and is left-justified and space-padded.

    Raises ValueError for a character outside the Hollerith set.
    """
    chunk = word[((len(word) - 1) // CHARS_PER_WORD) * CHARS_PER_WORD:] if word else ""
    chunk = chunk.ljust(CHARS_PER_WORD)
    datum = 0
    for ch in chunk:
        code = HOLLERITH_ENCODING.get(ch)
        if code is None:
            raise ValueError(f"character {ch!r} has no Hollerith encoding")
        datum = (datum << BITS_PER_CHAR) | code
    return datum


__all__ = [
    "HOLLERITH_ENCODING",
    "HOLLERITH_CHARACTERS",
    "DATUM_BITS",
    "hollerith_defined",
    "filter_text",
    "pack_word_as_datum",
]
