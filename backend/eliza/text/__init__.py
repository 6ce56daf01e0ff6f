from __future__ import annotations

from .hollerith import (
    DATUM_BITS,
    HOLLERITH_CHARACTERS,
    HOLLERITH_ENCODING,
    filter_text,
    hollerith_defined,
    pack_word_as_datum,
)
from .slip_hash import slip_hash
from .words import (
    NOT_A_NUMBER,
    is_delimiter,
    is_punctuation,
    join,
    parse_int,
    to_upper,
    tokenize,
)


def normalize(text: str) -> list[str]:
    """Uppercase, filter to the Hollerith set and split into words."""
    return tokenize(filter_text(to_upper(text)))


__all__ = [
    "DATUM_BITS",
    "HOLLERITH_CHARACTERS",
    "HOLLERITH_ENCODING",
    "NOT_A_NUMBER",
    "filter_text",
    "hollerith_defined",
    "is_delimiter",
    "is_punctuation",
    "join",
    "normalize",
    "pack_word_as_datum",
    "parse_int",
    "slip_hash",
    "to_upper",
    "tokenize",
]
