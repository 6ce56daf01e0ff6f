from __future__ import annotations

from .matcher import (
    LiteralWord,
    PatternElement,
    PatternTerm,
    TagGroup,
    TagMap,
    Wildcard,
    WordGroup,
    compile_pattern,
    match,
    parse_group,
    parse_term,
    word_in_group,
)
from .reassembly import INDEX_ERROR_TOKEN, reassemble

__all__ = [
    "INDEX_ERROR_TOKEN",
    "LiteralWord",
    "PatternElement",
    "PatternTerm",
    "TagGroup",
    "TagMap",
    "Wildcard",
    "WordGroup",
    "compile_pattern",
    "match",
    "parse_group",
    "parse_term",
    "reassemble",
    "word_in_group",
]
