"""
Decomposition pattern matcher

A decomposition pattern is a sequence of terms:
- a number n > 0 matches exactly n words
- 0 matches any number of words, including none
- (*A B C) matches one word that is A, B or C
- (/TAG) matches one word that a DLIST declared under TAG
- anything else matches that one word exactly

A successful match yields one component per term; multi-word components
are single-spaced. A 0 term tries the shortest span first, so ambiguous
patterns resolve leftmost-shortest.

The matcher is pure: it never mutates its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Tuple, Union

from backend.eliza.text.words import NOT_A_NUMBER, join, parse_int, tokenize


# e.g. tags["BELIEF"] -> ("BELIEVE", "FEEL", "THINK", "WISH")
TagMap = Mapping[str, Sequence[str]]

GROUP_OPEN = "("
GROUP_CLOSE = ")"
ANY_OF_MARK = "*"
TAG_MARK = "/"


# ============================================================================
# PATTERN ELEMENTS
# ============================================================================

@dataclass(frozen=True)
class LiteralWord:
    word: str

    def accepts(self, word: str, tags: TagMap) -> bool:
        return word == self.word


@dataclass(frozen=True)
class Wildcard:
    """count == 0 means zero or more words."""
    count: int


@dataclass(frozen=True)
class WordGroup:
    words: Tuple[str, ...]

    def accepts(self, word: str, tags: TagMap) -> bool:
        return word in self.words


@dataclass(frozen=True)
class TagGroup:
    tag: str

    def accepts(self, word: str, tags: TagMap) -> bool:
        return word in tags.get(self.tag, ())


PatternElement = Union[LiteralWord, Wildcard, WordGroup, TagGroup]
PatternTerm = Union[str, PatternElement]


# ============================================================================
# COMPILATION
# ============================================================================

def parse_group(spec: str) -> Union[WordGroup, TagGroup]:
    """
    Parse a group spec such as "(*SAD HAPPY)" or "(/FAMILY)".

    A group that is neither an any-of list nor a tag reference becomes an
    empty WordGroup, which matches nothing.
    """
    body = spec
    if body.endswith(GROUP_CLOSE):
        body = body[:-1]
    if body.startswith(GROUP_OPEN):
        body = body[1:]
    if body.startswith(ANY_OF_MARK):
        return WordGroup(tuple(tokenize(body[1:].lstrip(" "))))
    if body.startswith(TAG_MARK):
        return TagGroup(body[1:].lstrip(" "))
    return WordGroup(())


def parse_term(term: str) -> PatternElement:
    n = parse_int(term)
    if n != NOT_A_NUMBER:
        return Wildcard(n)
    if term.startswith(GROUP_OPEN):
        return parse_group(term)
    return LiteralWord(term)


def compile_pattern(terms: Sequence[PatternTerm]) -> Tuple[PatternElement, ...]:
    return tuple(parse_term(t) if isinstance(t, str) else t for t in terms)


def word_in_group(word: str, group_spec: str, tags: TagMap) -> bool:
    """e.g. word_in_group("FATHER", "(/FAMILY)", tags) -> True"""
    return parse_group(group_spec).accepts(word, tags)


# ============================================================================
# MATCHING
# ============================================================================

def match(tags: TagMap, pattern: Sequence[PatternTerm], words: Sequence[str]) -> Optional[List[str]]:
    """
    Match words against pattern; return the matching components or None.

    e.g. match({}, ["0", "YOU", "(*WANT NEED)", "0"], ["YOU", "NEED", "NICE", "FOOD"])
         -> ["", "YOU", "NEED", "NICE FOOD"]
    """
    return _match_from(tags, compile_pattern(pattern), 0, tuple(words), 0)


def _match_from(
    tags: TagMap,
    elements: Tuple[PatternElement, ...],
    p: int,
    words: Tuple[str, ...],
    w: int,
) -> Optional[List[str]]:
    if p == len(elements):
        return [] if w == len(words) else None

    element = elements[p]

    if isinstance(element, Wildcard):
        if element.count == 0:
            # shortest span first; the first span for which the rest matches wins
            for end in range(w, len(words) + 1):
                rest = _match_from(tags, elements, p + 1, words, end)
                if rest is not None:
                    return [join(words[w:end])] + rest
            return None

        end = w + element.count
        if end > len(words):
            return None
        rest = _match_from(tags, elements, p + 1, words, end)
        if rest is None:
            return None
        return [join(words[w:end])] + rest

    if w == len(words) or not element.accepts(words[w], tags):
        return None
    rest = _match_from(tags, elements, p + 1, words, w + 1)
    if rest is None:
        return None
    return [words[w]] + rest


__all__ = [
    "TagMap",
    "LiteralWord",
    "Wildcard",
    "WordGroup",
    "TagGroup",
    "PatternElement",
    "PatternTerm",
    "parse_group",
    "parse_term",
    "compile_pattern",
    "word_in_group",
    "match",
]
