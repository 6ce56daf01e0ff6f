"""
Script rule model

Every rule is keyed by the keyword that triggers it and may carry a word
substitution, a precedence and DLIST tags. What it does with a whole
sentence depends on its variant:

- SubstitutionRule     only replaces its keyword in the input
- TagRule              declares its keyword a member of one or more tags
- EquivalenceLinkRule  sends processing on to another keyword
- PreLinkRule          rewrites the sentence, then links to another keyword
- VanillaRule          decomposition patterns with cycling reassembly rules
- MemoryRule           four decomposition/reassembly pairs used to lay down
                       memories for later recall

Rules are immutable so a loaded script can be shared between sessions. The
only mutable state a transformation needs, the reassembly cycle pointers,
is passed in by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from backend.eliza.matching.matcher import PatternElement, TagMap, compile_pattern, match
from backend.eliza.matching.reassembly import reassemble
from backend.eliza.text.hollerith import pack_word_as_datum
from backend.eliza.text.slip_hash import slip_hash
from backend.eliza.text.words import join

logger = logging.getLogger(__name__)


# ============================================================================
# RESERVED KEYS
# ============================================================================

# Lower-case letters are not in the Hollerith set, so no filtered input
# word can ever equal these keys.
NONE_KEY = "zNONE"
MEMORY_KEY = "zMEMORY"
NONE_KEYWORD = "NONE"
MEMORY_KEYWORD = "MEMORY"

NEWKEY = "NEWKEY"
LINK_MARK = "="
PRE_MARK = "PRE"

# The memory transformation is picked with a 2-bit hash.
MEMORY_TRANSFORMATIONS = 4
MEMORY_HASH_BITS = 2


# ============================================================================
# TRANSFORMATION OUTCOME
# ============================================================================

class Action(str, Enum):
    INAPPLICABLE = "INAPPLICABLE"  # no decomposition matched
    COMPLETE = "COMPLETE"          # words hold the response
    NEWKEY = "NEWKEY"              # try the next keyword on the keystack
    LINKKEY = "LINKKEY"            # try the keyword in `link`


@dataclass(frozen=True)
class TransformResult:
    action: Action
    words: Optional[Tuple[str, ...]] = None
    link: Optional[str] = None
    decomposition: Optional["Decomposition"] = None
    reassembly: Optional["ReassemblyRule"] = None


INAPPLICABLE = TransformResult(Action.INAPPLICABLE)


# ============================================================================
# DECOMPOSITION / REASSEMBLY
# ============================================================================

@dataclass(frozen=True)
class Decomposition:
    terms: Tuple[str, ...]
    elements: Tuple[PatternElement, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "elements", compile_pattern(self.terms))

    def match(self, words: Sequence[str], tags: TagMap) -> Optional[List[str]]:
        return match(tags, self.elements, words)


@dataclass(frozen=True)
class Template:
    """A reassembly pattern, e.g. (WHY DO YOU SAY YOUR 3)."""
    terms: Tuple[str, ...]

    def resolve(self, components: Sequence[str]) -> TransformResult:
        return TransformResult(Action.COMPLETE, words=tuple(reassemble(self.terms, components)))


@dataclass(frozen=True)
class NewKey:
    """(NEWKEY)"""

    def resolve(self, components: Sequence[str]) -> TransformResult:
        return TransformResult(Action.NEWKEY)


@dataclass(frozen=True)
class LinkTo:
    """(=TARGET)"""
    target: str

    def resolve(self, components: Sequence[str]) -> TransformResult:
        return TransformResult(Action.LINKKEY, link=self.target)


@dataclass(frozen=True)
class PreTransform:
    """(PRE (reassembly) (=TARGET))"""
    terms: Tuple[str, ...]
    target: str

    def resolve(self, components: Sequence[str]) -> TransformResult:
        return TransformResult(
            Action.LINKKEY,
            words=tuple(reassemble(self.terms, components)),
            link=self.target,
        )


ReassemblyRule = Union[Template, NewKey, LinkTo, PreTransform]


def classify_reassembly(terms: Sequence[str]) -> ReassemblyRule:
    """Recognise the single-token special forms (NEWKEY) and (=TARGET)."""
    if len(terms) == 1:
        only = terms[0]
        if only == NEWKEY:
            return NewKey()
        if len(only) > 1 and only.startswith(LINK_MARK):
            return LinkTo(only[1:])
    return Template(tuple(terms))


@dataclass(frozen=True)
class Transformation:
    decomposition: Decomposition
    reassemblies: Tuple[ReassemblyRule, ...]


class ReassemblyCycles:
    """
    Round-robin pointers into each decomposition's reassembly list.

    Keyed by (keyword, decomposition index); every pointer starts at zero.
    """

    def __init__(self) -> None:
        self._next: Dict[Tuple[str, int], int] = {}

    def advance(self, keyword: str, index: int, size: int) -> int:
        """Return the reassembly index to use now and move the pointer on."""
        key = (keyword, index)
        current = self._next.get(key, 0)
        self._next[key] = (current + 1) % size
        return current

    def peek(self, keyword: str, index: int) -> int:
        return self._next.get((keyword, index), 0)

    def reset(self) -> None:
        self._next.clear()


# ============================================================================
# RULES
# ============================================================================

@dataclass(frozen=True)
class Rule:
    keyword: str
    substitution: Optional[str] = None
    precedence: int = 0
    dlist: Tuple[str, ...] = ()

    def apply_word_substitution(self, word: str) -> Optional[str]:
        """Return the substitute for word, or None if this rule doesn't replace it."""
        if not self.substitution or word != self.keyword:
            return None
        return self.substitution

    def has_transformation(self) -> bool:
        return False

    def apply_transformation(
        self, words: Sequence[str], tags: TagMap, cycles: ReassemblyCycles
    ) -> TransformResult:
        return INAPPLICABLE

    @property
    def display_keyword(self) -> str:
        return NONE_KEYWORD if self.keyword == NONE_KEY else self.keyword


@dataclass(frozen=True)
class SubstitutionRule(Rule):
    """e.g. (DONT = DON'T)"""


@dataclass(frozen=True)
class TagRule(Rule):
    """e.g. (MOM = MOTHER DLIST(/ FAMILY))"""


@dataclass(frozen=True)
class EquivalenceLinkRule(Rule):
    """e.g. (MACHINE 50 (=COMPUTER))"""
    target: str = ""

    def has_transformation(self) -> bool:
        return True

    def apply_transformation(
        self, words: Sequence[str], tags: TagMap, cycles: ReassemblyCycles
    ) -> TransformResult:
        return TransformResult(Action.LINKKEY, link=self.target)


@dataclass(frozen=True)
class PreLinkRule(Rule):
    """e.g. (I'M = YOU'RE ((0 YOU'RE 0) (PRE (YOU ARE 3) (=I))))"""
    decomposition: Decomposition = field(default_factory=lambda: Decomposition(()))
    pre: PreTransform = field(default_factory=lambda: PreTransform((), ""))

    @property
    def target(self) -> str:
        return self.pre.target

    def has_transformation(self) -> bool:
        return True

    def apply_transformation(
        self, words: Sequence[str], tags: TagMap, cycles: ReassemblyCycles
    ) -> TransformResult:
        components = self.decomposition.match(words, tags)
        if components is None:
            return INAPPLICABLE
        return replace(
            self.pre.resolve(components),
            decomposition=self.decomposition,
            reassembly=self.pre,
        )


@dataclass(frozen=True)
class VanillaRule(Rule):
    """
    Decomposition patterns, each with reassembly rules used in rotation.

    The first decomposition that matches is used. If none matches, a
    trailing reference (link) is followed when the rule has one.
    """
    transformations: Tuple[Transformation, ...] = ()
    link: Optional[str] = None

    def has_transformation(self) -> bool:
        return bool(self.transformations) or bool(self.link)

    def apply_transformation(
        self, words: Sequence[str], tags: TagMap, cycles: ReassemblyCycles
    ) -> TransformResult:
        for index, transformation in enumerate(self.transformations):
            components = transformation.decomposition.match(words, tags)
            if components is None:
                continue
            reassemblies = transformation.reassemblies
            chosen = reassemblies[cycles.advance(self.keyword, index, len(reassemblies))]
            return replace(
                chosen.resolve(components),
                decomposition=transformation.decomposition,
                reassembly=chosen,
            )

        if self.link:
            return TransformResult(Action.LINKKEY, link=self.link)
        return INAPPLICABLE


@dataclass(frozen=True)
class MemoryPair:
    decomposition: Decomposition
    reassembly: Template


@dataclass(frozen=True)
class MemoryRule(Rule):
    """
    (MEMORY MY
        (0 YOUR 0 = LETS DISCUSS FURTHER WHY YOUR 3)
        (0 YOUR 0 = EARLIER YOU SAID YOUR 3)
        (0 YOUR 0 = BUT YOUR 3)
        (0 YOUR 0 = DOES THAT HAVE ANYTHING TO DO WITH THE FACT THAT YOUR 3))
    """
    pairs: Tuple[MemoryPair, ...] = ()

    def select_pair(self, words: Sequence[str]) -> MemoryPair:
        """Pick a pair by hashing the last cell of the sentence (not at random)."""
        last_word = words[-1] if words else ""
        return self.pairs[slip_hash(pack_word_as_datum(last_word), MEMORY_HASH_BITS)]

    def create_memory(self, keyword: str, words: Sequence[str], tags: TagMap) -> Optional[str]:
        """Return the memory text to store for this input, or None."""
        if keyword != self.keyword:
            return None
        try:
            pair = self.select_pair(words)
        except ValueError:
            logger.warning(
                "[Memory] Last word cannot be hashed; no memory created",
                extra={"keyword": keyword},
            )
            return None
        components = pair.decomposition.match(words, tags)
        if components is None:
            return None
        return join(reassemble(pair.reassembly.terms, components))


AnyRule = Union[
    SubstitutionRule,
    TagRule,
    EquivalenceLinkRule,
    PreLinkRule,
    VanillaRule,
    MemoryRule,
]


__all__ = [
    "NONE_KEY",
    "MEMORY_KEY",
    "NONE_KEYWORD",
    "MEMORY_KEYWORD",
    "NEWKEY",
    "PRE_MARK",
    "LINK_MARK",
    "MEMORY_TRANSFORMATIONS",
    "MEMORY_HASH_BITS",
    "Action",
    "TransformResult",
    "Decomposition",
    "Template",
    "NewKey",
    "LinkTo",
    "PreTransform",
    "ReassemblyRule",
    "classify_reassembly",
    "Transformation",
    "ReassemblyCycles",
    "Rule",
    "SubstitutionRule",
    "TagRule",
    "EquivalenceLinkRule",
    "PreLinkRule",
    "VanillaRule",
    "MemoryPair",
    "MemoryRule",
    "AnyRule",
]
