"""
Script parser

Reads the S-expression script format into a Script: the greeting and a
rule map keyed by keyword.

    script   := list ['START'] rule* EOF
    rule     := '(' ')'                              ; ignored
              | '(' 'MEMORY' keyword pair pair pair pair ')'
              | '(' keyword item* ')'
    item     := '=' symbol | number | 'DLIST' list
              | '(' '='symbol ')'                    ; reference, must be last
              | '(' list reassembly+ ')'             ; transformation
    pair     := '(' term* '=' term* ')'
    reassembly := list | '(' 'PRE' list list ')'

The keyword NONE is stored under NONE_KEY and the memory rule under
MEMORY_KEY. Neither key can equal a filtered input word.

Contract guarantees:
- Any grammar violation raises ScriptError naming what was expected
- A loaded script always has a NONE rule and a MEMORY rule, and the
  MEMORY keyword has a keyword rule of its own
- Loaded scripts are immutable and safe to share between sessions
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple, Union

from backend.eliza.rules.model import (
    LINK_MARK,
    MEMORY_KEY,
    MEMORY_KEYWORD,
    MEMORY_TRANSFORMATIONS,
    NONE_KEY,
    NONE_KEYWORD,
    PRE_MARK,
    Decomposition,
    EquivalenceLinkRule,
    MemoryPair,
    MemoryRule,
    PreLinkRule,
    PreTransform,
    ReassemblyRule,
    Rule,
    SubstitutionRule,
    TagRule,
    Template,
    Transformation,
    VanillaRule,
    classify_reassembly,
)
from backend.eliza.rules.tags import collect_tags
from backend.eliza.script.errors import ScriptError
from backend.eliza.script.tokenizer import Token, Tokenizer
from backend.eliza.text.words import join

logger = logging.getLogger(__name__)

START_MARK = "START"
DLIST_MARK = "DLIST"
SUBSTITUTION_MARK = "="


# ============================================================================
# SCRIPT
# ============================================================================

@dataclass(frozen=True)
class Script:
    greeting: Tuple[str, ...]
    rules: Mapping[str, Rule]
    tags: Mapping[str, Tuple[str, ...]] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))
        object.__setattr__(self, "tags", MappingProxyType(collect_tags(self.keyword_rules)))

    @property
    def greeting_text(self) -> str:
        return join(self.greeting)

    @property
    def memory_rule(self) -> Optional[MemoryRule]:
        rule = self.rules.get(MEMORY_KEY)
        return rule if isinstance(rule, MemoryRule) else None

    @property
    def keyword_rules(self) -> Dict[str, Rule]:
        return {key: rule for key, rule in self.rules.items() if key != MEMORY_KEY}


# ============================================================================
# READER
# ============================================================================

@dataclass
class _PendingTransformation:
    decomposition: List[str]
    reassemblies: List[ReassemblyRule]


class _ScriptReader:
    def __init__(self, text: str) -> None:
        self._tok = Tokenizer(text)
        self._rules: Dict[str, Rule] = {}

    def error(self, message: str) -> ScriptError:
        return ScriptError(message, line=self._tok.line)

    def read(self) -> Script:
        greeting = self.read_list()
        if self._tok.peek().is_symbol(START_MARK):
            self._tok.next()

        while self.read_rule():
            pass

        if NONE_KEY not in self._rules:
            raise ScriptError("no NONE rule specified; see Jan 1966 CACM page 41")
        memory = self._rules.get(MEMORY_KEY)
        if memory is None:
            raise ScriptError("no MEMORY rule specified; see Jan 1966 CACM page 41")
        if memory.keyword not in self._rules:
            raise ScriptError(
                f"MEMORY rule keyword '{memory.keyword}' is not also a keyword in its own right; "
                "see Jan 1966 CACM page 41"
            )
        return Script(greeting=tuple(greeting), rules=self._rules)

    # ------------------------------------------------------------------
    # lists
    # ------------------------------------------------------------------

    def read_list(self, prior: bool = True) -> List[str]:
        """
        Read words up to the closing bracket.

        With prior the opening bracket is still to be read. A nested list
        such as (* WANT NEED) is kept as the single word "(* WANT NEED)".
        """
        words: List[str] = []
        t = self._tok.next()
        if prior:
            if not t.is_open:
                raise self.error("expected '('")
            t = self._tok.next()
        while not t.is_close:
            if t.is_symbol() or t.is_number:
                words.append(t.value)
            elif t.is_open:
                words.append(self.read_group())
            else:
                raise self.error("expected ')'")
            t = self._tok.next()
        return words

    def read_group(self) -> str:
        members: List[str] = []
        t = self._tok.next()
        while not t.is_close:
            if not t.is_symbol():
                raise self.error("expected symbol")
            members.append(t.value)
            t = self._tok.next()
        return "(" + " ".join(members) + ")"

    # ------------------------------------------------------------------
    # rules
    # ------------------------------------------------------------------

    def read_rule(self) -> bool:
        """Read one rule of any kind; False at end of input."""
        t = self._tok.next()
        if t.is_eof:
            return False
        if not t.is_open:
            raise self.error("expected '('")
        t = self._tok.peek()
        if t.is_close:
            self._tok.next()
            return True
        if not t.is_symbol():
            raise self.error("expected keyword|MEMORY|NONE")
        if t.value == MEMORY_KEYWORD:
            self.read_memory_rule()
        else:
            self.read_keyword_rule()
        return True

    def read_memory_rule(self) -> None:
        self._tok.next()  # MEMORY
        t = self._tok.next()
        if not t.is_symbol():
            raise self.error("expected keyword")
        if MEMORY_KEY in self._rules:
            raise self.error("multiple MEMORY rules specified")
        keyword = t.value

        pairs: List[MemoryPair] = []
        for _ in range(MEMORY_TRANSFORMATIONS):
            t = self._tok.next()
            if t.is_close:
                raise self.error(f"MEMORY rule must have exactly {MEMORY_TRANSFORMATIONS} transformations")
            if not t.is_open:
                raise self.error("expected '('")
            pairs.append(self.read_memory_pair())

        t = self._tok.next()
        if t.is_open:
            raise self.error(f"MEMORY rule must have exactly {MEMORY_TRANSFORMATIONS} transformations")
        if not t.is_close:
            raise self.error("expected ')'")

        self._rules[MEMORY_KEY] = MemoryRule(keyword=keyword, pairs=tuple(pairs))

    def read_memory_pair(self) -> MemoryPair:
        """(@0 YOUR 0 = LETS DISCUSS FURTHER WHY YOUR 3)"""
        decomposition: List[str] = []
        t = self._tok.next()
        while not t.is_symbol(SUBSTITUTION_MARK):
            if t.is_close:
                raise self.error("expected '='")
            decomposition.append(self._memory_term(t))
            t = self._tok.next()

        reassembly: List[str] = []
        t = self._tok.next()
        while not t.is_close:
            if t.is_open:
                raise self.error("expected ')'")
            reassembly.append(self._memory_term(t))
            t = self._tok.next()

        return MemoryPair(Decomposition(tuple(decomposition)), Template(tuple(reassembly)))

    def _memory_term(self, t: Token) -> str:
        if t.is_symbol() or t.is_number:
            return t.value
        if t.is_open:
            return self.read_group()
        raise self.error("expected ')'")

    def read_reassembly(self) -> ReassemblyRule:
        if not self._tok.next().is_open:
            raise self.error("expected '('")
        if not self._tok.peek().is_symbol(PRE_MARK):
            return classify_reassembly(self.read_list(prior=False))

        # (PRE (I ARE 3) (=YOU))
        self._tok.next()
        reconstruct = self.read_list()
        reference = self.read_list()
        if not self._tok.next().is_close:
            raise self.error("expected ')'")
        return PreTransform(tuple(reconstruct), self._reference_target(reference))

    def _reference_target(self, reference: List[str]) -> str:
        if len(reference) == 1 and len(reference[0]) > 1 and reference[0].startswith(LINK_MARK):
            return reference[0][1:]
        if len(reference) == 2 and reference[0] == LINK_MARK:
            return reference[1]
        raise self.error("expected equivalence class name")

    def read_reference(self) -> str:
        """(@=WHAT) or (@= WHAT); must be the last item of its rule."""
        t = self._tok.next()
        if t.is_symbol(LINK_MARK):
            t = self._tok.next()
            if not t.is_symbol():
                raise self.error("expected equivalence class name")
            target = t.value
        elif t.is_symbol() and len(t.value) > 1 and t.value.startswith(LINK_MARK):
            target = t.value[1:]
        else:
            raise self.error("expected equivalence class name")

        if not self._tok.next().is_close:
            raise self.error("expected ')'")
        if not self._tok.peek().is_close:
            raise self.error("expected ')'")
        return target

    def read_keyword_rule(self) -> None:
        keyword = self._tok.next().value
        if keyword == NONE_KEYWORD:
            keyword = NONE_KEY
        if keyword in self._rules:
            raise self.error(f"keyword rule already specified for keyword '{keyword}'")

        substitution: Optional[str] = None
        precedence = 0
        tags: List[str] = []
        link: Optional[str] = None
        transformations: List[_PendingTransformation] = []

        t = self._tok.next()
        while not t.is_close:
            if t.is_symbol(SUBSTITUTION_MARK):
                t = self._tok.next()
                if not t.is_symbol():
                    raise self.error("expected keyword")
                substitution = t.value
            elif t.is_number:
                precedence = int(t.value)
            elif t.is_symbol(DLIST_MARK):
                tags = self.read_list()
            elif t.is_open:
                peeked = self._tok.peek()
                if peeked.is_symbol() and peeked.value.startswith(LINK_MARK):
                    link = self.read_reference()
                else:
                    pending = _PendingTransformation(self.read_list(), [])
                    pending.reassemblies.append(self.read_reassembly())
                    while self._tok.peek().is_open:
                        pending.reassemblies.append(self.read_reassembly())
                    if not self._tok.next().is_close:
                        raise self.error("expected ')'")
                    transformations.append(pending)
            else:
                raise self.error("malformed rule")
            t = self._tok.next()

        self._rules[keyword] = _build_keyword_rule(
            keyword, substitution, precedence, tuple(tags), link, transformations
        )


def _build_keyword_rule(
    keyword: str,
    substitution: Optional[str],
    precedence: int,
    tags: Tuple[str, ...],
    link: Optional[str],
    pending: List[_PendingTransformation],
) -> Rule:
    common = dict(keyword=keyword, substitution=substitution, precedence=precedence, dlist=tags)

    if not pending:
        if link:
            return EquivalenceLinkRule(target=link, **common)
        if tags:
            return TagRule(**common)
        return SubstitutionRule(**common)

    if (
        len(pending) == 1
        and not link
        and len(pending[0].reassemblies) == 1
        and isinstance(pending[0].reassemblies[0], PreTransform)
    ):
        return PreLinkRule(
            decomposition=Decomposition(tuple(pending[0].decomposition)),
            pre=pending[0].reassemblies[0],
            **common,
        )

    transformations = tuple(
        Transformation(Decomposition(tuple(p.decomposition)), tuple(p.reassemblies))
        for p in pending
    )
    return VanillaRule(transformations=transformations, link=link, **common)


# ============================================================================
# ENTRY POINTS
# ============================================================================

def load_script(text: str) -> Script:
    script = _ScriptReader(text).read()
    logger.info(
        "[Script] Loaded",
        extra={
            "rule_count": len(script.keyword_rules),
            "tag_count": len(script.tags),
            "memory_keyword": script.memory_rule.keyword if script.memory_rule else None,
        },
    )
    return script


def load_script_file(path: Union[str, Path]) -> Script:
    script_path = Path(path)
    try:
        text = script_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ScriptError(f"cannot read script file '{script_path}': {e}") from e
    return load_script(text)


__all__ = ["Script", "load_script", "load_script_file"]
