"""
Canonical script rendering

render_script() writes a loaded script back as script text: the greeting,
every keyword rule in key order (NONE sorts last), then the MEMORY rule.
Loading the rendered text gives back an equivalent script.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from backend.eliza.rules.model import (
    MEMORY_KEY,
    MEMORY_KEYWORD,
    NEWKEY,
    PRE_MARK,
    Decomposition,
    EquivalenceLinkRule,
    LinkTo,
    MemoryRule,
    NewKey,
    PreLinkRule,
    PreTransform,
    ReassemblyRule,
    Rule,
    Template,
    VanillaRule,
)
from backend.eliza.script.parser import Script
from backend.eliza.text.words import join

TRANSFORMATION_INDENT = "\n    "
REASSEMBLY_INDENT = "\n        "


def render_reassembly(reassembly: ReassemblyRule) -> str:
    if isinstance(reassembly, Template):
        return "(" + join(reassembly.terms) + ")"
    if isinstance(reassembly, NewKey):
        return f"({NEWKEY})"
    if isinstance(reassembly, LinkTo):
        return f"(={reassembly.target})"
    if isinstance(reassembly, PreTransform):
        return join(["(", PRE_MARK, "(", *reassembly.terms, ")", "(", "=" + reassembly.target, ")", ")"])
    raise TypeError(f"unknown reassembly rule {reassembly!r}")


def _transformations(rule: Rule) -> List[Tuple[Decomposition, Sequence[ReassemblyRule]]]:
    if isinstance(rule, VanillaRule):
        return [(t.decomposition, t.reassemblies) for t in rule.transformations]
    if isinstance(rule, PreLinkRule):
        return [(rule.decomposition, (rule.pre,))]
    return []


def _reference(rule: Rule) -> Optional[str]:
    if isinstance(rule, EquivalenceLinkRule):
        return rule.target
    if isinstance(rule, VanillaRule):
        return rule.link
    return None


def render_keyword_rule(rule: Rule) -> str:
    sexp = "(" + rule.display_keyword

    if rule.substitution:
        sexp += " = " + rule.substitution
    if rule.dlist:
        sexp += " DLIST(" + join(rule.dlist) + ")"
    if rule.precedence > 0:
        sexp += f" {rule.precedence}"

    transformations = _transformations(rule)
    for decomposition, reassemblies in transformations:
        sexp += TRANSFORMATION_INDENT + "((" + join(decomposition.terms) + ")"
        for reassembly in reassemblies:
            sexp += REASSEMBLY_INDENT + render_reassembly(reassembly)
        sexp += ")"

    reference = _reference(rule)
    if reference:
        if transformations:
            sexp += "\n   "
        sexp += f" (={reference})"

    return sexp + ")\n"


def render_memory_rule(rule: MemoryRule) -> str:
    sexp = f"({MEMORY_KEYWORD} {rule.keyword}"
    for pair in rule.pairs:
        sexp += TRANSFORMATION_INDENT + "(" + join(pair.decomposition.terms)
        sexp += " = " + join(pair.reassembly.terms) + ")"
    return sexp + ")\n"


def render_script(script: Script) -> str:
    parts = ["(" + join(script.greeting) + ")\n"]
    for key in sorted(script.rules):
        if key == MEMORY_KEY:
            continue
        parts.append(render_keyword_rule(script.rules[key]))
    if script.memory_rule is not None:
        parts.append(render_memory_rule(script.memory_rule))
    return "".join(parts)


__all__ = ["render_keyword_rule", "render_memory_rule", "render_reassembly", "render_script"]
