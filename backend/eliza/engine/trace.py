"""
Per-turn tracing

A Session reports what it does to a tracer. NullTracer ignores
everything; StringTracer keeps a readable report of the latest turn;
PreTracer records the working sentence before every transformation,
which is handy for scripts that compute through chains of PRE links.

Tracing never changes a response.
"""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from backend.eliza.rules.model import (
    LinkTo,
    NewKey,
    PreTransform,
    ReassemblyRule,
    Rule,
    Template,
    TransformResult,
)
from backend.eliza.text.words import join


def reassembly_text(reassembly: ReassemblyRule) -> str:
    if isinstance(reassembly, Template):
        return join(reassembly.terms)
    if isinstance(reassembly, NewKey):
        return "NEWKEY"
    if isinstance(reassembly, LinkTo):
        return "=" + reassembly.target
    if isinstance(reassembly, PreTransform):
        return join(["(", "PRE", "(", *reassembly.terms, ")", "(", "=" + reassembly.target, ")", ")"])
    return repr(reassembly)


class NullTracer:
    def begin_response(self) -> None:
        pass

    def limit(self, limit: int) -> None:
        pass

    def memory_stack(self, memories: Sequence[str]) -> None:
        pass

    def keystack(self, keystack: Sequence[str], rules: Mapping[str, Rule]) -> None:
        pass

    def pre_transform(self, keyword: str, words: Sequence[str]) -> None:
        pass

    def unknown_key(self, keyword: str) -> None:
        pass

    def create_memory(self, memory: Optional[str]) -> None:
        pass

    def transform(self, rule: Rule, words: Sequence[str], result: TransformResult) -> None:
        pass

    def decomp_failed(self) -> None:
        pass

    def using_memory(self) -> None:
        pass

    def using_none(self) -> None:
        pass


class StringTracer(NullTracer):
    def __init__(self) -> None:
        self._lines: List[str] = []

    def text(self) -> str:
        return "".join(self._lines)

    def clear(self) -> None:
        self._lines = []

    def begin_response(self) -> None:
        self.clear()

    def limit(self, limit: int) -> None:
        self._lines.append(f"  LIMIT: {limit}\n")

    def memory_stack(self, memories: Sequence[str]) -> None:
        self._lines.append("  memory stack:\n")
        self._lines.extend(f"    {m}\n" for m in memories)

    def keystack(self, keystack: Sequence[str], rules: Mapping[str, Rule]) -> None:
        if not keystack:
            self._lines.append("  keyword stack: <empty>\n")
            return
        entries = []
        for keyword in keystack:
            rule = rules.get(keyword)
            if rule is None:
                detail = "<unknown keyword>"
            elif rule.has_transformation():
                detail = str(rule.precedence)
            else:
                detail = "<no transform associated with this keyword>"
            entries.append(f"{keyword}({detail})")
        self._lines.append("  keyword stack: " + ", ".join(entries) + "\n")

    def unknown_key(self, keyword: str) -> None:
        self._lines.append(f'  ill-formed script: "{keyword}" is not a keyword\n')

    def create_memory(self, memory: Optional[str]) -> None:
        if memory is not None:
            self._lines.append(f"    new memory: {memory}\n")

    def transform(self, rule: Rule, words: Sequence[str], result: TransformResult) -> None:
        if not rule.has_transformation():
            return
        self._lines.append(f"    keyword: {rule.keyword}\n")
        self._lines.append(f"    input: {join(words)}\n")
        if result.decomposition is not None:
            self._lines.append(f"    matching decomposition: {join(result.decomposition.terms)}\n")
            if result.reassembly is not None:
                self._lines.append(f"      matching reassembly: {reassembly_text(result.reassembly)}\n")
        elif result.link is not None:
            self._lines.append(f"    reference to equivalence class: {result.link}\n")
        else:
            self._lines.append("    ill-formed script: no decomposition rule matches\n")

    def decomp_failed(self) -> None:
        self._lines.append("  ill-formed script: no decomposition rule matched input\n")

    def using_memory(self) -> None:
        self._lines.append("  (recalling a stored memory)\n")

    def using_none(self) -> None:
        self._lines.append("  (using a message from NONE)\n")


class PreTracer(NullTracer):
    """Records "<sentence>   :<keyword>" before each transformation."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def pre_transform(self, keyword: str, words: Sequence[str]) -> None:
        self.lines.append(f"{join(words)}   :{keyword}")

    def text(self) -> str:
        return "".join(line + "\n" for line in self.lines)


__all__ = ["NullTracer", "PreTracer", "StringTracer", "reassembly_text"]
