"""
Conversation engine

One Session is one conversation with a loaded Script. respond() turns a
line of user text into a response:

1. uppercase, filter to the Hollerith set, split into words
2. advance the turn counter (limit)
3. scan the first clause holding a keyword, building the keystack and
   applying word substitutions
4. with no keyword at all, recall a memory when limit is 4
5. otherwise work down the keystack until a rule completes
6. fall back to the NONE rule

Contract guarantees:
- respond() never raises for any input text; script inconsistencies end
  the turn with a canned phrase (or the NONE rule)
- The Script is only read; all mutable state is in the SessionState
- Link loops are cut off after max_link_hops keystack pops
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Mapping, Optional, Tuple, Union

from backend.eliza.engine.state import MEMORY_RECALL_LIMIT, SessionState
from backend.eliza.engine.trace import NullTracer
from backend.eliza.rules.model import NONE_KEY, Action, MemoryRule, Rule
from backend.eliza.script.parser import Script
from backend.eliza.text import is_delimiter, join, normalize

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINK_HOPS = 10000


class SessionError(RuntimeError):
    """Raised when a session cannot be created for a rule set."""


class Session:
    def __init__(
        self,
        script: Script,
        *,
        use_nomatch_msgs: bool = True,
        max_link_hops: int = DEFAULT_MAX_LINK_HOPS,
        tracer: Optional[NullTracer] = None,
    ) -> None:
        if NONE_KEY not in script.rules:
            raise SessionError("script has no NONE rule")
        if script.memory_rule is None:
            raise SessionError("script has no MEMORY rule")
        if max_link_hops < 1:
            raise SessionError("max_link_hops must be at least 1")

        self._script = script
        self._rules: Mapping[str, Rule] = script.rules
        self._memory_rule: MemoryRule = script.memory_rule
        self._tags = script.tags
        self._state = SessionState()
        self._tracer = tracer or NullTracer()
        self.use_nomatch_msgs = use_nomatch_msgs
        self.max_link_hops = max_link_hops

    # ------------------------------------------------------------------

    @property
    def script(self) -> Script:
        return self._script

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def limit(self) -> int:
        return self._state.limit

    @property
    def greeting(self) -> str:
        return self._script.greeting_text

    @property
    def tracer(self) -> NullTracer:
        return self._tracer

    def set_tracer(self, tracer: Optional[NullTracer]) -> None:
        self._tracer = tracer or NullTracer()

    # ------------------------------------------------------------------

    def scan(self, words: List[str]) -> Tuple[Deque[str], List[str]]:
        """
        Build the keystack from the first clause containing a keyword.

        Returns the keystack and the words of that clause, with word
        substitutions applied.
        """
        keystack: Deque[str] = deque()
        top_rank = 0
        i = 0
        while i < len(words):
            word = words[i]
            if is_delimiter(word):
                if not keystack:
                    words = words[i + 1:]
                    i = 0
                    continue
                words = words[:i]
                break

            rule = self._rules.get(word)
            if rule is not None:
                if rule.has_transformation():
                    if rule.precedence > top_rank:
                        keystack.appendleft(word)
                        top_rank = rule.precedence
                    else:
                        keystack.append(word)
                substitute = rule.apply_word_substitution(word)
                if substitute is not None:
                    words[i] = substitute
            i += 1
        return keystack, words

    def respond(self, text: str) -> str:
        tracer = self._tracer
        state = self._state
        tracer.begin_response()

        words = normalize(text)
        limit = state.advance_limit()
        tracer.limit(limit)

        keystack, words = self.scan(words)

        tracer.memory_stack(state.memories.snapshot())
        if not keystack:
            tracer.keystack(keystack, self._rules)
            if limit == MEMORY_RECALL_LIMIT and state.memories.has_memory():
                tracer.using_memory()
                return state.memories.recall_memory()

        hops = 0
        while keystack:
            if hops >= self.max_link_hops:
                logger.warning(
                    "[Engine] Link hop limit reached",
                    extra={"max_link_hops": self.max_link_hops, "limit": limit},
                )
                return state.nomatch_message()
            hops += 1

            tracer.keystack(keystack, self._rules)
            keyword = keystack.popleft()
            tracer.pre_transform(keyword, words)

            rule = self._rules.get(keyword)
            if rule is None:
                # e.g. a rule links to a keyword the script doesn't define
                tracer.unknown_key(keyword)
                logger.info("[Engine] Unknown keyword", extra={"keyword": keyword})
                if self.use_nomatch_msgs:
                    return state.nomatch_message()
                break

            memory = self._memory_rule.create_memory(keyword, words, self._tags)
            if memory is not None:
                state.memories.add(memory)
            tracer.create_memory(memory)

            result = rule.apply_transformation(words, self._tags, state.cycles)
            tracer.transform(rule, words, result)

            if result.action is Action.COMPLETE:
                return join(result.words or ())

            if result.action is Action.INAPPLICABLE:
                tracer.decomp_failed()
                logger.info("[Engine] No decomposition matched", extra={"keyword": keyword})
                if self.use_nomatch_msgs:
                    return state.nomatch_message()
                break

            if result.action is Action.LINKKEY:
                if result.words is not None:
                    words = list(result.words)
                keystack.appendleft(result.link or "")
            # NEWKEY: carry on with whatever is left on the keystack

        result = self._rules[NONE_KEY].apply_transformation(words, self._tags, state.cycles)
        tracer.using_none()
        if result.action is Action.COMPLETE:
            return join(result.words or ())
        logger.warning("[Engine] NONE rule produced no response", extra={"limit": limit})
        return state.nomatch_message()


def new_session(
    script: Union[Script, Mapping[str, Rule]],
    *,
    use_nomatch_msgs: bool = True,
    max_link_hops: int = DEFAULT_MAX_LINK_HOPS,
    tracer: Optional[NullTracer] = None,
) -> Session:
    """Start a conversation; a bare rule map gets an empty greeting."""
    if not isinstance(script, Script):
        script = Script(greeting=(), rules=script)
    return Session(
        script,
        use_nomatch_msgs=use_nomatch_msgs,
        max_link_hops=max_link_hops,
        tracer=tracer,
    )


def respond(session: Session, text: str) -> str:
    return session.respond(text)


__all__ = [
    "DEFAULT_MAX_LINK_HOPS",
    "Session",
    "SessionError",
    "new_session",
    "respond",
]
