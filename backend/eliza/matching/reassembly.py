from __future__ import annotations

from typing import List, Sequence

from backend.eliza.text.words import NOT_A_NUMBER, parse_int, tokenize

# Emitted in place of a bad component index so the script bug shows up in
# the conversation instead of stopping it.
INDEX_ERROR_TOKEN = "SCRIPT-ERROR-REASSEMBLY-RULE-INDEX-OUT-OF-RANGE"


def reassemble(reassembly_rule: Sequence[str], components: Sequence[str]) -> List[str]:
    """
    Build output words from a reassembly rule and matching components.

    Numbers in the rule are 1-based component indexes.
    e.g. reassemble(["ARE", "YOU", "1"], ["MAD", "ABOUT YOU"]) -> ["ARE", "YOU", "MAD"]
    """
    result: List[str] = []
    for term in reassembly_rule:
        n = parse_int(term)
        if n == NOT_A_NUMBER:
            result.append(term)
        elif n == 0 or n > len(components):
            result.append(INDEX_ERROR_TOKEN)
        else:
            result.extend(tokenize(components[n - 1]))
    return result


__all__ = ["INDEX_ERROR_TOKEN", "reassemble"]
