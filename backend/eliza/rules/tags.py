from __future__ import annotations

from typing import Dict, List, Mapping, Tuple

from backend.eliza.rules.model import Rule

TAG_MARK = "/"


def collect_tags(rules: Mapping[str, Rule]) -> Dict[str, Tuple[str, ...]]:
    """
    Build the tag map from every rule's DLIST.

    e.g. (MOM = MOTHER DLIST(/ FAMILY)) puts MOM under FAMILY.
    Members are listed in ascending keyword order.
    """
    collected: Dict[str, List[str]] = {}
    for key in sorted(rules):
        rule = rules[key]
        for tag in rule.dlist:
            if tag == TAG_MARK:
                continue
            if tag.startswith(TAG_MARK):
                tag = tag[1:]
            members = collected.setdefault(tag, [])
            if rule.keyword not in members:
                members.append(rule.keyword)
    return {tag: tuple(members) for tag, members in collected.items()}


def render_tags(tags: Mapping[str, Tuple[str, ...]]) -> str:
    """One line per tag, e.g. "FAMILY: BROTHER CHILDREN DAD"."""
    return "".join(f"{tag}: {' '.join(tags[tag])}\n" for tag in sorted(tags))


__all__ = ["collect_tags", "render_tags"]
