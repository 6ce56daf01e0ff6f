from __future__ import annotations

from .model import (
    MEMORY_KEY,
    MEMORY_TRANSFORMATIONS,
    NONE_KEY,
    Action,
    AnyRule,
    Decomposition,
    EquivalenceLinkRule,
    LinkTo,
    MemoryPair,
    MemoryRule,
    NewKey,
    PreLinkRule,
    PreTransform,
    ReassemblyCycles,
    Rule,
    SubstitutionRule,
    TagRule,
    Template,
    Transformation,
    TransformResult,
    VanillaRule,
    classify_reassembly,
)
from .tags import collect_tags, render_tags

__all__ = [
    "MEMORY_KEY",
    "MEMORY_TRANSFORMATIONS",
    "NONE_KEY",
    "Action",
    "AnyRule",
    "Decomposition",
    "EquivalenceLinkRule",
    "LinkTo",
    "MemoryPair",
    "MemoryRule",
    "NewKey",
    "PreLinkRule",
    "PreTransform",
    "ReassemblyCycles",
    "Rule",
    "SubstitutionRule",
    "TagRule",
    "Template",
    "Transformation",
    "TransformResult",
    "VanillaRule",
    "classify_reassembly",
    "collect_tags",
    "render_tags",
]
