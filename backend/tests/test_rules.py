from __future__ import annotations

from backend.eliza.rules.model import (
    Action,
    Decomposition,
    EquivalenceLinkRule,
    LinkTo,
    MemoryPair,
    MemoryRule,
    NewKey,
    PreLinkRule,
    PreTransform,
    ReassemblyCycles,
    SubstitutionRule,
    Template,
    Transformation,
    VanillaRule,
    classify_reassembly,
)
from backend.eliza.rules.tags import collect_tags, render_tags


def _words(text):
    return text.split()


def _dream_rule():
    return VanillaRule(
        keyword="DREAM",
        precedence=3,
        transformations=(
            Transformation(
                Decomposition(("0", "YOU", "DREAM", "0")),
                (
                    Template(("REALLY", "4")),
                    Template(("HAVE", "YOU", "EVER", "FANTASIED", "4")),
                ),
            ),
            Transformation(Decomposition(("0",)), (NewKey(),)),
        ),
    )


def test_classify_reassembly():
    assert classify_reassembly(["NEWKEY"]) == NewKey()
    assert classify_reassembly(["=WHAT"]) == LinkTo("WHAT")
    assert classify_reassembly(["="]) == Template(("=",))
    assert classify_reassembly(["NEWKEY", "NOW"]) == Template(("NEWKEY", "NOW"))


def test_substitution_applies_only_to_own_keyword():
    rule = SubstitutionRule(keyword="DONT", substitution="DON'T")
    assert rule.apply_word_substitution("DONT") == "DON'T"
    assert rule.apply_word_substitution("DO") is None
    assert not rule.has_transformation()
    assert SubstitutionRule(keyword="PERHAPS").apply_word_substitution("PERHAPS") is None


def test_reassembly_rules_cycle_round_robin():
    rule = _dream_rule()
    cycles = ReassemblyCycles()
    words = _words("YOU DREAM OF CATS")
    outputs = [rule.apply_transformation(words, {}, cycles).words for _ in range(3)]
    assert outputs == [
        ("REALLY", "OF", "CATS"),
        ("HAVE", "YOU", "EVER", "FANTASIED", "OF", "CATS"),
        ("REALLY", "OF", "CATS"),
    ]
    assert cycles.peek("DREAM", 0) == 1


def test_cycles_are_independent_per_decomposition():
    rule = _dream_rule()
    cycles = ReassemblyCycles()
    rule.apply_transformation(_words("YOU DREAM"), {}, cycles)
    result = rule.apply_transformation(_words("ABOUT A DREAM"), {}, cycles)
    assert result.action is Action.NEWKEY
    assert cycles.peek("DREAM", 0) == 1
    assert cycles.peek("DREAM", 1) == 0
    cycles.reset()
    assert cycles.peek("DREAM", 0) == 0


def test_result_names_matching_decomposition_and_reassembly():
    rule = _dream_rule()
    result = rule.apply_transformation(_words("YOU DREAM"), {}, ReassemblyCycles())
    assert result.action is Action.COMPLETE
    assert result.decomposition.terms == ("0", "YOU", "DREAM", "0")
    assert result.reassembly == Template(("REALLY", "4"))


def test_link_reassembly():
    rule = VanillaRule(
        keyword="WHAT",
        transformations=(Transformation(Decomposition(("0",)), (LinkTo("WHY"),)),),
    )
    result = rule.apply_transformation(_words("WHAT NOW"), {}, ReassemblyCycles())
    assert result.action is Action.LINKKEY
    assert result.link == "WHY"
    assert result.words is None


def test_vanilla_rule_falls_back_to_link():
    rule = VanillaRule(
        keyword="YOU'RE",
        transformations=(
            Transformation(Decomposition(("0", "YOU'RE", "SAD")), (Template(("WHY",)),)),
        ),
        link="YOU",
    )
    assert rule.has_transformation()
    result = rule.apply_transformation(_words("YOU'RE HAPPY"), {}, ReassemblyCycles())
    assert result.action is Action.LINKKEY
    assert result.link == "YOU"


def test_vanilla_rule_without_match_or_link_is_inapplicable():
    rule = VanillaRule(
        keyword="CAN",
        transformations=(Transformation(Decomposition(("CAN", "I", "0")), (Template(("NO",)),)),),
    )
    assert rule.apply_transformation(_words("I CAN"), {}, ReassemblyCycles()).action is Action.INAPPLICABLE


def test_equivalence_link_rule():
    rule = EquivalenceLinkRule(keyword="MACHINE", precedence=50, target="COMPUTER")
    assert rule.has_transformation()
    result = rule.apply_transformation(_words("A MACHINE"), {}, ReassemblyCycles())
    assert (result.action, result.link) == (Action.LINKKEY, "COMPUTER")


def test_pre_link_rule_rewrites_then_links():
    rule = PreLinkRule(
        keyword="I'M",
        substitution="YOU'RE",
        decomposition=Decomposition(("0", "YOU'RE", "0")),
        pre=PreTransform(("YOU", "ARE", "3"), "YOU"),
    )
    assert rule.target == "YOU"
    result = rule.apply_transformation(_words("YOU'RE SO SAD"), {}, ReassemblyCycles())
    assert result.action is Action.LINKKEY
    assert result.words == ("YOU", "ARE", "SO", "SAD")
    assert result.link == "YOU"
    assert rule.apply_transformation(_words("NOTHING"), {}, ReassemblyCycles()).action is Action.INAPPLICABLE


def test_tag_groups_in_decomposition():
    rule = VanillaRule(
        keyword="YOUR",
        transformations=(
            Transformation(
                Decomposition(("0", "YOUR", "0", "(/FAMILY)", "0")),
                (Template(("TELL", "ME", "MORE", "ABOUT", "YOUR", "FAMILY")),),
            ),
        ),
    )
    tags = {"FAMILY": ("FATHER", "MOTHER")}
    result = rule.apply_transformation(_words("YOUR FATHER"), tags, ReassemblyCycles())
    assert result.action is Action.COMPLETE
    result = rule.apply_transformation(_words("YOUR CAT"), tags, ReassemblyCycles())
    assert result.action is Action.INAPPLICABLE


def _memory_rule():
    pairs = tuple(
        MemoryPair(Decomposition(("0", "YOUR", "0")), Template(tuple(prefix.split()) + ("YOUR", "3")))
        for prefix in ("LETS DISCUSS FURTHER WHY", "EARLIER YOU SAID", "BUT", "DOES THAT HAVE ANYTHING TO DO WITH THE FACT THAT")
    )
    return MemoryRule(keyword="MY", pairs=pairs)


def test_memory_pair_selected_by_hash_of_last_word():
    rule = _memory_rule()
    assert rule.select_pair(_words("YOUR BOYFRIEND MADE YOU COME HERE")) is rule.pairs[3]
    assert rule.select_pair(_words("YOUR KIDS")) is rule.pairs[1]
    assert rule.select_pair(_words("YOUR TIME")) is rule.pairs[0]


def test_create_memory():
    rule = _memory_rule()
    words = _words("WELL YOUR BOYFRIEND MADE YOU COME HERE")
    memory = rule.create_memory("MY", words, {})
    assert memory == "DOES THAT HAVE ANYTHING TO DO WITH THE FACT THAT YOUR BOYFRIEND MADE YOU COME HERE"
    assert rule.create_memory("YOUR", words, {}) is None
    assert rule.create_memory("MY", _words("MY HERE"), {}) is None


def test_create_memory_with_unhashable_last_word():
    rule = _memory_rule()
    assert rule.create_memory("MY", ["YOUR", "CAFé"], {}) is None


def test_collect_tags():
    rules = {
        "MOM": SubstitutionRule(keyword="MOM", substitution="MOTHER", dlist=("/FAMILY",)),
        "DAD": SubstitutionRule(keyword="DAD", substitution="FATHER", dlist=("/", "FAMILY")),
        "FEEL": SubstitutionRule(keyword="FEEL", dlist=("/BELIEF",)),
        "THINK": SubstitutionRule(keyword="THINK", dlist=("/BELIEF", "/BELIEF")),
    }
    tags = collect_tags(rules)
    assert tags == {"FAMILY": ("DAD", "MOM"), "BELIEF": ("FEEL", "THINK")}
    assert render_tags(tags) == "BELIEF: FEEL THINK\nFAMILY: DAD MOM\n"
