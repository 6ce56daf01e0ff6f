from __future__ import annotations

import pytest

from backend.eliza.matching.matcher import (
    LiteralWord,
    TagGroup,
    Wildcard,
    WordGroup,
    compile_pattern,
    match,
    parse_group,
    word_in_group,
)
from backend.eliza.matching.reassembly import INDEX_ERROR_TOKEN, reassemble

TAGS = {
    "FAMILY": ("BROTHER", "FATHER", "MOTHER"),
    "BELIEF": ("BELIEVE", "FEEL", "THINK", "WISH"),
}

MARY = ["MARY", "HAD", "A", "LITTLE", "LAMB", "ITS", "PROBABILITY", "WAS", "ZERO"]


@pytest.mark.parametrize(
    "pattern, words, expected",
    [
        (
            ["0", "YOU", "(*WANT NEED)", "0"],
            ["YOU", "NEED", "NICE", "FOOD"],
            ["", "YOU", "NEED", "NICE FOOD"],
        ),
        (
            ["0", "0", "YOU", "(*WANT NEED)", "0"],
            ["YOU", "WANT", "NICE", "FOOD"],
            ["", "", "YOU", "WANT", "NICE FOOD"],
        ),
        (
            ["1", "(*WANT NEED)", "0"],
            ["YOU", "WANT", "NICE", "FOOD"],
            ["YOU", "WANT", "NICE FOOD"],
        ),
        (
            ["1", "(*WANT NEED)", "2"],
            ["YOU", "WANT", "NICE", "FOOD"],
            ["YOU", "WANT", "NICE FOOD"],
        ),
        (
            ["0", "YOUR", "0", "(* FATHER MOTHER)", "0"],
            ["CONSIDER", "YOUR", "AGED", "MOTHER", "AND", "FATHER", "TOO"],
            ["CONSIDER", "YOUR", "AGED", "MOTHER", "AND FATHER TOO"],
        ),
        (
            ["2", "0", "2"],
            ["FIRST", "AND", "LAST", "TWO", "WORDS"],
            ["FIRST AND", "LAST", "TWO WORDS"],
        ),
        (
            ["0", "0", "7"],
            ["THE", "NAME", "IS", "BOND", "JAMES", "BOND", "OR", "007", "IF", "YOU", "PREFER"],
            ["", "THE NAME IS BOND", "JAMES BOND OR 007 IF YOU PREFER"],
        ),
        (
            ["0", "ITS", "0", "MARY", "1"],
            ["ITS", "MARY", "ITS", "NOT", "MARY", "IT", "IS", "MARY", "TOO"],
            ["", "ITS", "MARY ITS NOT MARY IT IS", "MARY", "TOO"],
        ),
        (
            ["0", "YOU", "0", "I", "0"],
            ["YOU", "KNOW", "THAT", "I", "KNOW", "YOU", "HATE", "I", "AND", "YOU", "LIKE", "I", "TOO"],
            ["", "YOU", "KNOW THAT", "I", "KNOW YOU HATE I AND YOU LIKE I TOO"],
        ),
        (
            ["MARY", "2", "2", "ITS", "1", "0"],
            MARY,
            ["MARY", "HAD A", "LITTLE LAMB", "ITS", "PROBABILITY", "WAS ZERO"],
        ),
        (
            ["1", "0", "2", "ITS", "0"],
            MARY,
            ["MARY", "HAD A", "LITTLE LAMB", "ITS", "PROBABILITY WAS ZERO"],
        ),
    ],
)
def test_match_vectors(pattern, words, expected):
    assert match({}, pattern, words) == expected


def test_match_failures():
    assert match({}, ["1", "(*WANT NEED)", "1"], ["YOU", "WANT", "NICE", "FOOD"]) is None
    assert match({}, ["YOU"], []) is None
    assert match({}, ["3"], ["ONE", "TWO"]) is None
    assert match({}, [], ["WORD"]) is None


def test_empty_pattern_matches_only_empty_sentence():
    assert match({}, [], []) == []


def test_zero_wildcard_matches_empty_sentence():
    assert match({}, ["0"], []) == [""]


def test_tag_group():
    words = ["MY", "FATHER", "IS", "AFRAID"]
    assert match(TAGS, ["0", "MY", "0", "(/FAMILY)", "0"], words) == ["", "MY", "", "FATHER", "IS AFRAID"]
    assert match(TAGS, ["0", "(/NOUN)", "0"], words) is None


def test_match_does_not_mutate_arguments():
    pattern = ["0", "YOU", "0"]
    words = ["I", "THINK", "YOU", "KNOW"]
    match({}, pattern, words)
    assert pattern == ["0", "YOU", "0"]
    assert words == ["I", "THINK", "YOU", "KNOW"]


def test_parse_group():
    assert parse_group("(*SAD HAPPY DEPRESSED)") == WordGroup(("SAD", "HAPPY", "DEPRESSED"))
    assert parse_group("(* WANT NEED)") == WordGroup(("WANT", "NEED"))
    assert parse_group("(/FAMILY)") == TagGroup("FAMILY")
    assert parse_group("(/ FAMILY)") == TagGroup("FAMILY")
    assert parse_group("(FAMILY)") == WordGroup(())


def test_compile_pattern():
    assert compile_pattern(["0", "YOU", "2", "(/BELIEF)"]) == (
        Wildcard(0),
        LiteralWord("YOU"),
        Wildcard(2),
        TagGroup("BELIEF"),
    )


def test_word_in_group():
    assert word_in_group("DEPRESSED", "(*SAD HAPPY DEPRESSED)", TAGS)
    assert word_in_group("FATHER", "(/FAMILY)", TAGS)
    assert not word_in_group("FATHER", "(/NOUN)", TAGS)
    assert not word_in_group("SAD", "(SAD)", TAGS)


def test_reassemble():
    components = ["MARY", "HAD A", "LITTLE LAMB", "ITS", "PROBABILITY", "WAS ZERO"]
    result = reassemble(["DID", "1", "HAVE", "A", "3"], components)
    assert result == ["DID", "MARY", "HAVE", "A", "LITTLE", "LAMB"]
    assert " ".join(result) == "DID MARY HAVE A LITTLE LAMB"


def test_reassemble_resplits_components():
    assert reassemble(["ARE", "YOU", "1"], ["MAD", "ABOUT YOU"]) == ["ARE", "YOU", "MAD"]
    assert reassemble(["2"], ["", "NICE , FOOD"]) == ["NICE", ",", "FOOD"]


def test_reassemble_index_errors_are_visible():
    assert reassemble(["0", "X"], ["A"]) == [INDEX_ERROR_TOKEN, "X"]
    assert reassemble(["2"], ["A"]) == [INDEX_ERROR_TOKEN]
