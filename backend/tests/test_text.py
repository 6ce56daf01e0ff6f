from __future__ import annotations

import pytest

from backend.eliza.text import normalize
from backend.eliza.text.hollerith import (
    HOLLERITH_CHARACTERS,
    filter_text,
    hollerith_defined,
    pack_word_as_datum,
)
from backend.eliza.text.words import is_delimiter, join, parse_int, to_upper, tokenize

ALL_HOLLERITH = "0123456789='+ABCDEFGHI.)-JKLMNOPQR$* /STUVWXYZ,("


def test_hollerith_set_is_the_bcd_table():
    assert len(HOLLERITH_CHARACTERS) == 48
    assert set(ALL_HOLLERITH) == HOLLERITH_CHARACTERS


def test_hollerith_defined():
    assert hollerith_defined("A")
    assert hollerith_defined("'")
    assert not hollerith_defined("a")
    assert not hollerith_defined('"')
    assert not hollerith_defined("?")


def test_filter_text():
    assert filter_text("") == ""
    assert filter_text("HELLO") == "HELLO"
    assert filter_text("Hello! How are you?") == "H    . H          ."
    assert filter_text(ALL_HOLLERITH) == ALL_HOLLERITH


@pytest.mark.parametrize("text", ["", "Hello! How are you?", "tab\there", "café & bar?!"])
def test_filter_text_is_idempotent(text):
    once = filter_text(text)
    assert filter_text(once) == once
    assert all(ch in HOLLERITH_CHARACTERS for ch in once)


def test_to_upper_is_ascii_only():
    assert to_upper("Men are all alike.") == "MEN ARE ALL ALIKE."
    assert to_upper("é") == "é"


def test_tokenize_splits_punctuation():
    assert tokenize("one   two, three don't.") == ["one", "two", ",", "three", "don't", "."]
    assert tokenize("") == []
    assert tokenize("   ") == []


def test_tokenize_join_round_trip():
    text = "YOU ARE NOT VERY AGGRESSIVE , BUT I THINK ."
    assert join(tokenize(text)) == text
    assert tokenize(join(tokenize(text))) == tokenize(text)


def test_join_skips_empty_words():
    assert join([]) == ""
    assert join(["ELIZA"]) == "ELIZA"
    assert join(["one", "", "two", ",", "3", "."]) == "one two , 3 ."


def test_delimiters():
    assert is_delimiter(",")
    assert is_delimiter(".")
    assert is_delimiter("BUT")
    assert not is_delimiter("BUTTER")
    assert not is_delimiter("but")
    assert not is_delimiter("-")


def test_parse_int():
    assert parse_int("2") == 2
    assert parse_int("007") == 7
    assert parse_int("0") == 0
    assert parse_int("two") == -1
    assert parse_int("2A") == -1
    assert parse_int("-1") == -1


def test_normalize():
    assert normalize("Well, my boyfriend made me come here.") == [
        "WELL", ",", "MY", "BOYFRIEND", "MADE", "ME", "COME", "HERE", ".",
    ]
    assert normalize("what is your problem?") == ["WHAT", "IS", "YOUR", "PROBLEM", "."]


@pytest.mark.parametrize(
    "word, datum",
    [
        ("", 0o606060606060),
        ("X", 0o676060606060),
        ("HERE", 0o302551256060),
        ("ALWAYS", 0o214366217062),
        ("INVENTED", 0o252460606060),
        ("123456ABCDEF", 0o212223242526),
    ],
)
def test_pack_word_as_datum(word, datum):
    assert pack_word_as_datum(word) == datum


def test_pack_word_rejects_undefined_characters():
    with pytest.raises(ValueError):
        pack_word_as_datum("hello")
