from __future__ import annotations

import pytest

from backend.eliza.text.hollerith import pack_word_as_datum
from backend.eliza.text.slip_hash import slip_hash


@pytest.mark.parametrize(
    "datum, bits, expected",
    [
        (0o214366217062, 7, 14),      # ALWAYS; keyword hash, CACM 1966 page 38
        (0o302551256060, 2, 3),       # HERE; memory selection
        (0o423124626060, 2, 1),       # KIDS
        (0o633144256060, 2, 0),       # TIME
        (0o777777777777, 7, 0x70),
        (0o777777777777, 15, 0x7F00),
        (0x555555555, 15, 0x46E3),
        (0xF0F0F0F0F, 15, 0x7788),
        (0o214366217062, 15, 0x70EE),
        (0o633144256060, 15, 0x252E),
        (0, 7, 0),
    ],
)
def test_hash_vectors(datum, bits, expected):
    assert slip_hash(datum, bits) == expected


def test_hash_of_packed_words():
    assert slip_hash(pack_word_as_datum("ALWAYS"), 7) == 14
    assert slip_hash(pack_word_as_datum("HERE"), 2) == 3
    assert slip_hash(pack_word_as_datum("KIDS"), 2) == 1
    assert slip_hash(pack_word_as_datum("TIME"), 2) == 0


def test_sign_bit_is_ignored():
    assert slip_hash(0o777777777777, 15) == slip_hash(0o377777777777, 15)


def test_zero_bits_is_always_zero():
    assert slip_hash(0o214366217062, 0) == 0


@pytest.mark.parametrize("bits", [-1, 16])
def test_hash_width_is_bounded(bits):
    with pytest.raises(ValueError):
        slip_hash(1, bits)
