"""
SLIP HASH

"N1 : HASH.(D,N2) classifies D according to a pseudo-random scheme. The
number of classes is 2^N2 [...] N1 is in the range 0 to 2^N2-1."

The FAP routine squares D in the 7094 multiply unit and keeps the middle N
bits of the product (a mid-square hash). The 7094 is sign-magnitude: the top
bit of the 36-bit datum is the sign, so only the low 35 bits take part in
the multiplication. The 70-bit product never needs more than its low 64 bits
for N <= 15, but Python integers are unbounded so no truncation is needed.

Bit widths are part of the contract: any change alters which MEMORY
transformation gets picked and so changes the conversation.
"""

from __future__ import annotations

MAGNITUDE_MASK = 0x7FFFFFFFF  # low 35 bits of a 36-bit word
MAGNITUDE_BITS = 35
MAX_HASH_BITS = 15


def slip_hash(datum: int, bits: int) -> int:
    """Return the middle `bits` bits of the squared 35-bit magnitude of datum."""
    if not 0 <= bits <= MAX_HASH_BITS:
        raise ValueError(f"hash width must be in 0..{MAX_HASH_BITS}, got {bits}")
    magnitude = datum & MAGNITUDE_MASK
    square = magnitude * magnitude
    return (square >> (MAGNITUDE_BITS - bits // 2)) & ((1 << bits) - 1)


__all__ = ["slip_hash", "MAGNITUDE_MASK", "MAX_HASH_BITS"]
