"""
64-bit Lane Arithmetic

Unsigned 64-bit operations used by the SHA-384/SHA-512 compression function.
Python integers are unbounded, so lanes are plain ints reduced modulo 2^64
after every operation. A lane can also be viewed as a (high, low) pair of
32-bit halves; the helpers below keep the half-wise semantics exact:

- add64: the carry out of the low half propagates into the high half,
  the carry out of the high half is discarded
- rotr64 / shr64: bits cross the half boundary for every amount,
  both below 32 and at/above 32
- xor64 / and64 / not64: independent per half
"""

from typing import Tuple

from .engine import MASK_32, MASK_64


def split64(x: int) -> Tuple[int, int]:
    """Split a lane into its (high, low) 32-bit halves."""
    return (x >> 32) & MASK_32, x & MASK_32


def join64(high: int, low: int) -> int:
    """Join (high, low) 32-bit halves into a lane."""
    return ((high & MASK_32) << 32) | (low & MASK_32)


def add64(*operands: int) -> int:
    """
    Add 64-bit lanes modulo 2^64.

    Args:
        *operands: Two or more lanes

    Returns:
        The wrapped sum
    """
    if len(operands) < 2:
        raise ValueError("add64 needs at least two operands")
    return sum(operands) & MASK_64


def rotr64(x: int, n: int) -> int:
    """Rotate a lane right by n bits (0 < n < 64)."""
    return ((x >> n) | (x << (64 - n))) & MASK_64


def shr64(x: int, n: int) -> int:
    """Logical shift right of a lane by n bits."""
    return (x & MASK_64) >> n


def xor64(a: int, b: int) -> int:
    return a ^ b


def and64(a: int, b: int) -> int:
    return a & b


def not64(x: int) -> int:
    return ~x & MASK_64
