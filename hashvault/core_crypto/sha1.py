"""
SHA-1 Hash Implementation (From Scratch)

Implements SHA-1 as defined in FIPS 180-4: a 5-word state updated by
80 rounds in four stages of 20, each stage with its own boolean function
and round constant.

SHA-1 is kept for interoperability (HMAC-SHA1, PBKDF2-HMAC-SHA1 and legacy
digests). It is not collision resistant and should not be chosen for new
signatures.
"""

from typing import List

from .encoding import Data
from .engine import AlgorithmSpec, HashEngine, MASK_32


# Initial hash values (FIPS 180-4, 5.3.1)
H_INITIAL = (0x67452301, 0xefcdab89, 0x98badcfe, 0x10325476, 0xc3d2e1f0)

# One constant per 20-round stage
K = (0x5a827999, 0x6ed9eba1, 0x8f1bbcdc, 0xca62c1d6)

BLOCK_SIZE = 64
DIGEST_SIZE = 20


def _left_rotate(value: int, amount: int) -> int:
    """Left rotate a 32-bit integer by the specified amount."""
    return ((value << amount) | (value >> (32 - amount))) & MASK_32


def _create_message_schedule(block: bytes) -> List[int]:
    """
    Expand a 64-byte block into 80 words.

    For t from 16 to 79:
        W[t] = ROTL1(W[t-3] ^ W[t-8] ^ W[t-14] ^ W[t-16])
    """
    w = [int.from_bytes(block[i:i+4], byteorder='big') for i in range(0, BLOCK_SIZE, 4)]
    for t in range(16, 80):
        w.append(_left_rotate(w[t - 3] ^ w[t - 8] ^ w[t - 14] ^ w[t - 16], 1))
    return w


def compress_block(state: List[int], block: bytes) -> List[int]:
    """
    Run the SHA-1 compression function on one 64-byte block.

    Args:
        state: Chaining value (5 32-bit words)
        block: Exactly 64 bytes

    Returns:
        New chaining value
    """
    w = _create_message_schedule(block)
    a, b, c, d, e = state

    for t in range(80):
        if t < 20:
            f = (b & c) | (~b & d)          # Ch
            k = K[0]
        elif t < 40:
            f = b ^ c ^ d                   # Parity
            k = K[1]
        elif t < 60:
            f = (b & c) | (b & d) | (c & d)  # Maj
            k = K[2]
        else:
            f = b ^ c ^ d
            k = K[3]

        temp = (_left_rotate(a, 5) + (f & MASK_32) + e + k + w[t]) & MASK_32
        e = d
        d = c
        c = _left_rotate(b, 30)
        b = a
        a = temp

    return [(x + y) & MASK_32 for x, y in zip(state, (a, b, c, d, e))]


SHA1_SPEC = AlgorithmSpec(
    name='sha1',
    block_size=BLOCK_SIZE,
    word_size=4,
    length_size=8,
    initial_state=H_INITIAL,
    output_words=5,
    compress=compress_block,
)


def sha1(data: Data) -> bytes:
    """Compute the SHA-1 hash of the input data (20 bytes)."""
    return HashEngine(SHA1_SPEC, data).digest()


def sha1_hex(data: Data) -> str:
    """Compute SHA-1 hash and return as a 40-character hex string."""
    return sha1(data).hex()


if __name__ == "__main__":
    test_cases = [
        (b"", "da39a3ee5e6b4b0d3255bfef95601890afd80709"),
        (b"abc", "a9993e364706816aba3e25717850c26c9cd0d89d"),
        (b"abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq",
         "84983e441c3bd26ebaae4aa1f95129e5e54670f1"),
    ]

    print("SHA-1 Implementation Test")
    print("=" * 60)

    all_passed = True
    for data, expected in test_cases:
        result = sha1_hex(data)
        passed = result == expected
        all_passed = all_passed and passed
        print(f"  {data[:40]!r}: {'✓ PASS' if passed else '✗ FAIL'}")

    print("=" * 60)
    print(f"Overall: {'All tests passed!' if all_passed else 'Some tests failed!'}")
