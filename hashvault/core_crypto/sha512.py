"""
SHA-512 / SHA-384 Hash Implementation (From Scratch)

Implements the SHA-512 compression function as defined in FIPS 180-4 and
the two algorithms built on it:
- SHA-512: 8 output lanes (64-byte digest)
- SHA-384: same compression, different initial values, 6 output lanes

Differences from the SHA-256 family:
- 64-bit lanes instead of 32-bit words (see lane64)
- 128-byte blocks, 80 rounds, 80-lane message schedule
- 128-bit length field (upper 64 bits always zero here)
"""

from typing import List

from .encoding import Data
from .engine import AlgorithmSpec, HashEngine
from .lane64 import add64, and64, not64, rotr64, shr64, xor64


# Initial hash values: first 64 bits of fractional parts of square roots of first 8 primes
H_INITIAL = (
    0x6a09e667f3bcc908, 0xbb67ae8584caa73b, 0x3c6ef372fe94f82b, 0xa54ff53a5f1d36f1,
    0x510e527fade682d1, 0x9b05688c2b3e6c1f, 0x1f83d9abfb41bd6b, 0x5be0cd19137e2179
)

# SHA-384 initial values: square roots of the 9th through 16th primes
H_INITIAL_384 = (
    0xcbbb9d5dc1059ed8, 0x629a292a367cd507, 0x9159015a3070dd17, 0x152fecd8f70e5939,
    0x67332667ffc00b31, 0x8eb44a8768581511, 0xdb0c2e0d64f98fa7, 0x47b5481dbefa4fa4
)

# Round constants: first 64 bits of fractional parts of cube roots of first 80 primes
K = (
    0x428a2f98d728ae22, 0x7137449123ef65cd, 0xb5c0fbcfec4d3b2f, 0xe9b5dba58189dbbc,
    0x3956c25bf348b538, 0x59f111f1b605d019, 0x923f82a4af194f9b, 0xab1c5ed5da6d8118,
    0xd807aa98a3030242, 0x12835b0145706fbe, 0x243185be4ee4b28c, 0x550c7dc3d5ffb4e2,
    0x72be5d74f27b896f, 0x80deb1fe3b1696b1, 0x9bdc06a725c71235, 0xc19bf174cf692694,
    0xe49b69c19ef14ad2, 0xefbe4786384f25e3, 0x0fc19dc68b8cd5b5, 0x240ca1cc77ac9c65,
    0x2de92c6f592b0275, 0x4a7484aa6ea6e483, 0x5cb0a9dcbd41fbd4, 0x76f988da831153b5,
    0x983e5152ee66dfab, 0xa831c66d2db43210, 0xb00327c898fb213f, 0xbf597fc7beef0ee4,
    0xc6e00bf33da88fc2, 0xd5a79147930aa725, 0x06ca6351e003826f, 0x142929670a0e6e70,
    0x27b70a8546d22ffc, 0x2e1b21385c26c926, 0x4d2c6dfc5ac42aed, 0x53380d139d95b3df,
    0x650a73548baf63de, 0x766a0abb3c77b2a8, 0x81c2c92e47edaee6, 0x92722c851482353b,
    0xa2bfe8a14cf10364, 0xa81a664bbc423001, 0xc24b8b70d0f89791, 0xc76c51a30654be30,
    0xd192e819d6ef5218, 0xd69906245565a910, 0xf40e35855771202a, 0x106aa07032bbd1b8,
    0x19a4c116b8d2d0c8, 0x1e376c085141ab53, 0x2748774cdf8eeb99, 0x34b0bcb5e19b48a8,
    0x391c0cb3c5c95a63, 0x4ed8aa4ae3418acb, 0x5b9cca4f7763e373, 0x682e6ff3d6b2b8a3,
    0x748f82ee5defb2fc, 0x78a5636f43172f60, 0x84c87814a1f0ab72, 0x8cc702081a6439ec,
    0x90befffa23631e28, 0xa4506cebde82bde9, 0xbef9a3f7b2c67915, 0xc67178f2e372532b,
    0xca273eceea26619c, 0xd186b8c721c0c207, 0xeada7dd6cde0eb1e, 0xf57d4f7fee6ed178,
    0x06f067aa72176fba, 0x0a637dc5a2c898a6, 0x113f9804bef90dae, 0x1b710b35131c471b,
    0x28db77f523047d84, 0x32caab7b40c72493, 0x3c9ebe0a15c9bebc, 0x431d67c49c100d4c,
    0x4cc5d4becb3e42b6, 0x597f299cfc657e2a, 0x5fcb6fab3ad6faec, 0x6c44198c4a475817
)

BLOCK_SIZE = 128
DIGEST_SIZE_512 = 64
DIGEST_SIZE_384 = 48


def _ch(x: int, y: int, z: int) -> int:
    """Choice function on lanes."""
    return xor64(and64(x, y), and64(not64(x), z))


def _maj(x: int, y: int, z: int) -> int:
    """Majority function on lanes."""
    return xor64(xor64(and64(x, y), and64(x, z)), and64(y, z))


def _sigma0(x: int) -> int:
    """Lowercase sigma 0: used in message schedule."""
    return rotr64(x, 1) ^ rotr64(x, 8) ^ shr64(x, 7)


def _sigma1(x: int) -> int:
    """Lowercase sigma 1: used in message schedule."""
    return rotr64(x, 19) ^ rotr64(x, 61) ^ shr64(x, 6)


def _big_sigma0(x: int) -> int:
    """Uppercase Sigma 0: used in compression."""
    return rotr64(x, 28) ^ rotr64(x, 34) ^ rotr64(x, 39)


def _big_sigma1(x: int) -> int:
    """Uppercase Sigma 1: used in compression."""
    return rotr64(x, 14) ^ rotr64(x, 18) ^ rotr64(x, 41)


def _create_message_schedule(block: bytes) -> List[int]:
    """
    Expand a 128-byte block into 80 lanes.

    For t from 16 to 79:
        W[t] = σ1(W[t-2]) + W[t-7] + σ0(W[t-15]) + W[t-16]
    """
    w = [int.from_bytes(block[i:i+8], byteorder='big') for i in range(0, BLOCK_SIZE, 8)]
    for t in range(16, 80):
        w.append(add64(w[t - 16], _sigma0(w[t - 15]), w[t - 7], _sigma1(w[t - 2])))
    return w


def compress_block(state: List[int], block: bytes) -> List[int]:
    """
    Run the SHA-512 compression function on one 128-byte block.

    Args:
        state: Chaining value (8 64-bit lanes)
        block: Exactly 128 bytes

    Returns:
        New chaining value
    """
    w = _create_message_schedule(block)
    a, b, c, d, e, f, g, h = state

    for t in range(80):
        t1 = add64(h, _big_sigma1(e), _ch(e, f, g), K[t], w[t])
        t2 = add64(_big_sigma0(a), _maj(a, b, c))
        h = g
        g = f
        f = e
        e = add64(d, t1)
        d = c
        c = b
        b = a
        a = add64(t1, t2)

    return [add64(x, y) for x, y in zip(state, (a, b, c, d, e, f, g, h))]


SHA512_SPEC = AlgorithmSpec(
    name='sha512',
    block_size=BLOCK_SIZE,
    word_size=8,
    length_size=16,
    initial_state=H_INITIAL,
    output_words=8,
    compress=compress_block,
)

SHA384_SPEC = AlgorithmSpec(
    name='sha384',
    block_size=BLOCK_SIZE,
    word_size=8,
    length_size=16,
    initial_state=H_INITIAL_384,
    output_words=6,
    compress=compress_block,
)


def sha512(data: Data) -> bytes:
    """Compute the SHA-512 hash of the input data (64 bytes)."""
    return HashEngine(SHA512_SPEC, data).digest()


def sha512_hex(data: Data) -> str:
    """Compute SHA-512 hash and return as a 128-character hex string."""
    return sha512(data).hex()


def sha384(data: Data) -> bytes:
    """Compute the SHA-384 hash of the input data (48 bytes)."""
    return HashEngine(SHA384_SPEC, data).digest()


def sha384_hex(data: Data) -> str:
    """Compute SHA-384 hash and return as a 96-character hex string."""
    return sha384(data).hex()


if __name__ == "__main__":
    test_cases = [
        (sha512_hex, b"abc",
         "ddaf35a193617abacc417349ae20413112e6fa4e89a97ea20a9eeee64b55d39a"
         "2192992a274fc1a836ba3c23a3feebbd454d4423643ce80e2a9ac94fa54ca49f"),
        (sha384_hex, b"abc",
         "cb00753f45a35e8bb5a03d699ac65007272c32ab0eded1631a8b605a43ff5bed"
         "8086072ba1e7cc2358baeca134c825a7"),
    ]

    print("SHA-512 / SHA-384 Implementation Test")
    print("=" * 60)

    all_passed = True
    for func, data, expected in test_cases:
        passed = func(data) == expected
        all_passed = all_passed and passed
        print(f"  {func.__name__}({data!r}): {'✓ PASS' if passed else '✗ FAIL'}")

    print("=" * 60)
    print(f"Overall: {'All tests passed!' if all_passed else 'Some tests failed!'}")
