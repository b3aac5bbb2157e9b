"""
SHA-256 / SHA-224 Hash Implementation (From Scratch)

Implements the SHA-256 compression function as defined in FIPS 180-4 and
the two algorithms built on it:
- SHA-256: 8 output words (32-byte digest)
- SHA-224: same compression, different initial values, 7 output words

Components:
- Message Schedule: Expands 16 words to 64 words
- Compression: 64 rounds of compression function
- Padding and streaming are handled by the shared HashEngine
"""

from typing import List

from .encoding import Data
from .engine import AlgorithmSpec, HashEngine, MASK_32


# Initial hash values: first 32 bits of fractional parts of square roots of first 8 primes
H_INITIAL = (
    0x6a09e667, 0xbb67ae85, 0x3c6ef372, 0xa54ff53a,
    0x510e527f, 0x9b05688c, 0x1f83d9ab, 0x5be0cd19
)

# SHA-224 initial values: second 32 bits of fractional parts of square roots of primes 9..16
H_INITIAL_224 = (
    0xc1059ed8, 0x367cd507, 0x3070dd17, 0xf70e5939,
    0xffc00b31, 0x68581511, 0x64f98fa7, 0xbefa4fa4
)

# Round constants: first 32 bits of fractional parts of cube roots of first 64 primes
K = (
    0x428a2f98, 0x71374491, 0xb5c0fbcf, 0xe9b5dba5,
    0x3956c25b, 0x59f111f1, 0x923f82a4, 0xab1c5ed5,
    0xd807aa98, 0x12835b01, 0x243185be, 0x550c7dc3,
    0x72be5d74, 0x80deb1fe, 0x9bdc06a7, 0xc19bf174,
    0xe49b69c1, 0xefbe4786, 0x0fc19dc6, 0x240ca1cc,
    0x2de92c6f, 0x4a7484aa, 0x5cb0a9dc, 0x76f988da,
    0x983e5152, 0xa831c66d, 0xb00327c8, 0xbf597fc7,
    0xc6e00bf3, 0xd5a79147, 0x06ca6351, 0x14292967,
    0x27b70a85, 0x2e1b2138, 0x4d2c6dfc, 0x53380d13,
    0x650a7354, 0x766a0abb, 0x81c2c92e, 0x92722c85,
    0xa2bfe8a1, 0xa81a664b, 0xc24b8b70, 0xc76c51a3,
    0xd192e819, 0xd6990624, 0xf40e3585, 0x106aa070,
    0x19a4c116, 0x1e376c08, 0x2748774c, 0x34b0bcb5,
    0x391c0cb3, 0x4ed8aa4a, 0x5b9cca4f, 0x682e6ff3,
    0x748f82ee, 0x78a5636f, 0x84c87814, 0x8cc70208,
    0x90befffa, 0xa4506ceb, 0xbef9a3f7, 0xc67178f2
)

BLOCK_SIZE = 64
DIGEST_SIZE_256 = 32
DIGEST_SIZE_224 = 28


def _right_rotate(value: int, amount: int) -> int:
    """Right rotate a 32-bit integer by the specified amount."""
    return ((value >> amount) | (value << (32 - amount))) & MASK_32


def _ch(x: int, y: int, z: int) -> int:
    """Choice function: if x then y else z (bitwise)."""
    return ((x & y) ^ (~x & z)) & MASK_32


def _maj(x: int, y: int, z: int) -> int:
    """Majority function: majority vote of bits."""
    return (x & y) ^ (x & z) ^ (y & z)


def _sigma0(x: int) -> int:
    """Lowercase sigma 0: used in message schedule."""
    return _right_rotate(x, 7) ^ _right_rotate(x, 18) ^ (x >> 3)


def _sigma1(x: int) -> int:
    """Lowercase sigma 1: used in message schedule."""
    return _right_rotate(x, 17) ^ _right_rotate(x, 19) ^ (x >> 10)


def _big_sigma0(x: int) -> int:
    """Uppercase Sigma 0: used in compression."""
    return _right_rotate(x, 2) ^ _right_rotate(x, 13) ^ _right_rotate(x, 22)


def _big_sigma1(x: int) -> int:
    """Uppercase Sigma 1: used in compression."""
    return _right_rotate(x, 6) ^ _right_rotate(x, 11) ^ _right_rotate(x, 25)


def _bytes_to_words(chunk: bytes) -> List[int]:
    """Convert a 64-byte chunk into 16 32-bit words (big-endian)."""
    words = []
    for i in range(0, BLOCK_SIZE, 4):
        word = int.from_bytes(chunk[i:i+4], byteorder='big')
        words.append(word)
    return words


def _create_message_schedule(words: List[int]) -> List[int]:
    """
    Expand 16 words into 64 words for the message schedule.

    For i from 16 to 63:
        W[i] = σ1(W[i-2]) + W[i-7] + σ0(W[i-15]) + W[i-16]
    """
    w = words.copy()
    for i in range(16, 64):
        s0 = _sigma0(w[i - 15])
        s1 = _sigma1(w[i - 2])
        w.append((w[i - 16] + s0 + w[i - 7] + s1) & MASK_32)
    return w


def _compress(state: List[int], w: List[int]) -> List[int]:
    """
    Perform 64 rounds of compression on the state.

    Args:
        state: Current hash state (8 32-bit words)
        w: Message schedule (64 32-bit words)

    Returns:
        Updated hash state
    """
    # Initialize working variables
    a, b, c, d, e, f, g, h = state

    # 64 rounds
    for i in range(64):
        # Calculate temporary values
        t1 = (h + _big_sigma1(e) + _ch(e, f, g) + K[i] + w[i]) & MASK_32
        t2 = (_big_sigma0(a) + _maj(a, b, c)) & MASK_32

        # Update working variables
        h = g
        g = f
        f = e
        e = (d + t1) & MASK_32
        d = c
        c = b
        b = a
        a = (t1 + t2) & MASK_32

    # Add compressed chunk to current hash value
    return [(x + y) & MASK_32 for x, y in zip(state, (a, b, c, d, e, f, g, h))]


def compress_block(state: List[int], block: bytes) -> List[int]:
    """
    Run the SHA-256 compression function on one 64-byte block.

    Args:
        state: Chaining value (8 32-bit words)
        block: Exactly 64 bytes

    Returns:
        New chaining value
    """
    w = _create_message_schedule(_bytes_to_words(block))
    return _compress(state, w)


SHA256_SPEC = AlgorithmSpec(
    name='sha256',
    block_size=BLOCK_SIZE,
    word_size=4,
    length_size=8,
    initial_state=H_INITIAL,
    output_words=8,
    compress=compress_block,
)

SHA224_SPEC = AlgorithmSpec(
    name='sha224',
    block_size=BLOCK_SIZE,
    word_size=4,
    length_size=8,
    initial_state=H_INITIAL_224,
    output_words=7,
    compress=compress_block,
)


def sha256(data: Data) -> bytes:
    """
    Compute the SHA-256 hash of the input data.

    Args:
        data: Input bytes (or text, hashed as UTF-8)

    Returns:
        256-bit (32-byte) digest as bytes

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return HashEngine(SHA256_SPEC, data).digest()


def sha256_hex(data: Data) -> str:
    """
    Compute SHA-256 hash and return as hexadecimal string.

    Args:
        data: Input bytes to hash

    Returns:
        64-character hexadecimal string
    """
    return sha256(data).hex()


def sha224(data: Data) -> bytes:
    """Compute the SHA-224 hash of the input data (28 bytes)."""
    return HashEngine(SHA224_SPEC, data).digest()


def sha224_hex(data: Data) -> str:
    """Compute SHA-224 hash and return as a 56-character hex string."""
    return sha224(data).hex()


# Self-test when run directly
if __name__ == "__main__":
    # Test vectors from NIST
    test_cases = [
        (sha256_hex, b"", "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"),
        (sha256_hex, b"abc", "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"),
        (sha256_hex, b"The quick brown fox jumps over the lazy dog",
         "d7a8fbb307d7809469ca9abcb0082e4f8d5651e46d3cdb762d02d0bf37c9e592"),
        (sha224_hex, b"", "d14a028c2a3a2bc9476102bb288234c415a2b01f828ea62ac5b3e42f"),
        (sha224_hex, b"abc", "23097d223405d8228642a477bda255b32aadbce4bda0b3f7e36c9da7"),
    ]

    print("SHA-256 / SHA-224 Implementation Test")
    print("=" * 60)

    all_passed = True
    for func, data, expected in test_cases:
        result = func(data)
        passed = result == expected
        all_passed = all_passed and passed

        status = "✓ PASS" if passed else "✗ FAIL"
        print(f"\n{func.__name__}({data[:50]!r})")
        print(f"Expected: {expected}")
        print(f"Got:      {result}")
        print(f"Status:   {status}")

    print("\n" + "=" * 60)
    print(f"Overall: {'All tests passed!' if all_passed else 'Some tests failed!'}")
