"""
Streaming Hash Engine

One engine drives every Merkle-Damgard hash in the library. The per-algorithm
details (block size, word size, length field size, initial chaining value,
output length, compression function) come from a static AlgorithmSpec
descriptor, so SHA-224/SHA-256 and SHA-384/SHA-512 are the same engine with
different descriptors.

Engine lifecycle:
1. update(): buffer input, compress every full block immediately
2. finalize(): append 0x80, zero fill, big-endian bit length, last compression
3. digest() / hex(): read the frozen chaining value

finalize() runs once; update() after it is ignored.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .compare import constant_time_equal
from .encoding import Data, to_bytes


MASK_32 = 0xFFFFFFFF
MASK_64 = 0xFFFFFFFFFFFFFFFF

# Padding terminator: a single '1' bit followed by zeros
PAD_BYTE = b'\x80'


CompressFunction = Callable[[List[int], bytes], List[int]]


@dataclass(frozen=True)
class AlgorithmSpec:
    """Static descriptor of a hash algorithm."""
    name: str
    block_size: int          # bytes per compression block
    word_size: int           # bytes per state word (4) or lane (8)
    length_size: int         # bytes reserved for the bit length field
    initial_state: Tuple[int, ...]
    output_words: int        # words emitted in the digest
    compress: CompressFunction

    @property
    def digest_size(self) -> int:
        """Digest length in bytes."""
        return self.output_words * self.word_size


class HashEngine:
    """
    Incremental hash computation for one message.

    Example:
        >>> from hashvault.core_crypto.sha256 import SHA256_SPEC
        >>> engine = HashEngine(SHA256_SPEC)
        >>> engine.update(b"a").update(b"bc").hex()[:16]
        'ba7816bf8f01cfea'
    """

    def __init__(self, spec: AlgorithmSpec, data: Optional[Data] = None):
        """
        Create an engine in its initial state.

        Args:
            spec: Algorithm descriptor
            data: Optional first chunk of input
        """
        self._spec = spec
        self.reset()
        if data is not None:
            self.update(data)

    def reset(self) -> None:
        """Return to the initial chaining value with an empty buffer."""
        self._state: List[int] = list(self._spec.initial_state)
        self._buffer = bytearray()
        # Byte count as (high, low) pair; low never exceeds 32 bits
        self._bytes = 0
        self._hbytes = 0
        self._finalized = False
        self._digest: Optional[bytes] = None

    @property
    def name(self) -> str:
        return self._spec.name

    @property
    def digest_size(self) -> int:
        return self._spec.digest_size

    @property
    def block_size(self) -> int:
        return self._spec.block_size

    @property
    def finalized(self) -> bool:
        return self._finalized

    @property
    def message_length(self) -> int:
        """Total number of bytes absorbed so far."""
        return (self._hbytes << 32) | self._bytes

    def update(self, data: Data) -> 'HashEngine':
        """
        Absorb more input.

        Args:
            data: Text or byte-like input

        Returns:
            The engine itself, for chaining

        Raises:
            TypeError: If data is neither text nor byte-like
        """
        message = to_bytes(data)
        if self._finalized:
            return self

        self._bytes += len(message)
        if self._bytes > MASK_32:
            self._hbytes += self._bytes >> 32
            self._bytes &= MASK_32

        buffer = self._buffer
        buffer.extend(message)
        block_size = self._spec.block_size
        compress = self._spec.compress

        offset = 0
        while len(buffer) - offset >= block_size:
            self._state = compress(self._state, bytes(buffer[offset:offset + block_size]))
            offset += block_size
        if offset:
            del buffer[:offset]
        return self

    def finalize(self) -> None:
        """Apply padding and the length field, then run the last compression."""
        if self._finalized:
            return
        self._finalized = True

        spec = self._spec
        block_size = spec.block_size
        length_offset = block_size - spec.length_size

        block = bytes(self._buffer) + PAD_BYTE
        if len(block) > length_offset:
            # No room left for the length field
            block += b'\x00' * (block_size - len(block))
            self._state = spec.compress(self._state, block)
            block = b''
        block += b'\x00' * (length_offset - len(block))

        bit_length = (self.message_length << 3) & MASK_64
        block += bit_length.to_bytes(spec.length_size, byteorder='big')
        self._state = spec.compress(self._state, block)
        self._buffer = bytearray()

        self._digest = b''.join(
            word.to_bytes(spec.word_size, byteorder='big')
            for word in self._state[:spec.output_words]
        )

    def digest(self) -> bytes:
        """Finalize if needed and return the raw digest."""
        self.finalize()
        return self._digest

    def hex(self) -> str:
        """Finalize if needed and return the lowercase hex digest."""
        return self.digest().hex()

    hexdigest = hex

    def equals(self, other) -> bool:
        """
        Compare this digest with another value in constant time.

        Args:
            other: Raw digest bytes, or another engine

        Returns:
            True if the digests are identical
        """
        if callable(getattr(other, 'digest', None)):
            other = other.digest()
        return constant_time_equal(self.digest(), other)

    def copy(self) -> 'HashEngine':
        """Return an independent engine with the same state."""
        clone = HashEngine(self._spec)
        clone._state = list(self._state)
        clone._buffer = bytearray(self._buffer)
        clone._bytes = self._bytes
        clone._hbytes = self._hbytes
        clone._finalized = self._finalized
        clone._digest = self._digest
        return clone

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        status = 'finalized' if self._finalized else f'{self.message_length} bytes'
        return f"<HashEngine {self._spec.name} ({status})>"
