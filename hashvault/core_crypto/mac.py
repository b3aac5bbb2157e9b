"""
HMAC Construction (RFC 2104)

HMAC(K, m) = H((K' ^ opad) || H((K' ^ ipad) || m))

where K' is the key hashed down to a digest if it is longer than the block
size, then zero-padded to exactly one block.

The construction only uses the public engine interface (update / digest /
copy), so it works over any engine factory with the HashEngine signature,
including the native backend.
"""

from typing import Callable, Optional

from .algorithms import AlgorithmLike, get_algorithm
from .compare import constant_time_equal
from .encoding import Data, to_bytes
from .engine import AlgorithmSpec, HashEngine


IPAD_BYTE = 0x36
OPAD_BYTE = 0x5C


EngineFactory = Callable[[AlgorithmSpec], HashEngine]


def _normalize_key(key: bytes, spec: AlgorithmSpec, engine_factory: EngineFactory) -> bytes:
    """Hash long keys down, then zero-pad to one block."""
    if len(key) > spec.block_size:
        key = engine_factory(spec).update(key).digest()
    return key.ljust(spec.block_size, b'\x00')


class HMAC:
    """
    Keyed-hash message authentication code over any supported hash.

    The outer hash is computed on the first finalize() and never again;
    update() after that is ignored, matching HashEngine.

    Example:
        >>> mac = HMAC(b"key", "sha256")
        >>> mac.update(b"The quick brown fox jumps over the lazy dog").hex()[:16]
        'f7bc83f430538424'
    """

    def __init__(
        self,
        key: Data,
        algorithm: AlgorithmLike = 'sha256',
        message: Optional[Data] = None,
        engine_factory: EngineFactory = HashEngine
    ):
        """
        Initialize the HMAC context.

        Args:
            key: Secret key (text is UTF-8 encoded)
            algorithm: Underlying hash algorithm
            message: Optional first chunk of the message
            engine_factory: Callable creating an engine for a descriptor

        Raises:
            TypeError: If key or message is neither text nor byte-like
            UnsupportedAlgorithmError: If the algorithm is not supported
        """
        self._spec = get_algorithm(algorithm)
        self._engine_factory = engine_factory

        key_block = _normalize_key(to_bytes(key), self._spec, engine_factory)
        inner_pad = bytes(b ^ IPAD_BYTE for b in key_block)
        self._outer_pad = bytes(b ^ OPAD_BYTE for b in key_block)

        self._inner = engine_factory(self._spec).update(inner_pad)
        self._outer = None
        if message is not None:
            self.update(message)

    @property
    def name(self) -> str:
        return f"hmac-{self._spec.name}"

    @property
    def digest_size(self) -> int:
        return self._spec.digest_size

    @property
    def block_size(self) -> int:
        return self._spec.block_size

    @property
    def finalized(self) -> bool:
        return self._outer is not None

    def update(self, data: Data) -> 'HMAC':
        """Absorb more message bytes. Returns self for chaining."""
        message = to_bytes(data)
        if self._outer is None:
            self._inner.update(message)
        return self

    def finalize(self) -> None:
        """Run the outer hash over the inner digest (once)."""
        if self._outer is not None:
            return
        inner_digest = self._inner.digest()
        outer = self._engine_factory(self._spec)
        outer.update(self._outer_pad)
        outer.update(inner_digest)
        outer.finalize()
        self._outer = outer

    def digest(self) -> bytes:
        """Finalize if needed and return the raw MAC."""
        self.finalize()
        return self._outer.digest()

    def hex(self) -> str:
        """Finalize if needed and return the MAC as lowercase hex."""
        return self.digest().hex()

    hexdigest = hex

    def equals(self, other) -> bool:
        """Compare this MAC with a raw tag (or another HMAC) in constant time."""
        if callable(getattr(other, 'digest', None)):
            other = other.digest()
        return constant_time_equal(self.digest(), other)

    def copy(self) -> 'HMAC':
        """Return an independent HMAC context with the same state."""
        clone = HMAC.__new__(HMAC)
        clone._spec = self._spec
        clone._engine_factory = self._engine_factory
        clone._outer_pad = self._outer_pad
        clone._inner = self._inner.copy()
        clone._outer = self._outer.copy() if self._outer is not None else None
        return clone

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"<HMAC {self._spec.name}>"


def hmac_digest(key: Data, message: Data, algorithm: AlgorithmLike = 'sha256') -> bytes:
    """One-shot HMAC returning raw bytes."""
    return HMAC(key, algorithm, message).digest()


def hmac_hex(key: Data, message: Data, algorithm: AlgorithmLike = 'sha256') -> str:
    """One-shot HMAC returning lowercase hex."""
    return HMAC(key, algorithm, message).hex()
