"""
Hash Engine Backends

Two interchangeable engine implementations behind the same interface:
- 'software': the from-scratch HashEngine (always available)
- 'native':   OpenSSL digests through the cryptography package

The native engine mirrors HashEngine semantics: finalize() is idempotent,
update() after finalization is ignored, equals() is constant time. When the
linked OpenSSL does not provide an algorithm, the software engine is used
instead.
"""

from typing import Callable, Dict, Optional

from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .algorithms import AlgorithmLike, get_algorithm
from .compare import constant_time_equal
from .encoding import Data, to_bytes
from .engine import AlgorithmSpec, HashEngine
from .kdf import check_pbkdf2_parameters, pbkdf2


SOFTWARE = 'software'
NATIVE = 'native'
DEFAULT_BACKEND = SOFTWARE

_NATIVE_ALGORITHMS: Dict[str, Callable[[], hashes.HashAlgorithm]] = {
    'sha1': hashes.SHA1,
    'sha224': hashes.SHA224,
    'sha256': hashes.SHA256,
    'sha384': hashes.SHA384,
    'sha512': hashes.SHA512,
}


def native_supported(algorithm: AlgorithmLike) -> bool:
    """Check whether the native backend can compute an algorithm."""
    spec = get_algorithm(algorithm)
    factory = _NATIVE_ALGORITHMS.get(spec.name)
    if factory is None:
        return False
    return default_backend().hash_supported(factory())


class NativeEngine:
    """HashEngine-compatible wrapper around cryptography's Hash context."""

    def __init__(self, spec: AlgorithmSpec, data: Optional[Data] = None):
        self._spec = spec
        self._ctx = hashes.Hash(_NATIVE_ALGORITHMS[spec.name]())
        self._length = 0
        self._digest: Optional[bytes] = None
        if data is not None:
            self.update(data)

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
        return self._digest is not None

    @property
    def message_length(self) -> int:
        return self._length

    def update(self, data: Data) -> 'NativeEngine':
        message = to_bytes(data)
        if self._digest is None:
            self._ctx.update(message)
            self._length += len(message)
        return self

    def finalize(self) -> None:
        if self._digest is None:
            self._digest = self._ctx.finalize()

    def digest(self) -> bytes:
        self.finalize()
        return self._digest

    def hex(self) -> str:
        return self.digest().hex()

    hexdigest = hex

    def equals(self, other) -> bool:
        if callable(getattr(other, 'digest', None)):
            other = other.digest()
        return constant_time_equal(self.digest(), other)

    def copy(self) -> 'NativeEngine':
        clone = NativeEngine.__new__(NativeEngine)
        clone._spec = self._spec
        clone._length = self._length
        clone._digest = self._digest
        # A finalized cryptography context cannot be copied; it is never used again
        clone._ctx = self._ctx.copy() if self._digest is None else self._ctx
        return clone

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"<NativeEngine {self._spec.name}>"


def engine_factory(backend: str = DEFAULT_BACKEND) -> Callable[[AlgorithmSpec], HashEngine]:
    """
    Return a callable that creates engines for a descriptor.

    Args:
        backend: 'software' or 'native'

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == SOFTWARE:
        return HashEngine
    if backend == NATIVE:
        def _create(spec: AlgorithmSpec):
            if native_supported(spec):
                return NativeEngine(spec)
            return HashEngine(spec)
        return _create
    raise ValueError(f"Unknown backend: {backend!r} (expected '{SOFTWARE}' or '{NATIVE}')")


def get_engine(
    algorithm: AlgorithmLike,
    data: Optional[Data] = None,
    backend: str = DEFAULT_BACKEND
):
    """
    Create a streaming engine on the requested backend.

    Args:
        algorithm: Algorithm name or member
        data: Optional first chunk of input
        backend: 'software' (default) or 'native'

    Returns:
        A HashEngine or NativeEngine
    """
    engine = engine_factory(backend)(get_algorithm(algorithm))
    if data is not None:
        engine.update(data)
    return engine


def derive_key(
    password: Data,
    salt: Data,
    iterations: int,
    dk_len: int,
    algorithm: AlgorithmLike = 'sha256',
    backend: str = DEFAULT_BACKEND,
    event_logger=None,
    subject: Optional[str] = None
) -> bytes:
    """
    PBKDF2-HMAC on the requested backend.

    The native backend runs the whole derivation inside OpenSSL
    (cryptography's PBKDF2HMAC); the software backend uses kdf.pbkdf2.
    Both produce identical output and reject the same parameters.

    Raises:
        TypeError / ValueError: On invalid parameters (see kdf.pbkdf2)
        UnsupportedAlgorithmError: If the algorithm is not supported
    """
    spec = get_algorithm(algorithm)
    if backend == NATIVE and native_supported(spec):
        check_pbkdf2_parameters(iterations, dk_len, spec)
        kdf = PBKDF2HMAC(
            algorithm=_NATIVE_ALGORITHMS[spec.name](),
            length=dk_len,
            salt=to_bytes(salt),
            iterations=iterations,
        )
        derived = kdf.derive(to_bytes(password))
    else:
        derived = pbkdf2(password, salt, iterations, dk_len, spec,
                         engine_factory=engine_factory(backend))

    if event_logger is not None:
        event_logger.log_key_derived(subject, spec.name, iterations, dk_len)
    return derived
