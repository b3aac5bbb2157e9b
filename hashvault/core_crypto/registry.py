"""
Hash Function Objects

Ready-made callables for every supported algorithm:

    >>> sha256("abc")
    'ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad'
    >>> sha256.digest(b"abc")[:4]
    b'\\xbax\\x16\\xbf'
    >>> sha256.create().update("a").update("bc").hex() == sha256("abc")
    True
    >>> sha256.hmac("key", "message") == sha256.hmac.create("key").update("message").hex()
    True

hash_async() runs the same synchronous computation in the event loop's
default executor so large inputs do not block the loop.
"""

import asyncio
from typing import Union

from .algorithms import AlgorithmLike, get_algorithm
from .backend import DEFAULT_BACKEND, derive_key, engine_factory
from .compare import constant_time_equal
from .encoding import Data, to_bytes
from .engine import AlgorithmSpec
from .mac import HMAC


class HmacFunction:
    """HMAC entry points for one algorithm (key is always the first argument)."""

    def __init__(self, spec: AlgorithmSpec, backend: str = DEFAULT_BACKEND):
        self.spec = spec
        self.backend = backend
        self._engine_factory = engine_factory(backend)

    @property
    def name(self) -> str:
        return f"hmac-{self.spec.name}"

    @property
    def digest_size(self) -> int:
        return self.spec.digest_size

    def create(self, key: Data) -> HMAC:
        """Create a streaming HMAC context."""
        return HMAC(key, self.spec, engine_factory=self._engine_factory)

    def update(self, key: Data, message: Data) -> HMAC:
        """Create a streaming HMAC context and absorb a first message chunk."""
        return self.create(key).update(message)

    def digest(self, key: Data, message: Data) -> bytes:
        """One-shot HMAC returning raw bytes."""
        return self.update(key, message).digest()

    def hex(self, key: Data, message: Data) -> str:
        """One-shot HMAC returning lowercase hex."""
        return self.update(key, message).hex()

    __call__ = hex

    @staticmethod
    def equals(a: Data, b: Data) -> bool:
        """Constant-time comparison of two tags."""
        return constant_time_equal(a, b)

    async def hash_async(self, key: Data, message: Data) -> str:
        """Compute the hex HMAC in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.hex, key, message)

    def __repr__(self) -> str:
        return f"<HmacFunction {self.name} backend={self.backend}>"


class HashFunction:
    """
    One-shot and streaming entry points for one algorithm.

    Calling the object returns the hex digest; digest() returns raw bytes;
    create() returns a streaming engine.
    """

    def __init__(self, algorithm: AlgorithmLike, backend: str = DEFAULT_BACKEND):
        """
        Args:
            algorithm: Algorithm name or member
            backend: 'software' (default) or 'native'

        Raises:
            UnsupportedAlgorithmError: If the algorithm is not supported
            ValueError: If the backend name is unknown
        """
        self.spec = get_algorithm(algorithm)
        self.backend = backend
        self._engine_factory = engine_factory(backend)
        self.hmac = HmacFunction(self.spec, backend)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def digest_size(self) -> int:
        return self.spec.digest_size

    @property
    def block_size(self) -> int:
        return self.spec.block_size

    def create(self):
        """Create a fresh streaming engine."""
        return self._engine_factory(self.spec)

    def update(self, data: Data):
        """Create a streaming engine and absorb a first chunk."""
        return self.create().update(data)

    def digest(self, data: Data) -> bytes:
        """One-shot hash returning raw bytes."""
        return self.update(data).digest()

    def hex(self, data: Data) -> str:
        """One-shot hash returning lowercase hex."""
        return self.update(data).hex()

    __call__ = hex

    @staticmethod
    def equals(a: Data, b: Data) -> bool:
        """Constant-time comparison of two digests."""
        return constant_time_equal(a, b)

    def pbkdf2(self, password: Data, salt: Data, iterations: int, dk_len: int) -> bytes:
        """PBKDF2 with HMAC over this algorithm."""
        return derive_key(password, salt, iterations, dk_len, self.spec, self.backend)

    async def hash_async(self, data: Data) -> str:
        """Compute the hex digest in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.hex, data)

    def with_backend(self, backend: str) -> 'HashFunction':
        """Return the same algorithm bound to another backend."""
        return HashFunction(self.spec, backend)

    def __repr__(self) -> str:
        return f"<HashFunction {self.name} backend={self.backend}>"


sha1 = HashFunction('sha1')
sha224 = HashFunction('sha224')
sha256 = HashFunction('sha256')
sha384 = HashFunction('sha384')
sha512 = HashFunction('sha512')


def get_hash_function(algorithm: Union[AlgorithmLike, HashFunction],
                      backend: str = DEFAULT_BACKEND) -> HashFunction:
    """Resolve a name, member, descriptor or HashFunction to a HashFunction."""
    if isinstance(algorithm, HashFunction):
        return algorithm
    return HashFunction(algorithm, backend)


def salted_hash(hash_function: Union[AlgorithmLike, HashFunction],
                message: Data, salt: Data) -> str:
    """
    Hash salt || message and return the hex digest.

    Args:
        hash_function: HashFunction or algorithm name
        message: Message to hash
        salt: Salt prepended to the message

    Returns:
        Lowercase hex digest
    """
    function = get_hash_function(hash_function)
    return function.create().update(to_bytes(salt)).update(to_bytes(message)).hex()
