"""
Algorithm Selection

Maps algorithm names to their static descriptors. Every entry point that
takes an algorithm argument (HMAC, PBKDF2, password hashing, tokens, the CLI)
resolves it through get_algorithm().

Accepted names are case-insensitive, with or without a dash or underscore:
'sha256', 'SHA-256' and 'Sha_256' all select SHA-256.
"""

from enum import Enum
from typing import List, Optional, Union

from .encoding import Data
from .engine import AlgorithmSpec, HashEngine
from .sha1 import SHA1_SPEC
from .sha256 import SHA224_SPEC, SHA256_SPEC
from .sha512 import SHA384_SPEC, SHA512_SPEC


class UnsupportedAlgorithmError(ValueError):
    """Raised when an algorithm name does not match any supported hash."""


class Algorithm(Enum):
    """Supported hash algorithms; each value is the algorithm descriptor."""

    SHA1 = SHA1_SPEC
    SHA224 = SHA224_SPEC
    SHA256 = SHA256_SPEC
    SHA384 = SHA384_SPEC
    SHA512 = SHA512_SPEC

    @property
    def spec(self) -> AlgorithmSpec:
        return self.value


AlgorithmLike = Union[str, Algorithm, AlgorithmSpec]


def _normalize_name(name: str) -> str:
    return name.strip().lower().replace('-', '').replace('_', '')


def get_algorithm(algorithm: AlgorithmLike) -> AlgorithmSpec:
    """
    Resolve an algorithm name or member to its descriptor.

    Args:
        algorithm: Name ('sha256', 'SHA-256', ...), Algorithm member,
            or an AlgorithmSpec (returned unchanged)

    Returns:
        The algorithm descriptor

    Raises:
        UnsupportedAlgorithmError: If the algorithm is not supported
    """
    if isinstance(algorithm, AlgorithmSpec):
        return algorithm
    if isinstance(algorithm, Algorithm):
        return algorithm.value
    if isinstance(algorithm, str):
        wanted = _normalize_name(algorithm)
        for member in Algorithm:
            if member.value.name == wanted:
                return member.value
    raise UnsupportedAlgorithmError(f"Unsupported hash algorithm: {algorithm!r}")


def algorithm_names() -> List[str]:
    """Canonical names of all supported algorithms."""
    return [member.value.name for member in Algorithm]


def new(algorithm: AlgorithmLike, data: Optional[Data] = None) -> HashEngine:
    """
    Create a streaming engine for a dynamically selected algorithm.

    Args:
        algorithm: Algorithm name or member
        data: Optional first chunk of input

    Returns:
        A fresh HashEngine

    Raises:
        UnsupportedAlgorithmError: If the algorithm is not supported
    """
    return HashEngine(get_algorithm(algorithm), data)
