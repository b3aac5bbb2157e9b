# Core Cryptography Module
"""
Core hash implementations including:
- SHA-1, SHA-224, SHA-256 (32-bit word engines)
- SHA-384, SHA-512 (64-bit lane engines)
- HMAC over any of them
- PBKDF2-HMAC key derivation
- Constant-time comparison

The sha1 ... sha512 function objects are imported from registry
(or from the top-level hashvault package).
"""

from .algorithms import (
    Algorithm,
    UnsupportedAlgorithmError,
    algorithm_names,
    get_algorithm,
    new,
)
from .compare import constant_time_equal
from .encoding import to_bytes
from .engine import AlgorithmSpec, HashEngine
from .kdf import pbkdf2
from .mac import HMAC, hmac_digest, hmac_hex
from .registry import (
    HashFunction,
    HmacFunction,
    get_hash_function,
    salted_hash,
)

__all__ = [
    'Algorithm',
    'AlgorithmSpec',
    'HashEngine',
    'HashFunction',
    'HmacFunction',
    'HMAC',
    'UnsupportedAlgorithmError',
    'algorithm_names',
    'constant_time_equal',
    'get_algorithm',
    'get_hash_function',
    'hmac_digest',
    'hmac_hex',
    'new',
    'pbkdf2',
    'salted_hash',
    'to_bytes',
]
