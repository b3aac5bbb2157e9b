# HashVault
"""
From-scratch SHA-1 / SHA-2 hashing with HMAC and PBKDF2.

    >>> from hashvault import sha256
    >>> sha256("abc")[:16]
    'ba7816bf8f01cfea'
    >>> sha256.hmac("key", "message") == sha256.hmac.create("key").update("message").hex()
    True
    >>> sha256.pbkdf2("password", "salt", 1, 32).hex()[:16]
    '120fb6cffcf8b32c'

Subpackages:
- core_crypto: hash engines, HMAC, PBKDF2, comparison, backends
- auth: password records and HMAC tokens
- integration: hash-chained audit log
"""

__version__ = "1.0.0"

from .core_crypto.algorithms import (
    Algorithm,
    UnsupportedAlgorithmError,
    algorithm_names,
    get_algorithm,
    new,
)
from .core_crypto.compare import constant_time_equal
from .core_crypto.engine import HashEngine
from .core_crypto.kdf import pbkdf2
from .core_crypto.mac import HMAC
from .core_crypto.registry import (
    HashFunction,
    get_hash_function,
    salted_hash,
    sha1,
    sha224,
    sha256,
    sha384,
    sha512,
)

__all__ = [
    'Algorithm',
    'HashEngine',
    'HashFunction',
    'HMAC',
    'UnsupportedAlgorithmError',
    'algorithm_names',
    'constant_time_equal',
    'get_algorithm',
    'get_hash_function',
    'new',
    'pbkdf2',
    'salted_hash',
    'sha1',
    'sha224',
    'sha256',
    'sha384',
    'sha512',
]
