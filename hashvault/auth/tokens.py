"""
HMAC Token Module

Implements message authentication tokens with:
- HMAC over any supported hash (SHA-256 by default)
- Constant-time verification
- Optional audit logging of issue and verification

Security considerations:
- Compare tags with constant-time comparison only
- Secret keys should come from a CSPRNG (see generate_secret_key)
- Never log tokens or keys
"""

import secrets
from typing import Optional

from ..core_crypto.algorithms import AlgorithmLike, get_algorithm
from ..core_crypto.compare import constant_time_equal
from ..core_crypto.encoding import Data
from ..core_crypto.mac import hmac_hex


# Token configuration
TOKEN_ALGORITHM = 'sha256'
SECRET_KEY_BYTES = 32  # 256-bit keys


def generate_secret_key(length: int = SECRET_KEY_BYTES) -> bytes:
    """Generate a random HMAC secret key."""
    return secrets.token_bytes(length)


def secure_compare(a: Data, b: Data) -> bool:
    """
    Constant-time comparison of two strings or byte sequences.

    Args:
        a: First value
        b: Second value

    Returns:
        True if equal, False otherwise
    """
    return constant_time_equal(a, b)


def create_hmac_token(
    data: Data,
    secret_key: Data,
    algorithm: AlgorithmLike = TOKEN_ALGORITHM,
    event_logger=None,
    subject: Optional[str] = None
) -> str:
    """
    Create an HMAC token for data integrity.

    Args:
        data: Data to authenticate
        secret_key: Secret key
        algorithm: Hash underlying the HMAC
        event_logger: Optional EventLogger receiving a TOKEN_ISSUED event
        subject: Optional subject recorded (hashed) in the audit log

    Returns:
        HMAC tag as lowercase hex
    """
    spec = get_algorithm(algorithm)
    token = hmac_hex(secret_key, data, spec)
    if event_logger is not None:
        event_logger.log_token_issued(subject, spec.name)
    return token


def verify_hmac_token(
    data: Data,
    token: str,
    secret_key: Data,
    algorithm: AlgorithmLike = TOKEN_ALGORITHM,
    event_logger=None,
    subject: Optional[str] = None
) -> bool:
    """
    Verify an HMAC token.

    Args:
        data: Original data
        token: Token to verify (hex, case-insensitive)
        secret_key: Secret key
        algorithm: Hash underlying the HMAC
        event_logger: Optional EventLogger receiving a verification event
        subject: Optional subject recorded (hashed) in the audit log

    Returns:
        True if valid, False otherwise
    """
    expected = hmac_hex(secret_key, data, get_algorithm(algorithm))
    valid = isinstance(token, str) and constant_time_equal(expected, token.lower())
    if event_logger is not None:
        event_logger.log_token_verify(subject, valid)
    return valid
