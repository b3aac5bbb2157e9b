"""
Password Hashing Module

Implements salted password storage on top of PBKDF2-HMAC.

Features:
- PBKDF2-HMAC password hashing with a per-password random salt
- Self-describing record format (algorithm, iterations, salt, hash)
- Constant-time verification
- Rehash detection when the configured parameters change

Record format:
    $pbkdf2-<algorithm>$i=<iterations>$<salt, base64>$<hash, base64>

Security considerations:
- Never store plaintext passwords
- Use constant-time comparison for hash verification
- Salt is generated with the secrets module
"""

import base64
import binascii
import secrets
from typing import Dict, Optional, Tuple

from ..core_crypto.algorithms import UnsupportedAlgorithmError, get_algorithm
from ..core_crypto.backend import NATIVE, derive_key, engine_factory
from ..core_crypto.compare import constant_time_equal
from ..core_crypto.encoding import Data


# PBKDF2 configuration
# - algorithm: hash underlying HMAC
# - iterations: PBKDF2 iteration count
# - salt_len: length of the random salt in bytes
# - hash_len: length of the stored derived key in bytes
# - backend: engine backend used for derivation
PBKDF2_CONFIG = {
    'algorithm': 'sha256',
    'iterations': 100_000,   # Minimum for PBKDF2-HMAC-SHA256
    'salt_len': 16,          # 128-bit salt
    'hash_len': 32,          # 256-bit hash
    'backend': NATIVE,
}

RECORD_PREFIX = 'pbkdf2-'


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def _b64decode(text: str) -> bytes:
    return base64.b64decode(text.encode('ascii'), validate=True)


def parse_password_record(record: str) -> Tuple[str, int, bytes, bytes]:
    """
    Split a password record into its fields.

    Args:
        record: Record produced by PasswordHasher.hash_password

    Returns:
        (algorithm, iterations, salt, derived_key)

    Raises:
        ValueError: If the record is malformed or names an unsupported algorithm
    """
    parts = record.split('$')
    if len(parts) != 5 or parts[0] != '' or not parts[1].startswith(RECORD_PREFIX):
        raise ValueError("Invalid password record format")

    algorithm = get_algorithm(parts[1][len(RECORD_PREFIX):]).name
    if not parts[2].startswith('i='):
        raise ValueError("Invalid password record format")
    iterations = int(parts[2][2:])
    if iterations < 1:
        raise ValueError("Invalid iteration count")

    try:
        salt = _b64decode(parts[3])
        derived = _b64decode(parts[4])
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid password record encoding: {e}") from e
    if not derived:
        raise ValueError("Invalid password record: empty hash")

    return algorithm, iterations, salt, derived


class PasswordHasher:
    """
    Secure password hasher using PBKDF2-HMAC.

    Example:
        >>> hasher = PasswordHasher(iterations=1000)
        >>> record = hasher.hash_password("SecurePass123!")
        >>> hasher.verify_password("SecurePass123!", record)
        True
    """

    def __init__(self, event_logger=None, **kwargs):
        """
        Initialize the password hasher.

        Args:
            event_logger: Optional EventLogger receiving password events
            **kwargs: Override default PBKDF2_CONFIG parameters

        Raises:
            UnsupportedAlgorithmError: If the configured algorithm is unknown
            ValueError: If a numeric parameter is not positive
                or the backend name is unknown
        """
        config = PBKDF2_CONFIG.copy()
        config.update(kwargs)

        config['algorithm'] = get_algorithm(config['algorithm']).name
        engine_factory(config['backend'])
        for key in ('iterations', 'salt_len', 'hash_len'):
            if config[key] < 1:
                raise ValueError(f"{key} must be at least 1")

        self._config = config
        self._event_logger = event_logger

    @property
    def config(self) -> Dict:
        """Copy of the active configuration."""
        return self._config.copy()

    def _derive(self, password: Data, salt: bytes, iterations: int,
                length: int, algorithm: str) -> bytes:
        return derive_key(password, salt, iterations, length, algorithm,
                          self._config['backend'])

    def hash_password(self, password: Data, subject: Optional[str] = None) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            password: Plaintext password to hash
            subject: Optional account name for the audit log

        Returns:
            Password record string (includes algorithm, iterations and salt)

        Raises:
            TypeError: If password is neither text nor byte-like
        """
        config = self._config
        salt = generate_secure_salt(config['salt_len'])
        derived = self._derive(password, salt, config['iterations'],
                               config['hash_len'], config['algorithm'])

        if self._event_logger is not None:
            self._event_logger.log_password_hashed(
                subject, config['algorithm'], config['iterations']
            )

        return (
            f"${RECORD_PREFIX}{config['algorithm']}"
            f"$i={config['iterations']}"
            f"${_b64encode(salt)}"
            f"${_b64encode(derived)}"
        )

    def verify_password(self, password: Data, record: str,
                        subject: Optional[str] = None) -> bool:
        """
        Verify a password against a stored record.

        Uses constant-time comparison to prevent timing attacks.

        Args:
            password: Plaintext password to verify
            record: Stored password record
            subject: Optional account name for the audit log

        Returns:
            True if password matches, False otherwise (including for
            malformed records)
        """
        try:
            algorithm, iterations, salt, expected = parse_password_record(record)
        except (ValueError, UnsupportedAlgorithmError):
            success = False
        else:
            derived = self._derive(password, salt, iterations, len(expected), algorithm)
            success = constant_time_equal(derived, expected)

        if self._event_logger is not None:
            self._event_logger.log_password_verify(subject, success)
        return success

    def needs_rehash(self, record: str) -> bool:
        """
        Check if a record should be regenerated with the current parameters.

        Args:
            record: Existing password record

        Returns:
            True if the algorithm, iteration count, salt length or hash
            length differ from the configuration, or the record is malformed
        """
        try:
            algorithm, iterations, salt, derived = parse_password_record(record)
        except (ValueError, UnsupportedAlgorithmError):
            return True
        config = self._config
        return (
            algorithm != config['algorithm']
            or iterations != config['iterations']
            or len(salt) != config['salt_len']
            or len(derived) != config['hash_len']
        )


def generate_secure_salt(length: int = 16) -> bytes:
    """
    Generate a cryptographically secure random salt.

    Args:
        length: Salt length in bytes (default 16 = 128 bits)

    Returns:
        Random bytes suitable for use as salt
    """
    return secrets.token_bytes(length)


# Module-level hasher instance
_default_hasher = PasswordHasher()


def hash_password(password: Data) -> str:
    """Convenience function to hash a password."""
    return _default_hasher.hash_password(password)


def verify_password(password: Data, record: str) -> bool:
    """Convenience function to verify a password."""
    return _default_hasher.verify_password(password, record)
