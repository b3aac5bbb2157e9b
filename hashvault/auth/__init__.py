# Authentication Module
"""
Authentication helpers built on the hash core:
- Password records (PBKDF2-HMAC) - password.py
- HMAC tokens - tokens.py

Security features:
- Random per-password salts
- Constant-time comparison for hash verification
- Optional tamper-evident audit logging
"""

from .password import (
    PBKDF2_CONFIG,
    PasswordHasher,
    hash_password,
    verify_password,
    generate_secure_salt,
    parse_password_record,
)

from .tokens import (
    TOKEN_ALGORITHM,
    secure_compare,
    generate_secret_key,
    create_hmac_token,
    verify_hmac_token,
)

__all__ = [
    # Passwords
    'PBKDF2_CONFIG',
    'PasswordHasher',
    'hash_password',
    'verify_password',
    'generate_secure_salt',
    'parse_password_record',
    # Tokens
    'TOKEN_ALGORITHM',
    'secure_compare',
    'generate_secret_key',
    'create_hmac_token',
    'verify_hmac_token',
]
