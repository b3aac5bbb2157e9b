"""
Security tests for HashVault.

Tests specifically for security-related scenarios:
- Constant-time comparison
- Password records (tampering, malformed input)
- HMAC tokens (tampering, wrong keys)
- Audit log integrity
"""

import asyncio
import json

import pytest

from hashvault.core_crypto.compare import constant_time_equal
from hashvault.core_crypto.registry import sha256, sha512, salted_hash
from hashvault.core_crypto.algorithms import UnsupportedAlgorithmError
from hashvault.core_crypto.backend import SOFTWARE
from hashvault.auth.password import (
    PasswordHasher, PBKDF2_CONFIG, generate_secure_salt, parse_password_record,
    hash_password, verify_password
)
from hashvault.auth.tokens import (
    create_hmac_token, verify_hmac_token, secure_compare, generate_secret_key
)
from hashvault.integration.event_logger import EventLogger, EventType, get_subject_hash


class TestConstantTimeCompare:
    """Security tests for the comparator."""

    def test_reflexive(self):
        """A value equals itself."""
        digest = sha256.digest("x")
        assert constant_time_equal(digest, digest)
        assert constant_time_equal(b"", b"")

    def test_last_byte_difference(self):
        """A difference in the final byte is detected."""
        a = bytes(32)
        b = bytes(31) + b"\x01"
        assert not constant_time_equal(a, b)

    def test_first_byte_difference(self):
        """A difference in the first byte is detected."""
        assert not constant_time_equal(b"\x01" + bytes(31), bytes(32))

    def test_length_mismatch(self):
        """Different lengths are never equal."""
        assert not constant_time_equal(b"abc", b"abcd")
        assert not constant_time_equal(b"", b"\x00")

    def test_text_and_bytes(self):
        """Text is compared by its UTF-8 encoding."""
        assert constant_time_equal("é", b"\xc3\xa9")

    def test_rejects_bad_types(self):
        """Non-text, non-bytes values raise TypeError."""
        with pytest.raises(TypeError):
            constant_time_equal(1, 1)

    def test_secure_compare(self):
        """secure_compare delegates to the comparator."""
        assert secure_compare("hello", "hello")
        assert not secure_compare("hello", "world")


class TestPasswordSecurity:
    """Security tests for password records."""

    @pytest.fixture
    def hasher(self):
        return PasswordHasher(iterations=1000, backend=SOFTWARE)

    def test_roundtrip(self, hasher):
        """Correct password verifies."""
        record = hasher.hash_password("SecurePass123!")
        assert hasher.verify_password("SecurePass123!", record)

    def test_wrong_password(self, hasher):
        """Wrong password is rejected."""
        record = hasher.hash_password("SecurePass123!")
        assert not hasher.verify_password("SecurePass124!", record)
        assert not hasher.verify_password("", record)

    def test_record_format(self, hasher):
        """Record carries algorithm, iterations, salt and hash."""
        record = hasher.hash_password("pw")
        assert record.startswith("$pbkdf2-sha256$i=1000$")
        algorithm, iterations, salt, derived = parse_password_record(record)
        assert algorithm == 'sha256'
        assert iterations == 1000
        assert len(salt) == PBKDF2_CONFIG['salt_len']
        assert len(derived) == PBKDF2_CONFIG['hash_len']

    def test_unique_salts(self, hasher):
        """Same password hashed twice gives different records."""
        assert hasher.hash_password("same") != hasher.hash_password("same")

    def test_tampered_hash_rejected(self, hasher):
        """Changing the stored hash breaks verification."""
        record = hasher.hash_password("pw")
        prefix, encoded = record.rsplit('$', 1)
        flipped = 'A' if encoded[0] != 'A' else 'B'
        assert not hasher.verify_password("pw", f"{prefix}${flipped}{encoded[1:]}")

    def test_tampered_iterations_rejected(self, hasher):
        """Lowering the iteration count breaks verification."""
        record = hasher.hash_password("pw")
        assert not hasher.verify_password("pw", record.replace("$i=1000$", "$i=999$"))

    @pytest.mark.parametrize("record", [
        "",
        "plaintext",
        "$pbkdf2-sha256$i=1000$only-three",
        "$pbkdf2-md5$i=1000$c2FsdA==$aGFzaA==",
        "$pbkdf2-sha256$i=0$c2FsdA==$aGFzaA==",
        "$pbkdf2-sha256$i=abc$c2FsdA==$aGFzaA==",
        "$pbkdf2-sha256$i=10$not base64!$aGFzaA==",
        "$argon2id$v=19$m=65536,t=3,p=4$c2FsdA$aGFzaA",
    ])
    def test_malformed_records_rejected(self, hasher, record):
        """Malformed records verify as False instead of raising."""
        assert not hasher.verify_password("pw", record)
        assert hasher.needs_rehash(record)

    def test_other_algorithm(self):
        """Records made with SHA-512 verify with any hasher."""
        record = PasswordHasher(algorithm='SHA-512', iterations=50, backend=SOFTWARE).hash_password("pw")
        assert record.startswith("$pbkdf2-sha512$i=50$")
        assert PasswordHasher(iterations=10, backend=SOFTWARE).verify_password("pw", record)

    def test_needs_rehash(self, hasher):
        """Parameter changes trigger a rehash."""
        record = hasher.hash_password("pw")
        assert not hasher.needs_rehash(record)
        assert PasswordHasher(iterations=2000, backend=SOFTWARE).needs_rehash(record)
        assert PasswordHasher(iterations=1000, algorithm='sha512').needs_rehash(record)

    def test_invalid_config(self):
        """Bad configuration is rejected up front."""
        with pytest.raises(UnsupportedAlgorithmError):
            PasswordHasher(algorithm='md5')
        with pytest.raises(ValueError):
            PasswordHasher(iterations=0)
        with pytest.raises(ValueError):
            PasswordHasher(backend="bogus")

    def test_rejects_bad_password_type(self, hasher):
        """Non-text, non-bytes passwords raise TypeError."""
        with pytest.raises(TypeError):
            hasher.hash_password(12345)

    def test_module_level_functions(self):
        """Default hasher uses the full iteration count."""
        record = hash_password("DefaultPass1!")
        assert f"$i={PBKDF2_CONFIG['iterations']}$" in record
        assert verify_password("DefaultPass1!", record)
        assert not verify_password("DefaultPass2!", record)

    def test_salt_generation(self):
        """Salts have the requested length and differ."""
        assert len(generate_secure_salt()) == 16
        assert len(generate_secure_salt(32)) == 32
        assert generate_secure_salt() != generate_secure_salt()


class TestTokenSecurity:
    """Security tests for HMAC tokens."""

    def test_valid_token(self):
        """A fresh token verifies."""
        key = generate_secret_key()
        token = create_hmac_token("user=alice;role=admin", key)
        assert len(token) == 64
        assert verify_hmac_token("user=alice;role=admin", token, key)

    def test_tampered_data(self):
        """Changed data fails verification."""
        key = generate_secret_key()
        token = create_hmac_token("amount=10", key)
        assert not verify_hmac_token("amount=1000", token, key)

    def test_wrong_key(self):
        """A different key fails verification."""
        token = create_hmac_token("data", b"key-one")
        assert not verify_hmac_token("data", token, b"key-two")

    def test_truncated_token(self):
        """A truncated tag fails verification."""
        token = create_hmac_token("data", b"key")
        assert not verify_hmac_token("data", token[:-2], b"key")

    def test_uppercase_hex_accepted(self):
        """Hex case does not matter."""
        token = create_hmac_token("data", b"key")
        assert verify_hmac_token("data", token.upper(), b"key")

    def test_non_string_token(self):
        """A non-string token is rejected."""
        assert not verify_hmac_token("data", None, b"key")

    def test_algorithm_choice(self):
        """Tokens can use other hashes, and algorithms must match."""
        token = create_hmac_token("data", b"key", algorithm='sha512')
        assert len(token) == 128
        assert verify_hmac_token("data", token, b"key", algorithm='sha512')
        assert not verify_hmac_token("data", token, b"key")

    def test_unsupported_algorithm(self):
        """Unknown algorithms raise."""
        with pytest.raises(UnsupportedAlgorithmError):
            create_hmac_token("data", b"key", algorithm='md5')


class TestAuditLogSecurity:
    """Security tests for the hash-chained audit log."""

    def test_subjects_are_hashed(self):
        """Plaintext subjects never appear in the log."""
        logger = EventLogger()
        logger.log_password_verify("alice@example.com", False)
        exported = logger.export_log()
        assert "alice@example.com" not in exported
        assert get_subject_hash("alice@example.com")[:16] in exported

    def test_secrets_not_logged(self):
        """Passwords and keys never reach the log."""
        logger = EventLogger()
        hasher = PasswordHasher(event_logger=logger, iterations=10, backend=SOFTWARE)
        record = hasher.hash_password("TopSecret!", subject="bob")
        create_hmac_token("payload", b"sk-very-secret", event_logger=logger, subject="bob")
        exported = logger.export_log()
        assert "TopSecret!" not in exported
        assert "sk-very-secret" not in exported
        assert record.rsplit('$', 1)[1] not in exported

    def test_tampered_record_detected(self):
        """Editing an entry breaks the chain."""
        logger = EventLogger()
        logger.log_password_verify("alice", False)
        data = json.loads(logger.export_log())
        data['entries'][1]['record'] = data['entries'][1]['record'].replace(
            EventType.PASSWORD_FAILED.value, EventType.PASSWORD_VERIFIED.value
        )
        with pytest.raises(ValueError):
            EventLogger.import_log(json.dumps(data))

    def test_dropped_entry_detected(self):
        """Removing an entry breaks the chain."""
        logger = EventLogger()
        logger.log_token_verify("alice", False)
        logger.log_token_verify("alice", True)
        data = json.loads(logger.export_log())
        del data['entries'][1]
        with pytest.raises(ValueError):
            EventLogger.import_log(json.dumps(data))

    def test_malformed_log_rejected(self):
        """Garbage input is rejected."""
        with pytest.raises(ValueError):
            EventLogger.import_log("not json")
        with pytest.raises(ValueError):
            EventLogger.import_log(json.dumps({'entries': [{'index': 0}]}))


class TestAsync:
    """Async entry points run in the default executor."""

    def test_hash_async(self):
        """hash_async matches the synchronous digest."""
        result = asyncio.run(sha256.hash_async("abc"))
        assert result == sha256("abc")

    def test_hmac_async(self):
        """hmac.hash_async matches the synchronous tag."""
        result = asyncio.run(sha512.hmac.hash_async("key", "message"))
        assert result == sha512.hmac("key", "message")

    def test_concurrent(self):
        """Several hashes can run concurrently."""
        async def run_all():
            return await asyncio.gather(*(sha256.hash_async(str(i)) for i in range(5)))
        assert asyncio.run(run_all()) == [sha256(str(i)) for i in range(5)]


class TestSaltedHash:
    """Salted hashing helper."""

    def test_salt_prepended(self):
        """salted_hash(h, m, s) is h(s || m)."""
        assert salted_hash(sha256, "message", "salt") == sha256("saltmessage")
        assert salted_hash('sha512', b"m", b"s") == sha512(b"sm")

    def test_salt_changes_output(self):
        """Different salts give different digests."""
        assert salted_hash(sha256, "m", "s1") != salted_hash(sha256, "m", "s2")
