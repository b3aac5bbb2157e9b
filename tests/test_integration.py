"""
Integration tests for HashVault.

Tests:
- Audit logging across password and token workflows
- Top-level package API
- Command line interface
"""

import pytest

import hashvault
from hashvault import main as cli
from hashvault.auth import PasswordHasher, create_hmac_token, verify_hmac_token
from hashvault.core_crypto.backend import SOFTWARE, derive_key
from hashvault.integration import EventLogger, EventType, create_event_logger


class TestEventLogger:
    """Functional tests for the audit log."""

    def test_starts_with_system_event(self):
        """A new logger records SYSTEM_START."""
        logger = create_event_logger()
        events = logger.get_all_events()
        assert len(events) == 1
        assert events[0].event_type == EventType.SYSTEM_START
        assert logger.verify_integrity()

    def test_password_workflow_logged(self):
        """Hashing and verification produce typed events."""
        logger = EventLogger()
        hasher = PasswordHasher(event_logger=logger, iterations=20, backend=SOFTWARE)
        record = hasher.hash_password("pw", subject="alice")
        hasher.verify_password("pw", record, subject="alice")
        hasher.verify_password("nope", record, subject="alice")

        types = [e.event_type for e in logger.get_subject_events("alice")]
        assert types == [
            EventType.PASSWORD_HASHED,
            EventType.PASSWORD_VERIFIED,
            EventType.PASSWORD_FAILED,
        ]
        hashed = logger.get_events_by_type(EventType.PASSWORD_HASHED)[0]
        assert hashed.details == {'algo': 'sha256', 'iterations': 20}

    def test_token_workflow_logged(self):
        """Token issue and verification are logged."""
        logger = EventLogger()
        token = create_hmac_token("data", b"k", event_logger=logger, subject="svc")
        verify_hmac_token("data", token, b"k", event_logger=logger, subject="svc")
        verify_hmac_token("data", "00" * 32, b"k", event_logger=logger, subject="svc")

        types = [e.event_type for e in logger.get_subject_events("svc")]
        assert types == [EventType.TOKEN_ISSUED, EventType.TOKEN_VERIFIED, EventType.TOKEN_FAILED]

    def test_key_derivation_logged(self):
        """Key derivation events record parameters only."""
        logger = EventLogger()
        event = logger.log_key_derived("backup", "sha512", 10000, 64)
        assert event.details == {'algo': 'PBKDF2-HMAC-SHA512', 'iterations': 10000, 'length': 64}

    def test_derive_key_logged(self):
        """derive_key records a KEY_DERIVED event when given a logger."""
        logger = EventLogger()
        key = derive_key("p", "s", 10, 32, 'sha256', SOFTWARE, event_logger=logger, subject="backup")
        assert len(key) == 32
        events = logger.get_events_by_type(EventType.KEY_DERIVED)
        assert len(events) == 1
        assert events[0].details == {'algo': 'PBKDF2-HMAC-SHA256', 'iterations': 10, 'length': 32}
        assert logger.get_subject_events("backup") == events

        assert derive_key("p", "s", 10, 32, 'sha256', SOFTWARE) == key
        assert len(logger.get_events_by_type(EventType.KEY_DERIVED)) == 1

    def test_anonymous_subject(self):
        """Events without a subject are marked anonymous."""
        logger = EventLogger()
        event = logger.log_token_issued(None, "sha256")
        assert event.subject_hash == "anonymous"

    def test_returned_event_matches_stored(self):
        """The event returned by a log call carries the stored short subject hash."""
        logger = EventLogger()
        event = logger.log_token_issued("svc", "sha256")
        stored = logger.get_subject_events("svc")[0]
        assert event.subject_hash == stored.subject_hash
        assert len(event.subject_hash) == 16
        assert event == logger.get_recent_events(1)[0]

    def test_callbacks(self):
        """Callbacks receive events and failing callbacks do not break logging."""
        logger = EventLogger()
        received = []

        def broken(event):
            raise RuntimeError("boom")

        logger.add_callback(broken)
        logger.add_callback(received.append)
        logger.log_token_issued("svc", "sha256")
        assert [e.event_type for e in received] == [EventType.TOKEN_ISSUED]

        logger.remove_callback(received.append)
        logger.log_token_issued("svc", "sha256")
        assert len(received) == 1
        assert logger.verify_integrity()

    def test_export_import_roundtrip(self):
        """An exported log imports with the same chain head."""
        logger = EventLogger()
        logger.log_password_verify("alice", True)
        logger.log_key_derived("alice", "sha256", 1000, 32)

        restored = EventLogger.import_log(logger.export_log())
        assert len(restored) == len(logger)
        assert restored.head_hash == logger.head_hash
        assert [e.event_type for e in restored.get_all_events()] == \
            [e.event_type for e in logger.get_all_events()]

    def test_recent_events(self):
        """get_recent_events returns the tail of the log."""
        logger = EventLogger()
        for _ in range(5):
            logger.log_token_issued("svc", "sha256")
        assert len(logger.get_recent_events(3)) == 3
        assert len(logger.get_recent_events(100)) == 6

    def test_print_audit_log(self, capsys):
        """The readable dump lists every event."""
        logger = EventLogger()
        logger.log_password_verify("alice", True)
        logger.print_audit_log()
        out = capsys.readouterr().out
        assert "SECURITY AUDIT LOG" in out
        assert "password_verified" in out
        assert "Total events: 2" in out


class TestPackageAPI:
    """The top-level hashvault namespace."""

    def test_function_objects(self):
        """sha1 ... sha512 are exported with the streaming API."""
        assert hashvault.sha256("abc") == \
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        assert hashvault.sha1.create().update("a").update("bc").hex() == \
            "a9993e364706816aba3e25717850c26c9cd0d89d"
        assert hashvault.sha512.digest("abc") == hashvault.new('sha512', "abc").digest()

    def test_properties(self):
        """Function objects expose sizes and name."""
        assert hashvault.sha384.name == 'sha384'
        assert hashvault.sha384.digest_size == 48
        assert hashvault.sha384.block_size == 128
        assert hashvault.sha224.hmac.digest_size == 28

    def test_equals(self):
        """Constant-time comparison is exposed on function objects."""
        assert hashvault.sha256.equals(hashvault.sha256.digest("a"), hashvault.sha256.digest("a"))
        assert not hashvault.sha256.equals(hashvault.sha256.digest("a"), hashvault.sha256.digest("b"))

    def test_pbkdf2(self):
        """pbkdf2 is available on function objects and as a function."""
        assert hashvault.sha1.pbkdf2("password", "salt", 1, 20) == \
            hashvault.pbkdf2("password", "salt", 1, 20, 'sha1')

    def test_selection(self):
        """Dynamic selection goes through get_hash_function."""
        assert hashvault.get_hash_function('SHA-224')("abc") == hashvault.sha224("abc")
        with pytest.raises(hashvault.UnsupportedAlgorithmError):
            hashvault.get_hash_function('md5')

    def test_version(self):
        """Package exposes a version string."""
        assert isinstance(hashvault.__version__, str)


class TestCommandLine:
    """Command line interface."""

    def test_hash_text(self, capsys):
        """hash prints the hex digest."""
        assert cli.main(["hash", "sha256", "abc"]) == 0
        assert capsys.readouterr().out.strip() == \
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"

    def test_hash_file(self, tmp_path, capsys):
        """hash --file streams the file contents."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"abc" * 50000)
        assert cli.main(["hash", "sha1", "--file", str(path)]) == 0
        assert capsys.readouterr().out.strip() == hashvault.sha1(b"abc" * 50000)

    def test_missing_file(self, tmp_path, capsys):
        """A missing file is a usage error."""
        assert cli.main(["hash", "sha1", "--file", str(tmp_path / "nope")]) == 2
        assert "Error" in capsys.readouterr().err

    def test_hash_needs_input(self, capsys):
        """hash without text or --file is a usage error."""
        assert cli.main(["hash", "sha256"]) == 2

    def test_hash_text_and_file_conflict(self, tmp_path, capsys):
        """Passing both text and --file is a usage error."""
        path = tmp_path / "data.bin"
        path.write_bytes(b"xyz")
        assert cli.main(["hash", "sha256", "abc", "--file", str(path)]) == 2
        captured = capsys.readouterr()
        assert "not both" in captured.err
        assert captured.out == ""

    def test_hmac(self, capsys):
        """hmac prints the hex tag."""
        assert cli.main(["hmac", "sha256", "Jefe", "what do ya want for nothing?"]) == 0
        assert capsys.readouterr().out.strip() == \
            "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"

    def test_pbkdf2(self, capsys):
        """pbkdf2 prints the derived key."""
        assert cli.main(["pbkdf2", "password", "salt", "2", "20", "--algorithm", "sha1"]) == 0
        assert capsys.readouterr().out.strip() == "ea6c014dc72d6f8ccd1ed92ace1d41f0d8de8957"

    def test_pbkdf2_invalid_parameters(self, capsys):
        """Zero iterations is reported, not raised."""
        assert cli.main(["pbkdf2", "password", "salt", "0", "20"]) == 2
        assert "iterations" in capsys.readouterr().err

    def test_unknown_algorithm(self, capsys):
        """Unknown algorithms exit with status 2."""
        assert cli.main(["hash", "md5", "abc"]) == 2
        assert "md5" in capsys.readouterr().err

    def test_native_backend(self, capsys):
        """--backend native gives the same output."""
        assert cli.main(["--backend", "native", "hash", "sha512", "abc"]) == 0
        assert capsys.readouterr().out.strip() == hashvault.sha512("abc")

    def test_selftest(self, capsys):
        """All published vectors pass."""
        assert cli.main(["selftest"]) == 0
        out = capsys.readouterr().out
        assert "FAIL" not in out
        assert "All tests passed!" in out
