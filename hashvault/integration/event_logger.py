"""
Event Logger Module

Tamper-evident audit trail for the security-relevant operations of
hashvault (password hashing and verification, token issue and
verification, key derivation).

Features:
- Typed events serialized as compact JSON records
- Privacy-preserving subject hashes (SHA-256)
- Hash chain: every entry commits to the previous one, so editing,
  dropping or reordering entries is detected by verify_integrity()
- Subscriber callbacks
- JSON export / import

Author: HashVault Project
"""

import time
import json
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any, Callable

# Use our custom SHA-256 for privacy hashing and chaining
from ..core_crypto.sha256 import sha256_hex


# ============================================================================
# Constants
# ============================================================================

EVENT_VERSION = "1.0"
GENESIS_HASH = "0" * 64
NODE_NAME = "hashvault"


# ============================================================================
# Privacy Functions
# ============================================================================

def get_subject_hash(subject: str) -> str:
    """
    Compute privacy-preserving hash of a subject (username, client id).

    Uses SHA-256 so subjects are never stored in plaintext in the log,
    while still allowing correlation of events for the same subject.

    Args:
        subject: The plaintext subject

    Returns:
        Hex-encoded SHA-256 hash of the subject
    """
    return sha256_hex(subject.encode())


def get_subject_hash_short(subject: str) -> str:
    """First 16 hex characters of the subject hash, for display."""
    return get_subject_hash(subject)[:16]


# ============================================================================
# Event Types
# ============================================================================

class EventType(Enum):
    """Types of security events that can be logged."""

    # Password events
    PASSWORD_HASHED = "password_hashed"
    PASSWORD_VERIFIED = "password_verified"
    PASSWORD_FAILED = "password_failed"

    # Token events
    TOKEN_ISSUED = "token_issued"
    TOKEN_VERIFIED = "token_verified"
    TOKEN_FAILED = "token_failed"

    # Key derivation
    KEY_DERIVED = "key_derived"

    # System events
    SYSTEM_START = "system_start"


# ============================================================================
# Event Structure
# ============================================================================

@dataclass
class SecurityEvent:
    """
    Represents a security event to be logged.

    All subject-identifying information is hashed for privacy.
    """
    event_type: EventType
    subject_hash: str  # Short SHA-256 hash of the subject (16 hex chars)
    timestamp: int     # Unix timestamp
    details: Dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> str:
        """Serialize the event as a compact JSON record."""
        return json.dumps({
            'version': EVENT_VERSION,
            'type': self.event_type.value,
            'subject': self.subject_hash[:16],  # Short hash for readability
            'time': self.timestamp,
            'iso_time': datetime.fromtimestamp(self.timestamp).isoformat(),
            'details': self.details,
        }, separators=(',', ':'), sort_keys=True)

    @classmethod
    def from_record(cls, record: str) -> 'SecurityEvent':
        """Parse an event from its JSON record."""
        data = json.loads(record)
        return cls(
            event_type=EventType(data['type']),
            subject_hash=data['subject'],
            timestamp=data['time'],
            details=data.get('details', {}),
        )

    def __str__(self) -> str:
        dt = datetime.fromtimestamp(self.timestamp)
        return (
            f"[{dt.strftime('%Y-%m-%d %H:%M:%S')}] "
            f"{self.event_type.value} | "
            f"subject:{self.subject_hash[:8]}..."
        )


@dataclass
class LogEntry:
    """One link of the audit chain."""
    index: int
    record: str
    previous_hash: str
    entry_hash: str

    @staticmethod
    def compute_hash(index: int, record: str, previous_hash: str) -> str:
        """Hash committing to the position, the record and the previous link."""
        return sha256_hex(f"{index}|{previous_hash}|{record}".encode())

    def is_valid(self) -> bool:
        return self.entry_hash == self.compute_hash(self.index, self.record, self.previous_hash)


# ============================================================================
# Event Logger
# ============================================================================

class EventLogger:
    """
    Hash-chained event logger for a security audit trail.

    Every event is appended as a LogEntry whose hash covers the previous
    entry's hash, providing a tamper-evident log of all security-relevant
    actions.
    """

    def __init__(self, entries: Optional[List[LogEntry]] = None, log_start: bool = True):
        """
        Initialize the event logger.

        Args:
            entries: Optional existing chain (used by import_log)
            log_start: If True, record a SYSTEM_START event
        """
        self._entries: List[LogEntry] = list(entries) if entries else []
        self._callbacks: List[Callable[[SecurityEvent], None]] = []

        if log_start:
            self._log_system_event(EventType.SYSTEM_START)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def head_hash(self) -> str:
        """Hash of the latest entry (GENESIS_HASH for an empty log)."""
        return self._entries[-1].entry_hash if self._entries else GENESIS_HASH

    def _log_system_event(self, event_type: EventType) -> None:
        """Log a system event (no subject)."""
        event = SecurityEvent(
            event_type=event_type,
            subject_hash="system",
            timestamp=int(time.time()),
            details={'node': NODE_NAME}
        )
        self._add_event(event)

    def _add_event(self, event: SecurityEvent) -> None:
        """Append an event to the chain."""
        index = len(self._entries)
        record = event.to_record()
        previous_hash = self.head_hash
        self._entries.append(LogEntry(
            index=index,
            record=record,
            previous_hash=previous_hash,
            entry_hash=LogEntry.compute_hash(index, record, previous_hash),
        ))

        # Notify callbacks
        for callback in self._callbacks:
            try:
                callback(event)
            except Exception:
                pass  # Don't let callbacks break logging

    def _log(self, event_type: EventType, subject: Optional[str],
             details: Optional[Dict[str, Any]] = None) -> SecurityEvent:
        event = SecurityEvent(
            event_type=event_type,
            subject_hash=get_subject_hash_short(subject) if subject else "anonymous",
            timestamp=int(time.time()),
            details=details or {},
        )
        self._add_event(event)
        return event

    def add_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Add a callback to be notified of new events."""
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[SecurityEvent], None]) -> None:
        """Remove a callback."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ========================================================================
    # Password Events
    # ========================================================================

    def log_password_hashed(
        self,
        subject: Optional[str],
        algorithm: str,
        iterations: int
    ) -> SecurityEvent:
        """
        Log creation of a password record.

        Args:
            subject: The account name (will be hashed), or None
            algorithm: PBKDF2 hash algorithm
            iterations: PBKDF2 iteration count

        Returns:
            The logged event
        """
        return self._log(EventType.PASSWORD_HASHED, subject, {
            'algo': algorithm,
            'iterations': iterations,
        })

    def log_password_verify(self, subject: Optional[str], success: bool) -> SecurityEvent:
        """Log a password verification attempt."""
        event_type = EventType.PASSWORD_VERIFIED if success else EventType.PASSWORD_FAILED
        return self._log(event_type, subject)

    # ========================================================================
    # Token Events
    # ========================================================================

    def log_token_issued(self, subject: Optional[str], algorithm: str) -> SecurityEvent:
        """Log issue of an HMAC token."""
        return self._log(EventType.TOKEN_ISSUED, subject, {'algo': f"HMAC-{algorithm.upper()}"})

    def log_token_verify(self, subject: Optional[str], success: bool) -> SecurityEvent:
        """Log an HMAC token verification attempt."""
        event_type = EventType.TOKEN_VERIFIED if success else EventType.TOKEN_FAILED
        return self._log(event_type, subject)

    # ========================================================================
    # Key Derivation Events
    # ========================================================================

    def log_key_derived(
        self,
        subject: Optional[str],
        algorithm: str,
        iterations: int,
        key_length: int
    ) -> SecurityEvent:
        """Log a PBKDF2 key derivation (never the key itself)."""
        return self._log(EventType.KEY_DERIVED, subject, {
            'algo': f"PBKDF2-HMAC-{algorithm.upper()}",
            'iterations': iterations,
            'length': key_length,
        })

    # ========================================================================
    # Retrieval
    # ========================================================================

    def get_all_events(self) -> List[SecurityEvent]:
        """
        Retrieve all logged events in order.

        Returns:
            List of all security events
        """
        return [SecurityEvent.from_record(entry.record) for entry in self._entries]

    def get_subject_events(self, subject: str) -> List[SecurityEvent]:
        """
        Get all events for a specific subject.

        Args:
            subject: The subject to search for

        Returns:
            List of events for that subject
        """
        short_hash = get_subject_hash_short(subject)
        return [e for e in self.get_all_events() if e.subject_hash == short_hash]

    def get_events_by_type(self, event_type: EventType) -> List[SecurityEvent]:
        """Get all events of a specific type."""
        return [e for e in self.get_all_events() if e.event_type == event_type]

    def get_recent_events(self, count: int = 10) -> List[SecurityEvent]:
        """Get the most recent events."""
        events = self.get_all_events()
        return events[-count:] if len(events) > count else events

    def print_audit_log(self, last_n: Optional[int] = None) -> None:
        """Print the audit log in a readable format."""
        events = self.get_all_events()
        if last_n:
            events = events[-last_n:]

        print("\n" + "=" * 70)
        print("SECURITY AUDIT LOG")
        print("=" * 70)

        for event in events:
            print(event)
            if event.details:
                for k, v in event.details.items():
                    print(f"    {k}: {v}")

        print("=" * 70)
        print(f"Total events: {len(self._entries)}")
        print(f"Head hash: {self.head_hash[:16]}...")
        print("=" * 70)

    def verify_integrity(self) -> bool:
        """
        Verify the hash chain.

        Returns:
            True if every entry is intact and linked to its predecessor
        """
        previous_hash = GENESIS_HASH
        for index, entry in enumerate(self._entries):
            if entry.index != index or entry.previous_hash != previous_hash:
                return False
            if not entry.is_valid():
                return False
            previous_hash = entry.entry_hash
        return True

    def export_log(self) -> str:
        """Export the entire audit log as JSON."""
        return json.dumps({
            'version': EVENT_VERSION,
            'entries': [asdict(entry) for entry in self._entries],
        }, indent=2)

    @classmethod
    def import_log(cls, json_str: str) -> 'EventLogger':
        """
        Import an audit log from JSON.

        Raises:
            ValueError: If the JSON is malformed or the chain does not verify
        """
        try:
            data = json.loads(json_str)
            entries = [LogEntry(**item) for item in data['entries']]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ValueError(f"Invalid audit log: {e}") from e

        logger = cls(entries=entries, log_start=False)
        if not logger.verify_integrity():
            raise ValueError("Audit log integrity check failed")
        return logger


# ============================================================================
# Convenience Functions
# ============================================================================

def create_event_logger() -> EventLogger:
    """Create a new event logger."""
    return EventLogger()
