# Integration Module
"""
Audit logging for hashvault operations.

All events are logged with privacy-preserving subject hashes.
"""

# Lazy imports to avoid RuntimeWarning when running module directly
def __getattr__(name):
    """Lazy import to avoid circular import issues."""
    import importlib
    event_logger = importlib.import_module(f"{__name__}.event_logger")
    return getattr(event_logger, name)

__all__ = [
    'EventType',
    'SecurityEvent',
    'LogEntry',
    'EventLogger',
    'get_subject_hash',
    'create_event_logger',
]
