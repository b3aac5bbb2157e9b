# HashVault Test Suite
"""
Test suite including:
- Unit tests (published vectors for every hash, HMAC and PBKDF2)
- Integration tests (audit log, package API, command line)
- Security tests (invalid inputs, tampering)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
