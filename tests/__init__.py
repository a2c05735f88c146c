"""
docmodel test suite.

This package contains:
- unit/: Unit tests (mocked clients, no I/O beyond temporary directories)
- integration/: Facades and repositories against the in-memory and SQLite clients
"""
