"""
Discord Transport Testing Package.

Test Organization:
    unit/: Unit tests for individual components
    conftest.py: Shared fixtures (environment isolation, entries, sessions)
"""
