# RSAVault Test Suite
"""
Test suite including:
- Unit tests (BigInt, Barrett, number theory, protocol, PEM)
- Integration tests (session, CLI, configuration)
- Security tests (invalid inputs, tampering)

Run with: pytest
Coverage: coverage run -m pytest && coverage report
"""
