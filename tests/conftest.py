"""Shared fixtures: key generation is expensive, so keys are built once."""

import pytest

from rsavault.protocol.text_rsa import KeyPair


@pytest.fixture(scope="session")
def small_keys() -> KeyPair:
    """256-bit key pair for fast protocol tests."""
    return KeyPair.generate(256)


@pytest.fixture(scope="session")
def other_small_keys(small_keys) -> KeyPair:
    """A second, unrelated 256-bit key pair."""
    keys = KeyPair.generate(256)
    while keys.n == small_keys.n:
        keys = KeyPair.generate(256)
    return keys


@pytest.fixture(scope="session")
def keys_768() -> KeyPair:
    """768-bit key pair (the default application key length)."""
    return KeyPair.generate(768)
