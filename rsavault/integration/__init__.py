# Integration Module
"""
Session state model tying key management and the RSA protocol together
for interactive front ends.
"""

from .session import (
    Action,
    RSASession,
    KEYS_REQUIRED_MESSAGE,
    INVALID_DECRYPTION_MESSAGE,
    INVALID_VERIFY_INPUT_MESSAGE,
)

__all__ = [
    'Action',
    'RSASession',
    'KEYS_REQUIRED_MESSAGE',
    'INVALID_DECRYPTION_MESSAGE',
    'INVALID_VERIFY_INPUT_MESSAGE',
]
