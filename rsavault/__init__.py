"""
RSAVault - textbook RSA on a from-scratch arbitrary-precision integer stack.

Modules:
  - core_crypto: BigInt, Barrett reduction, number theory
  - protocol: key generation, key strings, text encryption and signatures, PEM
  - integration: session state model for interactive front ends
"""

__version__ = "1.0.0"

from .errors import (
    RSAVaultError,
    ParseError,
    ValidationError,
    DecodingError,
    RSAArithmeticError,
    DivisionByZeroError,
    NotInvertibleError,
    NegativeResultError,
)
from .core_crypto import BigInt, barrett_constant_for
from .protocol import (
    KeyPair,
    generate_keys,
    format_keys,
    parse_keys,
    encrypt,
    decrypt,
    sign,
    verify,
)

__all__ = [
    '__version__',
    'RSAVaultError',
    'ParseError',
    'ValidationError',
    'DecodingError',
    'RSAArithmeticError',
    'DivisionByZeroError',
    'NotInvertibleError',
    'NegativeResultError',
    'BigInt',
    'barrett_constant_for',
    'KeyPair',
    'generate_keys',
    'format_keys',
    'parse_keys',
    'encrypt',
    'decrypt',
    'sign',
    'verify',
]
