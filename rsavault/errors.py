"""
Exception Hierarchy

All errors raised by rsavault derive from RSAVaultError so callers can
catch the whole family at once. Each concrete error also subclasses the
closest built-in exception (ValueError, ArithmeticError, ZeroDivisionError)
so generic handlers keep working.

Recoverable:
- ParseError: malformed hex, key string or bit length
- ValidationError: key material that parses but does not belong together
- DecodingError: decrypted bytes are not valid text (wrong key / tampering)

Invariant violations:
- RSAArithmeticError and subclasses
"""

from typing import Optional


class RSAVaultError(Exception):
    """Base exception for all rsavault errors."""

    def __init__(self, message: str, detail: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Human readable error message
            detail: Optional extra context (offending field, value, ...)
        """
        self.message = message
        self.detail = detail
        super().__init__(message)


class ParseError(RSAVaultError, ValueError):
    """Raised when a hex string, key string or bit length cannot be parsed."""
    pass


class ValidationError(RSAVaultError, ValueError):
    """Raised when parsed key material is inconsistent or unsupported."""
    pass


class DecodingError(RSAVaultError, ValueError):
    """Raised when decrypted blocks do not form valid UTF-8 text."""
    pass


class RSAArithmeticError(RSAVaultError, ArithmeticError):
    """Base class for arithmetic failures in the BigInt stack."""
    pass


class DivisionByZeroError(RSAArithmeticError, ZeroDivisionError):
    """Raised when dividing a BigInt by zero."""
    pass


class NotInvertibleError(RSAArithmeticError):
    """Raised when gcd(a, m) != 1 so no modular inverse exists."""
    pass


class NegativeResultError(RSAArithmeticError):
    """Raised when an unsigned subtraction would go below zero."""
    pass
