"""
PEM Interoperability

Exports rsavault keys as standard PEM documents and reads them back, using
the `cryptography` package:
- Public key: SubjectPublicKeyInfo PEM
- Private key: unencrypted PKCS#8 PEM

Only n and d are stored by rsavault, so the prime factors and CRT values a
PKCS#8 document needs are recovered from (n, e, d) on export.
"""

from typing import Optional, Tuple

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..config import PUBLIC_EXPONENT
from ..core_crypto.bigint import BigInt
from ..errors import ParseError, ValidationError


def _public_numbers(n: BigInt) -> rsa.RSAPublicNumbers:
    return rsa.RSAPublicNumbers(PUBLIC_EXPONENT, int(n))


def public_key_to_pem(n: BigInt) -> bytes:
    """
    Serialize the public key (n, e) to PEM.

    Args:
        n: Modulus

    Returns:
        PEM-encoded SubjectPublicKeyInfo
    """
    public_key = _public_numbers(n).public_key()
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def private_key_to_pem(n: BigInt, d: BigInt) -> bytes:
    """
    Serialize the private key to unencrypted PKCS#8 PEM.

    Raises:
        ValidationError: If (n, e, d) is not a consistent RSA key
    """
    n_int, d_int = int(n), int(d)
    try:
        p, q = rsa.rsa_recover_prime_factors(n_int, PUBLIC_EXPONENT, d_int)
        numbers = rsa.RSAPrivateNumbers(
            p=p,
            q=q,
            d=d_int,
            dmp1=rsa.rsa_crt_dmp1(d_int, p),
            dmq1=rsa.rsa_crt_dmq1(d_int, q),
            iqmp=rsa.rsa_crt_iqmp(p, q),
            public_numbers=_public_numbers(n),
        )
        private_key = numbers.private_key()
    except ValueError as exc:
        raise ValidationError("Key material is not a valid RSA key", detail=str(exc)) from exc

    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def _check_exponent(e: int) -> None:
    if e != PUBLIC_EXPONENT:
        raise ValidationError("Keys are not generated from this app, unsupported",
                              detail=f"e = {e}")


def load_public_pem(data: bytes) -> BigInt:
    """
    Read a PEM public key and return its modulus.

    Raises:
        ParseError: Malformed PEM or not an RSA key
        ValidationError: Public exponent differs from PUBLIC_EXPONENT
    """
    try:
        key = serialization.load_pem_public_key(data)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise ParseError("Error parsing PEM public key", detail=str(exc)) from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise ParseError("PEM public key is not an RSA key")

    numbers = key.public_numbers()
    _check_exponent(numbers.e)
    return BigInt.from_int(numbers.n)


def load_private_pem(data: bytes, password: Optional[bytes] = None) -> Tuple[BigInt, BigInt]:
    """
    Read a PEM private key and return (n, d).

    Raises:
        ParseError: Malformed PEM, wrong password or not an RSA key
        ValidationError: Public exponent differs from PUBLIC_EXPONENT
    """
    try:
        key = serialization.load_pem_private_key(data, password=password)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise ParseError("Error parsing PEM private key", detail=str(exc)) from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ParseError("PEM private key is not an RSA key")

    numbers = key.private_numbers()
    _check_exponent(numbers.public_numbers.e)
    return BigInt.from_int(numbers.public_numbers.n), BigInt.from_int(numbers.d)
