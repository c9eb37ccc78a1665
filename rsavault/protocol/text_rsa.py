"""
RSA Text Protocol

Implements textbook RSA over UTF-8 text with:
- Key generation (two probable primes, fixed public exponent)
- Key (de)serialization as comma-separated hex strings
- Text <-> block encoding (4 bytes per limb, blocks always below n)
- Encryption / decryption and signing / verification of whole texts

Key Format:
    public:  "<hex n>,<hex e, 8 digits>"
    private: "<hex n>,<hex d>"

Ciphertext / Signature Format:
    comma-separated big-endian hex, one value per plaintext block

Block size:
    A block holds limb_count(n) - 1 limbs (4 bytes each), so its value is
    below 2^(32 * (limb_count(n) - 1)) <= n. The last block is zero padded.

Security note:
    Raw block RSA with no padding. Deterministic and malleable; fine for
    demonstration, not for protecting real data.
"""

import time
from dataclasses import dataclass
from typing import List, Tuple

from ..config import (
    LIMB_BITS, LIMB_BYTES, MILLER_RABIN_ROUNDS, MIN_KEY_LENGTH,
    PUBLIC_EXPONENT, PUBLIC_EXPONENT_HEX_DIGITS,
)
from ..core_crypto.barrett import BarrettConstant, barrett_constant_for, precompute
from ..core_crypto.bigint import BigInt, ONE
from ..core_crypto.rsa_math import generate_prime, mod_inverse, mod_pow
from ..errors import DecodingError, NotInvertibleError, ParseError, ValidationError
from ..logging import get_logger


logger = get_logger(__name__)

E_BIGINT = BigInt.from_slice([PUBLIC_EXPONENT])


# ============================================================================
# Key generation
# ============================================================================

def generate_keys(bit_length: int,
                  rounds: int = MILLER_RABIN_ROUNDS) -> Tuple[BigInt, BigInt]:
    """
    Generate an RSA modulus and private exponent.

    Args:
        bit_length: Modulus size in bits (even, >= MIN_KEY_LENGTH)
        rounds: Miller-Rabin rounds per prime

    Returns:
        Tuple (n, d)

    Raises:
        ValueError: If bit_length is odd or too small
        NotInvertibleError: If e is not invertible mod phi(n) (never expected)
    """
    if bit_length < MIN_KEY_LENGTH or bit_length % 2:
        raise ValueError(
            f"Key length must be an even number of bits >= {MIN_KEY_LENGTH}, got {bit_length}"
        )

    started = time.perf_counter()
    prime_bits = bit_length // 2

    p = generate_prime(prime_bits, rounds)
    q = generate_prime(prime_bits, rounds)
    while p == q:
        q = generate_prime(prime_bits, rounds)

    n = p * q
    phi_n = (p - ONE) * (q - ONE)

    try:
        d = mod_inverse(E_BIGINT, phi_n, precompute(phi_n))
    except NotInvertibleError:
        # generate_prime rejects p with e | p - 1, so this is unreachable
        logger.error("Public exponent not invertible for a %d-bit modulus", bit_length)
        raise

    logger.info("Generated %d-bit key pair in %.3fs", n.bit_length(),
                time.perf_counter() - started)
    return n, d


def parse_bit_length(text: str) -> int:
    """
    Parse a key length typed by a user.

    Only ASCII digits are accepted; signs and surrounding whitespace are
    rejected.

    Raises:
        ParseError: If the text is not an unsigned decimal integer
    """
    if not (text.isascii() and text.isdigit()):
        raise ParseError(f"Invalid key length: {text!r}")
    return int(text)


# ============================================================================
# Key serialization
# ============================================================================

def format_keys(n: BigInt, d: BigInt) -> Tuple[str, str]:
    """Return (public_key, private_key) strings."""
    sn = n.fmt_hex()
    return (
        f"{sn},{PUBLIC_EXPONENT:0{PUBLIC_EXPONENT_HEX_DIGITS}x}",
        f"{sn},{d.fmt_hex()}",
    )


def _split_key(text: str, label: str) -> Tuple[str, str]:
    parts = text.strip().split(',')
    if len(parts) != 2:
        raise ParseError(f"Error parsing {label} key")
    return parts[0].strip(), parts[1].strip()


def _parse_hex_field(text: str, field_name: str) -> BigInt:
    try:
        return BigInt.from_hex(text)
    except ParseError as exc:
        raise ParseError(f"Error parsing {field_name}", detail=exc.message) from exc


def parse_public_key(pub_key: str) -> BigInt:
    """
    Parse "<hex n>,<hex e>" and return n.

    Raises:
        ParseError: Malformed key string
        ValidationError: e is not PUBLIC_EXPONENT, or n is too small
    """
    sn, se = _split_key(pub_key, 'public')
    n = _parse_hex_field(sn, 'n')
    e = _parse_hex_field(se, 'e')
    if e != E_BIGINT:
        raise ValidationError("Keys are not generated from this app, unsupported")
    if n.length < 2:
        raise ValidationError("Modulus is too small to carry any text")
    return n


def parse_keys(pub_key: str, priv_key: str) -> Tuple[BigInt, BigInt, int]:
    """
    Parse and cross-check a public/private key string pair.

    Returns:
        Tuple (n, d, key_length_in_bits)

    Raises:
        ParseError: Malformed key string or hex field
        ValidationError: Exponent mismatch, modulus mismatch, bad d
    """
    n = parse_public_key(pub_key)
    sn, sd = _split_key(priv_key, 'private')
    n_priv = _parse_hex_field(sn, 'n')
    if n_priv != n:
        raise ValidationError("n in public key and private key not matching")
    d = _parse_hex_field(sd, 'd')
    if d.is_zero() or d >= n:
        raise ValidationError("Private exponent out of range")
    return n, d, n.length * LIMB_BITS


# ============================================================================
# Text <-> block encoding
# ============================================================================

def block_limbs_for(n: BigInt) -> int:
    """Limbs per plaintext block for modulus n."""
    return n.length - 1


def str_to_blocks(text: str, block_limbs: int) -> List[BigInt]:
    """
    Split UTF-8 text into BigInt blocks of `block_limbs` limbs.

    Every 4 bytes form one limb (first byte lowest); the final block is
    zero padded.
    """
    if block_limbs < 1:
        raise ValueError("Block must hold at least one limb")
    data = text.encode('utf-8')
    size = block_limbs * LIMB_BYTES
    return [BigInt.from_bytes_le(data[i:i + size]) for i in range(0, len(data), size)]


def blocks_to_str(blocks: List[BigInt], block_limbs: int) -> str:
    """
    Reassemble text from decoded blocks.

    Non-final blocks are widened back to the full block size so inner zero
    limbs survive; trailing zero padding is stripped from the end.

    Raises:
        DecodingError: If the bytes are not valid UTF-8
    """
    size = block_limbs * LIMB_BYTES
    last = len(blocks) - 1
    chunks = []
    for index, block in enumerate(blocks):
        raw = block.to_bytes_le()
        if index < last:
            raw = raw.ljust(size, b'\0')
        chunks.append(raw)
    data = b''.join(chunks).rstrip(b'\0')
    try:
        return data.decode('utf-8')
    except UnicodeDecodeError as exc:
        raise DecodingError("Invalid decryption result") from exc


# ============================================================================
# Encrypt / decrypt / sign / verify
# ============================================================================

def _transform_text(text: str, exponent: BigInt, n: BigInt,
                    constant: BarrettConstant) -> str:
    blocks = str_to_blocks(text, block_limbs_for(n))
    logger.debug("Transforming %d block(s)", len(blocks))
    return ','.join(mod_pow(m, exponent, constant, n).fmt_hex() for m in blocks)


def _transform_hex(data: str, exponent: BigInt, n: BigInt,
                   constant: BarrettConstant) -> List[BigInt]:
    if not data.strip():
        return []
    values = []
    for field in data.split(','):
        try:
            c = BigInt.from_hex(field.strip())
        except ParseError as exc:
            raise ParseError("Reading hex data failed", detail=exc.message) from exc
        values.append(mod_pow(c, exponent, constant, n))
    return values


def encrypt(text: str, n: BigInt, constant: BarrettConstant) -> str:
    """Encrypt text with the public exponent: comma-joined hex blocks."""
    return _transform_text(text, E_BIGINT, n, constant)


def decrypt(ciphertext: str, n: BigInt, constant: BarrettConstant, d: BigInt) -> str:
    """
    Decrypt comma-joined hex blocks with the private exponent.

    Raises:
        ParseError: A block is not valid hex
        DecodingError: The result is not valid text (wrong key or tampering)
    """
    blocks = _transform_hex(ciphertext, d, n, constant)
    return blocks_to_str(blocks, block_limbs_for(n))


def sign(text: str, n: BigInt, constant: BarrettConstant, d: BigInt) -> str:
    """Sign text block-wise with the private exponent."""
    return _transform_text(text, d, n, constant)


def verify(message: str, signature: str, n: BigInt,
           constant: BarrettConstant) -> Tuple[bool, str]:
    """
    Recover the signed text with the public exponent and compare.

    Returns:
        Tuple (recovered == message, recovered)

    Raises:
        ParseError: A signature block is not valid hex
        DecodingError: The recovered bytes are not valid text
    """
    blocks = _transform_hex(signature, E_BIGINT, n, constant)
    recovered = blocks_to_str(blocks, block_limbs_for(n))
    return recovered == message, recovered


# ============================================================================
# Key pair container
# ============================================================================

@dataclass(frozen=True, repr=False)
class KeyPair:
    """
    RSA key pair with its cached Barrett constant.

    Example:
        >>> keys = KeyPair.generate(256)
        >>> keys.decrypt(keys.encrypt("hi")) == "hi"
        True
    """
    n: BigInt
    d: BigInt
    constant: BarrettConstant
    bits: int

    @classmethod
    def from_components(cls, n: BigInt, d: BigInt) -> 'KeyPair':
        return cls(n=n.copy(), d=d.copy(), constant=barrett_constant_for(n),
                   bits=n.length * LIMB_BITS)

    @classmethod
    def generate(cls, bits: int, rounds: int = MILLER_RABIN_ROUNDS) -> 'KeyPair':
        n, d = generate_keys(bits, rounds)
        return cls.from_components(n, d)

    @classmethod
    def from_strings(cls, pub_key: str, priv_key: str) -> 'KeyPair':
        n, d, _ = parse_keys(pub_key, priv_key)
        return cls.from_components(n, d)

    def to_strings(self) -> Tuple[str, str]:
        return format_keys(self.n, self.d)

    @property
    def e(self) -> BigInt:
        return E_BIGINT.copy()

    def clone(self) -> 'KeyPair':
        """Independent copy of the key material (the constant is immutable)."""
        return KeyPair(n=self.n.copy(), d=self.d.copy(), constant=self.constant,
                       bits=self.bits)

    def encrypt(self, text: str) -> str:
        return encrypt(text, self.n, self.constant)

    def decrypt(self, ciphertext: str) -> str:
        return decrypt(ciphertext, self.n, self.constant, self.d)

    def sign(self, text: str) -> str:
        return sign(text, self.n, self.constant, self.d)

    def verify(self, message: str, signature: str) -> Tuple[bool, str]:
        return verify(message, signature, self.n, self.constant)

    def __repr__(self) -> str:
        return f"KeyPair(bits={self.bits}, e={PUBLIC_EXPONENT})"
