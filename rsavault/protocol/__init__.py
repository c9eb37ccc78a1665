# RSA Protocol Module
"""
RSA protocol implementations including:
- Key generation with a fixed public exponent
- Key string formatting and parsing
- Text <-> block encoding
- Encrypt / decrypt / sign / verify over comma-joined hex blocks
- PEM export and import (cryptography)

Security note: raw block RSA, no padding. Demonstration grade.
"""

from .text_rsa import (
    E_BIGINT,
    KeyPair,
    generate_keys,
    parse_bit_length,
    format_keys,
    parse_keys,
    parse_public_key,
    block_limbs_for,
    str_to_blocks,
    blocks_to_str,
    encrypt,
    decrypt,
    sign,
    verify,
)

from .pem import (
    public_key_to_pem,
    private_key_to_pem,
    load_public_pem,
    load_private_pem,
)

__all__ = [
    # Text protocol
    'E_BIGINT',
    'KeyPair',
    'generate_keys',
    'parse_bit_length',
    'format_keys',
    'parse_keys',
    'parse_public_key',
    'block_limbs_for',
    'str_to_blocks',
    'blocks_to_str',
    'encrypt',
    'decrypt',
    'sign',
    'verify',
    # PEM
    'public_key_to_pem',
    'private_key_to_pem',
    'load_public_pem',
    'load_private_pem',
]
