# Core Cryptography Module
"""
Core arithmetic and number theory including:
- BigInt (radix 2^32 unsigned integers)
- Barrett modular reduction
- Modular exponentiation
- Miller-Rabin primality testing and prime generation
- Extended Euclidean algorithm / modular inverse
"""

from .bigint import BigInt, ZERO, ONE, add, sub, mul, mod_div
from .barrett import BarrettConstant, precompute, reduce, barrett_constant_for
from .rsa_math import (
    SMALL_PRIMES,
    mod_pow,
    gcd,
    extended_gcd,
    mod_inverse,
    miller_rabin_round,
    is_probable_prime,
    random_bits,
    generate_prime,
)

__all__ = [
    'BigInt',
    'ZERO',
    'ONE',
    'add',
    'sub',
    'mul',
    'mod_div',
    'BarrettConstant',
    'precompute',
    'reduce',
    'barrett_constant_for',
    'SMALL_PRIMES',
    'mod_pow',
    'gcd',
    'extended_gcd',
    'mod_inverse',
    'miller_rabin_round',
    'is_probable_prime',
    'random_bits',
    'generate_prime',
]
