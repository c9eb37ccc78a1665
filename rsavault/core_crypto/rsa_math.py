"""
RSA Mathematical Operations Implementation

Implements the number theory needed by RSA on top of BigInt:
- Modular exponentiation (square-and-multiply with Barrett reduction)
- Miller-Rabin primality testing
- Prime number generation
- Extended Euclidean Algorithm and modular inverse

Note: No signed bignum type exists. The extended Euclidean algorithm keeps
      its Bezout coefficients as residues modulo a working modulus, and every
      "negative" step adds the modulus before subtracting. This is the
      intended strategy, not a workaround.
"""

from typing import Optional, Tuple

from ..config import LIMB_BITS, LIMB_MASK, MILLER_RABIN_ROUNDS, PUBLIC_EXPONENT, SMALL_PRIME_BOUND
from ..errors import NotInvertibleError
from ..logging import get_logger
from .barrett import BarrettConstant, precompute, reduce
from .bigint import BigInt, ONE, ZERO, mod_div


logger = get_logger(__name__)


def _sieve(bound: int) -> Tuple[int, ...]:
    """Primes below `bound` (sieve of Eratosthenes)."""
    is_prime = [True] * bound
    is_prime[0] = is_prime[1] = False
    for i in range(2, int(bound ** 0.5) + 1):
        if is_prime[i]:
            for j in range(i * i, bound, i):
                is_prime[j] = False
    return tuple(i for i, flag in enumerate(is_prime) if flag)


SMALL_PRIMES = _sieve(SMALL_PRIME_BOUND)
_SMALL_PRIME_SET = frozenset(SMALL_PRIMES)


# ============================================================================
# Modular exponentiation
# ============================================================================

def mod_pow(base: BigInt, exponent: BigInt, constant: BarrettConstant,
            modulus: BigInt) -> BigInt:
    """
    Modular exponentiation using the square-and-multiply algorithm.

    Scans the exponent from the most significant bit down: square the
    accumulator for every bit, multiply by the base when the bit is set,
    and Barrett-reduce after every multiplication.

    Time complexity: O(bit_length(exponent)) reductions

    Args:
        base: The base (any size; reduced first)
        exponent: The exponent (>= 0)
        constant: Barrett constant for `modulus`
        modulus: The modulus (must be > 1)

    Returns:
        (base^exponent) mod modulus

    Raises:
        ValueError: If modulus <= 1 or the constant belongs to another modulus
    """
    if modulus <= ONE:
        raise ValueError("Modulus must be greater than 1")

    base = reduce(base, constant, modulus)
    result = ONE.copy()

    for i in range(exponent.bit_length() - 1, -1, -1):
        result = reduce(result * result, constant, modulus)
        if exponent.test_bit(i):
            result = reduce(result * base, constant, modulus)

    return result


# ============================================================================
# GCD and modular inverse
# ============================================================================

def gcd(a: BigInt, b: BigInt) -> BigInt:
    """Greatest common divisor using the Euclidean algorithm."""
    while not b.is_zero():
        a, b = b, mod_div(a, b)[1]
    return a.copy()


def _mul_word_mod(x: BigInt, word: int, constant: BarrettConstant,
                  modulus: BigInt) -> BigInt:
    return reduce(x * BigInt([word], 1), constant, modulus)


def _sub_mod(x: BigInt, y: BigInt, modulus: BigInt) -> BigInt:
    """(x - y) mod modulus for x, y already in [0, modulus)."""
    if x < y:
        x = x + modulus
    return x - y


def extended_gcd(a: int, b: int, constant: BarrettConstant,
                 modulus: BigInt) -> Tuple[int, BigInt, BigInt]:
    """
    Extended Euclidean Algorithm over machine words.

    Finds u, v such that: a*u + b*v = gcd(a, b)  (mod modulus)

    The remainders stay machine words. The coefficients are kept as BigInt
    residues modulo `modulus`, updated with unsigned arithmetic only.

    Args:
        a: First word
        b: Second word
        constant: Barrett constant for `modulus`
        modulus: Working modulus for the coefficients (> 1)

    Returns:
        Tuple (gcd, u, v)

    Raises:
        ValueError: If a or b does not fit one limb
    """
    if not (0 <= a <= LIMB_MASK and 0 <= b <= LIMB_MASK):
        raise ValueError("extended_gcd operands must fit in one limb")

    old_r, r = a, b
    old_s, s = ONE.copy(), ZERO.copy()
    old_t, t = ZERO.copy(), ONE.copy()

    while r != 0:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, _sub_mod(old_s, _mul_word_mod(s, q, constant, modulus), modulus)
        old_t, t = t, _sub_mod(old_t, _mul_word_mod(t, q, constant, modulus), modulus)

    return old_r, old_s, old_t


def mod_inverse(e: BigInt, phi: BigInt,
                constant: Optional[BarrettConstant] = None) -> BigInt:
    """
    Compute d with (e * d) mod phi == 1.

    The first Euclid step is done with BigInt division:
        phi = e * quotient + remainder
    so the rest runs on machine words via extended_gcd(e, remainder). Its
    coefficients u, v satisfy e*u + remainder*v = 1, and since
    remainder = phi - e*quotient, the inverse is u - v*quotient (mod phi).
    The subtraction stays unsigned by adding phi first when u is smaller.

    Args:
        e: Value to invert (must fit one limb)
        phi: The modulus
        constant: Barrett constant for `phi` (computed when omitted)

    Returns:
        Modular inverse of e mod phi

    Raises:
        NotInvertibleError: If gcd(e, phi) != 1
        ValueError: If e does not fit one limb or phi <= 1
    """
    e_word = e.to_int()
    if e_word is None:
        raise ValueError("mod_inverse requires a single-limb value")
    if constant is None:
        constant = precompute(phi)

    quotient, remainder = mod_div(phi, e)
    g, u, v = extended_gcd(e_word, remainder.to_int(), constant, phi)
    if g != 1:
        raise NotInvertibleError(f"Modular inverse doesn't exist (gcd = {g})")

    correction = reduce(v * quotient, constant, phi)
    if u < correction:
        u = u + phi
    return reduce(u - correction, constant, phi)


# ============================================================================
# Primality
# ============================================================================

def _decompose(n: BigInt) -> Tuple[BigInt, BigInt, int]:
    """Write n-1 as 2^s * d with d odd; returns (n-1, d, s)."""
    n_minus_1 = n - ONE
    s = 0
    while not n_minus_1.test_bit(s):
        s += 1
    return n_minus_1, n_minus_1.shift_right_bits(s), s


def _strong_probable_prime(n: BigInt, witness: BigInt, constant: BarrettConstant,
                           n_minus_1: BigInt, d: BigInt, s: int) -> bool:
    x = mod_pow(witness, d, constant, n)
    if x == ONE or x == n_minus_1:
        return True
    for _ in range(s - 1):
        x = reduce(x * x, constant, n)
        if x == n_minus_1:
            return True
    return False


def miller_rabin_round(n: BigInt, witness: BigInt) -> bool:
    """
    One Miller-Rabin round with a chosen witness.

    Args:
        n: Odd number > 3 to test
        witness: Base in [2, n-2]

    Returns:
        False if `witness` proves n composite, True otherwise
    """
    constant = precompute(n)
    n_minus_1, d, s = _decompose(n)
    return _strong_probable_prime(n, witness, constant, n_minus_1, d, s)


def _random_witness(n: BigInt) -> BigInt:
    """Random base in [2, n-2]."""
    span = n - BigInt([3], 1)
    return mod_div(BigInt.random(n.length), span)[1] + BigInt([2], 1)


def is_probable_prime(candidate: BigInt, rounds: int = MILLER_RABIN_ROUNDS) -> bool:
    """
    Miller-Rabin primality test.

    A probabilistic test that determines if n is probably prime.
    Probability of false positive: at most (1/4)^rounds

    Algorithm:
    1. Reject n < 2 and even n >= 4; accept 2 and 3
    2. Trial-divide by the primes below SMALL_PRIME_BOUND
    3. Write n-1 as 2^s * d
    4. For each round pick a random witness a in [2, n-2]:
       - Compute x = a^d mod n
       - If x = 1 or x = n-1, continue
       - Square x up to s-1 times, looking for n-1
       - If never found, n is composite

    Args:
        candidate: Number to test for primality
        rounds: Number of independent witnesses

    Returns:
        True if candidate is probably prime, False if definitely composite
    """
    if candidate.length == 1:
        small = candidate.value[0]
        if small < 2:
            return False
        if small in _SMALL_PRIME_SET:
            return True
    if candidate.is_even():
        return False

    for p in SMALL_PRIMES:
        if candidate.mod_word(p) == 0:
            return False

    constant = precompute(candidate)
    n_minus_1, d, s = _decompose(candidate)

    for _ in range(rounds):
        witness = _random_witness(candidate)
        if not _strong_probable_prime(candidate, witness, constant, n_minus_1, d, s):
            return False

    return True


# ============================================================================
# Prime generation
# ============================================================================

def random_bits(bits: int) -> BigInt:
    """
    Random odd value with exactly `bits` bits and its top two bits set.

    Two top bits make the product of two such values exactly 2*bits long.
    """
    if bits < 2:
        raise ValueError("Bit length must be at least 2")
    limb_count = (bits + LIMB_BITS - 1) // LIMB_BITS
    limbs = BigInt.random(limb_count).value
    top_bits = bits - (limb_count - 1) * LIMB_BITS
    top = limbs[-1] & ((1 << top_bits) - 1)
    top |= 1 << (top_bits - 1)
    if top_bits >= 2:
        top |= 1 << (top_bits - 2)
    else:
        limbs[-2] |= 1 << (LIMB_BITS - 1)
    limbs[-1] = top
    limbs[0] |= 1
    return BigInt.from_slice(limbs)


def generate_prime(bits: int, rounds: int = MILLER_RABIN_ROUNDS,
                   exponent: int = PUBLIC_EXPONENT) -> BigInt:
    """
    Generate a random probable prime of the specified bit length.

    Candidates are rejected before the primality test when `exponent`
    divides either the candidate or the candidate minus one, so that
    gcd(exponent, p - 1) = 1 for a prime exponent.

    Args:
        bits: Desired bit length of the prime (>= 16)
        rounds: Number of Miller-Rabin rounds
        exponent: Public exponent the prime will be used with

    Returns:
        A probable prime with exactly `bits` bits

    Raises:
        ValueError: If bits < 16
    """
    if bits < 16:
        raise ValueError("Bit length must be at least 16")

    attempts = 0
    while True:
        attempts += 1
        candidate = random_bits(bits)

        if candidate.mod_word(exponent) in (0, 1):
            continue

        if is_probable_prime(candidate, rounds):
            logger.debug("Found %d-bit prime after %d candidates", bits, attempts)
            return candidate
