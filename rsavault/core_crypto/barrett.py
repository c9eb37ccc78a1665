"""
Barrett Modular Reduction

Replaces division by a fixed modulus with two multiplications by a
precomputed constant (Menezes et al., Handbook of Applied Cryptography,
Algorithm 14.42), working directly on BigInt limbs.

With radix b = 2^32 and k = number of limbs of the modulus m:
    mu = floor(b^(2k) / m)

For 0 <= x < b^(2k):
    q1 = floor(x / b^(k-1))
    q3 = floor(q1 * mu / b^(k+1))
    r  = (x mod b^(k+1)) - (q3 * m mod b^(k+1))   (add b^(k+1) if negative)
    while r >= m: r -= m                           (at most twice)

The constant is only valid for the modulus it was computed from; a new key
needs a new constant.
"""

from dataclasses import dataclass

from .bigint import BigInt, ONE, mod_div


@dataclass(frozen=True)
class BarrettConstant:
    """Reduction constant bound to one modulus."""
    mu: BigInt
    k: int                  # limb count of the modulus
    modulus: BigInt         # private copy, used to detect a stale constant
    radix_power: BigInt     # b^(k+1)

    def matches(self, modulus: BigInt) -> bool:
        """True when this constant was computed for `modulus`."""
        return self.k == modulus.length and self.modulus == modulus


def _radix_power(exponent: int) -> BigInt:
    """b^exponent as a BigInt."""
    value = [0] * (exponent + 1)
    value[exponent] = 1
    return BigInt(value, exponent + 1)


def precompute(modulus: BigInt) -> BarrettConstant:
    """
    Compute the Barrett constant for a modulus.

    Args:
        modulus: The modulus (must be > 1)

    Returns:
        BarrettConstant for `modulus`

    Raises:
        ValueError: If modulus <= 1
    """
    if modulus <= ONE:
        raise ValueError("Barrett modulus must be greater than 1")
    k = modulus.length
    mu, _ = mod_div(_radix_power(2 * k), modulus)
    return BarrettConstant(
        mu=mu,
        k=k,
        modulus=modulus.copy(),
        radix_power=_radix_power(k + 1),
    )


barrett_constant_for = precompute


def reduce(x: BigInt, constant: BarrettConstant, modulus: BigInt) -> BigInt:
    """
    Compute x mod modulus using a precomputed Barrett constant.

    Equal to naive-division reduction for every x >= 0.

    Raises:
        ValueError: If `constant` was computed for a different modulus
    """
    if not constant.matches(modulus):
        raise ValueError("Barrett constant was computed for a different modulus")
    if x < modulus:
        return x.copy()

    k = constant.k
    if x.length > 2 * k:
        # Outside the algorithm's input range; fold with plain division
        return mod_div(x, modulus)[1]

    q1 = x.shift_right_limbs(k - 1)
    q3 = (q1 * constant.mu).shift_right_limbs(k + 1)
    r1 = x.low_limbs(k + 1)
    r2 = (q3 * modulus).low_limbs(k + 1)

    if r1 >= r2:
        r = r1 - r2
    else:
        r = (r1 + constant.radix_power) - r2

    while r >= modulus:
        r = r - modulus
    return r
