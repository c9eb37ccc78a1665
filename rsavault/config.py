"""
Configuration module.

Process-wide constants for the BigInt stack and the RSA protocol, plus a
small dataclass grouping the tunables that callers may override.
"""

import os
from dataclasses import dataclass


# BigInt representation
LIMB_BITS = 32
LIMB_BYTES = LIMB_BITS // 8
LIMB_BASE = 1 << LIMB_BITS
LIMB_MASK = LIMB_BASE - 1
HEX_DIGITS_PER_LIMB = LIMB_BITS // 4

# RSA protocol
PUBLIC_EXPONENT = 114493  # largest prime below 114514
PUBLIC_EXPONENT_HEX_DIGITS = 8

# Primality testing
MILLER_RABIN_ROUNDS = 40  # false-positive bound 4^-40 = 2^-80
SMALL_PRIME_BOUND = 2000  # trial division table upper bound

# Keys
DEFAULT_KEY_LENGTH = 768
MIN_KEY_LENGTH = 64  # n needs at least two limbs to carry one-limb blocks

# CLI benchmarking
BENCHMARK_RUNS = 10


@dataclass
class RSAConfig:
    """
    Tunable parameters.

    Wire-format constants (limb width, public exponent) are not part of
    this object.
    """
    miller_rabin_rounds: int = MILLER_RABIN_ROUNDS
    default_key_length: int = DEFAULT_KEY_LENGTH
    benchmark_runs: int = BENCHMARK_RUNS

    @classmethod
    def from_env(cls) -> 'RSAConfig':
        """Build a config, overriding defaults from RSAVAULT_* variables."""
        return cls(
            miller_rabin_rounds=_env_int('RSAVAULT_MR_ROUNDS', MILLER_RABIN_ROUNDS),
            default_key_length=_env_int('RSAVAULT_KEY_LENGTH', DEFAULT_KEY_LENGTH),
            benchmark_runs=_env_int('RSAVAULT_BENCH_RUNS', BENCHMARK_RUNS),
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value
