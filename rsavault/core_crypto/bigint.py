"""
Arbitrary-Precision Unsigned Integer

Implements BigInt, a fixed-radix (2^32) unsigned multi-word integer:
- Addition / subtraction with carry and borrow propagation
- Schoolbook multiplication using a wide accumulator
- Long division with remainder (Knuth, TAOCP Vol. 2, Algorithm D)
- Ordering comparison, zero test, narrowing to one machine word
- Big-endian hex formatting and parsing
- Random generation of a requested limb count

Representation:
    value  - list of 32-bit limbs, least significant limb first
    length - number of significant limbs (always >= 1)

Limbs at index >= length are never read as significant; the list may be
longer than length (spare capacity). Every operation returns a new BigInt
with its own limb list, so values never share storage.

Note: Python's int is used only as the limb type and as the accumulator
      inside limb loops. Multi-word arithmetic never goes through int.
"""

import secrets
import string
from typing import Iterable, List, Optional, Tuple

from ..config import LIMB_BITS, LIMB_BYTES, LIMB_BASE, LIMB_MASK, HEX_DIGITS_PER_LIMB
from ..errors import DivisionByZeroError, NegativeResultError, ParseError


_HEX_CHARS = frozenset(string.hexdigits)


class BigInt:
    """
    Unsigned arbitrary-precision integer with 32-bit limbs.

    Example:
        >>> a = BigInt.from_hex("ffffffff")
        >>> (a + BigInt.from_slice([1])).fmt_hex()
        '100000000'
        >>> q, r = divmod(BigInt.from_int(1000), BigInt.from_int(7))
        >>> int(q), int(r)
        (142, 6)
    """

    __slots__ = ('value', 'length')

    VALUE_LEN = LIMB_BITS

    def __init__(self, value: List[int], length: int):
        """
        Wrap a limb list. Prefer the from_* constructors.

        Args:
            value: Limb storage, least significant first (taken over, not copied)
            length: Number of significant limbs
        """
        if not value:
            value = [0]
        self.value = value
        self.length = max(1, min(length, len(value)))
        self._normalize()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def with_capacity(cls, capacity: int) -> 'BigInt':
        """Zero value with room for `capacity` limbs."""
        return cls([0] * max(1, capacity), 1)

    @classmethod
    def zero(cls) -> 'BigInt':
        return cls([0], 1)

    @classmethod
    def one(cls) -> 'BigInt':
        return cls([1], 1)

    @classmethod
    def from_slice(cls, limbs: Iterable[int]) -> 'BigInt':
        """
        Build from 32-bit limbs, least significant first.

        Raises:
            ValueError: If a limb is negative or does not fit 32 bits
        """
        value = list(limbs)
        for limb in value:
            if not 0 <= limb <= LIMB_MASK:
                raise ValueError(f"Limb out of range: {limb}")
        return cls(value, len(value))

    @classmethod
    def from_bytes_le(cls, data: bytes) -> 'BigInt':
        """Pack bytes into limbs, 4 bytes per limb, little-endian within a limb."""
        value = [
            int.from_bytes(data[i:i + LIMB_BYTES], 'little')
            for i in range(0, len(data), LIMB_BYTES)
        ]
        return cls(value, len(value))

    @classmethod
    def from_hex(cls, text: str) -> 'BigInt':
        """
        Parse a big-endian hex string (no prefix, either case).

        Args:
            text: Hex digits, most significant first. Leading zeros allowed.

        Returns:
            Parsed BigInt

        Raises:
            ParseError: If the string is empty or has a non-hex character
        """
        if not text:
            raise ParseError("Empty hex string")
        for pos, ch in enumerate(text):
            if ch not in _HEX_CHARS:
                raise ParseError(f"Invalid hex digit {ch!r} at position {pos}",
                                 detail=text)

        value = []
        end = len(text)
        while end > 0:
            start = max(0, end - HEX_DIGITS_PER_LIMB)
            value.append(int(text[start:end], 16))
            end = start
        return cls(value, len(value))

    @classmethod
    def from_int(cls, number: int) -> 'BigInt':
        """Convert a non-negative Python int (interop and tests)."""
        if number < 0:
            raise NegativeResultError("BigInt cannot hold negative values")
        value = []
        while True:
            value.append(number & LIMB_MASK)
            number >>= LIMB_BITS
            if not number:
                break
        return cls(value, len(value))

    @classmethod
    def random(cls, limb_count: int) -> 'BigInt':
        """
        Uniformly random value of `limb_count` limbs (top limb may be zero).

        Uses the `secrets` CSPRNG.
        """
        if limb_count < 1:
            raise ValueError("limb_count must be at least 1")
        value = [secrets.randbits(LIMB_BITS) for _ in range(limb_count)]
        return cls(value, limb_count)

    def copy(self) -> 'BigInt':
        """Independent copy holding only the significant limbs."""
        return BigInt(self.value[:self.length], self.length)

    clone = copy

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def _normalize(self) -> None:
        value = self.value
        length = self.length
        while length > 1 and value[length - 1] == 0:
            length -= 1
        self.length = length

    @property
    def limbs(self) -> List[int]:
        """Copy of the significant limbs, least significant first."""
        return self.value[:self.length]

    def is_zero(self) -> bool:
        return self.length == 1 and self.value[0] == 0

    def is_even(self) -> bool:
        return self.value[0] & 1 == 0

    def bit_length(self) -> int:
        """Number of bits needed to represent the value (0 for zero)."""
        return (self.length - 1) * LIMB_BITS + self.value[self.length - 1].bit_length()

    def test_bit(self, index: int) -> bool:
        limb, bit = divmod(index, LIMB_BITS)
        if limb >= self.length:
            return False
        return (self.value[limb] >> bit) & 1 == 1

    def to_int(self) -> Optional[int]:
        """Narrow to a single machine word; None when the value needs more limbs."""
        if self.length != 1:
            return None
        return self.value[0]

    def compare(self, other: 'BigInt') -> int:
        """
        Three-way comparison: -1, 0 or 1.

        Significant length decides first, then limbs from the most
        significant one down.
        """
        if self.length != other.length:
            return -1 if self.length < other.length else 1
        a, b = self.value, other.value
        for i in range(self.length - 1, -1, -1):
            if a[i] != b[i]:
                return -1 if a[i] < b[i] else 1
        return 0

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def fmt_hex(self) -> str:
        """Big-endian lowercase hex without leading zeros ("0" for zero)."""
        top = self.length - 1
        parts = [format(self.value[top], 'x')]
        width = '0%dx' % HEX_DIGITS_PER_LIMB
        for i in range(top - 1, -1, -1):
            parts.append(format(self.value[i], width))
        return ''.join(parts)

    def to_bytes_le(self) -> bytes:
        """Significant limbs as bytes, 4 per limb, little-endian within a limb."""
        return b''.join(limb.to_bytes(LIMB_BYTES, 'little')
                        for limb in self.value[:self.length])

    # ------------------------------------------------------------------
    # Shifts and truncation
    # ------------------------------------------------------------------

    def shift_right_limbs(self, count: int) -> 'BigInt':
        """floor(self / 2^(32*count))"""
        if count >= self.length:
            return BigInt.zero()
        return BigInt(self.value[count:self.length], self.length - count)

    def low_limbs(self, count: int) -> 'BigInt':
        """self mod 2^(32*count)"""
        count = min(count, self.length)
        return BigInt(self.value[:count], count)

    def shift_right_bits(self, bits: int) -> 'BigInt':
        """floor(self / 2^bits)"""
        limb_shift, bit_shift = divmod(bits, LIMB_BITS)
        if limb_shift >= self.length:
            return BigInt.zero()
        src = self.value[limb_shift:self.length]
        if bit_shift == 0:
            return BigInt(src, len(src))
        back = LIMB_BITS - bit_shift
        out = []
        for i in range(len(src)):
            high = src[i + 1] if i + 1 < len(src) else 0
            out.append(((src[i] >> bit_shift) | (high << back)) & LIMB_MASK)
        return BigInt(out, len(out))

    # ------------------------------------------------------------------
    # Single-word helpers
    # ------------------------------------------------------------------

    def divmod_word(self, divisor: int) -> Tuple['BigInt', int]:
        """Divide by one machine word, returning (quotient, remainder)."""
        if divisor == 0:
            raise DivisionByZeroError("BigInt division by zero")
        if not 0 < divisor <= LIMB_MASK:
            raise ValueError("Divisor must fit in one limb")
        quotient = [0] * self.length
        rem = 0
        for i in range(self.length - 1, -1, -1):
            cur = (rem << LIMB_BITS) | self.value[i]
            quotient[i], rem = divmod(cur, divisor)
        return BigInt(quotient, self.length), rem

    def mod_word(self, divisor: int) -> int:
        """Remainder by one machine word."""
        if divisor == 0:
            raise DivisionByZeroError("BigInt division by zero")
        rem = 0
        for i in range(self.length - 1, -1, -1):
            rem = ((rem << LIMB_BITS) | self.value[i]) % divisor
        return rem

    # ------------------------------------------------------------------
    # Python protocol
    # ------------------------------------------------------------------

    def __int__(self) -> int:
        result = 0
        for i in range(self.length - 1, -1, -1):
            result = (result << LIMB_BITS) | self.value[i]
        return result

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __repr__(self) -> str:
        return f"BigInt(0x{self.fmt_hex()})"

    def __str__(self) -> str:
        return self.fmt_hex()

    def __hash__(self) -> int:
        return hash(tuple(self.value[:self.length]))

    def __eq__(self, other) -> bool:
        if not isinstance(other, BigInt):
            return NotImplemented
        return self.compare(other) == 0

    def __ne__(self, other) -> bool:
        if not isinstance(other, BigInt):
            return NotImplemented
        return self.compare(other) != 0

    def __lt__(self, other: 'BigInt') -> bool:
        return self.compare(other) < 0

    def __le__(self, other: 'BigInt') -> bool:
        return self.compare(other) <= 0

    def __gt__(self, other: 'BigInt') -> bool:
        return self.compare(other) > 0

    def __ge__(self, other: 'BigInt') -> bool:
        return self.compare(other) >= 0

    def __add__(self, other: 'BigInt') -> 'BigInt':
        return add(self, other)

    def __sub__(self, other: 'BigInt') -> 'BigInt':
        return sub(self, other)

    def __mul__(self, other: 'BigInt') -> 'BigInt':
        return mul(self, other)

    def __divmod__(self, other: 'BigInt') -> Tuple['BigInt', 'BigInt']:
        return mod_div(self, other)

    def __floordiv__(self, other: 'BigInt') -> 'BigInt':
        return mod_div(self, other)[0]

    def __mod__(self, other: 'BigInt') -> 'BigInt':
        return mod_div(self, other)[1]


ZERO = BigInt.zero()
ONE = BigInt.one()


# ============================================================================
# Arithmetic
# ============================================================================

def add(a: BigInt, b: BigInt) -> BigInt:
    """a + b with carry propagation; the result grows by at most one limb."""
    if a.length < b.length:
        a, b = b, a
    av, bv = a.value, b.value
    out = [0] * (a.length + 1)
    carry = 0
    for i in range(b.length):
        t = av[i] + bv[i] + carry
        out[i] = t & LIMB_MASK
        carry = t >> LIMB_BITS
    for i in range(b.length, a.length):
        t = av[i] + carry
        out[i] = t & LIMB_MASK
        carry = t >> LIMB_BITS
    out[a.length] = carry
    return BigInt(out, a.length + 1)


def sub(a: BigInt, b: BigInt) -> BigInt:
    """
    a - b for a >= b.

    Raises:
        NegativeResultError: If b > a (the caller broke the contract)
    """
    if a.compare(b) < 0:
        raise NegativeResultError("Unsigned subtraction would be negative")
    av, bv = a.value, b.value
    out = [0] * a.length
    borrow = 0
    for i in range(a.length):
        take = (bv[i] if i < b.length else 0) + borrow
        if av[i] >= take:
            out[i] = av[i] - take
            borrow = 0
        else:
            out[i] = av[i] + LIMB_BASE - take
            borrow = 1
    return BigInt(out, a.length)


def mul(a: BigInt, b: BigInt) -> BigInt:
    """
    Schoolbook multiplication.

    The product has at most a.length + b.length limbs. Each partial product
    plus the running limb and carry fits a 64-bit accumulator; the high half
    carries into the next limb.
    """
    la, lb = a.length, b.length
    if la < lb:
        a, b, la, lb = b, a, lb, la
    av, bv = a.value, b.value
    out = [0] * (la + lb)
    for i in range(lb):
        bi = bv[i]
        if bi == 0:
            continue
        carry = 0
        k = i
        for j in range(la):
            t = out[k] + av[j] * bi + carry
            out[k] = t & LIMB_MASK
            carry = t >> LIMB_BITS
            k += 1
        out[k] = carry
    return BigInt(out, la + lb)


def mod_div(a: BigInt, b: BigInt) -> Tuple[BigInt, BigInt]:
    """
    Division with remainder: returns (q, r) with a = q*b + r and 0 <= r < b.

    Raises:
        DivisionByZeroError: If b is zero
    """
    if b.is_zero():
        raise DivisionByZeroError("BigInt division by zero")
    if a.compare(b) < 0:
        return BigInt.zero(), a.copy()
    if b.length == 1:
        q, r = a.divmod_word(b.value[0])
        return q, BigInt([r], 1)
    return _long_divide(a, b)


def _shift_left_bits(limbs: List[int], shift: int) -> List[int]:
    """Shift a limb list left by 0 <= shift < 32 bits; result has one extra limb."""
    if shift == 0:
        return limbs + [0]
    back = LIMB_BITS - shift
    out = []
    carry = 0
    for limb in limbs:
        out.append(((limb << shift) & LIMB_MASK) | carry)
        carry = limb >> back
    out.append(carry)
    return out


def _long_divide(a: BigInt, b: BigInt) -> Tuple[BigInt, BigInt]:
    # Knuth Algorithm D; requires b.length >= 2 and a >= b
    n = b.length
    m = a.length - n

    # D1: normalize so the divisor's top limb has its high bit set
    shift = LIMB_BITS - b.value[n - 1].bit_length()
    vn = _shift_left_bits(b.value[:n], shift)[:n]
    un = _shift_left_bits(a.value[:a.length], shift)

    v_top = vn[n - 1]
    v_next = vn[n - 2]
    q = [0] * (m + 1)

    for j in range(m, -1, -1):
        # D3: estimate the quotient limb from the top two limbs
        num = (un[j + n] << LIMB_BITS) | un[j + n - 1]
        qhat, rhat = divmod(num, v_top)
        while qhat >= LIMB_BASE or qhat * v_next > ((rhat << LIMB_BITS) | un[j + n - 2]):
            qhat -= 1
            rhat += v_top
            if rhat >= LIMB_BASE:
                break

        # D4: multiply and subtract
        carry = 0
        borrow = 0
        for i in range(n):
            p = qhat * vn[i] + carry
            carry = p >> LIMB_BITS
            take = (p & LIMB_MASK) + borrow
            if un[i + j] >= take:
                un[i + j] -= take
                borrow = 0
            else:
                un[i + j] = un[i + j] + LIMB_BASE - take
                borrow = 1
        take = carry + borrow
        if un[j + n] >= take:
            un[j + n] -= take
        else:
            # D6: qhat was one too large, add the divisor back
            un[j + n] = un[j + n] + LIMB_BASE - take
            qhat -= 1
            carry = 0
            for i in range(n):
                t = un[i + j] + vn[i] + carry
                un[i + j] = t & LIMB_MASK
                carry = t >> LIMB_BITS
            un[j + n] = (un[j + n] + carry) & LIMB_MASK

        q[j] = qhat

    # D8: unnormalize the remainder
    remainder = BigInt(un[:n], n).shift_right_bits(shift)
    return BigInt(q, m + 1), remainder
