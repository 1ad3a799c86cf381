# src/polyexpand/bignat.py
"""
Unbounded non-negative integers stored as base-1e9 chunks.

Chunks are kept least-significant first. The canonical form has no zero chunk
at the top, and zero is the empty tuple, so two BigNat values are equal exactly
when their chunk tuples are equal.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import total_ordering

BASE = 1_000_000_000
BASE_DIGITS = 9


def _trim(chunks: list[int]) -> tuple[int, ...]:
    """Drop zero chunks from the top and freeze."""
    end = len(chunks)
    while end and chunks[end - 1] == 0:
        end -= 1
    return tuple(chunks[:end])


@total_ordering
@dataclass(frozen=True, eq=False)
class BigNat:
    chunks: tuple[int, ...] = ()

    # --- construction ---------------------------------------------------------

    @classmethod
    def from_unsigned(cls, v: int) -> BigNat:
        """Build the canonical chunk sequence of a native non-negative int."""
        if isinstance(v, bool) or not isinstance(v, int):
            raise TypeError(f"BigNat needs an int, got {type(v).__name__}")
        if v < 0:
            raise ValueError(f"BigNat cannot hold a negative value ({v})")
        out: list[int] = []
        while v > 0:
            v, r = divmod(v, BASE)
            out.append(r)
        return cls(tuple(out))

    # --- queries --------------------------------------------------------------

    def is_zero(self) -> bool:
        return not self.chunks

    def digit_count(self) -> int:
        """Decimal digits of the value (1 for zero)."""
        if not self.chunks:
            return 1
        return len(str(self.chunks[-1])) + BASE_DIGITS * (len(self.chunks) - 1)

    # --- arithmetic -----------------------------------------------------------

    def add(self, other: BigNat) -> BigNat:
        a, b = self.chunks, other.chunks
        if len(a) < len(b):
            a, b = b, a
        out: list[int] = []
        carry = 0
        for i, chunk in enumerate(a):
            s = chunk + carry + (b[i] if i < len(b) else 0)
            if s >= BASE:
                out.append(s - BASE)
                carry = 1
            else:
                out.append(s)
                carry = 0
        if carry:
            out.append(carry)
        return BigNat(_trim(out))

    def multiply(self, other: BigNat) -> BigNat:
        a, b = self.chunks, other.chunks
        if not a or not b:
            return ZERO
        work = [0] * (len(a) + len(b))
        for i, ai in enumerate(a):
            if ai == 0:
                continue
            carry = 0
            for j, bj in enumerate(b):
                cur = work[i + j] + ai * bj + carry
                carry, work[i + j] = divmod(cur, BASE)
            k = i + len(b)
            while carry:
                cur = work[k] + carry
                carry, work[k] = divmod(cur, BASE)
                k += 1
        return BigNat(_trim(work))

    def compare(self, other: BigNat) -> int:
        """Return -1, 0 or 1 as self is less than, equal to or greater than other."""
        a, b = self.chunks, other.chunks
        if len(a) != len(b):
            return -1 if len(a) < len(b) else 1
        for i in range(len(a) - 1, -1, -1):
            if a[i] != b[i]:
                return -1 if a[i] < b[i] else 1
        return 0

    # --- rendering ------------------------------------------------------------

    def to_decimal_string(self) -> str:
        if not self.chunks:
            return "0"
        top = str(self.chunks[-1])
        rest = "".join(f"{c:09d}" for c in reversed(self.chunks[:-1]))
        return top + rest

    # --- operator sugar -------------------------------------------------------

    def __add__(self, other: object) -> BigNat:
        if not isinstance(other, BigNat):
            return NotImplemented
        return self.add(other)

    def __mul__(self, other: object) -> BigNat:
        if not isinstance(other, BigNat):
            return NotImplemented
        return self.multiply(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BigNat):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BigNat):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash(self.chunks)

    def __int__(self) -> int:
        v = 0
        for c in reversed(self.chunks):
            v = v * BASE + c
        return v

    def __str__(self) -> str:
        return self.to_decimal_string()

    def __repr__(self) -> str:
        return f"BigNat({self.to_decimal_string()})"


ZERO = BigNat()
ONE = BigNat((1,))


def from_unsigned(v: int) -> BigNat:
    return BigNat.from_unsigned(v)


def add(a: BigNat, b: BigNat) -> BigNat:
    return a.add(b)


def multiply(a: BigNat, b: BigNat) -> BigNat:
    return a.multiply(b)


def compare(a: BigNat, b: BigNat) -> int:
    return a.compare(b)


def to_decimal_string(a: BigNat) -> str:
    return a.to_decimal_string()
