# src/polyexpand/power.py
from __future__ import annotations

from polyexpand.bignat import ONE, BigNat


def power(base: BigNat, exponent: int) -> BigNat:
    """
    base**exponent by square-and-multiply.

    An exponent of zero or below gives BigNat(1); that is the convention,
    not an error.
    """
    result = ONE
    if exponent <= 0:
        return result
    b = base
    while exponent > 0:
        if exponent & 1:
            result = result.multiply(b)
        exponent >>= 1
        if exponent:
            b = b.multiply(b)
    return result
