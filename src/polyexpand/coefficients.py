# src/polyexpand/coefficients.py
from __future__ import annotations

from polyexpand.bignat import ONE, BigNat


def row(n: int) -> list[BigNat]:
    """
    Row n of Pascal's triangle, [C(n,0), ..., C(n,n)], as BigNat values.

    Built upward from row 0 with C(k,i) = C(k-1,i-1) + C(k-1,i); only
    additions, no factorials or division.
    """
    if n < 0:
        raise ValueError(f"degree must be non-negative, got {n}")

    previous: list[BigNat] = [ONE]
    for degree in range(1, n + 1):
        current = [ONE] * (degree + 1)
        for i in range(1, degree):
            current[i] = previous[i - 1].add(previous[i])
        previous = current
    return previous
