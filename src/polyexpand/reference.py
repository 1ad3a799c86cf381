# src/polyexpand/reference.py
"""
Independent answers from sympy and gmpy2, used to double-check the BigNat path.
"""

from __future__ import annotations

import gmpy2
from sympy import binomial

from polyexpand.evaluate import Evaluation


def reference_row(n: int) -> list[int]:
    return [int(binomial(n, i)) for i in range(n + 1)]


def reference_power(base: int, exponent: int) -> int:
    if exponent <= 0:
        return 1
    return int(gmpy2.mpz(base) ** exponent)


def verify_evaluation(ev: Evaluation) -> list[str]:
    """Return a description of every value that disagrees with the oracle (empty = all good)."""
    problems: list[str] = []
    coeffs = reference_row(ev.n)
    if len(ev.terms) != len(coeffs):
        problems.append(f"expected {len(coeffs)} terms, got {len(ev.terms)}")
        return problems

    running = 0
    for rec, c in zip(ev.terms, coeffs):
        pv = reference_power(ev.x, rec.exponent)
        running += c * pv
        if int(rec.coefficient) != c:
            problems.append(f"C({ev.n},{rec.index}) = {rec.coefficient}, expected {c}")
        if int(rec.power_value) != pv:
            problems.append(f"{ev.x}^{rec.exponent} = {rec.power_value}, expected {pv}")
        if int(rec.term) != c * pv:
            problems.append(f"term {rec.index} = {rec.term}, expected {c * pv}")
        if int(rec.running_total) != running:
            problems.append(f"running total after term {rec.index} = {rec.running_total}, expected {running}")

    expected = reference_power(ev.x + 1, ev.n)
    if int(ev.total) != running:
        problems.append(f"total = {ev.total}, expected {running}")
    if int(ev.cross_check) != expected:
        problems.append(f"({ev.x}+1)^{ev.n} = {ev.cross_check}, expected {expected}")
    return problems
