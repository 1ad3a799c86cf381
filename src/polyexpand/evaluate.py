# src/polyexpand/evaluate.py
"""
Term-by-term evaluation of f(x) = sum C(n,i) * x^(n-i), checked against (x+1)^n.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from polyexpand.bignat import ZERO, BigNat
from polyexpand.coefficients import row
from polyexpand.power import power


class IdentityMismatchError(AssertionError):
    """The term sum and (x+1)^n disagree. Always an internal defect."""


@dataclass(frozen=True)
class TermRecord:
    index: int               # i, position in the coefficient row
    coefficient: BigNat      # C(n, i)
    exponent: int            # n - i
    power_value: BigNat      # x^(n-i)
    term: BigNat             # C(n, i) * x^(n-i)
    running_total: BigNat    # sum of terms 0..i


@dataclass(frozen=True)
class Evaluation:
    n: int
    x: int
    terms: tuple[TermRecord, ...]
    total: BigNat
    cross_check: BigNat
    identity_holds: bool

    def ensure_identity(self) -> Evaluation:
        if not self.identity_holds:
            raise IdentityMismatchError(
                f"f({self.x}) = {self.total} but ({self.x}+1)^{self.n} = {self.cross_check}"
            )
        return self


def _check_x(x: int) -> None:
    if x < 0:
        raise ValueError(
            f"x must be non-negative, got {x}: BigNat has no sign, "
            "so (x+1)^n is only checked for x >= 0"
        )


def evaluate_from_row(coefficients: Sequence[BigNat], x: int) -> Evaluation:
    """Evaluate an already generated coefficient row at x."""
    if not coefficients:
        raise ValueError("coefficient row is empty")
    _check_x(x)

    n = len(coefficients) - 1
    base = BigNat.from_unsigned(x)
    total = ZERO
    terms: list[TermRecord] = []
    for i, c in enumerate(coefficients):
        exponent = n - i
        pv = power(base, exponent)
        term = c.multiply(pv)
        total = total.add(term)
        terms.append(TermRecord(i, c, exponent, pv, term, total))

    cross_check = power(BigNat.from_unsigned(x + 1), n)
    return Evaluation(
        n=n,
        x=x,
        terms=tuple(terms),
        total=total,
        cross_check=cross_check,
        identity_holds=total.compare(cross_check) == 0,
    )


def evaluate(n: int, x: int) -> Evaluation:
    _check_x(x)
    return evaluate_from_row(row(n), x)
