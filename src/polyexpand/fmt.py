# src/polyexpand/fmt.py
from __future__ import annotations

import re
from collections.abc import Sequence

from colorama import Fore, Style

from polyexpand.bignat import ONE, BigNat
from polyexpand.evaluate import Evaluation, TermRecord
from polyexpand.runtime import CFG

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(s: str | None) -> str:
    """Return s with ANSI escape sequences removed."""
    return "" if s is None else ANSI_RE.sub("", s)


def abbr_digits(s: str, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate a long decimal string as first<head>…last<tail>."""
    if len(s) <= threshold or head + tail >= len(s):
        return s
    return f"{s[:head]}{ellipsis}{s[-tail:]}"


def format_number(v: BigNat, *, abbreviate: bool | None = None) -> str:
    """Decimal text of v, shortened per FORMATTING.* when DISPLAY.ABBREVIATE is on."""
    s = v.to_decimal_string()
    if abbreviate is None:
        abbreviate = bool(CFG("DISPLAY.ABBREVIATE", False))
    if not abbreviate:
        return s
    return abbr_digits(
        s,
        int(CFG("FORMATTING.NUM_ABBR_HEAD", 12)),
        int(CFG("FORMATTING.NUM_ABBR_TAIL", 12)),
        int(CFG("FORMATTING.NUM_ABBR_THRESHOLD", 40)),
        CFG("FORMATTING.ELLIPSIS", "…"),
    )


def format_row(coefficients: Sequence[BigNat]) -> str:
    """'{ 1, 4, 6, 4, 1 }'"""
    return "{ " + ", ".join(format_number(c) for c in coefficients) + " }"


def format_polynomial(coefficients: Sequence[BigNat], var: str = "x") -> str:
    """
    Render sum C[i] * var^(n-i) highest power first, e.g.
    'x^4 + 4*x^3 + 6*x^2 + 4*x + 1'.

    Coefficient 1 is omitted on non-constant terms; zero terms are skipped.
    """
    n = len(coefficients) - 1
    parts: list[str] = []
    for i, c in enumerate(coefficients):
        if c.is_zero():
            continue
        p = n - i
        show_c = p == 0 or c > ONE
        body = format_number(c) if show_c else ""
        if p > 0:
            if show_c:
                body += "*"
            body += var if p == 1 else f"{var}^{p}"
        parts.append(body)
    return " + ".join(parts) if parts else "0"


def format_term_line(rec: TermRecord, x: int) -> str:
    """'Term (6*x^2): 6 * (2^2) = 6 * 4 = 24'"""
    c = format_number(rec.coefficient)
    return (
        f"Term ({c}*x^{rec.exponent}): "
        f"{c} * ({x}^{rec.exponent}) = "
        f"{c} * {format_number(rec.power_value)} = {format_number(rec.term)}"
    )


def format_cross_check(ev: Evaluation) -> list[str]:
    lines = [
        f"Check: ({ev.x} + 1)^{ev.n} = {ev.x + 1}^{ev.n} = {format_number(ev.cross_check)}",
    ]
    if ev.identity_holds:
        lines.append(f"{Fore.GREEN}(The results match){Style.RESET_ALL}")
    else:
        lines.append(f"{Fore.RED}{Style.BRIGHT}(Error: the results do NOT match){Style.RESET_ALL}")
    return lines


def format_duration(seconds: float) -> str:
    """ms if <1s; s with millis if <60s; else mm:ss.mmm (and hh:mm:ss.mmm if ≥1h)."""
    MAX_SECONDS = 60
    if seconds < 1:
        return f"{seconds * 1000:.3f} ms"
    if seconds < MAX_SECONDS:
        return f"{seconds:.3f} s"
    m, s = divmod(seconds, MAX_SECONDS)
    if m < MAX_SECONDS:
        return f"{int(m)}:{s:06.3f}"               # mm:ss.mmm
    h, m = divmod(int(m), MAX_SECONDS)
    return f"{h}:{m:02d}:{s:06.3f}"                # hh:mm:ss.mmm
