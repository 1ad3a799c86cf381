from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("polyexpand")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .bignat import ONE, ZERO, BigNat
from .coefficients import row
from .evaluate import Evaluation, IdentityMismatchError, TermRecord, evaluate, evaluate_from_row
from .power import power

__all__ = [
    "ONE",
    "ZERO",
    "BigNat",
    "Evaluation",
    "IdentityMismatchError",
    "TermRecord",
    "__version__",
    "evaluate",
    "evaluate_from_row",
    "power",
    "row",
]
