# runtime.py
from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import Any

from colorama import Fore, Style

# Only the cross-checking oracle needs these
VERIFY_DEPS = ("sympy", "gmpy2")


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False   # [debug] lines and tracebacks
    verify: bool = False  # cross-check results against sympy/gmpy2

    def apply(self, settings: Any) -> None:
        """Install a loaded profile (config.Settings) or a plain nested dict."""
        if isinstance(settings, dict):
            self.profile_name = "default"
            self.settings = dict(settings)
        else:
            self.profile_name = settings.name
            self.settings = dict(settings.as_dict())

        for key, attr in (("BEHAVIOUR.DEBUG", "debug"), ("BEHAVIOUR.VERIFY", "verify")):
            flag = self.get(key)
            if isinstance(flag, bool):
                setattr(self, attr, flag)

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup, e.g. 'RESULTS.TRIGGER_DEGREE'."""
        cur: Any = self.settings
        for part in (key or "").split("."):
            if not isinstance(cur, dict) or part not in cur:
                return default
            cur = cur[part]
        return cur


# --- Context management ---

_current_runtime: ContextVar[Runtime | None] = ContextVar("polyexpand_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = Runtime()
        _current_runtime.set(rt)
    return rt


def reset() -> Runtime:
    """Install a fresh Runtime in the current context and return it."""
    rt = Runtime()
    _current_runtime.set(rt)
    return rt


def APPLY(settings: Any) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


# ---- Dependency check --------------------------------------------------------

def ensure_runtime_deps(strict: bool = True, *, verify: bool = False) -> bool:
    """
    Check that the verification libraries can be imported, without importing them.
    Nothing is required unless verify is on.
    If strict=True, prints a friendly error and returns False when one is missing.
    """
    if not verify:
        return True
    missing = [name for name in VERIFY_DEPS if find_spec(name) is None]
    if not missing:
        return True

    print(
        f"{Fore.RED}{Style.BRIGHT}\nMissing dependencies for --verify:{Style.RESET_ALL} "
        + ", ".join(missing)
        + f"\nInstall with: {Fore.YELLOW}pip install {' '.join(missing)}{Style.RESET_ALL}"
    )
    return not strict
