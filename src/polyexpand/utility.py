# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import re
import sys

_INT_RE = re.compile(r"^[+-]?\d[\d_]*$")


class UserInputError(Exception):
    pass


def parse_int(text: str, *, label: str = "value", minimum: int | None = None) -> int:
    """
    Parse user text as a plain decimal integer ('1_000' allowed).
    Raises UserInputError with a one-line message on anything else.
    """
    s = (text or "").strip().replace(" ", "")
    if not _INT_RE.match(s) or s.endswith("_") or "__" in s:
        raise UserInputError(f"Invalid input: {label} must be an integer, got '{text.strip()}'.")
    try:
        value = int(s)
    except ValueError:
        # Python's own digit guard
        raise UserInputError(f"Invalid input: {label} has too many digits.") from None
    if minimum is not None and value < minimum:
        raise UserInputError(f"Invalid input: {label} must be {minimum} or greater, got {value}.")
    return value


def clear_screen(keep_scrollback: bool = False) -> None:
    """
    Clear the terminal screen.
    - On Windows: uses 'cls'
    - On POSIX: ANSI sequences; optionally clear scrollback
    """
    if os.name == "nt":
        os.system("cls")
    else:
        seq = "\033[H\033[2J" if keep_scrollback else "\033[3J\033[H\033[2J"
        sys.stdout.write(seq)
        sys.stdout.flush()


def validate_output_setting(output_file: str | None) -> str | None:
    """
    Validate output setting.
    - None / "" => ok (screen only)
    - "." / "./" / trailing "/" => ok (per-degree directory mode)
    - path/to/file => must not be a reserved name or a source file
    Returns the output_file unchanged, or raises ValueError.
    """
    FORBIDDEN_FILENAMES = {
        ".gitignore",
        "LICENSE",
        "pyproject.toml",
        # Windows reserved device names (case-insensitive on Windows)
        "con", "prn", "aux", "nul",
        "com1", "com2", "com3", "com4", "com5", "com6", "com7", "com8", "com9",
        "lpt1", "lpt2", "lpt3", "lpt4", "lpt5", "lpt6", "lpt7", "lpt8", "lpt9",
    }

    FORBIDDEN_EXTENSIONS = {".py", ".md", ".toml"}

    if not output_file:
        return output_file  # screen only

    if output_file in (".", "./") or output_file.endswith("/"):
        return output_file

    basename = os.path.basename(output_file)
    name_no_ext, ext = os.path.splitext(basename)
    ext = ext.lower()

    if basename.lower() in FORBIDDEN_FILENAMES or name_no_ext.lower() in FORBIDDEN_FILENAMES:
        raise ValueError(f"Forbidden output filename: {basename}")

    if ext in FORBIDDEN_EXTENSIONS:
        raise ValueError(f"Forbidden output file extension: {ext}")

    return output_file


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out
