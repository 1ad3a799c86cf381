# src/polyexpand/artifact.py
"""
Results file written by the driver after an evaluation.

One 'label: value' line per datum: degree, x, the three phase durations in
milliseconds and the decimal result.
"""

from __future__ import annotations

import os
from pathlib import Path

from polyexpand.bignat import BigNat
from polyexpand.output_manager import resolve_output_path
from polyexpand.runtime import CFG
from polyexpand.timing import PhaseTimings
from polyexpand.workspace import workspace_dir

DEFAULT_TRIGGER_DEGREE = 100
DEFAULT_RESULTS_FILE = "resultados_n100.txt"


def should_write(n: int, explicit_path: str | None = None) -> bool:
    """True when an explicit path was given or n equals RESULTS.TRIGGER_DEGREE."""
    if explicit_path:
        return True
    trigger = CFG("RESULTS.TRIGGER_DEGREE", DEFAULT_TRIGGER_DEGREE)
    try:
        trigger = int(trigger)
    except (TypeError, ValueError):
        return False
    return trigger >= 0 and n == trigger


def results_path(explicit_path: str | None = None) -> Path:
    name = explicit_path or str(CFG("RESULTS.FILE", DEFAULT_RESULTS_FILE) or DEFAULT_RESULTS_FILE)
    return Path(resolve_output_path(name, str(workspace_dir())))


def render_results(n: int, x: int, timings: PhaseTimings, result: BigNat) -> str:
    ms = timings.as_ms()
    lines = [
        f"n: {n}",
        f"x: {x}",
        f"generation_ms: {ms['generation']:.3f}",
        f"rendering_ms: {ms['rendering']:.3f}",
        f"evaluation_ms: {ms['evaluation']:.3f}",
        f"result: {result.to_decimal_string()}",
    ]
    return "\n".join(lines) + "\n"


def write_results(path: Path, n: int, x: int, timings: PhaseTimings, result: BigNat) -> Path:
    """Write (overwrite) the results file and return its path; OSError propagates."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        fh.write(render_results(n, x, timings, result))
    return path


def parse_results(text: str) -> dict[str, str]:
    """Read back a results file into {label: value}."""
    out: dict[str, str] = {}
    for line in text.splitlines():
        if ":" not in line:
            continue
        label, _, value = line.partition(":")
        out[label.strip()] = value.strip()
    return out
