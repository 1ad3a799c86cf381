# src/polyexpand/timing.py
from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

PHASES = ("generation", "rendering", "evaluation")


@dataclass
class PhaseTimings:
    """Wall-clock seconds spent in each driver phase."""
    generation: float = 0.0
    rendering: float = 0.0
    evaluation: float = 0.0

    def as_ms(self) -> dict[str, float]:
        return {name: getattr(self, name) * 1000.0 for name in PHASES}


class PhaseTimer:
    def __init__(self):
        self.timings = PhaseTimings()

    @contextmanager
    def phase(self, name: str) -> Iterator[None]:
        if name not in PHASES:
            raise ValueError(f"unknown phase '{name}' (expected one of {', '.join(PHASES)})")
        start = time.perf_counter()
        try:
            yield
        finally:
            setattr(self.timings, name, getattr(self.timings, name) + time.perf_counter() - start)
