"""
Continuous scales mapping expression values to display coordinates.

Mirrors the d3 scale contract used by the renderers: a scale is callable
(value -> coordinate), has an `invert` (coordinate -> value) and exposes its
`domain` and `range`. Domains may be inverted (high value first) so that high
expression sits at the top of a plot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

import numpy as np


def _tick_step(start: float, stop: float, count: int) -> float:
    step0 = abs(stop - start) / max(count, 1)
    if step0 == 0:
        return 0.0
    step1 = 10 ** math.floor(math.log10(step0))
    error = step0 / step1
    if error >= math.sqrt(50):
        step1 *= 10
    elif error >= math.sqrt(10):
        step1 *= 5
    elif error >= math.sqrt(2):
        step1 *= 2
    return step1


@dataclass(frozen=True)
class LinearScale:
    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __call__(self, value):
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return np.full_like(np.asarray(value, dtype=float), r0) if np.ndim(value) else r0
        t = (np.asarray(value, dtype=float) - d0) / (d1 - d0)
        out = r0 + t * (r1 - r0)
        return out if np.ndim(value) else float(out)

    def invert(self, coordinate):
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return np.full_like(np.asarray(coordinate, dtype=float), d0) if np.ndim(coordinate) else d0
        t = (np.asarray(coordinate, dtype=float) - r0) / (r1 - r0)
        out = d0 + t * (d1 - d0)
        return out if np.ndim(coordinate) else float(out)

    def nice(self, count: int = 10) -> "LinearScale":
        """Extend the domain to round tick values, keeping its orientation."""
        d0, d1 = self.domain
        lo, hi = min(d0, d1), max(d0, d1)
        step = _tick_step(lo, hi, count)
        if step == 0:
            return self
        lo = math.floor(lo / step) * step
        hi = math.ceil(hi / step) * step
        domain = (lo, hi) if d0 <= d1 else (hi, lo)
        return replace(self, domain=domain)

    def ticks(self, count: int = 10) -> List[float]:
        d0, d1 = self.domain
        lo, hi = min(d0, d1), max(d0, d1)
        step = _tick_step(lo, hi, count)
        if step == 0:
            return [lo]
        first = math.ceil(lo / step)
        last = math.floor(hi / step)
        return [round(i * step, 12) for i in range(first, last + 1)]


@dataclass(frozen=True)
class LogScale:
    """
    Base-10 log scale. Domain values must be strictly positive.
    """
    domain: Tuple[float, float]
    range: Tuple[float, float]

    def __post_init__(self) -> None:
        if min(self.domain) <= 0:
            raise ValueError(f"Log scale domain must be strictly positive, got {self.domain}")

    def __call__(self, value):
        d0, d1 = (math.log10(d) for d in self.domain)
        r0, r1 = self.range
        t = (np.log10(np.asarray(value, dtype=float)) - d0) / (d1 - d0)
        out = r0 + t * (r1 - r0)
        return out if np.ndim(value) else float(out)

    def invert(self, coordinate):
        d0, d1 = (math.log10(d) for d in self.domain)
        r0, r1 = self.range
        t = (np.asarray(coordinate, dtype=float) - r0) / (r1 - r0)
        out = np.power(10.0, d0 + t * (d1 - d0))
        return out if np.ndim(coordinate) else float(out)

    def ticks(self, count: int = 10) -> List[float]:
        lo, hi = min(self.domain), max(self.domain)
        return [10.0 ** e for e in range(math.ceil(math.log10(lo)), math.floor(math.log10(hi)) + 1)]


def expression_scale(
    values: Sequence[float] | np.ndarray,
    height: float,
    padding: float,
    nice: bool = True,
) -> LinearScale:
    """
    Vertical scale for a parallel-coordinates plot: highest value at the top
    (`padding`), lowest at the bottom (`height - padding`).
    """
    arr = np.asarray(values, dtype=float)
    if arr.size == 0:
        lo, hi = 0.0, 1.0
    else:
        lo, hi = float(np.nanmin(arr)), float(np.nanmax(arr))
    scale = LinearScale(domain=(hi, lo), range=(padding, height - padding))
    return scale.nice() if nice else scale
