"""Outlier-robust colour scaling for the calendar heatmap."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from . import config
from .domain import Domain
from .grid import CalendarGrid

EMPTY_COLOR = "transparent"


@dataclass(frozen=True)
class ScaleContext:
    max_count: int
    max_amount_p80: float
    min_amount: float


def percentile_cap(amounts: np.ndarray, percentile: float = config.PERCENTILE) -> float:
    """Return the clipping cap for strictly positive ``amounts``.

    Uses the nearest-rank value at ``floor(n * percentile)`` of the ascending
    amounts, never below 1. With no amounts the cap is 1.
    """

    positive = np.sort(amounts[amounts > 0])
    if positive.size == 0:
        return 1.0
    index = min(math.floor(positive.size * percentile), positive.size - 1)
    return float(max(positive[index], 1.0))


def compute_scale(grid: CalendarGrid) -> ScaleContext:
    amounts = np.array([cell.amount for cell in grid.cells()], dtype=float)
    counts = [cell.count for cell in grid.cells()]
    positive = amounts[amounts > 0]
    return ScaleContext(
        max_count=max(max(counts, default=0), 1),
        max_amount_p80=percentile_cap(amounts),
        min_amount=float(positive.min()) if positive.size else 0.0,
    )


def intensity(amount: float, scale: ScaleContext) -> float | None:
    """Map ``amount`` onto ``(0, 1]``; ``None`` marks an empty cell.

    Everything at or above the 80th percentile renders at full intensity.
    """

    if amount == 0:
        return None
    value = min(amount / scale.max_amount_p80, 1.0)
    # Refunds can leave a day net negative; show it at the faintest shade.
    return float(max(value, np.nextafter(0.0, 1.0)))


def rgba(domain: Domain, opacity: float) -> str:
    r, g, b = domain.base_rgb
    return f"rgba({r}, {g}, {b}, {opacity:.4g})"


def cell_color(amount: float, scale: ScaleContext, domain: Domain) -> str:
    value = intensity(amount, scale)
    if value is None:
        return EMPTY_COLOR
    return rgba(domain, max(config.MIN_CELL_OPACITY, value))
