"""Fixed-grid density heat-map with intensity-mapped opacity."""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

import numpy as np

from ..core.config import ChartDefaults
from ..core.logging_config import get_logger
from ..render.surface import Surface, logical_size, prepare

logger = get_logger(__name__)

IntensityFn = Callable[[int, int], float]


@dataclass(frozen=True)
class HeatCell:
    row: int
    col: int
    x: float
    y: float
    width: float
    height: float
    intensity: float
    alpha: float


def random_intensity(seed: int | None = None) -> IntensityFn:
    """Uniform ``[0, 1)`` intensities for demos; pass a seed for repeatable output."""
    rng = np.random.default_rng(seed)

    def intensity(row: int, col: int) -> float:
        return float(rng.random())

    return intensity


def _clamp_intensity(value: float) -> float:
    if not math.isfinite(value):
        return 0.0
    return min(1.0, max(0.0, value))


def heat_cells(
    width: float, height: float, intensity: IntensityFn, defaults: ChartDefaults
) -> list[HeatCell]:
    pad = defaults.heat_pad
    if width - pad * 2 <= 0 or height - pad * 2 <= 0:
        return []

    cell_w = (width - pad * 2) / defaults.heat_cols
    cell_h = (height - pad * 2) / defaults.heat_rows
    cells = []
    for row in range(defaults.heat_rows):
        for col in range(defaults.heat_cols):
            value = _clamp_intensity(intensity(row, col))
            cells.append(
                HeatCell(
                    row=row,
                    col=col,
                    x=pad + col * cell_w,
                    y=pad + row * cell_h,
                    width=max(0.0, cell_w - defaults.heat_gutter),
                    height=max(0.0, cell_h - defaults.heat_gutter),
                    intensity=value,
                    alpha=defaults.heat_min_alpha + value * defaults.heat_alpha_span,
                )
            )
    return cells


def render_heat(
    surface: Surface,
    intensity: IntensityFn | None = None,
    defaults: ChartDefaults | None = None,
) -> list[HeatCell]:
    """Draw the heat grid, one filled rectangle per cell.

    Args:
        surface: Mounted surface; its buffer is re-sized (and so cleared)
        intensity: Called as ``intensity(row, col)`` for every cell, row by row.
            Defaults to unseeded random values.
        defaults: Layout constants (defaults to ChartDefaults())

    Returns:
        The cells that were drawn, in logical pixels
    """
    d = defaults or ChartDefaults()
    ctx = prepare(surface)
    width, height = logical_size(surface)

    cells = heat_cells(width, height, intensity or random_intensity(), d)
    r, g, b = d.heat_rgb
    for cell in cells:
        ctx.fill_style = f"rgba({r},{g},{b},{cell.alpha:g})"
        ctx.fill_rect(cell.x, cell.y, cell.width, cell.height)

    logger.debug(f"Rendered heat map with {len(cells)} cells")
    return cells
