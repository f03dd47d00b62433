"""Gradient-filled line chart for an ordered label/value series."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass, field

from ..core.config import ChartDefaults
from ..core.logging_config import get_logger
from ..core.models import ChartStyle, Series
from ..render.colors import css_rgba
from ..render.scaling import scale
from ..render.surface import Surface, logical_size, prepare

logger = get_logger(__name__)

# 0xAA of 0xFF at the top of the area fill
AREA_TOP_ALPHA = 170 / 255
RANGE_PADDING = 0.05


@dataclass(frozen=True)
class LineGeometry:
    points: list[tuple[float, float]] = field(default_factory=list)
    gridlines: list[float] = field(default_factory=list)
    top: float = 0.0
    baseline: float = 0.0
    label: str | None = None


def padded_range(values: list[float]) -> tuple[float, float]:
    """Widen ``[min, max]`` by 5% of each end's magnitude, within the float range."""
    lo, hi = min(values), max(values)
    limit = sys.float_info.max
    return (
        max(lo - abs(lo) * RANGE_PADDING, -limit),
        min(hi + abs(hi) * RANGE_PADDING, limit),
    )


def line_geometry(
    series: Series, width: float, height: float, pad: float, gridlines: int = 4
) -> LineGeometry:
    top, baseline = pad, height - pad
    if gridlines > 1:
        grid = [top + (baseline - top) * i / (gridlines - 1) for i in range(gridlines)]
    else:
        grid = [top] * gridlines

    points_in = [p for p in series if math.isfinite(p.value)]
    if len(points_in) != len(series):
        logger.debug(f"Dropped {len(series) - len(points_in)} non-finite points from line series")
    if not points_in:
        return LineGeometry(gridlines=grid, top=top, baseline=baseline)

    lo, hi = padded_range([p.value for p in points_in])
    if len(points_in) == 1:
        xs = [width / 2]
    else:
        step = (width - pad * 2) / (len(points_in) - 1)
        xs = [pad + i * step for i in range(len(points_in))]

    points = [
        (x, scale(p.value, lo, hi, top, baseline))
        for x, p in zip(xs, points_in, strict=True)
    ]
    return LineGeometry(
        points=points,
        gridlines=grid,
        top=top,
        baseline=baseline,
        label=points_in[-1].label,
    )


def render_line(
    surface: Surface,
    series: Series,
    style: ChartStyle | None = None,
    defaults: ChartDefaults | None = None,
) -> LineGeometry:
    """Draw a gridded, gradient-filled area/line chart.

    Args:
        surface: Mounted surface; its buffer is re-sized (and so cleared)
        series: Ordered points, left to right. Not modified.
        style: Line color (defaults to ChartStyle())
        defaults: Layout constants (defaults to ChartDefaults())

    Returns:
        The geometry that was drawn, in logical pixels
    """
    style = style or ChartStyle()
    d = defaults or ChartDefaults()
    ctx = prepare(surface)
    width, height = logical_size(surface)
    pad = d.line_pad

    geometry = line_geometry(series, width, height, pad, d.line_gridlines)

    ctx.stroke_style = d.line_grid_color
    ctx.line_width = 1
    for y in geometry.gridlines:
        ctx.begin_path()
        ctx.move_to(pad, y)
        ctx.line_to(width - pad, y)
        ctx.stroke()

    if not geometry.points:
        logger.debug("Empty line series, drew grid only")
        return geometry

    ctx.begin_path()
    first_x, first_y = geometry.points[0]
    ctx.move_to(first_x, first_y)
    for x, y in geometry.points[1:]:
        ctx.line_to(x, y)

    ctx.line_width = d.line_width
    ctx.stroke_style = style.color
    ctx.stroke()

    gradient = ctx.create_linear_gradient(0, geometry.top, 0, geometry.baseline)
    gradient.add_color_stop(0, css_rgba(style.color, AREA_TOP_ALPHA))
    gradient.add_color_stop(1, css_rgba(style.color, 0.0))

    last_x = geometry.points[-1][0]
    ctx.line_to(last_x, geometry.baseline)
    ctx.line_to(first_x, geometry.baseline)
    ctx.close_path()
    ctx.fill_style = gradient
    ctx.fill()

    ctx.fill_style = d.line_label_color
    ctx.font = d.line_font
    ctx.fill_text(geometry.label or "", width - pad - d.line_label_offset, height - 6)

    logger.debug(f"Rendered line chart with {len(geometry.points)} points")
    return geometry
