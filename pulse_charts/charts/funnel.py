"""Conversion funnel drawn as a column of stacked, tapering trapezoids."""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.config import ChartDefaults
from ..core.logging_config import get_logger
from ..core.models import Series
from ..render.surface import Surface, logical_size, prepare

logger = get_logger(__name__)


@dataclass(frozen=True)
class Trapezoid:
    label: str
    value: float
    top: float
    bottom: float
    top_left: float
    top_right: float
    bottom_left: float
    bottom_right: float
    color: str

    @property
    def top_width(self) -> float:
        return self.top_right - self.top_left

    @property
    def bottom_width(self) -> float:
        return self.bottom_right - self.bottom_left

    @property
    def caption(self) -> str:
        return f"{self.label}: {format_value(self.value)}"


def format_value(value: float) -> str:
    """Format with thousands separators, dropping a zero fraction."""
    if math.isfinite(value) and float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def taper_ratio(
    current: float, following: float | None, taper: float = 0.95, fallback: float = 0.6
) -> float:
    """Width ratio between a stage's bottom and top edges.

    The next stage's share of this one, shrunk by ``taper`` and capped at 1.
    Falls back to ``fallback`` for the last stage and whenever the share is
    not a positive finite number.
    """
    if following is None or current == 0:
        return fallback
    ratio = following / current * taper
    if not math.isfinite(ratio) or ratio <= 0:
        return fallback
    return min(ratio, 1.0)


def funnel_geometry(
    stages: Series, width: float, height: float, defaults: ChartDefaults
) -> list[Trapezoid]:
    pad = defaults.funnel_pad
    full_width = width - pad * 2
    if not stages or full_width <= 0 or height - pad * 2 <= 0:
        return []

    band = (height - pad * 2) / len(stages)
    drawn = max(0.0, band - defaults.funnel_gap)
    palette = defaults.funnel_palette

    trapezoids = []
    top_width, left = full_width, pad
    for i, stage in enumerate(stages):
        following = stages[i + 1].value if i + 1 < len(stages) else None
        ratio = taper_ratio(
            stage.value, following, defaults.funnel_taper, defaults.funnel_fallback_ratio
        )
        bottom_width = top_width * ratio
        bottom_left = left + (top_width - bottom_width) / 2
        top = pad + i * band

        trapezoids.append(
            Trapezoid(
                label=stage.label,
                value=stage.value,
                top=top,
                bottom=top + drawn,
                top_left=left,
                top_right=left + top_width,
                bottom_left=bottom_left,
                bottom_right=bottom_left + bottom_width,
                color=palette[i % len(palette)],
            )
        )
        top_width, left = bottom_width, bottom_left
    return trapezoids


def render_funnel(
    surface: Surface, stages: Series, defaults: ChartDefaults | None = None
) -> list[Trapezoid]:
    """Draw one trapezoid per stage, each centered under the one above.

    Args:
        surface: Mounted surface; its buffer is re-sized (and so cleared)
        stages: Stages top to bottom, conventionally decreasing
        defaults: Layout constants (defaults to ChartDefaults())

    Returns:
        The trapezoids that were drawn, in logical pixels
    """
    d = defaults or ChartDefaults()
    ctx = prepare(surface)
    width, height = logical_size(surface)

    trapezoids = funnel_geometry(stages, width, height, d)
    for trap in trapezoids:
        ctx.begin_path()
        ctx.move_to(trap.top_left, trap.top)
        ctx.line_to(trap.top_right, trap.top)
        ctx.line_to(trap.bottom_right, trap.bottom)
        ctx.line_to(trap.bottom_left, trap.bottom)
        ctx.close_path()
        ctx.fill_style = trap.color
        ctx.global_alpha = d.funnel_alpha
        ctx.fill()
        ctx.global_alpha = 1

        ctx.fill_style = d.funnel_label_color
        ctx.font = d.funnel_font
        ctx.fill_text(trap.caption, trap.top_left + 12, trap.top + 16)

    logger.debug(f"Rendered funnel with {len(trapezoids)} stages")
    return trapezoids
