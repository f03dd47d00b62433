"""Surface adapter: drawing-context capability and DPI-aware preparation.

A surface is a logical container (layout size plus device pixel ratio) that
can resize its physical backing buffer and hand out an immediate-mode 2D
drawing context. Renderers never touch host globals; everything they need
arrives on the surface object.

Usage:
    from pulse_charts.render.raster import RasterSurface
    from pulse_charts.render.surface import prepare

    surface = RasterSurface(300, 120, device_pixel_ratio=2)
    ctx = prepare(surface)  # buffer is now 600x240, ctx draws in logical px
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Protocol

from ..core.errors import SurfaceUnavailableError
from ..core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class LinearGradient:
    """Linear gradient brush between two points in logical coordinates."""

    x0: float
    y0: float
    x1: float
    y1: float
    stops: list[tuple[float, str]] = field(default_factory=list)

    def add_color_stop(self, offset: float, color: str) -> None:
        if not 0.0 <= offset <= 1.0:
            raise ValueError(f"Gradient stop offset must be within [0, 1], got {offset}")
        self.stops.append((offset, color))
        self.stops.sort(key=lambda stop: stop[0])


Brush = str | LinearGradient


class DrawingContext(Protocol):
    stroke_style: Brush
    fill_style: Brush
    line_width: float
    global_alpha: float
    font: str

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def close_path(self) -> None: ...

    def stroke(self) -> None: ...

    def fill(self) -> None: ...

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None: ...

    def fill_text(self, text: str, x: float, y: float) -> None: ...

    def scale(self, sx: float, sy: float) -> None: ...

    def create_linear_gradient(
        self, x0: float, y0: float, x1: float, y1: float
    ) -> LinearGradient: ...


class Surface(Protocol):
    client_width: float
    client_height: float
    device_pixel_ratio: float

    def resize_buffer(self, width: int, height: int) -> None: ...

    def get_context(self) -> DrawingContext | None: ...


def _clamp_extent(value: float) -> float:
    if value is None or not math.isfinite(value) or value < 0:
        return 0.0
    return float(value)


def pixel_ratio(surface: Surface) -> float:
    ratio = surface.device_pixel_ratio
    if ratio is None or not math.isfinite(ratio) or ratio <= 0:
        return 1.0
    return float(ratio)


def logical_size(surface: Surface) -> tuple[float, float]:
    """Return the surface's layout size, clamping collapsed containers to zero."""
    return _clamp_extent(surface.client_width), _clamp_extent(surface.client_height)


def prepare(surface: Surface) -> DrawingContext:
    """Size the backing buffer for the device pixel ratio and return a scaled context.

    Args:
        surface: Mounted surface to draw on

    Returns:
        Drawing context whose coordinates are logical pixels

    Raises:
        SurfaceUnavailableError: If the surface cannot provide a drawing context
    """
    width, height = logical_size(surface)
    ratio = pixel_ratio(surface)

    surface.resize_buffer(round(width * ratio), round(height * ratio))
    ctx = surface.get_context()
    if ctx is None:
        raise SurfaceUnavailableError(f"{type(surface).__name__} did not provide a 2D context")

    ctx.scale(ratio, ratio)
    logger.debug(
        "Prepared surface",
        extra={"logical": (width, height), "device_pixel_ratio": ratio},
    )
    return ctx
