"""Raster drawing surface backed by matplotlib's Agg renderer.

RasterSurface owns a physical pixel buffer (a matplotlib Figure whose data
coordinates are buffer pixels) and hands out a RasterContext that speaks the
immediate-mode DrawingContext protocol. Paths are turned into matplotlib
patches as they are filled or stroked, so later commands paint over earlier
ones just like a canvas.

Architecture Notes:
    - Figures are built through the object API, never pyplot, so surfaces
      share no global state and may be rendered from different threads
    - dpi is fixed at 1 so figure inches equal buffer pixels exactly
    - A zero-area buffer has no figure at all and every command is a no-op
"""

from __future__ import annotations

import base64
from functools import lru_cache
from io import BytesIO

import matplotlib
import numpy as np
from matplotlib.axes import Axes
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.font_manager import fontManager
from matplotlib.patches import PathPatch, Rectangle
from matplotlib.path import Path

from ..core.logging_config import get_logger
from .colors import RGBA, parse_color, parse_font, with_alpha
from .surface import Brush, LinearGradient

# Use non-interactive backend for server environments
matplotlib.use("Agg")

logger = get_logger(__name__)

DPI = 1.0
POINTS_PER_INCH = 72.0


def _points(px: float) -> float:
    return px * POINTS_PER_INCH / DPI


GENERIC_FAMILIES = {"serif", "sans-serif", "monospace", "cursive", "fantasy"}


@lru_cache(maxsize=1)
def _installed_families() -> frozenset[str]:
    return frozenset(font.name for font in fontManager.ttflist)


def _usable_families(families: tuple[str, ...]) -> list[str]:
    # matplotlib warns for every family it cannot find
    usable = [f for f in families if f in GENERIC_FAMILIES or f in _installed_families()]
    return usable or ["sans-serif"]


class RasterContext:
    """Immediate-mode 2D context drawing onto a matplotlib Axes."""

    def __init__(self, axes: Axes | None):
        self._axes = axes
        self._sx = 1.0
        self._sy = 1.0
        self._vertices: list[tuple[float, float]] = []
        self._codes: list[int] = []
        self._subpath_start: tuple[float, float] | None = None
        self._zorder = 0

        self.stroke_style: Brush = "#000000"
        self.fill_style: Brush = "#000000"
        self.line_width = 1.0
        self.global_alpha = 1.0
        self.font = "10px sans-serif"

    def scale(self, sx: float, sy: float) -> None:
        self._sx *= sx
        self._sy *= sy

    def create_linear_gradient(self, x0: float, y0: float, x1: float, y1: float) -> LinearGradient:
        return LinearGradient(x0, y0, x1, y1)

    def begin_path(self) -> None:
        self._vertices = []
        self._codes = []
        self._subpath_start = None

    def move_to(self, x: float, y: float) -> None:
        point = self._device(x, y)
        self._vertices.append(point)
        self._codes.append(Path.MOVETO)
        self._subpath_start = point

    def line_to(self, x: float, y: float) -> None:
        if self._subpath_start is None:
            self.move_to(x, y)
            return
        self._vertices.append(self._device(x, y))
        self._codes.append(Path.LINETO)

    def close_path(self) -> None:
        if self._subpath_start is None:
            return
        self._vertices.append(self._subpath_start)
        self._codes.append(Path.CLOSEPOLY)

    def stroke(self) -> None:
        path = self._current_path()
        if self._axes is None or path is None:
            return
        patch = PathPatch(
            path,
            fill=False,
            edgecolor=self._solid(self.stroke_style),
            linewidth=_points(self.line_width * self._sx),
            capstyle="butt",
            joinstyle="miter",
            zorder=self._next_z(),
        )
        self._axes.add_patch(patch)

    def fill(self) -> None:
        path = self._current_path()
        if self._axes is None or path is None:
            return
        if isinstance(self.fill_style, LinearGradient):
            self._fill_gradient(path, self.fill_style)
            return
        patch = PathPatch(
            path,
            facecolor=self._solid(self.fill_style),
            edgecolor="none",
            linewidth=0,
            zorder=self._next_z(),
        )
        self._axes.add_patch(patch)

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        if self._axes is None or width == 0 or height == 0:
            return
        x0, y0 = self._device(x, y)
        rect = Rectangle(
            (x0, y0),
            width * self._sx,
            height * self._sy,
            facecolor=self._solid(self.fill_style),
            edgecolor="none",
            linewidth=0,
            zorder=self._next_z(),
        )
        self._axes.add_patch(rect)

    def fill_text(self, text: str, x: float, y: float) -> None:
        if self._axes is None:
            return
        spec = parse_font(self.font)
        dx, dy = self._device(x, y)
        self._axes.text(
            dx,
            dy,
            text,
            fontsize=_points(spec.size_px * self._sy),
            fontweight=spec.weight,
            fontfamily=_usable_families(spec.families),
            color=self._solid(self.fill_style),
            ha="left",
            va="baseline",
            zorder=self._next_z(),
        )

    def _device(self, x: float, y: float) -> tuple[float, float]:
        return (x * self._sx, y * self._sy)

    def _next_z(self) -> int:
        self._zorder += 1
        return self._zorder

    def _current_path(self) -> Path | None:
        if not self._vertices:
            return None
        return Path(self._vertices, self._codes)

    def _solid(self, brush: Brush) -> RGBA:
        if isinstance(brush, LinearGradient):
            # Gradient strokes fall back to the first stop
            color = brush.stops[0][1] if brush.stops else "#000000"
            return with_alpha(color, self.global_alpha)
        return with_alpha(brush, self.global_alpha)

    def _fill_gradient(self, path: Path, gradient: LinearGradient) -> None:
        clip = PathPatch(path, facecolor="none", edgecolor="none", linewidth=0)
        self._axes.add_patch(clip)

        (xmin, ymin), (xmax, ymax) = path.get_extents().get_points()
        nx = max(1, int(np.ceil(xmax - xmin)))
        ny = max(1, int(np.ceil(ymax - ymin)))
        xs = xmin + (np.arange(nx) + 0.5) * (xmax - xmin) / nx
        ys = ymin + (np.arange(ny) + 0.5) * (ymax - ymin) / ny
        gx, gy = np.meshgrid(xs, ys)

        image = gradient_image(gradient, gx, gy, self._sx, self._sy)
        image[..., 3] *= self.global_alpha

        im = self._axes.imshow(
            image,
            extent=(xmin, xmax, ymax, ymin),
            origin="upper",
            interpolation="nearest",
            aspect="auto",
            zorder=self._next_z(),
        )
        im.set_clip_path(clip)


def gradient_image(
    gradient: LinearGradient, gx: np.ndarray, gy: np.ndarray, sx: float = 1.0, sy: float = 1.0
) -> np.ndarray:
    """Evaluate a linear gradient at device-space sample points.

    Args:
        gradient: Gradient in logical coordinates
        gx: Device-space x coordinates of the samples
        gy: Device-space y coordinates of the samples
        sx: Horizontal logical-to-device scale
        sy: Vertical logical-to-device scale

    Returns:
        Float RGBA array of shape ``gx.shape + (4,)``
    """
    stops = gradient.stops or [(0.0, "#00000000")]
    offsets = np.array([offset for offset, _ in stops])
    colors = np.array([parse_color(color) for _, color in stops])

    x0, y0 = gradient.x0 * sx, gradient.y0 * sy
    dx, dy = gradient.x1 * sx - x0, gradient.y1 * sy - y0
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        t = np.zeros_like(gx)
    else:
        t = np.clip(((gx - x0) * dx + (gy - y0) * dy) / length_sq, 0.0, 1.0)

    image = np.empty(gx.shape + (4,), dtype=float)
    for channel in range(4):
        image[..., channel] = np.interp(t, offsets, colors[:, channel])
    return image


class RasterSurface:
    """In-memory surface with a logical size, pixel ratio and RGBA backing buffer.

    Attributes:
        client_width: Logical (layout) width in pixels
        client_height: Logical (layout) height in pixels
        device_pixel_ratio: Physical pixels per logical pixel
    """

    def __init__(
        self, client_width: float, client_height: float, device_pixel_ratio: float = 1.0
    ):
        self.client_width = client_width
        self.client_height = client_height
        self.device_pixel_ratio = device_pixel_ratio
        self.width = 0
        self.height = 0
        self._figure: Figure | None = None
        self._axes: Axes | None = None

    def resize_buffer(self, width: int, height: int) -> None:
        """Allocate a fresh, transparent buffer; previous drawing is discarded."""
        self.width = max(0, int(width))
        self.height = max(0, int(height))
        self._figure = None
        self._axes = None
        if self.width == 0 or self.height == 0:
            logger.debug("Zero-area buffer, drawing disabled")
            return

        figure = Figure(figsize=(self.width / DPI, self.height / DPI), dpi=DPI)
        FigureCanvasAgg(figure)
        figure.patch.set_alpha(0.0)

        axes = figure.add_axes((0.0, 0.0, 1.0, 1.0))
        axes.set_axis_off()
        axes.set_autoscale_on(False)
        axes.set_xlim(0, self.width)
        axes.set_ylim(self.height, 0)

        self._figure = figure
        self._axes = axes

    def get_context(self) -> RasterContext:
        return RasterContext(self._axes)

    def to_array(self) -> np.ndarray:
        """Rasterize and return the buffer as a ``(height, width, 4)`` uint8 array."""
        if self._figure is None:
            return np.zeros((self.height, self.width, 4), dtype=np.uint8)
        canvas = self._figure.canvas
        canvas.draw()
        return np.asarray(canvas.buffer_rgba()).copy()

    def to_png(self) -> bytes:
        if self._figure is None:
            return b""
        buffer = BytesIO()
        self._figure.canvas.print_png(buffer)
        return buffer.getvalue()

    def to_base64(self) -> str:
        """PNG-encode the buffer as base64 for embedding in HTML."""
        return base64.b64encode(self.to_png()).decode("utf-8")
