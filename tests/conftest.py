"""Shared fixtures: a drawing context that records calls instead of drawing."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import pytest

from pulse_charts.core.models import SeriesPoint
from pulse_charts.render.surface import LinearGradient


@dataclass
class Call:
    name: str
    args: tuple[Any, ...]
    fill_style: Any = None
    stroke_style: Any = None
    global_alpha: float = 1.0


class RecordingContext:
    """DrawingContext that keeps every call with the style state at call time."""

    def __init__(self) -> None:
        self.calls: list[Call] = []
        self.stroke_style: Any = "#000000"
        self.fill_style: Any = "#000000"
        self.line_width = 1.0
        self.global_alpha = 1.0
        self.font = "10px sans-serif"

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append(
            Call(name, args, self.fill_style, self.stroke_style, self.global_alpha)
        )

    def begin_path(self) -> None:
        self._record("begin_path")

    def move_to(self, x: float, y: float) -> None:
        self._record("move_to", x, y)

    def line_to(self, x: float, y: float) -> None:
        self._record("line_to", x, y)

    def close_path(self) -> None:
        self._record("close_path")

    def stroke(self) -> None:
        self._record("stroke")

    def fill(self) -> None:
        self._record("fill")

    def fill_rect(self, x: float, y: float, width: float, height: float) -> None:
        self._record("fill_rect", x, y, width, height)

    def fill_text(self, text: str, x: float, y: float) -> None:
        self._record("fill_text", text, x, y)

    def scale(self, sx: float, sy: float) -> None:
        self._record("scale", sx, sy)

    def create_linear_gradient(self, x0: float, y0: float, x1: float, y1: float) -> LinearGradient:
        return LinearGradient(x0, y0, x1, y1)

    def named(self, name: str) -> list[Call]:
        return [c for c in self.calls if c.name == name]

    def coordinates(self) -> list[float]:
        """Every numeric argument passed to a drawing call."""
        return [a for c in self.calls for a in c.args if isinstance(a, float | int)]

    def all_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.coordinates())


class FakeSurface:
    """Surface stand-in that hands out a RecordingContext."""

    def __init__(
        self, client_width: float, client_height: float, device_pixel_ratio: float = 1.0
    ) -> None:
        self.client_width = client_width
        self.client_height = client_height
        self.device_pixel_ratio = device_pixel_ratio
        self.buffer_size: tuple[int, int] | None = None
        self.ctx = RecordingContext()

    def resize_buffer(self, width: int, height: int) -> None:
        self.buffer_size = (width, height)
        self.ctx = RecordingContext()

    def get_context(self) -> RecordingContext:
        return self.ctx


def points(*pairs: tuple[str, float]) -> list[SeriesPoint]:
    return [SeriesPoint(label=label, value=value) for label, value in pairs]


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface(300, 120)
