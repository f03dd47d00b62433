"""Tests for surface preparation and device pixel ratio handling."""

from __future__ import annotations

import math

import pytest

from pulse_charts.core.errors import SurfaceUnavailableError
from pulse_charts.render.surface import LinearGradient, logical_size, pixel_ratio, prepare

from .conftest import FakeSurface


class TestPrepare:
    """Test the prepare() contract."""

    def test_buffer_sized_by_pixel_ratio(self) -> None:
        surface = FakeSurface(300, 120, device_pixel_ratio=2)
        prepare(surface)
        assert surface.buffer_size == (600, 240)

    def test_context_scaled_by_pixel_ratio(self) -> None:
        surface = FakeSurface(300, 120, device_pixel_ratio=1.5)
        ctx = prepare(surface)
        assert ctx.named("scale")[0].args == (1.5, 1.5)

    def test_fractional_buffer_rounds(self) -> None:
        surface = FakeSurface(101, 33, device_pixel_ratio=1.25)
        prepare(surface)
        assert surface.buffer_size == (126, 41)

    def test_zero_size_surface(self) -> None:
        """A collapsed container is a normal state, not an error."""
        surface = FakeSurface(0, 0, device_pixel_ratio=2)
        prepare(surface)
        assert surface.buffer_size == (0, 0)

    @pytest.mark.parametrize("width,height", [(-10, 50), (50, -1), (math.nan, 20), (math.inf, 5)])
    def test_invalid_geometry_clamps_to_zero(self, width: float, height: float) -> None:
        surface = FakeSurface(width, height)
        prepare(surface)
        assert 0 in surface.buffer_size

    def test_missing_context_is_fatal(self) -> None:
        surface = FakeSurface(100, 100)
        surface.get_context = lambda: None  # type: ignore[method-assign]
        with pytest.raises(SurfaceUnavailableError):
            prepare(surface)


@pytest.mark.parametrize("ratio,expected", [(2, 2.0), (0, 1.0), (-1, 1.0), (math.nan, 1.0)])
def test_pixel_ratio_fallback(ratio: float, expected: float) -> None:
    assert pixel_ratio(FakeSurface(10, 10, device_pixel_ratio=ratio)) == expected


def test_logical_size() -> None:
    assert logical_size(FakeSurface(320, -4)) == (320.0, 0.0)


class TestLinearGradient:
    def test_stops_kept_sorted(self) -> None:
        gradient = LinearGradient(0, 0, 0, 10)
        gradient.add_color_stop(1, "#00000000")
        gradient.add_color_stop(0, "#ff0000")
        assert [offset for offset, _ in gradient.stops] == [0, 1]

    def test_offset_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="offset"):
            LinearGradient(0, 0, 0, 10).add_color_stop(1.5, "#ff0000")
