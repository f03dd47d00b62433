"""Tests for color and font parsing."""

from __future__ import annotations

import pytest

from pulse_charts.render.colors import css_rgba, parse_color, parse_font, with_alpha


@pytest.mark.parametrize(
    "color,expected",
    [
        ("#ff0000", (1.0, 0.0, 0.0, 1.0)),
        ("#ff000080", (1.0, 0.0, 0.0, 128 / 255)),
        ("white", (1.0, 1.0, 1.0, 1.0)),
        ("rgb(0, 255, 0)", (0.0, 1.0, 0.0, 1.0)),
        ("rgba(148,163,184,.15)", (148 / 255, 163 / 255, 184 / 255, 0.15)),
    ],
)
def test_parse_color(color: str, expected: tuple[float, ...]) -> None:
    assert parse_color(color) == pytest.approx(expected)


def test_parse_color_invalid() -> None:
    with pytest.raises(ValueError):
        parse_color("rgba(1,2)")


def test_with_alpha_multiplies() -> None:
    assert with_alpha("rgba(0,0,0,0.5)", 0.5)[3] == pytest.approx(0.25)


def test_css_rgba() -> None:
    assert css_rgba("#22c55e", 0.5) == "rgba(34,197,94,0.5)"


def test_parse_font() -> None:
    spec = parse_font("bold 12px Inter, system-ui")
    assert spec.size_px == 12
    assert spec.weight == "bold"
    assert spec.families == ("Inter", "sans-serif")


def test_parse_font_without_size() -> None:
    assert parse_font("serif").size_px == 10
