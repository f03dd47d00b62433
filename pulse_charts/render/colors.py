"""Color and font string parsing for the raster context."""

from __future__ import annotations

import re
from dataclasses import dataclass

from matplotlib.colors import to_rgba

RGBA = tuple[float, float, float, float]

_CSS_RGB = re.compile(r"^rgba?\(\s*([^)]*)\)$", re.IGNORECASE)
_FONT_SIZE = re.compile(r"(\d+(?:\.\d+)?)px")

# CSS generic families that matplotlib knows under another name
_GENERIC_FAMILIES = {
    "system-ui": "sans-serif",
    "ui-sans-serif": "sans-serif",
    "ui-monospace": "monospace",
}


def parse_color(color: str) -> RGBA:
    """Parse a hex, named or CSS ``rgb()``/``rgba()`` color into RGBA floats.

    Raises:
        ValueError: If the string is not a recognisable color
    """
    match = _CSS_RGB.match(color.strip())
    if not match:
        return to_rgba(color)

    parts = [p.strip() for p in match.group(1).split(",")]
    if len(parts) not in (3, 4):
        raise ValueError(f"Invalid CSS color: {color!r}")
    r, g, b = (float(p) / 255.0 for p in parts[:3])
    a = float(parts[3]) if len(parts) == 4 else 1.0
    return (_unit(r), _unit(g), _unit(b), _unit(a))


def with_alpha(color: str, alpha: float) -> RGBA:
    """Return ``color`` with its alpha multiplied by ``alpha``."""
    r, g, b, a = parse_color(color)
    return (r, g, b, _unit(a * alpha))


def css_rgba(color: str, alpha: float) -> str:
    """Format ``color`` with its alpha multiplied by ``alpha`` as a CSS ``rgba()`` string."""
    r, g, b, a = with_alpha(color, alpha)
    return f"rgba({round(r * 255)},{round(g * 255)},{round(b * 255)},{a:g})"


def _unit(value: float) -> float:
    return min(1.0, max(0.0, value))


@dataclass(frozen=True)
class FontSpec:
    size_px: float
    weight: str
    families: tuple[str, ...]


def parse_font(font: str) -> FontSpec:
    """Parse a CSS-like font shorthand such as ``"bold 12px Inter, system-ui"``."""
    size_match = _FONT_SIZE.search(font)
    if not size_match:
        return FontSpec(size_px=10.0, weight="normal", families=("sans-serif",))

    head = font[: size_match.start()].split()
    weight = "bold" if "bold" in head else "normal"

    families = []
    for family in font[size_match.end():].split(","):
        family = family.strip().strip("'\"")
        if family:
            families.append(_GENERIC_FAMILIES.get(family, family))
    return FontSpec(
        size_px=float(size_match.group(1)),
        weight=weight,
        families=tuple(families) or ("sans-serif",),
    )
