"""Chart renderers for the dashboard.

Each renderer takes a mounted surface plus a complete dataset slice, sizes
the surface's buffer for its device pixel ratio and redraws from scratch.
Nothing is cached between calls.

Main Components:
    - render_line: gridded, gradient-filled line chart for a series
    - render_funnel: stacked trapezoids whose widths follow stage ratios
    - render_heat: 24x6 grid with intensity-mapped opacity
    - ChartRegistry / render_all: redraw every mounted chart from a Dataset

Usage:
    from pulse_charts.charts import ChartRegistry
    from pulse_charts.core.enums import ChartKind
    from pulse_charts.render.raster import RasterSurface

    registry = ChartRegistry({ChartKind.FUNNEL: RasterSurface(320, 200)})
    registry.render_all(dataset)
"""

from __future__ import annotations

from .funnel import render_funnel
from .heat import random_intensity, render_heat
from .line import render_line
from .registry import ChartRegistry, render_all

__all__ = [
    "ChartRegistry",
    "random_intensity",
    "render_all",
    "render_funnel",
    "render_heat",
    "render_line",
]
