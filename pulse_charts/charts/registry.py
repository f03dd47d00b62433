"""Dispatcher that redraws every mounted dashboard chart from one dataset."""

from __future__ import annotations

from collections.abc import Callable, Mapping

from ..core.config import ChartDefaults
from ..core.enums import ChartKind, RenderStatus
from ..core.logging_config import get_logger
from ..core.models import ChartStyle, Dataset
from ..render.surface import Surface
from .funnel import render_funnel
from .heat import IntensityFn, render_heat
from .line import render_line

logger = get_logger(__name__)

RenderSummary = dict[ChartKind, RenderStatus]


class ChartRegistry:
    """Map each chart kind to its surface and renderer.

    Surfaces that are not mounted (absent or None) are skipped on every
    render. The registry keeps no state between renders beyond the
    surfaces it was given.
    """

    def __init__(
        self,
        surfaces: Mapping[ChartKind, Surface | None],
        defaults: ChartDefaults | None = None,
        intensity: IntensityFn | None = None,
    ):
        """Initialize the registry.

        Args:
            surfaces: Surface per chart kind; missing kinds are not rendered
            defaults: Layout constants shared by all renderers
            intensity: Heat-map intensity generator (random when None)
        """
        self.surfaces = dict(surfaces)
        self.defaults = defaults or ChartDefaults()
        self.intensity = intensity

    def _renderers(self, dataset: Dataset) -> dict[ChartKind, Callable[[Surface], object]]:
        d = self.defaults
        return {
            ChartKind.REVENUE: lambda s: render_line(
                s, dataset.revenue_series, ChartStyle(color=d.revenue_color), d
            ),
            ChartKind.SIGNUPS: lambda s: render_line(
                s, dataset.signup_series, ChartStyle(color=d.signup_color), d
            ),
            ChartKind.FUNNEL: lambda s: render_funnel(s, dataset.funnel_stages, d),
            ChartKind.HEAT: lambda s: render_heat(s, self.intensity, d),
        }

    def render_all(self, dataset: Dataset) -> RenderSummary:
        """Redraw every mounted chart.

        Args:
            dataset: Complete dataset for this refresh

        Returns:
            Per-kind status, ``rendered`` or ``skipped``

        Raises:
            SurfaceUnavailableError: If a mounted surface cannot provide a context
        """
        summary: RenderSummary = {}
        for kind, render in self._renderers(dataset).items():
            surface = self.surfaces.get(kind)
            if surface is None:
                logger.debug(f"No surface mounted for {kind.value} chart, skipping")
                summary[kind] = RenderStatus.SKIPPED
                continue
            render(surface)
            summary[kind] = RenderStatus.RENDERED

        rendered = sum(1 for status in summary.values() if status is RenderStatus.RENDERED)
        logger.debug(f"Rendered {rendered}/{len(summary)} charts")
        return summary


def render_all(
    dataset: Dataset,
    surfaces: Mapping[ChartKind, Surface | None],
    defaults: ChartDefaults | None = None,
    intensity: IntensityFn | None = None,
) -> RenderSummary:
    """Render every mounted chart once; see ChartRegistry.render_all."""
    return ChartRegistry(surfaces, defaults=defaults, intensity=intensity).render_all(dataset)
