from __future__ import annotations

from pathlib import Path

import typer
import yaml

from .. import __version__
from ..charts.heat import random_intensity
from ..charts.registry import ChartRegistry
from ..core.config import get_settings, load_chart_defaults
from ..core.demo_data import generate_demo_data
from ..core.enums import ChartKind, RenderStatus
from ..core.errors import ChartError, ConfigError, DatasetError
from ..core.logging_config import get_logger, setup_logging
from ..core.models import Dataset
from ..render.raster import RasterSurface
from . import output as cli_output

app = typer.Typer(help="pulse_charts CLI")

logger = get_logger(__name__)


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR); defaults to PCH_LOG_LEVEL"
    ),
) -> None:
    """Configure global CLI options."""
    level = log_level or get_settings().log_level
    setup_logging(json_output=json_logs, log_level=level)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": level})


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


def _load_dataset(path: str) -> Dataset:
    try:
        document = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise DatasetError(f"Invalid YAML/JSON in {path}: {e}") from e
    return Dataset.from_dict(document or {})


@app.command()
def render(
    data: str | None = typer.Option(
        None, help="YAML/JSON dataset file; demo data is generated when omitted"
    ),
    seed: int | None = typer.Option(None, help="Seed for demo data and heat-map intensities"),
    width: float = typer.Option(480.0, min=0.0, help="Logical surface width in pixels"),
    height: float = typer.Option(180.0, min=0.0, help="Logical surface height in pixels"),
    dpr: float | None = typer.Option(
        None, help="Device pixel ratio; defaults to PCH_DEVICE_PIXEL_RATIO or 1.0"
    ),
    skip: list[ChartKind] = typer.Option(  # noqa: B008
        [], case_sensitive=False, help="Chart kinds to leave unmounted (repeatable)"
    ),
    config: str | None = typer.Option(
        None, help="Chart constants YAML; defaults to PCH_CHARTS_CONFIG or configs/charts.yaml"
    ),
    base64: bool = typer.Option(False, "--base64", help="Print each chart as a PNG data URI"),
) -> None:
    """Render the dashboard charts onto in-memory raster surfaces."""
    settings = get_settings()
    ratio = dpr if dpr is not None else settings.device_pixel_ratio

    try:
        dataset = _load_dataset(data) if data else generate_demo_data(seed=seed)
    except FileNotFoundError:
        cli_output.error(f"Dataset file not found: {data}")
        raise typer.Exit(code=1) from None
    except DatasetError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from None

    cli_output.info(f"Loaded dataset from {data}" if data else "Using generated demo data")

    if width == 0 or height == 0:
        cli_output.warning("Surfaces have zero area; charts will be blank")

    try:
        defaults = load_chart_defaults(config or settings.charts_config)
    except ConfigError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from None

    surfaces = {
        kind: None if kind in skip else RasterSurface(width, height, device_pixel_ratio=ratio)
        for kind in ChartKind
    }
    registry = ChartRegistry(surfaces, defaults=defaults, intensity=random_intensity(seed))

    logger.info("Rendering charts", extra={"width": width, "height": height, "dpr": ratio})
    try:
        summary = registry.render_all(dataset)
    except ChartError as e:
        logger.exception("Chart rendering failed")
        cli_output.error(f"Rendering failed: {e}")
        raise typer.Exit(code=1) from None

    for kind, status in summary.items():
        surface = surfaces[kind]
        if status is RenderStatus.SKIPPED or surface is None:
            cli_output.chart(f"{kind.value}: skipped")
            continue
        cli_output.chart(f"{kind.value}: rendered ({surface.width}x{surface.height} px)")
        if base64:
            cli_output.plain(f"data:image/png;base64,{surface.to_base64()}")

    rendered = sum(1 for status in summary.values() if status is RenderStatus.RENDERED)
    cli_output.success(f"Rendered {rendered} of {len(summary)} charts")
