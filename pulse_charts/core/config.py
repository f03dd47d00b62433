from __future__ import annotations

import math
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CHARTS_CONFIG = "configs/charts.yaml"


@dataclass(frozen=True)
class ChartDefaults:
    """Named layout constants shared by the renderers.

    The values reproduce the dashboard look; none of them is derived from
    anything deeper than how the charts read on screen.
    """

    line_pad: float = 22.0
    line_gridlines: int = 4
    line_width: float = 2.0
    line_grid_color: str = "rgba(148,163,184,.15)"
    line_label_color: str = "#94a3b8"
    line_label_offset: float = 28.0
    line_font: str = "12px Inter, system-ui"

    funnel_pad: float = 10.0
    funnel_gap: float = 8.0
    funnel_taper: float = 0.95
    funnel_fallback_ratio: float = 0.6
    funnel_alpha: float = 0.8
    funnel_palette: tuple[str, ...] = ("#60a5fa", "#34d399", "#fbbf24", "#f472b6")
    funnel_label_color: str = "#e5e7eb"
    funnel_font: str = "bold 12px Inter, system-ui"

    heat_pad: float = 12.0
    heat_cols: int = 24
    heat_rows: int = 6
    heat_gutter: float = 2.0
    heat_rgb: tuple[int, int, int] = (99, 102, 241)
    heat_min_alpha: float = 0.15
    heat_alpha_span: float = 0.75

    revenue_color: str = "#22c55e"
    signup_color: str = "#60a5fa"


@dataclass
class Settings:
    device_pixel_ratio: float
    log_level: str
    charts_config: str


def _read_env_file() -> dict[str, str]:
    """Load minimal .env to support PCH_* keys if not in the environment.

    We intentionally do not overwrite existing os.environ values.
    """
    env_path = Path.cwd() / ".env"
    env: dict[str, str] = {}
    if not env_path.exists():
        return env
    try:
        for line in env_path.read_text(encoding="utf-8").splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" not in line:
                continue
            k, v = line.split("=", 1)
            env[k.strip()] = v.strip().strip('"').strip("'")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Ignoring unreadable .env file: {e}")
        return {}
    return env


def _get_env(name: str, env_file: dict[str, str] | None = None) -> str | None:
    # Priority: process env -> .env
    val = os.getenv(name)
    if val:
        return val
    if env_file and name in env_file:
        return env_file[name]
    return None


def _parse_ratio(raw: str | None) -> float:
    if not raw:
        return 1.0
    try:
        ratio = float(raw)
    except ValueError:
        logger.warning(f"PCH_DEVICE_PIXEL_RATIO is not a number: {raw!r}, using 1.0")
        return 1.0
    return ratio if ratio > 0 else 1.0


def get_settings() -> Settings:
    env_file = _read_env_file()
    return Settings(
        device_pixel_ratio=_parse_ratio(_get_env("PCH_DEVICE_PIXEL_RATIO", env_file)),
        log_level=_get_env("PCH_LOG_LEVEL", env_file) or "INFO",
        charts_config=_get_env("PCH_CHARTS_CONFIG", env_file) or DEFAULT_CHARTS_CONFIG,
    )


_POSITIVE_COUNTS = {"line_gridlines", "heat_cols", "heat_rows"}
_NON_NEGATIVE = {
    "line_pad", "line_width", "line_label_offset",
    "funnel_pad", "funnel_gap", "heat_pad", "heat_gutter",
}
_UNIT_INTERVAL = {"funnel_alpha", "heat_min_alpha", "heat_alpha_span"}


def _coerce_number(key: str, value: Any, kind: type) -> float | int:
    if isinstance(value, bool):
        raise ConfigError(f"Chart setting '{key}' must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Chart setting '{key}' must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ConfigError(f"Chart setting '{key}' must be finite, got {value!r}")
    if kind is int:
        if not number.is_integer():
            raise ConfigError(f"Chart setting '{key}' must be a whole number, got {value!r}")
        return int(number)
    return number


def _coerce_setting(key: str, value: Any, default: Any) -> Any:
    """Convert a YAML value to the type of the matching ChartDefaults field."""
    if isinstance(default, str):
        if not isinstance(value, str):
            raise ConfigError(f"Chart setting '{key}' must be a string, got {value!r}")
        return value

    if isinstance(default, tuple):
        if not isinstance(value, (list, tuple)):
            raise ConfigError(f"Chart setting '{key}' must be a list, got {value!r}")
        if key == "heat_rgb":
            channels = tuple(_coerce_number(key, v, int) for v in value)
            if len(channels) != 3 or not all(0 <= c <= 255 for c in channels):
                raise ConfigError(f"Chart setting 'heat_rgb' must be three values in 0-255, got {value!r}")
            return channels
        if not value:
            raise ConfigError(f"Chart setting '{key}' must not be empty")
        if not all(isinstance(v, str) for v in value):
            raise ConfigError(f"Chart setting '{key}' must be a list of color strings, got {value!r}")
        return tuple(value)

    number = _coerce_number(key, value, type(default))
    if key in _POSITIVE_COUNTS and number < 1:
        raise ConfigError(f"Chart setting '{key}' must be at least 1, got {value!r}")
    if key in _NON_NEGATIVE and number < 0:
        raise ConfigError(f"Chart setting '{key}' must not be negative, got {value!r}")
    if key in _UNIT_INTERVAL and not 0 <= number <= 1:
        raise ConfigError(f"Chart setting '{key}' must be between 0 and 1, got {value!r}")
    if key == "funnel_taper" and number <= 0:
        raise ConfigError(f"Chart setting 'funnel_taper' must be positive, got {value!r}")
    if key == "funnel_fallback_ratio" and not 0 < number <= 1:
        raise ConfigError(f"Chart setting 'funnel_fallback_ratio' must be in (0, 1], got {value!r}")
    return number


def load_chart_defaults(path: str | Path | None = None) -> ChartDefaults:
    """Load chart constants, applying overrides from a YAML file when present.

    Args:
        path: YAML file path. Defaults to ``configs/charts.yaml``.

    Returns:
        ChartDefaults with any known keys from the file applied

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
            holds a value that cannot be used for its setting
    """
    cfg_path = Path(path or DEFAULT_CHARTS_CONFIG)
    if not cfg_path.exists():
        return ChartDefaults()

    try:
        with cfg_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping")
    charts = data.get("charts") or {}
    if not isinstance(charts, dict):
        raise ConfigError(f"'charts' in {cfg_path} must be a mapping of setting: value")

    base = ChartDefaults()
    known = {f.name for f in fields(ChartDefaults)}
    overrides = {}
    for key, value in charts.items():
        if key not in known:
            logger.warning(f"Unknown chart setting '{key}' in {cfg_path}, ignoring")
            continue
        overrides[key] = _coerce_setting(key, value, getattr(base, key))

    logger.debug(f"Loaded {len(overrides)} chart overrides from {cfg_path}")
    return replace(ChartDefaults(), **overrides)
