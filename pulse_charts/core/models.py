from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from .errors import DatasetError

DEFAULT_COLOR = "#60a5fa"


@dataclass(frozen=True)
class SeriesPoint:
    label: str
    value: float


Series = Sequence[SeriesPoint]


@dataclass(frozen=True)
class ChartStyle:
    color: str = DEFAULT_COLOR


@dataclass(frozen=True)
class Dataset:
    """Everything one dashboard refresh hands to the dispatcher."""

    revenue_series: tuple[SeriesPoint, ...] = field(default_factory=tuple)
    signup_series: tuple[SeriesPoint, ...] = field(default_factory=tuple)
    funnel_stages: tuple[SeriesPoint, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Dataset:
        """Build a dataset from a parsed YAML/JSON document.

        Args:
            data: Mapping with ``revenue_series``, ``signup_series`` and
                ``funnel_stages`` lists of ``{label, value}`` items. Missing
                keys become empty series.

        Raises:
            DatasetError: If the document or any point is malformed
        """
        if not isinstance(data, Mapping):
            raise DatasetError(f"Dataset must be a mapping, got {type(data).__name__}")
        return cls(
            revenue_series=_parse_series(data, "revenue_series"),
            signup_series=_parse_series(data, "signup_series"),
            funnel_stages=_parse_series(data, "funnel_stages"),
        )


def _parse_series(data: Mapping[str, Any], key: str) -> tuple[SeriesPoint, ...]:
    raw = data.get(key) or []
    if not isinstance(raw, list):
        raise DatasetError(f"'{key}' must be a list of {{label, value}} items")

    points = []
    for i, item in enumerate(raw):
        if not isinstance(item, Mapping) or "value" not in item:
            raise DatasetError(f"'{key}[{i}]' must be a mapping with a 'value'")
        try:
            value = float(item["value"])
        except (TypeError, ValueError) as e:
            raise DatasetError(f"'{key}[{i}].value' is not a number: {item['value']!r}") from e
        label = item.get("label")
        points.append(SeriesPoint(label="" if label is None else str(label), value=value))
    return tuple(points)
