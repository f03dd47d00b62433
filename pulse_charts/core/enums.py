from __future__ import annotations

from enum import Enum


class ChartKind(str, Enum):
    REVENUE = "revenue"
    SIGNUPS = "signups"
    FUNNEL = "funnel"
    HEAT = "heat"


class RenderStatus(str, Enum):
    RENDERED = "rendered"
    SKIPPED = "skipped"
