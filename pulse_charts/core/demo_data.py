"""Demo dataset generator used by the CLI and for local previews."""

from __future__ import annotations

from datetime import date

import numpy as np

from .models import Dataset, SeriesPoint

FUNNEL_STAGES = (
    ("Visits", 42000),
    ("Signups", 6200),
    ("Trials", 2400),
    ("Paid", 960),
)


def _month_labels(months: int, today: date) -> list[str]:
    labels = []
    for i in range(months):
        offset = months - 1 - i
        year, month = divmod(today.month - 1 - offset, 12)
        labels.append(date(today.year + year, month + 1, 1).strftime("%b"))
    return labels


def generate_demo_data(
    seed: int | None = None, months: int = 12, today: date | None = None
) -> Dataset:
    """Generate a dashboard dataset with noisy upward trends.

    Args:
        seed: Seed for the random generator (None for a fresh draw)
        months: Number of monthly points, ending at the current month
        today: Reference date for the month labels (defaults to today)

    Returns:
        Dataset with revenue, signup and funnel series
    """
    rng = np.random.default_rng(seed)
    labels = _month_labels(months, today or date.today())

    revenue = tuple(
        SeriesPoint(label=m, value=float(round(8000 + i * 900 + rng.uniform(-1500, 2500))))
        for i, m in enumerate(labels)
    )
    signups = tuple(
        SeriesPoint(label=m, value=float(round(200 + i * 30 + rng.uniform(-80, 120))))
        for i, m in enumerate(labels)
    )
    funnel = tuple(SeriesPoint(label=name, value=float(v)) for name, v in FUNNEL_STAGES)

    return Dataset(revenue_series=revenue, signup_series=signups, funnel_stages=funnel)
