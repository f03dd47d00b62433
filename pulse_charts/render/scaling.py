from __future__ import annotations

import math


def scale(
    value: float, src_min: float, src_max: float, dst_min: float, dst_max: float
) -> float:
    """Map ``value`` from ``[src_min, src_max]`` onto ``[dst_min, dst_max]``, inverted.

    ``src_min`` lands on ``dst_max`` and ``src_max`` on ``dst_min``, so passing
    ``dst_min=top, dst_max=bottom`` draws larger values higher on screen. An
    empty source range, or one that cannot be resolved to a finite position,
    maps to the destination midpoint.
    """
    midpoint = (dst_min + dst_max) / 2
    span = src_max - src_min
    if span == 0:
        return midpoint
    if math.isfinite(span):
        t = (value - src_min) / span
    else:
        # bounds near the float limit: halve before subtracting
        t = (value / 2 - src_min / 2) / (src_max / 2 - src_min / 2)
    if not math.isfinite(t):
        return midpoint
    return dst_min + (dst_max - dst_min) * (1 - t)
