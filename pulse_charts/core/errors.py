"""Exception hierarchy for the chart engine.

Degenerate data and collapsed containers are normal states and never raise.
These exceptions cover the failures that must reach the caller.
"""


class ChartError(Exception):
    """Base exception for chart engine errors."""
    pass


class SurfaceUnavailableError(ChartError):
    """The host could not supply a drawing context for a surface."""
    pass


class DatasetError(ChartError):
    """A dataset document could not be turned into series."""
    pass


class ConfigError(ChartError):
    """A chart configuration file holds an unusable value."""
    pass
