"""Console output formatting utilities for consistent CLI user experience.

Logging Strategy:
- Use console output functions (success, error, info, warning) for user-facing messages
- Use structured logging (logger.debug, logger.error, etc.) for debugging and observability
"""

from __future__ import annotations

import typer


def success(message: str, *, prefix: bool = True) -> None:
    """Display a success message in green with checkmark emoji.

    Example:
        success("Rendered 4 charts")
        # Output: ✅ Rendered 4 charts
    """
    formatted = f"✅ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.GREEN)


def error(message: str, *, prefix: bool = True, err: bool = True) -> None:
    """Display an error message in red with cross emoji.

    Args:
        message: The error message to display
        prefix: Whether to include the cross emoji prefix (default: True)
        err: Whether to write to stderr instead of stdout (default: True)
    """
    formatted = f"❌ {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.RED, err=err)


def info(message: str, *, prefix: bool = True) -> None:
    """Display an informational message in cyan with info emoji."""
    formatted = f"ℹ️  {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.CYAN)


def warning(message: str, *, prefix: bool = True) -> None:
    formatted = f"⚠️  {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.YELLOW)


def plain(message: str) -> None:
    """Display a plain message without emoji prefix or color."""
    typer.echo(message)


def chart(message: str, *, prefix: bool = True) -> None:
    """Display a chart line in cyan with chart emoji.

    Example:
        chart("funnel: rendered (640x400 px)")
        # Output: 📊 funnel: rendered (640x400 px)
    """
    formatted = f"📊 {message}" if prefix else message
    typer.secho(formatted, fg=typer.colors.CYAN)
