"""
Charter CLI - styled output primitives built on Click.

    success(), error(), warning(), info(), dim(), bold(), kv()

click.style handles NO_COLOR / TERM=dumb, so output degrades gracefully.
Diagnostics and errors go to stderr so documents written to stdout stay
clean.
"""

from __future__ import annotations

import click

_CHECK = "✓"     # ✓
_CROSS = "✗"     # ✗
_BULLET = "•"    # •


def success(message: str) -> None:
    """Print success message in green."""
    click.echo(click.style(message, fg="green"), err=True)


def error(message: str) -> None:
    """Print error message in red."""
    click.echo(click.style(message, fg="red"), err=True)


def warning(message: str) -> None:
    """Print warning message in yellow."""
    click.echo(click.style(message, fg="yellow"), err=True)


def info(message: str) -> None:
    """Print info message in cyan."""
    click.echo(click.style(message, fg="cyan"), err=True)


def dim(message: str) -> None:
    click.echo(click.style(message, dim=True), err=True)


def bold(message: str) -> str:
    """Return bold-styled text (does not echo)."""
    return click.style(message, bold=True)


def kv(key: str, value: str, *, key_width: int = 14) -> None:
    """Print an aligned key-value pair."""
    styled_key = click.style(f"{key}:".ljust(key_width), fg="cyan")
    click.echo(f"  {styled_key} {value}", err=True)
