"""Output helpers for reporting errors from CLI commands."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, NoReturn

import rich_click as click

if TYPE_CHECKING:
    from rmctl.frontends.cli.repl.state import SessionState


def error_exit(message: str, code: int = 1) -> NoReturn:
    """Print error message and exit with code."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def usage_error(state: SessionState, message: str) -> None:
    """Report a problem with the operator's input.

    Usage errors are printed even in quiet mode and always fail the
    session.
    """
    state.fail()
    click.echo(message, err=True)


def remote_error(state: SessionState, operation: str, error: Exception) -> None:
    """Report a failed controller request as ``<operation> error: <message>``.

    Suppressed in quiet mode; the session fails either way.
    """
    state.fail()
    if not state.quiet:
        click.echo(f"{operation} error: {error}", err=True)


def verbose_echo(state: SessionState, message: str) -> None:
    """Print a diagnostic line in verbose mode only."""
    if state.verbose:
        click.echo(message, err=True)
