"""Interactive interpreter for rmctl.

Public API:
    run_interactive: Read-eval loop on the ``rmctl:`` prompt
    run_command: Run one command given on the command line
    dispatch_command: Match a tokenized line against the command table
    SessionState: Session flags and sticky exit code
"""

from __future__ import annotations

from rmctl.frontends.cli.repl.core import process_line, run_command, run_interactive
from rmctl.frontends.cli.repl.registry import (
    COMMANDS,
    CommandAction,
    CommandContext,
    CommandResult,
    CommandSpec,
    dispatch_command,
)
from rmctl.frontends.cli.repl.state import SessionState, Verbosity

__all__ = [
    "run_interactive",
    "run_command",
    "process_line",
    "dispatch_command",
    "COMMANDS",
    "CommandAction",
    "CommandContext",
    "CommandResult",
    "CommandSpec",
    "SessionState",
    "Verbosity",
]
