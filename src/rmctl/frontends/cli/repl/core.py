"""Core interpreter loop and command execution."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

import rich_click as click

from rmctl.core.errors import TooManyWordsError
from rmctl.core.tokenizer import Tokenizer
from rmctl.frontends.cli.output import usage_error
from rmctl.frontends.cli.repl.display import PROG
from rmctl.frontends.cli.repl.registry import (
    CommandAction,
    CommandContext,
    CommandResult,
    dispatch_command,
)

logger = logging.getLogger(__name__)

PROMPT = f"{PROG}: "
HISTORY_FILE = "~/.rmctl_history"
HISTORY_LENGTH = 1000

# Guard against registering atexit handler multiple times
_atexit_registered = False


def setup_readline(histfile: str = HISTORY_FILE) -> None:
    """Enable line editing and persistent history, where available."""
    try:
        import atexit
        import readline

        # Key bindings for word movement
        readline.parse_and_bind(r'"\e[1;3D": backward-word')
        readline.parse_and_bind(r'"\e[1;3C": forward-word')
        readline.set_history_length(HISTORY_LENGTH)

        path = os.path.expanduser(histfile)
        try:
            if os.path.exists(path):
                readline.read_history_file(path)
        except OSError as e:
            logger.debug("history_load_failed: path=%s error=%s", path, e)

        global _atexit_registered
        if not _atexit_registered:
            atexit.register(readline.write_history_file, path)
            _atexit_registered = True
    except ImportError:
        pass


async def process_line(
    ctx: CommandContext,
    tokenizer: Tokenizer,
    line: str,
) -> CommandResult:
    """Tokenize one input line and dispatch it.

    A line with too many words is reported and dropped; the session fails
    but the interpreter keeps going.
    """
    try:
        words = tokenizer.tokenize(line)
    except TooManyWordsError as e:
        usage_error(ctx.state, f"{PROG}: {e}")
        return CommandResult()
    return await dispatch_command(ctx, words)


async def run_command(ctx: CommandContext, words: Sequence[str]) -> None:
    """Run a single command given on the command line, then stop."""
    ctx.state.exit_flag = True
    await dispatch_command(ctx, words)


async def run_interactive(
    ctx: CommandContext,
    tokenizer: Tokenizer | None = None,
) -> None:
    """Read and run commands until ``exit``/``quit`` or end of input.

    Args:
        ctx: Command context carrying the session state and client.
        tokenizer: Tokenizer to use; keeps ``!!`` history across calls.
    """
    if tokenizer is None:
        tokenizer = Tokenizer()

    setup_readline()

    interrupt_count = 0

    while not ctx.state.exit_flag:
        try:
            line = input(PROMPT)
            interrupt_count = 0
        except EOFError:
            # End of input is an implicit exit
            click.echo("")
            break
        except KeyboardInterrupt:
            interrupt_count += 1
            if interrupt_count >= 2:
                click.echo("\nExiting...")
                break
            click.echo("\n(Press Ctrl-C again to exit)")
            continue

        result = await process_line(ctx, tokenizer, line)
        if result.action == CommandAction.BREAK:
            break
