"""CLI entry point."""

from __future__ import annotations

import asyncio
import sys

import rich_click as click

from rmctl.core.config import load_config
from rmctl.core.logging_config import configure_logging
from rmctl.frontends.cli.output import error_exit
from rmctl.frontends.cli.repl.core import run_command, run_interactive
from rmctl.frontends.cli.repl.display import print_help, print_version
from rmctl.frontends.cli.repl.registry import (
    COMMANDS,
    CommandContext,
    set_verbosity,
)
from rmctl.frontends.cli.repl.state import SessionState, Verbosity
from rmctl.transport.client import ControllerClient

# Configure rich-click styling
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try 'rmctl --help' for more information."
click.rich_click.ERRORS_EPILOGUE = ""
click.rich_click.MAX_WIDTH = 100


@click.command(
    add_help_option=False,
    context_settings={"allow_interspersed_args": False},
)
@click.option("-a", "--all", "show_all", is_flag=True, help="Show hidden entities too")
@click.option("-h", "--help", "show_help", is_flag=True, help="Print command usage and exit")
@click.option("--hide", is_flag=True, help="Do not show hidden entities")
@click.option("-o", "--oneliner", is_flag=True, help="Report one record per line")
@click.option("-q", "--quiet", is_flag=True, help="Print no messages other than errors")
@click.option("-v", "--verbose", is_flag=True, help="Enable detailed logging")
@click.option("-V", "--version", "show_version", is_flag=True, help="Print version and exit")
@click.option("--controller", default=None, help="Primary controller address")
@click.option("--backup", "backup_controller", default=None, help="Backup controller address")
@click.option(
    "--config",
    "config_file",
    default=None,
    type=click.Path(dir_okay=False),
    help="YAML configuration file",
)
@click.argument("command", nargs=-1)
def cli(
    show_all: bool,
    show_help: bool,
    hide: bool,
    oneliner: bool,
    quiet: bool,
    verbose: bool,
    show_version: bool,
    controller: str | None,
    backup_controller: str | None,
    config_file: str | None,
    command: tuple[str, ...],
) -> None:
    """Administrative client for the cluster resource manager.

    Runs COMMAND and exits, or reads commands interactively when no
    COMMAND is given. Use **rmctl --help** for the list of commands.

    **Examples:**

        rmctl show nodes lx01

        rmctl update JobId=42 TimeLimit=120

        rmctl
    """
    configure_logging()

    try:
        config = load_config(
            config_file=config_file,
            controller=controller,
            backup_controller=backup_controller,
        )
    except (OSError, ValueError) as e:
        error_exit(str(e))

    state = SessionState(all_flag=config.show_all)
    if show_all:
        state.all_flag = True
    if hide:
        state.all_flag = False
    if oneliner:
        state.one_liner = True
    if quiet:
        set_verbosity(state, Verbosity.QUIET)
    if verbose:
        set_verbosity(state, Verbosity.VERBOSE)

    if show_help:
        print_help(COMMANDS)
        sys.exit(state.exit_code)
    if show_version:
        print_version(state)
        sys.exit(state.exit_code)

    ctx = CommandContext(state=state, client=ControllerClient.from_config(config))

    if command:
        asyncio.run(run_command(ctx, list(command)))
    else:
        asyncio.run(run_interactive(ctx))

    sys.exit(state.exit_code)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
