"""Display and output formatting utilities for the interpreter."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

import rich_click as click

from rmctl.__version__ import __version__

if TYPE_CHECKING:
    from rmctl.frontends.cli.repl.registry import CommandSpec
    from rmctl.frontends.cli.repl.state import SessionState

PROG = "rmctl"

# Pairs per line in multi-line record output
PAIRS_PER_LINE = 3

OPTIONS_HELP = """\
rmctl [<OPTION>] [<COMMAND>]
    Valid <OPTION> values are:
     -a or --all: equivalent to "all" command
     -h or --help: equivalent to "help" command
     --hide: equivalent to "hide" command
     -o or --oneliner: equivalent to "oneliner" command
     -q or --quiet: equivalent to "quiet" command
     -v or --verbose: equivalent to "verbose" command
     -V or --version: equivalent to "version" command
     --controller, --backup: controller addresses (socket path or http URL)
     --config: YAML configuration file

  <COMMAND> may be omitted from the execute line and rmctl will run
  interactively, processing commands as entered until explicitly terminated.

    Valid <COMMAND> values are:"""

NOTES_HELP = """\
     !!                       Repeat the last command entered.

  <ENTITY> may be "config", "daemons", "jobs", "nodes", "partitions",
           "steps" or "blocks".

  <ID> may be a configuration parameter name, job id, node name, partition
       name, block name or job step id (job id, a period, the step id).

  <SPECIFICATIONS> use the same Keyword=Value format "show" prints. Use
  quotes for values with spaces: Reason="fan failure". An update must name
  its entity with NodeName=, PartitionName=, JobId= or BlockName=.

  <CH_OP> may be "able", "disable", "enable", "create", "vacate",
  "restart" or "error".

  Commands may be abbreviated as long as they stay unambiguous and all
  commands are case-insensitive. Node and partition names are not."""


def print_help(commands: Iterable[CommandSpec]) -> None:
    """Print usage help built from the command table."""
    lines = [OPTIONS_HELP]
    for spec in commands:
        lines.append(f"     {spec.usage:<24} {spec.help}")
    lines.append(NOTES_HELP)
    click.echo("\n".join(lines))


def api_version() -> tuple[int, int, int]:
    """Version triple advertised to the controller."""
    major, minor, micro = (int(part) for part in __version__.split(".")[:3])
    return major, minor, micro


def print_version(state: SessionState) -> None:
    """Print the client version (and API version when verbose)."""
    click.echo(f"{PROG} {__version__}")
    if state.verbose:
        major, minor, micro = api_version()
        click.echo(f"api_version: {major}.{minor}.{micro}")


def format_record(record: Mapping[str, Any], one_liner: bool = False) -> str:
    """Format one record as ``Key=Value`` pairs.

    Multi-line output puts a few pairs on each line and indents the
    continuation lines; one-liner output keeps the whole record on one line.
    """
    pairs = [f"{key}={_format_value(value)}" for key, value in record.items()]
    if one_liner:
        return " ".join(pairs)

    lines = []
    for i in range(0, len(pairs), PAIRS_PER_LINE):
        chunk = " ".join(pairs[i : i + PAIRS_PER_LINE])
        lines.append(chunk if i == 0 else f"   {chunk}")
    return "\n".join(lines)


def _format_value(value: Any) -> str:
    if value is None:
        return "(null)"
    if isinstance(value, bool):
        return "YES" if value else "NO"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


def print_records(
    records: Sequence[Mapping[str, Any]],
    one_liner: bool,
    empty_message: str,
) -> None:
    """Print records separated by blank lines (or one per line)."""
    if not records:
        click.echo(empty_message)
        return

    for record in records:
        click.echo(format_record(record, one_liner))
        if not one_liner:
            click.echo("")


def print_config(config: Mapping[str, Any], param: str | None = None) -> bool:
    """Print configuration parameters as ``Key = Value`` lines.

    Args:
        config: Parameter name to value.
        param: Print only this parameter (case-insensitive).

    Returns:
        False if ``param`` was given and not found.
    """
    items = list(config.items())
    if param:
        items = [(k, v) for k, v in items if k.lower() == param.lower()]
        if not items:
            return False

    width = max(len(k) for k, _ in items) if items else 0
    for key, value in items:
        click.echo(f"{key:<{width}} = {_format_value(value)}")
    click.echo("")
    return True


def print_ping(
    primary: str | None,
    backup: str | None,
    primary_up: bool,
    backup_up: bool,
) -> None:
    """Report primary/backup controller liveness on one line."""
    states = ("UP" if primary_up else "DOWN", "UP" if backup_up else "DOWN")
    at = ""
    if primary or backup:
        at = f"at {primary or '(NULL)'}/{backup or '(NULL)'} "
    click.echo(f"Controller(primary/backup) {at}are {states[0]}/{states[1]}")
