"""Command registry and dispatch for the interpreter.

This module provides:
- CommandContext: All shared state needed by command handlers
- CommandResult: Result of command execution with control flow signals
- CommandSpec: One row of the command table (name, abbreviation, arity)
- Error handling decorator for usage and controller errors
- The command table and the dispatcher that matches words against it

Commands match by case-insensitive prefix: a word selects a command when
it is a prefix of the command's name and at least ``min_abbrev``
characters long. Arity counts the command word itself.
"""

from __future__ import annotations

import logging
import socket
from collections.abc import Callable, Coroutine, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from functools import wraps
from itertools import combinations
from typing import TYPE_CHECKING, Any

import rich_click as click

from rmctl.core.entity import EntityKind, route
from rmctl.core.errors import ErrorCode, InvalidInputError, RemoteError, RmctlError
from rmctl.core.logging_config import set_level
from rmctl.core.requests import (
    CHECKPOINT_OPS,
    build_delete,
    build_update,
    parse_job_id,
    parse_job_step,
)
from rmctl.frontends.cli.output import remote_error, usage_error, verbose_echo
from rmctl.frontends.cli.repl.display import (
    print_config,
    print_help,
    print_ping,
    print_records,
    print_version,
)
from rmctl.frontends.cli.repl.state import SessionState, Verbosity
from rmctl.transport.client import BACKUP, PRIMARY
from rmctl.transport.protocols import RequestType

if TYPE_CHECKING:
    from rmctl.transport.client import ControllerClient

logger = logging.getLogger(__name__)


class CommandAction(Enum):
    """Control flow actions from command handlers."""

    CONTINUE = auto()  # Continue interpreter loop
    BREAK = auto()  # Exit interpreter loop


@dataclass
class CommandContext:
    """All state needed by command handlers."""

    state: SessionState
    client: ControllerClient


@dataclass
class CommandResult:
    """Result from a command handler."""

    action: CommandAction = CommandAction.CONTINUE


# Type alias for command handlers
CommandHandler = Callable[[CommandContext, list[str]], Coroutine[Any, Any, CommandResult]]


@dataclass(frozen=True)
class CommandSpec:
    """One interpreter command.

    Attributes:
        name: Canonical (full) command name.
        min_abbrev: Shortest accepted abbreviation; ``len(name)`` means the
            full name is required.
        min_args: Fewest words, counting the command word.
        max_args: Most words, counting the command word; None = unbounded.
        handler: Coroutine handling the arguments after the command word.
        usage: Synopsis shown by ``help``.
        help: One-line description shown by ``help``.
    """

    name: str
    min_abbrev: int
    min_args: int
    max_args: int | None
    handler: CommandHandler
    usage: str = ""
    help: str = ""

    def matches(self, word: str) -> bool:
        """True if ``word`` selects this command."""
        lowered = word.lower()
        return len(lowered) >= self.min_abbrev and self.name.startswith(lowered)


# =============================================================================
# Helper Functions
# =============================================================================


def handle_errors(operation: str) -> Callable[[CommandHandler], CommandHandler]:
    """Decorator reporting errors raised by a command handler.

    Controller failures are reported as ``<operation> error: ...``
    (suppressed in quiet mode); input problems are always reported. Both
    fail the session and let the interpreter continue.
    """

    def decorator(handler: CommandHandler) -> CommandHandler:
        @wraps(handler)
        async def wrapper(ctx: CommandContext, args: list[str]) -> CommandResult:
            try:
                return await handler(ctx, args)
            except RemoteError as e:
                logger.debug("command_failed: operation=%s code=%s", operation, e.code)
                remote_error(ctx.state, operation, e)
            except RmctlError as e:
                usage_error(ctx.state, str(e))
            return CommandResult()

        return wrapper

    return decorator


def set_verbosity(state: SessionState, verbosity: Verbosity) -> None:
    """Change session verbosity and the package log level with it."""
    state.verbosity = verbosity
    if verbosity is Verbosity.VERBOSE:
        set_level("DEBUG")
    elif verbosity is Verbosity.QUIET:
        set_level("ERROR")
    else:
        set_level("WARNING")


# =============================================================================
# Session flag commands
# =============================================================================


async def cmd_all(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Show hidden entities."""
    ctx.state.all_flag = True
    return CommandResult()


async def cmd_hide(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Hide hidden entities."""
    ctx.state.all_flag = False
    return CommandResult()


async def cmd_oneliner(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Print one record per line."""
    ctx.state.one_liner = True
    return CommandResult()


async def cmd_quiet(ctx: CommandContext, args: list[str]) -> CommandResult:
    set_verbosity(ctx.state, Verbosity.QUIET)
    return CommandResult()


async def cmd_verbose(ctx: CommandContext, args: list[str]) -> CommandResult:
    set_verbosity(ctx.state, Verbosity.VERBOSE)
    return CommandResult()


async def cmd_exit(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Leave the interpreter."""
    ctx.state.exit_flag = True
    return CommandResult(action=CommandAction.BREAK)


async def cmd_help(ctx: CommandContext, args: list[str]) -> CommandResult:
    print_help(COMMANDS)
    return CommandResult()


async def cmd_version(ctx: CommandContext, args: list[str]) -> CommandResult:
    print_version(ctx.state)
    return CommandResult()


# =============================================================================
# Controller commands
# =============================================================================


@handle_errors("shutdown")
async def cmd_abort(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Shut the controller down and have it dump core."""
    await ctx.client.call(RequestType.SHUTDOWN, core=True)
    return CommandResult()


@handle_errors("shutdown")
async def cmd_shutdown(ctx: CommandContext, args: list[str]) -> CommandResult:
    await ctx.client.call(RequestType.SHUTDOWN, core=False)
    return CommandResult()


@handle_errors("reconfigure")
async def cmd_reconfigure(ctx: CommandContext, args: list[str]) -> CommandResult:
    await ctx.client.call(RequestType.RECONFIGURE)
    return CommandResult()


async def cmd_ping(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Check primary, then backup controller."""
    await _report_ping(ctx)
    return CommandResult()


async def _report_ping(ctx: CommandContext) -> None:
    primary_up = await ctx.client.ping(PRIMARY)
    backup_up = await ctx.client.ping(BACKUP)
    backup = ctx.client.backup.address if ctx.client.backup else None
    print_ping(ctx.client.primary.address, backup, primary_up, backup_up)


# =============================================================================
# Job commands
# =============================================================================


@handle_errors("checkpoint")
async def cmd_checkpoint(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Run a checkpoint operation on a job step."""
    op = args[0].lower()
    if op not in CHECKPOINT_OPS:
        raise InvalidInputError(
            f"Invalid checkpoint operation: {args[0]}\n"
            f"Acceptable operations are {', '.join(CHECKPOINT_OPS)}"
        )
    job_id, step_id = parse_job_step(args[1])
    data = await ctx.client.call(RequestType.CHECKPOINT, op=op, job_id=job_id, step_id=step_id)
    if data.get("message"):
        click.echo(data["message"])
    return CommandResult()


@handle_errors("requeue")
async def cmd_requeue(ctx: CommandContext, args: list[str]) -> CommandResult:
    await ctx.client.call(RequestType.REQUEUE, job_id=parse_job_id(args[0]))
    return CommandResult()


@handle_errors("suspend")
async def cmd_suspend(ctx: CommandContext, args: list[str]) -> CommandResult:
    await ctx.client.call(RequestType.SUSPEND, job_id=parse_job_id(args[0]))
    return CommandResult()


@handle_errors("resume")
async def cmd_resume(ctx: CommandContext, args: list[str]) -> CommandResult:
    await ctx.client.call(RequestType.RESUME, job_id=parse_job_id(args[0]))
    return CommandResult()


@handle_errors("pidinfo")
async def cmd_pidinfo(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Show the job a local process belongs to."""
    if not args[0].isdigit():
        raise InvalidInputError(f"Invalid process id specified: {args[0]}")
    data = await ctx.client.call(RequestType.PID_INFO, pid=int(args[0]))
    print_records([data] if data else [], ctx.state.one_liner, f"No job owns pid {args[0]}")
    return CommandResult()


@handle_errors("load_jobs")
async def cmd_completing(ctx: CommandContext, args: list[str]) -> CommandResult:
    """List jobs still completing."""
    data = await ctx.client.call(
        RequestType.GET_JOBS, state="COMPLETING", all=ctx.state.all_flag
    )
    print_records(data.get("records", []), ctx.state.one_liner, "No completing jobs")
    return CommandResult()


# =============================================================================
# Update / delete
# =============================================================================

UPDATE_REQUESTS: dict[EntityKind, RequestType] = {
    EntityKind.NODE: RequestType.UPDATE_NODE,
    EntityKind.PARTITION: RequestType.UPDATE_PARTITION,
    EntityKind.JOB: RequestType.UPDATE_JOB,
    EntityKind.BLOCK: RequestType.UPDATE_BLOCK,
}


@handle_errors("update")
async def cmd_update(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Update the entity named in the specification."""
    kind = route(args)
    request = build_update(kind, args)
    await ctx.client.call(UPDATE_REQUESTS[kind], **request.to_params())
    verbose_echo(ctx.state, f"{kind.name.lower()} updated")
    return CommandResult()


@handle_errors("delete")
async def cmd_delete(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Delete the entity named in the specification."""
    kind = route(args)
    request = build_delete(kind, args)
    await ctx.client.call(RequestType.DELETE_PARTITION, **request.to_params())
    verbose_echo(ctx.state, f"{kind.name.lower()} deleted")
    return CommandResult()


# =============================================================================
# Show
# =============================================================================


@dataclass(frozen=True)
class ShowEntity:
    """An entity ``show`` can display."""

    name: str
    request_type: RequestType | None
    id_param: str | None = None
    empty_message: str = "No records"

    def matches(self, word: str) -> bool:
        lowered = word.lower()
        return len(lowered) >= SHOW_ABBREV and self.name.startswith(lowered)


SHOW_ABBREV = 3

SHOW_ENTITIES: tuple[ShowEntity, ...] = (
    ShowEntity("config", RequestType.GET_CONFIG),
    ShowEntity("daemons", None),
    ShowEntity("jobs", RequestType.GET_JOBS, "job_id", "No jobs in the system"),
    ShowEntity("nodes", RequestType.GET_NODES, "name", "No nodes in the system"),
    ShowEntity("partitions", RequestType.GET_PARTITIONS, "name", "No partitions in the system"),
    ShowEntity("steps", RequestType.GET_STEPS, "step_id", "No job steps in the system"),
    ShowEntity("blocks", RequestType.GET_BLOCKS, "name", "No blocks in the system"),
)


@handle_errors("show")
async def cmd_show(ctx: CommandContext, args: list[str]) -> CommandResult:
    """Display the state of an entity, or all of them."""
    entity = next((e for e in SHOW_ENTITIES if e.matches(args[0])), None)
    if entity is None:
        raise InvalidInputError(f"invalid entity:{args[0]} for keyword:show")
    ident = args[1] if len(args) > 1 else None

    if entity.name == "config":
        data = await ctx.client.call(RequestType.GET_CONFIG)
        if not print_config(data.get("config", {}), ident):
            raise InvalidInputError(f"No configuration parameter named {ident}")
        await _report_ping(ctx)
        return CommandResult()

    if entity.name == "daemons":
        if ident is not None:
            usage_error(ctx.state, "too many arguments for keyword:show")
        await _print_daemons(ctx)
        return CommandResult()

    params: dict[str, Any] = {"all": ctx.state.all_flag}
    if ident is not None and entity.id_param:
        if entity.name == "jobs":
            params["job_id"] = parse_job_id(ident)
        elif entity.name == "steps":
            params["job_id"], params["step_id"] = parse_job_step(ident)
        else:
            params[entity.id_param] = ident

    if entity.request_type is None:
        raise InvalidInputError(f"invalid entity:{args[0]} for keyword:show")
    data = await ctx.client.call(entity.request_type, **params)
    print_records(data.get("records", []), ctx.state.one_liner, entity.empty_message)
    return CommandResult()


async def _print_daemons(ctx: CommandContext) -> None:
    """Print which daemons should run on this host."""
    me = socket.gethostname()
    config = (await ctx.client.call(RequestType.GET_CONFIG)).get("config", {})

    def is_me(host: Any) -> bool:
        return isinstance(host, str) and (host == me or host.lower() == "localhost")

    has_controller = bool(config.get("ControlMachine"))
    runs_controller = is_me(config.get("ControlMachine")) or is_me(config.get("BackupController"))

    try:
        data = await ctx.client.call(RequestType.GET_NODES, name=me, all=True)
    except RemoteError as e:
        # A controller-only host is not a node
        if e.code != ErrorCode.INVALID_NODE_NAME:
            raise
        data = {}
    nodes = data.get("records", [])
    runs_node_daemon = bool(nodes)

    daemons = []
    if has_controller and runs_controller:
        daemons.append("rmctld")
    if has_controller and runs_node_daemon:
        daemons.append("rmd")
    click.echo(" ".join(daemons))


# =============================================================================
# Command Registry
# =============================================================================

# Scanned in order, first match wins
COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("abort", 5, 1, 1, cmd_abort, "abort", "shut down the controller immediately, generating a core file"),
    CommandSpec("all", 3, 1, 1, cmd_all, "all", "display information about all partitions, including hidden ones"),
    CommandSpec("checkpoint", 10, 3, 3, cmd_checkpoint, "checkpoint <CH_OP> <step>", "perform a checkpoint operation on a job step"),
    CommandSpec("completing", 3, 1, 1, cmd_completing, "completing", "display jobs in completing state"),
    CommandSpec("delete", 3, 2, None, cmd_delete, "delete <SPECIFICATIONS>", "delete the specified partition"),
    CommandSpec("exit", 1, 1, 1, cmd_exit, "exit", "terminate rmctl"),
    CommandSpec("help", 2, 1, 1, cmd_help, "help", "print this description of use"),
    CommandSpec("hide", 2, 1, 1, cmd_hide, "hide", "do not display information about hidden partitions"),
    CommandSpec("oneliner", 1, 1, 1, cmd_oneliner, "oneliner", "report output one record per line"),
    CommandSpec("pidinfo", 3, 2, 2, cmd_pidinfo, "pidinfo <pid>", "return job information for the given pid"),
    CommandSpec("ping", 3, 1, 1, cmd_ping, "ping", "print status of the controllers"),
    CommandSpec("quiet", 4, 1, 1, cmd_quiet, "quiet", "print no messages other than error messages"),
    CommandSpec("quit", 4, 1, 1, cmd_exit, "quit", "terminate rmctl"),
    CommandSpec("reconfigure", 3, 1, 1, cmd_reconfigure, "reconfigure", "have the controller re-read its configuration"),
    CommandSpec("requeue", 3, 2, 2, cmd_requeue, "requeue <job_id>", "re-queue a batch job"),
    CommandSpec("resume", 3, 2, 2, cmd_resume, "resume <job_id>", "resume a previously suspended job"),
    CommandSpec("show", 3, 2, 3, cmd_show, "show <ENTITY> [<ID>]", "display state of an entity, default is all records"),
    CommandSpec("shutdown", 8, 1, 1, cmd_shutdown, "shutdown", "shut down the controller"),
    CommandSpec("suspend", 3, 2, 2, cmd_suspend, "suspend <job_id>", "suspend a job"),
    CommandSpec("update", 1, 2, None, cmd_update, "update <SPECIFICATIONS>", "update job, node, partition or block configuration"),
    CommandSpec("verbose", 4, 1, 1, cmd_verbose, "verbose", "enable detailed logging"),
    CommandSpec("version", 4, 1, 1, cmd_version, "version", "display tool version number"),
)  # fmt: skip


def match_command(word: str, commands: Sequence[CommandSpec] = COMMANDS) -> CommandSpec | None:
    """Return the first command ``word`` selects, or None."""
    return next((spec for spec in commands if spec.matches(word)), None)


def ambiguous_commands(
    commands: Sequence[CommandSpec] = COMMANDS,
) -> list[tuple[str, str]]:
    """List pairs of commands that some word would select both of.

    A word selects both ``a`` and ``b`` when it is a common prefix of the
    two names at least as long as both minimum abbreviations.
    """
    pairs = []
    for a, b in combinations(commands, 2):
        common = 0
        for x, y in zip(a.name, b.name):
            if x != y:
                break
            common += 1
        if common >= max(a.min_abbrev, b.min_abbrev):
            pairs.append((a.name, b.name))
    return pairs


async def dispatch_command(
    ctx: CommandContext,
    words: Sequence[str],
    commands: Sequence[CommandSpec] = COMMANDS,
) -> CommandResult:
    """Dispatch one tokenized line to its handler.

    Args:
        ctx: Command context.
        words: Tokenized line; the first word names the command.
        commands: Command table to match against.

    Returns:
        The handler's result, or CONTINUE if no handler ran.
    """
    if not words:
        verbose_echo(ctx.state, "no input")
        return CommandResult()

    word = words[0]
    spec = match_command(word, commands)
    if spec is None:
        usage_error(ctx.state, f"invalid keyword: {word}")
        return CommandResult()

    if len(words) < spec.min_args:
        usage_error(ctx.state, f"too few arguments for keyword:{word}")
        return CommandResult()

    if spec.max_args is not None and len(words) > spec.max_args:
        # Excess words are reported but the command still runs
        usage_error(ctx.state, f"too many arguments for keyword:{word}")
        words = words[: spec.max_args]

    logger.debug("command_dispatched: command=%s args=%s", spec.name, list(words[1:]))
    return await spec.handler(ctx, list(words[1:]))
