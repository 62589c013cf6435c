"""Tests for the interpreter loop."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from rmctl.core.tokenizer import Tokenizer
from rmctl.frontends.cli.repl.core import PROMPT, process_line, run_command, run_interactive
from rmctl.frontends.cli.repl.registry import CommandAction
from rmctl.transport.protocols import RequestType


@pytest.fixture(autouse=True)
def no_readline():
    """Keep tests away from the real history file."""
    with patch("rmctl.frontends.cli.repl.core.setup_readline"):
        yield


def requests_of(transport) -> list:
    return [call.args[0] for call in transport.send_request.await_args_list]


class TestProcessLine:
    """Tests for process_line."""

    @pytest.mark.asyncio
    async def test_dispatches_words(self, ctx, primary):
        await process_line(ctx, Tokenizer(), "suspend 42")

        [request] = requests_of(primary)
        assert request.type is RequestType.SUSPEND

    @pytest.mark.asyncio
    async def test_too_many_words(self, ctx, primary, capsys):
        result = await process_line(ctx, Tokenizer(), " ".join(["w"] * 129))

        assert result.action is CommandAction.CONTINUE
        assert "rmctl: can not process over 128 words" in capsys.readouterr().err
        assert ctx.state.exit_code == 1
        primary.send_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_exit_breaks(self, ctx):
        result = await process_line(ctx, Tokenizer(), "quit")

        assert result.action is CommandAction.BREAK


class TestRunCommand:
    """Tests for run_command."""

    @pytest.mark.asyncio
    async def test_runs_once_and_sets_exit_flag(self, ctx, primary):
        await run_command(ctx, ["update", "JobId=7", "Priority=100"])

        assert ctx.state.exit_flag is True
        [request] = requests_of(primary)
        assert request.type is RequestType.UPDATE_JOB
        assert request.params == {"job_id": 7, "priority": 100}


class TestRunInteractive:
    """Tests for run_interactive."""

    @pytest.mark.asyncio
    async def test_exit_stops_loop(self, ctx, primary):
        with patch("builtins.input", side_effect=["exit", "ping"]) as mock_input:
            await run_interactive(ctx)

        mock_input.assert_called_once_with(PROMPT)
        primary.send_request.assert_not_awaited()
        assert ctx.state.exit_code == 0

    @pytest.mark.asyncio
    async def test_eof_is_implicit_exit(self, ctx, capsys):
        with patch("builtins.input", side_effect=["version", EOFError]):
            await run_interactive(ctx)

        assert capsys.readouterr().out.endswith("\n\n")
        assert ctx.state.exit_code == 0

    @pytest.mark.asyncio
    async def test_repeat_last_command(self, ctx, primary):
        with patch("builtins.input", side_effect=["suspend 5", "!!", "!!", "exit"]):
            await run_interactive(ctx)

        requests = requests_of(primary)
        assert [r.type for r in requests] == [RequestType.SUSPEND] * 3
        assert all(r.params == {"job_id": 5} for r in requests)

    @pytest.mark.asyncio
    async def test_errors_do_not_stop_loop(self, ctx, primary, capsys):
        lines = ["bogus", " ".join(["w"] * 200), "resume 9", "exit"]
        with patch("builtins.input", side_effect=lines):
            await run_interactive(ctx)

        err = capsys.readouterr().err
        assert "invalid keyword: bogus" in err
        assert "can not process over 128 words" in err
        assert requests_of(primary)[0].type is RequestType.RESUME
        assert ctx.state.exit_code == 1

    @pytest.mark.asyncio
    async def test_empty_lines_ignored(self, ctx):
        with patch("builtins.input", side_effect=["", "   ", "exit"]):
            await run_interactive(ctx)

        assert ctx.state.exit_code == 0

    @pytest.mark.asyncio
    async def test_keyboard_interrupt_twice_exits(self, ctx, capsys):
        with patch("builtins.input", side_effect=[KeyboardInterrupt, KeyboardInterrupt]):
            await run_interactive(ctx)

        out = capsys.readouterr().out
        assert "(Press Ctrl-C again to exit)" in out
        assert "Exiting..." in out

    @pytest.mark.asyncio
    async def test_keyboard_interrupt_count_resets(self, ctx, capsys):
        inputs = [KeyboardInterrupt, "ping", KeyboardInterrupt, "exit"]
        with patch("builtins.input", side_effect=inputs):
            await run_interactive(ctx)

        assert "Exiting..." not in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_tokenizer_shared_across_calls(self, ctx, primary):
        tokenizer = Tokenizer()
        tokenizer.tokenize("requeue 3")

        with patch("builtins.input", side_effect=["!!", "exit"]):
            await run_interactive(ctx, tokenizer)

        assert requests_of(primary)[0].params == {"job_id": 3}
