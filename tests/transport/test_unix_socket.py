"""Tests for the Unix socket transport."""

from __future__ import annotations

import asyncio
import json

import pytest

from rmctl.core.errors import ControllerUnavailableError, ErrorCode, RemoteError
from rmctl.transport.protocols import Request, RequestType
from rmctl.transport.unix_socket import UnixSocketClient


def make_handler(reply: bytes | None, received: list):
    """Server handler that records one request line and answers with ``reply``."""

    async def handler(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        line = await reader.readline()
        received.append(json.loads(line))
        if reply is None:
            # Never answer; wait for the client to give up
            await reader.read()
        else:
            writer.write(reply)
            await writer.drain()
        writer.close()

    return handler


class TestUnixSocketClient:
    """Tests for UnixSocketClient."""

    @pytest.mark.asyncio
    async def test_send_request_round_trip(self, tmp_path):
        path = str(tmp_path / "ctl.sock")
        received: list = []
        reply = {
            "type": "result",
            "success": True,
            "data": {"records": [{"NodeName": "lx01"}]},
            "request_id": "r1",
        }
        server = await asyncio.start_unix_server(
            make_handler((json.dumps(reply) + "\n").encode(), received), path=path
        )

        async with server:
            client = UnixSocketClient(path)
            request = Request(type=RequestType.GET_NODES, params={"name": "lx01"}, request_id="r1")
            response = await client.send_request(request, timeout=5)

        assert response.success is True
        assert response.data == {"records": [{"NodeName": "lx01"}]}
        assert response.request_id == "r1"
        assert received == [
            {
                "type": "request",
                "request_type": "GET_NODES",
                "params": {"name": "lx01"},
                "request_id": "r1",
            }
        ]

    @pytest.mark.asyncio
    async def test_error_result(self, tmp_path):
        path = str(tmp_path / "ctl.sock")
        reply = {"type": "result", "success": False, "error_code": 2001, "error": None}
        server = await asyncio.start_unix_server(
            make_handler((json.dumps(reply) + "\n").encode(), []), path=path
        )

        async with server:
            response = await UnixSocketClient(path).send_request(
                Request(type=RequestType.UPDATE_NODE), timeout=5
            )

        assert response.success is False
        assert response.error_code == ErrorCode.INVALID_NODE_NAME
        with pytest.raises(RemoteError) as exc_info:
            response.raise_for_error()
        assert str(exc_info.value) == "Invalid node name specified"

    @pytest.mark.asyncio
    async def test_missing_socket(self, tmp_path):
        client = UnixSocketClient(str(tmp_path / "missing.sock"))

        with pytest.raises(ControllerUnavailableError) as exc_info:
            await client.send_request(Request(type=RequestType.PING), timeout=5)

        assert exc_info.value.code == ErrorCode.CONTROLLER_UNREACHABLE
        assert "missing.sock" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_connection_closed_without_answer(self, tmp_path):
        path = str(tmp_path / "ctl.sock")
        server = await asyncio.start_unix_server(make_handler(b"", []), path=path)

        async with server:
            with pytest.raises(ControllerUnavailableError, match="connection closed"):
                await UnixSocketClient(path).send_request(Request(type=RequestType.PING), 5)

    @pytest.mark.asyncio
    async def test_malformed_answer(self, tmp_path):
        path = str(tmp_path / "ctl.sock")
        server = await asyncio.start_unix_server(make_handler(b"not json\n", []), path=path)

        async with server:
            with pytest.raises(RemoteError) as exc_info:
                await UnixSocketClient(path).send_request(Request(type=RequestType.PING), 5)

        assert exc_info.value.code == ErrorCode.PROTOCOL_ERROR

    @pytest.mark.asyncio
    async def test_answer_that_is_not_a_result(self, tmp_path):
        path = str(tmp_path / "ctl.sock")
        server = await asyncio.start_unix_server(
            make_handler(b'{"type": "event"}\n', []), path=path
        )

        async with server:
            with pytest.raises(RemoteError) as exc_info:
                await UnixSocketClient(path).send_request(Request(type=RequestType.PING), 5)

        assert exc_info.value.code == ErrorCode.PROTOCOL_ERROR

    @pytest.mark.asyncio
    async def test_timeout(self, tmp_path):
        path = str(tmp_path / "ctl.sock")
        server = await asyncio.start_unix_server(make_handler(None, []), path=path)

        async with server:
            with pytest.raises(RemoteError) as exc_info:
                await UnixSocketClient(path).send_request(Request(type=RequestType.PING), 0.2)

        assert exc_info.value.code == ErrorCode.TIMEOUT
