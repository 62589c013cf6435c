"""Tests for ControllerClient."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from rmctl.core.config import RmctlConfig
from rmctl.core.errors import ControllerUnavailableError, ErrorCode, RemoteError
from rmctl.transport.client import BACKUP, PRIMARY, ControllerClient, create_transport
from rmctl.transport.http import HTTPClient
from rmctl.transport.protocols import RequestType, Response
from rmctl.transport.unix_socket import UnixSocketClient


class TestCreateTransport:
    def test_http_address(self):
        assert isinstance(create_transport("http://ctl01:6817"), HTTPClient)
        assert isinstance(create_transport("https://ctl01"), HTTPClient)

    def test_socket_path(self):
        transport = create_transport("/tmp/rmctld.sock")

        assert isinstance(transport, UnixSocketClient)
        assert transport.address == "/tmp/rmctld.sock"


class TestControllerClient:
    """Tests for ControllerClient."""

    def test_from_config(self):
        config = RmctlConfig(
            controller="/tmp/a.sock", backup_controller="http://ctl02:6817", timeout=7
        )

        client = ControllerClient.from_config(config)

        assert isinstance(client.primary, UnixSocketClient)
        assert isinstance(client.backup, HTTPClient)
        assert client.timeout == 7

    def test_from_config_without_backup(self):
        client = ControllerClient.from_config(RmctlConfig(controller="/tmp/a.sock"))

        assert client.backup is None

    @pytest.mark.asyncio
    async def test_call_sends_to_primary(self, client, primary, backup):
        primary.send_request.return_value = Response(success=True, data={"message": "ok"})

        data = await client.call(RequestType.REQUEUE, job_id=42)

        assert data == {"message": "ok"}
        request, timeout = primary.send_request.await_args.args
        assert request.type is RequestType.REQUEUE
        assert request.params == {"job_id": 42}
        assert timeout == 5.0
        backup.send_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_call_without_data(self, client, primary):
        primary.send_request.return_value = Response(success=True, data=None)

        assert await client.call(RequestType.RECONFIGURE) == {}

    @pytest.mark.asyncio
    async def test_call_raises_controller_error(self, client, primary):
        primary.send_request.return_value = Response(
            success=False, error_code=ErrorCode.INVALID_JOB_ID
        )

        with pytest.raises(RemoteError) as exc_info:
            await client.call(RequestType.SUSPEND, job_id=9)

        assert exc_info.value.code == ErrorCode.INVALID_JOB_ID

    @pytest.mark.asyncio
    async def test_no_failover_to_backup(self, client, primary, backup):
        primary.send_request.side_effect = ControllerUnavailableError(primary.address)

        with pytest.raises(ControllerUnavailableError):
            await client.call(RequestType.GET_NODES)

        backup.send_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_send_returns_failed_response(self, client, primary):
        primary.send_request.return_value = Response(success=False, error_code=2010)

        response = await client.send(RequestType.RECONFIGURE)

        assert response.success is False

    @pytest.mark.asyncio
    async def test_ping(self, client, primary, backup):
        backup.send_request.side_effect = ControllerUnavailableError(backup.address)

        assert await client.ping(PRIMARY) is True
        assert await client.ping(BACKUP) is False
        assert primary.send_request.await_args.args[0].type is RequestType.PING

    @pytest.mark.asyncio
    async def test_ping_failed_response(self, client, primary):
        primary.send_request = AsyncMock(return_value=Response(success=False))

        assert await client.ping(PRIMARY) is False

    @pytest.mark.asyncio
    async def test_ping_without_backup(self, primary):
        client = ControllerClient(primary=primary)

        assert await client.ping(BACKUP) is False
