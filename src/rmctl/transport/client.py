"""Controller client used by the command handlers.

Wraps the transport for the primary controller (and, for ``ping``, the
backup controller) behind one object. Failed requests are not retried and
do not fail over; the operator re-issues the command.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rmctl.core.errors import RemoteError
from rmctl.transport.http import HTTPClient
from rmctl.transport.protocols import Request, RequestType, Response
from rmctl.transport.unix_socket import UnixSocketClient

if TYPE_CHECKING:
    from rmctl.core.config import RmctlConfig
    from rmctl.transport.protocol import ClientTransport

logger = logging.getLogger(__name__)

PRIMARY = 1
BACKUP = 2


def create_transport(address: str) -> ClientTransport:
    """Pick the transport for an address.

    ``http://`` and ``https://`` URLs use HTTP; anything else is taken as
    a Unix socket path.
    """
    if address.startswith(("http://", "https://")):
        return HTTPClient(address)
    return UnixSocketClient(address)


@dataclass
class ControllerClient:
    """Client for the primary and (optional) backup controller."""

    primary: ClientTransport
    backup: ClientTransport | None = None
    timeout: float = 30.0

    @classmethod
    def from_config(cls, config: RmctlConfig) -> ControllerClient:
        return cls(
            primary=create_transport(config.controller),
            backup=create_transport(config.backup_controller)
            if config.backup_controller
            else None,
            timeout=config.timeout,
        )

    async def send(self, request_type: RequestType, **params: Any) -> Response:
        """Send one request to the primary controller.

        Returns:
            The controller's response, successful or not.

        Raises:
            RemoteError: The controller could not be reached or answered
                with something unusable.
        """
        request = Request(type=request_type, params=params)
        return await self.primary.send_request(request, self.timeout)

    async def call(self, request_type: RequestType, **params: Any) -> dict[str, Any]:
        """Send one request and return its data.

        Raises:
            RemoteError: Any failure, including one reported by the
                controller.
        """
        response = await self.send(request_type, **params)
        response.raise_for_error()
        return response.data or {}

    async def ping(self, which: int = PRIMARY) -> bool:
        """Return True if the primary (1) or backup (2) controller answers."""
        transport = self.primary if which == PRIMARY else self.backup
        if transport is None:
            return False
        try:
            response = await transport.send_request(Request(type=RequestType.PING), self.timeout)
        except RemoteError as e:
            logger.debug("ping_failed: address=%s error=%s", transport.address, e)
            return False
        return response.success
