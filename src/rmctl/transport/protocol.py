"""Transport protocol definitions.

Defines the interface that controller transports implement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from rmctl.transport.protocols import Request, Response


class ClientTransport(Protocol):
    """Client-side transport protocol.

    One call sends one request and waits for its response. Transports
    raise ``ControllerUnavailableError`` when the controller cannot be
    reached and ``RemoteError`` for unusable answers.
    """

    address: str

    async def send_request(self, request: Request, timeout: float) -> Response:
        """Send a request and wait for the response."""
        ...
