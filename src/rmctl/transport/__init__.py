"""Transport - Talking to the controller.

Available transports:
    UnixSocketClient: JSON lines over a Unix domain socket.
    HTTPClient: JSON over HTTP (aiohttp).

``ControllerClient`` picks one per configured controller address and is
what the command handlers use.

Example:
    >>> from rmctl.core.config import load_config
    >>> from rmctl.transport import ControllerClient, RequestType
    >>>
    >>> client = ControllerClient.from_config(load_config())
    >>> await client.call(RequestType.RECONFIGURE)
"""

from rmctl.transport.client import BACKUP, PRIMARY, ControllerClient, create_transport
from rmctl.transport.http import HTTPClient
from rmctl.transport.protocol import ClientTransport
from rmctl.transport.protocols import Request, RequestType, Response
from rmctl.transport.unix_socket import UnixSocketClient

__all__ = [
    # Protocols
    "ClientTransport",
    "Request",
    "RequestType",
    "Response",
    # Implementations
    "UnixSocketClient",
    "HTTPClient",
    "ControllerClient",
    "create_transport",
    "PRIMARY",
    "BACKUP",
]
