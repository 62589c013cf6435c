"""Unix domain socket transport.

Requests travel as one JSON object per line. Each request opens its own
connection, writes one line, reads one line back and closes; there is no
background reader and no event stream.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rmctl.core.errors import ControllerUnavailableError, ErrorCode, RemoteError
from rmctl.transport.protocols import Response

if TYPE_CHECKING:
    from rmctl.transport.protocols import Request

logger = logging.getLogger(__name__)

# Large enough for a full job listing
READ_LIMIT = 16 * 1024 * 1024


@dataclass
class UnixSocketClient:
    """Unix socket client transport.

    Example:
        >>> client = UnixSocketClient("/tmp/rmctld.sock")
        >>> response = await client.send_request(Request(type=RequestType.PING), timeout=5)
    """

    address: str

    async def send_request(self, request: Request, timeout: float) -> Response:
        """Send a request and wait for the response.

        Raises:
            ControllerUnavailableError: The socket cannot be opened or the
                controller closed it without answering.
            RemoteError: The answer is not valid JSON, or timed out.
        """
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_unix_connection(self.address, limit=READ_LIMIT),
                timeout=timeout,
            )
        except TimeoutError:
            raise RemoteError(ErrorCode.TIMEOUT) from None
        except OSError as e:
            raise ControllerUnavailableError(self.address, e.strerror or str(e)) from e

        logger.debug("request_sent: type=%s address=%s", request.type.name, self.address)

        try:
            writer.write((json.dumps(request.to_message()) + "\n").encode())
            await writer.drain()
            line = await asyncio.wait_for(reader.readline(), timeout=timeout)
        except TimeoutError:
            raise RemoteError(ErrorCode.TIMEOUT) from None
        except ConnectionError as e:
            raise ControllerUnavailableError(self.address, str(e)) from e
        finally:
            writer.close()

        if not line:
            raise ControllerUnavailableError(self.address, "connection closed")

        try:
            message = json.loads(line.decode())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(
                "Failed to parse JSON from controller: %s (line: %s...)",
                e,
                line[:100],
            )
            raise RemoteError(ErrorCode.PROTOCOL_ERROR) from e

        response = Response.from_message(message)
        logger.debug(
            "response_received: type=%s success=%s error_code=%s",
            request.type.name,
            response.success,
            response.error_code,
        )
        return response
