"""HTTP transport.

Posts each request as JSON to ``<base_url>/api/request``; the response
body carries the same fields as a socket result line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import aiohttp

from rmctl.core.errors import ControllerUnavailableError, ErrorCode, RemoteError
from rmctl.transport.protocols import Response

if TYPE_CHECKING:
    from rmctl.transport.protocols import Request

logger = logging.getLogger(__name__)


@dataclass
class HTTPClient:
    """HTTP client transport.

    Example:
        >>> client = HTTPClient("http://ctl01:6817")
        >>> response = await client.send_request(Request(type=RequestType.PING), timeout=5)
    """

    address: str

    @property
    def endpoint(self) -> str:
        return f"{self.address.rstrip('/')}/api/request"

    async def send_request(self, request: Request, timeout: float) -> Response:
        """Send a request and wait for the response.

        Raises:
            ControllerUnavailableError: The controller cannot be reached.
            RemoteError: Timeout, or a body that is not a result object.
        """
        logger.debug("request_sent: type=%s address=%s", request.type.name, self.address)
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.endpoint,
                    json=request.to_message(),
                    timeout=aiohttp.ClientTimeout(total=timeout),
                ) as http_response:
                    message = await http_response.json(content_type=None)
        except TimeoutError:
            raise RemoteError(ErrorCode.TIMEOUT) from None
        except aiohttp.ClientConnectionError as e:
            raise ControllerUnavailableError(self.address, str(e)) from e
        except (aiohttp.ContentTypeError, ValueError) as e:
            logger.warning("Failed to parse JSON from controller: %s", e)
            raise RemoteError(ErrorCode.PROTOCOL_ERROR) from e

        response = Response.from_message(message)
        logger.debug(
            "response_received: type=%s success=%s error_code=%s",
            request.type.name,
            response.success,
            response.error_code,
        )
        return response
