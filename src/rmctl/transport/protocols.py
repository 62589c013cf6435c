"""Request/response types exchanged with the controller.

The transport layers serialize these as JSON; see ``Request.to_message``
and ``Response.from_message`` for the exact shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

from rmctl.core.errors import ErrorCode, RemoteError


class RequestType(Enum):
    """Operations the controller accepts."""

    # Liveness
    PING = auto()

    # Controller control
    SHUTDOWN = auto()
    RECONFIGURE = auto()

    # Entity updates
    UPDATE_NODE = auto()
    UPDATE_PARTITION = auto()
    UPDATE_JOB = auto()
    UPDATE_BLOCK = auto()
    DELETE_PARTITION = auto()

    # Job control
    CHECKPOINT = auto()
    REQUEUE = auto()
    SUSPEND = auto()
    RESUME = auto()

    # Queries
    GET_CONFIG = auto()
    GET_JOBS = auto()
    GET_NODES = auto()
    GET_PARTITIONS = auto()
    GET_STEPS = auto()
    GET_BLOCKS = auto()
    PID_INFO = auto()


@dataclass(frozen=True)
class Request:
    """Request sent to the controller.

    Attributes:
        type: The operation.
        params: Operation parameters.
        request_id: Optional ID for request-response correlation.
    """

    type: RequestType
    params: dict[str, Any] = field(default_factory=dict)
    request_id: str | None = None

    def to_message(self) -> dict[str, Any]:
        return {
            "type": "request",
            "request_type": self.type.name,
            "params": self.params,
            "request_id": self.request_id,
        }


@dataclass
class Response:
    """Controller answer to one request.

    Attributes:
        success: Whether the operation succeeded.
        data: Result data (if successful).
        error_code: Numeric error code (if failed).
        error: Error message (if failed).
        request_id: Correlation ID from the request.
    """

    success: bool
    data: dict[str, Any] | None = None
    error_code: int | None = None
    error: str | None = None
    request_id: str | None = None

    @classmethod
    def from_message(cls, message: Any) -> Response:
        """Build a response from a decoded JSON message.

        Raises:
            RemoteError: The message is not a result object.
        """
        if not isinstance(message, dict) or message.get("type") != "result":
            raise RemoteError(ErrorCode.PROTOCOL_ERROR)
        return cls(
            success=bool(message.get("success")),
            data=message.get("data"),
            error_code=message.get("error_code"),
            error=message.get("error"),
            request_id=message.get("request_id"),
        )

    def raise_for_error(self) -> None:
        """Raise ``RemoteError`` if the controller reported a failure."""
        if not self.success:
            raise RemoteError(self.error_code, self.error)
