"""Error types and error codes for rmctl.

Two tiers of failure exist:

- Usage errors raised while interpreting operator input (too many words,
  malformed specifications, unknown entities). These never reach the
  controller.
- Remote errors returned by (or raised while talking to) the controller.
  The controller answers with a numeric error code which ``describe``
  turns into a human-readable message.
"""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Numeric error codes shared by the parser and the controller."""

    SUCCESS = 0

    # Client side (specification parsing)
    MISSING_VALUE = 1001
    INVALID_NUMBER = 1002

    # Controller side
    INVALID_NODE_NAME = 2001
    INVALID_PARTITION_NAME = 2002
    INVALID_JOB_ID = 2003
    INVALID_BLOCK_NAME = 2004
    ACCESS_DENIED = 2005
    ALREADY_DONE = 2006
    TRANSITION_STATE_NO_UPDATE = 2007
    NO_CHANGE_IN_DATA = 2008
    NOT_SUPPORTED = 2009
    INVALID_REQUEST = 2010

    # Transport
    CONTROLLER_UNREACHABLE = 3001
    PROTOCOL_ERROR = 3002
    TIMEOUT = 3003


_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.SUCCESS: "No error",
    ErrorCode.MISSING_VALUE: "Keyword is missing its value",
    ErrorCode.INVALID_NUMBER: "Keyword lacks a valid numeric value",
    ErrorCode.INVALID_NODE_NAME: "Invalid node name specified",
    ErrorCode.INVALID_PARTITION_NAME: "Invalid partition name specified",
    ErrorCode.INVALID_JOB_ID: "Invalid job id specified",
    ErrorCode.INVALID_BLOCK_NAME: "Invalid block name specified",
    ErrorCode.ACCESS_DENIED: "Access/permission denied",
    ErrorCode.ALREADY_DONE: "Job/step already completing or completed",
    ErrorCode.TRANSITION_STATE_NO_UPDATE: "Requested operation not supported in current state",
    ErrorCode.NO_CHANGE_IN_DATA: "Data has not changed since time specified",
    ErrorCode.NOT_SUPPORTED: "Requested operation not supported on this system",
    ErrorCode.INVALID_REQUEST: "Controller rejected the request as malformed",
    ErrorCode.CONTROLLER_UNREACHABLE: "Unable to contact the controller",
    ErrorCode.PROTOCOL_ERROR: "Malformed response from the controller",
    ErrorCode.TIMEOUT: "Controller did not respond in time",
}


def describe(code: int | None) -> str:
    """Return the message for an error code.

    Unknown codes are reported by number so that newer controllers can
    return codes this client does not know about.
    """
    if code is None:
        return "Unknown error"
    try:
        return _MESSAGES[ErrorCode(code)]
    except ValueError:
        return f"Unknown error code {code}"


class RmctlError(Exception):
    """Base class for all rmctl errors."""


class TokenizeError(RmctlError):
    """Input line could not be split into words."""


class TooManyWordsError(TokenizeError):
    """Input line has more words than the interpreter accepts."""

    def __init__(self, limit: int):
        super().__init__(f"can not process over {limit} words")
        self.limit = limit


class SpecParseError(RmctlError):
    """A keyword in specification text has a bad value."""

    def __init__(self, keyword: str, code: ErrorCode, value: str = ""):
        if code == ErrorCode.MISSING_VALUE:
            message = f"keyword {keyword} is missing its value"
        else:
            message = f"keyword {keyword} lacks valid numeric value: {value!r}"
        super().__init__(message)
        self.keyword = keyword
        self.code = code
        self.value = value


class InvalidInputError(RmctlError):
    """Specification text is well-formed but not acceptable."""


class NoValidEntityError(RmctlError):
    """No identifying keyword found in an update or delete request."""


class RemoteError(RmctlError):
    """The controller reported a failure."""

    def __init__(self, code: int | None, message: str | None = None):
        super().__init__(message or describe(code))
        self.code = code


class ControllerUnavailableError(RemoteError):
    """The controller could not be reached at all."""

    def __init__(self, address: str, reason: str = ""):
        detail = f" ({reason})" if reason else ""
        super().__init__(
            ErrorCode.CONTROLLER_UNREACHABLE,
            f"{describe(ErrorCode.CONTROLLER_UNREACHABLE)} at {address}{detail}",
        )
        self.address = address
