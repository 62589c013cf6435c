"""Session state shared by the interpreter loop and the command handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Verbosity(Enum):
    """How much the session prints besides command output."""

    QUIET = 1
    NORMAL = 0
    VERBOSE = -1


@dataclass
class SessionState:
    """Flags for one rmctl session.

    ``exit_code`` is sticky: once ``fail`` has been called it stays 1 for
    the rest of the session, whatever later commands do.
    """

    all_flag: bool = False
    verbosity: Verbosity = Verbosity.NORMAL
    one_liner: bool = False
    exit_code: int = 0
    exit_flag: bool = False

    @property
    def quiet(self) -> bool:
        return self.verbosity is Verbosity.QUIET

    @property
    def verbose(self) -> bool:
        return self.verbosity is Verbosity.VERBOSE

    def fail(self) -> None:
        """Record that an error happened during the session."""
        self.exit_code = 1
