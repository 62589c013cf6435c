"""rmctl - Administrative client for a cluster resource manager.

rmctl reads short imperative commands (from an interactive prompt or from
the command line) and turns them into structured requests against the
resource manager's controller.

Layers:
    core/       Pure command interpretation (tokenizer, spec parser, routing)
    transport/  Request/response adapters for the controller (socket, HTTP)
    frontends/  User interfaces (CLI entry point, interactive REPL)

Quick Start:
    >>> from rmctl.core import Tokenizer, SpecBuffer, route, build_update
    >>>
    >>> words = Tokenizer().tokenize('update NodeName=lx01 State=DOWN Reason="fan failure"')
    >>> kind = route(words[1:])
    >>> request = build_update(kind, words[1:])
"""

from rmctl.__version__ import __version__
from rmctl.core import (
    EntityKind,
    Field,
    FieldType,
    SpecBuffer,
    Tokenizer,
    extract,
    route,
)

__all__ = [
    "__version__",
    "EntityKind",
    "Field",
    "FieldType",
    "SpecBuffer",
    "Tokenizer",
    "extract",
    "route",
]
