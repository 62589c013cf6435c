"""Core - Command interpretation and client settings.

This module knows nothing about prompts, sockets or the controller. It
turns text into words, words into entity kinds, and specification text
into typed requests. Apart from that pipeline it holds the client
configuration (which reads YAML and ``.env.local`` files) and the logging
setup (which may open a log file).

Architecture:
    tokenizer     Quote-aware line splitting with ``!!`` replay
    spec_parser   Typed ``Keyword=value`` extraction from a mutable buffer
    entity        Entity kind routing for update/delete
    requests      Entity field lists and request dataclasses
    errors        Exception hierarchy and error codes
    config        Client configuration (env, YAML, defaults)

Example:
    >>> from rmctl.core import Tokenizer, route, build_update
    >>>
    >>> words = Tokenizer().tokenize("JobId=42 TimeLimit=120 Partition=debug")
    >>> kind = route(words)
    >>> build_update(kind, words).to_params()
    {'job_id': 42, 'time_limit': 120, 'partition': 'debug'}
"""

from rmctl.core.entity import EntityKind, route
from rmctl.core.errors import (
    ControllerUnavailableError,
    ErrorCode,
    InvalidInputError,
    NoValidEntityError,
    RemoteError,
    RmctlError,
    SpecParseError,
    TokenizeError,
    TooManyWordsError,
    describe,
)
from rmctl.core.requests import (
    BlockUpdate,
    JobUpdate,
    NodeUpdate,
    PartitionDelete,
    PartitionUpdate,
    build_delete,
    build_update,
)
from rmctl.core.spec_parser import Field, FieldType, SpecBuffer, extract, extract_words
from rmctl.core.tokenizer import MAX_INPUT_FIELDS, Tokenizer, Word, split_words

__all__ = [
    # Tokenizer
    "MAX_INPUT_FIELDS",
    "Tokenizer",
    "split_words",
    "Word",
    # Spec parser
    "Field",
    "FieldType",
    "SpecBuffer",
    "extract",
    "extract_words",
    # Routing and requests
    "EntityKind",
    "route",
    "build_update",
    "build_delete",
    "NodeUpdate",
    "PartitionUpdate",
    "JobUpdate",
    "BlockUpdate",
    "PartitionDelete",
    # Errors
    "ErrorCode",
    "describe",
    "RmctlError",
    "TokenizeError",
    "TooManyWordsError",
    "SpecParseError",
    "InvalidInputError",
    "NoValidEntityError",
    "RemoteError",
    "ControllerUnavailableError",
]
