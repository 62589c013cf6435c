"""Decide which kind of cluster entity an update or delete targets."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from enum import Enum

from rmctl.core.errors import NoValidEntityError

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """Cluster object types that accept updates.

    The value is the keyword that identifies the entity in specification
    text.
    """

    NODE = "NodeName"
    PARTITION = "PartitionName"
    JOB = "JobId"
    BLOCK = "BlockName"

    @property
    def prefix(self) -> str:
        return f"{self.value}="


def route(tokens: Sequence[str]) -> EntityKind:
    """Return the entity kind named by the first identifying token.

    Tokens are scanned in order and the first one starting with
    ``NodeName=``, ``PartitionName=``, ``JobId=`` or ``BlockName=``
    (case-insensitive) decides; position wins over keyword.

    Raises:
        NoValidEntityError: If no token carries an identifying keyword.
    """
    for token in tokens:
        lowered = token.lower()
        for kind in EntityKind:
            if lowered.startswith(kind.prefix.lower()):
                logger.debug("entity_routed: kind=%s token=%s", kind.name, token)
                return kind

    names = ", ".join(f'"{kind.value}"' for kind in EntityKind)
    raise NoValidEntityError(f"No valid entity in request. Input line must include one of {names}")
