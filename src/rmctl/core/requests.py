"""Typed update/delete requests built from specification text.

Each entity kind declares the keywords it accepts as a list of ``Field``
descriptors. A request is built completely (parsed, checked for leftover
text, enumerations validated) before anything is sent, so a bad field
never results in a partial update on the controller.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from typing import Any

from rmctl.core.entity import EntityKind
from rmctl.core.errors import InvalidInputError
from rmctl.core.spec_parser import Field, FieldType, extract_words

NODE_STATES = ("DOWN", "DRAIN", "FAIL", "IDLE", "RESUME")
PARTITION_STATES = ("UP", "DOWN")
PARTITION_SHARED = ("YES", "NO", "FORCE")
BLOCK_STATES = ("FREE", "ERROR")
YES_NO = ("YES", "NO")

CHECKPOINT_OPS = ("able", "disable", "enable", "create", "vacate", "restart", "error")


class _Request:
    """Common behavior of request dataclasses."""

    def to_params(self) -> dict[str, Any]:
        """Fields that were set, for the wire."""
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class NodeUpdate(_Request):
    node_name: str | None = None
    state: str | None = None
    reason: str | None = None
    features: str | None = None
    weight: int | None = None


@dataclass
class PartitionUpdate(_Request):
    partition_name: str | None = None
    nodes: str | None = None
    allow_groups: str | None = None
    max_time: int | None = None
    max_nodes: int | None = None
    min_nodes: int | None = None
    default: str | bool | None = None
    hidden: str | bool | None = None
    root_only: str | bool | None = None
    shared: str | None = None
    state: str | None = None


@dataclass
class JobUpdate(_Request):
    job_id: int | None = None
    time_limit: int | None = None
    priority: int | None = None
    nice: int | None = None
    req_procs: int | None = None
    min_nodes: int | None = None
    min_memory: int | None = None
    partition: str | None = None
    name: str | None = None
    features: str | None = None
    account: str | None = None
    req_node_list: str | None = None
    exc_node_list: str | None = None
    dependency: int | None = None


@dataclass
class BlockUpdate(_Request):
    block_name: str | None = None
    state: str | None = None


@dataclass
class PartitionDelete(_Request):
    partition_name: str | None = None


UpdateRequest = NodeUpdate | PartitionUpdate | JobUpdate | BlockUpdate


NODE_FIELDS = (
    Field("NodeName", FieldType.STRING, "node_name"),
    Field("State", FieldType.STRING, "state"),
    Field("Reason", FieldType.STRING, "reason"),
    Field("Features", FieldType.STRING, "features"),
    Field("Weight", FieldType.INT, "weight"),
)

PARTITION_FIELDS = (
    Field("PartitionName", FieldType.STRING, "partition_name"),
    Field("Nodes", FieldType.STRING, "nodes"),
    Field("AllowGroups", FieldType.STRING, "allow_groups"),
    Field("MaxTime", FieldType.INT, "max_time"),
    Field("MaxNodes", FieldType.INT, "max_nodes"),
    Field("MinNodes", FieldType.INT, "min_nodes"),
    Field("Default", FieldType.STRING, "default"),
    Field("Hidden", FieldType.STRING, "hidden"),
    Field("RootOnly", FieldType.STRING, "root_only"),
    Field("Shared", FieldType.STRING, "shared"),
    Field("State", FieldType.STRING, "state"),
)

JOB_FIELDS = (
    Field("JobId", FieldType.INT, "job_id"),
    Field("TimeLimit", FieldType.INT, "time_limit"),
    Field("Priority", FieldType.LONG, "priority"),
    Field("Nice", FieldType.INT, "nice"),
    Field("ReqProcs", FieldType.INT, "req_procs"),
    Field("MinNodes", FieldType.INT, "min_nodes"),
    Field("MinMemory", FieldType.LONG, "min_memory"),
    Field("Partition", FieldType.STRING, "partition"),
    Field("Name", FieldType.STRING, "name"),
    Field("Features", FieldType.STRING, "features"),
    Field("Account", FieldType.STRING, "account"),
    Field("ReqNodeList", FieldType.STRING, "req_node_list"),
    Field("ExcNodeList", FieldType.STRING, "exc_node_list"),
    Field("Dependency", FieldType.INT, "dependency"),
)

BLOCK_FIELDS = (
    Field("BlockName", FieldType.STRING, "block_name"),
    Field("State", FieldType.STRING, "state"),
)

ENTITY_FIELDS: dict[EntityKind, tuple[Field, ...]] = {
    EntityKind.NODE: NODE_FIELDS,
    EntityKind.PARTITION: PARTITION_FIELDS,
    EntityKind.JOB: JOB_FIELDS,
    EntityKind.BLOCK: BLOCK_FIELDS,
}

_UPDATE_CLASSES: dict[EntityKind, type[UpdateRequest]] = {
    EntityKind.NODE: NodeUpdate,
    EntityKind.PARTITION: PartitionUpdate,
    EntityKind.JOB: JobUpdate,
    EntityKind.BLOCK: BlockUpdate,
}


def _choice(keyword: str, value: str | None, choices: Sequence[str]) -> str | None:
    """Normalize an enumerated value, rejecting anything not in ``choices``."""
    if value is None:
        return None
    normalized = value.upper()
    if normalized not in choices:
        raise InvalidInputError(
            f"Invalid input: {keyword}={value}\n"
            f"Acceptable {keyword} values are {', '.join(choices)}"
        )
    return normalized


def _yes_no(keyword: str, value: str | bool | None) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    return _choice(keyword, value, YES_NO) == "YES"


def _parse(tokens: Sequence[str], fields: Sequence[Field], target: Any) -> None:
    """Extract ``fields`` into ``target`` and reject anything left over."""
    leftover = extract_words(tokens, fields, target)
    if leftover:
        raise InvalidInputError(f"Invalid input: {' '.join(leftover)}")


def build_update(kind: EntityKind, tokens: Sequence[str]) -> UpdateRequest:
    """Build the update request for ``kind`` from specification words.

    Args:
        kind: Entity kind chosen by ``route``.
        tokens: Specification words (without the ``update`` keyword).

    Raises:
        SpecParseError: A value is missing or malformed.
        InvalidInputError: Unknown keywords or unacceptable values.
    """
    request = _UPDATE_CLASSES[kind]()
    _parse(tokens, ENTITY_FIELDS[kind], request)

    if isinstance(request, NodeUpdate):
        request.state = _choice("State", request.state, NODE_STATES)
    elif isinstance(request, PartitionUpdate):
        request.state = _choice("State", request.state, PARTITION_STATES)
        request.shared = _choice("Shared", request.shared, PARTITION_SHARED)
        request.default = _yes_no("Default", request.default)
        request.hidden = _yes_no("Hidden", request.hidden)
        request.root_only = _yes_no("RootOnly", request.root_only)
    elif isinstance(request, BlockUpdate):
        request.state = _choice("State", request.state, BLOCK_STATES)

    return request


def build_delete(kind: EntityKind, tokens: Sequence[str]) -> PartitionDelete:
    """Build a delete request. Only partitions can be deleted.

    Raises:
        InvalidInputError: The words do not name a partition, or carry
            anything besides ``PartitionName``.
    """
    if kind is not EntityKind.PARTITION:
        raise InvalidInputError(f"Invalid deletion entity: {kind.value}")

    request = PartitionDelete()
    _parse(tokens, (Field("PartitionName", FieldType.STRING, "partition_name"),), request)
    return request


def parse_job_id(text: str) -> int:
    """Parse a positive job id."""
    if not text.isdigit() or int(text) == 0:
        raise InvalidInputError(f"Invalid job id specified: {text}")
    return int(text)


def parse_job_step(text: str) -> tuple[int, int | None]:
    """Parse ``jobid`` or ``jobid.stepid``."""
    job, sep, step = text.partition(".")
    job_id = parse_job_id(job)
    if not sep:
        return job_id, None
    if not step.isdigit():
        raise InvalidInputError(f"Invalid job step id specified: {text}")
    return job_id, int(step)
