"""Pydantic schemas for graph documents.

The models mirror the JSON shape of a document exactly and are used only to
validate it; decoded documents stay plain dictionaries. Strict mode keeps
pydantic from coercing values (``"true"`` is not a boolean, ``1`` is not a
string) and unknown keys are allowed everywhere.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, get_args

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic_core import PydanticCustomError

GraphType = Literal["class", "instance", "process", "workflow"]

NodeType = Literal[
    # class diagrams
    "class",
    "attribute",
    "method",
    # instance diagrams
    "instance",
    # process / state diagrams
    "state",
    "action",
    "decision",
    # workflow control nodes
    "start",
    "end",
    "fork",
    "join",
]

EdgeRelation = Literal[
    "inherits",
    "implements",
    "has",
    "uses",
    "creates",
    "transitions",
    "triggers",
    "flows",
    "guards",
]

GRAPH_TYPES = get_args(GraphType)
NODE_TYPES = get_args(NodeType)
EDGE_RELATIONS = get_args(EdgeRelation)

NonEmptyStr = Annotated[str, Field(min_length=1)]

_DATE_TIME = TypeAdapter(AwareDatetime)


def _check_date_time(value: str) -> str:
    try:
        _DATE_TIME.validate_python(value, strict=False)
    except ValidationError:
        raise PydanticCustomError("format", 'must match format "date-time"') from None
    return value


class _Schema(BaseModel):
    model_config = ConfigDict(strict=True, extra="allow")


class Metadata(_Schema):
    description: Optional[str] = None
    version: Optional[str] = None
    author: Optional[str] = None
    created: Optional[str] = None
    modified: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("created", "modified")
    @classmethod
    def check_date_time(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_date_time(value)


class Node(_Schema):
    label: Optional[str] = None
    type: Optional[NodeType] = None
    metadata: Optional[Dict[str, Any]] = None


class Edge(_Schema):
    id: Optional[str] = None
    source: NonEmptyStr
    target: NonEmptyStr
    relation: Optional[EdgeRelation] = None
    label: Optional[str] = None
    directed: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


class Graph(_Schema):
    id: Optional[str] = None
    type: GraphType
    label: Optional[str] = None
    directed: Optional[bool] = None
    nodes: Dict[str, Node]
    edges: Optional[List[Edge]] = None
    metadata: Optional[Metadata] = None


class Document(_Schema):
    """Root of a graph document.

    Whether exactly one of ``graph``/``graphs`` is present is checked by the
    validator so that it is reported alongside field errors.
    """

    # No Optional: an explicit null is rejected like any other non-object.
    graph: Graph = Field(default=None)
    graphs: List[Graph] = Field(default=None, min_length=1)


__all__ = [
    "Document",
    "EDGE_RELATIONS",
    "Edge",
    "EdgeRelation",
    "GRAPH_TYPES",
    "Graph",
    "GraphType",
    "Metadata",
    "NODE_TYPES",
    "Node",
    "NodeType",
]
