"""Section headers of the compact notation.

Four header shapes open a section::

    graph{id,type,label,directed}:
    nodes[3]{id,label,type}:
    edges[2]{source,target,relation,label}:
    metadata:

The field list in braces fixes the column order of the rows that follow.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

GRAPH_FIELDS: Tuple[str, ...] = ("id", "type", "label", "directed")
NODE_FIELDS: Tuple[str, ...] = ("id", "label", "type")
EDGE_FIELDS: Tuple[str, ...] = ("source", "target", "relation", "label")

_GRAPH_RE = re.compile(r"^graph\{([^}]+)\}:$")
_ARRAY_RE = re.compile(r"^([A-Za-z_][\w-]*)\[(\d+)\]\{([^}]+)\}:$")
_METADATA_RE = re.compile(r"^metadata:$")


class SectionKind(Enum):
    NONE = "none"
    GRAPH = "graph"
    NODES = "nodes"
    EDGES = "edges"
    METADATA = "metadata"


_ARRAY_KINDS = {"nodes": SectionKind.NODES, "edges": SectionKind.EDGES}


@dataclass(frozen=True)
class Section:
    """The active section while walking a document.

    ``count`` is the declared row count of an array header. It is advisory;
    rows are read until the next header regardless of it.
    """

    kind: SectionKind
    fields: Tuple[str, ...] = ()
    count: Optional[int] = None
    name: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.kind is not SectionKind.NONE


NO_SECTION = Section(SectionKind.NONE)


def _split_fields(field_list: str) -> Tuple[str, ...]:
    return tuple(field.strip() for field in field_list.split(","))


def match_header(line: str) -> Optional[Section]:
    """Return the section a header line opens, or ``None`` for other lines.

    An array header with a name other than ``nodes``/``edges`` is still a
    header: it closes the previous section and opens an inactive one so its
    rows are skipped.
    """

    match = _GRAPH_RE.match(line)
    if match:
        return Section(SectionKind.GRAPH, _split_fields(match.group(1)), name="graph")
    match = _ARRAY_RE.match(line)
    if match:
        name = match.group(1)
        kind = _ARRAY_KINDS.get(name, SectionKind.NONE)
        return Section(kind, _split_fields(match.group(3)), count=int(match.group(2)), name=name)
    if _METADATA_RE.match(line):
        return Section(SectionKind.METADATA, name="metadata")
    return None


def graph_header(fields: Sequence[str] = GRAPH_FIELDS) -> str:
    return "graph{" + ",".join(fields) + "}:"


def array_header(name: str, count: int, fields: Sequence[str]) -> str:
    return f"{name}[{count}]{{{','.join(fields)}}}:"


def metadata_header() -> str:
    return "metadata:"


__all__ = [
    "EDGE_FIELDS",
    "GRAPH_FIELDS",
    "NODE_FIELDS",
    "NO_SECTION",
    "Section",
    "SectionKind",
    "array_header",
    "graph_header",
    "match_header",
    "metadata_header",
]
