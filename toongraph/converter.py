"""Convert graph documents to and from the compact notation.

Example::

    graph{id,type,label,directed}:
      login,process,Login Process,true

    nodes[2]{id,label,type}:
      start,Start,start
      done,Done,end

    edges[1]{source,target,relation,label}:
      start,done,flows,

    metadata:
      tags: [auth,example]

Decoding never raises on odd input: unknown lines are skipped, short rows
leave fields unset and edges without both endpoints are dropped. Use
:func:`toongraph.validator.validate` to reject structurally invalid results.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Mapping

from .rows import INDENT, decode_row, encode_row, split_row, strip_indent
from .sections import (
    EDGE_FIELDS,
    GRAPH_FIELDS,
    NO_SECTION,
    NODE_FIELDS,
    Section,
    SectionKind,
    array_header,
    graph_header,
    match_header,
    metadata_header,
)
from .utils import logger
from .values import decode_value, encode_value, quote_text, unquote

# Columns that always hold text, even when a cell looks like a number.
TEXT_FIELDS = frozenset({"id", "label", "type", "source", "target", "relation"})
_CONTAINER_KEYS = frozenset({"nodes", "edges", "metadata"})


def _present(value: Any) -> bool:
    return value is not None and value != ""


def parse_metadata_value(text: str) -> Any:
    """Decode the right-hand side of a ``key: value`` metadata line."""
    if len(text) >= 2 and text.startswith("[") and text.endswith("]"):
        inner = text[1:-1].strip()
        if not inner:
            return []
        return [unquote(item) for item in split_row(inner)]
    return decode_value(text)


def format_metadata_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(encode_value(item) for item in value) + "]"
    if isinstance(value, str) and value.startswith("[") and value.endswith("]"):
        # Written bare it would read back as a list.
        return quote_text(value)
    return encode_value(value)


class GraphDecoder:
    """Line-at-a-time state machine that assembles a single graph."""

    def __init__(self) -> None:
        self.graph: Dict[str, Any] = {"type": "class", "nodes": {}}
        self.section: Section = NO_SECTION
        self.line_no = 0
        self._seen_graph = False
        self._handlers: Dict[SectionKind, Callable[[str], None]] = {
            SectionKind.GRAPH: self._graph_row,
            SectionKind.NODES: self._node_row,
            SectionKind.EDGES: self._edge_row,
            SectionKind.METADATA: self._metadata_row,
        }

    def feed(self, raw: str) -> bool:
        """Consume one line. Returns ``False`` once decoding should stop."""
        self.line_no += 1
        line = raw.rstrip()
        if not line.strip():
            return True
        header = match_header(line)
        if header is not None:
            return self._enter(header)
        if line.startswith(INDENT) and self.section.active:
            self._handlers[self.section.kind](line)
        else:
            logger.debug("Ignoring line %d outside a section: %r", self.line_no, line)
        return True

    def _enter(self, header: Section) -> bool:
        if header.kind is SectionKind.GRAPH:
            if self._seen_graph:
                logger.debug("Ignoring additional graph block at line %d", self.line_no)
                return False
            self._seen_graph = True
        elif header.kind is SectionKind.EDGES:
            self.graph.setdefault("edges", [])
        elif header.kind is SectionKind.METADATA:
            self.graph.setdefault("metadata", {})
        elif header.kind is SectionKind.NONE:
            logger.debug("Skipping rows of unknown section %r at line %d", header.name, self.line_no)
        self.section = header
        return True

    def _graph_row(self, line: str) -> None:
        row = decode_row(line, self.section.fields, TEXT_FIELDS)
        for field, value in row.items():
            if value is None or field in _CONTAINER_KEYS:
                continue
            if field == "directed":
                self.graph["directed"] = value is True
            else:
                self.graph[field] = value

    def _node_row(self, line: str) -> None:
        nodes = self.graph["nodes"]
        row = decode_row(line, self.section.fields, TEXT_FIELDS)
        node_id = row.get("id")
        if not node_id:
            node_id = f"node_{len(nodes)}"
        nodes[node_id] = {field: value for field, value in row.items() if field != "id" and _present(value)}

    def _edge_row(self, line: str) -> None:
        row = decode_row(line, self.section.fields, TEXT_FIELDS)
        edge = {field: value for field, value in row.items() if _present(value)}
        if edge.get("source") and edge.get("target"):
            self.graph["edges"].append(edge)
        else:
            logger.debug("Dropping edge without both endpoints at line %d", self.line_no)

    def _metadata_row(self, line: str) -> None:
        data = strip_indent(line)
        colon = data.find(":")
        if colon <= 0:
            logger.debug("Ignoring metadata line %d without a key", self.line_no)
            return
        key = data[:colon].strip()
        self.graph["metadata"][key] = parse_metadata_value(data[colon + 1 :].strip())


def decode(text: str) -> Dict[str, Any]:
    """Parse compact notation into a ``{"graph": ...}`` document."""
    decoder = GraphDecoder()
    for line in text.split("\n"):
        if not decoder.feed(line):
            break
    return {"graph": decoder.graph}


def iter_graphs(document: Mapping[str, Any]) -> Iterator[Mapping[str, Any]]:
    if document.get("graph") is not None:
        yield document["graph"]
    for graph in document.get("graphs") or []:
        yield graph


def encode_graph(graph: Mapping[str, Any]) -> List[str]:
    blocks: List[List[str]] = []

    record = {
        "id": graph.get("id"),
        "type": graph.get("type"),
        "label": graph.get("label"),
        "directed": graph.get("directed") is not False,
    }
    blocks.append([graph_header(GRAPH_FIELDS), encode_row(GRAPH_FIELDS, record)])

    nodes = graph.get("nodes") or {}
    if nodes:
        block = [array_header("nodes", len(nodes), NODE_FIELDS)]
        for node_id, node in nodes.items():
            block.append(encode_row(NODE_FIELDS, {**(node or {}), "id": node_id}))
        blocks.append(block)

    edges = graph.get("edges") or []
    if edges:
        block = [array_header("edges", len(edges), EDGE_FIELDS)]
        block.extend(encode_row(EDGE_FIELDS, edge) for edge in edges)
        blocks.append(block)

    metadata = graph.get("metadata") or {}
    if metadata:
        block = [metadata_header()]
        for key, value in metadata.items():
            block.append(f"{INDENT}{key}: {format_metadata_value(value)}")
        blocks.append(block)

    lines: List[str] = []
    for block in blocks:
        if lines:
            lines.append("")
        lines.extend(block)
    return lines


def encode(document: Mapping[str, Any]) -> str:
    """Render every graph of ``document`` in compact notation.

    Graphs of a ``graphs`` list are separated by a blank line. Node and edge
    metadata, and node or edge attributes outside the fixed columns, are not
    written.
    """

    lines: List[str] = []
    for graph in iter_graphs(document):
        if lines:
            lines.append("")
        lines.extend(encode_graph(graph))
    return "\n".join(lines)


__all__ = [
    "GraphDecoder",
    "TEXT_FIELDS",
    "decode",
    "encode",
    "encode_graph",
    "format_metadata_value",
    "iter_graphs",
    "parse_metadata_value",
]
