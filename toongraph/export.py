"""Graph export utilities (DOT, GraphML, networkx)."""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Mapping, Union

import networkx as nx

from .utils import logger

NODE_STYLES = {
    "class": 'shape=box, style=filled, fillcolor="#e3f2fd"',
    "attribute": 'shape=ellipse, style=filled, fillcolor="#fff3e0"',
    "method": 'shape=ellipse, style=filled, fillcolor="#f3e5f5"',
    "instance": 'shape=box, style="filled,rounded", fillcolor="#e8f5e9"',
    "state": 'shape=box, style="filled,rounded", fillcolor="#fce4ec"',
    "action": 'shape=box, style=filled, fillcolor="#e0f7fa"',
    "decision": 'shape=diamond, style=filled, fillcolor="#fff9c4"',
    "start": 'shape=circle, style=filled, fillcolor="#c8e6c9", width=0.3',
    "end": 'shape=doublecircle, style=filled, fillcolor="#ffcdd2", width=0.3',
    "fork": 'shape=rect, style=filled, fillcolor="#424242", width=1, height=0.1',
    "join": 'shape=rect, style=filled, fillcolor="#424242", width=1, height=0.1',
}
DEFAULT_NODE_STYLE = "shape=box"

NxGraph = Union[nx.MultiDiGraph, nx.MultiGraph]


def _quote(text: Any) -> str:
    return '"' + str(text).replace("\\", "\\\\").replace('"', '\\"') + '"'


def is_directed(graph: Mapping[str, Any]) -> bool:
    return graph.get("directed") is not False


def to_dot(graph: Mapping[str, Any]) -> str:
    """Render ``graph`` as Graphviz DOT, styling nodes by their type."""
    directed = is_directed(graph)
    edge_op = "->" if directed else "--"
    lines = [
        f"{'digraph' if directed else 'graph'} {_quote(graph.get('id') or 'toongraph')} {{",
        "  rankdir=TB;",
        '  node [fontname="Helvetica", fontsize=11];',
        '  edge [fontname="Helvetica", fontsize=10];',
        "",
    ]
    for node_id, node in (graph.get("nodes") or {}).items():
        node = node or {}
        style = NODE_STYLES.get(node.get("type") or "", DEFAULT_NODE_STYLE)
        lines.append(f"  {_quote(node_id)} [label={_quote(node.get('label') or node_id)}, {style}];")
    lines.append("")
    for edge in graph.get("edges") or []:
        attrs: List[str] = []
        if edge.get("label"):
            attrs.append(f"label={_quote(edge['label'])}")
        if edge.get("relation"):
            attrs.append(f"tooltip={_quote(edge['relation'])}")
        attr_str = f" [{', '.join(attrs)}]" if attrs else ""
        lines.append(f"  {_quote(edge['source'])} {edge_op} {_quote(edge['target'])}{attr_str};")
    lines.append("}")
    return "\n".join(lines)


def to_networkx(graph: Mapping[str, Any]) -> NxGraph:
    """Build a networkx multigraph; graph-level fields land in ``G.graph``."""
    nx_graph: NxGraph = nx.MultiDiGraph() if is_directed(graph) else nx.MultiGraph()
    for key in ("id", "type", "label", "metadata"):
        if graph.get(key) is not None:
            nx_graph.graph[key] = graph[key]
    for node_id, node in (graph.get("nodes") or {}).items():
        nx_graph.add_node(node_id, **(node or {}))
    for edge in graph.get("edges") or []:
        attrs = {key: value for key, value in edge.items() if key not in ("source", "target")}
        nx_graph.add_edge(edge["source"], edge["target"], **attrs)
    return nx_graph


def _is_scalar(value: object) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _sanitize_value(value: object) -> object:
    if _is_scalar(value):
        return value
    try:
        return json.dumps(value, ensure_ascii=False)
    except TypeError:
        return json.dumps(str(value), ensure_ascii=False)


def sanitize_graph_for_graphml(graph: NxGraph) -> NxGraph:
    """Return a copy whose non-scalar attributes are JSON strings.

    The GraphML writer only accepts scalar attributes, and ``None`` values are
    dropped.
    """

    def _clean(data: Mapping[str, Any]) -> Dict[str, Any]:
        return {key: _sanitize_value(val) for key, val in data.items() if val is not None}

    safe = graph.__class__()
    safe.graph.update(_clean(graph.graph))
    for node, data in graph.nodes(data=True):
        safe.add_node(node, **_clean(data))
    for u, v, data in graph.edges(data=True):
        safe.add_edge(u, v, **_clean(data))
    return safe


def write_graphml(graph: Mapping[str, Any], path: str) -> str:
    nx.write_graphml(sanitize_graph_for_graphml(to_networkx(graph)), path)
    return path


def export_graph(graph: Mapping[str, Any], out_dir: str) -> Dict[str, str]:
    """Write DOT, GraphML and JSON node/edge listings of ``graph`` to ``out_dir``."""
    os.makedirs(out_dir, exist_ok=True)
    dot_path = os.path.join(out_dir, "graph.dot")
    graphml_path = os.path.join(out_dir, "graph.graphml")
    nodes_path = os.path.join(out_dir, "nodes.json")
    edges_path = os.path.join(out_dir, "edges.json")

    nodes = []
    for node_id, data in (graph.get("nodes") or {}).items():
        record = {"id": node_id}
        record.update(data or {})
        nodes.append(record)

    with open(dot_path, "w", encoding="utf-8") as fh:
        fh.write(to_dot(graph) + "\n")
    write_graphml(graph, graphml_path)
    with open(nodes_path, "w", encoding="utf-8") as fh:
        json.dump(nodes, fh, indent=2)
    with open(edges_path, "w", encoding="utf-8") as fh:
        json.dump(list(graph.get("edges") or []), fh, indent=2)
    logger.debug("Exported graph %s to %s", graph.get("id"), out_dir)

    return {
        "dot": dot_path,
        "graphml": graphml_path,
        "nodes": nodes_path,
        "edges": edges_path,
    }


__all__ = [
    "DEFAULT_NODE_STYLE",
    "NODE_STYLES",
    "export_graph",
    "is_directed",
    "sanitize_graph_for_graphml",
    "to_dot",
    "to_networkx",
    "write_graphml",
]
