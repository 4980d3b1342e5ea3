import json
import os

import networkx as nx

from toongraph.export import export_graph, sanitize_graph_for_graphml, to_dot, to_networkx, write_graphml


PROCESS = {
    "id": "login",
    "type": "process",
    "nodes": {
        "start": {"label": "Start", "type": "start"},
        "check": {"label": 'Is "valid"?', "type": "decision"},
        "done": {"type": "end", "metadata": {"tags": ["terminal"]}},
    },
    "edges": [
        {"source": "start", "target": "check", "relation": "flows"},
        {"source": "check", "target": "done", "relation": "guards", "label": "yes"},
    ],
    "metadata": {"tags": ["auth"]},
}


def test_dot_output():
    dot = to_dot(PROCESS)
    lines = dot.splitlines()
    assert lines[0] == 'digraph "login" {'
    assert lines[-1] == "}"
    assert '  "start" [label="Start", shape=circle, style=filled, fillcolor="#c8e6c9", width=0.3];' in lines
    assert '  "check" [label="Is \\"valid\\"?", shape=diamond, style=filled, fillcolor="#fff9c4"];' in lines
    assert any(line.startswith('  "done" [label="done", shape=doublecircle') for line in lines)
    assert '  "start" -> "check" [tooltip="flows"];' in lines
    assert '  "check" -> "done" [label="yes", tooltip="guards"];' in lines


def test_dot_undirected_and_unstyled():
    graph = {"type": "instance", "directed": False, "nodes": {"a": {}}, "edges": [{"source": "a", "target": "a"}]}
    lines = to_dot(graph).splitlines()
    assert lines[0] == 'graph "toongraph" {'
    assert '  "a" [label="a", shape=box];' in lines
    assert '  "a" -- "a";' in lines


def test_to_networkx():
    graph = to_networkx(PROCESS)
    assert isinstance(graph, nx.MultiDiGraph)
    assert graph.graph["type"] == "process"
    assert graph.number_of_nodes() == 3
    assert graph.number_of_edges() == 2
    assert graph.nodes["check"]["type"] == "decision"
    assert graph.get_edge_data("check", "done", 0)["relation"] == "guards"

    undirected = to_networkx({"type": "class", "directed": False, "nodes": {"a": {}}})
    assert isinstance(undirected, nx.MultiGraph)
    assert not undirected.is_directed()


def test_graphml_sanitization_preserves_lists(tmp_path):
    sanitized = sanitize_graph_for_graphml(to_networkx(PROCESS))
    assert sanitized.nodes["done"]["metadata"] == json.dumps({"tags": ["terminal"]})

    path = write_graphml(PROCESS, str(tmp_path / "graph.graphml"))
    loaded = nx.read_graphml(path)
    assert loaded.number_of_nodes() == 3
    assert json.loads(loaded.nodes["done"]["metadata"]) == {"tags": ["terminal"]}


def test_export_creates_files(tmp_path):
    paths = export_graph(PROCESS, str(tmp_path / "out"))
    for key in ("dot", "graphml", "nodes", "edges"):
        assert os.path.exists(paths[key])
    with open(paths["nodes"], "r", encoding="utf-8") as fh:
        nodes = json.load(fh)
    assert nodes[0] == {"id": "start", "label": "Start", "type": "start"}
    with open(paths["edges"], "r", encoding="utf-8") as fh:
        assert len(json.load(fh)) == 2
