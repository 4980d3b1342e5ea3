from toongraph.sections import (
    NODE_FIELDS,
    SectionKind,
    array_header,
    graph_header,
    match_header,
    metadata_header,
)


def test_match_graph_header():
    section = match_header("graph{id, type,label}:")
    assert section.kind is SectionKind.GRAPH
    assert section.fields == ("id", "type", "label")


def test_match_array_headers():
    nodes = match_header("nodes[3]{id,label,type}:")
    assert nodes.kind is SectionKind.NODES
    assert nodes.count == 3
    assert nodes.fields == NODE_FIELDS

    edges = match_header("edges[0]{source,target}:")
    assert edges.kind is SectionKind.EDGES
    assert edges.active


def test_unknown_array_is_an_inactive_section():
    section = match_header("extras[2]{id}:")
    assert section.kind is SectionKind.NONE
    assert section.name == "extras"
    assert not section.active


def test_non_headers():
    assert match_header("metadata:").kind is SectionKind.METADATA
    for line in ("  nodes[1]{id}:", "graph{}:", "nodes{id}:", "metadata", "hello"):
        assert match_header(line) is None


def test_headers_round_trip():
    assert match_header(graph_header()).kind is SectionKind.GRAPH
    assert array_header("edges", 2, ("source", "target")) == "edges[2]{source,target}:"
    assert match_header(metadata_header()).kind is SectionKind.METADATA
