"""
Pytest configuration and fixtures.
"""
import pytest

from flowgraph import FlowGraph, GraphBuilder


@pytest.fixture
def xyz_records():
    """Three flows where X->Z is much weaker than the X<->Y pair."""
    return [
        ("X", "Y", {"all": 50}),
        ("Y", "X", {"all": 10}),
        ("X", "Z", {"all": 2}),
    ]


@pytest.fixture
def xyz_graph(xyz_records):
    return GraphBuilder().build(xyz_records)


@pytest.fixture
def region_records():
    """Vertex attribute records for the X/Y/Z zones."""
    return [
        ("X", {"name": "Harbour", "region": "North", "lon": 4.48, "lat": 51.92}),
        ("Y", {"name": "Centre", "region": "North", "lon": 4.47, "lat": 51.91}),
        ("Z", {"name": "Airport", "region": "South", "lon": 4.43, "lat": 51.95}),
    ]


def make_clique_records(members, weight=10):
    return [(a, b, {"all": weight}) for a in members for b in members if a != b]


@pytest.fixture
def two_cliques():
    """Two disjoint complete digraphs of four vertices each."""
    records = make_clique_records(["a1", "a2", "a3", "a4"]) + make_clique_records(["b1", "b2", "b3", "b4"])
    return GraphBuilder().build(records)


@pytest.fixture
def bridged_cliques():
    """Two complete digraphs of five vertices joined by one weak link pair."""
    left = ["l1", "l2", "l3", "l4", "l5"]
    right = ["r1", "r2", "r3", "r4", "r5"]
    records = make_clique_records(left, 20) + make_clique_records(right, 20)
    records += [("l1", "r1", {"all": 1}), ("r1", "l1", {"all": 1})]
    return GraphBuilder().build(records)


@pytest.fixture
def path_graph():
    """Directed path a -> b -> c -> d plus isolated vertex e."""
    graph = FlowGraph()
    for vertex_id in "abcde":
        graph.add_vertex(vertex_id)
    graph.add_edge("a", "b", {"all": 1, "km": 2.0})
    graph.add_edge("b", "c", {"all": 1, "km": 3.0})
    graph.add_edge("c", "d", {"all": 1, "km": 1.0})
    return graph
