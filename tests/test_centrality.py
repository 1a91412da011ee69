"""
Tests for CentralityAnalyzer.
"""
import math
import threading
import warnings

import pytest

from flowgraph import CentralityAnalyzer, FlowGraph, GraphBuilder, NonConvergenceWarning, OperationCancelledError


def undirected_records(pairs):
    return [(a, b, {"all": 1}) for a, b in pairs]


@pytest.fixture
def star():
    return GraphBuilder().build(undirected_records([("hub", "s1"), ("hub", "s2"), ("hub", "s3")]))


# ── Degree ──────────────────────────────────────────────────────

def test_degree_centrality(path_graph):
    degree = CentralityAnalyzer(path_graph).degree_centrality()
    assert degree == {"a": 1, "b": 2, "c": 2, "d": 1, "e": 0}


def test_degree_centrality_normalized(path_graph):
    degree = CentralityAnalyzer(path_graph).degree_centrality(mode="out", normalized=True)
    assert degree["a"] == pytest.approx(1 / 4)
    assert degree["d"] == 0


def test_degree_counts_parallel_edges():
    graph = GraphBuilder().build([("A", "B", {"f": 1}), ("A", "B", {"f": 1})])
    assert CentralityAnalyzer(graph).degree_centrality() == {"A": 2, "B": 2}


# ── Closeness ───────────────────────────────────────────────────

def test_closeness_unweighted(path_graph):
    closeness = CentralityAnalyzer(path_graph).closeness_centrality()
    assert closeness["a"] == pytest.approx(3 / 6)
    assert closeness["b"] == pytest.approx(2 / 3)
    assert closeness["c"] == pytest.approx(1.0)


def test_closeness_of_vertices_reaching_nothing_is_zero(path_graph):
    closeness = CentralityAnalyzer(path_graph).closeness_centrality()
    assert closeness["d"] == 0.0
    assert closeness["e"] == 0.0


def test_closeness_incoming(path_graph):
    closeness = CentralityAnalyzer(path_graph).closeness_centrality(mode="in")
    assert closeness["d"] == pytest.approx(3 / 6)
    assert closeness["a"] == 0.0


def test_closeness_weighted(path_graph):
    closeness = CentralityAnalyzer(path_graph).closeness_centrality(weight="km")
    assert closeness["a"] == pytest.approx(3 / 13)
    assert closeness["b"] == pytest.approx(2 / 7)
    assert closeness["c"] == pytest.approx(1.0)


def test_closeness_weighted_uses_shortest_parallel_edge():
    graph = GraphBuilder().build([("A", "B", {"km": 5}), ("A", "B", {"km": 2})])
    assert CentralityAnalyzer(graph).closeness_centrality(weight="km")["A"] == pytest.approx(0.5)


def test_closeness_parallel_workers_match_sequential(bridged_cliques):
    analyzer = CentralityAnalyzer(bridged_cliques)
    assert analyzer.closeness_centrality(n_workers=3) == analyzer.closeness_centrality()


def test_closeness_single_vertex():
    graph = FlowGraph()
    graph.add_vertex("only")
    assert CentralityAnalyzer(graph).closeness_centrality() == {"only": 0.0}


def test_closeness_normalized_scales_by_share_reached(path_graph):
    closeness = CentralityAnalyzer(path_graph).closeness_centrality(normalized=True)
    assert closeness["a"] == pytest.approx(3 / 6 * 3 / 4)
    assert closeness["b"] == pytest.approx(2 / 3 * 2 / 4)
    assert closeness["c"] == pytest.approx(1 / 4)
    assert closeness["d"] == 0.0


def test_closeness_normalized_matches_raw_when_all_reached(two_cliques):
    analyzer = CentralityAnalyzer(two_cliques.edge_subgraph(lambda e: e.source.startswith("a")))
    assert analyzer.closeness_centrality(normalized=True) == pytest.approx(analyzer.closeness_centrality())


# ── Eigenvector ─────────────────────────────────────────────────

def test_eigenvector_single_vertex_is_zero():
    graph = FlowGraph()
    graph.add_vertex("only")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        assert CentralityAnalyzer(graph).eigenvector_centrality() == {"only": 0.0}


def test_eigenvector_empty_graph():
    assert CentralityAnalyzer(FlowGraph()).eigenvector_centrality() == {}


def test_eigenvector_triangle_is_uniform():
    graph = GraphBuilder().build(undirected_records([("a", "b"), ("b", "c"), ("c", "a")]))
    scores = CentralityAnalyzer(graph).eigenvector_centrality()
    for value in scores.values():
        assert value == pytest.approx(1 / math.sqrt(3), abs=1e-5)


def test_eigenvector_star(star):
    scores = CentralityAnalyzer(star).eigenvector_centrality()
    assert scores["hub"] == pytest.approx(1 / math.sqrt(2), abs=1e-5)
    for leaf in ("s1", "s2", "s3"):
        assert scores[leaf] == pytest.approx(1 / math.sqrt(6), abs=1e-5)


def test_eigenvector_components_normalised_independently(two_cliques, path_graph):
    scores = CentralityAnalyzer(two_cliques).eigenvector_centrality()
    for value in scores.values():
        assert value == pytest.approx(0.5, abs=1e-5)

    scores = CentralityAnalyzer(path_graph).eigenvector_centrality()
    assert scores["e"] == 0.0
    assert sum(scores[v] ** 2 for v in "abcd") == pytest.approx(1.0)


def test_eigenvector_directed_cycle():
    graph = GraphBuilder().build([("a", "b"), ("b", "c"), ("c", "a")])
    scores = CentralityAnalyzer(graph).eigenvector_centrality(directed=True)
    for value in scores.values():
        assert value == pytest.approx(1 / math.sqrt(3), abs=1e-5)


def test_eigenvector_weighted_favours_heavy_links(xyz_graph):
    scores = CentralityAnalyzer(xyz_graph).eigenvector_centrality(weight="all")
    assert scores["X"] > scores["Y"] > scores["Z"]


def test_eigenvector_non_convergence_warns_with_estimate(star):
    with pytest.warns(NonConvergenceWarning) as record:
        scores = CentralityAnalyzer(star).eigenvector_centrality(max_iter=1)
    warning = record[0].message
    assert warning.iterations == 1
    assert warning.scores == scores
    assert set(scores) == {"hub", "s1", "s2", "s3"}


def test_eigenvector_cancellation(star):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(OperationCancelledError):
        CentralityAnalyzer(star).eigenvector_centrality(cancel=cancel)


def test_centrality_does_not_mutate_graph(xyz_graph):
    before = [(e.key, e.source, e.target, dict(e.weights)) for e in xyz_graph.edges()]
    CentralityAnalyzer(xyz_graph).compute_all(closeness_weight="all", eigenvector_weight="all")
    after = [(e.key, e.source, e.target, dict(e.weights)) for e in xyz_graph.edges()]
    assert before == after
    assert xyz_graph.vertex_ids() == ["X", "Y", "Z"]


def test_compute_all_shape(xyz_graph):
    scores = CentralityAnalyzer(xyz_graph).compute_all()
    assert set(scores) == {"X", "Y", "Z"}
    assert set(scores["X"]) == {"degree", "closeness", "eigenvector"}
    assert scores["X"]["degree"] == 3
    assert scores["Z"]["closeness"] == 0.0
