"""
Tests for GraphBuilder.
"""
import pytest

from flowgraph import (
    AggregationPolicy, ConstructionError, DuplicateVertexError, GraphBuilder,
    MissingVertexAttributeError, NegativeWeightError, UnknownVertexError, pyflowrecord, pyvertexrecord,
)


def test_keep_all_makes_parallel_edges():
    records = [("A", "B", {"flow": 3}), ("A", "B", {"flow": 4})]
    graph = GraphBuilder(aggregation="keep-all").build(records)

    assert graph.number_of_edges == 2
    assert sorted(e.weights["flow"] for e in graph.edges()) == [3, 4]


def test_sum_duplicates_merges_ordered_pairs():
    records = [("A", "B", {"flow": 3}), ("A", "B", {"flow": 4}), ("B", "A", {"flow": 1})]
    graph = GraphBuilder(aggregation=AggregationPolicy.SUM_DUPLICATES).build(records)

    assert graph.number_of_edges == 2
    forward = [e for e in graph.edges() if (e.source, e.target) == ("A", "B")]
    assert len(forward) == 1
    assert forward[0].weights["flow"] == 7


def test_sum_duplicates_takes_union_of_weight_names():
    records = [("A", "B", {"bike": 2}), ("A", "B", {"bike": 1, "walk": 5})]
    graph = GraphBuilder(aggregation="sum-duplicates").build(records)
    (edge,) = graph.edges()
    assert dict(edge.weights) == {"bike": 3, "walk": 5}


def test_invalid_policy_name():
    with pytest.raises(ValueError):
        GraphBuilder(aggregation="mean")


def test_vertices_in_first_seen_order(xyz_graph):
    assert xyz_graph.vertex_ids() == ["X", "Y", "Z"]


def test_builder_keeps_self_loops():
    graph = GraphBuilder().build([("A", "A", {"flow": 1}), ("A", "B", {"flow": 1})])
    assert graph.number_of_edges == 2
    assert graph.degree("A") == 3


def test_attach_vertex_records(xyz_records, region_records):
    graph = GraphBuilder().build(xyz_records, region_records)
    assert graph.get_vertex("Z").attributes["name"] == "Airport"
    assert graph.get_vertex("X").attributes["region"] == "North"


def test_unmatched_endpoints_get_empty_attributes(xyz_records):
    graph = GraphBuilder().build(xyz_records, [("X", {"name": "Harbour"})])
    assert graph.get_vertex("Y").attributes == {}


def test_strict_mode_rejects_unmatched_vertex_records(xyz_records, region_records):
    records = region_records + [("Q", {"name": "Nowhere"})]
    with pytest.raises(MissingVertexAttributeError) as excinfo:
        GraphBuilder(strict=True).build(xyz_records, records)
    assert excinfo.value.vertex_ids == ["Q"]


def test_non_strict_mode_skips_or_adds_unmatched_records(xyz_records, region_records):
    records = region_records + [("Q", {"name": "Nowhere"})]
    skipped = GraphBuilder().build(xyz_records, records)
    assert "Q" not in skipped

    added = GraphBuilder(include_isolated=True).build(xyz_records, records)
    assert "Q" in added
    assert added.degree("Q") == 0


def test_duplicate_vertex_records_fail(xyz_records):
    with pytest.raises(DuplicateVertexError):
        GraphBuilder().build(xyz_records, [("X", {}), ("X", {})])


def test_records_vertex_source_rejects_unknown_endpoint(xyz_records):
    vertices = [("X", {}), ("Y", {})]
    graph = None
    with pytest.raises(ConstructionError) as excinfo:
        graph = GraphBuilder(vertex_source="records").build(xyz_records, vertices)
    assert isinstance(excinfo.value, UnknownVertexError)
    assert graph is None


def test_records_vertex_source_uses_record_order(xyz_records, region_records):
    graph = GraphBuilder(vertex_source="records").build(xyz_records, list(reversed(region_records)))
    assert graph.vertex_ids() == ["Z", "Y", "X"]


def test_negative_weight_aborts_construction():
    with pytest.raises(NegativeWeightError):
        GraphBuilder().build([("A", "B", {"flow": 1}), ("B", "C", {"flow": -2})])
    with pytest.raises(NegativeWeightError):
        GraphBuilder(aggregation="sum-duplicates").build([("A", "B", {"flow": -2})])


def test_accepts_named_records_and_pairs():
    graph = GraphBuilder().build([pyflowrecord("A", "B", {"flow": 1}), ("B", "C")])
    assert graph.number_of_edges == 2
    assert dict(graph.edges()[1].weights) == {}


def test_rejects_malformed_record():
    with pytest.raises(TypeError):
        GraphBuilder().build(["A-B"])


def test_from_columns():
    graph = GraphBuilder.from_columns(
        ["A", "A", "B"], ["B", "B", "A"], {"all": [1, 2, 3], "bike": [0, 1, 1]},
        aggregation="sum-duplicates",
    )
    assert graph.number_of_edges == 2
    forward = [e for e in graph.edges() if e.source == "A"][0]
    assert dict(forward.weights) == {"all": 3, "bike": 1}


def test_from_columns_length_mismatch():
    with pytest.raises(ValueError):
        GraphBuilder.from_columns(["A"], ["B", "C"])
    with pytest.raises(ValueError):
        GraphBuilder.from_columns(["A"], ["B"], {"all": [1, 2]})


def test_strict_is_rejected_with_record_vertices():
    with pytest.raises(ValueError, match="strict"):
        GraphBuilder(strict=True, vertex_source="records")


def test_records_without_mappings_do_not_share_defaults():
    first, second = pyflowrecord("A", "B"), pyflowrecord("B", "C")
    with pytest.raises(TypeError):
        first.weights["flow"] = 1
    assert dict(second.weights) == {}
    with pytest.raises(TypeError):
        pyvertexrecord("A").attributes["name"] = "Harbour"
