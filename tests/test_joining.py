"""
Tests for AttributeJoiner.
"""
import pytest

from flowgraph import AttributeJoiner, AttributeConflictError, pyvertexrecord


SCORES = {
    "X": {"degree": 3.0, "closeness": 1.0},
    "Y": {"degree": 2.0, "closeness": 1.0},
}
LABELS = {"X": 0, "Y": 0}


def test_join_is_a_left_join(region_records):
    joined = AttributeJoiner().join(region_records, scores=SCORES, labels=LABELS)

    assert [r.id for r in joined] == ["X", "Y", "Z"]
    assert joined[0].attributes["degree"] == 3.0
    assert joined[0].attributes["community"] == 0
    assert joined[0].attributes["name"] == "Harbour"
    assert joined[2].attributes["degree"] is None
    assert joined[2].attributes["community"] is None


def test_join_does_not_modify_inputs(region_records):
    AttributeJoiner().join(region_records, scores=SCORES)
    assert "degree" not in region_records[0][1]


def test_join_custom_label_and_missing_value(region_records):
    joined = AttributeJoiner(label_name="cluster", missing=-1).join(region_records, labels=LABELS)
    assert joined[0].attributes["cluster"] == 0
    assert joined[2].attributes["cluster"] == -1
    assert isinstance(joined[0], pyvertexrecord)


def test_join_conflict():
    records = [("X", {"degree": "high"})]
    with pytest.raises(AttributeConflictError):
        AttributeJoiner().join(records, scores=SCORES)
    joined = AttributeJoiner(overwrite=True).join(records, scores=SCORES)
    assert joined[0].attributes["degree"] == 3.0


def test_annotate_graph(xyz_graph):
    annotated = AttributeJoiner().annotate(xyz_graph, scores=SCORES, labels=LABELS)
    assert annotated.get_vertex("X").attributes["community"] == 0
    assert annotated.get_vertex("Z").attributes["closeness"] is None
    assert xyz_graph.get_vertex("X").attributes == {}


def test_annotate_ignores_unknown_ids(xyz_graph):
    annotated = AttributeJoiner().annotate(xyz_graph, labels={"X": 1, "Q": 2})
    assert "Q" not in annotated
    assert annotated.get_vertex("X").attributes["community"] == 1
