"""
End-to-end tests through the pyflowgraph facade.
"""
import pytest

from flowgraph import GraphBuilder, PruningInfeasibleError, pyflowgraph


def test_end_to_end(xyz_records, region_records):
    network = pyflowgraph(xyz_records, region_records, weight="all")

    scores = network.centrality()
    assert scores["X"]["degree"] == 3
    assert scores["Z"]["closeness"] == 0.0

    labels = network.detect_communities(floor=2)
    assert network.pruning.final_threshold == 3
    assert network.pruning.vertices_removed == 1
    assert set(labels) == {"X", "Y"}
    assert labels["X"] == labels["Y"]

    # The original graph is still complete
    assert network.graph.number_of_edges == 3

    table = {record.id: record.attributes for record in network.vertex_table()}
    assert table["X"]["name"] == "Harbour"
    assert table["X"]["community"] == labels["X"]
    assert table["Z"]["community"] is None
    assert table["Z"]["degree"] == 1


def test_detect_without_pruning(two_cliques):
    records = [(e.source, e.target, dict(e.weights)) for e in two_cliques.edges()]
    network = pyflowgraph(records, weight="all")
    labels = network.detect_communities(floor=None)
    assert network.pruning is None
    assert len(set(labels.values())) == 2


def test_failed_pruning_keeps_original(xyz_records):
    network = pyflowgraph(xyz_records, weight="all")
    with pytest.raises(PruningInfeasibleError):
        network.detect_communities(floor=3)
    assert network.graph.number_of_edges == 3
    assert network.labels is None


def test_custom_builder_and_annotated_graph(xyz_records):
    records = xyz_records + [("X", "Y", {"all": 5})]
    network = pyflowgraph(records, weight="all", builder=GraphBuilder(aggregation="sum-duplicates"))
    assert network.graph.number_of_edges == 3

    network.centrality()
    annotated = network.annotated_graph()
    assert annotated.get_vertex("X").attributes["degree"] == 3
    assert "degree" not in network.graph.get_vertex("X").attributes
