"""
Main facade class for origin-destination flow network analysis.

This module provides the pyflowgraph class that wires the builder,
centrality analyzer, pruner, community detector and joiner together
behind a single object.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..classes.graph_builders import GraphBuilder
from ..classes.options import DEFAULT_DEGREE_FLOOR, DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE
from ..classes.records import pyvertexrecord
from .graph import FlowGraph
from ..analysis.centrality import CentralityAnalyzer
from ..analysis.community import CommunityDetector
from ..operations.joining import AttributeJoiner
from ..operations.pruning import EdgePruner, PruningReport

logger = logging.getLogger(__name__)


class pyflowgraph:
    """
    Main facade class for flow network analysis.

    The original graph is built once and never modified; pruning results
    and community labels are kept alongside it so both stay available for
    comparison.

    Example:
        >>> network = pyflowgraph(flows, vertices, weight="all")
        >>> scores = network.centrality()
        >>> labels = network.detect_communities(floor=5)
        >>> records = network.vertex_table()
    """

    def __init__(self, flows: Iterable, vertices: Optional[Iterable] = None,
                 weight: str = "weight", builder: Optional[GraphBuilder] = None):
        """
        Build the flow graph.

        Args:
            flows: Flow records ``(source, destination, weights)``
            vertices: Optional vertex records ``(id, attributes)``
            weight: Weight used for pruning and community detection
            builder: Builder to use (default: keep-all, non-strict)
        """
        self.weight = weight
        self.vertex_records: Optional[List[pyvertexrecord]] = (
            [pyvertexrecord.coerce(r) for r in vertices] if vertices is not None else None
        )
        self._builder = builder or GraphBuilder()
        self.graph: FlowGraph = self._builder.build(flows, self.vertex_records)
        self._analyzer = CentralityAnalyzer(self.graph)
        self._joiner = AttributeJoiner()

        self.scores: Optional[Dict[str, Dict[str, float]]] = None
        self.pruning: Optional[PruningReport] = None
        self.labels: Optional[Dict[str, int]] = None
        self.detector: Optional[CommunityDetector] = None

        logger.info(f"Initialized flow graph with {self.graph.number_of_vertices} vertices "
                    f"and {self.graph.number_of_edges} edges")

    # ========================================================================
    # CENTRALITY
    # ========================================================================

    def centrality(self, closeness_weight: Optional[str] = None,
                   eigenvector_weight: Optional[str] = None,
                   tol: float = DEFAULT_TOLERANCE,
                   max_iter: int = DEFAULT_MAX_ITERATIONS,
                   n_workers: int = 1,
                   cancel: Any = None) -> Dict[str, Dict[str, float]]:
        """Degree, closeness and eigenvector centrality on the full graph."""
        self.scores = self._analyzer.compute_all(
            closeness_weight=closeness_weight, eigenvector_weight=eigenvector_weight,
            tol=tol, max_iter=max_iter, n_workers=n_workers, cancel=cancel)
        return self.scores

    # ========================================================================
    # PRUNING & COMMUNITIES
    # ========================================================================

    def prune(self, floor: int = DEFAULT_DEGREE_FLOOR, cancel: Any = None, **kwargs) -> PruningReport:
        """Prune the original graph; see EdgePruner for keyword arguments."""
        self.pruning = EdgePruner(weight=self.weight, floor=floor, **kwargs).prune(self.graph, cancel=cancel)
        return self.pruning

    def detect_communities(self, floor: Optional[int] = DEFAULT_DEGREE_FLOOR,
                           detector: Optional[CommunityDetector] = None,
                           weighted: bool = True,
                           cancel: Any = None) -> Dict[str, int]:
        """
        Detect communities, pruning first unless ``floor`` is None.

        Args:
            floor: Degree floor for pruning; None partitions the full graph
            detector: Detector to use (default settings otherwise)
            weighted: Use the graph weight for walk probabilities
            cancel: Optional cancellation signal

        Returns:
            vertex_id -> community label for the vertices of the graph that
            was partitioned
        """
        target = self.graph
        if floor is not None:
            target = self.prune(floor=floor, cancel=cancel).graph

        self.detector = detector or CommunityDetector()
        self.labels = self.detector.detect(target, weight=self.weight if weighted else None, cancel=cancel)
        return self.labels

    # ========================================================================
    # REPORTING
    # ========================================================================

    def vertex_table(self) -> List[pyvertexrecord]:
        """
        Vertex records with every computed result joined on.

        Uses the vertex records passed at construction, or the graph
        vertices when none were given.
        """
        records = self.vertex_records
        if records is None:
            records = [pyvertexrecord(v.id, v.attributes) for v in self.graph.vertices()]
        return self._joiner.join(records, scores=self.scores, labels=self.labels)

    def annotated_graph(self) -> FlowGraph:
        """Copy of the original graph with computed results as vertex attributes."""
        return self._joiner.annotate(self.graph, scores=self.scores, labels=self.labels)
