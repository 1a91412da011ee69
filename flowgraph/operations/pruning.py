"""
Threshold pruning for dense flow networks.

Community detection on a full origin-destination graph is dominated by
countless weak flows. The pruner raises an integer weight threshold until
every vertex left in the thresholded graph meets a minimum degree.
"""

import logging
from typing import Any, List, NamedTuple, Optional, Tuple

from ..classes.options import DEFAULT_DEGREE_FLOOR, DEFAULT_START_THRESHOLD, DEFAULT_THRESHOLD_STEP
from ..classes.utils import check_cancelled
from ..core.graph import FlowGraph
from ..exceptions import PruningInfeasibleError

logger = logging.getLogger(__name__)


class PruningStep(NamedTuple):
    """State of the working graph at one threshold."""
    threshold: int
    vertices: int
    edges: int
    min_degree: Optional[int]


class PruningReport(NamedTuple):
    """Outcome of a pruning run."""
    final_threshold: int
    vertices_removed: int
    graph: FlowGraph
    edges_removed: int = 0
    iterations: int = 0
    history: Tuple[PruningStep, ...] = ()

    @property
    def resulting_graph(self) -> FlowGraph:
        return self.graph


class EdgePruner:
    """
    Iterative edge pruning down to a minimum-degree invariant.

    Starting at ``start``, each iteration rebuilds a working graph from the
    ORIGINAL edge set keeping edges whose weight is at least the threshold;
    vertices left without edges drop out. The first threshold at which every
    remaining vertex has degree (in + out) of at least ``floor`` is returned.
    The input graph is never modified.
    """

    def __init__(self, weight: str = "weight",
                 floor: int = DEFAULT_DEGREE_FLOOR,
                 start: int = DEFAULT_START_THRESHOLD,
                 step: int = DEFAULT_THRESHOLD_STEP,
                 max_threshold: Optional[int] = None):
        """
        Initialize the pruner.

        Args:
            weight: Name of the edge weight compared against the threshold
            floor: Minimum degree every surviving vertex must reach
            start: First threshold tried
            step: Threshold increment between iterations
            max_threshold: Give up once the threshold passes this value
        """
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")
        if floor < 0:
            raise ValueError(f"floor must be non-negative, got {floor}")
        self.weight = weight
        self.floor = floor
        self.start = start
        self.step = step
        self.max_threshold = max_threshold

    def prune(self, graph: FlowGraph, cancel: Any = None) -> PruningReport:
        """
        Run the pruning loop.

        Args:
            graph: Original (unpruned) graph
            cancel: Optional cancellation signal checked between thresholds

        Returns:
            PruningReport with the final threshold, the number of vertices
            removed relative to ``graph`` and the reduced graph

        Raises:
            PruningInfeasibleError: If the graph empties before the floor is met
            UnknownWeightError: If an edge lacks the designated weight
        """
        # Read every weight up front so a missing attribute fails fast
        weights = {edge.key: edge.weight(self.weight) for edge in graph.edges()}
        max_weight = max(weights.values(), default=0)

        logger.info(f"Pruning {graph.number_of_vertices} vertices / {graph.number_of_edges} edges "
                    f"on '{self.weight}' with degree floor {self.floor}")

        history: List[PruningStep] = []
        threshold = self.start

        while True:
            check_cancelled(cancel, "edge pruning")

            if self.max_threshold is not None and threshold > self.max_threshold:
                raise PruningInfeasibleError(
                    f"Degree floor {self.floor} not met up to threshold {self.max_threshold}",
                    threshold=threshold)

            working = graph.edge_subgraph(lambda edge, t=threshold: weights[edge.key] >= t)
            min_degree = working.min_degree()
            history.append(PruningStep(threshold, working.number_of_vertices, working.number_of_edges, min_degree))
            logger.debug(f"Threshold {threshold}: {working.number_of_vertices} vertices, "
                         f"{working.number_of_edges} edges, min degree {min_degree}")

            if working.number_of_vertices == 0:
                raise PruningInfeasibleError(
                    f"Pruning emptied the graph at threshold {threshold} "
                    f"(max '{self.weight}' = {max_weight}) before degree floor {self.floor} was met",
                    threshold=threshold)

            if min_degree >= self.floor:
                break

            threshold += self.step

        report = PruningReport(
            final_threshold=threshold,
            vertices_removed=graph.number_of_vertices - working.number_of_vertices,
            graph=working,
            edges_removed=graph.number_of_edges - working.number_of_edges,
            iterations=len(history),
            history=tuple(history),
        )
        logger.info(f"Pruning stopped at threshold {threshold} after {report.iterations} iteration(s): "
                    f"removed {report.vertices_removed} vertices and {report.edges_removed} edges")
        return report
