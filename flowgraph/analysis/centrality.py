"""
Centrality measures for flow networks.

Degree, closeness and eigenvector centrality are computed on a read-only
FlowGraph; none of the methods mutate the graph.
"""

import logging
import warnings
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Optional, Union

import numpy as np

from ..classes.options import (
    CLOSENESS, DEGREE, EIGENVECTOR,
    DEFAULT_MAX_ITERATIONS, DEFAULT_TOLERANCE, DegreeMode,
)
from ..classes.utils import check_cancelled, edge_arrays
from ..core.graph import FlowGraph
from ..exceptions import NonConvergenceWarning
from .pathfinding import PathFinder

logger = logging.getLogger(__name__)


class CentralityAnalyzer:
    """
    Computes per-vertex importance scores.

    This class provides methods for:
    - Degree centrality (incident edge counts)
    - Closeness centrality (inverse mean distance to reachable vertices)
    - Eigenvector centrality (power iteration per weakly connected component)
    """

    def __init__(self, graph: FlowGraph):
        """
        Initialize the analyzer.

        Args:
            graph: FlowGraph instance to analyze
        """
        self.graph = graph
        self._pathfinder = PathFinder(graph)

    # ========================================================================
    # DEGREE
    # ========================================================================

    def degree_centrality(self, mode: Union[DegreeMode, str] = DegreeMode.ALL,
                          normalized: bool = False) -> Dict[str, float]:
        """
        Count of incident edges per vertex, unweighted.

        Args:
            mode: ``all`` (in + out), ``out`` or ``in``
            normalized: Divide by ``n - 1`` (for ``all``: ``2(n - 1)``)

        Returns:
            vertex_id -> degree
        """
        degrees = self.graph.degrees(mode)
        if not normalized:
            return {vertex_id: float(d) for vertex_id, d in degrees.items()}

        n = self.graph.number_of_vertices
        scale = (n - 1) * (2 if DegreeMode.coerce(mode) is DegreeMode.ALL else 1)
        if scale <= 0:
            return {vertex_id: 0.0 for vertex_id in degrees}
        return {vertex_id: d / scale for vertex_id, d in degrees.items()}

    # ========================================================================
    # CLOSENESS
    # ========================================================================

    def closeness_centrality(self, mode: Union[DegreeMode, str] = DegreeMode.OUT,
                             weight: Optional[str] = None,
                             normalized: bool = False,
                             n_workers: int = 1) -> Dict[str, float]:
        """
        Inverse of the mean shortest-path distance to all reachable vertices.

        Distances are hop counts unless ``weight`` names an edge attribute to
        read as length. A vertex that reaches nothing scores 0.

        With ``normalized`` the score is further scaled by ``r / (n - 1)``,
        the share of other vertices reached (Wasserman and Faust), so a
        vertex close to a few neighbours ranks below one close to many.

        Args:
            mode: Follow outgoing edges (default), incoming edges or both
            weight: Optional weight name for weighted distances
            normalized: Scale by the fraction of vertices reached
            n_workers: Number of threads; each writes its own result slots

        Returns:
            vertex_id -> closeness
        """
        mode = DegreeMode.coerce(mode)
        vertex_ids = self.graph.vertex_ids()
        scores: List[float] = [0.0] * len(vertex_ids)

        def fill(positions: range):
            for i in positions:
                scores[i] = self._closeness_of(vertex_ids[i], mode, weight, normalized)

        if n_workers <= 1 or len(vertex_ids) < 2:
            fill(range(len(vertex_ids)))
        else:
            chunk = -(-len(vertex_ids) // n_workers)
            blocks = [range(start, min(start + chunk, len(vertex_ids)))
                      for start in range(0, len(vertex_ids), chunk)]
            with ThreadPoolExecutor(max_workers=n_workers) as pool:
                # list() re-raises any worker exception here
                list(pool.map(fill, blocks))

        logger.debug(f"Computed closeness for {len(vertex_ids)} vertices (mode={mode.value}, weight={weight})")
        return dict(zip(vertex_ids, scores))

    def _closeness_of(self, vertex_id: str, mode: DegreeMode, weight: Optional[str],
                      normalized: bool = False) -> float:
        if weight is None:
            distances = self._pathfinder.shortest_path_lengths(vertex_id, mode)
        else:
            distances = self._pathfinder.weighted_shortest_path_lengths(vertex_id, weight, mode)

        reached = len(distances) - 1
        total = sum(distances.values())
        if reached == 0 or total <= 0:
            return 0.0
        score = reached / total
        if normalized:
            score *= reached / (self.graph.number_of_vertices - 1)
        return score

    # ========================================================================
    # EIGENVECTOR
    # ========================================================================

    def eigenvector_centrality(self, weight: Optional[str] = None,
                               directed: bool = False,
                               tol: float = DEFAULT_TOLERANCE,
                               max_iter: int = DEFAULT_MAX_ITERATIONS,
                               cancel: Any = None) -> Dict[str, float]:
        """
        Dominant eigenvector of the adjacency matrix by power iteration.

        Each weakly connected component is iterated and normalised to unit
        L2 norm on its own, and stops once the L2 change of its sub-vector
        falls below ``tol``. Vertices in components without edges score 0.
        The iteration multiplies by ``A + I``, which has the same dominant
        eigenvector as ``A`` but does not oscillate on bipartite components.

        Args:
            weight: Weight name for a weighted adjacency (default: edge counts)
            directed: Score a vertex by its in-neighbours instead of
                symmetrising the adjacency matrix
            tol: Convergence tolerance
            max_iter: Iteration budget
            cancel: Optional cancellation signal checked between iterations

        Returns:
            vertex_id -> score

        Warns:
            NonConvergenceWarning: When the budget runs out; the returned
                scores are the best current estimate
        """
        vertex_ids, _, sources, targets, weights = edge_arrays(self.graph, weight)
        n = len(vertex_ids)
        if n == 0:
            return {}

        if not directed:
            sources, targets = np.concatenate([sources, targets]), np.concatenate([targets, sources])
            weights = np.concatenate([weights, weights])

        component = np.empty(n, dtype=np.int64)
        components = self._pathfinder.weakly_connected_components()
        index_of = {vertex_id: i for i, vertex_id in enumerate(vertex_ids)}
        for label, members in enumerate(components):
            component[[index_of[v] for v in members]] = label
        n_components = len(components)

        # Components without edges (or with only zero weights) stay at zero
        edge_mass = np.bincount(component[sources], weights=weights, minlength=n_components)
        active = edge_mass > 0

        x = np.where(active[component], 1.0, 0.0)
        x = self._normalise(x, component, n_components)
        converged = ~active
        delta = np.zeros(n_components)
        iteration = 0

        while not converged.all() and iteration < max_iter:
            check_cancelled(cancel, "eigenvector centrality")
            iteration += 1

            y = x + np.bincount(targets, weights=weights * x[sources], minlength=n)
            y = self._normalise(y, component, n_components)

            diff = np.bincount(component, weights=(y - x) ** 2, minlength=n_components)
            delta = np.sqrt(diff)

            # Converged components keep their vector
            frozen = converged[component]
            x = np.where(frozen, x, y)
            converged |= delta < tol

        scores = dict(zip(vertex_ids, x.tolist()))

        if not converged.all():
            worst = float(delta[~converged].max())
            message = (f"Eigenvector centrality did not converge in {max_iter} iterations "
                       f"(largest component change {worst:.3g} >= tol {tol:g})")
            logger.warning(message)
            warnings.warn(NonConvergenceWarning(message, scores=scores, iterations=iteration, delta=worst),
                          stacklevel=2)
        else:
            logger.debug(f"Eigenvector centrality converged after {iteration} iterations")

        return scores

    @staticmethod
    def _normalise(x: np.ndarray, component: np.ndarray, n_components: int) -> np.ndarray:
        norms = np.sqrt(np.bincount(component, weights=x ** 2, minlength=n_components))
        scale = np.where(norms > 0, norms, 1.0)
        return x / scale[component]

    # ========================================================================
    # ALL MEASURES
    # ========================================================================

    def compute_all(self, closeness_weight: Optional[str] = None,
                    eigenvector_weight: Optional[str] = None,
                    directed_eigenvector: bool = False,
                    tol: float = DEFAULT_TOLERANCE,
                    max_iter: int = DEFAULT_MAX_ITERATIONS,
                    n_workers: int = 1,
                    cancel: Any = None) -> Dict[str, Dict[str, float]]:
        """
        Degree, closeness and eigenvector centrality for every vertex.

        Returns:
            vertex_id -> {"degree": ..., "closeness": ..., "eigenvector": ...}
        """
        degree = self.degree_centrality()
        closeness = self.closeness_centrality(weight=closeness_weight, n_workers=n_workers)
        eigenvector = self.eigenvector_centrality(weight=eigenvector_weight, directed=directed_eigenvector,
                                                  tol=tol, max_iter=max_iter, cancel=cancel)

        logger.info(f"Computed centrality for {self.graph.number_of_vertices} vertices")
        return {
            vertex_id: {
                DEGREE: degree[vertex_id],
                CLOSENESS: closeness[vertex_id],
                EIGENVECTOR: eigenvector[vertex_id],
            }
            for vertex_id in self.graph.vertex_ids()
        }
