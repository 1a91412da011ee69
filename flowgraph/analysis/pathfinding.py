"""
Path finding and reachability analysis for flow networks.

This module provides single-source shortest path searches and
connectivity helpers used by the centrality and community code.
"""

import heapq
import logging
from typing import Dict, List, Optional, Set, Union
from collections import deque

from ..classes.options import DegreeMode
from ..core.graph import FlowGraph

logger = logging.getLogger(__name__)


class PathFinder:
    """
    Path finding algorithms for flow networks.

    This class provides methods for:
    - Unweighted (hop count) shortest path lengths via BFS
    - Weighted shortest path lengths via Dijkstra
    - Reachability and weakly connected components

    The graph is only read, so one PathFinder can serve several threads.
    """

    def __init__(self, graph: FlowGraph):
        """
        Initialize the path finder.

        Args:
            graph: FlowGraph instance to analyze
        """
        self.graph = graph

    def _successors(self, vertex_id: str, mode: DegreeMode):
        if mode in (DegreeMode.OUT, DegreeMode.ALL):
            for neighbor_id, edge_key in self.graph.out_adjacency.get(vertex_id, ()):
                yield neighbor_id, edge_key
        if mode in (DegreeMode.IN, DegreeMode.ALL):
            for neighbor_id, edge_key in self.graph.in_adjacency.get(vertex_id, ()):
                yield neighbor_id, edge_key

    def shortest_path_lengths(self, source_id: str,
                              mode: Union[DegreeMode, str] = DegreeMode.OUT) -> Dict[str, int]:
        """
        Hop-count distances from a source using BFS.

        Args:
            source_id: Starting vertex ID
            mode: Follow outgoing edges (``out``), incoming edges (``in``)
                or ignore direction (``all``)

        Returns:
            Mapping of every reachable vertex (source included, at 0) to its distance
        """
        mode = DegreeMode.coerce(mode)
        distances = {source_id: 0}
        queue = deque([source_id])

        while queue:
            current_id = queue.popleft()
            next_distance = distances[current_id] + 1
            for neighbor_id, _ in self._successors(current_id, mode):
                if neighbor_id not in distances:
                    distances[neighbor_id] = next_distance
                    queue.append(neighbor_id)

        return distances

    def weighted_shortest_path_lengths(self, source_id: str, weight: str,
                                       mode: Union[DegreeMode, str] = DegreeMode.OUT) -> Dict[str, float]:
        """
        Weighted distances from a source using Dijkstra's algorithm.

        The named edge weight is read as a length. Of several parallel
        edges the shortest one is used.

        Args:
            source_id: Starting vertex ID
            weight: Name of the weight holding edge lengths
            mode: Direction to follow, as for :meth:`shortest_path_lengths`

        Returns:
            Mapping of every reachable vertex (source included, at 0) to its distance

        Raises:
            UnknownWeightError: If a traversed edge lacks the weight
        """
        mode = DegreeMode.coerce(mode)
        distances: Dict[str, float] = {}
        frontier = [(0.0, 0, source_id)]
        counter = 1
        seen = {source_id: 0.0}

        while frontier:
            distance, _, current_id = heapq.heappop(frontier)
            if current_id in distances:
                continue
            distances[current_id] = distance

            for neighbor_id, edge_key in self._successors(current_id, mode):
                if neighbor_id in distances:
                    continue
                candidate = distance + self.graph.get_edge(edge_key).weight(weight)
                if candidate < seen.get(neighbor_id, float("inf")):
                    seen[neighbor_id] = candidate
                    heapq.heappush(frontier, (candidate, counter, neighbor_id))
                    counter += 1

        return distances

    def reachable(self, source_id: str, mode: Union[DegreeMode, str] = DegreeMode.OUT) -> Set[str]:
        """Vertices reachable from source, excluding the source itself."""
        reachable = set(self.shortest_path_lengths(source_id, mode))
        reachable.discard(source_id)
        return reachable

    def weakly_connected_components(self, vertex_ids: Optional[List[str]] = None) -> List[List[str]]:
        """
        Maximal vertex sets connected when edge direction is ignored.

        Args:
            vertex_ids: Restrict the search to these start vertices (default: all)

        Returns:
            Components in order of their first vertex; members in BFS order
        """
        components = []
        assigned: Set[str] = set()

        for vertex_id in (vertex_ids if vertex_ids is not None else self.graph.vertex_ids()):
            if vertex_id in assigned:
                continue
            component = list(self.shortest_path_lengths(vertex_id, DegreeMode.ALL))
            assigned.update(component)
            components.append(component)

        logger.debug(f"Found {len(components)} weakly connected components")
        return components
