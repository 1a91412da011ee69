"""
Core graph data structure for origin-destination flow networks.

This module provides the fundamental graph structure without analysis or
pruning operations.
"""

import logging
from typing import Any, Callable, DefaultDict, Dict, Iterator, List, Mapping, Optional, Tuple, Union
from collections import defaultdict

from ..classes.vertex import pyvertex
from ..classes.edge import pyedge, validate_weights
from ..classes.options import DegreeMode
from ..exceptions import DuplicateVertexError, UnknownVertexError

logger = logging.getLogger(__name__)


class FlowGraph:
    """
    In-memory directed multigraph with named numeric edge weights.

    This class manages the fundamental graph representation. It provides:
    - Vertex and edge storage in insertion order
    - Adjacency list maintenance (outgoing and incoming)
    - Degree tracking (in/out)
    - Explicit removal by predicate with referential integrity
    """

    def __init__(self):
        # Vertex and edge mappings
        self._vertices: Dict[str, pyvertex] = {}
        self._edges: Dict[int, pyedge] = {}
        self._next_key = 0

        # Graph structure
        self.out_adjacency: DefaultDict[str, List[Tuple[str, int]]] = defaultdict(list)
        self.in_adjacency: DefaultDict[str, List[Tuple[str, int]]] = defaultdict(list)
        self.in_degree: DefaultDict[str, int] = defaultdict(int)
        self.out_degree: DefaultDict[str, int] = defaultdict(int)

    # ========================================================================
    # CONSTRUCTION
    # ========================================================================

    def add_vertex(self, vertex_id: str, attributes: Optional[Mapping[str, Any]] = None) -> pyvertex:
        """
        Add a vertex to the graph.

        Args:
            vertex_id: Unique identifier of the spatial unit
            attributes: Optional attribute mapping (region name, coordinates, ...)

        Returns:
            The created vertex

        Raises:
            DuplicateVertexError: If the id is already present
        """
        if vertex_id in self._vertices:
            raise DuplicateVertexError(vertex_id)
        vertex = pyvertex(vertex_id, attributes)
        self._vertices[vertex_id] = vertex
        return vertex

    def add_edge(self, source: str, target: str, weights: Optional[Mapping[str, float]] = None) -> int:
        """
        Add a directed edge. Parallel edges are kept as distinct edges.

        Args:
            source: Origin vertex id
            target: Destination vertex id
            weights: Named non-negative weights

        Returns:
            The key of the new edge

        Raises:
            UnknownVertexError: If either endpoint is not in the graph
            NegativeWeightError, InvalidWeightError: For bad weight values
        """
        if source not in self._vertices:
            raise UnknownVertexError(source)
        if target not in self._vertices:
            raise UnknownVertexError(target)
        checked = validate_weights(weights)
        key = self._next_key
        self._next_key += 1
        self._insert_edge(pyedge(key, source, target, checked))
        return key

    def _insert_edge(self, edge: pyedge):
        self._edges[edge.key] = edge
        self.out_adjacency[edge.source].append((edge.target, edge.key))
        self.in_adjacency[edge.target].append((edge.source, edge.key))
        self.out_degree[edge.source] += 1
        self.in_degree[edge.target] += 1
        if edge.key >= self._next_key:
            self._next_key = edge.key + 1

    def _rebuild_adjacency(self):
        """Rebuild adjacency lists and degree counters from the edge table."""
        self.out_adjacency.clear()
        self.in_adjacency.clear()
        self.in_degree.clear()
        self.out_degree.clear()
        for edge in self._edges.values():
            self.out_adjacency[edge.source].append((edge.target, edge.key))
            self.in_adjacency[edge.target].append((edge.source, edge.key))
            self.out_degree[edge.source] += 1
            self.in_degree[edge.target] += 1

    # ========================================================================
    # REMOVAL
    # ========================================================================

    def remove_edges_where(self, predicate: Callable[[pyedge], bool]) -> int:
        """
        Remove every edge for which ``predicate(edge)`` is true.

        This mutates the graph. Use :meth:`edge_subgraph` for a pure variant.

        Returns:
            Number of edges removed
        """
        doomed = [key for key, edge in self._edges.items() if predicate(edge)]
        for key in doomed:
            del self._edges[key]
        if doomed:
            self._rebuild_adjacency()
        logger.debug(f"Removed {len(doomed)} edges, {len(self._edges)} remaining")
        return len(doomed)

    def remove_vertices_where(self, predicate: Callable[[pyvertex], bool]) -> int:
        """
        Remove every vertex for which ``predicate(vertex)`` is true, together
        with all edges touching it.

        This mutates the graph.

        Returns:
            Number of vertices removed
        """
        doomed = {vertex_id for vertex_id, vertex in self._vertices.items() if predicate(vertex)}
        if not doomed:
            return 0
        for vertex_id in doomed:
            del self._vertices[vertex_id]
        edge_count = len(self._edges)
        self._edges = {
            key: edge for key, edge in self._edges.items()
            if edge.source not in doomed and edge.target not in doomed
        }
        self._rebuild_adjacency()
        logger.debug(f"Removed {len(doomed)} vertices and {edge_count - len(self._edges)} incident edges")
        return len(doomed)

    # ========================================================================
    # QUERIES
    # ========================================================================

    def has_vertex(self, vertex_id: str) -> bool:
        return vertex_id in self._vertices

    def get_vertex(self, vertex_id: str) -> pyvertex:
        """Return the vertex with the given id, raising UnknownVertexError if absent."""
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise UnknownVertexError(vertex_id) from None

    def get_edge(self, key: int) -> pyedge:
        return self._edges[key]

    def vertices(self) -> List[pyvertex]:
        return list(self._vertices.values())

    def vertex_ids(self) -> List[str]:
        return list(self._vertices.keys())

    def edges(self) -> List[pyedge]:
        return list(self._edges.values())

    def out_edges(self, vertex_id: str) -> List[pyedge]:
        self._require(vertex_id)
        return [self._edges[key] for _, key in self.out_adjacency.get(vertex_id, ())]

    def in_edges(self, vertex_id: str) -> List[pyedge]:
        self._require(vertex_id)
        return [self._edges[key] for _, key in self.in_adjacency.get(vertex_id, ())]

    @property
    def number_of_vertices(self) -> int:
        return len(self._vertices)

    @property
    def number_of_edges(self) -> int:
        return len(self._edges)

    def degree(self, vertex_id: str, mode: Union[DegreeMode, str] = DegreeMode.ALL) -> int:
        """
        Number of edges incident to a vertex.

        Args:
            vertex_id: Vertex to query
            mode: ``all`` (in + out, default), ``out`` or ``in``

        Returns:
            Edge count; parallel edges count separately and a self-loop
            counts once as outgoing and once as incoming
        """
        self._require(vertex_id)
        mode = DegreeMode.coerce(mode)
        if mode is DegreeMode.OUT:
            return self.out_degree.get(vertex_id, 0)
        if mode is DegreeMode.IN:
            return self.in_degree.get(vertex_id, 0)
        return self.out_degree.get(vertex_id, 0) + self.in_degree.get(vertex_id, 0)

    def degrees(self, mode: Union[DegreeMode, str] = DegreeMode.ALL) -> Dict[str, int]:
        """Degree of every vertex, in vertex order."""
        return {vertex_id: self.degree(vertex_id, mode) for vertex_id in self._vertices}

    def min_degree(self, mode: Union[DegreeMode, str] = DegreeMode.ALL) -> Optional[int]:
        """Smallest vertex degree, or None for a graph without vertices."""
        if not self._vertices:
            return None
        return min(self.degrees(mode).values())

    def neighbors(self, vertex_id: str, mode: Union[DegreeMode, str] = DegreeMode.ALL) -> List[str]:
        """
        Unique adjacent vertex ids in first-seen order.

        Args:
            vertex_id: Vertex to query
            mode: ``all`` (successors then predecessors), ``out`` or ``in``
        """
        self._require(vertex_id)
        mode = DegreeMode.coerce(mode)
        adjacent: List[Tuple[str, int]] = []
        if mode in (DegreeMode.OUT, DegreeMode.ALL):
            adjacent.extend(self.out_adjacency.get(vertex_id, ()))
        if mode in (DegreeMode.IN, DegreeMode.ALL):
            adjacent.extend(self.in_adjacency.get(vertex_id, ()))
        return list(dict.fromkeys(other for other, _ in adjacent))

    def weight_names(self) -> List[str]:
        """All weight names used by at least one edge, in first-seen order."""
        names: Dict[str, None] = {}
        for edge in self._edges.values():
            for name in edge.weights:
                names.setdefault(name, None)
        return list(names)

    def _require(self, vertex_id: str):
        if vertex_id not in self._vertices:
            raise UnknownVertexError(vertex_id)

    # ========================================================================
    # PURE TRANSFORMATIONS
    # ========================================================================

    def copy(self) -> "FlowGraph":
        """Return an independent copy with the same vertices, edges and keys."""
        clone = FlowGraph()
        clone._vertices = dict(self._vertices)
        for edge in self._edges.values():
            clone._insert_edge(edge)
        clone._next_key = self._next_key
        return clone

    def edge_subgraph(self, predicate: Callable[[pyedge], bool]) -> "FlowGraph":
        """
        Build a new graph from the edges satisfying ``predicate``.

        Only vertices touched by a kept edge are carried over, in their
        original order and with their attributes. This graph is unchanged.
        """
        kept = [edge for edge in self._edges.values() if predicate(edge)]
        touched = set()
        for edge in kept:
            touched.add(edge.source)
            touched.add(edge.target)
        subgraph = FlowGraph()
        subgraph._vertices = {
            vertex_id: vertex for vertex_id, vertex in self._vertices.items() if vertex_id in touched
        }
        for edge in kept:
            subgraph._insert_edge(edge)
        subgraph._next_key = self._next_key
        return subgraph

    def annotate(self, values: Mapping[str, Mapping[str, Any]], overwrite: bool = False) -> "FlowGraph":
        """
        Return a copy with extra attributes attached to vertices.

        Args:
            values: vertex_id -> {attribute name: value}
            overwrite: Allow replacing existing attribute keys

        Raises:
            UnknownVertexError: If a vertex id is not in the graph
            AttributeConflictError: If a key exists and overwrite is False
        """
        for vertex_id in values:
            self._require(vertex_id)
        annotated = self.copy()
        for vertex_id, extra in values.items():
            annotated._vertices[vertex_id] = annotated._vertices[vertex_id].with_attributes(extra, overwrite)
        return annotated

    # ========================================================================
    # DUNDER
    # ========================================================================

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, vertex_id) -> bool:
        return vertex_id in self._vertices

    def __iter__(self) -> Iterator[str]:
        return iter(self._vertices)

    def __repr__(self):
        return f"FlowGraph(vertices={self.number_of_vertices}, edges={self.number_of_edges})"
