"""
Graph builders module for flowgraph.

This module turns origin-destination flow records and optional vertex
attribute records into a FlowGraph. Construction is all-or-nothing: every
check runs against a private graph that is only returned when complete.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..core.graph import FlowGraph
from .edge import validate_weights
from .options import AggregationPolicy, VertexSource
from .records import pyflowrecord, pyvertexrecord
from ..exceptions import DuplicateVertexError, MissingVertexAttributeError

logger = logging.getLogger(__name__)


class GraphBuilder:
    """
    Builds directed flow graphs from tabular records.

    The builder performs no implicit filtering: self-loops and out-of-scope
    records must be removed by the caller beforehand.
    """

    def __init__(self,
                 aggregation: Union[AggregationPolicy, str] = AggregationPolicy.KEEP_ALL,
                 strict: bool = False,
                 include_isolated: bool = False,
                 vertex_source: Union[VertexSource, str] = VertexSource.FLOWS):
        """
        Initialize the builder.

        Args:
            aggregation: ``keep-all`` makes one edge per record, ``sum-duplicates``
                merges records sharing an ordered pair by summing each weight
            strict: Fail when a vertex record matches no flow endpoint; only
                meaningful with ``vertex_source="flows"``
            include_isolated: In non-strict mode, add unmatched vertex records
                as isolated vertices instead of skipping them
            vertex_source: ``flows`` takes vertices from flow endpoints;
                ``records`` takes exactly the vertex records and rejects flows
                touching any other id

        Raises:
            ValueError: If ``strict`` is combined with ``vertex_source="records"``
        """
        self.aggregation = AggregationPolicy.coerce(aggregation)
        self.strict = strict
        self.include_isolated = include_isolated
        self.vertex_source = VertexSource.coerce(vertex_source)

        if self.strict and self.vertex_source is VertexSource.RECORDS:
            raise ValueError("strict applies to vertices taken from flows; with vertex_source='records' "
                             "unknown endpoints already raise UnknownVertexError")

    def build(self, flows: Iterable, vertices: Optional[Iterable] = None) -> FlowGraph:
        """
        Build a graph.

        Args:
            flows: Flow records, ``pyflowrecord`` or ``(source, destination[, weights])``
            vertices: Optional vertex records, ``pyvertexrecord`` or ``(id, attributes)``

        Returns:
            A fully built FlowGraph

        Raises:
            ConstructionError: Any subclass; no partial graph is returned
        """
        flow_records = [pyflowrecord.coerce(record) for record in flows]
        vertex_records = [pyvertexrecord.coerce(record) for record in vertices] if vertices is not None else []

        attributes = self._index_vertex_records(vertex_records)
        graph = FlowGraph()

        if self.vertex_source is VertexSource.RECORDS:
            for vertex_id, attrs in attributes.items():
                graph.add_vertex(vertex_id, attrs)
        else:
            endpoints = self._collect_endpoints(flow_records)
            unmatched = [vertex_id for vertex_id in attributes if vertex_id not in endpoints]
            if unmatched and self.strict:
                raise MissingVertexAttributeError(unmatched)

            for vertex_id in endpoints:
                graph.add_vertex(vertex_id, attributes.get(vertex_id))

            if unmatched:
                if self.include_isolated:
                    for vertex_id in unmatched:
                        graph.add_vertex(vertex_id, attributes[vertex_id])
                    logger.info(f"Added {len(unmatched)} vertex records without flows as isolated vertices")
                else:
                    logger.warning(f"Skipped {len(unmatched)} vertex records that match no flow endpoint")

        for source, destination, weights in self._aggregate(flow_records):
            graph.add_edge(source, destination, weights)

        logger.debug(f"Built graph with {graph.number_of_vertices} vertices and {graph.number_of_edges} edges "
                     f"from {len(flow_records)} flow records ({self.aggregation.value})")
        return graph

    @classmethod
    def from_columns(cls,
                     sources: Sequence[str],
                     destinations: Sequence[str],
                     weights: Optional[Mapping[str, Sequence[float]]] = None,
                     vertices: Optional[Iterable] = None,
                     **kwargs) -> FlowGraph:
        """
        Build a graph from parallel columns, the shape a data frame hands over.

        Args:
            sources: Origin id column
            destinations: Destination id column
            weights: Weight name -> column of values
            vertices: Optional vertex records
            **kwargs: Passed to the GraphBuilder constructor

        Example:
            >>> graph = GraphBuilder.from_columns(["a", "b"], ["b", "a"], {"all": [3, 4]})
        """
        weights = weights or {}
        if len(sources) != len(destinations):
            raise ValueError(f"Column length mismatch: {len(sources)} sources, {len(destinations)} destinations")
        for name, column in weights.items():
            if len(column) != len(sources):
                raise ValueError(f"Weight column {name!r} has {len(column)} values, expected {len(sources)}")

        records = [
            pyflowrecord(source, destination, {name: column[i] for name, column in weights.items()})
            for i, (source, destination) in enumerate(zip(sources, destinations))
        ]
        return cls(**kwargs).build(records, vertices)

    # ========================================================================
    # PRIVATE HELPERS
    # ========================================================================

    def _index_vertex_records(self, vertex_records: List[pyvertexrecord]) -> Dict[str, Dict[str, Any]]:
        attributes: Dict[str, Dict[str, Any]] = {}
        for record in vertex_records:
            if record.id in attributes:
                raise DuplicateVertexError(record.id)
            attributes[record.id] = dict(record.attributes)
        return attributes

    def _collect_endpoints(self, flow_records: List[pyflowrecord]) -> Dict[str, None]:
        """Flow endpoint ids in first-seen order."""
        endpoints: Dict[str, None] = {}
        for record in flow_records:
            endpoints.setdefault(record.source, None)
            endpoints.setdefault(record.destination, None)
        return endpoints

    def _aggregate(self, flow_records: List[pyflowrecord]) -> List[Tuple[str, str, Dict[str, float]]]:
        if self.aggregation is AggregationPolicy.KEEP_ALL:
            return [(r.source, r.destination, dict(r.weights)) for r in flow_records]

        merged: Dict[Tuple[str, str], Dict[str, float]] = {}
        for record in flow_records:
            # Validate before summing so a bad value is reported as given
            weights = validate_weights(record.weights)
            totals = merged.setdefault((record.source, record.destination), {})
            for name, value in weights.items():
                totals[name] = totals.get(name, 0) + value

        logger.debug(f"Merged {len(flow_records)} flow records into {len(merged)} ordered pairs")
        return [(source, destination, totals) for (source, destination), totals in merged.items()]
