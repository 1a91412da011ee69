"""
Merging of computed results back onto vertex records.

The joiner is a left join keyed by vertex id: every input record is kept,
and records without a result receive the ``missing`` value for each
result column.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from ..classes.options import COMMUNITY
from ..classes.records import pyvertexrecord
from ..core.graph import FlowGraph
from ..exceptions import AttributeConflictError

logger = logging.getLogger(__name__)


class AttributeJoiner:
    """
    Attaches centrality scores and community labels to vertex records.

    This class provides methods for:
    - Joining results onto external vertex records
    - Producing an annotated copy of a FlowGraph
    """

    def __init__(self, label_name: str = COMMUNITY, missing: Any = None, overwrite: bool = False):
        """
        Initialize the joiner.

        Args:
            label_name: Attribute name used for community labels
            missing: Value given to records without a result
            overwrite: Allow results to replace existing attributes
        """
        self.label_name = label_name
        self.missing = missing
        self.overwrite = overwrite

    def result_columns(self, scores: Optional[Mapping[str, Mapping[str, float]]] = None,
                       labels: Optional[Mapping[str, int]] = None) -> Tuple[Dict[str, Dict[str, Any]], List[str]]:
        """
        Reshape score and label maps into one attribute mapping per vertex.

        Returns:
            (vertex_id -> {column: value}, column names); every vertex with
            a result carries every column
        """
        columns: Dict[str, None] = {}
        for measures in (scores or {}).values():
            for name in measures:
                columns.setdefault(name, None)
        if labels is not None:
            columns.setdefault(self.label_name, None)

        results: Dict[str, Dict[str, Any]] = {}
        for vertex_id, measures in (scores or {}).items():
            results.setdefault(vertex_id, {}).update(measures)
        for vertex_id, label in (labels or {}).items():
            results.setdefault(vertex_id, {})[self.label_name] = label

        return {
            vertex_id: {name: values.get(name, self.missing) for name in columns}
            for vertex_id, values in results.items()
        }, list(columns)

    def join(self, records: Iterable,
             scores: Optional[Mapping[str, Mapping[str, float]]] = None,
             labels: Optional[Mapping[str, int]] = None) -> List[pyvertexrecord]:
        """
        Left-join results onto vertex records.

        Args:
            records: ``pyvertexrecord`` or ``(id, attributes)`` tuples
            scores: vertex_id -> {measure: score}
            labels: vertex_id -> community label

        Returns:
            New records in input order; the inputs are not modified

        Raises:
            AttributeConflictError: If a result column already exists on a
                record and overwrite is False
        """
        results, columns = self.result_columns(scores, labels)
        joined = []
        matched = 0

        for record in records:
            record = pyvertexrecord.coerce(record)
            merged = dict(record.attributes)
            values = results.get(record.id)
            if values is not None:
                matched += 1
            else:
                values = {name: self.missing for name in columns}

            for name, value in values.items():
                if name in merged and not self.overwrite:
                    raise AttributeConflictError(record.id, name)
                merged[name] = value
            joined.append(pyvertexrecord(record.id, merged))

        logger.debug(f"Joined {len(columns)} result columns onto {len(joined)} records ({matched} matched)")
        return joined

    def annotate(self, graph: FlowGraph,
                 scores: Optional[Mapping[str, Mapping[str, float]]] = None,
                 labels: Optional[Mapping[str, int]] = None) -> FlowGraph:
        """
        Return a copy of the graph with results attached as vertex attributes.

        Vertices without a result get the ``missing`` value; results for ids
        not in the graph are ignored.
        """
        results, columns = self.result_columns(scores, labels)
        values = {
            vertex_id: results.get(vertex_id, {name: self.missing for name in columns})
            for vertex_id in graph.vertex_ids()
        }
        return graph.annotate(values, overwrite=self.overwrite)
