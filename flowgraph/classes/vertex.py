"""
Vertex representation for origin-destination flow graphs.
"""

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..exceptions import AttributeConflictError


class pyvertex:
    """
    A spatial unit (zone, region, station) in the flow graph.

    The identifier is fixed at creation. Attributes are exposed through a
    read-only mapping; results are attached by building a new vertex with
    :meth:`with_attributes`.
    """

    __slots__ = ("id", "_attributes")

    def __init__(self, vertex_id: str, attributes: Optional[Mapping[str, Any]] = None):
        self.id = vertex_id
        self._attributes: Dict[str, Any] = dict(attributes) if attributes else {}

    @property
    def attributes(self) -> Mapping[str, Any]:
        """Read-only view of the vertex attributes."""
        return MappingProxyType(self._attributes)

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def with_attributes(self, values: Mapping[str, Any], overwrite: bool = False) -> "pyvertex":
        """
        Return a copy of this vertex with additional attributes.

        Args:
            values: New attribute entries
            overwrite: Allow replacing keys that already exist

        Returns:
            A new pyvertex; this vertex is left unchanged

        Raises:
            AttributeConflictError: If a key exists and overwrite is False
        """
        merged = dict(self._attributes)
        for key, value in values.items():
            if key in merged and not overwrite:
                raise AttributeConflictError(self.id, key)
            merged[key] = value
        return pyvertex(self.id, merged)

    def __eq__(self, other):
        if not isinstance(other, pyvertex):
            return NotImplemented
        return self.id == other.id and self._attributes == other._attributes

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"pyvertex({self.id!r}, {self._attributes!r})"
