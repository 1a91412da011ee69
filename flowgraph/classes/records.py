"""
Input record types exchanged with the data-loading collaborators.

Plain tuples are accepted wherever these records are expected; the
``coerce`` helpers normalise them.
"""

from types import MappingProxyType
from typing import Any, Mapping, NamedTuple


class pyflowrecord(NamedTuple):
    """One origin-destination flow: ``(source, destination, weights)``."""
    source: str
    destination: str
    weights: Mapping[str, float] = MappingProxyType({})

    @classmethod
    def coerce(cls, record) -> "pyflowrecord":
        if isinstance(record, cls):
            return record
        if isinstance(record, (tuple, list)) and len(record) in (2, 3):
            source, destination = record[0], record[1]
            weights = record[2] if len(record) == 3 and record[2] is not None else {}
            return cls(source, destination, weights)
        raise TypeError(f"Cannot interpret {record!r} as a flow record")


class pyvertexrecord(NamedTuple):
    """Attributes of one spatial unit: ``(id, attributes)``."""
    id: str
    attributes: Mapping[str, Any] = MappingProxyType({})

    @classmethod
    def coerce(cls, record) -> "pyvertexrecord":
        if isinstance(record, cls):
            return record
        if isinstance(record, (tuple, list)) and len(record) in (1, 2):
            attributes = record[1] if len(record) == 2 and record[1] is not None else {}
            return cls(record[0], attributes)
        raise TypeError(f"Cannot interpret {record!r} as a vertex record")
