"""
Edge representation and weight validation.
"""

import math
from numbers import Real
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from ..exceptions import InvalidWeightError, NegativeWeightError, UnknownWeightError


def validate_weights(weights: Optional[Mapping[str, Any]]) -> Dict[str, float]:
    """
    Check that every named weight is a finite, non-negative real number.

    Args:
        weights: Mapping of weight name to value (may be None)

    Returns:
        A new dict holding the validated weights

    Raises:
        InvalidWeightError: For booleans, non-numbers, NaN or infinity
        NegativeWeightError: For values below zero
    """
    checked = {}
    if not weights:
        return checked
    for name, value in weights.items():
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidWeightError(name, value)
        if math.isnan(value) or math.isinf(value):
            raise InvalidWeightError(name, value)
        if value < 0:
            raise NegativeWeightError(name, value)
        checked[str(name)] = value
    return checked


class pyedge:
    """
    A directed flow between two vertices.

    ``key`` is the insertion index of the edge in its graph. It survives
    copies and pruning, so edges of a reduced graph can be traced back to
    the original.
    """

    __slots__ = ("key", "source", "target", "_weights")

    def __init__(self, key: int, source: str, target: str, weights: Optional[Mapping[str, float]] = None):
        self.key = key
        self.source = source
        self.target = target
        self._weights: Dict[str, float] = dict(weights) if weights else {}

    @property
    def weights(self) -> Mapping[str, float]:
        return MappingProxyType(self._weights)

    def weight(self, name: str) -> float:
        """Return the named weight, raising UnknownWeightError if absent."""
        try:
            return self._weights[name]
        except KeyError:
            raise UnknownWeightError(name, self.key) from None

    @property
    def is_loop(self) -> bool:
        return self.source == self.target

    def __eq__(self, other):
        if not isinstance(other, pyedge):
            return NotImplemented
        return (self.key, self.source, self.target, self._weights) == \
            (other.key, other.source, other.target, other._weights)

    def __hash__(self):
        return hash((self.key, self.source, self.target))

    def __repr__(self):
        return f"pyedge({self.key}, {self.source!r} -> {self.target!r}, {self._weights!r})"
