"""
Enumerations and default parameters shared across the package.

Enum members also accept their string values, so ``"sum-duplicates"`` and
``AggregationPolicy.SUM_DUPLICATES`` are interchangeable everywhere.
"""

from enum import Enum

# Pruning
DEFAULT_DEGREE_FLOOR = 5
DEFAULT_START_THRESHOLD = 1
DEFAULT_THRESHOLD_STEP = 1

# Eigenvector centrality
DEFAULT_TOLERANCE = 1e-6
DEFAULT_MAX_ITERATIONS = 1000

# Community detection
DEFAULT_TELEPORTATION = 0.15
DEFAULT_TRIALS = 5
DEFAULT_SEED = 123
DEFAULT_MAX_SWEEPS = 100
DEFAULT_PAGERANK_TOLERANCE = 1e-15
DEFAULT_PAGERANK_MAX_ITERATIONS = 200
MIN_CODELENGTH_IMPROVEMENT = 1e-10

# Attribute names used when scores/labels are attached to vertices
DEGREE = "degree"
CLOSENESS = "closeness"
EIGENVECTOR = "eigenvector"
COMMUNITY = "community"


class _StrEnum(Enum):
    @classmethod
    def coerce(cls, value):
        """Return the member for an enum member or its string value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            valid = ", ".join(repr(m.value) for m in cls)
            raise ValueError(f"Invalid {cls.__name__} {value!r}; expected one of {valid}") from None


class AggregationPolicy(_StrEnum):
    """How the builder treats several flow records between the same ordered pair."""
    KEEP_ALL = "keep-all"
    SUM_DUPLICATES = "sum-duplicates"


class DegreeMode(_StrEnum):
    """Which incident edges count toward degree and neighborhood queries."""
    ALL = "all"
    OUT = "out"
    IN = "in"


class VertexSource(_StrEnum):
    """Where the builder takes its vertex set from."""
    FLOWS = "flows"
    RECORDS = "records"
