"""
Error taxonomy for the flowgraph package.

Construction errors abort graph building before any store is returned.
Pruning and detection errors leave the input graph untouched so the
caller can retry with different parameters.
"""


class FlowGraphError(Exception):
    """Base class for all flowgraph errors."""


class ConstructionError(FlowGraphError):
    """Raised when a graph cannot be built from the supplied records."""


class UnknownVertexError(ConstructionError, KeyError):
    """An edge (or query) references a vertex id that is not in the graph."""

    def __init__(self, vertex_id):
        self.vertex_id = vertex_id
        super().__init__(f"Unknown vertex: {vertex_id!r}")

    def __str__(self):
        return self.args[0]


class DuplicateVertexError(ConstructionError):
    """A vertex id was added twice."""

    def __init__(self, vertex_id):
        self.vertex_id = vertex_id
        super().__init__(f"Duplicate vertex: {vertex_id!r}")


class NegativeWeightError(ConstructionError):
    """An edge weight is below zero."""

    def __init__(self, name, value):
        self.name = name
        self.value = value
        super().__init__(f"Negative weight {name}={value!r}")


class InvalidWeightError(ConstructionError):
    """An edge weight is not a finite real number."""

    def __init__(self, name, value):
        self.name = name
        self.value = value
        super().__init__(f"Invalid weight {name}={value!r}")


class MissingVertexAttributeError(ConstructionError):
    """Strict attachment found vertex records with no matching flow endpoint."""

    def __init__(self, vertex_ids):
        self.vertex_ids = list(vertex_ids)
        preview = ", ".join(repr(v) for v in self.vertex_ids[:5])
        super().__init__(
            f"{len(self.vertex_ids)} vertex record(s) do not match any flow endpoint: {preview}"
        )


class UnknownWeightError(FlowGraphError, KeyError):
    """An edge does not carry the requested weight attribute."""

    def __init__(self, name, edge_key=None):
        self.name = name
        self.edge_key = edge_key
        super().__init__(f"Edge {edge_key} has no weight named {name!r}")

    def __str__(self):
        return self.args[0]


class PruningInfeasibleError(FlowGraphError):
    """The degree floor cannot be met before the graph is emptied."""

    def __init__(self, message, threshold=None):
        self.threshold = threshold
        super().__init__(message)


class EmptyGraphError(FlowGraphError):
    """Community detection was asked to partition a graph without edges."""


class AttributeConflictError(FlowGraphError):
    """Attaching results would overwrite an existing vertex attribute."""

    def __init__(self, vertex_id, key):
        self.vertex_id = vertex_id
        self.key = key
        super().__init__(f"Vertex {vertex_id!r} already has attribute {key!r}")


class OperationCancelledError(FlowGraphError):
    """A long-running loop observed the cancellation signal."""


class NonConvergenceWarning(UserWarning):
    """
    Power iteration ran out of iterations before reaching the tolerance.

    The warning carries the best estimate so callers that escalate warnings
    to errors can still recover the scores.
    """

    def __init__(self, message, scores=None, iterations=None, delta=None):
        super().__init__(message)
        self.scores = scores if scores is not None else {}
        self.iterations = iterations
        self.delta = delta
