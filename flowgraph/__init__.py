"""
pyodflow - Origin-Destination Flow Network Analysis Library

A Python library for building weighted directed graphs from
origin-destination flow records, scoring vertex importance and partitioning
the network into communities of strongly interlinked spatial units.

Main Classes:
    pyflowgraph: Main class for flow network analysis (facade)
    FlowGraph: Directed multigraph with named edge weights
    GraphBuilder: Builds a FlowGraph from flow and vertex records
    CentralityAnalyzer: Degree, closeness and eigenvector centrality
    EdgePruner: Threshold pruning to a minimum-degree invariant
    CommunityDetector: Map-equation community detection
    AttributeJoiner: Joins results back onto vertex records

Example:
    >>> from flowgraph import pyflowgraph
    >>> network = pyflowgraph(flows, vertices, weight="all")
    >>> network.centrality()
    >>> network.detect_communities(floor=5)
"""

__version__ = "0.1.0"

from flowgraph.classes.vertex import pyvertex
from flowgraph.classes.edge import pyedge
from flowgraph.classes.records import pyflowrecord, pyvertexrecord
from flowgraph.classes.options import AggregationPolicy, DegreeMode, VertexSource
from flowgraph.core.graph import FlowGraph
from flowgraph.classes.graph_builders import GraphBuilder
from flowgraph.analysis.pathfinding import PathFinder
from flowgraph.analysis.centrality import CentralityAnalyzer
from flowgraph.analysis.community import CommunityDetector
from flowgraph.operations.pruning import EdgePruner, PruningReport
from flowgraph.operations.joining import AttributeJoiner
from flowgraph.core.flowgraph import pyflowgraph
from flowgraph.exceptions import (
    FlowGraphError,
    ConstructionError,
    UnknownVertexError,
    DuplicateVertexError,
    NegativeWeightError,
    InvalidWeightError,
    MissingVertexAttributeError,
    UnknownWeightError,
    PruningInfeasibleError,
    EmptyGraphError,
    AttributeConflictError,
    OperationCancelledError,
    NonConvergenceWarning,
)

__all__ = [
    'pyflowgraph',
    'pyvertex',
    'pyedge',
    'pyflowrecord',
    'pyvertexrecord',
    'AggregationPolicy',
    'DegreeMode',
    'VertexSource',
    'FlowGraph',
    'GraphBuilder',
    'PathFinder',
    'CentralityAnalyzer',
    'CommunityDetector',
    'EdgePruner',
    'PruningReport',
    'AttributeJoiner',
    'FlowGraphError',
    'ConstructionError',
    'UnknownVertexError',
    'DuplicateVertexError',
    'NegativeWeightError',
    'InvalidWeightError',
    'MissingVertexAttributeError',
    'UnknownWeightError',
    'PruningInfeasibleError',
    'EmptyGraphError',
    'AttributeConflictError',
    'OperationCancelledError',
    'NonConvergenceWarning',
]
