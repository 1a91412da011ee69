"""
Core data classes for flow network representation.

This module contains the fundamental data structures used throughout
the flowgraph library. The graph builder lives in
``flowgraph.classes.graph_builders`` and is imported from there.
"""

from .vertex import pyvertex
from .edge import pyedge
from .records import pyflowrecord, pyvertexrecord

__all__ = [
    'pyvertex',
    'pyedge',
    'pyflowrecord',
    'pyvertexrecord',
]
