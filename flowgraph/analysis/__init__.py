"""
Network analysis modules for scoring and partitioning flow networks.

This module contains classes for shortest paths, centrality measures and
map-equation community detection.
"""

__all__ = []
