"""
Utility functions for flowgraph.

This module provides shared helpers used across the package: conversion of
a FlowGraph into numpy edge arrays, entropy terms and cooperative
cancellation checks.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


def edge_arrays(graph, weight: Optional[str] = None) -> Tuple[List[str], Dict[str, int], np.ndarray, np.ndarray, np.ndarray]:
    """
    Flatten a graph into index arrays suitable for vectorised arithmetic.

    Args:
        graph: FlowGraph to convert
        weight: Name of the weight to use; None gives every edge weight 1

    Returns:
        (vertex_ids, index_of, sources, targets, weights) where sources and
        targets hold vertex positions and weights holds one value per edge

    Raises:
        UnknownWeightError: If an edge lacks the named weight
    """
    vertex_ids = graph.vertex_ids()
    index_of = {vertex_id: i for i, vertex_id in enumerate(vertex_ids)}
    edges = graph.edges()

    sources = np.fromiter((index_of[e.source] for e in edges), dtype=np.int64, count=len(edges))
    targets = np.fromiter((index_of[e.target] for e in edges), dtype=np.int64, count=len(edges))
    if weight is None:
        weights = np.ones(len(edges), dtype=float)
    else:
        weights = np.fromiter((e.weight(weight) for e in edges), dtype=float, count=len(edges))

    return vertex_ids, index_of, sources, targets, weights


def plogp(values) -> np.ndarray:
    """Elementwise p * log2(p) with 0 log 0 = 0."""
    p = np.asarray(values, dtype=float)
    out = np.zeros_like(p)
    mask = p > 0
    out[mask] = p[mask] * np.log2(p[mask])
    return out


def is_cancelled(cancel: Any) -> bool:
    """
    Evaluate a cancellation signal.

    Accepts None, an object with ``is_set()`` (threading.Event) or a
    zero-argument callable.
    """
    if cancel is None:
        return False
    if hasattr(cancel, "is_set"):
        return bool(cancel.is_set())
    return bool(cancel())


def check_cancelled(cancel: Any, where: str):
    """Raise OperationCancelledError if the signal is set."""
    if is_cancelled(cancel):
        logger.info(f"Cancellation requested during {where}")
        raise OperationCancelledError(f"{where} cancelled")
