"""
Flow model and two-level map equation.

The map equation measures the per-step description length (in bits) of a
random walker moving on the graph, given a partition into modules:

    L = plogp(sum enter) - sum plogp(enter_i) - sum plogp(exit_i)
        + sum plogp(exit_i + p_i) - sum plogp(p_alpha)

where ``p_alpha`` is the visit rate of vertex alpha, ``p_i`` the total visit
rate of module i and ``enter_i``/``exit_i`` the link flow entering and
leaving module i. Partitions that trap the walker for long stretches
compress better.
"""

import logging
import math
from typing import NamedTuple

import numpy as np

from ..classes.options import DEFAULT_PAGERANK_MAX_ITERATIONS, DEFAULT_PAGERANK_TOLERANCE, DEFAULT_TELEPORTATION
from ..classes.utils import plogp

logger = logging.getLogger(__name__)


class FlowModel(NamedTuple):
    """Stationary visit rates and the link flows between distinct vertices."""
    node_flow: np.ndarray
    sources: np.ndarray
    targets: np.ndarray
    flow: np.ndarray


def scalar_plogp(p: float) -> float:
    return p * math.log2(p) if p > 0 else 0.0


def compute_flow(n: int, sources: np.ndarray, targets: np.ndarray, weights: np.ndarray,
                 directed: bool = True,
                 teleportation: float = DEFAULT_TELEPORTATION,
                 tol: float = DEFAULT_PAGERANK_TOLERANCE,
                 max_iter: int = DEFAULT_PAGERANK_MAX_ITERATIONS) -> FlowModel:
    """
    Model the random walk on a weighted graph.

    Directed graphs use PageRank visit rates: with probability
    ``teleportation`` (and always from dangling vertices) the walker jumps to
    a uniformly random vertex. Teleport steps are not encoded, so only link
    flow counts toward module entry and exit. Undirected graphs use the
    closed form ``p = strength / total strength``.

    Args:
        n: Number of vertices
        sources, targets: Edge endpoint positions
        weights: Edge weights; zero-weight edges carry no flow
        directed: Respect edge direction
        teleportation: Teleportation probability for directed graphs

    Returns:
        FlowModel with self-loops removed from the link flows
    """
    keep = weights > 0
    sources, targets, weights = sources[keep], targets[keep], weights[keep]

    if not directed:
        sources, targets = np.concatenate([sources, targets]), np.concatenate([targets, sources])
        weights = np.concatenate([weights, weights])
        total = weights.sum()
        if total <= 0:
            return FlowModel(np.full(n, 1.0 / n), sources[:0], targets[:0], weights[:0])
        node_flow = np.bincount(sources, weights=weights, minlength=n) / total
        flow = weights / total
    else:
        out_strength = np.bincount(sources, weights=weights, minlength=n)
        dangling = out_strength == 0
        transition = weights / np.where(out_strength > 0, out_strength, 1.0)[sources]

        node_flow = np.full(n, 1.0 / n)
        for iteration in range(1, max_iter + 1):
            moved = np.bincount(targets, weights=node_flow[sources] * transition, minlength=n)
            jump = ((1.0 - teleportation) * node_flow[dangling].sum() + teleportation) / n
            updated = (1.0 - teleportation) * moved + jump
            updated /= updated.sum()
            change = np.abs(updated - node_flow).sum()
            node_flow = updated
            if change < tol:
                break
        logger.debug(f"PageRank flow settled after {iteration} iterations (change {change:.2e})")

        flow = (1.0 - teleportation) * node_flow[sources] * transition

    loops = sources == targets
    return FlowModel(node_flow, sources[~loops], targets[~loops], flow[~loops])


def codelength(model: FlowModel, modules: np.ndarray) -> float:
    """
    Two-level map equation codelength of a partition.

    Args:
        model: Flow model of the graph
        modules: Module index per vertex

    Returns:
        Codelength in bits
    """
    modules = np.asarray(modules)
    n_modules = int(modules.max()) + 1 if len(modules) else 0
    module_flow = np.bincount(modules, weights=model.node_flow, minlength=n_modules)

    crossing = modules[model.sources] != modules[model.targets]
    exit_flow = np.bincount(modules[model.sources][crossing], weights=model.flow[crossing], minlength=n_modules)
    enter_flow = np.bincount(modules[model.targets][crossing], weights=model.flow[crossing], minlength=n_modules)

    return float(
        scalar_plogp(enter_flow.sum())
        - plogp(enter_flow).sum()
        - plogp(exit_flow).sum()
        + plogp(exit_flow + module_flow).sum()
        - plogp(model.node_flow).sum()
    )


def one_level_codelength(model: FlowModel) -> float:
    """Codelength with every vertex in a single module: the visit-rate entropy."""
    return float(-plogp(model.node_flow).sum())
