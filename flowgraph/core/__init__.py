"""
Core graph data structures and management.

``graph`` holds the FlowGraph store; ``flowgraph`` the pyflowgraph facade.
Import from the submodules directly to avoid import cycles with the
builder.
"""

__all__ = []
