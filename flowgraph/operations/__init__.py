"""
Network operation modules that derive new graphs and records.

This module contains the threshold pruner and the attribute joiner.
"""

__all__ = []
