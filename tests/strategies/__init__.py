# tests/strategies/__init__.py
"""Hypothesis strategies for property-based tests.

Re-exports commonly used strategies for convenience:
    from tests.strategies import dag_graphs, STANDARD_SETTINGS
"""

from tests.strategies.graphs import dag_graphs, node_ids
from tests.strategies.settings import DETERMINISM_SETTINGS, STANDARD_SETTINGS

__all__ = [
    "DETERMINISM_SETTINGS",
    "STANDARD_SETTINGS",
    "dag_graphs",
    "node_ids",
]
