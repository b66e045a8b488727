"""
Merkle Engine - Metrics Module

Prometheus metrics for the Merkle tree service.

Exports:
- Build and insertion timings
- Membership query outcomes
- Tree shape gauges
"""

from merkle_engine.metrics.tree_metrics import (
    TreeMetrics,
    get_tree_metrics,
)

__all__ = [
    "TreeMetrics",
    "get_tree_metrics",
]
