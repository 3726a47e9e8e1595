"""
Merkle Tree - Metrics Module

Prometheus metrics for tree building, insertion, proofs and verification.
"""

from merkle_tree.metrics.tree_metrics import (
    TreeMetrics,
    get_tree_metrics,
)

__all__ = [
    "TreeMetrics",
    "get_tree_metrics",
]
