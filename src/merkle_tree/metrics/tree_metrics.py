"""
Merkle Tree - Metrics

Prometheus metrics for tree operations.

Metrics Categories:
- Tree construction
- Leaf insertion
- Proof generation
- Proof verification
"""

import structlog
from prometheus_client import Counter, Histogram, Info

from merkle_tree.core.config import settings

logger = structlog.get_logger(__name__)


class TreeMetrics:
    """
    Centralized metrics for Merkle tree operations.

    Provides visibility into:
    - Build times and tree sizes
    - Insert volume
    - Proof generation times and lookup misses
    - Verification outcomes
    """

    def __init__(self) -> None:
        """Initialize all tree metrics."""
        self._init_build_metrics()
        self._init_proof_metrics()
        self._init_info_metrics()

    def _init_build_metrics(self) -> None:
        """Initialize construction and insertion metrics."""
        self.build_duration = Histogram(
            "merkle_tree_build_duration_seconds",
            "Merkle tree build time",
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
        )

        self.tree_size = Histogram(
            "merkle_tree_size",
            "Number of leaves in Merkle tree at build time",
            buckets=[10, 50, 100, 500, 1000, 5000, 10000, 50000],
        )

        self.inserts = Counter(
            "merkle_tree_inserts_total",
            "Leaves appended to existing trees",
        )

    def _init_proof_metrics(self) -> None:
        """Initialize proof metrics."""
        self.proof_generation = Histogram(
            "merkle_tree_proof_duration_seconds",
            "Merkle proof generation time",
            buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01],
        )

        self.proof_misses = Counter(
            "merkle_tree_proof_not_found_total",
            "Proof requests for hashes absent from the tree",
        )

        self.verifications = Counter(
            "merkle_tree_verifications_total",
            "Merkle proof verifications",
            ["result"],
        )

    def _init_info_metrics(self) -> None:
        """Initialize info metrics."""
        self.library_info = Info(
            "merkle_tree_library",
            "Merkle tree library information",
        )

    # Convenience methods

    def record_build(self, duration: float, tree_size: int) -> None:
        """Record tree construction."""
        if not settings.METRICS_ENABLED:
            return
        self.build_duration.observe(duration)
        self.tree_size.observe(tree_size)

    def record_insert(self) -> None:
        """Record leaf insertion."""
        if not settings.METRICS_ENABLED:
            return
        self.inserts.inc()

    def record_proof(self, duration: float) -> None:
        """Record proof generation."""
        if not settings.METRICS_ENABLED:
            return
        self.proof_generation.observe(duration)

    def record_proof_miss(self) -> None:
        """Record a proof request for an absent leaf."""
        if not settings.METRICS_ENABLED:
            return
        self.proof_misses.inc()

    def record_verification(self, valid: bool) -> None:
        """Record Merkle proof verification."""
        if not settings.METRICS_ENABLED:
            return
        result = "valid" if valid else "invalid"
        self.verifications.labels(result=result).inc()

    def set_library_info(self, version: str, default_algorithm: str) -> None:
        """Set library info labels. Trees may override the default algorithm."""
        self.library_info.info({
            "version": version,
            "default_hash_algorithm": default_algorithm,
        })


# Singleton instance
_tree_metrics: TreeMetrics | None = None


def get_tree_metrics() -> TreeMetrics:
    """Get global tree metrics instance."""
    global _tree_metrics
    if _tree_metrics is None:
        _tree_metrics = TreeMetrics()
        _tree_metrics.set_library_info(settings.VERSION, settings.HASH_ALGORITHM)
        logger.debug("Tree metrics registered")
    return _tree_metrics
