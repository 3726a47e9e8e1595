"""
Unit tests for the tree metrics.
"""

import pytest
from prometheus_client import REGISTRY

from merkle_tree.crypto.hashing import hash_bytes
from merkle_tree.crypto.merkle import MerkleTree, validate_proof
from merkle_tree.metrics import TreeMetrics, get_tree_metrics


def sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestTreeMetrics:
    """Tests for TreeMetrics recording."""

    def test_singleton(self, tree_metrics: TreeMetrics) -> None:
        """Test the global instance is reused."""
        assert get_tree_metrics() is tree_metrics

    def test_library_info(self, tree_metrics: TreeMetrics) -> None:
        """Test library info labels are set."""
        tree_metrics.set_library_info("1.0.0", "blake2b")

        assert sample(
            "merkle_tree_library_info",
            {"version": "1.0.0", "default_hash_algorithm": "blake2b"},
        ) == 1.0

    def test_build_recorded(self, tree_metrics: TreeMetrics) -> None:
        """Test builds observe duration and size."""
        before = sample("merkle_tree_size_count")
        MerkleTree.build([b"a", b"b", b"c"])

        assert sample("merkle_tree_size_count") == before + 1

    def test_insert_recorded(self, tree_metrics: TreeMetrics) -> None:
        """Test inserts are counted."""
        tree = MerkleTree.build([b"a"])
        before = sample("merkle_tree_inserts_total")
        tree.insert(b"b")

        assert sample("merkle_tree_inserts_total") == before + 1

    def test_proof_miss_recorded(self, tree_metrics: TreeMetrics) -> None:
        """Test lookups for absent leaves are counted."""
        tree = MerkleTree.build([b"a"])
        before = sample("merkle_tree_proof_not_found_total")

        with pytest.raises(LookupError):
            tree.proof_of_inclusion(hash_bytes(b"z"))

        assert sample("merkle_tree_proof_not_found_total") == before + 1

    def test_verification_recorded(self, tree_metrics: TreeMetrics) -> None:
        """Test verifications are counted by result."""
        tree = MerkleTree.build([b"a", b"b"])
        proof = tree.get_proof(0)
        valid_before = sample("merkle_tree_verifications_total", {"result": "valid"})
        invalid_before = sample("merkle_tree_verifications_total", {"result": "invalid"})

        validate_proof(hash_bytes(b"a"), proof, tree.root_hash)
        validate_proof(hash_bytes(b"b"), proof, tree.root_hash)

        assert sample("merkle_tree_verifications_total", {"result": "valid"}) == valid_before + 1
        assert sample("merkle_tree_verifications_total", {"result": "invalid"}) == invalid_before + 1

    @pytest.mark.usefixtures("metrics_disabled")
    def test_disabled(self, tree_metrics: TreeMetrics) -> None:
        """Test nothing is recorded when metrics are disabled."""
        before = sample("merkle_tree_inserts_total")
        tree = MerkleTree.build([b"a"])
        tree.insert(b"b")

        assert sample("merkle_tree_inserts_total") == before
