"""
Pytest configuration and shared fixtures for Merkle tree tests.
"""

from collections.abc import Generator

import pytest
import structlog

from merkle_tree.core.config import settings
from merkle_tree.core.logging import configure_library_logging
from merkle_tree.crypto.merkle import MerkleTree
from merkle_tree.metrics import TreeMetrics, get_tree_metrics


@pytest.fixture
def sample_items() -> list[bytes]:
    """Five items, giving odd-length levels at every height."""
    return [
        b"genesis block",
        b"transfer 10 to alice",
        b"transfer 4 to bob",
        b"mint 100",
        b"burn 7",
    ]


@pytest.fixture
def sample_tree(sample_items: list[bytes]) -> MerkleTree:
    """Tree built from sample_items."""
    return MerkleTree.build(sample_items)


@pytest.fixture
def four_leaf_tree() -> MerkleTree:
    """Perfect binary tree over a, b, c, d."""
    return MerkleTree.build(["a", "b", "c", "d"])


@pytest.fixture
def tree_metrics() -> TreeMetrics:
    """Process-wide metrics instance."""
    return get_tree_metrics()


@pytest.fixture
def metrics_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    """Turn metric recording off for one test."""
    monkeypatch.setattr(settings, "METRICS_ENABLED", False)


@pytest.fixture
def reset_structlog() -> Generator[None, None, None]:
    """Restore the library logging defaults after a test reconfigures structlog."""
    structlog.reset_defaults()
    yield
    structlog.reset_defaults()
    configure_library_logging()
