"""
Unit tests for library configuration.
"""

import pytest
from pydantic import ValidationError

from merkle_tree.core.config import Settings, get_settings, normalize_algorithm, settings
from merkle_tree.core.exceptions import UnsupportedAlgorithmError
from merkle_tree.crypto.hashing import digest_size, hash_bytes, resolve_algorithm
from merkle_tree.crypto.merkle import MerkleTree


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self) -> None:
        """Test default values."""
        config = Settings()

        assert config.HASH_ALGORITHM == "sha256"
        assert config.METRICS_ENABLED is True
        assert config.LOG_LEVEL == "INFO"

    def test_cached(self) -> None:
        """Test get_settings returns the module instance."""
        assert get_settings() is settings

    def test_algorithm_normalized(self) -> None:
        """Test algorithm names are lower-cased."""
        assert Settings(HASH_ALGORITHM="SHA512").HASH_ALGORITHM == "sha512"

    def test_algorithm_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test the algorithm can be set through the environment."""
        monkeypatch.setenv("HASH_ALGORITHM", "sha3_256")

        assert Settings().HASH_ALGORITHM == "sha3_256"

    @pytest.mark.parametrize("algorithm", ["md17", "shake_256", "SHAKE_128"])
    def test_invalid_algorithm(self, algorithm: str) -> None:
        """Test unknown and variable-length algorithms are rejected."""
        with pytest.raises(ValidationError):
            Settings(HASH_ALGORITHM=algorithm)


class TestNormalizeAlgorithm:
    """Tests for the algorithm check shared by settings and explicit arguments."""

    def test_known_algorithm(self) -> None:
        """Test known names are lower-cased."""
        assert normalize_algorithm("SHA3_512") == "sha3_512"

    @pytest.mark.parametrize("algorithm", ["md17", "shake_128", "", None, 256])
    def test_rejected(self, algorithm: object) -> None:
        """Test unusable algorithms raise the library error."""
        with pytest.raises(UnsupportedAlgorithmError):
            normalize_algorithm(algorithm)


class TestConfiguredAlgorithm:
    """Tests for the settings-driven default algorithm."""

    def test_default_from_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test hashing and trees follow the configured algorithm."""
        monkeypatch.setattr(settings, "HASH_ALGORITHM", "sha512")

        assert resolve_algorithm() == "sha512"
        assert digest_size() == 64
        assert len(hash_bytes(b"x")) == 64
        assert MerkleTree.build([b"a", b"b"]).algorithm == "sha512"

    def test_tree_keeps_algorithm(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a tree is unaffected by later settings changes."""
        tree = MerkleTree.build([b"a"])
        monkeypatch.setattr(settings, "HASH_ALGORITHM", "sha512")
        tree.insert(b"b")

        assert tree.algorithm == "sha256"
        assert len(tree.root_hash) == 32
        assert tree.root_hash == MerkleTree.build([b"a", b"b"], algorithm="sha256").root_hash
