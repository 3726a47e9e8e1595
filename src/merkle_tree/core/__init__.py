"""
Merkle Tree - Core

Configuration, logging setup and the exception taxonomy.
"""

from merkle_tree.core.config import Settings, get_settings, settings
from merkle_tree.core.exceptions import (
    EmptyInputError,
    InvalidHashError,
    InvalidProofError,
    MerkleTreeError,
    NotFoundError,
    UnsupportedAlgorithmError,
)
from merkle_tree.core.logging import configure_library_logging, setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "setup_logging",
    "configure_library_logging",
    "MerkleTreeError",
    "EmptyInputError",
    "NotFoundError",
    "InvalidHashError",
    "InvalidProofError",
    "UnsupportedAlgorithmError",
]
