"""
Merkle Tree

Binary hash tree with inclusion proofs and incremental insertion.

Usage:
    from merkle_tree import build, hash_bytes, validate_proof

    tree = build([b"a", b"b", b"c"])
    proof = tree.proof_of_inclusion(hash_bytes(b"c"))
    validate_proof(hash_bytes(b"c"), proof, tree.root_hash)
"""

from merkle_tree.core.exceptions import (
    EmptyInputError,
    InvalidHashError,
    InvalidProofError,
    MerkleTreeError,
    NotFoundError,
    UnsupportedAlgorithmError,
)
from merkle_tree.core.logging import configure_library_logging
from merkle_tree.crypto import (
    MerkleProof,
    MerkleTree,
    ProofDirection,
    ProofElement,
    build,
    compute_parent_hash,
    compute_root_from_proof,
    hash_bytes,
    insert,
    proof_of_inclusion,
    root,
    validate_proof,
)

__version__ = "1.0.0"

configure_library_logging()

__all__ = [
    "MerkleTree",
    "MerkleProof",
    "ProofDirection",
    "ProofElement",
    "build",
    "root",
    "insert",
    "proof_of_inclusion",
    "validate_proof",
    "hash_bytes",
    "compute_parent_hash",
    "compute_root_from_proof",
    "MerkleTreeError",
    "EmptyInputError",
    "NotFoundError",
    "InvalidHashError",
    "InvalidProofError",
    "UnsupportedAlgorithmError",
]
