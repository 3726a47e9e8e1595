"""
Merkle Tree - Cryptographic Utilities

Provides hashing primitives, Merkle tree construction, proof
generation, verification and incremental insertion.
"""

from merkle_tree.crypto.hashing import (
    compute_parent_hash,
    hash_bytes,
)
from merkle_tree.crypto.merkle import (
    MerkleProof,
    MerkleTree,
    ProofDirection,
    ProofElement,
    build,
    compute_parent_level,
    compute_root_from_proof,
    insert,
    proof_of_inclusion,
    root,
    validate_proof,
)

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
    "compute_parent_level",
    "compute_root_from_proof",
]
