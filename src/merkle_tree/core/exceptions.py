"""
Merkle Tree - Exceptions
"""


class MerkleTreeError(Exception):
    """Base exception for Merkle tree errors."""

    pass


class EmptyInputError(MerkleTreeError, ValueError):
    """Tree construction was requested with no items."""

    pass


class NotFoundError(MerkleTreeError, LookupError):
    """Requested leaf hash is not part of the tree."""

    def __init__(self, target: bytes) -> None:
        self.target = target
        super().__init__(f"Leaf hash {target.hex()} not found in tree")


class InvalidHashError(MerkleTreeError, ValueError):
    """A supplied hash has the wrong length or encoding."""

    pass


class InvalidProofError(MerkleTreeError, ValueError):
    """A proof path is malformed and cannot be replayed."""

    pass


class UnsupportedAlgorithmError(MerkleTreeError, ValueError):
    """Hash algorithm is unknown or has no fixed digest size."""

    pass
