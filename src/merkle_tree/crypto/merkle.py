"""
Merkle Tree - Tree Implementation

Provides deterministic Merkle tree construction, inclusion proof
generation, proof validation and incremental leaf insertion.

Hashing scheme:
- Leaf nodes are the digest of the raw item bytes
- Internal nodes are the digest of ``left || right``

For odd-length levels, the last node is paired with itself
(duplicated) to form its parent. The same rule applies when building
from scratch and when inserting, so both paths yield the same root.

The tree keeps every level as a list of hashes, from the leaves
(level 0) up to the single-hash root level.
"""

import time
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from merkle_tree.core.exceptions import (
    EmptyInputError,
    InvalidProofError,
    NotFoundError,
    UnsupportedAlgorithmError,
)
from merkle_tree.crypto.hashing import (
    ByteLike,
    check_hash,
    compute_parent_hash,
    digest_size,
    hash_bytes,
    hash_from_hex,
    resolve_algorithm,
    to_bytes,
)
from merkle_tree.metrics import get_tree_metrics

logger = structlog.get_logger(__name__)


class ProofDirection(str, Enum):
    """Side on which a sibling hash is applied during re-hashing."""

    LEFT = "L"
    RIGHT = "R"


_DIRECTIONS = {
    "L": ProofDirection.LEFT,
    "LEFT": ProofDirection.LEFT,
    "R": ProofDirection.RIGHT,
    "RIGHT": ProofDirection.RIGHT,
}


@dataclass(frozen=True)
class ProofElement:
    """
    Single element in a Merkle proof path.

    Attributes:
        hash: The sibling hash at this level
        direction: Whether sibling is LEFT or RIGHT of the path
    """

    hash: bytes
    direction: ProofDirection

    def to_dict(self) -> dict[str, str]:
        """Serialize to dictionary."""
        return {"hash": self.hash.hex(), "direction": self.direction.value}

    @classmethod
    def from_dict(
        cls,
        data: dict[str, str],
        algorithm: str | None = None,
    ) -> "ProofElement":
        """Deserialize from dictionary."""
        return cls(
            hash=hash_from_hex(data["hash"], algorithm),
            direction=_parse_direction(data["direction"]),
        )


@dataclass
class MerkleProof:
    """
    Merkle inclusion proof for a leaf.

    Behaves as the ordered sequence of its proof elements, from the
    leaf level up to the level just below the root.

    Attributes:
        leaf_hash: Hash of the leaf being proven
        leaf_index: Position of the leaf in the tree
        path: Sibling hashes with directions
        root_hash: Root of the tree the proof was generated from
        tree_size: Total number of leaves in the tree
        algorithm: Hash algorithm of the tree
    """

    leaf_hash: bytes
    leaf_index: int
    path: list[ProofElement]
    root_hash: bytes
    tree_size: int
    algorithm: str

    def __len__(self) -> int:
        return len(self.path)

    def __iter__(self) -> Iterator[ProofElement]:
        return iter(self.path)

    def __getitem__(self, index: int) -> ProofElement:
        return self.path[index]

    def to_dict(self) -> dict[str, Any]:
        """Serialize proof to dictionary of hex strings."""
        return {
            "leaf_hash": self.leaf_hash.hex(),
            "leaf_index": self.leaf_index,
            "path": [e.to_dict() for e in self.path],
            "root_hash": self.root_hash.hex(),
            "tree_size": self.tree_size,
            "algorithm": self.algorithm,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerkleProof":
        """
        Deserialize proof from dictionary.

        Raises:
            InvalidHashError: If a hash has the wrong size for the algorithm
        """
        algorithm = resolve_algorithm(data.get("algorithm"))
        return cls(
            leaf_hash=hash_from_hex(data["leaf_hash"], algorithm),
            leaf_index=data["leaf_index"],
            path=[ProofElement.from_dict(e, algorithm) for e in data["path"]],
            root_hash=hash_from_hex(data["root_hash"], algorithm),
            tree_size=data["tree_size"],
            algorithm=algorithm,
        )

    def to_compact(self) -> list[str]:
        """
        Serialize to compact format (just the hashes with direction encoding).

        Format: ["R:hash1", "L:hash2", ...]
        """
        return [f"{e.direction.value}:{e.hash.hex()}" for e in self.path]

    @classmethod
    def from_compact(
        cls,
        leaf_hash: bytes,
        leaf_index: int,
        compact_path: list[str],
        root_hash: bytes,
        tree_size: int,
        algorithm: str | None = None,
    ) -> "MerkleProof":
        """Create proof from compact format."""
        algorithm = resolve_algorithm(algorithm)
        path = []
        for item in compact_path:
            direction, _, hash_value = item.partition(":")
            path.append(
                ProofElement(
                    hash=hash_from_hex(hash_value, algorithm),
                    direction=_parse_direction(direction),
                )
            )
        return cls(
            leaf_hash=leaf_hash,
            leaf_index=leaf_index,
            path=path,
            root_hash=root_hash,
            tree_size=tree_size,
            algorithm=algorithm,
        )


def _parse_direction(value: str) -> ProofDirection:
    direction = _coerce_direction(value)
    if direction is None:
        raise InvalidProofError(f"Unknown proof direction: {value!r}")
    return direction


def _coerce_direction(value: Any) -> ProofDirection | None:
    if isinstance(value, ProofDirection):
        return value
    if isinstance(value, str):
        return _DIRECTIONS.get(value.upper())
    return None


def _coerce_hash(value: Any) -> bytes | None:
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return None


def _coerce_element(element: Any) -> tuple[bytes, ProofDirection] | None:
    """Accept a ProofElement or a ``(hash, side)`` pair."""
    if isinstance(element, ProofElement):
        sibling, side = element.hash, element.direction
    elif isinstance(element, (tuple, list)) and len(element) == 2:
        sibling, side = element
    else:
        return None

    sibling = _coerce_hash(sibling)
    direction = _coerce_direction(side)
    if sibling is None or direction is None:
        return None
    return sibling, direction


def _replay_path(
    target: Any,
    proof: Any,
    algorithm: str | None,
) -> bytes | None:
    """Hash a leaf up its proof path; None when the input is malformed."""
    current = _coerce_hash(target)
    if current is None or not isinstance(proof, Iterable):
        return None

    for element in proof:
        step = _coerce_element(element)
        if step is None:
            return None

        sibling, direction = step
        if direction is ProofDirection.LEFT:
            # Sibling is on the left
            current = compute_parent_hash(sibling, current, algorithm)
        else:
            # Sibling is on the right
            current = compute_parent_hash(current, sibling, algorithm)

    return current


def compute_parent_level(
    level: list[bytes],
    algorithm: str | None = None,
) -> list[bytes]:
    """
    Compute the level above the given one.

    Adjacent hashes are paired left to right; when the level has an
    odd length the last hash is paired with itself.

    Args:
        level: Hashes of one tree level
        algorithm: hashlib algorithm name (defaults to settings)

    Returns:
        Parent hashes, ``ceil(len(level) / 2)`` of them
    """
    parents = []
    for i in range(0, len(level), 2):
        left = level[i]
        right = level[i + 1] if i + 1 < len(level) else left
        parents.append(compute_parent_hash(left, right, algorithm))
    return parents


def tree_height(leaf_count: int) -> int:
    """Number of level transitions between leaves and root."""
    return (leaf_count - 1).bit_length()


class MerkleTree:
    """
    Merkle tree over an ordered sequence of items.

    Features:
    - Deterministic construction from ordered items
    - Self-pairing of the last node on odd-length levels
    - Proof generation by leaf hash or by position
    - Incremental insertion touching only the new leaf's ancestors

    The tree is not internally synchronized: callers sharing an instance
    across threads must serialize insert() against every other call.

    Example:
        >>> tree = MerkleTree.build([b"a", b"b", b"c", b"d"])
        >>> proof = tree.proof_of_inclusion(hash_bytes(b"c"))
        >>> validate_proof(hash_bytes(b"c"), proof, tree.root_hash)
        True
    """

    def __init__(self, levels: list[list[bytes]], algorithm: str) -> None:
        """
        Initialize Merkle tree (internal use).

        Use build() or from_leaf_hashes() to construct trees.
        """
        self._levels = levels
        self._algorithm = algorithm

    @classmethod
    def build(
        cls,
        items: Iterable[ByteLike | str],
        algorithm: str | None = None,
    ) -> "MerkleTree":
        """
        Construct a Merkle tree from item data.

        Args:
            items: Ordered item data (bytes-like, or str encoded as UTF-8)
            algorithm: hashlib algorithm name (defaults to settings)

        Returns:
            Constructed MerkleTree

        Raises:
            EmptyInputError: If items is empty
        """
        items = list(items)
        if not items:
            raise EmptyInputError("Cannot create Merkle tree from empty items")

        algorithm = resolve_algorithm(algorithm)
        leaves = [hash_bytes(item, algorithm) for item in items]
        return cls._build_tree(leaves, algorithm)

    @classmethod
    def from_leaf_hashes(
        cls,
        hashes: Iterable[ByteLike | str],
        algorithm: str | None = None,
    ) -> "MerkleTree":
        """
        Construct a Merkle tree using hashes directly as leaves.

        Args:
            hashes: Pre-computed leaf hashes, raw or hex-encoded
            algorithm: hashlib algorithm name (defaults to settings)

        Returns:
            Constructed MerkleTree

        Raises:
            EmptyInputError: If hashes is empty
            InvalidHashError: If a hash has the wrong size or encoding
        """
        algorithm = resolve_algorithm(algorithm)
        leaves = []
        for value in hashes:
            if isinstance(value, str):
                leaves.append(hash_from_hex(value, algorithm))
            else:
                leaves.append(check_hash(to_bytes(value), algorithm))

        if not leaves:
            raise EmptyInputError("Cannot create Merkle tree from empty hashes")

        return cls._build_tree(leaves, algorithm)

    @classmethod
    def _build_tree(cls, leaves: list[bytes], algorithm: str) -> "MerkleTree":
        """Build every level bottom-up from the leaf hashes."""
        start = time.perf_counter()

        levels = [leaves]
        while len(levels[-1]) > 1:
            levels.append(compute_parent_level(levels[-1], algorithm))

        get_tree_metrics().record_build(time.perf_counter() - start, len(leaves))
        logger.debug(
            "Built Merkle tree",
            leaf_count=len(leaves),
            height=tree_height(len(leaves)),
            algorithm=algorithm,
        )
        return cls(levels, algorithm)

    def __len__(self) -> int:
        return len(self._levels[0])

    def __contains__(self, leaf_hash: object) -> bool:
        return _coerce_hash(leaf_hash) in self._levels[0]

    def __repr__(self) -> str:
        return (
            f"MerkleTree(leaf_count={self.leaf_count}, "
            f"algorithm={self._algorithm!r}, root={self.root_hash.hex()})"
        )

    @property
    def algorithm(self) -> str:
        """Hash algorithm fixed for this tree."""
        return self._algorithm

    @property
    def digest_size(self) -> int:
        """Length in bytes of every hash in the tree."""
        return digest_size(self._algorithm)

    @property
    def root_hash(self) -> bytes:
        """Get the root hash (Merkle root)."""
        return self._levels[-1][0]

    @property
    def leaves(self) -> tuple[bytes, ...]:
        """Get all leaf hashes."""
        return tuple(self._levels[0])

    @property
    def levels(self) -> tuple[tuple[bytes, ...], ...]:
        """Get every level, leaves first and root last."""
        return tuple(tuple(level) for level in self._levels)

    @property
    def leaf_count(self) -> int:
        """Get the number of leaves."""
        return len(self._levels[0])

    @property
    def height(self) -> int:
        """Number of levels above the leaves."""
        return len(self._levels) - 1

    def get_leaf_hash(self, index: int) -> bytes:
        """
        Get the hash of a leaf by index.

        Raises:
            IndexError: If index out of bounds
        """
        if index < 0 or index >= self.leaf_count:
            raise IndexError(f"Leaf index {index} out of bounds")
        return self._levels[0][index]

    def index_of(self, leaf_hash: ByteLike) -> int:
        """
        Position of the first leaf equal to leaf_hash.

        Raises:
            NotFoundError: If no leaf matches
        """
        target = _coerce_hash(leaf_hash)
        if target is None:
            raise TypeError(f"Leaf hash must be bytes-like, got {type(leaf_hash).__name__}")
        try:
            return self._levels[0].index(target)
        except ValueError:
            raise NotFoundError(target) from None

    def proof_of_inclusion(self, leaf_hash: ByteLike) -> MerkleProof:
        """
        Generate the inclusion proof for a leaf hash.

        Args:
            leaf_hash: Hash of the leaf to prove

        Returns:
            MerkleProof from the leaf up to the root

        Raises:
            NotFoundError: If the hash is not a leaf of this tree
        """
        start = time.perf_counter()
        try:
            index = self.index_of(leaf_hash)
        except NotFoundError as e:
            get_tree_metrics().record_proof_miss()
            logger.debug("Proof requested for missing leaf", leaf_hash=e.target.hex())
            raise

        proof = self._build_proof(index)
        get_tree_metrics().record_proof(time.perf_counter() - start)
        return proof

    def get_proof(self, leaf_index: int) -> MerkleProof:
        """
        Generate inclusion proof for a leaf by position.

        Raises:
            IndexError: If leaf_index out of bounds
        """
        if leaf_index < 0 or leaf_index >= self.leaf_count:
            raise IndexError(f"Leaf index {leaf_index} out of bounds")
        return self._build_proof(leaf_index)

    def get_all_proofs(self) -> list[MerkleProof]:
        """Generate proofs for all leaves."""
        return [self._build_proof(i) for i in range(self.leaf_count)]

    def _build_proof(self, leaf_index: int) -> MerkleProof:
        path = []
        index = leaf_index

        for level in self._levels[:-1]:
            if index % 2 == 1:
                path.append(ProofElement(level[index - 1], ProofDirection.LEFT))
            elif index + 1 < len(level):
                path.append(ProofElement(level[index + 1], ProofDirection.RIGHT))
            else:
                # Last node of an odd-length level pairs with itself
                path.append(ProofElement(level[index], ProofDirection.RIGHT))
            index //= 2

        return MerkleProof(
            leaf_hash=self._levels[0][leaf_index],
            leaf_index=leaf_index,
            path=path,
            root_hash=self.root_hash,
            tree_size=self.leaf_count,
            algorithm=self._algorithm,
        )

    def validate_proof(
        self,
        leaf_hash: ByteLike,
        proof: Iterable[Any],
        expected_root: ByteLike | None = None,
    ) -> bool:
        """
        Validate a proof using this tree's algorithm.

        Checks against this tree's current root unless expected_root
        is given.
        """
        if expected_root is None:
            expected_root = self.root_hash
        return validate_proof(
            leaf_hash, proof, expected_root, algorithm=self._algorithm
        )

    def insert(self, item: ByteLike | str) -> None:
        """
        Append an item and recompute the ancestors of its leaf.

        Only the nodes on the path from the new leaf to the root are
        rehashed. A previously self-paired last leaf becomes a genuine
        pair; otherwise the new leaf starts a new self-paired parent.
        A new root level is added when the old root gains a sibling.

        Args:
            item: Item data (bytes-like, or str encoded as UTF-8)
        """
        leaf = hash_bytes(item, self._algorithm)
        self._levels[0].append(leaf)

        index = len(self._levels[0]) - 1
        depth = 0
        while len(self._levels[depth]) > 1:
            level = self._levels[depth]
            parent_index = index // 2
            left = level[2 * parent_index]
            right = level[2 * parent_index + 1] if 2 * parent_index + 1 < len(level) else left
            parent = compute_parent_hash(left, right, self._algorithm)

            if depth + 1 == len(self._levels):
                self._levels.append([])

            parents = self._levels[depth + 1]
            if parent_index < len(parents):
                parents[parent_index] = parent
            else:
                parents.append(parent)

            index = parent_index
            depth += 1

        get_tree_metrics().record_insert()
        logger.debug(
            "Inserted leaf",
            leaf_index=len(self._levels[0]) - 1,
            leaf_count=len(self._levels[0]),
            height=len(self._levels) - 1,
        )


def validate_proof(
    leaf_hash: ByteLike,
    proof: Iterable[Any],
    expected_root: ByteLike,
    algorithm: str | None = None,
) -> bool:
    """
    Verify a Merkle inclusion proof against a root hash.

    Replays the proof from the leaf hash upward and compares the
    result with the expected root. Never raises: a malformed proof
    (wrong element types, unknown direction, unusable algorithm) is
    reported as invalid.

    Args:
        leaf_hash: Hash of the leaf
        proof: MerkleProof, or ProofElements / ``(hash, side)`` pairs
        expected_root: Root hash to compare against
        algorithm: hashlib algorithm name (defaults to the proof's
            algorithm, then settings)

    Returns:
        True if the proof reconstructs the expected root
    """
    if algorithm is None and isinstance(proof, MerkleProof):
        algorithm = proof.algorithm

    try:
        algorithm = resolve_algorithm(algorithm)
    except UnsupportedAlgorithmError:
        computed = None
    else:
        computed = _replay_path(leaf_hash, proof, algorithm)
    valid = computed is not None and computed == _coerce_hash(expected_root)

    get_tree_metrics().record_verification(valid)
    logger.debug("Validated proof", valid=valid, malformed=computed is None)
    return valid


def compute_root_from_proof(
    leaf_hash: ByteLike,
    proof: Iterable[Any],
    algorithm: str | None = None,
) -> bytes:
    """
    Compute the root hash from a leaf and proof path.

    Raises:
        InvalidProofError: If the leaf hash or a proof element is malformed
    """
    if algorithm is None and isinstance(proof, MerkleProof):
        algorithm = proof.algorithm

    computed = _replay_path(leaf_hash, proof, algorithm)
    if computed is None:
        raise InvalidProofError("Proof path cannot be replayed")
    return computed


def build(items: Iterable[ByteLike | str], algorithm: str | None = None) -> MerkleTree:
    """Build a tree from items. See MerkleTree.build."""
    return MerkleTree.build(items, algorithm)


def root(tree: MerkleTree) -> bytes:
    """Root hash of a tree."""
    return tree.root_hash


def insert(tree: MerkleTree, item: ByteLike | str) -> None:
    """Append an item to a tree in place."""
    tree.insert(item)


def proof_of_inclusion(tree: MerkleTree, leaf_hash: ByteLike) -> MerkleProof:
    """Inclusion proof for a leaf hash of a tree."""
    return tree.proof_of_inclusion(leaf_hash)
