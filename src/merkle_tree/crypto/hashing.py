"""
Merkle Tree - Hashing Primitives

Leaf and parent hashing for the tree. Parents are hashed over the plain
concatenation ``left || right`` of their children, with no domain
separation prefix and no reordering of the children.

The algorithm is resolved from settings when a caller does not name one.
"""

import hashlib

from merkle_tree.core.config import normalize_algorithm, settings
from merkle_tree.core.exceptions import InvalidHashError

ByteLike = bytes | bytearray | memoryview


def resolve_algorithm(algorithm: str | None = None) -> str:
    """
    Return the algorithm name to use, falling back to settings.

    Raises:
        UnsupportedAlgorithmError: If the algorithm is unknown or
            variable-length
    """
    if algorithm is None:
        return settings.HASH_ALGORITHM
    return normalize_algorithm(algorithm)


def digest_size(algorithm: str | None = None) -> int:
    """Digest length in bytes for an algorithm."""
    return hashlib.new(resolve_algorithm(algorithm)).digest_size


def to_bytes(item: ByteLike | str) -> bytes:
    """
    Normalize an input item to bytes.

    Strings are UTF-8 encoded; bytes, bytearray and memoryview are copied.

    Raises:
        TypeError: If the item is not byte-like
    """
    if isinstance(item, str):
        return item.encode("utf-8")
    if isinstance(item, (bytes, bytearray, memoryview)):
        return bytes(item)
    raise TypeError(f"Expected bytes-like or str item, got {type(item).__name__}")


def hash_bytes(data: ByteLike | str, algorithm: str | None = None) -> bytes:
    """
    Hash an arbitrary byte sequence.

    This is the leaf hashing scheme used by the tree, exposed so callers
    can compute leaf hashes identically.

    Args:
        data: Bytes to hash (strings are UTF-8 encoded)
        algorithm: hashlib algorithm name (defaults to settings)

    Returns:
        Raw digest bytes
    """
    hasher = hashlib.new(resolve_algorithm(algorithm))
    hasher.update(to_bytes(data))
    return hasher.digest()


def compute_parent_hash(
    left_hash: bytes,
    right_hash: bytes,
    algorithm: str | None = None,
) -> bytes:
    """
    Compute the hash of an internal node.

    Args:
        left_hash: Hash of left child
        right_hash: Hash of right child
        algorithm: hashlib algorithm name (defaults to settings)

    Returns:
        Digest of ``left_hash || right_hash``
    """
    hasher = hashlib.new(resolve_algorithm(algorithm))
    hasher.update(left_hash)
    hasher.update(right_hash)
    return hasher.digest()


def hash_from_hex(value: str, algorithm: str | None = None) -> bytes:
    """
    Decode a hex-encoded hash and check its length.

    Raises:
        InvalidHashError: If the value is not hex or has the wrong size
    """
    try:
        decoded = bytes.fromhex(value)
    except ValueError as e:
        raise InvalidHashError(f"Hash is not valid hex: {value!r}") from e

    check_hash(decoded, algorithm)
    return decoded


def check_hash(value: bytes, algorithm: str | None = None) -> bytes:
    """
    Check a raw hash has the digest size of the algorithm.

    Raises:
        InvalidHashError: If the length does not match
    """
    expected = digest_size(algorithm)
    if len(value) != expected:
        raise InvalidHashError(
            f"Expected a {expected}-byte hash, got {len(value)} bytes"
        )
    return value
