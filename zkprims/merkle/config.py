"""Hash configuration shared by Merkle trees, paths and multi-paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

__all__ = [
    "MerkleError",
    "MerkleConfig",
    "identity_converter",
    "bytes_converter",
]


class MerkleError(Exception):
    """Raised when a Merkle tree operation cannot be carried out."""


def identity_converter(digest: Any) -> Any:
    """Use a leaf digest as it is as input to the two-to-one hash.

    Mutable byte buffers are frozen into ``bytes`` so that the converted
    value cannot change after the fact; every other value is returned as is.
    """
    if isinstance(digest, (bytearray, memoryview)):
        return bytes(digest)
    return digest


def bytes_converter(digest: Any) -> bytes:
    """Serialise a leaf digest to bytes for use as two-to-one hash input.

    Bytes-like values are taken as they are, non-negative integers are
    written little-endian, and any object defining ``__bytes__`` is
    converted with ``bytes()``.
    """
    if isinstance(digest, (bytes, bytearray, memoryview)):
        return bytes(digest)
    if isinstance(digest, int):
        if digest < 0:
            raise MerkleError("cannot serialise a negative integer digest")
        length = max(1, (digest.bit_length() + 7) // 8)
        return digest.to_bytes(length, "little")
    if hasattr(type(digest), "__bytes__"):
        return bytes(digest)
    raise MerkleError(f"cannot serialise digest of type {type(digest).__name__}")


@dataclass(frozen=True)
class MerkleConfig:
    """The two hashes of a Merkle tree and the conversion between its layers.

    ``leaf_hash`` maps a leaf to a leaf digest.  ``two_to_one_hash`` maps two
    converted leaf digests to an inner digest, and ``compress_hash`` maps two
    inner digests to an inner digest (it defaults to ``two_to_one_hash``).
    ``leaf_converter`` turns a leaf digest into two-to-one hash input, and
    ``empty_leaf_digest`` is the digest used for the leaves of a blank tree.
    """

    leaf_hash: Callable[[Any], Any]
    two_to_one_hash: Callable[[Any, Any], Any]
    compress_hash: Callable[[Any, Any], Any] | None = None
    leaf_converter: Callable[[Any], Any] = identity_converter
    empty_leaf_digest: Any = b""

    def hash_leaf(self, leaf: Any) -> Any:
        """Return the digest of a leaf."""
        return self.leaf_hash(leaf)

    def hash_leaf_pair(self, left: Any, right: Any) -> Any:
        """Hash two sibling leaf digests into their parent inner digest."""
        return self.two_to_one_hash(self.leaf_converter(left), self.leaf_converter(right))

    def compress(self, left: Any, right: Any) -> Any:
        """Hash two sibling inner digests into their parent inner digest."""
        hasher = self.compress_hash if self.compress_hash is not None else self.two_to_one_hash
        return hasher(left, right)