"""A fixed-height Merkle tree over a power-of-two number of leaves."""

from __future__ import annotations

from typing import Any, Iterable

from zkprims.merkle.config import MerkleConfig, MerkleError
from zkprims.merkle.path import (
    MultiPath,
    Path,
    convert_index_to_last_level,
    is_left_child,
    is_root,
    left_child,
    parent,
    prefix_encode_path,
    right_child,
    select_left_right_child,
    sibling,
    tree_height,
)

__all__ = ["MerkleTree"]


class MerkleTree:
    """Merkle tree storing leaf digests and inner nodes in level order.

    The tree does not store the leaves themselves, only their digests.  The
    number of leaves must be a power of two greater than one.
    """

    def __init__(self, config: MerkleConfig, leaf_digests: Iterable[Any]) -> None:
        digests = list(leaf_digests)
        count = len(digests)
        if count < 2 or count & (count - 1):
            raise MerkleError("the number of leaves must be a power of two greater than one")

        self._config = config
        self._leaf_nodes = digests
        self._height = tree_height(count)

        first_leaf = count - 1
        nodes: list[Any] = [None] * (count - 1)
        for i in reversed(range(count - 1)):
            left, right = left_child(i), right_child(i)
            if left >= first_leaf:
                nodes[i] = config.hash_leaf_pair(
                    digests[left - first_leaf], digests[right - first_leaf]
                )
            else:
                nodes[i] = config.compress(nodes[left], nodes[right])
        self._non_leaf_nodes = nodes

    @classmethod
    def blank(cls, config: MerkleConfig, height: int) -> "MerkleTree":
        """Build a tree of ``height`` whose leaf digests are all the empty digest."""
        if height < 2:
            raise MerkleError("a blank tree needs a height of at least two")
        return cls(config, [config.empty_leaf_digest] * (1 << (height - 1)))

    @classmethod
    def from_leaves(cls, config: MerkleConfig, leaves: Iterable[Any]) -> "MerkleTree":
        """Hash every leaf and build the tree over the digests."""
        return cls(config, [config.hash_leaf(leaf) for leaf in leaves])

    @property
    def config(self) -> MerkleConfig:
        """The hash configuration of this tree."""
        return self._config

    def __len__(self) -> int:
        return len(self._leaf_nodes)

    def root(self) -> Any:
        """Return the root digest."""
        return self._non_leaf_nodes[0]

    def height(self) -> int:
        """Return the height of the tree, counting the leaf layer."""
        return self._height

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._leaf_nodes):
            raise IndexError(f"leaf index {index} out of range")

    def get_leaf_sibling_hash(self, index: int) -> Any:
        """Return the digest of the sibling of the leaf at ``index``."""
        self._check_index(index)
        if index & 1 == 0:
            return self._leaf_nodes[index + 1]
        return self._leaf_nodes[index - 1]

    def _compute_auth_path(self, index: int) -> list[Any]:
        path: list[Any] = []
        current = parent(convert_index_to_last_level(index, self._height))
        while not is_root(current):
            path.append(self._non_leaf_nodes[sibling(current)])
            current = parent(current)
        path.reverse()
        return path

    def generate_proof(self, index: int) -> Path:
        """Return the authentication path of the leaf at ``index``."""
        self._check_index(index)
        return Path(
            leaf_sibling_hash=self.get_leaf_sibling_hash(index),
            auth_path=self._compute_auth_path(index),
            leaf_index=index,
        )

    def generate_multi_proof(self, indexes: Iterable[int]) -> MultiPath:
        """Return prefix-encoded paths for the given leaves.

        The indexes are deduplicated and sorted; leaves passed to
        ``MultiPath.verify`` must follow ``leaf_indexes`` in order.
        """
        ordered = sorted(set(indexes))
        for index in ordered:
            self._check_index(index)

        multi = MultiPath()
        prev_path: list[Any] = []
        for index in ordered:
            multi.leaf_siblings_hashes.append(self.get_leaf_sibling_hash(index))
            path = self._compute_auth_path(index)
            prefix_len, suffix = prefix_encode_path(prev_path, path)
            multi.auth_paths_prefix_lengths.append(prefix_len)
            multi.auth_paths_suffixes.append(suffix)
            prev_path = path
        multi.leaf_indexes = ordered
        return multi

    def _updated_path(self, index: int, new_leaf: Any) -> tuple[Any, list[Any]]:
        """Return the new leaf digest and the recomputed path from root to bottom."""
        new_leaf_hash = self._config.hash_leaf(new_leaf)
        left, right = select_left_right_child(
            index, new_leaf_hash, self.get_leaf_sibling_hash(index)
        )
        bottom_to_top = [self._config.hash_leaf_pair(left, right)]

        current = parent(convert_index_to_last_level(index, self._height))
        while not is_root(current):
            neighbour = self._non_leaf_nodes[sibling(current)]
            if is_left_child(current):
                node = self._config.compress(bottom_to_top[-1], neighbour)
            else:
                node = self._config.compress(neighbour, bottom_to_top[-1])
            bottom_to_top.append(node)
            current = parent(current)

        bottom_to_top.reverse()
        return new_leaf_hash, bottom_to_top

    def _apply(self, index: int, leaf_hash: Any, top_to_bottom: list[Any]) -> None:
        self._leaf_nodes[index] = leaf_hash
        current = convert_index_to_last_level(index, self._height)
        for node in reversed(top_to_bottom):
            current = parent(current)
            self._non_leaf_nodes[current] = node

    def update(self, index: int, new_leaf: Any) -> None:
        """Replace the leaf at ``index`` and recompute the nodes above it."""
        self._check_index(index)
        leaf_hash, path = self._updated_path(index, new_leaf)
        self._apply(index, leaf_hash, path)

    def check_update(self, index: int, new_leaf: Any, asserted_new_root: Any) -> bool:
        """Update the leaf only if the resulting root equals ``asserted_new_root``.

        Returns False and leaves the tree untouched when the roots differ.
        """
        self._check_index(index)
        leaf_hash, path = self._updated_path(index, new_leaf)
        if path[0] != asserted_new_root:
            return False
        self._apply(index, leaf_hash, path)
        return True