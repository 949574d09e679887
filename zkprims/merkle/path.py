"""Authentication paths, compressed multi-paths and tree index arithmetic."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Sequence

from zkprims.merkle.config import MerkleConfig, MerkleError

__all__ = [
    "Path",
    "MultiPath",
    "select_left_right_child",
    "prefix_encode_path",
    "prefix_decode_path",
    "tree_height",
    "is_root",
    "left_child",
    "right_child",
    "is_left_child",
    "sibling",
    "parent",
    "convert_index_to_last_level",
]


def tree_height(num_leaves: int) -> int:
    """Return the height of a tree with ``num_leaves`` leaves (rounding up)."""
    if num_leaves <= 1:
        return 1
    return (num_leaves - 1).bit_length() + 1


def is_root(index: int) -> bool:
    """Return True iff ``index`` is the root in level order."""
    return index == 0


def left_child(index: int) -> int:
    """Return the level-order index of the left child."""
    return 2 * index + 1


def right_child(index: int) -> int:
    """Return the level-order index of the right child."""
    return 2 * index + 2


def is_left_child(index: int) -> bool:
    """Return True iff ``index`` is a left child."""
    return index % 2 == 1


def sibling(index: int) -> int | None:
    """Return the sibling index, or None for the root."""
    if index == 0:
        return None
    return index + 1 if is_left_child(index) else index - 1


def parent(index: int) -> int | None:
    """Return the parent index, or None for the root."""
    if index > 0:
        return (index - 1) >> 1
    return None


def convert_index_to_last_level(index: int, height: int) -> int:
    """Map a leaf index to its level-order index in a tree of ``height``."""
    return index + (1 << (height - 1)) - 1


def select_left_right_child(index: int, computed: Any, sibling: Any) -> tuple[Any, Any]:
    """Order a computed node and its sibling as (left, right).

    If the lowest bit of ``index`` is 0 the computed node is on the left,
    otherwise it is on the right.
    """
    if index & 1 == 0:
        return computed, sibling
    return sibling, computed


def prefix_encode_path(prev_path: Sequence[Any], path: Sequence[Any]) -> tuple[int, list[Any]]:
    """Encode ``path`` against ``prev_path`` as (shared prefix length, suffix)."""
    prefix_length = 0
    for a, b in zip(prev_path, path):
        if a != b:
            break
        prefix_length += 1
    return prefix_length, list(path[prefix_length:])


def prefix_decode_path(prev_path: Sequence[Any], prefix_len: int, suffix: Sequence[Any]) -> list[Any]:
    """Rebuild a path from the previous path, a prefix length and a suffix."""
    if prefix_len == 0:
        return list(suffix)
    if prefix_len > len(prev_path):
        raise MerkleError(
            f"prefix length {prefix_len} exceeds previous path length {len(prev_path)}"
        )
    return list(prev_path[:prefix_len]) + list(suffix)


@dataclass
class Path:
    """Authentication path for one leaf.

    ``auth_path`` holds the siblings of the on-path inner nodes ordered from
    the top layer to the bottom layer, not including the root.
    """

    leaf_sibling_hash: Any
    auth_path: list[Any] = field(default_factory=list)
    leaf_index: int = 0

    def position_list(self) -> Iterator[bool]:
        """Yield the leaf index bits, big-endian, one per on-path node.

        A bit is False iff the corresponding node, from top to bottom, is a
        left child.
        """
        for i in reversed(range(len(self.auth_path) + 1)):
            yield (self.leaf_index >> i) & 1 != 0

    def verify(self, config: MerkleConfig, root: Any, leaf: Any) -> bool:
        """Return True iff ``leaf`` at ``leaf_index`` hashes up to ``root``."""
        claimed_leaf_hash = config.hash_leaf(leaf)
        left, right = select_left_right_child(
            self.leaf_index, claimed_leaf_hash, self.leaf_sibling_hash
        )
        current = config.hash_leaf_pair(left, right)

        index = self.leaf_index >> 1
        for node in reversed(self.auth_path):
            left, right = select_left_right_child(index, current, node)
            current = config.compress(left, right)
            index >>= 1

        return current == root


@dataclass
class MultiPath:
    """Several authentication paths stored with front incremental encoding.

    Path ``i`` is the first ``auth_paths_prefix_lengths[i]`` nodes of path
    ``i - 1`` followed by ``auth_paths_suffixes[i]``.
    """

    leaf_siblings_hashes: list[Any] = field(default_factory=list)
    auth_paths_prefix_lengths: list[int] = field(default_factory=list)
    auth_paths_suffixes: list[list[Any]] = field(default_factory=list)
    leaf_indexes: list[int] = field(default_factory=list)

    def _path_len(self) -> int:
        if not self.auth_paths_suffixes:
            raise MerkleError("multi-path holds no paths")
        return len(self.auth_paths_suffixes[0])

    def position_list(self) -> Iterator[list[bool]]:
        """Yield, for each leaf index, its big-endian position bits."""
        path_len = self._path_len()
        for leaf_index in self.leaf_indexes:
            yield [(leaf_index >> j) & 1 != 0 for j in reversed(range(path_len + 1))]

    def verify(self, config: MerkleConfig, root: Any, leaves: Iterable[Any]) -> bool:
        """Return True iff every leaf, in order, hashes up to ``root``.

        Nodes already computed for an earlier leaf are reused.
        """
        height = self._path_len() + 2
        leaf_iter = iter(leaves)
        lut: dict[int, Any] = {}
        prev_path: list[Any] = list(self.auth_paths_suffixes[0])

        for i, leaf_index in enumerate(self.leaf_indexes):
            try:
                leaf = next(leaf_iter)
            except StopIteration:
                raise MerkleError("fewer leaves than leaf indexes") from None

            auth_path = prefix_decode_path(
                prev_path, self.auth_paths_prefix_lengths[i], self.auth_paths_suffixes[i]
            )
            prev_path = auth_path

            claimed_leaf_hash = config.hash_leaf(leaf)
            left, right = select_left_right_child(
                leaf_index, claimed_leaf_hash, self.leaf_siblings_hashes[i]
            )

            index = leaf_index >> 1
            index_in_tree = parent(convert_index_to_last_level(leaf_index, height))
            if index_in_tree not in lut:
                lut[index_in_tree] = config.hash_leaf_pair(left, right)
            current = lut[index_in_tree]

            for node in reversed(auth_path):
                left, right = select_left_right_child(index, current, node)
                index >>= 1
                index_in_tree = parent(index_in_tree)
                if index_in_tree is None:
                    raise MerkleError("authentication path is longer than the tree")
                if index_in_tree not in lut:
                    lut[index_in_tree] = config.compress(left, right)
                current = lut[index_in_tree]

            if current != root:
                return False
        return True