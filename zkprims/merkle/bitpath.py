"""Merkle path expressed as explicit branching bits."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from zkprims.merkle.config import MerkleConfig, MerkleError
from zkprims.merkle.path import Path

__all__ = ["PathBits"]


@dataclass
class PathBits:
    """A Merkle path whose position is carried as a list of booleans.

    ``path[i]`` is False iff the i-th inner on-path node, counted from the
    top, is a left child.  ``auth_path[i]`` is that node's sibling.
    """

    path: list[bool] = field(default_factory=list)
    auth_path: list[Any] = field(default_factory=list)
    leaf_sibling: Any = None
    leaf_is_right_child: bool = False

    @classmethod
    def from_path(cls, path: Path) -> "PathBits":
        """Build the bit form of an authentication path."""
        positions = list(path.position_list())
        return cls(
            path=positions[:-1],
            auth_path=list(path.auth_path),
            leaf_sibling=path.leaf_sibling_hash,
            leaf_is_right_child=path.leaf_index & 1 == 1,
        )

    def set_leaf_position(self, leaf_index: Sequence[bool]) -> None:
        """Set the position from little-endian leaf index bits.

        Missing high bits are taken as zero and surplus high bits are dropped.
        """
        bits = list(leaf_index)
        if not bits:
            raise MerkleError("leaf index needs at least one bit")
        depth = len(self.auth_path)
        rest = bits[1:depth + 1]
        rest.extend([False] * (depth - len(rest)))
        rest.reverse()
        self.path = rest
        self.leaf_is_right_child = bits[0]

    def get_leaf_position(self) -> list[bool]:
        """Return the leaf index bits, little-endian."""
        return [self.leaf_is_right_child, *reversed(self.path)]

    def calculate_root(self, config: MerkleConfig, leaf: Any) -> Any:
        """Return the root reached by hashing ``leaf`` along this path."""
        claimed = config.hash_leaf(leaf)
        if self.leaf_is_right_child:
            current = config.hash_leaf_pair(self.leaf_sibling, claimed)
        else:
            current = config.hash_leaf_pair(claimed, self.leaf_sibling)

        for bit, neighbour in zip(reversed(self.path), reversed(self.auth_path)):
            if bit:
                current = config.compress(neighbour, current)
            else:
                current = config.compress(current, neighbour)
        return current

    def verify_membership(self, config: MerkleConfig, root: Any, leaf: Any) -> bool:
        """Return True iff ``leaf`` on this path hashes up to ``root``."""
        return self.calculate_root(config, leaf) == root

    def update_leaf(self, config: MerkleConfig, old_root: Any, old_leaf: Any, new_leaf: Any) -> Any:
        """Check ``old_leaf`` against ``old_root`` and return the root with ``new_leaf``."""
        if not self.verify_membership(config, old_root, old_leaf):
            raise MerkleError("old leaf is not a member of the tree with the old root")
        return self.calculate_root(config, new_leaf)

    def update_and_check(
        self,
        config: MerkleConfig,
        old_root: Any,
        new_root: Any,
        old_leaf: Any,
        new_leaf: Any,
    ) -> bool:
        """Return True iff replacing ``old_leaf`` by ``new_leaf`` yields ``new_root``."""
        return self.update_leaf(config, old_root, old_leaf, new_leaf) == new_root