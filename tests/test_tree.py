import hashlib
import random

import pytest

from zkprims.merkle.config import MerkleConfig, MerkleError, bytes_converter
from zkprims.merkle.tree import MerkleTree

MODULUS = 2**255 - 19


def _bytes_config():
    return MerkleConfig(
        leaf_hash=lambda leaf: hashlib.sha256(b"\x00" + bytes(leaf)).digest(),
        two_to_one_hash=lambda a, b: hashlib.sha256(b"\x01" + a + b).digest(),
        leaf_converter=bytes_converter,
    )


def _field_hash(tag, values):
    data = tag + b"".join(v.to_bytes(32, "little") for v in values)
    return int.from_bytes(hashlib.sha256(data).digest(), "little") % MODULUS


def _field_config():
    return MerkleConfig(
        leaf_hash=lambda leaf: _field_hash(b"leaf", leaf),
        two_to_one_hash=lambda a, b: _field_hash(b"node", (a, b)),
        empty_leaf_digest=0,
    )


def _bytes_tree_test(leaves, updates):
    config = _bytes_config()
    leaves = list(leaves)
    tree = MerkleTree.from_leaves(config, leaves)
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)

    multi = tree.generate_multi_proof(range(len(leaves)))
    assert multi.verify(config, root, leaves)

    for i, value in updates:
        tree.update(i, value)
        leaves[i] = value
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)
    multi = tree.generate_multi_proof(range(len(leaves)))
    assert multi.verify(config, root, leaves)
    assert MerkleTree.from_leaves(config, leaves).root() == root


def test_bytes_good_root():
    rng = random.Random(1)
    _bytes_tree_test(
        [rng.randbytes(32) for _ in range(2)],
        [(0, rng.randbytes(32)), (1, rng.randbytes(32))],
    )
    _bytes_tree_test([rng.randbytes(32) for _ in range(4)], [(3, rng.randbytes(32))])
    _bytes_tree_test(
        [rng.randbytes(32) for _ in range(128)],
        [(i, rng.randbytes(32)) for i in (2, 3, 5, 111, 127)],
    )


def test_multi_proof_dissection():
    rng = random.Random(2)
    leaves = [rng.randbytes(32) for _ in range(8)]
    tree = MerkleTree.from_leaves(_bytes_config(), leaves)
    proofs = [tree.generate_proof(i) for i in range(8)]
    multi = tree.generate_multi_proof(range(8))
    assert multi.auth_paths_prefix_lengths == [0, 2, 1, 2, 0, 2, 1, 2]
    for prefix_len, suffix in zip(multi.auth_paths_prefix_lengths, multi.auth_paths_suffixes):
        assert prefix_len + len(suffix) == len(proofs[0].auth_path)


def test_field_good_root_and_wrong_root():
    rng = random.Random(3)
    config = _field_config()

    def rand_leaf():
        return tuple(rng.randrange(MODULUS) for _ in range(3))

    leaves = [rand_leaf() for _ in range(128)]
    tree = MerkleTree.from_leaves(config, leaves)
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)
    assert tree.generate_multi_proof(range(128)).verify(config, root, leaves)

    wrong_root = root + 1
    assert not tree.generate_proof(0).verify(config, wrong_root, leaves[0])
    assert not tree.generate_multi_proof(range(128)).verify(config, wrong_root, leaves)

    for i in (2, 3, 5, 111, 127):
        leaves[i] = rand_leaf()
        tree.update(i, leaves[i])
    root = tree.root()
    for i, leaf in enumerate(leaves):
        assert tree.generate_proof(i).verify(config, root, leaf)
    assert tree.generate_multi_proof(range(128)).verify(config, root, leaves)


def test_height_and_proof_shape():
    tree = MerkleTree.from_leaves(_bytes_config(), [bytes([i]) for i in range(8)])
    assert tree.height() == 4
    assert len(tree) == 8
    proof = tree.generate_proof(5)
    assert proof.leaf_index == 5
    assert len(proof.auth_path) == 2
    assert proof.leaf_sibling_hash == tree.get_leaf_sibling_hash(5)


def test_leaf_sibling_hash():
    config = _bytes_config()
    leaves = [bytes([i]) for i in range(4)]
    tree = MerkleTree.from_leaves(config, leaves)
    assert tree.get_leaf_sibling_hash(0) == config.hash_leaf(leaves[1])
    assert tree.get_leaf_sibling_hash(3) == config.hash_leaf(leaves[2])


def test_two_leaf_root():
    config = _bytes_config()
    tree = MerkleTree.from_leaves(config, [b"a", b"b"])
    expected = config.hash_leaf_pair(config.hash_leaf(b"a"), config.hash_leaf(b"b"))
    assert tree.root() == expected
    assert tree.generate_proof(1).auth_path == []


def test_blank_tree():
    config = _bytes_config()
    blank = MerkleTree.blank(config, 3)
    assert len(blank) == 4
    assert blank.root() == MerkleTree(config, [b""] * 4).root()


@pytest.mark.parametrize("count", [0, 1, 3, 6])
def test_rejects_bad_leaf_count(count):
    with pytest.raises(MerkleError):
        MerkleTree(_bytes_config(), [b""] * count)


def test_update_out_of_range():
    tree = MerkleTree.from_leaves(_bytes_config(), [b"a", b"b"])
    with pytest.raises(IndexError):
        tree.update(2, b"c")
    with pytest.raises(IndexError):
        tree.generate_proof(-1)


def test_old_proof_fails_after_update():
    config = _bytes_config()
    leaves = [bytes([i]) for i in range(4)]
    tree = MerkleTree.from_leaves(config, leaves)
    proof = tree.generate_proof(0)
    tree.update(2, b"changed")
    assert not proof.verify(config, tree.root(), leaves[0])


def test_check_update():
    config = _bytes_config()
    leaves = [bytes([i]) for i in range(8)]
    tree = MerkleTree.from_leaves(config, leaves)
    old_root = tree.root()

    assert tree.check_update(6, b"new", old_root) is False
    assert tree.root() == old_root

    expected = MerkleTree.from_leaves(config, leaves[:6] + [b"new"] + leaves[7:]).root()
    assert tree.check_update(6, b"new", expected) is True
    assert tree.root() == expected