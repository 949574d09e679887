# zkprims

Building blocks for proof-system tooling, in plain Python with no
dependencies outside the standard library:

- **Merkle trees** (`zkprims.merkle.config`, `zkprims.merkle.path`,
  `zkprims.merkle.tree`): a fixed-height binary tree over hash functions you
  supply. It builds authentication paths and prefix-compressed multi-proofs,
  and it updates leaves and checks updates.
- **Position-bit paths** (`zkprims.merkle.bitpath`): a path whose position
  is held as explicit branching bits.
- **BLAKE2s** (`zkprims.prf.blake2s`, `zkprims.prf.blake2s_bits`): a BLAKE2s
  PRF, salted and personalised BLAKE2s, and BLAKE2s computed word by word
  over a bit string.
- **Input packing** (`zkprims.snark.inputs`): moves field elements from one
  prime field to another by packing and unpacking their bits.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Merkle trees

A `MerkleConfig` holds:

- `leaf_hash`, which maps a leaf to a leaf digest;
- `two_to_one_hash`, which hashes two converted leaf digests;
- an optional `compress_hash` for two inner digests (by default
  `two_to_one_hash` is used);
- `leaf_converter`, which is `identity_converter` or `bytes_converter`;
- `empty_leaf_digest`, which is used by `MerkleTree.blank`.

```python
import hashlib
from zkprims.merkle.config import MerkleConfig, bytes_converter
from zkprims.merkle.tree import MerkleTree

config = MerkleConfig(
    leaf_hash=lambda leaf: hashlib.sha256(bytes(leaf)).digest(),
    two_to_one_hash=lambda left, right: hashlib.sha256(left + right).digest(),
    leaf_converter=bytes_converter,
)

leaves = [bytes([i]) * 30 for i in range(4)]
tree = MerkleTree.from_leaves(config, leaves)

proof = tree.generate_proof(2)
assert proof.verify(config, tree.root(), leaves[2])

multi = tree.generate_multi_proof(range(4))
assert multi.verify(config, tree.root(), leaves)

tree.update(3, b"\x07" * 30)
```

Points to keep in mind:

- The number of leaves must be a power of two greater than one. Otherwise
  `MerkleError` is raised.
- A leaf index outside the tree raises `IndexError`.
- `MerkleTree(config, leaf_digests)` builds a tree directly from digests.
- `MerkleTree.blank(config, height)` builds a tree whose leaves all have
  the empty digest.
- `check_update(index, new_leaf, asserted_new_root)` changes the tree only
  when the new root matches, and returns whether it did.

`generate_multi_proof` sorts the indexes and drops duplicates. It returns a
`MultiPath` in which each path is stored as a prefix length plus a suffix
(`auth_paths_prefix_lengths`, `auth_paths_suffixes`). Pass the leaves to
`MultiPath.verify` in the order of `multi.leaf_indexes`. Verification reuses
inner nodes it has already computed.

The index helpers are available from `zkprims.merkle.path`: `tree_height`,
`parent`, `sibling`, `left_child`, `right_child`, `is_left_child`, `is_root`
and `convert_index_to_last_level`. So are the path coders
`prefix_encode_path` and `prefix_decode_path`.

### Position bits

`PathBits.from_path(proof)` turns a `Path` into position bits.

- `set_leaf_position` sets the position from little-endian index bits.
  Missing high bits count as zero and surplus high bits are dropped.
- `get_leaf_position` returns the position as little-endian bits.
- `calculate_root` and `verify_membership` hash a leaf along the path.
- `update_leaf` raises `MerkleError` when the old leaf is not under the old
  root. Otherwise it returns the new root.
- `update_and_check` compares the new root with the one you expect.

## BLAKE2s

```python
from zkprims.prf.blake2s import Blake2sPRF, Blake2sWithParameterBlock
from zkprims.prf.blake2s_bits import blake2s_prf

seed = bytes(32)
data = bytes(range(32))
assert Blake2sPRF().evaluate(seed, data) == blake2s_prf(seed, data)

digest = Blake2sWithParameterBlock(salt=b"saltsalt", personalization=b"personal").evaluate(b"abc")
```

`Blake2sPRF.evaluate` takes a 32-byte seed and 32 bytes of input. Other
sizes raise `ValueError`.

`Blake2sWithParameterBlock` always gives an unkeyed 32-byte digest. Its salt
and its personalisation must be 8 bytes each.

The bitwise version works on lists of booleans, least significant bit of
each byte first:

- `evaluate_blake2s` takes a list whose length is a multiple of eight and
  returns eight 32-bit words.
- `evaluate_blake2s_with_parameters` does the same with your own 8-word
  parameter block.
- `words_to_bytes` turns the words into the digest.
- `mixing_g` and `blake2s_compression` are the underlying steps.

## Input packing

Fields are given by their prime modulus, and elements are plain integers
reduced modulo it.

- `packing_capacity(source_modulus, target_modulus)` returns how many source
  bits fit into one target element.
- `repack_input` packs a vector of source elements into as few target
  elements as that allows.
- `BooleanInput.from_values` splits source elements into little-endian bits.
- `BooleanInput.from_field_elements` regroups the bits of target elements
  into source-sized chunks.
- `emulated_from_field_elements` rebuilds source-field integers from those
  chunks.

Elements that are not reduced raise `ValueError`.

## What this package does not do

- It builds no constraint systems. `PathBits` and the bitwise BLAKE2s compute
  plain values and do not count or check constraints.
- It provides no concrete leaf or two-to-one hash for Merkle trees. You pass
  them in through `MerkleConfig`.
- It has no command-line tool and stores nothing on disk.

## Tests

```
pytest
```