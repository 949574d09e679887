import hashlib

import pytest
from hypothesis import given
from hypothesis import strategies as st

from zkprims.merkle.config import (
    MerkleConfig,
    MerkleError,
    bytes_converter,
    identity_converter,
)


def _pair(left, right):
    return ("pair", left, right)


def _compress(left, right):
    return ("compress", left, right)


def test_identity_converter_returns_same_object():
    value = object()
    assert identity_converter(value) is value


@given(st.binary())
def test_bytes_converter_keeps_bytes(data):
    assert bytes_converter(data) == data
    assert bytes_converter(bytearray(data)) == data


@given(st.integers(min_value=0, max_value=2**300))
def test_bytes_converter_int_round_trip(n):
    out = bytes_converter(n)
    assert int.from_bytes(out, "little") == n
    assert len(out) >= 1


def test_bytes_converter_uses_dunder_bytes():
    class Digest:
        def __bytes__(self):
            return b"xyz"

    assert bytes_converter(Digest()) == b"xyz"


def test_bytes_converter_rejects_negative():
    with pytest.raises(MerkleError):
        bytes_converter(-1)


def test_bytes_converter_rejects_unknown_type():
    with pytest.raises(MerkleError):
        bytes_converter(object())


def test_hash_leaf_uses_leaf_hash():
    config = MerkleConfig(leaf_hash=lambda leaf: hashlib.sha256(leaf).digest(), two_to_one_hash=_pair)
    assert config.hash_leaf(b"abc") == hashlib.sha256(b"abc").digest()


def test_hash_leaf_pair_applies_converter():
    config = MerkleConfig(leaf_hash=len, two_to_one_hash=_pair, leaf_converter=bytes_converter)
    assert config.hash_leaf_pair(1, 2) == ("pair", b"\x01", b"\x02")


def test_hash_leaf_pair_identity_by_default():
    config = MerkleConfig(leaf_hash=len, two_to_one_hash=_pair)
    assert config.hash_leaf_pair("a", "b") == ("pair", "a", "b")


def test_compress_defaults_to_two_to_one():
    config = MerkleConfig(leaf_hash=len, two_to_one_hash=_pair)
    assert config.compress("a", "b") == ("pair", "a", "b")


def test_compress_uses_custom_hash_without_conversion():
    config = MerkleConfig(
        leaf_hash=len,
        two_to_one_hash=_pair,
        compress_hash=_compress,
        leaf_converter=bytes_converter,
    )
    assert config.compress(3, 4) == ("compress", 3, 4)


def test_converter_error_propagates():
    config = MerkleConfig(leaf_hash=len, two_to_one_hash=_pair, leaf_converter=bytes_converter)
    with pytest.raises(MerkleError):
        config.hash_leaf_pair(object(), b"a")