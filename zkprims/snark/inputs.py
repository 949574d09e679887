"""Moving public inputs between prime fields as bit strings.

A proof over a field ``F`` (the *source* field) may have to be checked
inside a circuit over another field ``CF`` (the *target* field).  The helpers
here pack the bits of ``F`` elements into ``CF`` elements and unpack them
again.  Every field is given by its prime modulus.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

__all__ = [
    "BooleanInput",
    "packing_capacity",
    "repack_input",
    "emulated_from_field_elements",
]


def _bit_size(modulus: int) -> int:
    if modulus < 2:
        raise ValueError(f"a field modulus must be at least 2, got {modulus}")
    return modulus.bit_length()


def _check_element(value: int, modulus: int) -> int:
    if not 0 <= value < modulus:
        raise ValueError(f"element {value} is not reduced modulo {modulus}")
    return value


def _bits_le(value: int, size: int) -> list[bool]:
    return [(value >> i) & 1 == 1 for i in range(size)]


def _from_bits_be(bits: Sequence[bool]) -> int:
    value = 0
    for bit in bits:
        value = (value << 1) | int(bit)
    return value


def _chunks(items: Sequence[bool], size: int) -> Iterator[list[bool]]:
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def packing_capacity(source_modulus: int, target_modulus: int) -> int:
    """Return how many source-field bits fit in one target-field element.

    When both moduli have the same bit size and the target modulus is not
    smaller, a whole element fits; otherwise one bit less than the target's
    bit size is used.
    """
    source_bits = _bit_size(source_modulus)
    target_bits = _bit_size(target_modulus)
    if target_bits == source_bits and target_modulus >= source_modulus:
        return target_bits
    return target_bits - 1


def _big_endian_source_bits(values: Iterable[int], source_modulus: int) -> list[bool]:
    size = _bit_size(source_modulus)
    bits: list[bool] = []
    for value in values:
        bits.extend(reversed(_bits_le(_check_element(value, source_modulus), size)))
    return bits


def repack_input(values: Iterable[int], source_modulus: int, target_modulus: int) -> list[int]:
    """Pack source-field elements into as few target-field elements as possible.

    The elements are written big-endian, each padded to the source bit size,
    concatenated and cut into chunks of ``packing_capacity`` bits; every
    chunk is read big-endian as one target-field element.
    """
    bits = _big_endian_source_bits(values, source_modulus)
    capacity = packing_capacity(source_modulus, target_modulus)
    packed: list[int] = []
    for chunk in _chunks(bits, capacity):
        element = _from_bits_be(chunk)
        if element >= target_modulus:
            raise ValueError(f"packed value {element} does not fit modulo {target_modulus}")
        packed.append(element)
    return packed


@dataclass
class BooleanInput:
    """Source-field elements held as lists of little-endian bits."""

    val: list[list[bool]] = field(default_factory=list)

    def __iter__(self) -> Iterator[list[bool]]:
        return iter(self.val)

    def __len__(self) -> int:
        return len(self.val)

    @classmethod
    def from_values(cls, values: Iterable[int], source_modulus: int) -> "BooleanInput":
        """Split each source-field element into its little-endian bits.

        Every element yields exactly as many bits as the modulus has.
        """
        size = _bit_size(source_modulus)
        return cls([_bits_le(_check_element(v, source_modulus), size) for v in values])

    @classmethod
    def from_field_elements(
        cls, elements: Iterable[int], source_modulus: int, target_modulus: int
    ) -> "BooleanInput":
        """Regroup the bits of target-field elements into source-field chunks.

        Each target element contributes all of its bits, big-endian; the
        stream is cut into chunks of ``packing_capacity(target, source)``
        bits and every chunk is stored little-endian.
        """
        target_bits = _bit_size(target_modulus)
        stream: list[bool] = []
        for element in elements:
            stream.extend(reversed(_bits_le(_check_element(element, target_modulus), target_bits)))
        capacity = packing_capacity(target_modulus, source_modulus)
        return cls([list(reversed(chunk)) for chunk in _chunks(stream, capacity)])


def emulated_from_field_elements(
    elements: Iterable[int], source_modulus: int, target_modulus: int
) -> list[int]:
    """Rebuild source-field constants from target-field elements.

    The elements are regrouped with ``BooleanInput.from_field_elements``;
    each group is padded with False up to the source bit size and then read
    with its first bit as the most significant one, reduced modulo the
    source modulus.
    """
    size = _bit_size(source_modulus)
    grouped = BooleanInput.from_field_elements(elements, source_modulus, target_modulus)
    values: list[int] = []
    for bits in grouped:
        padded = (list(bits) + [False] * size)[:size]
        values.append(_from_bits_be(padded) % source_modulus)
    return values