"""BLAKE2s over a little-endian bit string, computed word by word."""

from __future__ import annotations

from typing import Iterable, Sequence

__all__ = [
    "mixing_g",
    "blake2s_compression",
    "evaluate_blake2s",
    "evaluate_blake2s_with_parameters",
    "words_to_bytes",
    "blake2s_prf",
]

_MASK = 0xFFFFFFFF

R1 = 16
R2 = 12
R3 = 8
R4 = 7

IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

SIGMA = (
    (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15),
    (14, 10, 4, 8, 9, 15, 13, 6, 1, 12, 0, 2, 11, 7, 5, 3),
    (11, 8, 12, 0, 5, 2, 15, 13, 10, 14, 3, 6, 7, 1, 9, 4),
    (7, 9, 3, 1, 13, 12, 11, 14, 2, 6, 5, 10, 4, 0, 15, 8),
    (9, 0, 5, 7, 2, 4, 10, 15, 14, 1, 11, 12, 6, 8, 3, 13),
    (2, 12, 6, 10, 0, 11, 8, 3, 4, 13, 7, 5, 15, 14, 1, 9),
    (12, 5, 1, 15, 14, 13, 4, 10, 0, 7, 6, 3, 9, 2, 8, 11),
    (13, 11, 7, 14, 12, 1, 3, 9, 5, 0, 15, 4, 8, 6, 2, 10),
    (6, 15, 14, 9, 11, 3, 0, 8, 12, 2, 13, 7, 1, 4, 10, 5),
    (10, 2, 8, 4, 7, 6, 1, 5, 15, 11, 9, 14, 3, 12, 13, 0),
)

BLOCK_BITS = 512
WORD_BITS = 32
DEFAULT_PARAMETERS = (0x01010000 ^ 32, 0, 0, 0, 0, 0, 0, 0)


def _rotr(word: int, amount: int) -> int:
    return ((word >> amount) | (word << (WORD_BITS - amount))) & _MASK


def mixing_g(v: Sequence[int], a: int, b: int, c: int, d: int, x: int, y: int) -> list[int]:
    """Apply the G mixing function to words a, b, c, d; return the new vector."""
    w = list(v)
    w[a] = (w[a] + w[b] + x) & _MASK
    w[d] = _rotr(w[d] ^ w[a], R1)
    w[c] = (w[c] + w[d]) & _MASK
    w[b] = _rotr(w[b] ^ w[c], R2)
    w[a] = (w[a] + w[b] + y) & _MASK
    w[d] = _rotr(w[d] ^ w[a], R3)
    w[c] = (w[c] + w[d]) & _MASK
    w[b] = _rotr(w[b] ^ w[c], R4)
    return w


def blake2s_compression(h: Sequence[int], m: Sequence[int], t: int, final: bool) -> list[int]:
    """Compress one 16-word block ``m`` into the 8-word state ``h``.

    ``t`` is the byte offset counter and ``final`` marks the last block.
    Returns the new state.
    """
    if len(h) != 8:
        raise ValueError(f"state must hold 8 words, got {len(h)}")
    if len(m) != 16:
        raise ValueError(f"block must hold 16 words, got {len(m)}")

    v = [*h, *IV]
    v[12] ^= t & _MASK
    v[13] ^= (t >> 32) & _MASK
    if final:
        v[14] ^= _MASK

    for s in SIGMA:
        v = mixing_g(v, 0, 4, 8, 12, m[s[0]], m[s[1]])
        v = mixing_g(v, 1, 5, 9, 13, m[s[2]], m[s[3]])
        v = mixing_g(v, 2, 6, 10, 14, m[s[4]], m[s[5]])
        v = mixing_g(v, 3, 7, 11, 15, m[s[6]], m[s[7]])
        v = mixing_g(v, 0, 5, 10, 15, m[s[8]], m[s[9]])
        v = mixing_g(v, 1, 6, 11, 12, m[s[10]], m[s[11]])
        v = mixing_g(v, 2, 7, 8, 13, m[s[12]], m[s[13]])
        v = mixing_g(v, 3, 4, 9, 14, m[s[14]], m[s[15]])

    return [state ^ low ^ high for state, low, high in zip(h, v[:8], v[8:])]


def _word_from_bits(bits: Sequence[bool]) -> int:
    return sum(1 << position for position, bit in enumerate(bits) if bit)


def _block_words(block: Sequence[bool]) -> list[int]:
    words = [
        _word_from_bits(block[start:start + WORD_BITS])
        for start in range(0, len(block), WORD_BITS)
    ]
    words.extend([0] * (16 - len(words)))
    return words


def evaluate_blake2s_with_parameters(
    bits: Iterable[bool], parameters: Sequence[int]
) -> list[int]:
    """Hash a little-endian bit string with the given 8-word parameter block.

    The bit count must be a multiple of eight.  Returns the 8-word state.
    """
    bit_list = [bool(bit) for bit in bits]
    if len(bit_list) % 8:
        raise ValueError("the number of input bits must be a multiple of 8")
    if len(parameters) != 8:
        raise ValueError(f"parameter block must hold 8 words, got {len(parameters)}")

    h = [iv ^ (param & _MASK) for iv, param in zip(IV, parameters)]
    blocks = [
        _block_words(bit_list[start:start + BLOCK_BITS])
        for start in range(0, len(bit_list), BLOCK_BITS)
    ] or [[0] * 16]

    for counter, block in enumerate(blocks[:-1], start=1):
        h = blake2s_compression(h, block, counter * 64, False)
    return blake2s_compression(h, blocks[-1], len(bit_list) // 8, True)


def evaluate_blake2s(bits: Iterable[bool]) -> list[int]:
    """Hash a little-endian bit string with BLAKE2s-256; return the 8-word state."""
    return evaluate_blake2s_with_parameters(bits, DEFAULT_PARAMETERS)


def words_to_bytes(words: Iterable[int]) -> bytes:
    """Serialise 32-bit words little-endian."""
    return b"".join(word.to_bytes(4, "little") for word in words)


def _bytes_to_bits(data: bytes) -> list[bool]:
    return [(byte >> position) & 1 == 1 for byte in data for position in range(8)]


def blake2s_prf(seed: bytes, data: bytes) -> bytes:
    """Return BLAKE2s-256 of a 32-byte ``seed`` followed by ``data``, bit by bit."""
    seed_bytes = bytes(seed)
    if len(seed_bytes) != 32:
        raise ValueError(f"seed must be 32 bytes, got {len(seed_bytes)}")
    return words_to_bytes(evaluate_blake2s(_bytes_to_bits(seed_bytes + bytes(data))))