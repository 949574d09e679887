"""BLAKE2s-based pseudo-random function and parameterised BLAKE2s hashing."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

__all__ = ["Blake2sPRF", "Blake2sWithParameterBlock"]

SEED_SIZE = 32
INPUT_SIZE = 32
OUTPUT_SIZE = 32
SALT_SIZE = 8
PERSONALIZATION_SIZE = 8


def _fixed_bytes(value: bytes, size: int, what: str) -> bytes:
    data = bytes(value)
    if len(data) != size:
        raise ValueError(f"{what} must be {size} bytes, got {len(data)}")
    return data


class Blake2sPRF:
    """PRF whose output is BLAKE2s-256 of a 32-byte seed followed by a 32-byte input."""

    seed_size = SEED_SIZE
    input_size = INPUT_SIZE
    output_size = OUTPUT_SIZE

    def evaluate(self, seed: bytes, data: bytes) -> bytes:
        """Return the 32-byte PRF output for ``seed`` and ``data``."""
        hasher = hashlib.blake2s(digest_size=OUTPUT_SIZE)
        hasher.update(_fixed_bytes(seed, SEED_SIZE, "seed"))
        hasher.update(_fixed_bytes(data, INPUT_SIZE, "input"))
        return hasher.digest()


@dataclass(frozen=True)
class Blake2sWithParameterBlock:
    """Unkeyed BLAKE2s-256 with a salt and personalisation in the parameter block.

    The digest is always 32 bytes and no key is used; ``output_size`` and
    ``key_size`` describe the parameter block but do not change the result.
    """

    output_size: int = OUTPUT_SIZE
    key_size: int = 0
    salt: bytes = bytes(SALT_SIZE)
    personalization: bytes = bytes(PERSONALIZATION_SIZE)

    def __post_init__(self) -> None:
        object.__setattr__(self, "salt", _fixed_bytes(self.salt, SALT_SIZE, "salt"))
        object.__setattr__(
            self,
            "personalization",
            _fixed_bytes(self.personalization, PERSONALIZATION_SIZE, "personalization"),
        )

    def evaluate(self, data: bytes) -> bytes:
        """Return the 32-byte digest of ``data``."""
        return hashlib.blake2s(
            bytes(data),
            digest_size=OUTPUT_SIZE,
            salt=self.salt,
            person=self.personalization,
        ).digest()