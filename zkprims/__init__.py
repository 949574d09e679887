"""Merkle trees, BLAKE2s PRFs and field-element input packing."""

__version__ = "0.1.0"