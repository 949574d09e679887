"""Fixed-height Merkle trees, authentication paths and position-bit paths."""