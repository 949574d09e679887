"""BLAKE2s PRF, parameterised BLAKE2s and BLAKE2s computed over bit strings."""