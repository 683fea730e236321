"""
32-bit hash functions used to derive Bloom filter bit positions.

djb_hash is the primary digest; murmur3_32 is reseeded with that digest to
produce the second digest needed for double hashing.
"""

import mmh3

MASK32 = 0xFFFFFFFF


def djb_hash(data: bytes) -> int:
    """DJB2 hash: h = h * 33 + byte, starting from 5381, truncated to 32 bits."""
    h = 5381
    for byte in data:
        h = ((h << 5) + h + byte) & MASK32
    return h


def murmur3_32(data: bytes, seed: int = 0) -> int:
    """
    MurmurHash3 (x86, 32-bit) of data with the given seed.

    Args:
        data: Bytes to hash.
        seed: 32-bit seed; larger values are truncated.

    Returns:
        Unsigned 32-bit digest.
    """
    return mmh3.hash(data, seed & MASK32, signed=False)
