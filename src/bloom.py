"""
Bloom filter with Kirsch-Mitzenmacher double hashing.

Two base digests (djb_hash and a murmur3_32 reseeded with the djb digest) are
combined as h1 + i*h2 to generate k bit positions per key.
False positives are possible, but false negatives are not.
"""

import logging
import math
import numbers
import sys

import numpy as np

import config
from hashes import MASK32, djb_hash, murmur3_32

logger = logging.getLogger(__name__)


class BloomError(Exception):
    """Base class for Bloom filter errors."""


class InvalidParameterError(BloomError, ValueError):
    """Raised when a filter is constructed with unusable parameters."""


class FilterReleasedError(BloomError):
    """Raised when a filter is used after release()."""


def derive_rounds(ratio_bits: int) -> int:
    """Number of hash rounds for a bits-per-element ratio: round(log2(2 * ratio_bits))."""
    # Half rounds away from zero
    return int(math.floor(math.log2(2 * ratio_bits) + 0.5))


def false_positive_rate(hash_rounds: int, ratio_bits: int) -> float:
    """Estimated false positive probability: (1 - e^(-k / ratio_bits))^k."""
    return (1.0 - math.exp(-1.0 * hash_rounds / ratio_bits)) ** hash_rounds


def _as_bytes(key) -> bytes:
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    if isinstance(key, str):
        return key.encode("utf-8")
    raise TypeError(f"Bloom filter keys must be bytes or str, not {type(key).__name__}")


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


class BloomFilter:
    """
    Fixed-capacity, insert-only probabilistic set.

    Args:
        bit_capacity: Number of addressable bits (m), must be > 0.
        ratio: Bits-per-element ratio in bytes, must be > 1. Stored x8 as bits.

    Raises:
        InvalidParameterError: If either argument is out of range.
    """

    def __init__(self, bit_capacity: int = config.BIT_CAPACITY, ratio: int = config.RATIO):
        if not _is_int(bit_capacity) or bit_capacity <= 0:
            raise InvalidParameterError(
                f"bit_capacity must be a positive integer, got {bit_capacity!r}"
            )
        if not _is_int(ratio) or ratio <= 1:
            raise InvalidParameterError(f"ratio must be an integer > 1, got {ratio!r}")

        self._bit_capacity = int(bit_capacity)
        self._ratio_bits = int(ratio) * 8
        self._hash_rounds = derive_rounds(self._ratio_bits)

        word_count = -(-self._bit_capacity // config.WORD_BITS)
        self._bits = np.zeros(word_count, dtype=np.uint32)

        logger.debug(
            "BloomFilter created: m=%d, mn=%d, k=%d, words=%d",
            self._bit_capacity,
            self._ratio_bits,
            self._hash_rounds,
            word_count,
        )

    @property
    def bit_capacity(self) -> int:
        return self._bit_capacity

    @property
    def ratio_bits(self) -> int:
        return self._ratio_bits

    @property
    def hash_rounds(self) -> int:
        return self._hash_rounds

    @property
    def design_capacity(self) -> int:
        """Number of keys the ratio was sized for; the estimate holds up to here."""
        return self._bit_capacity // self._ratio_bits

    @property
    def word_count(self) -> int:
        return len(self._storage())

    @property
    def released(self) -> bool:
        return self._bits is None

    def _storage(self) -> np.ndarray:
        if self._bits is None:
            raise FilterReleasedError("Bloom filter has been released")
        return self._bits

    def _indices(self, key):
        data = _as_bytes(key)
        h1 = djb_hash(data)
        h2 = murmur3_32(data, h1)
        for i in range(self._hash_rounds):
            yield ((h1 + i * h2) & MASK32) % self._bit_capacity

    def insert(self, key) -> None:
        """Set the k bits for key."""
        words = self._storage()
        for idx in self._indices(key):
            words[idx // config.WORD_BITS] |= np.uint32(1 << (idx % config.WORD_BITS))

    add = insert

    def maybe_contains(self, key) -> bool:
        """
        Check if key might be in the set.
        Returns False if key is definitely not present, True if it might be.
        """
        words = self._storage()
        for idx in self._indices(key):
            if not (int(words[idx // config.WORD_BITS]) >> (idx % config.WORD_BITS)) & 1:
                return False
        return True

    def __contains__(self, key) -> bool:
        return self.maybe_contains(key)

    def false_positive_estimate(self) -> float:
        self._storage()
        return false_positive_rate(self._hash_rounds, self._ratio_bits)

    def get_bit(self, index: int) -> int:
        if not 0 <= index < self._bit_capacity:
            raise IndexError(f"bit index {index} out of range for {self._bit_capacity} bits")
        words = self._storage()
        return (int(words[index // config.WORD_BITS]) >> (index % config.WORD_BITS)) & 1

    def bit_values(self) -> np.ndarray:
        """All m bits as a uint8 array of 0/1, in index order."""
        raw = self._storage().astype("<u4").view(np.uint8)
        return np.unpackbits(raw, bitorder="little")[: self._bit_capacity]

    def bit_count(self) -> int:
        """Number of bits currently set."""
        return int(self.bit_values().sum())

    def release(self) -> None:
        """Free the bit storage. The filter must not be used afterwards."""
        if self._bits is not None:
            self._bits = None
            logger.debug("BloomFilter %#x released", id(self))

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def dump(self, out=None, prefix: str = "") -> None:
        dump(self, out, prefix)

    def __repr__(self) -> str:
        if self.released:
            return f"BloomFilter(m={self._bit_capacity}, k={self._hash_rounds}, released)"
        return f"BloomFilter(m={self._bit_capacity}, k={self._hash_rounds})"


def dump(bloom: BloomFilter, out=None, prefix: str = "") -> None:
    """
    Write a human-readable report of the filter to out (stderr by default).

    The raw bit array is included only for filters of at most
    config.DIAG_MAX_BITS bits, config.DIAG_WRAP bits per row.
    """
    if out is None:
        out = sys.stderr
    if prefix is None:
        prefix = ""

    # Raises on a released filter before anything is written
    estimate = bloom.false_positive_estimate()

    out.write(f"{prefix}[bloom {id(bloom):#x}]\n")
    out.write(
        f"{prefix} m = {bloom.bit_capacity}, k = {bloom.hash_rounds}, e = {estimate:f}\n"
    )

    if bloom.bit_capacity <= config.DIAG_MAX_BITS:
        values = bloom.bit_values()
        for start in range(0, len(values), config.DIAG_WRAP):
            row = " ".join(str(int(v)) for v in values[start : start + config.DIAG_WRAP])
            out.write(f"{prefix}  [ {row} ]\n")
