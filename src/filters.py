"""
Wrapper classes for the filters under comparison to provide a unified interface.
"""

import struct

from pybloom_live import BloomFilter as PyBloom

import config
from bloom import BloomFilter, false_positive_rate, derive_rounds


def key_to_bytes(key):
    """Normalise workload keys (numpy ints, str, bytes) to bytes."""
    if isinstance(key, (bytes, bytearray)):
        return bytes(key)
    if isinstance(key, str):
        return key.encode("utf-8")
    return struct.pack("<q", int(key))  # 64-bit int


class BaseFilter:
    def __init__(self, bit_capacity=config.BIT_CAPACITY, ratio=config.RATIO):
        self.bit_capacity = bit_capacity
        self.ratio = ratio
        self.filter = None
        self.name = "Base"

    @property
    def design_capacity(self):
        """Keys the bit budget was sized for."""
        return max(1, self.bit_capacity // (self.ratio * 8))

    def add(self, key):
        raise NotImplementedError

    def __contains__(self, key):
        raise NotImplementedError

    def estimated_fpr(self):
        """Predicted false positive rate, or None if the filter has no estimator."""
        return None

    def size_bits(self):
        """Returns approximate size in bits."""
        return 0


class DoubleHashBloomFilter(BaseFilter):
    def __init__(self, bit_capacity=config.BIT_CAPACITY, ratio=config.RATIO):
        super().__init__(bit_capacity, ratio)
        self.name = "DoubleHashBloom"
        self.filter = BloomFilter(bit_capacity, ratio)

    def add(self, key):
        self.filter.insert(key_to_bytes(key))

    def __contains__(self, key):
        return self.filter.maybe_contains(key_to_bytes(key))

    def estimated_fpr(self):
        return self.filter.false_positive_estimate()

    def size_bits(self):
        return self.filter.bit_capacity


class ReferenceBloomFilter(BaseFilter):
    """pybloom_live filter sized for the same capacity and target error rate."""

    def __init__(self, bit_capacity=config.BIT_CAPACITY, ratio=config.RATIO):
        super().__init__(bit_capacity, ratio)
        self.name = "PyBloomLive"
        ratio_bits = ratio * 8
        target = false_positive_rate(derive_rounds(ratio_bits), ratio_bits)
        self.filter = PyBloom(capacity=self.design_capacity, error_rate=target)

    def add(self, key):
        # Raises IndexError once the design capacity is reached
        self.filter.add(key_to_bytes(key))

    def __contains__(self, key):
        return key_to_bytes(key) in self.filter

    def estimated_fpr(self):
        return self.filter.error_rate

    def size_bits(self):
        return self.filter.num_bits
