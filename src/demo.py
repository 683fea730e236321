"""
Demonstration driver: inserts a fixed list of keys one at a time, checking every
key before each insert. Results go to stdout, filter diagnostics to stderr.
"""

import logging
import sys

import config
from bloom import BloomFilter


def check_all(bloom, keys, out=None):
    out = out or sys.stdout
    for key in keys:
        if bloom.maybe_contains(key):
            print(f"checking... [{key}] might be in the set", file=out)
        else:
            print(f"checking... [{key}] definitely not in the set", file=out)


def main(keys=None, out=None, err=None):
    keys = config.DEMO_KEYS if keys is None else keys
    out = out or sys.stdout
    err = err or sys.stderr
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)

    with BloomFilter(config.BIT_CAPACITY, config.RATIO) as bloom:
        print(f"false positive rate is {bloom.false_positive_estimate():f}", file=err)
        for key in keys:
            check_all(bloom, keys, out)
            print(f"SETTING [{key}] in the filter", file=out)
            bloom.insert(key)
            bloom.dump(err, "")

        check_all(bloom, keys, out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
