"""
Workload generation module for Bloom filter benchmarking.
Generates disjoint sets of inserted keys and true negatives, and load sweeps
that fill a filter below, at, and beyond its design capacity.
"""

import numpy as np
import config


def generate_uniform(
    num_keys=config.NUM_KEYS, num_negatives=config.NUM_NEGATIVES, seed=config.SEED
):
    """
    Generates a uniform workload.

    Returns:
        insert_keys (ndarray): Keys to be inserted into the filter.
        true_negatives (ndarray): Keys known to be NOT in the filter (for FPR).
    """
    np.random.seed(seed)
    # Draw every key from one pool without replacement so the two sets are disjoint
    pool_size = num_keys + num_negatives
    all_keys = np.random.choice(pool_size * 10, pool_size, replace=False)

    insert_keys = all_keys[:num_keys]
    true_negatives = all_keys[num_keys:]

    return insert_keys, true_negatives


def keys_for_load(load_factor, design_capacity):
    """Number of keys that fills design_capacity to load_factor (at least 1)."""
    return max(1, int(round(load_factor * design_capacity)))


def generate_load_sweep(
    design_capacity,
    load_factors=config.LOAD_FACTORS,
    num_negatives=config.NUM_NEGATIVES,
    seed=config.SEED,
):
    """
    Generates one workload per load factor.

    Instead of a single pair, this returns a list of dicts, one per load factor:
    {"load_factor", "insert_keys", "true_negatives"}.
    """
    sweep = []
    for i, load_factor in enumerate(load_factors):
        num_keys = keys_for_load(load_factor, design_capacity)
        insert_keys, true_negatives = generate_uniform(
            num_keys=num_keys, num_negatives=num_negatives, seed=seed + i
        )
        sweep.append(
            {
                "load_factor": load_factor,
                "insert_keys": insert_keys,
                "true_negatives": true_negatives,
            }
        )
    return sweep
