"""
Main benchmarking script for Bloom filter evaluation.
Fills each filter to a range of load factors and compares the empirical
false positive rate against the estimate, collecting latency and memory metrics.
"""

import logging
import math
import time
import os
import pandas as pd
import numpy as np
import config
import workloads
from filters import DoubleHashBloomFilter, ReferenceBloomFilter

logger = logging.getLogger(__name__)


def measure_fpr(filter_obj, true_negatives):
    """Calculates False Positive Rate."""
    if len(true_negatives) == 0:
        return 0.0

    false_positives = 0
    for key in true_negatives:
        if key in filter_obj:
            false_positives += 1

    return false_positives / len(true_negatives)


def expected_fpr_at_load(hash_rounds, bit_capacity, num_inserted):
    """Formula: (1 - e^(-k*n/m))^k for the actual number of inserted keys."""
    return (1 - math.exp(-hash_rounds * num_inserted / bit_capacity)) ** hash_rounds


def run_trial(run_id, filter_cls, load_factor, num_negatives=config.NUM_NEGATIVES):
    """
    Runs a single trial for a specific filter filled to load_factor of its
    design capacity. Returns a result dict, or None if the filter could not be
    built or refused the workload.
    """

    # 1. Setup Filter
    try:
        f = filter_cls(bit_capacity=config.BIT_CAPACITY, ratio=config.RATIO)
    except Exception as e:
        print(f"Skipping {filter_cls.__name__}: {e}")
        return None

    # 2. Setup Workload
    num_keys = workloads.keys_for_load(load_factor, f.design_capacity)
    insert_keys, true_negatives = workloads.generate_uniform(
        num_keys=num_keys, num_negatives=num_negatives, seed=config.SEED + run_id
    )

    # 3. Measure Insert Time
    start_time = time.perf_counter()
    try:
        for key in insert_keys:
            f.add(key)
    except IndexError as e:
        # Fixed-capacity filters that refuse to overfill
        logger.info("%s refused load factor %s: %s", f.name, load_factor, e)
        return None
    end_time = time.perf_counter()
    insert_duration = end_time - start_time
    avg_insert_latency = (
        (insert_duration / len(insert_keys)) * 1e6 if len(insert_keys) > 0 else 0
    )

    # 4. Measure Query Time (fast pass for the average)
    query_keys = insert_keys
    start_time = time.perf_counter()
    for key in query_keys:
        _ = key in f
    end_time = time.perf_counter()
    query_duration = end_time - start_time
    avg_query_latency = (
        (query_duration / len(query_keys)) * 1e6 if len(query_keys) > 0 else 0
    )

    # Instrumented pass for P99 (max 1000 keys)
    sample_size = min(len(query_keys), 1000)
    if sample_size > 0:
        sample_lats = []
        for key in query_keys[:sample_size]:
            t0 = time.perf_counter()
            _ = key in f
            t1 = time.perf_counter()
            sample_lats.append(t1 - t0)
        p99_latency_us = np.percentile(sample_lats, 99) * 1e6
    else:
        p99_latency_us = 0

    # 5. Measure FPR
    fpr = measure_fpr(f, true_negatives)

    # 6. Measure Memory
    total_bits = f.size_bits()
    bits_per_key = total_bits / len(insert_keys) if len(insert_keys) > 0 else 0

    hash_rounds = getattr(f.filter, "hash_rounds", None)
    load_fpr = (
        expected_fpr_at_load(hash_rounds, total_bits, len(insert_keys))
        if hash_rounds
        else None
    )

    return {
        "RunID": run_id,
        "Filter": f.name,
        "LoadFactor": load_factor,
        "NumKeys": len(insert_keys),
        "InsertLatency(us)": avg_insert_latency,
        "QueryLatency(us)": avg_query_latency,
        "P99_QueryLatency(us)": p99_latency_us,
        "FPR": fpr,
        "EstimatedFPR": f.estimated_fpr(),
        "LoadFPR": load_fpr,
        "BitsPerKey": bits_per_key,
    }


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    os.makedirs(config.CSV_DIR, exist_ok=True)

    print("Starting Bloom Filter Benchmarks...")
    print(
        f"Bits: {config.BIT_CAPACITY}, Ratio: {config.RATIO}, Trials: {config.NUM_TRIALS}"
    )

    results = []

    filters_to_test = [
        DoubleHashBloomFilter,
        ReferenceBloomFilter,
    ]

    for load_factor in config.LOAD_FACTORS:
        print(f"\nLoad factor: {load_factor}")

        for filter_cls in filters_to_test:
            print(f"  Testing {filter_cls.__name__}...", end="", flush=True)

            for i in range(config.NUM_TRIALS):
                res = run_trial(i, filter_cls, load_factor)
                if res:
                    results.append(res)
                    print(".", end="", flush=True)
            print(" Done.")

    # Save Results
    df = pd.DataFrame(results)
    output_file = f"{config.CSV_DIR}/research_benchmark_results.csv"
    df.to_csv(output_file, index=False)

    print(f"\nResults saved to {output_file}")

    summary = df.groupby(["Filter", "LoadFactor"]).mean(numeric_only=True)
    print("\nSummary Results (Preview):")
    cols = [
        "InsertLatency(us)",
        "QueryLatency(us)",
        "FPR",
        "EstimatedFPR",
        "LoadFPR",
        "BitsPerKey",
    ]
    print(summary[cols].to_string())


if __name__ == "__main__":
    main()
