import numpy as np
import pandas as pd
import pytest

import benchmarks
import config
import workloads
from filters import (
    BaseFilter,
    DoubleHashBloomFilter,
    ReferenceBloomFilter,
    key_to_bytes,
)


@pytest.fixture
def small_config(monkeypatch, tmp_path):
    """Shrink the experiment so a trial runs quickly."""
    monkeypatch.setattr(config, "BIT_CAPACITY", 8000)
    monkeypatch.setattr(config, "RATIO", 3)
    monkeypatch.setattr(config, "NUM_TRIALS", 1)
    monkeypatch.setattr(config, "LOAD_FACTORS", [0.5, 2.0])
    monkeypatch.setattr(config, "CSV_DIR", str(tmp_path / "csv"))
    return tmp_path


class TestWorkloads:
    def test_uniform_sets_are_disjoint(self) -> None:
        inserts, negatives = workloads.generate_uniform(num_keys=200, num_negatives=500, seed=1)
        assert len(inserts) == 200
        assert len(negatives) == 500
        assert not set(inserts.tolist()) & set(negatives.tolist())

    def test_uniform_is_reproducible(self) -> None:
        a, _ = workloads.generate_uniform(num_keys=50, num_negatives=50, seed=7)
        b, _ = workloads.generate_uniform(num_keys=50, num_negatives=50, seed=7)
        assert np.array_equal(a, b)

    def test_keys_for_load(self) -> None:
        assert workloads.keys_for_load(0.5, 100) == 50
        assert workloads.keys_for_load(2.0, 100) == 200
        assert workloads.keys_for_load(0.0001, 100) == 1

    def test_load_sweep(self) -> None:
        sweep = workloads.generate_load_sweep(100, load_factors=[0.5, 1.0, 3.0], num_negatives=10)
        assert [phase["load_factor"] for phase in sweep] == [0.5, 1.0, 3.0]
        assert [len(phase["insert_keys"]) for phase in sweep] == [50, 100, 300]


class TestFilters:
    def test_key_to_bytes(self) -> None:
        assert key_to_bytes(b"abc") == b"abc"
        assert key_to_bytes("abc") == b"abc"
        assert key_to_bytes(np.int64(5)) == key_to_bytes(5)
        assert len(key_to_bytes(5)) == 8

    def test_base_filter_is_abstract(self) -> None:
        f = BaseFilter()
        with pytest.raises(NotImplementedError):
            f.add("x")
        with pytest.raises(NotImplementedError):
            _ = "x" in f
        assert f.estimated_fpr() is None

    def test_double_hash_wrapper(self) -> None:
        f = DoubleHashBloomFilter(bit_capacity=8000, ratio=3)
        for key in np.arange(100):
            f.add(key)
        for key in np.arange(100):
            assert key in f
        assert f.size_bits() == 8000
        assert f.estimated_fpr() == f.filter.false_positive_estimate()

    def test_reference_wrapper(self) -> None:
        f = ReferenceBloomFilter(bit_capacity=8000, ratio=3)
        for key in range(100):
            f.add(key)
        for key in range(100):
            assert key in f
        assert f.size_bits() > 0

    def test_reference_refuses_overfill(self) -> None:
        f = ReferenceBloomFilter(bit_capacity=800, ratio=3)
        with pytest.raises(IndexError):
            for key in range(f.design_capacity * 3):
                f.add(key)


class TestBenchmarks:
    def test_measure_fpr_empty(self) -> None:
        assert benchmarks.measure_fpr(DoubleHashBloomFilter(800, 2), []) == 0.0

    def test_measure_fpr_counts_hits(self) -> None:
        f = DoubleHashBloomFilter(1, 2)
        f.add("x")
        assert benchmarks.measure_fpr(f, ["a", "b", "c"]) == 1.0

    def test_expected_fpr_at_load(self) -> None:
        assert benchmarks.expected_fpr_at_load(6, 100000, 0) == 0.0
        assert 0.0 < benchmarks.expected_fpr_at_load(6, 100000, 4000) < 0.001

    def test_run_trial_row(self, small_config) -> None:
        row = benchmarks.run_trial(0, DoubleHashBloomFilter, 0.5, num_negatives=500)
        assert row["Filter"] == "DoubleHashBloom"
        assert row["NumKeys"] == workloads.keys_for_load(0.5, 8000 // 24)
        assert 0.0 <= row["FPR"] <= 1.0
        assert row["EstimatedFPR"] == pytest.approx((1 - np.exp(-6 / 24)) ** 6)
        assert row["LoadFPR"] is not None
        assert row["BitsPerKey"] == pytest.approx(8000 / row["NumKeys"])

    def test_run_trial_skips_refused_load(self, small_config) -> None:
        assert benchmarks.run_trial(0, ReferenceBloomFilter, 2.0, num_negatives=100) is None

    def test_run_trial_skips_bad_construction(self, small_config, monkeypatch) -> None:
        monkeypatch.setattr(config, "BIT_CAPACITY", 0)
        assert benchmarks.run_trial(0, DoubleHashBloomFilter, 0.5) is None

    def test_main_writes_csv(self, small_config, monkeypatch, capsys) -> None:
        monkeypatch.setattr(config, "NUM_NEGATIVES", 200)
        monkeypatch.setattr(
            benchmarks,
            "run_trial",
            lambda i, cls, lf: {
                "RunID": i,
                "Filter": cls.__name__,
                "LoadFactor": lf,
                "NumKeys": 1,
                "InsertLatency(us)": 1.0,
                "QueryLatency(us)": 1.0,
                "P99_QueryLatency(us)": 1.0,
                "FPR": 0.0,
                "EstimatedFPR": 0.0,
                "LoadFPR": 0.0,
                "BitsPerKey": 1.0,
            },
        )
        benchmarks.main()
        df = pd.read_csv(small_config / "csv" / "research_benchmark_results.csv")
        assert len(df) == 4
        assert "Summary Results" in capsys.readouterr().out
