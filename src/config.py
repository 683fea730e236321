"""
Configuration parameters for the double-hashing Bloom filter and its benchmarks.
"""

# Filter defaults
BIT_CAPACITY = 100_000  # Number of addressable bits (m)
RATIO = 3  # Bits-per-element ratio as given by the caller (scaled x8 internally)
WORD_BITS = 32  # Width of one storage word

# Diagnostic dump
DIAG_MAX_BITS = 64 * 64  # Only dump raw bits for filters this small
DIAG_WRAP = 64  # Bits per dumped row

# Demonstration driver
DEMO_KEYS = ["A", "AB", "ABA", "ABBA", "CAR", "CDR", "CADR", "CADADDR"]

# Experiment Settings
NUM_KEYS = 1000  # Keys inserted at load factor 1.0 are derived from the filter itself
NUM_NEGATIVES = 20_000  # Keys probed for the empirical false positive rate
NUM_TRIALS = 5  # Number of runs to average over
SEED = 42  # Random seed for reproducibility

# Fractions of the design capacity to fill before measuring
LOAD_FACTORS = [0.25, 0.5, 1.0, 1.5, 2.0, 4.0]

# Paths
RESULTS_DIR = "results"
CSV_DIR = f"{RESULTS_DIR}/csv"
PLOTS_DIR = f"{RESULTS_DIR}/plots"

# Logging configuration
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
