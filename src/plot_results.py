import logging

import pandas as pd
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import os
import seaborn as sns

import config

# Set style for publication-quality plots
plt.style.use('seaborn-v0_8-paper')
sns.set_theme(style="whitegrid")
sns.set_palette("colorblind")

CSV_PATH = os.path.join(config.CSV_DIR, "research_benchmark_results.csv")


def load_results(csv_path=CSV_PATH):
    """Loads the benchmark CSV, or returns None if it does not exist."""
    if not os.path.exists(csv_path):
        print(f"Error: CSV file not found at {csv_path}")
        return None

    df = pd.read_csv(csv_path)
    df['LoadFactor'] = pd.to_numeric(df['LoadFactor'])
    return df


def plot_fpr_vs_load(df, plots_dir=config.PLOTS_DIR):
    """Empirical FPR per filter over load factor, with the estimates as dashed references."""
    print("Generating FPR vs load plot...")
    if df.empty:
        print("No benchmark data found.")
        return None

    plt.figure(figsize=(10, 5))
    sns.lineplot(data=df, x='LoadFactor', y='FPR', hue='Filter', style='Filter',
                 markers=True, dashes=False)

    ours = df[df['Filter'] == 'DoubleHashBloom']
    if not ours.empty:
        means = ours.groupby('LoadFactor').mean(numeric_only=True).reset_index()
        plt.plot(means['LoadFactor'], means['EstimatedFPR'], linestyle='--',
                 color='gray', label='Estimate (design point)')
        if 'LoadFPR' in means:
            plt.plot(means['LoadFactor'], means['LoadFPR'], linestyle=':',
                     color='black', label='Expected at load')

    plt.title('False Positive Rate vs Load', fontsize=12, fontweight='bold')
    plt.xlabel('Load Factor (inserted / design capacity)')
    plt.ylabel('False Positive Rate')
    plt.yscale('symlog', linthresh=1e-5)
    plt.legend(bbox_to_anchor=(1.05, 1), loc='upper left', title='Filter', frameon=True)
    plt.grid(True, linestyle='--', alpha=0.7, which='both')
    plt.tight_layout()
    out_path = os.path.join(plots_dir, 'fpr_vs_load.png')
    plt.savefig(out_path)
    plt.close()
    return out_path


def plot_latency(df, plots_dir=config.PLOTS_DIR):
    """Bar charts of insert and query latency per filter."""
    print("Generating latency plots...")
    if df.empty:
        print("No benchmark data found.")
        return []

    metrics = [
        ('InsertLatency(us)', 'Insert Latency (µs)'),
        ('QueryLatency(us)', 'Query Latency (µs)'),
    ]

    paths = []
    for col, title in metrics:
        plt.figure(figsize=(8, 5))
        sns.barplot(data=df, x='Filter', y=col, errorbar='sd', capsize=.1)
        plt.title(f'Performance: {title}', fontsize=12, fontweight='bold')
        plt.ylabel('Lower is Better')
        plt.xlabel('Filter Type')
        plt.grid(axis='y', linestyle='--', alpha=0.7)
        plt.tight_layout()
        out_path = os.path.join(plots_dir, f'latency_{col.lower().split("(")[0]}.png')
        plt.savefig(out_path)
        plt.close()
        paths.append(out_path)
    return paths


def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    if not os.path.exists(config.PLOTS_DIR):
        os.makedirs(config.PLOTS_DIR)
        print(f"Created directory: {config.PLOTS_DIR}")

    df = load_results()

    if df is not None:
        plot_fpr_vs_load(df)
        plot_latency(df)
        print(f"\nAll plots generated in: {os.path.abspath(config.PLOTS_DIR)}")


if __name__ == "__main__":
    main()
