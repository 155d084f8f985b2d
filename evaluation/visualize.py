"""
Visualization module for BK-map benchmark results.

Generates comparison plots from benchmark CSV data.

Usage:
    python -m evaluation.visualize
    python -m evaluation.visualize --input results/benchmark_results.csv
    python -m evaluation.visualize --output results/plots/
"""

import argparse
import os
import sys

import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bkmap import config


# =============================================================================
# Configuration
# =============================================================================

# Plot styling
TREE_COLOR = "#27ae60"  # Green
SCAN_COLOR = "#7f8c8d"  # Grey
FIGURE_DPI = 150
FIGURE_SIZE_SCALABILITY = (14, 5)
FIGURE_SIZE_COMPARISON = (10, 6)

METHOD_STYLES = [("BK-map", TREE_COLOR, "o"), ("Linear scan", SCAN_COLOR, "s")]

# Operation labels for display
OPERATION_LABELS = {
    "build": "Build (per insert)",
    "radius_search": "Radius Search",
    "nearest_search": "Nearest Search",
}

SEARCH_OPERATIONS = ["radius_search", "nearest_search"]


# =============================================================================
# Data Loading
# =============================================================================

def load_benchmark_data(filepath: str) -> pd.DataFrame:
    """Load benchmark results from CSV."""
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"Benchmark results not found: {filepath}")

    df = pd.read_csv(filepath)
    print(f"Loaded {len(df)} rows from {filepath}")
    return df


def _save(fig, output_dir: str, filename: str) -> str:
    output_path = os.path.join(output_dir, filename)
    fig.savefig(output_path, dpi=FIGURE_DPI, bbox_inches="tight")
    plt.close(fig)
    print(f"Saved: {output_path}")
    return output_path


# =============================================================================
# Plot 1: Scalability (Evaluations vs Index Size)
# =============================================================================

def plot_scalability(df: pd.DataFrame, output_dir: str) -> str:
    """
    Generate scalability plot: mean distance evaluations vs index size.

    One subplot per operation, with error bars (one standard deviation)
    for each method measured for it.
    """
    operations = [op for op in ["build"] + SEARCH_OPERATIONS if op in set(df["operation"])]

    fig, axes = plt.subplots(1, len(operations), figsize=FIGURE_SIZE_SCALABILITY, squeeze=False)
    axes = axes.flatten()

    for ax, op in zip(axes, operations):
        op_data = df[df["operation"] == op]

        for method, color, marker in METHOD_STYLES:
            mdata = op_data[op_data["method"] == method].sort_values("index_size")
            if len(mdata) == 0:
                continue

            ax.errorbar(
                mdata["index_size"],
                mdata["mean_evaluations"],
                yerr=mdata["std_evaluations"],
                marker=marker,
                color=color,
                linewidth=2,
                markersize=8,
                capsize=5,
                label=method
            )

        ax.set_title(OPERATION_LABELS.get(op, op), fontsize=11, fontweight="bold")
        ax.set_xlabel("Index Size (terms)")
        ax.set_ylabel("Mean Distance Evaluations")
        ax.grid(True, alpha=0.3)
        ax.legend(loc="upper left")

    fig.suptitle("BK-map Scalability: Distance Evaluations vs Index Size", fontsize=14, fontweight="bold")
    fig.tight_layout()

    return _save(fig, output_dir, "scalability_plot.png")


# =============================================================================
# Plot 2: Pruning Bar Chart
# =============================================================================

def compute_pruning_shares(data: pd.DataFrame):
    """
    Percentage of the map's distinct entries each method evaluates per query.

    Args:
        data: Search rows for a single index size.

    Returns:
        (labels, shares) where shares maps each method to one percentage
        per search operation present in data, in label order.
    """
    labels = []
    shares = {method: [] for method, _, _ in METHOD_STYLES}

    for op in SEARCH_OPERATIONS:
        op_data = data[data["operation"] == op]
        if len(op_data) == 0:
            continue
        labels.append(OPERATION_LABELS.get(op, op))
        for method in shares:
            row = op_data[op_data["method"] == method]
            if len(row) == 0 or row["entries"].values[0] == 0:
                shares[method].append(0.0)
                continue
            shares[method].append(100.0 * row["mean_evaluations"].values[0] / row["entries"].values[0])

    return labels, shares


def plot_pruning_bars(df: pd.DataFrame, output_dir: str, index_size: int = None) -> str:
    """
    Generate bar chart of the share of entries each search evaluates.

    Args:
        df: Benchmark data
        output_dir: Output directory
        index_size: Which index size to show (default: largest available)
    """
    if index_size is None:
        index_size = df["index_size"].max()

    data = df[(df["index_size"] == index_size) & (df["operation"].isin(SEARCH_OPERATIONS))]

    if len(data) == 0:
        print(f"No search data for index_size={index_size}")
        return None

    labels, shares = compute_pruning_shares(data)

    fig, ax = plt.subplots(figsize=FIGURE_SIZE_COMPARISON)

    x = range(len(labels))
    width = 0.35
    offsets = [-width / 2, width / 2]

    for (method, color, _), offset in zip(METHOD_STYLES, offsets):
        bars = ax.bar([i + offset for i in x], shares[method], width,
                      label=method, color=color, edgecolor="black")
        for bar in bars:
            height = bar.get_height()
            ax.annotate(f'{height:.1f}%',
                        xy=(bar.get_x() + bar.get_width() / 2, height),
                        xytext=(0, 3),
                        textcoords="offset points",
                        ha='center', va='bottom', fontsize=9)

    ax.set_xlabel("Operation", fontsize=11)
    ax.set_ylabel("Entries Evaluated (%)", fontsize=11)
    ax.set_title(f"Share of Index Evaluated per Query ({index_size} terms)",
                 fontsize=13, fontweight="bold")
    ax.set_xticks(list(x))
    ax.set_xticklabels(labels)
    ax.set_ylim(0, 110)
    ax.legend()
    ax.grid(True, alpha=0.3, axis="y")

    fig.tight_layout()

    return _save(fig, output_dir, "pruning_bar_chart.png")


# =============================================================================
# Plot 3: Query Time
# =============================================================================

def plot_query_time(df: pd.DataFrame, output_dir: str) -> str:
    """Generate plot of mean wall-clock time per query vs index size."""
    search_data = df[df["operation"].isin(SEARCH_OPERATIONS)]

    if len(search_data) == 0:
        print("No search data found")
        return None

    fig, axes = plt.subplots(1, len(SEARCH_OPERATIONS), figsize=FIGURE_SIZE_SCALABILITY)

    for ax, op in zip(axes, SEARCH_OPERATIONS):
        op_data = search_data[search_data["operation"] == op]

        for method, color, marker in METHOD_STYLES:
            mdata = op_data[op_data["method"] == method].sort_values("index_size")
            ax.plot(
                mdata["index_size"],
                mdata["mean_time_ms"],
                marker=marker,
                color=color,
                linewidth=2,
                markersize=8,
                label=method
            )

        ax.set_title(OPERATION_LABELS.get(op, op), fontsize=12, fontweight="bold")
        ax.set_xlabel("Index Size (terms)")
        ax.set_ylabel("Mean Time per Query (ms)")
        ax.grid(True, alpha=0.3)
        ax.legend()

    fig.suptitle("Query Time: BK-map vs Linear Scan", fontsize=14, fontweight="bold")
    fig.tight_layout()

    return _save(fig, output_dir, "query_time.png")


# =============================================================================
# Plot 4: Summary Table
# =============================================================================

def plot_summary_table(df: pd.DataFrame, output_dir: str) -> str:
    """
    Generate a summary table image showing key statistics.
    """
    index_sizes = sorted(df["index_size"].unique())

    table_data = []

    for op in ["build"] + SEARCH_OPERATIONS:
        row = [OPERATION_LABELS.get(op, op)]
        for size in index_sizes:
            cells = []
            for method, short in [("BK-map", "T"), ("Linear scan", "S")]:
                val = df[(df["operation"] == op) &
                         (df["method"] == method) &
                         (df["index_size"] == size)]["mean_evaluations"]
                if len(val) > 0:
                    cells.append(f"{short}:{val.values[0]:.1f}")
            row.append("\n".join(cells) if cells else "-")

        table_data.append(row)

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.axis("off")

    columns = ["Operation"] + [f"N={size}" for size in index_sizes]

    table = ax.table(
        cellText=table_data,
        colLabels=columns,
        cellLoc="center",
        loc="center",
        colColours=[TREE_COLOR] + ["#f0f0f0"] * len(index_sizes)
    )

    table.auto_set_font_size(False)
    table.set_fontsize(10)
    table.scale(1.2, 1.8)

    # Color header row
    for j in range(len(columns)):
        table[(0, j)].set_facecolor("#2c3e50")
        table[(0, j)].set_text_props(color="white", fontweight="bold")

    ax.set_title("Summary: Mean Distance Evaluations (T=BK-map, S=Linear scan)",
                 fontsize=13, fontweight="bold", pad=20)

    tree_patch = mpatches.Patch(color=TREE_COLOR, label="BK-map (T)")
    scan_patch = mpatches.Patch(color=SCAN_COLOR, label="Linear scan (S)")
    ax.legend(handles=[tree_patch, scan_patch], loc="upper right",
              bbox_to_anchor=(1, 1.15), ncol=2)

    fig.tight_layout()

    return _save(fig, output_dir, "summary_table.png")


# =============================================================================
# Main
# =============================================================================

def generate_all_plots(input_file: str, output_dir: str) -> None:
    """Generate all visualization plots."""
    os.makedirs(output_dir, exist_ok=True)

    df = load_benchmark_data(input_file)

    print(f"\nGenerating plots to: {output_dir}")
    print("-" * 50)

    plot_scalability(df, output_dir)
    plot_pruning_bars(df, output_dir)
    plot_query_time(df, output_dir)
    plot_summary_table(df, output_dir)

    print("-" * 50)
    print("All plots generated successfully!")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate BK-map benchmark visualizations")
    parser.add_argument(
        "--input", "-i",
        type=str,
        default=os.path.join(config.RESULTS_DIR, "benchmark_results.csv"),
        help="Input CSV file from benchmark"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        default=config.RESULTS_DIR,
        help="Output directory for plots"
    )
    args = parser.parse_args()

    try:
        generate_all_plots(args.input, args.output)
        return 0
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print("Run the benchmark first: python -m evaluation.benchmark")
        return 1


if __name__ == "__main__":
    sys.exit(main())
