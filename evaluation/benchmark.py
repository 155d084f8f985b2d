"""
Benchmark system for BK-map experimental evaluation.

Runs experiments comparing BK-map searches against a linear scan across:
- Multiple index sizes
- All operations (build, radius search, nearest search)
- Multiple queries per operation for statistical significance

Work is measured in distance evaluations (the unit the tree's pruning
saves) and in wall-clock time. Outputs results to CSV for visualization.

Usage:
    python -m evaluation.benchmark
    python -m evaluation.benchmark --quick  # Quick run with smaller parameters
"""

import argparse
import csv
import os
import sys
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Tuple
import statistics

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bkmap import config
from bkmap.common.data_loader import clear_cache, generate_terms
from bkmap.common.logger import get_logger
from bkmap.indexing.bk_map import BKMap, Match
from bkmap.metrics.base import CountingMetric
from bkmap.metrics.levenshtein import Levenshtein

logger = get_logger("bkmap.evaluation.benchmark")

METHODS = ["BK-map", "Linear scan"]


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class BenchmarkConfig:
    """Configuration for benchmark runs."""
    # Index sizes to test
    index_sizes: List[int] = field(default_factory=lambda: [1000, 2500, 5000, 10000, 20000])

    # Number of queries to measure per search operation
    num_queries: int = 200

    # Search parameters
    radius: int = config.DEFAULT_SEARCH_RADIUS
    nearest_count: int = config.DEFAULT_NEAREST_COUNT

    # Random seed for reproducibility
    seed: int = 42

    # Output directory
    output_dir: str = config.RESULTS_DIR


@dataclass
class QuickBenchmarkConfig(BenchmarkConfig):
    """Smaller configuration for quick testing."""
    index_sizes: List[int] = field(default_factory=lambda: [500, 1000, 2000])
    num_queries: int = 30


# =============================================================================
# Statistics Helper
# =============================================================================

@dataclass
class OperationStats:
    """Statistics for a single operation type."""
    operation: str
    method: str
    index_size: int
    entries: int
    count: int
    total_evaluations: int
    min_evaluations: int
    max_evaluations: int
    mean_evaluations: float
    std_evaluations: float
    mean_time_ms: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for CSV output."""
        return {
            "operation": self.operation,
            "method": self.method,
            "index_size": self.index_size,
            "entries": self.entries,
            "count": self.count,
            "total_evaluations": self.total_evaluations,
            "min_evaluations": self.min_evaluations,
            "max_evaluations": self.max_evaluations,
            "mean_evaluations": round(self.mean_evaluations, 4),
            "std_evaluations": round(self.std_evaluations, 4),
            "mean_time_ms": round(self.mean_time_ms, 4),
        }


def compute_stats(
    operation: str,
    method: str,
    index_size: int,
    entries: int,
    evaluations: List[int],
    times: List[float]
) -> OperationStats:
    """
    Compute statistics from per-operation evaluation counts and timings (seconds).

    index_size is the number of terms inserted; entries is the number of
    distinct entries the map ended up with after duplicates merged.
    """
    if not evaluations:
        return OperationStats(
            operation=operation,
            method=method,
            index_size=index_size,
            entries=entries,
            count=0,
            total_evaluations=0,
            min_evaluations=0,
            max_evaluations=0,
            mean_evaluations=0.0,
            std_evaluations=0.0,
            mean_time_ms=0.0,
        )

    return OperationStats(
        operation=operation,
        method=method,
        index_size=index_size,
        entries=entries,
        count=len(evaluations),
        total_evaluations=sum(evaluations),
        min_evaluations=min(evaluations),
        max_evaluations=max(evaluations),
        mean_evaluations=statistics.mean(evaluations),
        std_evaluations=statistics.stdev(evaluations) if len(evaluations) > 1 else 0.0,
        mean_time_ms=statistics.mean(times) * 1000,
    )


# =============================================================================
# Linear Scan Baseline
# =============================================================================

def scan_within(entries: List[Tuple[Any, Any]], metric, query: Any, radius: int) -> List[Match]:
    """Radius search by evaluating the metric against every entry."""
    matches = []
    for key, value in entries:
        d = metric.distance(query, key)
        if d <= radius:
            matches.append((d, key, value))
    return matches


def scan_nearest(entries: List[Tuple[Any, Any]], metric, query: Any, count: int) -> List[Match]:
    """Nearest search by ranking every entry, keeping ties at the boundary."""
    ranked = sorted(
        ((metric.distance(query, key), key, value) for key, value in entries),
        key=lambda match: match[0],
    )
    if len(ranked) <= count:
        return ranked
    boundary = ranked[count - 1][0]
    return [match for match in ranked if match[0] <= boundary]


# =============================================================================
# Benchmark Runner
# =============================================================================

class BenchmarkRunner:
    """Runs benchmark experiments for the BK-map and the linear scan baseline."""

    def __init__(self, cfg: BenchmarkConfig):
        """Initialize the benchmark runner."""
        self.cfg = cfg
        self.results: List[OperationStats] = []
        self.terms: List[str] = []
        self.queries: List[str] = []
        self.mismatches = 0

    def load_data(self) -> None:
        """Generate terms for the largest index and the query set."""
        largest = max(self.cfg.index_sizes)
        print(f"Generating {largest} terms and {self.cfg.num_queries} queries...")
        self.terms = generate_terms(largest, seed=self.cfg.seed)
        self.queries = generate_terms(self.cfg.num_queries, seed=self.cfg.seed + 1)
        print(f"Generated {len(self.terms)} terms")

    def run_all(self) -> List[OperationStats]:
        """Run all benchmarks and return results."""
        self.load_data()

        for index_size in self.cfg.index_sizes:
            print()
            print("=" * 60)
            print(f"BENCHMARKING WITH {index_size} TERMS")
            print("=" * 60)

            self._benchmark_size(index_size)

        if self.mismatches:
            logger.warning(f"{self.mismatches} searches disagreed with the linear scan")

        return self.results

    def _benchmark_size(self, index_size: int) -> None:
        """Run all benchmarks for a single index size."""
        terms = self.terms[:index_size]
        metric = CountingMetric(Levenshtein())

        # 1. Benchmark BUILD
        print(f"  Building index ({index_size} terms)...")
        bk_map, build_evals, build_times = self._benchmark_build(terms, metric)
        self.results.append(compute_stats("build", "BK-map", index_size, len(bk_map), build_evals, build_times))
        print(f"    Build complete: {len(bk_map)} entries, depth {bk_map.depth()}, "
              f"mean={statistics.mean(build_evals):.2f} evaluations/insert")

        entries = list(bk_map.items())

        # 2. Benchmark RADIUS SEARCH
        print(f"  Radius search (r={self.cfg.radius}) for {len(self.queries)} queries...")
        self._benchmark_search(
            "radius_search",
            index_size,
            len(entries),
            lambda q: list(bk_map.search_within(q, self.cfg.radius)),
            lambda q: scan_within(entries, metric, q, self.cfg.radius),
            metric,
        )

        # 3. Benchmark NEAREST SEARCH
        print(f"  Nearest search (k={self.cfg.nearest_count}) for {len(self.queries)} queries...")
        self._benchmark_search(
            "nearest_search",
            index_size,
            len(entries),
            lambda q: bk_map.search_nearest(q, self.cfg.nearest_count),
            lambda q: scan_nearest(entries, metric, q, self.cfg.nearest_count),
            metric,
        )

        # Cleanup
        bk_map.clear()

    def _benchmark_build(self, terms: List[str], metric: CountingMetric) -> Tuple[BKMap, List[int], List[float]]:
        """Benchmark index building, one insert at a time."""
        bk_map = BKMap(metric=metric)
        evals_list = []
        times = []
        for i, term in enumerate(terms):
            metric.reset()
            start = time.perf_counter()
            bk_map.insert(term, i)
            times.append(time.perf_counter() - start)
            evals_list.append(metric.reset())
        bk_map.compact()
        return bk_map, evals_list, times

    def _benchmark_search(
        self,
        operation: str,
        index_size: int,
        entries: int,
        tree_search: Callable[[str], List[Match]],
        scan_search: Callable[[str], List[Match]],
        metric: CountingMetric,
    ) -> None:
        """Benchmark one search operation for both methods over the query set."""
        measured = {}
        for method, search in zip(METHODS, (tree_search, scan_search)):
            evals_list = []
            times = []
            found = []
            for query in self.queries:
                metric.reset()
                start = time.perf_counter()
                matches = search(query)
                times.append(time.perf_counter() - start)
                evals_list.append(metric.reset())
                found.append(sorted(matches))
            measured[method] = found
            stats = compute_stats(operation, method, index_size, entries, evals_list, times)
            self.results.append(stats)
            print(f"    {method}: mean={stats.mean_evaluations:.2f} evaluations/query, "
                  f"{stats.mean_time_ms:.3f} ms/query")

        # Sanity check: the tree must find exactly what the scan finds
        for tree_found, scan_found in zip(*(measured[m] for m in METHODS)):
            if tree_found != scan_found:
                self.mismatches += 1

    def save_results(self, filename: str = "benchmark_results.csv") -> str:
        """Save results to CSV file."""
        os.makedirs(self.cfg.output_dir, exist_ok=True)
        filepath = os.path.join(self.cfg.output_dir, filename)

        with open(filepath, "w", newline="") as f:
            if self.results:
                writer = csv.DictWriter(f, fieldnames=self.results[0].to_dict().keys())
                writer.writeheader()
                for result in self.results:
                    writer.writerow(result.to_dict())

        print(f"\nResults saved to: {filepath}")
        return filepath


# =============================================================================
# Result Printer
# =============================================================================

def print_summary(results: List[OperationStats]) -> None:
    """Print a summary table of results."""
    print()
    print("=" * 80)
    print("BENCHMARK SUMMARY")
    print("=" * 80)

    for op in ["radius_search", "nearest_search"]:
        print(f"\n{op.upper()} (distance evaluations per query):")
        print("-" * 70)
        print(f"{'Index Size':<15} {'BK-map (mean)':<15} {'Scan (mean)':<15} {'Evaluated':<15}")
        print("-" * 70)

        index_sizes = sorted(set(r.index_size for r in results))

        for size in index_sizes:
            tree_result = next((r for r in results if r.operation == op and r.method == "BK-map" and r.index_size == size), None)
            scan_result = next((r for r in results if r.operation == op and r.method == "Linear scan" and r.index_size == size), None)

            tree_mean = f"{tree_result.mean_evaluations:.2f}" if tree_result else "N/A"
            scan_mean = f"{scan_result.mean_evaluations:.2f}" if scan_result else "N/A"

            if tree_result and scan_result and scan_result.mean_evaluations:
                ratio = tree_result.mean_evaluations / scan_result.mean_evaluations
                ratio_str = f"{ratio:.1%}"
            else:
                ratio_str = "N/A"

            print(f"{size:<15} {tree_mean:<15} {scan_mean:<15} {ratio_str:<15}")

    build = [r for r in results if r.operation == "build"]
    if build:
        print("\nBUILD (distance evaluations per insert):")
        print("-" * 70)
        for r in sorted(build, key=lambda r: r.index_size):
            print(f"{r.index_size:<15} mean={r.mean_evaluations:.2f} max={r.max_evaluations}")


# =============================================================================
# Main
# =============================================================================

def main():
    """Main entry point for benchmark."""
    parser = argparse.ArgumentParser(description="BK-map Benchmark System")
    parser.add_argument("--quick", action="store_true", help="Run quick benchmark with smaller parameters")
    parser.add_argument("--output", type=str, default="benchmark_results.csv", help="Output CSV filename")
    args = parser.parse_args()

    # Select configuration
    if args.quick:
        print("Running QUICK benchmark (smaller parameters)...")
        cfg = QuickBenchmarkConfig()
    else:
        print("Running FULL benchmark...")
        cfg = BenchmarkConfig()

    print(f"Configuration:")
    print(f"  Index sizes: {cfg.index_sizes}")
    print(f"  Queries per search: {cfg.num_queries}")
    print(f"  Radius: {cfg.radius}")
    print(f"  Nearest count: {cfg.nearest_count}")
    print(f"  Random seed: {cfg.seed}")

    # Run benchmarks
    start_time = time.time()

    runner = BenchmarkRunner(cfg)
    results = runner.run_all()

    elapsed = time.time() - start_time
    print(f"\nBenchmark completed in {elapsed:.1f} seconds")

    # Save results
    runner.save_results(args.output)

    # Print summary
    print_summary(results)

    # Clear cache
    clear_cache()

    return 1 if runner.mismatches else 0


if __name__ == "__main__":
    sys.exit(main())
