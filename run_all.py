"""
BK-Map - Run All

One-click script that runs the tests, the demo, the benchmark, and generates plots.

Usage:
    python run_all.py          # Full run (tests + demo + full benchmark + plots)
    python run_all.py --quick  # Quick run (tests + demo + quick benchmark + plots)
"""

import argparse
import subprocess
import sys
import os
import time


def run_step(description, command):
    """Run a command and print its output."""
    print()
    print("=" * 60)
    print(f"  {description}")
    print("=" * 60)
    print(f"  Command: {' '.join(command)}")
    print()

    result = subprocess.run(command, cwd=os.path.dirname(os.path.abspath(__file__)))

    if result.returncode != 0:
        print(f"\n  [FAILED] {description} (exit code {result.returncode})")
        return False

    print(f"\n  [OK] {description}")
    return True


def main():
    parser = argparse.ArgumentParser(description="Run the full BK-map test, demo, benchmark, and visualization pipeline.")
    parser.add_argument("--quick", action="store_true", help="Run quick benchmark with smaller parameters")
    parser.add_argument("--skip-tests", action="store_true", help="Skip the test step")
    parser.add_argument("--skip-demo", action="store_true", help="Skip the demo step")
    parser.add_argument("--skip-benchmark", action="store_true", help="Skip the benchmark step (use existing results)")
    args = parser.parse_args()

    python = sys.executable
    start = time.time()

    print()
    print("########################################################")
    print("#        BK-Map - Fuzzy Lookup Evaluation              #")
    print("########################################################")
    mode = "QUICK" if args.quick else "FULL"
    print(f"  Mode: {mode}")
    print()

    # Step 1: Tests
    if not args.skip_tests:
        ok = run_step("Step 1/4: Tests", [python, "-m", "pytest", "tests", "-q"])
        if not ok:
            return 1

    # Step 2: Demo
    if not args.skip_demo:
        ok = run_step("Step 2/4: Demo (all BK-map operations)", [python, "main.py"])
        if not ok:
            return 1

    # Step 3: Benchmark
    if not args.skip_benchmark:
        bench_cmd = [python, "-m", "evaluation.benchmark"]
        if args.quick:
            bench_cmd.append("--quick")
        ok = run_step("Step 3/4: Benchmark (experimental evaluation)", bench_cmd)
        if not ok:
            return 1

    # Step 4: Visualization
    ok = run_step("Step 4/4: Generate plots", [python, "-m", "evaluation.visualize"])
    if not ok:
        return 1

    elapsed = time.time() - start

    print()
    print("=" * 60)
    print("  ALL DONE")
    print("=" * 60)
    print(f"  Total time: {elapsed:.1f} seconds")
    print()
    print("  Output files:")
    print("    results/benchmark_results.csv  - Raw benchmark data")
    print("    results/scalability_plot.png   - Evaluations vs index size")
    print("    results/pruning_bar_chart.png  - Share of index evaluated")
    print("    results/query_time.png         - Time per query")
    print("    results/summary_table.png      - Summary table")
    print()

    return 0


if __name__ == "__main__":
    sys.exit(main())
