"""
BK-Map - Main Demo

Simple demonstration of the BK-map: build an index from the term dataset,
merge duplicate terms, run radius and nearest-neighbour searches, and
export the tree state.

For proper experimental evaluation, use the benchmark system (evaluation/benchmark.py).

Usage:
    python main.py
"""

import json
import sys

from bkmap import config
from bkmap.common.data_loader import get_all_records, get_dataset_stats
from bkmap.common.logger import get_logger
from bkmap.indexing.bk_map import ABSENT, BKMap
from bkmap.indexing.state import export_state, restore_state
from bkmap.metrics.base import CountingMetric
from bkmap.metrics.levenshtein import Levenshtein

logger = get_logger("bkmap.demo")


def print_header(title: str) -> None:
    """Print a section header."""
    print()
    print("=" * 60)
    print(title)
    print("=" * 60)


def print_matches(matches) -> None:
    """Print (distance, key, value) matches, one per line."""
    if not matches:
        print("    (no matches)")
    for distance, key, value in matches:
        frequency = value.get("frequency", "N/A") if isinstance(value, dict) else value
        print(f"    d={distance:<3} {key:<12} frequency: {frequency}")


def merge_counts(stored, incoming):
    """Combine callback: start a fresh count or add to the stored one."""
    if stored is ABSENT:
        return dict(incoming, occurrences=1)
    stored["occurrences"] += 1
    stored["frequency"] += incoming["frequency"]
    return stored


def main():
    """
    Main demo function.

    Demonstrates all BK-map operations with the bundled term dataset.
    """
    print_header("BK-MAP - DEMO")
    print("Demonstrating fuzzy lookup with a BK-tree keyed by edit distance")
    print("For experimental evaluation, run: python -m evaluation.benchmark")

    # =========================================================================
    # 1. Dataset Info
    # =========================================================================
    print_header("1. DATASET")

    stats = get_dataset_stats()
    print(f"Total rows: {stats['total_rows']:,}")
    print(f"Unique terms: {stats['unique_terms']:,}")
    print(f"Mean term length: {stats['mean_term_length']:.2f}")

    records = get_all_records()

    # =========================================================================
    # 2. Build Index
    # =========================================================================
    print_header("2. BUILD INDEX")

    metric = CountingMetric(Levenshtein())
    index = BKMap(metric=metric)

    for record in records:
        index.insert_and_transform(record.term, record.attributes, merge_counts)

    build_calls = metric.reset()
    merged = [key for key, value in index.items() if value["occurrences"] > 1]
    print(f"Inserted {len(records)} records as {len(index)} entries")
    print(f"  Distance evaluations: {build_calls} (tree depth: {index.depth()})")
    print(f"  Merged duplicates: {', '.join(merged) if merged else 'none'}")

    # =========================================================================
    # 3. Exact Lookup
    # =========================================================================
    print_header("3. EXACT LOOKUP")

    for term in ["book", "mitten", "bok"]:
        value = index.get(term)
        status = f"found (frequency: {value['frequency']})" if value else "NOT FOUND"
        print(f"  '{term}' - {status}")

    # =========================================================================
    # 4. Radius Search
    # =========================================================================
    print_header("4. RADIUS SEARCH")

    radius = config.DEFAULT_SEARCH_RADIUS
    for query in ["bok", "kiten", "cart"]:
        matches = sorted(index.search_within(query, radius))
        calls = metric.reset()
        print(f"  '{query}' within {radius}: {len(matches)} matches, "
              f"{calls}/{len(index)} distance evaluations")
        print_matches(matches)

    # =========================================================================
    # 5. Nearest Search
    # =========================================================================
    print_header("5. NEAREST SEARCH")

    count = config.DEFAULT_NEAREST_COUNT
    for query in ["bok", "sitten"]:
        matches = index.search_nearest(query, count)
        calls = metric.reset()
        print(f"  '{query}' nearest {count}: {len(matches)} matches (boundary ties kept), "
              f"{calls}/{len(index)} distance evaluations")
        print_matches(matches)

    # =========================================================================
    # 6. Weighted Costs
    # =========================================================================
    print_header("6. WEIGHTED COSTS")

    # Insertion and deletion must cost the same to keep the distance symmetric.
    weighted = BKMap(metric=Levenshtein(insertion_cost=2, deletion_cost=2, substitution_cost=3))
    weighted.update((record.term, record.attributes) for record in records)

    print("Insertions and deletions cost 2, substitutions 3:")
    print_matches(weighted.search_nearest("kiten", 3))

    # =========================================================================
    # 7. Compact
    # =========================================================================
    print_header("7. COMPACT")

    before = index.allocated_capacity()
    index.compact()
    after = index.allocated_capacity()
    print(f"Child slots: {before} allocated before compact, {after} after "
          f"({len(index) - 1} edges)")

    # =========================================================================
    # 8. Export / Restore
    # =========================================================================
    print_header("8. EXPORT / RESTORE")

    payload = json.dumps(export_state(index))
    restored = restore_state(json.loads(payload))
    same = sorted(restored.search_within("bok", radius)) == sorted(index.search_within("bok", radius))
    print(f"Exported state: {len(payload):,} bytes of JSON")
    print(f"Restored {len(restored)} entries, searches agree: {same}")

    # =========================================================================
    # 9. Summary
    # =========================================================================
    print_header("9. SUMMARY")

    print("All operations completed successfully!")
    print()
    print("Note: This is a simple demo with small data.")
    print("For proper experimental evaluation with statistics, run:")
    print("  python -m evaluation.benchmark")

    index.clear()

    return 0


if __name__ == "__main__":
    sys.exit(main())
