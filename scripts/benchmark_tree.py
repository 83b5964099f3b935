"""Time tree calculation and helpers over generated datasets.

Prints mean timings for `calculate_tree`, child sorting and delay
computation, plus a scaling table: when the dataset size doubles the time
should roughly double too (linear), not quadruple.

Run:
    python scripts/benchmark_tree.py
"""
from pathlib import Path
import statistics
import sys
import time

# Ensure repo root is on sys.path when running this script directly
repo_root = Path(__file__).resolve().parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from familychart_py.animation import calculate_delay
from familychart_py.generators import (
    generate_deep_tree,
    generate_wide_tree,
    generate_complex_tree,
    generate_balanced_tree,
    generate_large_flat,
)
from familychart_py.hierarchy import calculate_tree
from familychart_py.sorting import sort_children_with_spouses
from familychart_py.store import Store


def measure(fn, iterations=10):
    times = []
    for _ in range(iterations):
        start = time.perf_counter()
        fn()
        times.append((time.perf_counter() - start) * 1000)
    return statistics.mean(times)


def fmt(ms):
    if ms < 1:
        return f"{ms * 1000:.2f}us"
    if ms < 1000:
        return f"{ms:.2f}ms"
    return f"{ms / 1000:.2f}s"


DATASETS = {
    "deep_small": lambda: generate_deep_tree(5),
    "deep_large": lambda: generate_deep_tree(20),
    "wide_medium": lambda: generate_wide_tree(3, 4, 3),
    "wide_large": lambda: generate_wide_tree(4, 5, 4),
    "complex_medium": lambda: generate_complex_tree(200),
    "complex_large": lambda: generate_complex_tree(500),
    "flat_large": lambda: generate_large_flat(1000),
    "flat_xxlarge": lambda: generate_large_flat(2000),
    "balanced_medium": lambda: generate_balanced_tree(6),
    "balanced_large": lambda: generate_balanced_tree(8),
}


def main():
    print("--- calculate_tree ---")
    for name, make in DATASETS.items():
        store = Store(make())
        main_id = store.ids()[0]
        tree = calculate_tree(store, main_id)
        mean = measure(lambda: calculate_tree(store, main_id))
        parents = [p for p in store if len(p.rels.children) > 1]
        sort_mean = measure(
            lambda: [
                sort_children_with_spouses([store.get_datum(c) for c in p.rels.children], p, store)
                for p in parents
            ]
        )
        delay_mean = measure(lambda: [calculate_delay(tree, n, 1000) for n in tree.nodes])
        print(
            f"{name:<16} | data {len(store):>5} | tree {len(tree):>5} | "
            f"tree {fmt(mean):>10} | sort {fmt(sort_mean):>10} | delays {fmt(delay_mean):>10}"
        )

    # every person of a balanced dataset is in the tree, so tree size doubles with depth
    print("\n--- scaling (balanced datasets, load + tree) ---")
    prev = None
    for depth in (6, 7, 8, 9, 10):
        records = generate_balanced_tree(depth)
        main_id = records[0]["id"]
        mean = measure(lambda: calculate_tree(Store(records), main_id), iterations=5)
        ratio = f"{mean / prev:.2f}x" if prev else "N/A"
        print(f"{len(records):>6} | {fmt(mean):>10} | {ratio:>8}")
        prev = mean


if __name__ == "__main__":
    main()
