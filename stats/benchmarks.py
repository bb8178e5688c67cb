#!/usr/bin/env python3
"""
Benchmarks for the rank-trees data structure.

This script measures:
 1. Tree build times from random keys, per strategy
 2. balance() on random trees and on degenerate chains, and its cost per node
 3. Per-query cost of select / rank / contains on balanced trees
 4. Per-insert and per-delete cost into trees of various sizes

Usage:
    python benchmarks.py [--sizes 100 1000 10000] [--trials T] [--queries Q] [--seed S]
"""
import argparse
import gc
import time
from dataclasses import asdict
from pprint import pprint
from statistics import mean, variance

import numpy as np
from tqdm import tqdm

from rank_trees.bst_base import BSTBase, tree_stats_
from rank_trees.factory import STRATEGIES, create_bst
from rank_trees.profiling import PerformanceTracker


def random_keys(rng: np.random.Generator, n: int, space: int = 1 << 24) -> list[int]:
    return [int(k) for k in rng.choice(space, size=n, replace=False)]


def bench_build(sizes: list[int], rng: np.random.Generator) -> None:
    """Measure building a tree from shuffled keys for every strategy."""
    for n in sizes:
        keys = random_keys(rng, n)
        for strategy in STRATEGIES:
            t0 = time.perf_counter()
            _ = create_bst(strategy, keys)
            elapsed = time.perf_counter() - t0
            print(f"[bench] build {strategy:<9} n={n:<7}: {elapsed:.4f}s")


def bench_balance(sizes: list[int], rng: np.random.Generator) -> None:
    """Balance random trees and (iterative only) ascending chains."""
    for n in sizes:
        tree = create_bst("iterative", random_keys(rng, n))
        before = tree.height()
        t0 = time.perf_counter()
        tree.balance()
        elapsed = time.perf_counter() - t0
        print(f"[bench] balance random n={n:<7}: {elapsed:.4f}s  height {before} -> {tree.height()}")

        chain = create_bst("iterative", range(n))
        t0 = time.perf_counter()
        chain.balance()
        elapsed = time.perf_counter() - t0
        print(f"[bench] balance chain  n={n:<7}: {elapsed:.4f}s  height {n} -> {chain.height()}")


def bench_balance_scaling(sizes: list[int], trials: int, rng: np.random.Generator) -> dict[int, float]:
    """
    Balance ``trials`` random trees per size and report the profiler's median
    seconds per node for each size. Linear rebuilding keeps the figure flat.
    """
    tracker = PerformanceTracker.get_instance()
    tracker.reset()
    for n in sizes:
        for _ in tqdm(range(trials), desc=f"balance n={n}", leave=False):
            create_bst("iterative", random_keys(rng, n)).balance()
    by_size = tracker.metrics["BST.balance"].per_node_by_size()
    for n, per_node in by_size.items():
        print(f"[bench] balance n={n:<7} → {per_node*1e9:8.1f} ns/node")
    if len(by_size) > 1:
        smallest, largest = min(by_size), max(by_size)
        print(f"[bench] per-node growth {smallest} → {largest}: "
              f"x{by_size[largest] / by_size[smallest]:.2f}")
    return by_size


def bench_largest_stats(n: int, rng: np.random.Generator) -> None:
    """Build one random tree and print its stats."""
    tree = create_bst("iterative", random_keys(rng, n))
    print(f"[bench] random tree n={n} stats:")
    pprint(asdict(tree_stats_(tree)))


def measure_queries(tree: BSTBase, rng: np.random.Generator, queries: int) -> dict[str, float]:
    """Average per-call time of select, rank and contains on ``tree``."""
    size = tree.size()
    positions = [int(p) for p in rng.integers(0, size, size=queries)]
    keys = [tree.select(p) for p in positions]

    results = {}
    gc.collect()
    gc.disable()
    try:
        for name, op, args in (
            ("select", tree.select, positions),
            ("rank", tree.rank, keys),
            ("contains", tree.contains, keys),
        ):
            t0 = time.perf_counter()
            for arg in args:
                op(arg)
            results[name] = (time.perf_counter() - t0) / queries
    finally:
        gc.enable()
    return results


def bench_queries(sizes: list[int], queries: int, rng: np.random.Generator) -> None:
    for n in sizes:
        tree = create_bst("iterative", random_keys(rng, n))
        tree.balance()
        for name, avg in measure_queries(tree, rng, queries).items():
            print(f"[bench] {name:<8} size {n:<7} → avg {avg*1e6:8.2f} µs")


def measure_single_update(n: int, trials: int, rng: np.random.Generator) -> tuple[float, float, float, float]:
    """
    Measure one insert and one delete into independent trees of ``n`` keys.
    Returns (insert_avg, insert_var, delete_avg, delete_var) in seconds.
    """
    trees, fresh, victims = [], [], []
    for _ in tqdm(range(trials), desc=f"prepare n={n}", leave=False):
        keys = random_keys(rng, n + 1)
        trees.append(create_bst("iterative", keys[:n]))
        fresh.append(keys[n])
        victims.append(keys[int(rng.integers(0, n))])

    gc.collect()
    gc.disable()
    try:
        insert_times, delete_times = [], []
        for tree, key, victim in zip(trees, fresh, victims):
            t0 = time.perf_counter()
            tree.insert(key)
            insert_times.append(time.perf_counter() - t0)
            t0 = time.perf_counter()
            tree.delete_element(victim)
            delete_times.append(time.perf_counter() - t0)
    finally:
        gc.enable()

    return mean(insert_times), variance(insert_times), mean(delete_times), variance(delete_times)


def bench_single_update(sizes: list[int], trials: int, rng: np.random.Generator) -> None:
    for n in sizes:
        ins_avg, ins_var, del_avg, del_var = measure_single_update(n, trials, rng)
        print(
            f"[bench] Insert into size {n:<7} → avg {ins_avg*1e6:8.2f} µs   σ²={ins_var*1e12:8.2f} µs²"
        )
        print(
            f"[bench] Delete from size {n:<7} → avg {del_avg*1e6:8.2f} µs   σ²={del_var*1e12:8.2f} µs²"
        )


def main():
    parser = argparse.ArgumentParser(description="rank-trees benchmarks")
    parser.add_argument("--sizes", nargs='+', type=int, default=[100, 1000, 10_000],
                        help="Tree sizes to benchmark")
    parser.add_argument("--trials", type=int, default=100,
                        help="Number of trees for single-update benchmarks")
    parser.add_argument("--queries", type=int, default=10_000,
                        help="Number of select/rank/contains calls per size")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the key generator")
    args = parser.parse_args()
    rng = np.random.default_rng(args.seed)

    print("\n=== Build ===")
    bench_build(args.sizes, rng)

    print("\n=== Balance ===")
    bench_balance(args.sizes, rng)

    print("\n=== Balance Cost per Node ===")
    bench_balance_scaling(args.sizes, max(1, args.trials // 10), rng)

    print("\n=== Random Tree Stats ===")
    bench_largest_stats(max(args.sizes), rng)

    print("\n=== Order-Statistics Queries ===")
    bench_queries(args.sizes, args.queries, rng)

    print("\n=== Single-Update Benchmarks ===")
    bench_single_update(args.sizes, args.trials, rng)

    print("\n=== Operation-Level Performance Breakdown ===")
    print(BSTBase.get_performance_report())
    BSTBase.reset_performance_metrics()

if __name__ == "__main__":
    main()
