"""Utility functions for testing BST invariants."""

import logging
from rank_trees.bst_base import (
    BSTBase,
    Stats
)

TREE_FLAGS = (
    "is_search_tree",
    "sizes_consistent",
    "root_size_matches",
)

def assert_tree_invariants_tc(tc, t: BSTBase, stats: Stats) -> None:
    """TestCase version: use inside unittest.TestCase methods."""
    for flag in TREE_FLAGS:
        tc.assertTrue(
            getattr(stats, flag),
            f"Invariant failed: {flag} is False\n{t.print_structure()}"
        )

    tc.assertEqual(
        t.size(), stats.node_count,
        f"Invariant failed: size()={t.size()} ≠ node_count={stats.node_count}"
    )
    if not t.is_empty():
        tc.assertGreater(
            stats.height, 0,
            f"Invariant failed: height={stats.height} ≤ 0 for non-empty tree"
        )
        tc.assertGreater(
            stats.leaf_count, 0,
            f"Invariant failed: leaf_count={stats.leaf_count} ≤ 0 for non-empty tree"
        )
        tc.assertEqual(stats.least_key, t.min(),
                       f"Invariant failed: least_key={stats.least_key!r} ≠ min()={t.min()!r}")
        tc.assertEqual(stats.greatest_key, t.select(t.size() - 1),
                       f"Invariant failed: greatest_key={stats.greatest_key!r} is not the last key")


class InvariantError(Exception):
    """Raised when a BST invariant is violated."""
    pass


def assert_tree_invariants_raise(t: BSTBase, stats: Stats) -> None:
    """Check all invariants, raising on the first failure."""
    for flag in TREE_FLAGS:
        if not getattr(stats, flag):
            logging.error(f"Invariant failed: {flag} is False")
            raise InvariantError(f"{flag} is False")

    if t.size() != stats.node_count:
        logging.error(f"Invariant failed: size()={t.size()} ≠ node_count={stats.node_count}")
        raise InvariantError("size() does not match the node count")
