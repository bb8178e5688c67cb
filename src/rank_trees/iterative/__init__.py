"""
Iterative order-statistics BSTs.

This package provides a BST variant whose lookup, insertion, deletion,
order-statistics, linearization, traversal and copy paths use loops and
explicit stacks, so degenerate trees are not bounded by the recursion limit.
"""

from rank_trees.iterative.iterative_base import IterativeBSTBase

__all__ = [
    'IterativeBSTBase',
]
