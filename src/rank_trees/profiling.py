"""
Timing of whole-tree operations.

Operations such as balance, linearize and copy touch every node once, so
each measurement is stored together with the node count of the tree it ran
on. Seconds per node should then stay flat as trees grow; a figure that
climbs with the tree size points at super-linear work.
"""

import time
import functools
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass, field
import statistics
from collections import defaultdict

NodeCounter = Callable[..., int]


@dataclass(frozen=True)
class Measurement:
    """One timed call and the number of nodes it worked on."""
    elapsed: float
    nodes: int = 0

    @property
    def per_node(self) -> Optional[float]:
        return self.elapsed / self.nodes if self.nodes else None


@dataclass
class OperationMetrics:
    """All measurements recorded under one operation tag."""
    measurements: List[Measurement] = field(default_factory=list)

    def add_measurement(self, elapsed: float, nodes: int = 0) -> None:
        self.measurements.append(Measurement(elapsed, nodes))

    @property
    def call_count(self) -> int:
        return len(self.measurements)

    @property
    def total_time(self) -> float:
        return sum(m.elapsed for m in self.measurements)

    @property
    def total_nodes(self) -> int:
        return sum(m.nodes for m in self.measurements)

    @property
    def largest_tree(self) -> int:
        return max((m.nodes for m in self.measurements), default=0)

    @property
    def median_time(self) -> float:
        if not self.measurements:
            return 0.0
        return statistics.median(m.elapsed for m in self.measurements)

    @property
    def time_per_node(self) -> float:
        """Total seconds divided by total nodes; 0.0 when no nodes were counted."""
        nodes = self.total_nodes
        return self.total_time / nodes if nodes else 0.0

    def per_node_by_size(self) -> Dict[int, float]:
        """
        Median seconds per node for every tree size measured, ascending by size.

        Calls on empty trees (or without a node count) are left out.
        """
        groups: Dict[int, List[float]] = defaultdict(list)
        for m in self.measurements:
            if m.nodes:
                groups[m.nodes].append(m.per_node)
        return {n: statistics.median(groups[n]) for n in sorted(groups)}

    def __str__(self) -> str:
        return (f"Calls: {self.call_count}, "
                f"Nodes: {self.total_nodes}, "
                f"Total: {self.total_time:.6f}s, "
                f"Per node: {self.time_per_node * 1e9:.1f}ns")


class PerformanceTracker:
    """Process-wide collector of operation timings."""

    _instance = None

    @classmethod
    def get_instance(cls) -> 'PerformanceTracker':
        """Singleton accessor."""
        if cls._instance is None:
            cls._instance = PerformanceTracker()
        return cls._instance

    def __init__(self):
        self.metrics: Dict[str, OperationMetrics] = defaultdict(OperationMetrics)
        self.enabled = True

    def add_measurement(self, operation: str, elapsed: float, nodes: int = 0) -> None:
        if self.enabled:
            self.metrics[operation].add_measurement(elapsed, nodes)

    def reset(self) -> None:
        self.metrics.clear()

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def report(self, sort_by: str = 'total_time') -> str:
        """
        Render the collected metrics as a fixed-width text table.

        Args:
            sort_by: Any OperationMetrics attribute (``total_time``,
                ``time_per_node``, ``call_count``, ...). Rows are sorted descending.
        """
        if not self.metrics:
            return "No performance data collected."

        header = (f"{'Operation':<24} {'Calls':>7} {'Nodes':>10} {'Largest':>9} "
                  f"{'Total (s)':>11} {'Median (s)':>11} {'ns/node':>9}")
        lines = ["Performance Metrics:", "-" * len(header), header, "-" * len(header)]

        rows = sorted(
            self.metrics.items(),
            key=lambda kv: getattr(kv[1], sort_by),
            reverse=True
        )
        for operation, m in rows:
            lines.append(f"{operation:<24} {m.call_count:>7} {m.total_nodes:>10} {m.largest_tree:>9} "
                         f"{m.total_time:>11.6f} {m.median_time:>11.6f} {m.time_per_node * 1e9:>9.1f}")

        return "\n".join(lines)


def track_performance(method: Optional[Callable] = None, *,
                      tag: Optional[str] = None,
                      nodes: Optional[NodeCounter] = None) -> Callable:
    """
    Decorator recording the wall-clock time of each call.

    Args:
        method: The function to track
        tag: Optional name to record under instead of the qualified name
        nodes: Optional callable receiving the call's arguments and returning
            the number of nodes the call works on. It is evaluated before the
            call, so operations that shrink the tree report their input size.

    Returns:
        The wrapped function
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            tracker = PerformanceTracker.get_instance()
            if not tracker.enabled:
                return func(*args, **kwargs)

            operation = tag or func.__qualname__
            count = nodes(*args, **kwargs) if nodes is not None else 0
            start_time = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                tracker.add_measurement(operation, time.perf_counter() - start_time, count)
        return wrapper

    # Support both @track_performance and @track_performance(tag="name")
    if method is None:
        return decorator
    return decorator(method)
