"""Order-statistics BST base implementation"""

from __future__ import annotations
import copy as _copy
import logging
import operator
from typing import Any, Callable, Iterable, Iterator, Optional, Tuple, Type
from dataclasses import dataclass

from rank_trees.base import (
    AbstractOrderedSet,
    EmptyContainerError,
    OutOfRangeError,
    NOT_FOUND,
    Visitor,
)
from rank_trees.profiling import (
    track_performance,
    PerformanceTracker
)

# Configure logging
logger = logging.getLogger(__name__)
# Clear all handlers to ensure we don't add duplicates
if logger.hasHandlers():
    logger.handlers.clear()
handler = logging.StreamHandler()
formatter = logging.Formatter('%(asctime)s [%(levelname)s] %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(logging.INFO)
# Prevent propagation to the root logger to avoid duplicate logs
logger.propagate = False

# Log tree statistics after every rebalance
DEBUG = False


class BSTNodeBase:
    """
    Node of an order-statistics BST.

    Attributes:
        key: Set once at construction and never reassigned.
        left (Optional[BSTNodeBase]): Subtree of smaller keys.
        right (Optional[BSTNodeBase]): Subtree of greater keys.
        size (int): Number of nodes in the subtree rooted here.
    """
    __slots__ = ("key", "left", "right", "size")

    def __init__(self, key: Any) -> None:
        self.key = key
        self.left: Optional[BSTNodeBase] = None
        self.right: Optional[BSTNodeBase] = None
        self.size = 1

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self.key!r}, size={self.size})"


def node_size(node: Optional[BSTNodeBase]) -> int:
    return node.size if node is not None else 0


def tree_node_count(tree: BSTBase, *args, **kwargs) -> int:
    """Node count of the tree a tracked method is called on."""
    return node_size(tree.root)


class BSTBase(AbstractOrderedSet):
    """
    A binary search tree whose nodes cache their subtree size.

    Every operation enters through ``root``. Recursive helpers take a subtree
    root and return the (possibly different) root the caller must store, so no
    helper ever writes into a slot owned by someone else.

    Attributes:
        root (Optional[BSTNodeBase]): The root node, None if the tree is empty.
    """
    __slots__ = ("root",)

    # Overridden by the factory
    NodeClass: Type[BSTNodeBase] = BSTNodeBase

    def __init__(self, root: Optional[BSTNodeBase] = None):
        self.root: Optional[BSTNodeBase] = root

    @classmethod
    def from_keys(cls, keys: Iterable[Any]) -> BSTBase:
        """Build a tree by inserting ``keys`` in iteration order."""
        tree = cls()
        for key in keys:
            tree.insert(key)
        return tree

    def is_empty(self) -> bool:
        return self.root is None

    def __str__(self):
        if self.is_empty():
            return f"Empty {self.__class__.__name__}"
        return f"{self.__class__.__name__}(size={self.size()}, root={self.root!r})"

    __repr__ = __str__

    # Public API
    def size(self) -> int:
        """Number of keys in the tree, O(1)."""
        return node_size(self.root)

    def contains(self, key: Any) -> bool:
        """
        Search for ``key``.

        Returns:
            bool: True if the key is present, False otherwise.
        """
        return self._contains(self.root, key)

    def insert(self, key: Any) -> bool:
        """
        Insert a key (average-case O(log n), worst case O(n)).

        Args:
            key: The key to insert. Must be ordered against the existing keys.

        Returns:
            bool: True if a node was created, False if the key was present.

        Raises:
            TypeError: If key is None.
        """
        if key is None:
            raise TypeError("insert(): key must not be None")
        self.root, inserted = self._insert(self.root, key)
        return inserted

    def min(self) -> Any:
        """
        Return the smallest key.

        Raises:
            EmptyContainerError: If the tree is empty.
        """
        node = self.root
        if node is None:
            raise EmptyContainerError("min(): tree is empty")
        while node.left is not None:
            node = node.left
        return node.key

    def delete_min(self) -> Any:
        """
        Remove the node holding the smallest key and return that key.

        Raises:
            EmptyContainerError: If the tree is empty.
        """
        if self.root is None:
            raise EmptyContainerError("delete_min(): tree is empty")
        self.root, smallest = self._detach_min(self.root)
        return smallest.key

    def delete_element(self, key: Any) -> bool:
        """
        Remove ``key`` using Hibbard deletion.

        A node with two children is replaced by the minimum node of its right
        subtree; the replacement always comes from the right side.

        Returns:
            bool: True if the key was removed, False if it was absent.
        """
        self.root, removed = self._delete(self.root, key)
        if removed:
            logger.debug(f"delete_element(): removed {key!r}, size now {self.size()}")
        return removed

    def select(self, n: int) -> Any:
        """
        Return the key at 0-based in-order position ``n``.

        Raises:
            TypeError: If n is not an integer.
            OutOfRangeError: If n is not in [0, size()).
        """
        n = _as_position("select", n)
        size = self.size()
        if n < 0 or n >= size:
            raise OutOfRangeError(f"select(): position {n} out of range for size {size}")
        return self._select(self.root, n)

    nth_element = select

    def rank(self, key: Any) -> int:
        """
        Return the number of keys strictly smaller than ``key``.

        Returns:
            int: Position of the key in [0, size()), or NOT_FOUND if absent.
        """
        return self._rank(self.root, key)

    @track_performance(tag="BST.linearize", nodes=tree_node_count)
    def linearize(self) -> None:
        """
        Rewire the tree into an ascending chain linked through ``right``.

        All ``left`` links become None. Each node's size becomes its 1-based
        position counted from the tail, which is its subtree size in the chain.
        """
        self.root, _ = self._linearize(self.root)

    @track_performance(tag="BST.balance", nodes=tree_node_count)
    def balance(self) -> None:
        """
        Rebuild the tree to height ceil(log2(n+1)) in O(n).

        Nodes are reused; the in-order key sequence is unchanged.
        """
        head, count = self._linearize(self.root)
        self.root, rest = self._arborize(head, count)
        if rest is not None:
            raise RuntimeError(
                f"balance(): {node_size(rest)} nodes left over after rebuilding {count}"
            )
        logger.debug(f"balance(): rebuilt {count} nodes, height {self.height()}")
        if DEBUG:
            logger.debug(f"balance(): stats {tree_stats_(self)}")

    def height(self) -> int:
        """Number of nodes on the longest root-to-leaf path, 0 if empty."""
        return self._height(self.root)

    def visit_pre_order(self, fn: Visitor) -> None:
        """Call ``fn(key)`` for every node, node before its subtrees."""
        self._visit_pre_order(self.root, fn)

    def visit_in_order(self, fn: Visitor) -> None:
        """Call ``fn(key)`` for every node in ascending key order."""
        self._visit_in_order(self.root, fn)

    def visit_post_order(self, fn: Visitor) -> None:
        """Call ``fn(key)`` for every node, subtrees before the node."""
        self._visit_post_order(self.root, fn)

    def __iter__(self) -> Iterator[Any]:
        stack = []
        node = self.root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.key
            node = node.right

    # Value semantics
    @track_performance(tag="BST.copy", nodes=tree_node_count)
    def copy(self) -> BSTBase:
        """Return an independent tree with freshly allocated nodes."""
        return type(self)(self._clone(self.root))

    def __copy__(self) -> BSTBase:
        return self.copy()

    def __deepcopy__(self, memo) -> BSTBase:
        return type(self)(self._clone(self.root, lambda key: _copy.deepcopy(key, memo)))

    def assign(self, other: BSTBase) -> BSTBase:
        """
        Replace the content with a copy of ``other``.

        The clone is completed before the current root is dropped, so an
        exception while cloning leaves this tree unchanged.
        """
        if other is self:
            return self
        new_root = other._clone(other.root)
        self.root = new_root
        return self

    def take(self, other: BSTBase) -> BSTBase:
        """Move ``other``'s nodes into this tree in O(1); ``other`` ends up empty."""
        if other is self:
            return self
        self.root, other.root = other.root, None
        return self

    def swap(self, other: BSTBase) -> None:
        """Exchange contents with ``other`` in O(1)."""
        self.root, other.root = other.root, self.root

    def clear(self) -> None:
        self.root = None

    @classmethod
    def get_performance_report(cls, sort_by: str = 'total_time') -> str:
        return PerformanceTracker.get_instance().report(sort_by)

    @classmethod
    def reset_performance_metrics(cls) -> None:
        PerformanceTracker.get_instance().reset()

    # Private Methods
    def _contains(self, node: Optional[BSTNodeBase], key: Any) -> bool:
        if node is None:
            return False
        if key < node.key:
            return self._contains(node.left, key)
        if node.key < key:
            return self._contains(node.right, key)
        return True

    def _insert(
        self, node: Optional[BSTNodeBase], key: Any
    ) -> Tuple[BSTNodeBase, bool]:
        """
        Insert into the subtree rooted at ``node``.

        Returns:
            (new_root, inserted): the subtree root to store back and whether a
            node was created. Sizes along the path grow only when inserted.
        """
        if node is None:
            return self.NodeClass(key), True
        if key < node.key:
            node.left, inserted = self._insert(node.left, key)
        elif node.key < key:
            node.right, inserted = self._insert(node.right, key)
        else:
            return node, False
        if inserted:
            node.size += 1
        return node, inserted

    def _detach_min(
        self, node: Optional[BSTNodeBase]
    ) -> Tuple[Optional[BSTNodeBase], BSTNodeBase]:
        """
        Unlink the leftmost node of the subtree rooted at ``node``.

        Every node passed on the way down loses one from its size. The
        leftmost node's right child takes its place.

        Returns:
            (new_root, smallest): the remaining subtree and the detached node,
            which is returned as a standalone node of size 1.

        Raises:
            EmptyContainerError: If the subtree is empty.
        """
        if node is None:
            raise EmptyContainerError("_detach_min(): subtree is empty")
        if node.left is None:
            rest = node.right
            node.right = None
            node.size = 1
            return rest, node
        node.left, smallest = self._detach_min(node.left)
        node.size -= 1
        return node, smallest

    def _delete(
        self, node: Optional[BSTNodeBase], key: Any
    ) -> Tuple[Optional[BSTNodeBase], bool]:
        if node is None:
            return None, False
        if key < node.key:
            node.left, removed = self._delete(node.left, key)
        elif node.key < key:
            node.right, removed = self._delete(node.right, key)
        else:
            return self._splice_out(node), True
        if removed:
            node.size -= 1
        return node, removed

    def _splice_out(self, node: BSTNodeBase) -> Optional[BSTNodeBase]:
        """
        Compute the subtree that replaces ``node`` once it is removed, then
        release ``node``'s links.
        """
        if node.right is None:
            replacement = node.left
        elif node.left is None:
            replacement = node.right
        else:
            rest, successor = self._detach_min(node.right)
            successor.left = node.left
            successor.right = rest
            successor.size = node.size - 1
            replacement = successor
        node.left = node.right = None
        return replacement

    def _select(self, node: BSTNodeBase, n: int) -> Any:
        s = node_size(node.left)
        if n < s:
            return self._select(node.left, n)
        if n > s:
            return self._select(node.right, n - s - 1)
        return node.key

    def _rank(self, node: Optional[BSTNodeBase], key: Any) -> int:
        if node is None:
            return NOT_FOUND
        if key < node.key:
            return self._rank(node.left, key)
        if node.key < key:
            r = self._rank(node.right, key)
            if r == NOT_FOUND:
                return NOT_FOUND
            return r + node_size(node.left) + 1
        return node_size(node.left)

    def _linearize(
        self,
        node: Optional[BSTNodeBase],
        head: Optional[BSTNodeBase] = None,
        count: int = 0
    ) -> Tuple[Optional[BSTNodeBase], int]:
        """
        Thread the subtree at ``node`` in front of the chain starting at ``head``.

        Reverse in-order walk: the right subtree is linked first so the chain is
        built from its tail. ``count`` only ever grows by one per linked node
        and is stored into that node's size.

        Returns:
            (head, count): the new chain head (smallest key) and running count.
        """
        if node is None:
            return head, count
        left = node.left
        head, count = self._linearize(node.right, head, count)
        node.right = head
        node.left = None
        head = node
        count += 1
        node.size = count
        return self._linearize(left, head, count)

    def _arborize(
        self, head: Optional[BSTNodeBase], count: int
    ) -> Tuple[Optional[BSTNodeBase], Optional[BSTNodeBase]]:
        """
        Build a balanced subtree from the first ``count`` nodes of a chain.

        Returns:
            (root, head): the subtree root and the first unconsumed chain node.
        """
        if count == 0:
            return None, head
        left_count = (count - 1) // 2
        right_count = count - left_count - 1
        left, head = self._arborize(head, left_count)
        root = head
        head = head.right
        right, head = self._arborize(head, right_count)
        root.left = left
        root.right = right
        root.size = left_count + right_count + 1
        return root, head

    def _height(self, node: Optional[BSTNodeBase]) -> int:
        if node is None:
            return 0
        return 1 + max(self._height(node.left), self._height(node.right))

    def _visit_pre_order(self, node: Optional[BSTNodeBase], fn: Visitor) -> None:
        if node is None:
            return
        fn(node.key)
        self._visit_pre_order(node.left, fn)
        self._visit_pre_order(node.right, fn)

    def _visit_in_order(self, node: Optional[BSTNodeBase], fn: Visitor) -> None:
        if node is None:
            return
        self._visit_in_order(node.left, fn)
        fn(node.key)
        self._visit_in_order(node.right, fn)

    def _visit_post_order(self, node: Optional[BSTNodeBase], fn: Visitor) -> None:
        if node is None:
            return
        self._visit_post_order(node.left, fn)
        self._visit_post_order(node.right, fn)
        fn(node.key)

    def _clone(
        self,
        node: Optional[BSTNodeBase],
        copy_key: Optional[Callable[[Any], Any]] = None
    ) -> Optional[BSTNodeBase]:
        if node is None:
            return None
        clone = self.NodeClass(copy_key(node.key) if copy_key else node.key)
        clone.size = node.size
        clone.left = self._clone(node.left, copy_key)
        clone.right = self._clone(node.right, copy_key)
        return clone

    def print_structure(self, indent: int = 0, max_depth: int = 8) -> str:
        """Indented dump of the tree, right subtrees listed after left ones."""
        if self.is_empty():
            return f"{' ' * indent}Empty {self.__class__.__name__}"

        result = []

        def _dump(node, label, depth):
            prefix = ' ' * (indent + 4 * depth)
            if node is None:
                result.append(f"{prefix}{label}: Empty")
                return
            if depth > max_depth:
                result.append(f"{prefix}... (max depth reached)")
                return
            result.append(f"{prefix}{label}: {node.__class__.__name__}(key={node.key!r}, size={node.size})")
            if node.left is None and node.right is None:
                return
            _dump(node.left, "Left", depth + 1)
            _dump(node.right, "Right", depth + 1)

        _dump(self.root, "Root", 0)
        return "\n".join(result)


def _as_position(op: str, n: Any) -> int:
    try:
        return operator.index(n)
    except TypeError:
        raise TypeError(f"{op}(): position must be an int, got {n!r}") from None


@dataclass
class Stats:
    node_count: int
    height: int
    leaf_count: int
    least_key: Optional[Any]
    greatest_key: Optional[Any]
    is_search_tree: bool
    sizes_consistent: bool
    root_size_matches: bool


def tree_stats_(t: Optional[BSTBase]) -> Stats:
    """
    Returns aggregated statistics for a BST in **O(n)** time.

    Walks the nodes with an explicit post-order stack so that degenerate
    chains of any length can be checked.
    """
    # ---------- empty tree return ---------------------------------
    if t is None or t.is_empty():
        return Stats(node_count        = 0,
                     height            = 0,
                     leaf_count        = 0,
                     least_key         = None,
                     greatest_key      = None,
                     is_search_tree    = True,
                     sizes_consistent  = True,
                     root_size_matches = True)

    # id(node) -> (count, height, least_key, greatest_key)
    done = {}
    is_search_tree = True
    sizes_consistent = True
    leaf_count = 0

    stack = [(t.root, False)]
    while stack:
        node, expanded = stack.pop()
        if not expanded:
            stack.append((node, True))
            if node.right is not None:
                stack.append((node.right, False))
            if node.left is not None:
                stack.append((node.left, False))
            continue

        count, height = 1, 0
        least = greatest = node.key
        if node.left is not None:
            l_count, l_height, l_least, l_greatest = done.pop(id(node.left))
            count += l_count
            height = max(height, l_height)
            least = l_least
            if not l_greatest < node.key:
                is_search_tree = False
        if node.right is not None:
            r_count, r_height, r_least, r_greatest = done.pop(id(node.right))
            count += r_count
            height = max(height, r_height)
            greatest = r_greatest
            if not node.key < r_least:
                is_search_tree = False
        if node.left is None and node.right is None:
            leaf_count += 1
        if node.size != count:
            sizes_consistent = False
        done[id(node)] = (count, height + 1, least, greatest)

    node_count, height, least, greatest = done[id(t.root)]
    return Stats(node_count=node_count,
                 height=height,
                 leaf_count=leaf_count,
                 least_key=least,
                 greatest_key=greatest,
                 is_search_tree=is_search_tree,
                 sizes_consistent=sizes_consistent,
                 root_size_matches=(t.root.size == node_count))
