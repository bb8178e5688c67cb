"""Explicit-stack variant of the order-statistics BST"""

from __future__ import annotations
import collections
from typing import Any, Callable, List, Optional, Tuple

from rank_trees.base import EmptyContainerError, NOT_FOUND, Visitor
from rank_trees.bst_base import BSTBase, BSTNodeBase, node_size


class IterativeBSTBase(BSTBase):
    """
    BST whose hot paths run as loops instead of recursion.

    Results are identical to BSTBase for every sequence of operations,
    including the shape produced by Hibbard deletion and balancing. Only
    stack usage differs: degenerate trees of any length stay within Python's
    recursion limit. Arborizing is inherited, its depth is logarithmic.
    """
    __slots__ = ()

    def _contains(self, node: Optional[BSTNodeBase], key: Any) -> bool:
        while node is not None:
            if key < node.key:
                node = node.left
            elif node.key < key:
                node = node.right
            else:
                return True
        return False

    def _insert(
        self, node: Optional[BSTNodeBase], key: Any
    ) -> Tuple[BSTNodeBase, bool]:
        if node is None:
            return self.NodeClass(key), True

        root = node
        path: List[BSTNodeBase] = []
        while True:
            path.append(node)
            if key < node.key:
                if node.left is None:
                    node.left = self.NodeClass(key)
                    break
                node = node.left
            elif node.key < key:
                if node.right is None:
                    node.right = self.NodeClass(key)
                    break
                node = node.right
            else:
                return root, False

        for ancestor in path:
            ancestor.size += 1
        return root, True

    def _detach_min(
        self, node: Optional[BSTNodeBase]
    ) -> Tuple[Optional[BSTNodeBase], BSTNodeBase]:
        if node is None:
            raise EmptyContainerError("_detach_min(): subtree is empty")
        if node.left is None:
            rest = node.right
            node.right = None
            node.size = 1
            return rest, node

        root = node
        parent = None
        while node.left is not None:
            node.size -= 1
            parent = node
            node = node.left
        parent.left = node.right
        node.right = None
        node.size = 1
        return root, node

    def _delete(
        self, node: Optional[BSTNodeBase], key: Any
    ) -> Tuple[Optional[BSTNodeBase], bool]:
        root = node
        parent = None
        path: List[BSTNodeBase] = []
        while node is not None:
            if key < node.key:
                parent = node
                node = node.left
            elif node.key < key:
                parent = node
                node = node.right
            else:
                break
            path.append(parent)

        if node is None:
            return root, False

        replacement = self._splice_out(node)
        if parent is None:
            return replacement, True
        if parent.left is node:
            parent.left = replacement
        else:
            parent.right = replacement
        for ancestor in path:
            ancestor.size -= 1
        return root, True

    def _select(self, node: BSTNodeBase, n: int) -> Any:
        while True:
            s = node_size(node.left)
            if n < s:
                node = node.left
            elif n > s:
                n -= s + 1
                node = node.right
            else:
                return node.key

    def _rank(self, node: Optional[BSTNodeBase], key: Any) -> int:
        smaller = 0
        while node is not None:
            if key < node.key:
                node = node.left
            elif node.key < key:
                smaller += node_size(node.left) + 1
                node = node.right
            else:
                return smaller + node_size(node.left)
        return NOT_FOUND

    def _linearize(
        self,
        node: Optional[BSTNodeBase],
        head: Optional[BSTNodeBase] = None,
        count: int = 0
    ) -> Tuple[Optional[BSTNodeBase], int]:
        # Reverse in-order: descend right first, link each popped node in front
        stack: List[BSTNodeBase] = []
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.right
            node = stack.pop()
            left = node.left
            node.left = None
            node.right = head
            head = node
            count += 1
            node.size = count
            node = left
        return head, count

    def _height(self, node: Optional[BSTNodeBase]) -> int:
        if node is None:
            return 0
        height = 0
        level = collections.deque([node])
        while level:
            height += 1
            for _ in range(len(level)):
                current = level.popleft()
                if current.left is not None:
                    level.append(current.left)
                if current.right is not None:
                    level.append(current.right)
        return height

    def _visit_pre_order(self, node: Optional[BSTNodeBase], fn: Visitor) -> None:
        stack = [node] if node is not None else []
        while stack:
            current = stack.pop()
            fn(current.key)
            if current.right is not None:
                stack.append(current.right)
            if current.left is not None:
                stack.append(current.left)

    def _visit_in_order(self, node: Optional[BSTNodeBase], fn: Visitor) -> None:
        stack: List[BSTNodeBase] = []
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            fn(node.key)
            node = node.right

    def _visit_post_order(self, node: Optional[BSTNodeBase], fn: Visitor) -> None:
        if node is None:
            return
        # Second stack collects nodes in reverse post-order
        stack = [node]
        out: List[BSTNodeBase] = []
        while stack:
            current = stack.pop()
            out.append(current)
            if current.left is not None:
                stack.append(current.left)
            if current.right is not None:
                stack.append(current.right)
        for current in reversed(out):
            fn(current.key)

    def _clone(
        self,
        node: Optional[BSTNodeBase],
        copy_key: Optional[Callable[[Any], Any]] = None
    ) -> Optional[BSTNodeBase]:
        if node is None:
            return None

        def _make(source):
            clone = self.NodeClass(copy_key(source.key) if copy_key else source.key)
            clone.size = source.size
            return clone

        root = _make(node)
        stack = [(node, root)]
        while stack:
            source, clone = stack.pop()
            if source.left is not None:
                clone.left = _make(source.left)
                stack.append((source.left, clone.left))
            if source.right is not None:
                clone.right = _make(source.right)
                stack.append((source.right, clone.right))
        return root
