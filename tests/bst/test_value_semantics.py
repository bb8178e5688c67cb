"""Tests for copying, moving and swapping BSTs"""
# pylint: skip-file

import copy
from unittest.mock import patch

from tests.bst.base import TreeTestCase, SAMPLE_KEYS
from tests.stats_bst import iter_nodes, shape


class FragileKey:
    """Orderable key whose deep copy fails once ``budget`` copies were made."""
    budget = None

    def __init__(self, value):
        self.value = value

    def __lt__(self, other):
        return self.value < other.value

    def __eq__(self, other):
        return isinstance(other, FragileKey) and self.value == other.value

    def __hash__(self):
        return hash(self.value)

    def __deepcopy__(self, memo):
        if FragileKey.budget is not None:
            if FragileKey.budget == 0:
                raise MemoryError("out of copies")
            FragileKey.budget -= 1
        return FragileKey(self.value)


class TestCopy(TreeTestCase):
    def setUp(self):
        super().setUp()
        self._build(SAMPLE_KEYS)

    def tearDown(self):
        FragileKey.budget = None
        super().tearDown()

    def _assert_disjoint(self, a, b):
        ids_a = {id(node) for node in iter_nodes(a)}
        ids_b = {id(node) for node in iter_nodes(b)}
        self.assertFalse(ids_a & ids_b, "Copies must not share nodes")

    def test_copy_is_deep_and_equal(self):
        clone = self.tree.copy()
        self.assertIsInstance(clone, self.TreeClass)
        self.assertEqual(shape(clone), self._shape())
        self._assert_disjoint(self.tree, clone)

    def test_copy_module_protocol(self):
        for clone in (copy.copy(self.tree), copy.deepcopy(self.tree)):
            self.assertEqual(shape(clone), self._shape())
            self._assert_disjoint(self.tree, clone)

    def test_copy_is_independent(self):
        clone = self.tree.copy()
        clone.delete_element(5)
        clone.insert(100)
        clone.balance()
        self.assertEqual(list(self.tree), sorted(SAMPLE_KEYS))
        self.assertEqual(list(clone), [1, 3, 4, 7, 8, 9, 100])
        self.expected_size = 7

    def test_copy_of_empty_tree(self):
        self.tree.clear()
        clone = self.tree.copy()
        self.assertTrue(clone.is_empty())

    def test_deepcopy_failure_leaves_source_intact(self):
        self.tree.clear()
        self._build([FragileKey(k) for k in SAMPLE_KEYS])
        before = self._shape()
        FragileKey.budget = 3
        with self.assertRaises(MemoryError):
            copy.deepcopy(self.tree)
        self.assertEqual(self._shape(), before)


class TestAssignTakeSwap(TreeTestCase):
    def setUp(self):
        super().setUp()
        self._build(SAMPLE_KEYS)
        self.other = self.TreeClass.from_keys([20, 10, 30])

    def test_assign_replaces_content_with_copy(self):
        result = self.tree.assign(self.other)
        self.assertIs(result, self.tree)
        self.assertEqual(list(self.tree), [10, 20, 30])
        self.assertIsNot(self.tree.root, self.other.root)
        self.assertEqual(list(self.other), [10, 20, 30])
        self.expected_size = 3

    def test_assign_self_is_noop(self):
        root = self.tree.root
        self.tree.assign(self.tree)
        self.assertIs(self.tree.root, root)

    def test_failed_assign_keeps_previous_content(self):
        before = self._shape()
        with patch.object(self.TreeClass, "_clone", side_effect=MemoryError):
            with self.assertRaises(MemoryError):
                self.tree.assign(self.other)
        self.assertEqual(self._shape(), before)
        self.expected_keys = SAMPLE_KEYS

    def test_take_moves_nodes(self):
        other_root = self.other.root
        self.tree.take(self.other)
        self.assertIs(self.tree.root, other_root)
        self.assertTrue(self.other.is_empty())
        self.assertEqual(self.other.size(), 0)
        self.expected_keys = [10, 20, 30]

    def test_take_self_is_noop(self):
        self.tree.take(self.tree)
        self.expected_keys = SAMPLE_KEYS

    def test_swap(self):
        root, other_root = self.tree.root, self.other.root
        self.tree.swap(self.other)
        self.assertIs(self.tree.root, other_root)
        self.assertIs(self.other.root, root)
        self.assertEqual(list(self.other), sorted(SAMPLE_KEYS))
        self.expected_keys = [10, 20, 30]

    def test_clear(self):
        self.tree.clear()
        self.assertTrue(self.tree.is_empty())
        self.expected_size = 0


class TestCopyIterative(TestCopy):
    strategy = "iterative"


class TestAssignTakeSwapIterative(TestAssignTakeSwap):
    strategy = "iterative"
