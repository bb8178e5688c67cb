"""Tests for BST insert and lookup"""
# pylint: skip-file

from tests.bst.base import TreeTestCase, SAMPLE_KEYS


class TestInsertEmptyTree(TreeTestCase):
    def test_empty_tree_properties(self):
        self.assertTrue(self.tree.is_empty())
        self.assertEqual(self.tree.size(), 0)
        self.assertEqual(len(self.tree), 0)
        self.assertEqual(self.tree.height(), 0)
        self.assertFalse(self.tree.contains(1))
        self.assertEqual(str(self.tree), f"Empty {self.TreeClass.__name__}")
        self.expected_size = 0

    def test_insert_single_key(self):
        self.assertTrue(self.tree.insert(10))
        self.assertFalse(self.tree.is_empty())
        self.assertIsInstance(self.tree.root, self.NodeClass)
        self.assertEqual(self.tree.root.key, 10)
        self.assertEqual(self.tree.root.size, 1)
        self.assertIsNone(self.tree.root.left)
        self.assertIsNone(self.tree.root.right)
        self.expected_size = 1
        self.expected_keys = [10]

    def test_insert_none_raises(self):
        with self.assertRaises(TypeError):
            self.tree.insert(None)
        self.assertTrue(self.tree.is_empty())


class TestInsertSample(TreeTestCase):
    def setUp(self):
        super().setUp()
        self._build(SAMPLE_KEYS)

    def test_structure(self):
        root = self.tree.root
        self.assertEqual(root.key, 5)
        self.assertEqual(root.size, 7)
        self.assertEqual((root.left.key, root.left.size), (3, 3))
        self.assertEqual((root.right.key, root.right.size), (8, 3))
        self.assertEqual([root.left.left.key, root.left.right.key,
                          root.right.left.key, root.right.right.key], [1, 4, 7, 9])
        self.assertEqual(self.tree.height(), 3)
        self.expected_size = 7
        self.expected_keys = SAMPLE_KEYS

    def test_contains_present_keys(self):
        for key in SAMPLE_KEYS:
            with self.subTest(key=key):
                self.assertTrue(self.tree.contains(key))
                self.assertIn(key, self.tree)

    def test_contains_absent_keys(self):
        for key in [0, 2, 6, 10, -5, 100]:
            with self.subTest(key=key):
                self.assertFalse(self.tree.contains(key))
                self.assertNotIn(key, self.tree)

    def test_duplicate_insert_is_rejected(self):
        before = self._shape()
        for key in SAMPLE_KEYS:
            with self.subTest(key=key):
                self.assertFalse(self.tree.insert(key))
        self.assertEqual(self._shape(), before)
        self.expected_size = 7

    def test_insert_increments_path_sizes_only(self):
        self.assertTrue(self.tree.insert(6))
        root = self.tree.root
        self.assertEqual(root.size, 8)
        self.assertEqual(root.right.size, 4)
        self.assertEqual(root.right.left.size, 2)
        self.assertEqual(root.right.left.left.key, 6)
        # Off-path subtrees untouched
        self.assertEqual(root.left.size, 3)
        self.assertEqual(root.right.right.size, 1)
        self.expected_keys = SAMPLE_KEYS + [6]


class TestInsertOrders(TreeTestCase):
    def test_ascending_insert_degenerates(self):
        self._build(range(1, 101))
        self.assertEqual(self.tree.height(), 100)
        self.assertIsNone(self.tree.root.left)
        self.expected_size = 100
        self.expected_height = 100

    def test_descending_insert_degenerates(self):
        self._build(range(50, 0, -1))
        self.assertEqual(self.tree.height(), 50)
        self.assertIsNone(self.tree.root.right)
        self.expected_keys = list(range(1, 51))

    def test_string_keys(self):
        words = ["pear", "apple", "fig", "kiwi", "banana", "apple"]
        inserted = [self.tree.insert(w) for w in words]
        self.assertEqual(inserted, [True, True, True, True, True, False])
        self.assertEqual(list(self.tree), sorted(set(words)))
        self.expected_size = 5

    def test_tuple_keys(self):
        keys = [(2, "b"), (1, "z"), (2, "a"), (1, "a")]
        self._build(keys)
        self.assertEqual(list(self.tree), sorted(keys))
        self.assertTrue(self.tree.contains((2, "a")))
        self.assertFalse(self.tree.contains((2, "c")))

    def test_from_keys(self):
        self.tree = self.TreeClass.from_keys([3, 1, 2, 3])
        self.assertIsInstance(self.tree, self.TreeClass)
        self.assertEqual(list(self.tree), [1, 2, 3])
        self.expected_size = 3


class TestInsertEmptyTreeIterative(TestInsertEmptyTree):
    strategy = "iterative"


class TestInsertSampleIterative(TestInsertSample):
    strategy = "iterative"


class TestInsertOrdersIterative(TestInsertOrders):
    strategy = "iterative"
