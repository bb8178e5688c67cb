"""Level-order rendering of order-statistics BSTs"""

import collections
import enum
from typing import Any, Callable, List, Optional

from rank_trees.bst_base import BSTBase, BSTNodeBase

MISSING = "-"


class _Marker(enum.Enum):
    LEVEL_BOUNDARY = "level-boundary"


# Queued after the last node of each level
LEVEL_BOUNDARY = _Marker.LEVEL_BOUNDARY


def render_levels(
    tree: BSTBase,
    project: Optional[Callable[[BSTNodeBase], Any]] = None
) -> List[str]:
    """
    Breadth-first walk producing one row per level.

    Missing children are shown as ``-``, so the last row lists the empty
    slots under the deepest nodes.

    Parameters:
        tree (BSTBase): The tree to render.
        project: Maps a node to the value shown for it. Defaults to its key.

    Returns:
        List[str]: Space separated rows, root row first.
    """
    if project is None:
        project = lambda node: node.key

    rows: List[str] = []
    row: List[str] = []
    queue = collections.deque([tree.root, LEVEL_BOUNDARY])
    while queue:
        current = queue.popleft()
        if current is LEVEL_BOUNDARY:
            rows.append(" ".join(row))
            row = []
            if queue:
                queue.append(LEVEL_BOUNDARY)
        elif current is None:
            row.append(MISSING)
        else:
            row.append(str(project(current)))
            queue.append(current.left)
            queue.append(current.right)
    return rows


def render_table(tree: BSTBase, min_width: int = 11) -> str:
    """
    Two-column table with the key rows next to the size rows.

    Example for keys inserted as 2, 1, 3::

        +------------+------------+
        | key        | size       |
        +------------+------------+
        | 2          | 3          |
        | 1 3        | 1 1        |
        | - - - -    | - - - -    |
        +------------+------------+
    """
    keys = render_levels(tree)
    sizes = render_levels(tree, lambda node: node.size)
    width = max([min_width] + [len(row) for row in keys + sizes])

    rule = "+-" + "-" * width + "+-" + "-" * width + "+"
    lines = [rule, f"| {'key':<{width}}| {'size':<{width}}|", rule]
    for key_row, size_row in zip(keys, sizes):
        lines.append(f"| {key_row:<{width}}| {size_row:<{width}}|")
    lines.append(rule)
    return "\n".join(lines)


def print_pretty(tree: BSTBase) -> None:
    """Print the key/size level table of ``tree``."""
    print(render_table(tree))
