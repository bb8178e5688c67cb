"""Factory for the creation of order-statistics BSTs"""

from typing import Any, Dict, Iterable, Optional, Tuple, Type
import logging

from rank_trees.bst_base import BSTBase, BSTNodeBase
from rank_trees.iterative.iterative_base import IterativeBSTBase

# Configure logging
logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

DEFAULT_STRATEGY = "recursive"

# strategy -> tree base class
STRATEGIES: Dict[str, Type[BSTBase]] = {
    "recursive": BSTBase,
    "iterative": IterativeBSTBase,
}

# Cache for previously created classes to avoid recreating them
_class_cache: Dict[str, Tuple[Type[BSTBase], Type[BSTNodeBase]]] = {}


def make_bst_classes(strategy: str = DEFAULT_STRATEGY) -> Tuple[
    Type[BSTBase],
    Type[BSTNodeBase]
]:
    """
    Factory function to generate a BST class and its node class for a
    traversal strategy.

    Parameters:
        strategy (str): "recursive" or "iterative".

    Returns:
        BSTree_<Strategy>  – subclass of the strategy's base with NodeClass set.
        BSTNode_<Strategy> – subclass of BSTNodeBase.

    Raises:
        ValueError: If the strategy is unknown.
    """
    if strategy in _class_cache:
        logger.debug(f"Using cached classes for strategy={strategy}")
        return _class_cache[strategy]

    if strategy not in STRATEGIES:
        raise ValueError(
            f"Unknown strategy {strategy!r}, expected one of {sorted(STRATEGIES)}"
        )
    TreeBase = STRATEGIES[strategy]
    suffix = strategy.capitalize()

    logger.debug(f"Creating new classes for strategy={strategy}")

    # 1) Node class
    NodeK = type(
        f"BSTNode_{suffix}",
        (BSTNodeBase,),
        {"__slots__": ()}
    )
    logger.debug(f"Created {NodeK.__name__}")

    # 2) Tree class points at the node class
    TreeK = type(
        f"BSTree_{suffix}",
        (TreeBase,),
        {
            "NodeClass": NodeK,
            "__slots__": ()
        }
    )
    logger.debug(f"Created {TreeK.__name__} with NodeClass={NodeK.__name__}")

    _class_cache[strategy] = (TreeK, NodeK)
    return TreeK, NodeK


def create_bst(
    strategy: str = DEFAULT_STRATEGY,
    keys: Optional[Iterable[Any]] = None
) -> BSTBase:
    """
    Create a new BST, optionally filled with ``keys`` in iteration order.

    Args:
        strategy (str): "recursive" or "iterative"
        keys: Keys to insert; duplicates are skipped

    Returns:
        A new tree of the strategy's class
    """
    TreeK, _ = make_bst_classes(strategy)
    tree = TreeK() if keys is None else TreeK.from_keys(keys)
    logger.debug(f"Created tree instance of type {type(tree).__name__} with {tree.size()} keys")
    return tree
