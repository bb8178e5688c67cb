from abc import ABC, abstractmethod
from typing import Any, Callable, Iterator, TypeVar, Generic, Protocol

class SupportsLessThan(Protocol):
    """Keys only need a strict total order through ``<``."""
    def __lt__(self, other: Any) -> bool: ...


K = TypeVar("K", bound=SupportsLessThan)

# Sentinel returned by rank() for absent keys
NOT_FOUND = -1


class EmptyContainerError(LookupError):
    """Raised when an operation needs at least one key but the (sub)tree is empty."""
    pass


class OutOfRangeError(IndexError):
    """Raised by select() when the requested position is not in [0, size())."""
    pass


class AbstractOrderedSet(ABC, Generic[K]):
    """
    Abstract base class for an ordered set of keys with order statistics.
    """

    @abstractmethod
    def insert(self, key: K) -> bool:
        """
        Insert a key into the set.

        Parameters:
            key: The key to insert.

        Returns:
            bool: True if the key was inserted, False if it was already present.
        """
        pass

    @abstractmethod
    def contains(self, key: K) -> bool:
        """Return True if the key is present."""
        pass

    @abstractmethod
    def delete_element(self, key: K) -> bool:
        """
        Remove the key from the set.

        Returns:
            bool: True if the key was removed, False if it was absent.
        """
        pass

    @abstractmethod
    def select(self, n: int) -> K:
        """
        Return the key with 0-based in-order position ``n``.

        Raises:
            OutOfRangeError: If n is not in [0, size()).
        """
        pass

    @abstractmethod
    def rank(self, key: K) -> int:
        """
        Return the 0-based in-order position of ``key``, or NOT_FOUND.
        """
        pass

    @abstractmethod
    def size(self) -> int:
        """Number of keys in the set."""
        pass

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: K) -> bool:
        return self.contains(key)

    @abstractmethod
    def __iter__(self) -> Iterator[K]:
        pass


Visitor = Callable[[Any], Any]
