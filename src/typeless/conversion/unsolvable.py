from collections.abc import Iterable, Iterator
from typing import Self

from typeless.utils.locks import ReadWriteLock


class UnsolvableCache:
    """Set of target keys for which composition search is known to fail.

    The cache guards itself with its own reader/writer lock, independent of
    the lock protecting registry descriptors. Iteration is in sorted order.
    """

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys: set[str] = set(keys)
        self._lock = ReadWriteLock()

    @property
    def lock(self) -> ReadWriteLock:
        return self._lock

    def add(self, key: str) -> bool:
        """Insert ``key`` if absent.

        Returns:
            True if the key was inserted, False if it was already present.
        """
        with self._lock.write():
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._keys

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        with self._lock.read():
            snapshot = sorted(self._keys)
        return iter(snapshot)

    def copy(self) -> Self:
        with self._lock.read():
            return type(self)(self._keys)

    def clear(self) -> None:
        with self._lock.write():
            self._keys.clear()
