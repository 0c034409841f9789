"""In-memory concurrent item store.

Holds the append-only item collection and the partition index (key ->
positions) behind a single lock, so an index entry is never visible before
the item it points at.
"""

import threading
from collections.abc import Iterator, Sequence
from typing import Any, NamedTuple, overload

from lookup_cache.entities import CachedItem
from lookup_cache.exceptions import CacheIntegrityError, InvalidItemError


class ItemsView(Sequence[CachedItem[Any]]):
    """Read-only window over the first ``length`` items of a store.

    The underlying list only ever grows, so a view taken under the store
    lock stays valid while writers keep appending.
    """

    __slots__ = ("_items", "_length")

    def __init__(self, items: list[CachedItem[Any]], length: int) -> None:
        self._items = items
        self._length = length

    def __len__(self) -> int:
        return self._length

    @overload
    def __getitem__(self, index: int) -> CachedItem[Any]: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[CachedItem[Any]]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return tuple(self._items[i] for i in range(*index.indices(self._length)))
        if not 0 <= index < self._length:
            raise CacheIntegrityError(
                "Position outside of the item collection",
                details={"position": index, "length": self._length},
            )
        return self._items[index]

    def __iter__(self) -> Iterator[CachedItem[Any]]:
        for i in range(self._length):
            yield self._items[i]


class Snapshot(NamedTuple):
    """Candidate set for one key, safe to scan without holding the lock."""

    items: ItemsView
    positions: tuple[int, ...]


class ItemStore:
    """Append-only item collection with a partition index.

    Positions are 0-based and never reused. One re-entrant lock guards both
    structures, so there is no lock ordering to get wrong.

    Example:
        ```python
        store = ItemStore()
        position = store.append(item)      # item.output must be set
        store["gpt-4o"]                    # (0,), KeyError if unknown
        store.get("unknown")               # ()
        ```
    """

    def __init__(self) -> None:
        self._items: list[CachedItem[Any]] = []
        self._lookup: dict[str, list[int]] = {}
        self._lock = threading.RLock()

    def append(self, item: CachedItem[Any]) -> int:
        """Append an item and index it under its key.

        Args:
            item: A valid item (``output`` is set)

        Returns:
            The position of the new item

        Raises:
            InvalidItemError: If the item is a miss token
        """
        if not item.is_valid():
            raise InvalidItemError(
                "Cannot store an item without output", details={"key": item.key}
            )

        with self._lock:
            self._items.append(item)
            position = len(self._items) - 1
            self._insert(item.key, position)
        return position

    def _insert(self, key: str, position: int) -> None:
        """Record ``position`` under ``key``. Caller holds the lock."""
        if key in self._lookup:
            self._lookup[key].append(position)
        else:
            self._lookup[key] = [position]

    def get(self, key: str, default: Sequence[int] = ()) -> tuple[int, ...]:
        """Positions stored under ``key``, or ``default`` if the key is unknown."""
        with self._lock:
            positions = self._lookup.get(key)
            if positions is None:
                return tuple(default)
            return tuple(positions)

    def __getitem__(self, key: str) -> tuple[int, ...]:
        """Positions stored under ``key``.

        Raises:
            KeyError: If nothing was ever stored under ``key``
        """
        with self._lock:
            return tuple(self._lookup[key])

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._lookup

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def keys(self) -> list[str]:
        """All partition keys, in first-insertion order."""
        with self._lock:
            return list(self._lookup)

    @property
    def items(self) -> ItemsView:
        """Read-only view of every item stored so far."""
        with self._lock:
            return ItemsView(self._items, len(self._items))

    def item_at(self, position: int) -> CachedItem[Any]:
        """Get the item at ``position``.

        Raises:
            CacheIntegrityError: If no item lives at ``position``
        """
        return self.items[position]

    def snapshot_candidates(self, key: str) -> Snapshot:
        """Capture the candidate positions for ``key`` with a matching view.

        Every captured position is smaller than the view length, so a scan
        never reads past what was visible when the snapshot was taken.
        """
        with self._lock:
            positions = tuple(self._lookup.get(key, ()))
            return Snapshot(ItemsView(self._items, len(self._items)), positions)

    def partition_sizes(self) -> dict[str, int]:
        """Number of items per partition key."""
        with self._lock:
            return {key: len(positions) for key, positions in self._lookup.items()}

    def __repr__(self) -> str:
        return f"ItemStore with {len(self)} items"
