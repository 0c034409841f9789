"""Cached item domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

import numpy as np

T = TypeVar("T")


@dataclass(eq=False, repr=False)
class CachedItem(Generic[T]):
    """Domain entity for one cached input/output pair.

    Lookups hand out a fresh item every time. When ``output`` is None the
    item is a miss token: compute the expensive result, set ``output`` and
    push the item to the cache. Items are not modified once pushed.

    Attributes:
        key: Partition key, matched exactly (e.g. model name and settings)
        input_hash: 64-bit fingerprint of the raw input
        embedding: Unit-norm vector for semantic items, None for hash items
        output: The cached result, or None if not computed yet
        created_at: When this item was created (informational)
    """

    key: str
    input_hash: int
    embedding: np.ndarray | None = None
    output: T | None = None
    created_at: datetime = field(default_factory=datetime.now)

    def is_valid(self) -> bool:
        """Return True if the item carries a result."""
        return self.output is not None

    def __repr__(self) -> str:
        has_output = "<has output>" if self.is_valid() else "<no output>"
        return f"CachedItem with key: {self.key} and output: {has_output}"
