"""Matching strategy protocol.

A strategy scans the candidate positions of one partition and reports the
best candidate. It never applies a threshold; the cache service decides
whether the best candidate is good enough.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from lookup_cache.entities import CachedItem, Match


@runtime_checkable
class MatchStrategy(Protocol):
    """Protocol for lookup algorithms over a candidate set."""

    def find_best(
        self,
        items: Sequence[CachedItem[Any]],
        positions: Sequence[int],
        query: Any,
    ) -> Match:
        """Find the best candidate for ``query``.

        Args:
            items: The store's item collection (read-only view)
            positions: Candidate positions into ``items``, in insertion order
            query: The query fingerprint (hash or normalized embedding)

        Returns:
            The best Match, or ``Match.none()`` if nothing qualifies

        Raises:
            CacheIntegrityError: If a position is outside ``items``
        """
        ...
