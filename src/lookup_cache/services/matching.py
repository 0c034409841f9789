"""Matching strategies over a partition's candidate set.

Both strategies satisfy the MatchStrategy protocol. They report the best
candidate and its score; thresholds are applied by the cache service.
"""

from collections.abc import Sequence
from typing import Any

import numpy as np

from lookup_cache.entities import EXACT_MATCH_SCORE, CachedItem, Match
from lookup_cache.exceptions import CacheIntegrityError


def _check_positions(items: Sequence[CachedItem[Any]], positions: Sequence[int]) -> None:
    """Fail loudly if any position points outside ``items``."""
    length = len(items)
    low, high = min(positions), max(positions)
    if low < 0 or high >= length:
        raise CacheIntegrityError(
            "Candidate positions must lie inside the item collection",
            details={"min": low, "max": high, "length": length},
        )


class ExactMatchStrategy:
    """Finds the first candidate whose input hash equals the query hash.

    Equal hashes are indistinguishable, so the scan stops at the first one.
    """

    def find_best(
        self,
        items: Sequence[CachedItem[Any]],
        positions: Sequence[int],
        query: int,
    ) -> Match:
        if not positions:
            return Match.none()
        _check_positions(items, positions)

        for position in positions:
            if items[position].input_hash == query:
                return Match(EXACT_MATCH_SCORE, position)
        return Match.none()


class FuzzyMatchStrategy:
    """Finds the candidate with the highest cosine similarity to the query.

    Embeddings are unit-norm, so cosine similarity is the dot product. All
    candidates are scored; on ties the earliest position wins.
    """

    def find_best(
        self,
        items: Sequence[CachedItem[Any]],
        positions: Sequence[int],
        query: np.ndarray,
    ) -> Match:
        if not positions:
            return Match.none()
        _check_positions(items, positions)

        query = np.asarray(query, dtype=np.float32)
        candidates = []
        for position in positions:
            embedding = items[position].embedding
            if embedding is None or embedding.shape != query.shape:
                raise CacheIntegrityError(
                    "Candidate has no comparable embedding",
                    details={
                        "position": position,
                        "shape": None if embedding is None else embedding.shape,
                        "expected": query.shape,
                    },
                )
            candidates.append(embedding)

        similarities = np.stack(candidates) @ query
        # argmax returns the first occurrence of the maximum
        best = int(np.argmax(similarities))
        return Match(float(similarities[best]), positions[best])
