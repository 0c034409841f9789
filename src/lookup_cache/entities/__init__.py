"""Domain entities for internal representation.

These are plain dataclasses and tuples used by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.
"""

from .cached_item import CachedItem
from .match import EXACT_MATCH_SCORE, NO_MATCH_SCORE, Match

__all__ = ["CachedItem", "Match", "EXACT_MATCH_SCORE", "NO_MATCH_SCORE"]
