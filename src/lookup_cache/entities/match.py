"""Match result domain entity."""

from typing import NamedTuple

NO_MATCH_SCORE = -1.0
EXACT_MATCH_SCORE = 1.0


class Match(NamedTuple):
    """Best candidate found by a matching strategy.

    Attributes:
        score: Similarity of the best candidate. Cosine similarity lies in
            [-1, 1]; -1 with no position means nothing was compared.
        position: Index of the best candidate in the store, or None
    """

    score: float
    position: int | None

    @classmethod
    def none(cls) -> "Match":
        """The "no match" sentinel."""
        return cls(NO_MATCH_SCORE, None)

    @property
    def found(self) -> bool:
        return self.position is not None
