"""
Weighted Levenshtein (edit) distance.

distance(a, b) is the minimum total cost of turning sequence a into
sequence b with single-element insertions, deletions and substitutions:

    D[0][0] = 0
    D[i][0] = D[i-1][0] + deletion_cost
    D[0][j] = D[0][j-1] + insertion_cost
    D[i][j] = min(
        D[i-1][j]   + deletion_cost,                          # delete a[i]
        D[i][j-1]   + insertion_cost,                         # insert b[j]
        D[i-1][j-1] + (0 if a[i] == b[j] else substitution_cost),
    )

Only one row of the table is kept, and that row is reused across calls
so repeated comparisons do not reallocate. This scratch row is the
metric's state: one instance must not serve two computations at once.

With unit costs this is the classic edit distance. The result is
symmetric whenever insertion_cost == deletion_cost.
"""

from typing import Any, Dict, List, Optional, Sequence

from bkmap import config
from bkmap.metrics.base import Metric


class Levenshtein(Metric):
    """
    Edit distance over any sequences whose elements support ==.

    Only use it as a BKMap metric with insertion_cost == deletion_cost:
    otherwise the distance is not symmetric and searches silently miss
    entries.

    Args:
        insertion_cost: Cost of inserting one element of b.
        deletion_cost: Cost of deleting one element of a.
        substitution_cost: Cost of replacing a differing element.
    """

    name = "levenshtein"

    def __init__(
        self,
        insertion_cost: Optional[int] = None,
        deletion_cost: Optional[int] = None,
        substitution_cost: Optional[int] = None,
    ) -> None:
        if insertion_cost is None:
            insertion_cost = config.DEFAULT_INSERTION_COST
        if deletion_cost is None:
            deletion_cost = config.DEFAULT_DELETION_COST
        if substitution_cost is None:
            substitution_cost = config.DEFAULT_SUBSTITUTION_COST

        for label, cost in (
            ("insertion", insertion_cost),
            ("deletion", deletion_cost),
            ("substitution", substitution_cost),
        ):
            if cost < 0:
                raise ValueError(f"{label} cost must be >= 0, got {cost}")

        self._insertion_cost = insertion_cost
        self._deletion_cost = deletion_cost
        self._substitution_cost = substitution_cost
        self._cache: List[int] = []

    @property
    def insertion_cost(self) -> int:
        return self._insertion_cost

    @property
    def deletion_cost(self) -> int:
        return self._deletion_cost

    @property
    def substitution_cost(self) -> int:
        return self._substitution_cost

    def distance(self, a: Sequence[Any], b: Sequence[Any]) -> int:
        ins = self._insertion_cost
        dele = self._deletion_cost
        sub = self._substitution_cost

        # Row 0: cost of building each prefix of b from nothing.
        cache = self._cache
        cache.clear()
        cache.extend(ins * (j + 1) for j in range(len(b)))

        result = ins * len(b)

        for i, x in enumerate(a):
            last = i * dele          # D[i][0], the diagonal for column 0
            result = last + dele     # D[i+1][0]
            for j, y in enumerate(b):
                above = cache[j]     # D[i][j+1]
                result = min(
                    last if x == y else last + sub,
                    above + dele,
                    result + ins,
                )
                last = above
                cache[j] = result

        return result

    def to_config(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "insertion_cost": self._insertion_cost,
            "deletion_cost": self._deletion_cost,
            "substitution_cost": self._substitution_cost,
        }

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "Levenshtein":
        """Rebuild a metric from the dictionary produced by to_config()."""
        return cls(
            insertion_cost=cfg.get("insertion_cost"),
            deletion_cost=cfg.get("deletion_cost"),
            substitution_cost=cfg.get("substitution_cost"),
        )

    def __repr__(self) -> str:
        return (
            f"Levenshtein(insertion_cost={self._insertion_cost}, "
            f"deletion_cost={self._deletion_cost}, "
            f"substitution_cost={self._substitution_cost})"
        )
