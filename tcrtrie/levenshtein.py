"""Edit distance broken down into insertions, deletions and substitutions."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

__all__ = [
    "EditStat",
    "prune_stats",
    "detailed_levenshtein_all",
    "within_limits",
]


@dataclass(frozen=True)
class EditStat:
    """Counts of one alignment: total edits and how they split by kind."""

    distance: int
    insertion: int
    deletion: int
    substitution: int

    def dominates(self, other: EditStat) -> bool:
        """True when no count of this alignment exceeds the other's."""
        return (
            self.distance <= other.distance
            and self.insertion <= other.insertion
            and self.deletion <= other.deletion
            and self.substitution <= other.substitution
        )


def prune_stats(stats: Iterable[EditStat]) -> list[EditStat]:
    """Keep only alignments that no other alignment dominates.

    Earlier entries win over equal later ones; order of survivors is kept.
    """
    kept: list[EditStat] = []
    for stat in stats:
        if any(existing.dominates(stat) for existing in kept):
            continue
        kept = [existing for existing in kept if not stat.dominates(existing)]
        kept.append(stat)
    return kept


def detailed_levenshtein_all(
    source: str, target: str, max_edits: int
) -> list[EditStat]:
    """All Pareto-optimal edit breakdowns turning ``source`` into ``target``.

    Partial alignments costing more than ``max_edits`` are dropped, so the
    result is empty when no alignment fits within that budget.
    """
    previous = [[EditStat(j, j, 0, 0)] for j in range(len(target) + 1)]

    for i, source_char in enumerate(source, 1):
        current = [[EditStat(i, 0, i, 0)]]
        for j, target_char in enumerate(target, 1):
            cost = 0 if source_char == target_char else 1
            candidates = [
                replace(st, distance=st.distance + 1, deletion=st.deletion + 1)
                for st in previous[j]
            ]
            candidates += [
                replace(st, distance=st.distance + 1, insertion=st.insertion + 1)
                for st in current[j - 1]
            ]
            candidates += [
                replace(
                    st,
                    distance=st.distance + cost,
                    substitution=st.substitution + cost,
                )
                for st in previous[j - 1]
            ]
            current.append(
                prune_stats(c for c in candidates if c.distance <= max_edits)
            )
        previous = current

    return list(previous[-1])


def within_limits(
    source: str,
    target: str,
    max_substitution: int,
    max_insertion: int,
    max_deletion: int,
) -> bool:
    """Whether some alignment respects each per-kind edit limit."""
    max_edits = max_substitution + max_insertion + max_deletion
    return any(
        st.substitution <= max_substitution
        and st.insertion <= max_insertion
        and st.deletion <= max_deletion
        for st in detailed_levenshtein_all(source, target, max_edits)
    )