"""Substitution matrices turned into edit costs for weighted search."""

from __future__ import annotations

import os
from collections import defaultdict
from dataclasses import dataclass, field

__all__ = [
    "GAP",
    "DEFAULT_DELETION_SCORE",
    "SubstitutionMatrix",
    "load_substitution_matrix",
    "parse_substitution_matrix",
]

GAP = "-"
DEFAULT_DELETION_SCORE = -6.0
_POSITIVE_EPSILON = 1e-6


@dataclass
class SubstitutionMatrix:
    """Pairwise costs between letters, with ``-`` standing for a gap."""

    scores: dict[str, dict[str, float]] = field(default_factory=dict)
    deletion_score: float = DEFAULT_DELETION_SCORE

    def cost(self, row: str, col: str) -> float:
        """Cost of aligning ``row`` with ``col``; KeyError if either is unknown."""
        return self.scores[row][col]

    def gap_cost(self, letter: str) -> float:
        """Cost of aligning ``letter`` against a gap."""
        return self.cost(GAP, letter)

    def with_deletion_score(self, new_score: float) -> SubstitutionMatrix:
        """A copy whose gap costs are shifted to reflect ``new_score``."""
        scores = {row: dict(values) for row, values in self.scores.items()}
        gap_row = scores.setdefault(GAP, {})
        for letter in list(scores):
            if letter == GAP:
                continue
            row = scores[letter]
            row[GAP] = row.get(GAP, 0.0) - self.deletion_score * 0.5
            gap_row[letter] = gap_row.get(letter, 0.0) - self.deletion_score * 0.5
            row[GAP] += abs(new_score) * 0.5
            gap_row[letter] += abs(new_score) * 0.5
        return SubstitutionMatrix(scores, new_score)

    def format(self) -> str:
        """Render the matrix as a fixed-width table, keys sorted."""
        keys = sorted(self.scores)
        lines = [" " * 4 + "".join(f"{key:>6}" for key in keys)]
        for row in keys:
            values = self.scores[row]
            cells = "".join(f"{values.get(col, 0.0):6.2f}" for col in keys)
            lines.append(f"{row:>4}{cells}")
        return "\n".join(lines) + "\n"


def parse_substitution_matrix(
    text: str, deletion_score: float = DEFAULT_DELETION_SCORE
) -> SubstitutionMatrix:
    """Build a cost matrix from matrix text.

    The first line lists the letters; each following row starts with its
    letter and holds one number per column. A matrix with no positive entry
    is taken as costs as it stands; otherwise it is read as similarity
    scores and turned into costs ``(s(r,r) + s(c,c)) / 2 - s(r,c)``.
    """
    header, _, body = text.partition("\n")
    letters = [ch for ch in header if not ch.isspace()]
    tokens = iter(body.split())

    raw: defaultdict[str, dict[str, float]] = defaultdict(dict)
    raw[GAP][GAP] = abs(deletion_score)
    is_cost_matrix = True

    for row_letter in letters:
        raw[row_letter][GAP] = deletion_score
        raw[GAP][row_letter] = deletion_score
        if next(tokens, None) is None:
            raise ValueError(f"matrix row for {row_letter!r} is missing")
        for col_letter in letters:
            token = next(tokens, None)
            if token is None:
                raise ValueError(f"matrix row for {row_letter!r} is incomplete")
            try:
                value = float(token)
            except ValueError:
                raise ValueError(f"invalid matrix value {token!r}") from None
            raw[row_letter][col_letter] = value
            raw[col_letter][row_letter] = value
            if value > _POSITIVE_EPSILON:
                is_cost_matrix = False

    new_deletion_score = raw[GAP][GAP]

    if is_cost_matrix:
        scores = {row: dict(values) for row, values in raw.items()}
    else:
        keys = list(dict.fromkeys(letters + [GAP]))
        scores = {
            r: {
                c: (raw[r].get(r, 0.0) + raw[c].get(c, 0.0)) * 0.5 - raw[r].get(c, 0.0)
                for c in keys
            }
            for r in keys
        }

    return SubstitutionMatrix(scores, new_deletion_score)


def load_substitution_matrix(
    path: str | os.PathLike[str], deletion_score: float = DEFAULT_DELETION_SCORE
) -> SubstitutionMatrix:
    """Read a matrix file; see :func:`parse_substitution_matrix`."""
    with open(path, encoding="utf-8") as handle:
        return parse_substitution_matrix(handle.read(), deletion_score)