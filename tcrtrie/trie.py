"""Prefix tree over junction sequences with bounded edit-distance search."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence

from .airr import AIRREntity, parse_airr
from .levenshtein import within_limits
from .matrix import DEFAULT_DELETION_SCORE, SubstitutionMatrix
from .matrix import load_substitution_matrix as _read_matrix

__all__ = [
    "DEFAULT_MAX_QUERY_LENGTH",
    "MatrixNotLoadedError",
    "QueryTooLongError",
    "Trie",
]

DEFAULT_MAX_QUERY_LENGTH = 32

logger = logging.getLogger(__name__)


class QueryTooLongError(ValueError):
    """The query is longer than the trie's maximum query length."""


class MatrixNotLoadedError(RuntimeError):
    """A weighted search was asked for before a matrix was loaded."""


class _Node:
    __slots__ = ("children", "indices")

    def __init__(self) -> None:
        self.children: dict[str, _Node] = {}
        self.indices: list[int] = []

    def ordered_children(self) -> list[tuple[str, _Node]]:
        return sorted(self.children.items())


class Trie:
    """Sequences stored letter by letter (``A``-``Z``) for approximate lookup.

    Characters outside ``A``-``Z`` are skipped when building the tree, but
    results always carry the sequence as it was given.
    """

    def __init__(
        self,
        sequences: Iterable[str] = (),
        v_genes: Sequence[str] | None = None,
        j_genes: Sequence[str] | None = None,
    ) -> None:
        self._sequences = list(sequences)
        count = len(self._sequences)
        self._v_genes = list(v_genes) if v_genes is not None else [""] * count
        self._j_genes = list(j_genes) if j_genes is not None else [""] * count
        if len(self._v_genes) != count or len(self._j_genes) != count:
            raise ValueError("gene lists must match the number of sequences")

        self.max_query_length = DEFAULT_MAX_QUERY_LENGTH
        self._deletion_score = DEFAULT_DELETION_SCORE
        self._matrix: SubstitutionMatrix | None = None
        self._root = _Node()
        self._build()

    @classmethod
    def from_airr(cls, path: str | os.PathLike[str]) -> Trie:
        """Build a trie from the junctions and genes of an AIRR file."""
        entries = parse_airr(path)
        return cls(
            [e.junction_aa for e in entries],
            [e.v_gene for e in entries],
            [e.j_gene for e in entries],
        )

    def _build(self) -> None:
        for index, sequence in enumerate(self._sequences):
            node = self._root
            for char in sequence:
                if "A" <= char <= "Z":
                    node = node.children.setdefault(char, _Node())
            node.indices.append(index)

    @property
    def sequences(self) -> tuple[str, ...]:
        return tuple(self._sequences)

    @property
    def matrix(self) -> SubstitutionMatrix | None:
        """The loaded cost matrix, or None."""
        return self._matrix

    @property
    def deletion_score(self) -> float:
        return self._deletion_score

    def __len__(self) -> int:
        return len(self._sequences)

    def _check_length(self, query: str) -> None:
        if len(query) > self.max_query_length:
            raise QueryTooLongError(
                f"{query}: query length exceeds maximum allowed length"
                f" ({self.max_query_length})"
            )

    def _gene_match(
        self, index: int, v_gene: str | None, j_gene: str | None
    ) -> bool:
        return (v_gene is None or self._v_genes[index] == v_gene) and (
            j_gene is None or self._j_genes[index] == j_gene
        )

    def _entity(self, index: int, distance: float) -> AIRREntity:
        return AIRREntity(
            self._sequences[index],
            self._v_genes[index],
            self._j_genes[index],
            distance,
        )

    def _levenshtein_matches(
        self, query: str, max_edits: int
    ) -> Iterator[tuple[int, int]]:
        """Yield (index, distance) for sequences within ``max_edits``."""
        self._check_length(query)
        stack = [(self._root, list(range(len(query) + 1)))]
        while stack:
            node, row = stack.pop()
            distance = row[-1]
            if distance <= max_edits:
                for index in node.indices:
                    yield index, distance
            if min(row) > max_edits:
                continue
            pending = []
            for letter, child in node.ordered_children():
                next_row = [row[0] + 1]
                for j, query_char in enumerate(query, 1):
                    cost = 0 if query_char == letter else 1
                    next_row.append(
                        min(row[j] + 1, next_row[j - 1] + 1, row[j - 1] + cost)
                    )
                pending.append((child, next_row))
            stack.extend(reversed(pending))

    def search(self, query: str, max_edits: int) -> list[str]:
        """Sequences within ``max_edits`` edits of ``query``, in tree order."""
        return [
            self._sequences[index]
            for index, _ in self._levenshtein_matches(query, max_edits)
        ]

    def search_many(
        self, queries: Iterable[str], max_edits: int
    ) -> dict[str, list[str]]:
        """Search each query; a query that is too long maps to no results."""
        results: dict[str, list[str]] = {}
        for query in queries:
            try:
                results[query] = self.search(query, max_edits)
            except QueryTooLongError as error:
                logger.warning("%s", error)
                results[query] = []
        return results

    def search_any(self, query: str, max_edits: int) -> bool:
        """Whether any sequence lies within ``max_edits`` of ``query``."""
        return next(self._levenshtein_matches(query, max_edits), None) is not None

    def search_airr(
        self,
        query: str,
        max_substitution: int,
        max_insertion: int,
        max_deletion: int,
        v_gene: str | None = None,
        j_gene: str | None = None,
    ) -> list[AIRREntity]:
        """Entities reachable with at most the given edits of each kind."""
        max_edits = max_substitution + max_insertion + max_deletion
        return [
            self._entity(index, distance)
            for index, distance in self._levenshtein_matches(query, max_edits)
            if self._gene_match(index, v_gene, j_gene)
            and within_limits(
                query,
                self._sequences[index],
                max_substitution,
                max_insertion,
                max_deletion,
            )
        ]

    def _require_matrix(self) -> SubstitutionMatrix:
        if self._matrix is None:
            raise MatrixNotLoadedError(
                "no substitution matrix is loaded; only Levenshtein search"
                " is available"
            )
        return self._matrix

    def search_with_matrix(
        self,
        query: str,
        max_cost: float,
        v_gene: str | None = None,
        j_gene: str | None = None,
    ) -> list[AIRREntity]:
        """Entities whose weighted alignment cost to ``query`` is at most ``max_cost``."""
        matrix = self._require_matrix()
        self._check_length(query)

        first_row = [0.0]
        for char in query:
            first_row.append(first_row[-1] + matrix.gap_cost(char))

        results: list[AIRREntity] = []
        stack = [(self._root, first_row)]
        while stack:
            node, row = stack.pop()
            cost = row[-1]
            if cost <= max_cost:
                results.extend(
                    self._entity(index, cost)
                    for index in node.indices
                    if self._gene_match(index, v_gene, j_gene)
                )
            pending = []
            for letter, child in node.ordered_children():
                deletion_cost = matrix.gap_cost(letter)
                next_row = [row[0] + deletion_cost]
                for j, query_char in enumerate(query, 1):
                    next_row.append(
                        min(
                            row[j] + deletion_cost,
                            next_row[j - 1] + matrix.gap_cost(query_char),
                            row[j - 1] + matrix.cost(query_char, letter),
                        )
                    )
                if min(next_row) <= max_cost:
                    pending.append((child, next_row))
            stack.extend(reversed(pending))
        return results

    def search_for_all(
        self,
        queries: Iterable[str],
        max_substitution: int,
        max_insertion: int,
        max_deletion: int,
        v_gene: str | None = None,
        j_gene: str | None = None,
    ) -> dict[str, list[AIRREntity]]:
        """Run :meth:`search_airr` for each query; too-long queries get no results."""
        results: dict[str, list[AIRREntity]] = {}
        for query in queries:
            try:
                results[query] = self.search_airr(
                    query, max_substitution, max_insertion, max_deletion,
                    v_gene, j_gene,
                )
            except QueryTooLongError as error:
                logger.warning("%s", error)
                results[query] = []
        return results

    def search_for_all_with_matrix(
        self,
        queries: Iterable[str],
        max_cost: float,
        v_gene: str | None = None,
        j_gene: str | None = None,
    ) -> dict[str, list[AIRREntity]]:
        """Run :meth:`search_with_matrix` for each query; too-long queries get no results."""
        self._require_matrix()
        results: dict[str, list[AIRREntity]] = {}
        for query in queries:
            try:
                results[query] = self.search_with_matrix(
                    query, max_cost, v_gene, j_gene
                )
            except QueryTooLongError as error:
                logger.warning("%s", error)
                results[query] = []
        return results

    def load_substitution_matrix(
        self, path: str | os.PathLike[str]
    ) -> SubstitutionMatrix:
        """Load a matrix file for weighted search and return the cost matrix."""
        matrix = _read_matrix(path, self._deletion_score)
        self._matrix = matrix
        self._deletion_score = matrix.deletion_score
        return matrix

    def set_deletion_score(self, deletion_score: float) -> None:
        """Change the gap score, shifting gap costs of a loaded matrix."""
        if self._matrix is not None:
            self._matrix = self._matrix.with_deletion_score(deletion_score)
        self._deletion_score = deletion_score

    def copy(self) -> Trie:
        """An independent trie with the same contents and settings."""
        other = Trie(self._sequences, self._v_genes, self._j_genes)
        other.max_query_length = self.max_query_length
        other._deletion_score = self._deletion_score
        if self._matrix is not None:
            other._matrix = SubstitutionMatrix(
                {row: dict(values) for row, values in self._matrix.scores.items()},
                self._matrix.deletion_score,
            )
        return other

    __copy__ = copy