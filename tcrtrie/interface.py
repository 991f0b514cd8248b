"""Running a search from a configuration and writing TSV results."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from .airr import AIRREntity
from .matrix import DEFAULT_DELETION_SCORE
from .trie import QueryTooLongError, Trie

__all__ = [
    "BATCH_SIZE",
    "RESULTS_FILE",
    "SearchConfig",
    "write_results",
    "load_queries",
    "run_search",
]

RESULTS_FILE = "results.tsv"
BATCH_SIZE = 1000

logger = logging.getLogger(__name__)


@dataclass
class SearchConfig:
    """Everything one search run needs: inputs, limits and output folder."""

    input_path: str
    output_path: str = "./"
    query: str = ""
    input_queries: str = ""
    max_substitution: int = -1
    max_insertion: int = -1
    max_deletion: int = -1
    matrix_path: str = ""
    cost_radius: float = -1.0
    deletion_score: float = DEFAULT_DELETION_SCORE
    v_gene: str = ""
    j_gene: str = ""


def _format_distance(distance: float) -> str:
    return f"{distance:g}"


def _gene_columns(results: Mapping[str, Sequence[AIRREntity]]) -> tuple[bool, bool]:
    matches = [m for found in results.values() for m in found]
    return any(m.v_gene for m in matches), any(m.j_gene for m in matches)


def _header(has_v: bool, has_j: bool) -> str:
    columns = ["query", "match", "dist"]
    if has_v:
        columns.append("v_gene")
    if has_j:
        columns.append("j_gene")
    return "\t".join(columns) + "\n"


def write_results(
    path: str | os.PathLike[str], results: Mapping[str, Sequence[AIRREntity]]
) -> None:
    """Write matches as TSV; gene columns appear when any match has a gene."""
    has_v, has_j = _gene_columns(results)
    with open(path, "w", encoding="utf-8", newline="") as out:
        out.write(_header(has_v, has_j))
        for query, matches in results.items():
            for match in matches:
                fields = [query, match.junction_aa, _format_distance(match.distance)]
                if has_v:
                    fields.append(match.v_gene)
                if has_j:
                    fields.append(match.j_gene)
                out.write("\t".join(fields) + "\n")


def load_queries(path: str | os.PathLike[str]) -> list[str]:
    """First column of every row after the header, skipping empty values."""
    with open(path, encoding="utf-8") as handle:
        handle.readline()
        queries = []
        for line in handle:
            first = line.rstrip("\n").split("\t", 1)[0]
            if first:
                queries.append(first)
    return queries


def _batches(items: Sequence[str], size: int) -> Iterable[list[str]]:
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


def _search_single(trie: Trie, config: SearchConfig) -> list[AIRREntity]:
    try:
        if config.matrix_path:
            return trie.search_with_matrix(config.query, config.cost_radius)
        return trie.search_airr(
            config.query,
            config.max_substitution,
            config.max_insertion,
            config.max_deletion,
        )
    except QueryTooLongError as error:
        logger.warning("%s", error)
        return []


def _search_batch(trie: Trie, config: SearchConfig, queries: list[str]):
    if config.matrix_path:
        return trie.search_for_all_with_matrix(queries, config.cost_radius)
    return trie.search_for_all(
        queries,
        config.max_substitution,
        config.max_insertion,
        config.max_deletion,
    )


def _write_batches(trie: Trie, config: SearchConfig, out_path: Path) -> None:
    queries = load_queries(config.input_queries)
    with open(out_path, "w", encoding="utf-8", newline="") as out:
        first_batch = True
        for batch in _batches(queries, BATCH_SIZE):
            results = _search_batch(trie, config, batch)
            if first_batch:
                out.write(_header(*_gene_columns(results)))
                first_batch = False
            for query, matches in results.items():
                for match in matches:
                    fields = [query, match.junction_aa, _format_distance(match.distance)]
                    if match.v_gene:
                        fields.append(match.v_gene)
                    if match.j_gene:
                        fields.append(match.j_gene)
                    out.write("\t".join(fields) + "\n")


def run_search(config: SearchConfig) -> Path:
    """Build the trie, run the configured search and return the results path.

    Raises:
        ValueError: neither a query nor a queries file is given.
        OSError: an input file cannot be read or the output written.
    """
    if not config.query and not config.input_queries:
        raise ValueError("no query provided")

    trie = Trie.from_airr(config.input_path)
    trie.set_deletion_score(config.deletion_score)
    logger.info("deletion score: %g", config.deletion_score)
    if config.matrix_path:
        matrix = trie.load_substitution_matrix(config.matrix_path)
        logger.info("substitution-score matrix:\n%s", matrix.format())

    out_dir = Path(config.output_path)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / RESULTS_FILE

    if config.query:
        write_results(out_path, {config.query: _search_single(trie, config)})
    else:
        _write_batches(trie, config, out_path)
    return out_path