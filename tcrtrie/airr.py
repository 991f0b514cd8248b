"""Reading AIRR rearrangement tables (tab-separated, with a header row)."""

from __future__ import annotations

import os
from dataclasses import dataclass

__all__ = ["AIRREntity", "parse_airr"]

JUNCTION_COLUMN = "junction_aa"
V_GENE_COLUMN = "v_call"
J_GENE_COLUMN = "j_call"


@dataclass
class AIRREntity:
    """One rearrangement: junction amino-acid sequence, genes and a distance."""

    junction_aa: str
    v_gene: str = ""
    j_gene: str = ""
    distance: float = 0.0


def _field(fields: list[str], column: int | None) -> str:
    if column is None or column >= len(fields):
        return ""
    return fields[column]


def parse_airr(path: str | os.PathLike[str]) -> list[AIRREntity]:
    """Parse an AIRR TSV file into entities.

    The ``junction_aa`` column is required; ``v_call`` and ``j_call`` are
    optional. Rows whose junction is empty or missing are skipped.

    Raises:
        OSError: the file cannot be opened.
        ValueError: the file is empty or has no ``junction_aa`` column.
    """
    with open(path, encoding="utf-8") as handle:
        header = handle.readline()
        if not header:
            raise ValueError(f"{os.fspath(path)}: empty file")

        columns = {
            name: index
            for index, name in enumerate(header.rstrip("\n").split("\t"))
        }
        if JUNCTION_COLUMN not in columns:
            raise ValueError(f"{os.fspath(path)}: no column {JUNCTION_COLUMN}")

        junction_col = columns[JUNCTION_COLUMN]
        v_col = columns.get(V_GENE_COLUMN)
        j_col = columns.get(J_GENE_COLUMN)

        entries: list[AIRREntity] = []
        for line in handle:
            fields = line.rstrip("\n").split("\t")
            junction = _field(fields, junction_col)
            if not junction:
                continue
            entries.append(
                AIRREntity(
                    junction_aa=junction,
                    v_gene=_field(fields, v_col),
                    j_gene=_field(fields, j_col),
                )
            )
    return entries