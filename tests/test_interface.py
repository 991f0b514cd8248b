from pathlib import Path

import pytest

from tcrtrie.airr import AIRREntity
from tcrtrie.interface import (
    RESULTS_FILE,
    SearchConfig,
    load_queries,
    run_search,
    write_results,
)


def _write_airr(path: Path, rows) -> Path:
    lines = ["junction_aa\tv_call\tj_call"]
    lines += ["\t".join(row) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def airr_file(tmp_path):
    return _write_airr(
        tmp_path / "trie.tsv",
        [
            ("CASSLG", "TRBV1", "TRBJ1"),
            ("CASSLA", "TRBV2", "TRBJ2"),
            ("CAWWWW", "TRBV3", "TRBJ3"),
        ],
    )


def _rows(path: Path):
    lines = path.read_text(encoding="utf-8").splitlines()
    return lines[0], [line.split("\t") for line in lines[1:]]


def test_write_results_with_genes(tmp_path):
    out = tmp_path / "out.tsv"
    write_results(out, {"CASS": [AIRREntity("CASS", "TRBV1", "TRBJ1", 0.0)]})
    header, rows = _rows(out)
    assert header == "query\tmatch\tdist\tv_gene\tj_gene"
    assert rows == [["CASS", "CASS", "0", "TRBV1", "TRBJ1"]]


def test_write_results_without_genes(tmp_path):
    out = tmp_path / "out.tsv"
    write_results(out, {"CASS": [AIRREntity("CAST", distance=1.5)]})
    header, rows = _rows(out)
    assert header == "query\tmatch\tdist"
    assert rows == [["CASS", "CAST", "1.5"]]


def test_write_results_only_v_gene_column(tmp_path):
    out = tmp_path / "out.tsv"
    write_results(out, {"CASS": [AIRREntity("CASS", "TRBV1", "", 0.0)]})
    header, rows = _rows(out)
    assert header == "query\tmatch\tdist\tv_gene"
    assert rows[0][-1] == "TRBV1"


def test_load_queries_skips_header_and_empty(tmp_path):
    path = tmp_path / "q.tsv"
    path.write_text("junction_aa\tother\nCASS\tx\n\ty\nCAWW\n", encoding="utf-8")
    assert load_queries(path) == ["CASS", "CAWW"]


def test_run_search_single_query(tmp_path, airr_file):
    config = SearchConfig(
        input_path=str(airr_file),
        output_path=str(tmp_path / "out"),
        query="CASSLG",
        max_substitution=1,
        max_insertion=0,
        max_deletion=0,
    )
    out_path = run_search(config)
    assert out_path == tmp_path / "out" / RESULTS_FILE
    header, rows = _rows(out_path)
    assert header == "query\tmatch\tdist\tv_gene\tj_gene"
    assert {row[1] for row in rows} == {"CASSLG", "CASSLA"}
    exact = next(row for row in rows if row[1] == "CASSLG")
    assert exact == ["CASSLG", "CASSLG", "0", "TRBV1", "TRBJ1"]


def test_run_search_default_limits_find_nothing(tmp_path, airr_file):
    config = SearchConfig(
        input_path=str(airr_file), output_path=str(tmp_path), query="CASSLG"
    )
    header, rows = _rows(run_search(config))
    assert header == "query\tmatch\tdist"
    assert rows == []


def test_run_search_too_long_query_writes_header_only(tmp_path, airr_file):
    config = SearchConfig(
        input_path=str(airr_file),
        output_path=str(tmp_path),
        query="C" * 40,
        max_substitution=1,
        max_insertion=1,
        max_deletion=1,
    )
    _, rows = _rows(run_search(config))
    assert rows == []


def test_run_search_batch(tmp_path, airr_file):
    queries = tmp_path / "queries.tsv"
    queries.write_text("junction_aa\nCASSLG\nCAWWWW\n", encoding="utf-8")
    config = SearchConfig(
        input_path=str(airr_file),
        output_path=str(tmp_path / "batch"),
        input_queries=str(queries),
        max_substitution=0,
        max_insertion=0,
        max_deletion=0,
    )
    header, rows = _rows(run_search(config))
    assert header == "query\tmatch\tdist\tv_gene\tj_gene"
    assert sorted(rows) == [
        ["CASSLG", "CASSLG", "0", "TRBV1", "TRBJ1"],
        ["CAWWWW", "CAWWWW", "0", "TRBV3", "TRBJ3"],
    ]


def test_run_search_with_matrix(tmp_path):
    trie_file = tmp_path / "trie.tsv"
    trie_file.write_text("junction_aa\nAC\nAG\nCC\n", encoding="utf-8")
    matrix_file = tmp_path / "matrix.txt"
    matrix_file.write_text("A C G\nA 1 0 0\nC 0 1 0\nG 0 0 1\n", encoding="utf-8")
    config = SearchConfig(
        input_path=str(trie_file),
        output_path=str(tmp_path / "m"),
        query="AC",
        matrix_path=str(matrix_file),
        cost_radius=1.0,
    )
    header, rows = _rows(run_search(config))
    assert header == "query\tmatch\tdist"
    found = {row[1]: row[2] for row in rows}
    assert found["AC"] == "0"
    assert set(found) == {"AC", "AG", "CC"}
    assert all(float(cost) <= 1.0 for cost in found.values())


def test_run_search_without_query_raises(tmp_path, airr_file):
    config = SearchConfig(input_path=str(airr_file), output_path=str(tmp_path))
    with pytest.raises(ValueError):
        run_search(config)


def test_run_search_missing_trie_file(tmp_path):
    config = SearchConfig(
        input_path=str(tmp_path / "missing.tsv"),
        output_path=str(tmp_path),
        query="CASS",
    )
    with pytest.raises(OSError):
        run_search(config)