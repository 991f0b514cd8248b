import pytest

from tcrtrie.matrix import (
    SubstitutionMatrix,
    load_substitution_matrix,
    parse_substitution_matrix,
)

SCORE_TEXT = "A B C\nA 4 -1 0\nB -1 5 -2\nC 0 -2 9\n"
COST_TEXT = "A B\nA 0 -1\nB -1 0\n"


def test_score_matrix_diagonal_is_zero():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    for letter in "ABC-":
        assert m.cost(letter, letter) == 0


def test_score_matrix_is_symmetric():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    for r in "ABC-":
        for c in "ABC-":
            assert m.cost(r, c) == m.cost(c, r)


def test_score_matrix_conversion_value():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    assert m.cost("A", "B") == pytest.approx(5.5)


def test_higher_similarity_means_lower_cost():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    assert m.cost("A", "C") < m.cost("B", "C")


def test_deletion_score_becomes_absolute():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    assert m.deletion_score == 6.0


def test_cost_matrix_used_as_is():
    m = parse_substitution_matrix(COST_TEXT, -6.0)
    assert m.cost("A", "B") == -1
    assert m.gap_cost("A") == -6.0
    assert m.cost("A", "-") == -6.0
    assert m.cost("-", "-") == 6.0


def test_letters_without_spaces_in_header():
    spaced = parse_substitution_matrix(SCORE_TEXT, -6.0)
    packed = parse_substitution_matrix(SCORE_TEXT.replace("A B C", "ABC", 1), -6.0)
    assert packed == spaced


def test_unknown_letter_raises_key_error():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    with pytest.raises(KeyError):
        m.cost("A", "Z")
    with pytest.raises(KeyError):
        m.gap_cost("Z")


def test_bad_number_raises():
    with pytest.raises(ValueError, match="invalid"):
        parse_substitution_matrix("A B\nA 1 x\nB 1 1\n", -6.0)


def test_incomplete_row_raises():
    with pytest.raises(ValueError, match="incomplete"):
        parse_substitution_matrix("A B\nA 1 2\nB 3\n", -6.0)


def test_load_matches_parse(tmp_path):
    path = tmp_path / "matrix.txt"
    path.write_text(SCORE_TEXT, encoding="utf-8")
    assert load_substitution_matrix(path, -6.0) == parse_substitution_matrix(
        SCORE_TEXT, -6.0
    )


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_substitution_matrix(tmp_path / "absent.txt", -6.0)


def test_same_deletion_score_is_identity():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    updated = m.with_deletion_score(m.deletion_score)
    assert updated.scores == m.scores


def test_new_deletion_score_only_moves_gap_costs():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    updated = m.with_deletion_score(-10.0)
    assert updated.deletion_score == -10.0
    assert updated.cost("-", "-") == m.cost("-", "-")
    for r in "ABC":
        for c in "ABC":
            assert updated.cost(r, c) == m.cost(r, c)
        assert updated.gap_cost(r) > m.gap_cost(r)
        assert updated.cost(r, "-") == updated.gap_cost(r)


def test_with_deletion_score_leaves_original_untouched():
    m = parse_substitution_matrix(COST_TEXT, -6.0)
    before = {row: dict(values) for row, values in m.scores.items()}
    m.with_deletion_score(-2.0)
    assert m.scores == before


def test_format_header_and_rows():
    m = SubstitutionMatrix({"A": {"A": 0.0, "-": 1.5}, "-": {"A": 1.5, "-": 0.0}}, 1.5)
    lines = m.format().splitlines()
    assert lines[0] == "    " + "     -" + "     A"
    assert lines[1] == "   -" + "  0.00" + "  1.50"
    assert lines[2] == "   A" + "  1.50" + "  0.00"


def test_format_has_row_per_key():
    m = parse_substitution_matrix(SCORE_TEXT, -6.0)
    lines = m.format().splitlines()
    assert len(lines) == 1 + len(m.scores)
    assert [line[:4].strip() for line in lines[1:]] == sorted(m.scores)