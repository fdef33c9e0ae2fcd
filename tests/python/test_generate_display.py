"""tests/python/test_generate_display.py — Random operands and console rendering."""

from __future__ import annotations

import io

import numpy as np
import pytest

from coomul.display import format_entry, preview, print_sorted, sorted_view
from coomul.generate import random_coo
from coomul.matrix import SparseMatrix


def test_random_coo_respects_bounds():
    matrix = random_coo(7, 3, 50, seed=1)
    assert matrix.shape == (7, 3)
    assert matrix.nnz == matrix.capacity == 50
    rows, cols, values = matrix.to_arrays()
    assert rows.min() >= 0 and rows.max() < 7
    assert cols.min() >= 0 and cols.max() < 3
    assert np.all((values >= 0.0) & (values < 1.0))


def test_random_coo_is_reproducible():
    first = random_coo(20, 20, 40, seed=42)
    second = random_coo(20, 20, 40, seed=42)
    assert [e.as_tuple() for e in first] == [e.as_tuple() for e in second]


def test_random_coo_accepts_generator():
    rng = np.random.default_rng(3)
    first = random_coo(5, 5, 5, seed=rng)
    second = random_coo(5, 5, 5, seed=rng)
    assert [e.as_tuple() for e in first] != [e.as_tuple() for e in second]


def test_random_coo_empty():
    assert random_coo(0, 0, 0).nnz == 0


@pytest.mark.parametrize(("rows", "cols", "nnz"), [(-1, 2, 1), (2, 2, -1), (0, 3, 1)])
def test_random_coo_rejects_bad_sizes(rows, cols, nnz):
    with pytest.raises(ValueError):
        random_coo(rows, cols, nnz)


def test_sorted_view_orders_without_mutating():
    matrix = SparseMatrix.from_entries(3, 3, [(2, 0, 1.0), (0, 2, 2.0), (0, 1, 3.0), (1, 1, 4.0)])
    before = [e.as_tuple() for e in matrix]
    ordered = [e.as_tuple() for e in sorted_view(matrix)]
    assert ordered == [(0, 1, 3.0), (0, 2, 2.0), (1, 1, 4.0), (2, 0, 1.0)]
    assert [e.as_tuple() for e in matrix] == before


def test_preview_truncates_with_ellipsis():
    matrix = SparseMatrix.from_entries(2, 2, [(0, 0, 1.0), (0, 1, 2.0), (1, 0, 3.0)])
    buffer = io.StringIO()
    preview(matrix, "A", 2, file=buffer)
    lines = buffer.getvalue().splitlines()
    assert lines[0] == "Matrix A (rows: 2, cols: 2, entries: 3):"
    assert lines[1] == "  entry 1: row 0 col 0: 1.00"
    assert lines[2] == "  entry 2: row 0 col 1: 2.00"
    assert lines[3] == "  ..."
    assert len(lines) == 4


def test_preview_without_truncation():
    matrix = SparseMatrix.from_entries(2, 2, [(1, 1, 0.125)])
    buffer = io.StringIO()
    preview(matrix, "B", 5, file=buffer)
    assert "..." not in buffer.getvalue()
    assert buffer.getvalue().splitlines()[-1] == "  entry 1: row 1 col 1: 0.12"


def test_print_sorted_lists_everything(capsys):
    matrix = SparseMatrix.from_entries(2, 2, [(1, 0, 1.0), (0, 1, 2.0)])
    print_sorted(matrix, "C")
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "Matrix C (rows: 2, cols: 2, entries: 2):",
        "  row 0 col 1: 2.00",
        "  row 1 col 0: 1.00",
    ]
    assert format_entry(matrix.entries[0]) == "row 1 col 0: 1.00"
