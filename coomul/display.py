"""Console helpers that render COO matrices read-only."""

from __future__ import annotations

import sys
from typing import List, Optional, TextIO

from .matrix import Entry, SparseMatrix


def sorted_view(matrix: SparseMatrix) -> List[Entry]:
    """Return the entries ordered by row, then column, leaving ``matrix`` untouched."""

    return sorted(matrix.entries, key=lambda entry: (entry.row, entry.col))


def format_entry(entry: Entry) -> str:
    return f"row {entry.row} col {entry.col}: {entry.value:.2f}"


def _header(matrix: SparseMatrix, name: str) -> str:
    return f"Matrix {name} (rows: {matrix.rows}, cols: {matrix.cols}, entries: {matrix.nnz}):"


def preview(matrix: SparseMatrix, name: str, limit: int = 5, file: Optional[TextIO] = None) -> None:
    """Print the first ``limit`` entries in storage order, then ``...`` if any were cut."""

    out = file or sys.stdout
    print(_header(matrix, name), file=out)
    for index, entry in enumerate(matrix.entries[: max(0, limit)], start=1):
        print(f"  entry {index}: {format_entry(entry)}", file=out)
    if matrix.nnz > limit:
        print("  ...", file=out)


def print_sorted(matrix: SparseMatrix, name: str, file: Optional[TextIO] = None) -> None:
    out = file or sys.stdout
    print(_header(matrix, name), file=out)
    for entry in sorted_view(matrix):
        print(f"  {format_entry(entry)}", file=out)
