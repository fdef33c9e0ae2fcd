"""
coomul.matrix — coordinate-list (COO) sparse matrix container.

A ``SparseMatrix`` owns an unordered list of ``Entry`` triples plus its declared
shape and an optional capacity bound.  The container only appends; folding
duplicate coordinates together is left to the row multiplier.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np


class DimensionMismatch(ValueError):
    """Raised when the inner dimensions of two operands disagree."""

    def __init__(self, left: Tuple[int, int], right: Tuple[int, int]) -> None:
        super().__init__(
            f"cannot multiply a {left[0]}x{left[1]} matrix by a {right[0]}x{right[1]} matrix"
        )
        self.left = left
        self.right = right


class CapacityExceeded(RuntimeError):
    """Raised when an append would grow a matrix past its capacity."""


@dataclass
class Entry:
    row: int
    col: int
    value: float

    def as_tuple(self) -> Tuple[int, int, float]:
        return (self.row, self.col, self.value)


class SparseMatrix:
    """COO sparse matrix with a fixed shape and an append-only entry list."""

    def __init__(self, rows: int, cols: int, capacity: Optional[int] = None) -> None:
        if rows < 0 or cols < 0:
            raise ValueError(f"matrix dimensions must be non-negative, got {rows}x{cols}")
        if capacity is not None and capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self.rows = int(rows)
        self.cols = int(cols)
        self.capacity = capacity
        self.entries: List[Entry] = []

    @classmethod
    def from_entries(
        cls,
        rows: int,
        cols: int,
        entries: Iterable[Sequence[float]],
        capacity: Optional[int] = None,
    ) -> "SparseMatrix":
        """Build a matrix from ``(row, col, value)`` triples or ``Entry`` objects."""

        matrix = cls(rows, cols, capacity=capacity)
        for item in entries:
            if isinstance(item, Entry):
                matrix.append(item.row, item.col, item.value)
            else:
                row, col, value = item
                matrix.append(row, col, value)
        return matrix

    @classmethod
    def from_dense(cls, array: np.ndarray) -> "SparseMatrix":
        dense = np.asarray(array, dtype=np.float64)
        if dense.ndim != 2:
            raise ValueError(f"expected a 2-D array, got {dense.ndim} dimensions")
        row_idx, col_idx = np.nonzero(dense)
        matrix = cls(dense.shape[0], dense.shape[1], capacity=len(row_idx))
        for row, col in zip(row_idx.tolist(), col_idx.tolist()):
            matrix.append(row, col, float(dense[row, col]))
        return matrix

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def nnz(self) -> int:
        return len(self.entries)

    def append(self, row: int, col: int, value: float) -> Entry:
        """Store a new entry in the next free slot."""

        if self.capacity is not None and len(self.entries) >= self.capacity:
            raise CapacityExceeded(
                f"{self.rows}x{self.cols} matrix is full ({self.capacity} entries)"
            )
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise ValueError(
                f"entry ({row}, {col}) is outside a {self.rows}x{self.cols} matrix"
            )
        entry = Entry(int(row), int(col), float(value))
        self.entries.append(entry)
        return entry

    def to_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        rows = np.fromiter((e.row for e in self.entries), dtype=np.int64, count=self.nnz)
        cols = np.fromiter((e.col for e in self.entries), dtype=np.int64, count=self.nnz)
        values = np.fromiter((e.value for e in self.entries), dtype=np.float64, count=self.nnz)
        return rows, cols, values

    def to_dense(self) -> np.ndarray:
        """Expand to a dense array; duplicate coordinates are summed."""

        dense = np.zeros(self.shape, dtype=np.float64)
        rows, cols, values = self.to_arrays()
        np.add.at(dense, (rows, cols), values)
        return dense

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __repr__(self) -> str:
        bound = "unbounded" if self.capacity is None else str(self.capacity)
        return f"SparseMatrix(shape={self.shape}, nnz={self.nnz}, capacity={bound})"
