"""Random COO matrices used as multiplication inputs."""

from __future__ import annotations

from typing import Union

import numpy as np

from .matrix import SparseMatrix

SeedLike = Union[int, np.random.Generator, None]


def random_coo(rows: int, cols: int, nnz: int, seed: SeedLike = None) -> SparseMatrix:
    """Fill a ``rows`` x ``cols`` matrix with ``nnz`` random entries.

    Coordinates are drawn uniformly inside the bounds (duplicates are allowed)
    and values uniformly from ``[0, 1)``.  The returned matrix has capacity
    ``nnz``.
    """

    if rows < 0 or cols < 0 or nnz < 0:
        raise ValueError(f"rows, cols and nnz must be non-negative, got {rows}, {cols}, {nnz}")
    if nnz and (rows == 0 or cols == 0):
        raise ValueError(f"cannot place {nnz} entries in a {rows}x{cols} matrix")
    rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
    row_idx = rng.integers(0, rows, size=nnz) if nnz else np.empty(0, dtype=np.int64)
    col_idx = rng.integers(0, cols, size=nnz) if nnz else np.empty(0, dtype=np.int64)
    values = rng.random(nnz)
    matrix = SparseMatrix(rows, cols, capacity=nnz)
    for row, col, value in zip(row_idx.tolist(), col_idx.tolist(), values.tolist()):
        matrix.append(row, col, value)
    return matrix
