"""
coomul.multiply — row-parallel COO × COO multiplication.

``multiply`` hands contiguous blocks of output rows to a thread pool.  With the
default ``"locked"`` strategy every worker merges its partial products straight
into the shared result under one lock; the ``"sharded"`` strategy keeps a
private accumulator per block and concatenates the shards after the join.
Both fold equal coordinates by summation and never store a zero product.
"""

from __future__ import annotations

import contextlib
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import ContextManager, Dict, List, Mapping, Optional, Sequence, Tuple

from .matrix import DimensionMismatch, Entry, SparseMatrix

logger = logging.getLogger(__name__)

STRATEGIES = ("locked", "sharded")

RowIndex = Mapping[int, Sequence[Entry]]


def index_rows(matrix: SparseMatrix) -> Dict[int, List[Entry]]:
    """Group the entries of ``matrix`` by row."""

    grouped: Dict[int, List[Entry]] = {}
    for entry in matrix.entries:
        grouped.setdefault(entry.row, []).append(entry)
    return grouped


def _merge(c: SparseMatrix, row: int, col: int, value: float) -> None:
    # Caller holds the merge lock for the whole search-then-update-or-append.
    for entry in c.entries:
        if entry.row == row and entry.col == col:
            entry.value += value
            return
    if value != 0:
        c.append(row, col, value)


def _partial_products(
    row: int,
    a: SparseMatrix,
    b: SparseMatrix,
    b_rows: Optional[RowIndex] = None,
):
    for a_entry in a.entries:
        if a_entry.row != row:
            continue
        if b_rows is not None:
            candidates: Sequence[Entry] = b_rows.get(a_entry.col, ())
        else:
            candidates = b.entries
        for b_entry in candidates:
            if b_entry.row == a_entry.col:
                yield b_entry.col, a_entry.value * b_entry.value


def multiply_row(
    row: int,
    a: SparseMatrix,
    b: SparseMatrix,
    c: SparseMatrix,
    lock: Optional[ContextManager] = None,
    b_rows: Optional[RowIndex] = None,
) -> None:
    """Accumulate ``A[row, :] · B`` into ``c``.

    Every partial product is merged into ``c`` inside ``lock``: an existing
    entry at ``(row, col)`` absorbs the value, otherwise a nonzero product is
    appended.  ``b_rows`` is an optional ``index_rows(b)`` lookup that skips
    the full scan of ``b`` without changing the result.
    """

    guard = lock if lock is not None else contextlib.nullcontext()
    for col, value in _partial_products(row, a, b, b_rows):
        with guard:
            _merge(c, row, col, value)


def _accumulate_block(
    block: range,
    a: SparseMatrix,
    b: SparseMatrix,
    b_rows: Optional[RowIndex],
) -> Dict[Tuple[int, int], float]:
    shard: Dict[Tuple[int, int], float] = {}
    for row in block:
        for col, value in _partial_products(row, a, b, b_rows):
            key = (row, col)
            if key in shard:
                shard[key] += value
            elif value != 0:
                shard[key] = value
    return shard


def partition_rows(rows: int, workers: int) -> List[range]:
    """Split ``range(rows)`` into at most ``workers`` contiguous, non-empty blocks."""

    if rows <= 0:
        return []
    workers = max(1, min(workers, rows))
    base, extra = divmod(rows, workers)
    blocks: List[range] = []
    start = 0
    for index in range(workers):
        stop = start + base + (1 if index < extra else 0)
        blocks.append(range(start, stop))
        start = stop
    return blocks


def _resolve_workers(workers: Optional[int]) -> int:
    if workers is None:
        return os.cpu_count() or 1
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")
    return int(workers)


def multiply(
    a: SparseMatrix,
    b: SparseMatrix,
    workers: Optional[int] = None,
    strategy: str = "locked",
    indexed: bool = False,
) -> SparseMatrix:
    """Return ``a @ b`` as a new, unsorted ``SparseMatrix``.

    Raises ``DimensionMismatch`` when ``a.cols != b.rows``.  The result is
    sized for the worst case ``a.nnz * b.nnz``; each worker owns a disjoint
    block of rows of ``a`` and the call returns only after every worker
    has finished.
    """

    if a.cols != b.rows:
        raise DimensionMismatch(a.shape, b.shape)
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown strategy {strategy!r}, expected one of {STRATEGIES}")
    workers = _resolve_workers(workers)

    c = SparseMatrix(a.rows, b.cols, capacity=a.nnz * b.nnz)
    if a.nnz == 0 or b.nnz == 0:
        return c

    b_rows = index_rows(b) if indexed else None
    blocks = partition_rows(a.rows, workers)
    logger.debug(
        "multiplying %s by %s: %d row blocks, strategy=%s, indexed=%s",
        a.shape,
        b.shape,
        len(blocks),
        strategy,
        indexed,
    )

    start = time.perf_counter()
    with ThreadPoolExecutor(max_workers=workers) as executor:
        if strategy == "locked":
            lock = threading.Lock()

            def run_block(block: range) -> None:
                for row in block:
                    multiply_row(row, a, b, c, lock=lock, b_rows=b_rows)

            list(executor.map(run_block, blocks))
        else:
            shards = list(
                executor.map(lambda block: _accumulate_block(block, a, b, b_rows), blocks)
            )
            for shard in shards:
                for (row, col), value in shard.items():
                    c.append(row, col, value)
    elapsed = time.perf_counter() - start

    logger.info(
        "product %s ready: nnz=%d workers=%d strategy=%s elapsed=%.4fs",
        c.shape,
        c.nnz,
        workers,
        strategy,
        elapsed,
    )
    return c
