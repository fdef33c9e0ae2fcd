"""Parameters of the batch multiplication run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from .multiply import STRATEGIES


@dataclass
class RunConfig:
    """Knobs for ``coomul run``; every field doubles as a CLI flag."""

    rows: int = field(
        default=1000,
        metadata={"help": "Rows of A (and columns of B)."},
    )
    cols: int = field(
        default=1000,
        metadata={"help": "Columns of A (and rows of B)."},
    )
    nnz: int = field(
        default=10000,
        metadata={"help": "Random entries generated for each operand."},
    )
    workers: Optional[int] = field(
        default=None,
        metadata={"help": "Worker threads; defaults to the CPU count."},
    )
    strategy: str = field(
        default="locked",
        metadata={
            "help": "Accumulation strategy. locked scans the whole product on every merge "
            "and slows down quadratically with its size; sharded avoids the scan.",
            "choices": STRATEGIES,
        },
    )
    indexed: bool = field(
        default=False,
        metadata={"help": "Index the rows of B before multiplying."},
    )
    seed: Optional[int] = field(
        default=None,
        metadata={"help": "Seed for the random operands."},
    )
    preview_limit: int = field(
        default=5,
        metadata={"help": "Entries of A and B to preview."},
    )

    def __post_init__(self) -> None:
        if self.rows < 0 or self.cols < 0 or self.nnz < 0:
            raise ValueError("rows, cols and nnz must be non-negative")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.strategy not in STRATEGIES:
            raise ValueError(f"unknown strategy {self.strategy!r}, expected one of {STRATEGIES}")
