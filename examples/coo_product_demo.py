"""Multiply two random 1000x1000 COO matrices and list the sorted product."""

from __future__ import annotations

import logging

from coomul import multiply, preview, print_sorted, random_coo

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROWS = 1000
COLS = 1000
NNZ = 10000


def main() -> None:
    a = random_coo(ROWS, COLS, NNZ)
    b = random_coo(COLS, ROWS, NNZ)
    c = multiply(a, b)
    logger.info("product holds %d of %d possible entries", c.nnz, c.capacity)
    preview(a, "A", 5)
    preview(b, "B", 5)
    print_sorted(c, "C")


if __name__ == "__main__":
    main()
