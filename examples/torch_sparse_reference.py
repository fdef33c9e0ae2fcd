"""Check the threaded COO product against ``torch.sparse.mm``."""

import numpy as np
import torch

from coomul import multiply, random_coo
from coomul.torch import from_torch, reference_product, to_torch


def main():
    rows = 256
    inner = 192
    cols = 128
    nnz = 2000
    a = random_coo(rows, inner, nnz, seed=7)
    b = random_coo(inner, cols, nnz, seed=8)

    c = multiply(a, b, workers=8, strategy="sharded", indexed=True)
    reference = reference_product(a, b)
    if not np.allclose(c.to_dense(), reference, rtol=1e-9, atol=1e-12):
        raise RuntimeError("Threaded COO product deviated from torch.sparse.mm")

    roundtrip = from_torch(to_torch(c))
    print("COO product matches torch.sparse.mm")
    print(f"Non-zeros: {c.nnz:,} / {rows * cols:,} ({c.nnz / (rows * cols) * 100:.2f}% density)")
    print(f"Result norm: {torch.linalg.norm(torch.from_numpy(roundtrip.to_dense())):.4f}")


if __name__ == "__main__":
    main()
