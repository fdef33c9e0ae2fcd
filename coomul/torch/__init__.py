"""
PyTorch helpers that move ``coomul`` matrices in and out of ``torch.sparse_coo_tensor``.

The bridge is only used for interop and as an independent reference product; the
threaded multiplication itself never touches torch.
"""

from __future__ import annotations

import numpy as np

try:
    import torch
except ImportError as exc:  # pragma: no cover - only triggered when extras missing
    raise ImportError(
        "coomul.torch requires PyTorch; install it with `pip install coomul[torch]`"
    ) from exc

from coomul.matrix import DimensionMismatch, SparseMatrix


def to_torch(matrix: SparseMatrix, dtype: torch.dtype = torch.float64) -> torch.Tensor:
    """Return an uncoalesced sparse COO tensor holding the same entries."""

    rows, cols, values = matrix.to_arrays()
    indices = torch.from_numpy(np.vstack([rows, cols]))
    return torch.sparse_coo_tensor(
        indices,
        torch.from_numpy(values).to(dtype),
        size=matrix.shape,
    )


def from_torch(tensor: torch.Tensor) -> SparseMatrix:
    """Build a ``SparseMatrix`` from a 2-D sparse or dense tensor."""

    if tensor.dim() != 2:
        raise ValueError(f"expected a 2-D tensor, got {tensor.dim()} dimensions")
    sparse = tensor if tensor.is_sparse else tensor.to_sparse()
    sparse = sparse.coalesce().cpu()
    indices = sparse.indices().tolist()
    values = sparse.values().to(torch.float64).tolist()
    rows, cols = tensor.shape
    return SparseMatrix.from_entries(rows, cols, zip(indices[0], indices[1], values))


def reference_product(a: SparseMatrix, b: SparseMatrix) -> np.ndarray:
    """Dense ``a @ b`` computed by ``torch.sparse.mm``."""

    if a.cols != b.rows:
        raise DimensionMismatch(a.shape, b.shape)
    dense_b = torch.from_numpy(b.to_dense())
    return torch.sparse.mm(to_torch(a), dense_b).numpy()
