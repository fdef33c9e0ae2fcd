import numpy as np
import pytest


torch = pytest.importorskip("torch")


def test_to_torch_keeps_duplicates_until_coalesced():
    from coomul.matrix import SparseMatrix
    from coomul.torch import to_torch

    matrix = SparseMatrix.from_entries(2, 3, [(0, 1, 1.0), (0, 1, 2.0), (1, 2, 4.0)])
    tensor = to_torch(matrix)
    assert tensor.is_sparse
    assert not tensor.is_coalesced()
    assert tensor._nnz() == 3
    assert tuple(tensor.shape) == (2, 3)
    np.testing.assert_allclose(tensor.to_dense().numpy(), matrix.to_dense())


def test_from_torch_accepts_dense_and_sparse():
    from coomul.torch import from_torch

    dense = torch.tensor([[0.0, 2.0], [3.0, 0.0]], dtype=torch.float64)
    from_dense = from_torch(dense)
    from_sparse = from_torch(dense.to_sparse())
    assert from_dense.shape == (2, 2)
    assert sorted(e.as_tuple() for e in from_dense) == [(0, 1, 2.0), (1, 0, 3.0)]
    assert sorted(e.as_tuple() for e in from_sparse) == [(0, 1, 2.0), (1, 0, 3.0)]
    with pytest.raises(ValueError):
        from_torch(torch.zeros(2, 2, 2))


def test_product_matches_torch_sparse_mm():
    from coomul.generate import random_coo
    from coomul.multiply import multiply
    from coomul.torch import reference_product

    a = random_coo(24, 18, 90, seed=21)
    b = random_coo(18, 30, 90, seed=22)
    c = multiply(a, b, workers=4, strategy="sharded")
    np.testing.assert_allclose(c.to_dense(), reference_product(a, b), rtol=1e-12, atol=1e-12)


def test_reference_product_checks_dimensions():
    from coomul.matrix import DimensionMismatch, SparseMatrix
    from coomul.torch import reference_product

    with pytest.raises(DimensionMismatch):
        reference_product(SparseMatrix(3, 4), SparseMatrix(5, 2))
