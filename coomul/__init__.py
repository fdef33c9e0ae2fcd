"""
coomul package root: threaded sparse matrix multiplication in coordinate (COO) form.

Members resolve lazily so ``import coomul`` stays cheap and the optional
``coomul.torch`` bridge only imports PyTorch when it is actually touched.
"""

from __future__ import annotations

import importlib
from types import ModuleType
from typing import Any

__all__ = [
    "torch",
    "SparseMatrix",
    "Entry",
    "DimensionMismatch",
    "CapacityExceeded",
    "multiply",
    "multiply_row",
    "random_coo",
    "sorted_view",
    "preview",
    "print_sorted",
    "RunConfig",
]

_LAZY_MODULES: dict[str, str] = {
    "torch": ".torch",
}

_LAZY_MEMBERS: dict[str, tuple[str, str]] = {
    "SparseMatrix": (".matrix", "SparseMatrix"),
    "Entry": (".matrix", "Entry"),
    "DimensionMismatch": (".matrix", "DimensionMismatch"),
    "CapacityExceeded": (".matrix", "CapacityExceeded"),
    "multiply": (".multiply", "multiply"),
    "multiply_row": (".multiply", "multiply_row"),
    "random_coo": (".generate", "random_coo"),
    "sorted_view": (".display", "sorted_view"),
    "preview": (".display", "preview"),
    "print_sorted": (".display", "print_sorted"),
    "RunConfig": (".config", "RunConfig"),
}

_MODULE_CACHE: dict[str, ModuleType] = {}


def _import_module(path: str) -> ModuleType:
    module = _MODULE_CACHE.get(path)
    if module is None:
        module = importlib.import_module(path, __name__)
        _MODULE_CACHE[path] = module
    return module


def __getattr__(name: str) -> Any:
    if name in _LAZY_MODULES:
        module = _import_module(_LAZY_MODULES[name])
        globals()[name] = module
        return module
    if name in _LAZY_MEMBERS:
        module_path, attr = _LAZY_MEMBERS[name]
        module = _import_module(module_path)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__} has no attribute {name}")


def __dir__() -> list[str]:
    return sorted(set(__all__) | set(globals().keys()))
