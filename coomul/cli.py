"""
Unified CLI dispatcher for coomul.

The ``coomul`` entry point exposes ``coomul run``, ``coomul bench`` and
``coomul verify``.  The ``coomul-bench`` console script is a thin wrapper over
the ``bench`` subcommand that shares the same parsing logic.
"""

from __future__ import annotations

import argparse
import dataclasses
import importlib.metadata
import logging
import sys
import time
import typing
from pathlib import Path
from typing import Any, Sequence

import numpy as np

from .cli_progress import CLIProgress
from .config import RunConfig
from .display import preview, print_sorted
from .generate import random_coo
from .matrix import DimensionMismatch, SparseMatrix
from .multiply import STRATEGIES, multiply

logger = logging.getLogger(__name__)


def _flag_type(hint: Any) -> Any:
    """Unwrap ``Optional[X]`` / ``X | None`` to the converter argparse should call."""

    args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
    if args and len(args) < len(typing.get_args(hint)):
        if len(args) != 1:
            raise TypeError(f"cannot build a flag for {hint!r}")
        return args[0]
    return hint


def _version() -> str:
    try:
        return importlib.metadata.version("coomul")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def _add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--quiet", action="store_true", help="Suppress progress lines.")
    parser.add_argument("--verbose", action="store_true", help="Enable INFO logging.")


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    hints = typing.get_type_hints(RunConfig)
    for option in dataclasses.fields(RunConfig):
        flag = "--" + option.name.replace("_", "-")
        help_text = option.metadata.get("help")
        converter = _flag_type(hints[option.name])
        if converter is bool:
            parser.add_argument(flag, action="store_true", dest=option.name, help=help_text)
            continue
        kwargs = {"type": converter, "default": option.default, "help": help_text}
        if "choices" in option.metadata:
            kwargs["choices"] = option.metadata["choices"]
        parser.add_argument(flag, dest=option.name, **kwargs)


def _config_from_args(args: argparse.Namespace) -> RunConfig:
    values = {option.name: getattr(args, option.name) for option in dataclasses.fields(RunConfig)}
    return RunConfig(**values)


def _add_run_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[arg-type]
    parser = subparsers.add_parser(
        "run",
        help="Multiply two random sparse matrices and print the product.",
        description="Generate random COO operands A (rows x cols) and B (cols x rows), "
        "multiply them on a thread pool and list the sorted product.  The default "
        "locked strategy merges with a linear scan of the product, so the full "
        "1000x1000 run takes minutes; pass --strategy sharded for a fast run.",
    )
    _add_config_arguments(parser)
    parser.add_argument(
        "--no-product",
        action="store_false",
        dest="show_product",
        help="Skip the sorted listing of the product.",
    )
    _add_common_flags(parser)
    parser.set_defaults(func=_handle_run)


def _add_bench_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[arg-type]
    parser = subparsers.add_parser(
        "bench",
        help="Time the multiplication across thread counts.",
        description="Multiply the same operands with each thread count and report timings.",
    )
    parser.add_argument("--rows", type=int, default=200, help="Rows of A (and columns of B).")
    parser.add_argument("--cols", type=int, default=200, help="Columns of A (and rows of B).")
    parser.add_argument("--nnz", type=int, default=1000, help="Random entries per operand.")
    parser.add_argument(
        "--threads",
        type=int,
        nargs="+",
        default=[1, 2, 4, 8],
        help="Thread counts to benchmark.",
    )
    parser.add_argument("--strategy", choices=STRATEGIES, default="locked", help="Accumulation strategy.")
    parser.add_argument("--indexed", action="store_true", help="Index the rows of B first.")
    parser.add_argument("--repeats", type=int, default=1, help="Timed runs per thread count.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the random operands.")
    parser.add_argument("--plot", metavar="PATH", help="Save a timing plot to PATH.")
    _add_common_flags(parser)
    parser.set_defaults(func=_handle_bench)


def _add_verify_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[arg-type]
    parser = subparsers.add_parser(
        "verify",
        help="Cross-check the sparse product against numpy.",
        description="Multiply small random matrices and compare with the dense product.",
    )
    parser.add_argument("--rows", type=int, default=40, help="Rows of A.")
    parser.add_argument("--inner", type=int, default=30, help="Columns of A and rows of B.")
    parser.add_argument("--cols", type=int, default=50, help="Columns of B.")
    parser.add_argument("--nnz", type=int, default=200, help="Random entries per operand.")
    parser.add_argument("--workers", type=int, default=4, help="Worker threads.")
    parser.add_argument("--strategy", choices=STRATEGIES, default="locked", help="Accumulation strategy.")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the random operands.")
    parser.add_argument("--atol", type=float, default=1e-9, help="Absolute tolerance.")
    _add_common_flags(parser)
    parser.set_defaults(func=_handle_verify)


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coomul", description="Threaded COO sparse matrix multiplication.")
    parser.add_argument("--version", action="version", version=f"coomul {_version()}")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_parser(subparsers)
    _add_bench_parser(subparsers)
    _add_verify_parser(subparsers)
    return parser


def _handle_run(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    progress = CLIProgress("coomul run", total_steps=2, quiet=args.quiet)
    rng = np.random.default_rng(config.seed)
    a = random_coo(config.rows, config.cols, config.nnz, seed=rng)
    b = random_coo(config.cols, config.rows, config.nnz, seed=rng)
    progress.step("generated operands")
    c = multiply(a, b, workers=config.workers, strategy=config.strategy, indexed=config.indexed)
    progress.step(f"multiplied ({c.nnz} entries)")
    preview(a, "A", config.preview_limit)
    preview(b, "B", config.preview_limit)
    if args.show_product:
        print_sorted(c, "C")
    return 0


def _time_multiply(
    a: SparseMatrix,
    b: SparseMatrix,
    threads: int,
    args: argparse.Namespace,
    progress: CLIProgress,
):
    best = float("inf")
    product = None
    repeats = max(1, args.repeats)
    for attempt in range(1, repeats + 1):
        start = time.perf_counter()
        product = multiply(a, b, workers=threads, strategy=args.strategy, indexed=args.indexed)
        best = min(best, time.perf_counter() - start)
        progress.step(f"{threads} threads, run {attempt}/{repeats}")
    return best, product


def _save_plot(path: Path, threads: Sequence[int], timings: Sequence[float], strategy: str) -> None:
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    plt.figure(figsize=(6, 4))
    plt.plot(threads, timings, marker="o", label=strategy)
    plt.xlabel("Worker threads")
    plt.ylabel("Seconds")
    plt.title("COO product time by thread count")
    plt.legend()
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    logger.info("Saved timing plot to %s", path)


def _handle_bench(args: argparse.Namespace) -> int:
    progress = CLIProgress("coomul bench", quiet=args.quiet)
    progress.set_total(1 + len(args.threads) * max(1, args.repeats))
    rng = np.random.default_rng(args.seed)
    a = random_coo(args.rows, args.cols, args.nnz, seed=rng)
    b = random_coo(args.cols, args.rows, args.nnz, seed=rng)
    progress.step("generated operands")

    reference = None
    timings: list[float] = []
    for threads in args.threads:
        elapsed, product = _time_multiply(a, b, threads, args, progress)
        dense = product.to_dense()
        if reference is None:
            reference = dense
        elif not np.allclose(dense, reference, rtol=1e-9, atol=1e-12):
            print(f"product with {threads} threads differs from the first run", file=sys.stderr)
            return 1
        timings.append(elapsed)

    print(f"operands: {a.shape} x {b.shape}, nnz={args.nnz}, strategy={args.strategy}")
    for threads, elapsed in zip(args.threads, timings):
        print(f"  {threads:3d} threads: {elapsed * 1e3:9.3f} ms")
    if args.plot:
        _save_plot(Path(args.plot), args.threads, timings, args.strategy)
    return 0


def _handle_verify(args: argparse.Namespace) -> int:
    rng = np.random.default_rng(args.seed)
    a = random_coo(args.rows, args.inner, args.nnz, seed=rng)
    b = random_coo(args.inner, args.cols, args.nnz, seed=rng)
    c = multiply(a, b, workers=args.workers, strategy=args.strategy)
    expected = a.to_dense() @ b.to_dense()
    actual = c.to_dense()
    if not np.allclose(actual, expected, rtol=0.0, atol=args.atol):
        worst = float(np.max(np.abs(actual - expected)))
        print(f"sparse product deviates from numpy by {worst:.3e}", file=sys.stderr)
        return 1
    print(f"sparse product matches numpy ({c.nnz} entries, {args.workers} workers, {args.strategy})")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for the unified ``coomul`` CLI."""
    parser = _create_parser()
    args = parser.parse_args(None if argv is None else list(argv))
    if args.verbose:
        logging.basicConfig(level=logging.INFO)
    try:
        return args.func(args)
    except DimensionMismatch as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


def main_bench(argv: Sequence[str] | None = None) -> int:
    args = ["bench"] + (list(argv) if argv is not None else sys.argv[1:])
    return main(args)
