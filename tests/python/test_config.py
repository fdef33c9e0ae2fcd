"""tests/python/test_config.py — Validation of the batch run parameters."""

from __future__ import annotations

import dataclasses

import pytest

from coomul.config import RunConfig


def test_defaults_match_batch_run():
    config = RunConfig()
    assert (config.rows, config.cols, config.nnz) == (1000, 1000, 10000)
    assert config.workers is None
    assert config.strategy == "locked"
    assert config.preview_limit == 5


def test_every_field_documents_itself():
    for option in dataclasses.fields(RunConfig):
        assert option.metadata.get("help"), option.name


@pytest.mark.parametrize(
    "kwargs",
    [{"rows": -1}, {"nnz": -5}, {"workers": 0}, {"strategy": "parallel"}],
)
def test_invalid_values_raise(kwargs):
    with pytest.raises(ValueError):
        RunConfig(**kwargs)


def test_strategy_choices_follow_multiply():
    from coomul.multiply import STRATEGIES

    strategy = next(f for f in dataclasses.fields(RunConfig) if f.name == "strategy")
    assert strategy.metadata["choices"] == STRATEGIES
    for name in STRATEGIES:
        assert RunConfig(strategy=name).strategy == name
