from __future__ import annotations

from pathlib import Path

import pytest

from context_bridge.config import PipelineConfig


def test_defaults():
    config = PipelineConfig()

    assert config.catalog_path == Path("data/contextDatabase.json")
    assert config.top_n == 3
    assert config.recency_days == 180
    assert (config.match_weight, config.recency_weight, config.stale_recency) == (0.7, 0.3, 0.5)


def test_from_env_reads_prefixed_variables():
    config = PipelineConfig.from_env(
        {
            "CONTEXT_BRIDGE_CATALOG_PATH": "/tmp/catalog.json",
            "CONTEXT_BRIDGE_TOP_N": "5",
            "CONTEXT_BRIDGE_RECENCY_DAYS": "30",
            "CONTEXT_BRIDGE_MATCH_WEIGHT": "0.9",
            "CONTEXT_BRIDGE_RECENCY_WEIGHT": "0.1",
            "CONTEXT_BRIDGE_TOP_N_UNUSED": "ignored",
        }
    )

    assert config.catalog_path == Path("/tmp/catalog.json")
    assert config.top_n == 5
    assert config.recency_days == 30
    assert config.match_weight == 0.9
    assert config.recency_weight == 0.1
    assert config.min_token_length == 4


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("CONTEXT_BRIDGE_TOP_N", "1")
    monkeypatch.setenv("CONTEXT_BRIDGE_MTTC_TARGET_MS", " ")

    config = PipelineConfig.from_env()

    assert config.top_n == 1
    assert config.mttc_target_ms == 30_000


def test_invalid_value_names_the_variable():
    with pytest.raises(ValueError, match="CONTEXT_BRIDGE_TOP_N"):
        PipelineConfig.from_env({"CONTEXT_BRIDGE_TOP_N": "three"})


def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        PipelineConfig(top_n=-1)
