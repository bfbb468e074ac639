"""Runtime configuration for the Context Bridge pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, TypeVar

_ENV_PREFIX = "CONTEXT_BRIDGE_"

T = TypeVar("T")


def _env_value(env: Mapping[str, str], name: str, cast: Callable[[str], T], default: T) -> T:
    raw = env.get(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid value for {_ENV_PREFIX}{name}: {raw!r}") from exc


@dataclass(slots=True)
class PipelineConfig:
    """Scoring weights, result limits and catalog location."""

    catalog_path: Path = Path("data/contextDatabase.json")
    top_n: int = 3
    recency_days: int = 180
    match_weight: float = 0.7
    recency_weight: float = 0.3
    stale_recency: float = 0.5
    min_token_length: int = 4
    mttc_target_ms: int = 30_000

    def __post_init__(self) -> None:
        if self.top_n < 0:
            raise ValueError("top_n must not be negative")
        if self.recency_days < 0:
            raise ValueError("recency_days must not be negative")
        if self.min_token_length < 1:
            raise ValueError("min_token_length must be positive")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "PipelineConfig":
        env = os.environ if env is None else env
        defaults = cls()
        return cls(
            catalog_path=_env_value(env, "CATALOG_PATH", lambda raw: Path(raw).expanduser(), defaults.catalog_path),
            top_n=_env_value(env, "TOP_N", int, defaults.top_n),
            recency_days=_env_value(env, "RECENCY_DAYS", int, defaults.recency_days),
            match_weight=_env_value(env, "MATCH_WEIGHT", float, defaults.match_weight),
            recency_weight=_env_value(env, "RECENCY_WEIGHT", float, defaults.recency_weight),
            stale_recency=_env_value(env, "STALE_RECENCY", float, defaults.stale_recency),
            min_token_length=_env_value(env, "MIN_TOKEN_LENGTH", int, defaults.min_token_length),
            mttc_target_ms=_env_value(env, "MTTC_TARGET_MS", int, defaults.mttc_target_ms),
        )
