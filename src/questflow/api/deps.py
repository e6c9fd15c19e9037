"""Shared dependency providers for FastAPI routers."""

from __future__ import annotations

from functools import lru_cache

from questflow.core.settings import EngineConfig, load_engine_config
from questflow.domain.usecase.reward_model import RewardModel
from questflow.infra.reward_tables import get_reward_model


@lru_cache(maxsize=1)
def get_engine_config() -> EngineConfig:
    return load_engine_config()


def get_rewards() -> RewardModel:
    return get_reward_model()
