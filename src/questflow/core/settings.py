from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Optional


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw.strip())
    except ValueError:
        return default
    if not math.isfinite(value) or value < 0:
        return default
    return value


def _env_path(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return os.path.expanduser(raw.strip())


@dataclass(frozen=True)
class EngineConfig:
    """Policy constants for the quest optimization engine."""

    # Input bounds
    min_time_budget: int = 15
    max_time_budget: int = 180
    min_win_rate: float = 0.3
    max_win_rate: float = 0.8
    max_quest_remaining: int = 100
    max_quest_expiry_days: int = 7
    max_description_length: int = 200
    max_quest_colors: int = 5

    # Scheduler shape
    max_plan_steps: int = 10
    min_games_per_step: int = 1
    max_games_per_step: int = 3
    unused_time_warning_minutes: int = 15

    # Reward policy
    quest_completion_bonus: float = 500.0
    base_spells_per_game: float = 10.0
    secondary_to_primary: float = 5.0
    bonus_to_primary: float = 1000.0

    # Urgency policy
    critical_expiry_days: int = 1
    critical_urgency_multiplier: float = 2.0
    soon_expiry_days: int = 2
    soon_urgency_multiplier: float = 1.5

    # Reward table source; None uses the bundled document
    reward_tables_path: Optional[str] = None


DEFAULT_ENGINE_CONFIG = EngineConfig()


def load_engine_config() -> EngineConfig:
    """Construct EngineConfig from ``QUESTFLOW_*`` environment variables."""
    d = DEFAULT_ENGINE_CONFIG
    return EngineConfig(
        min_time_budget=_env_int("QUESTFLOW_MIN_TIME_BUDGET", d.min_time_budget),
        max_time_budget=_env_int("QUESTFLOW_MAX_TIME_BUDGET", d.max_time_budget),
        min_win_rate=_env_float("QUESTFLOW_MIN_WIN_RATE", d.min_win_rate),
        max_win_rate=_env_float("QUESTFLOW_MAX_WIN_RATE", d.max_win_rate),
        max_plan_steps=_env_int("QUESTFLOW_MAX_PLAN_STEPS", d.max_plan_steps),
        max_games_per_step=_env_int(
            "QUESTFLOW_MAX_GAMES_PER_STEP", d.max_games_per_step
        ),
        unused_time_warning_minutes=_env_int(
            "QUESTFLOW_UNUSED_TIME_WARNING_MINUTES", d.unused_time_warning_minutes
        ),
        quest_completion_bonus=_env_float(
            "QUESTFLOW_QUEST_COMPLETION_BONUS", d.quest_completion_bonus
        ),
        secondary_to_primary=_env_float(
            "QUESTFLOW_SECONDARY_TO_PRIMARY", d.secondary_to_primary
        ),
        bonus_to_primary=_env_float("QUESTFLOW_BONUS_TO_PRIMARY", d.bonus_to_primary),
        critical_urgency_multiplier=_env_float(
            "QUESTFLOW_CRITICAL_URGENCY_MULTIPLIER", d.critical_urgency_multiplier
        ),
        soon_urgency_multiplier=_env_float(
            "QUESTFLOW_SOON_URGENCY_MULTIPLIER", d.soon_urgency_multiplier
        ),
        reward_tables_path=_env_path("QUESTFLOW_REWARD_TABLES"),
    )


__all__ = ["EngineConfig", "DEFAULT_ENGINE_CONFIG", "load_engine_config"]
