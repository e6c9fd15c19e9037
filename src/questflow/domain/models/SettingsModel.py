from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Tuple

from questflow.core.settings import DEFAULT_ENGINE_CONFIG, EngineConfig
from questflow.domain.errors import ValidationIssue
from questflow.domain.models.QueueModel import QueueType

MIN_MINUTES_PER_GAME = 3
MAX_MINUTES_PER_GAME = 30


@dataclass(frozen=True)
class UserSettings:
    """Caller preferences; only defaults and filters, never overrides."""

    default_win_rate: float = 0.5
    # empty means every queue the reward table knows about
    preferred_queues: Tuple[QueueType, ...] = field(default_factory=tuple)
    minutes_per_game: float = 8

    def __post_init__(self) -> None:
        object.__setattr__(self, "preferred_queues", tuple(self.preferred_queues))

    def validate_settings(
        self, config: EngineConfig = DEFAULT_ENGINE_CONFIG
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []

        rate = self.default_win_rate
        if not isinstance(rate, (int, float)) or not math.isfinite(rate) or not (
            config.min_win_rate <= rate <= config.max_win_rate
        ):
            issues.append(
                ValidationIssue(
                    "settings.default_win_rate",
                    f"Default win rate must be between {config.min_win_rate} "
                    f"and {config.max_win_rate}",
                )
            )

        if any(not isinstance(q, QueueType) for q in self.preferred_queues):
            issues.append(
                ValidationIssue("settings.preferred_queues", "Invalid queue type")
            )
        if len(set(self.preferred_queues)) != len(self.preferred_queues):
            issues.append(
                ValidationIssue(
                    "settings.preferred_queues", "Preferred queues must be unique"
                )
            )

        minutes = self.minutes_per_game
        if not isinstance(minutes, (int, float)) or not (
            MIN_MINUTES_PER_GAME <= minutes <= MAX_MINUTES_PER_GAME
        ):
            issues.append(
                ValidationIssue(
                    "settings.minutes_per_game",
                    f"Minutes per game must be between {MIN_MINUTES_PER_GAME} "
                    f"and {MAX_MINUTES_PER_GAME}",
                )
            )
        return issues


def create_default_settings() -> UserSettings:
    return UserSettings()


__all__ = ["UserSettings", "create_default_settings"]
