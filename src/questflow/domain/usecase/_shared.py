from __future__ import annotations

import math
from typing import Any, Sequence

from questflow.core.settings import DEFAULT_ENGINE_CONFIG, EngineConfig
from questflow.domain.errors import InvariantViolation, ValidationIssue
from questflow.domain.models.QuestModel import Quest


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_valid_win_rate(value: Any, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> bool:
    return (
        _is_number(value)
        and math.isfinite(value)
        and config.min_win_rate <= value <= config.max_win_rate
    )


def is_valid_time_budget(value: Any, config: EngineConfig = DEFAULT_ENGINE_CONFIG) -> bool:
    return (
        _is_number(value)
        and float(value).is_integer()
        and config.min_time_budget <= value <= config.max_time_budget
    )


def check_probability(win_rate: Any) -> list[ValidationIssue]:
    """Issues for a raw win rate outside the closed unit interval."""
    if not _is_number(win_rate) or not math.isfinite(win_rate) or not 0 <= win_rate <= 1:
        return [ValidationIssue("win_rate", "Win rate must be between 0 and 1")]
    return []


def check_win_rate(win_rate: Any, config: EngineConfig) -> list[ValidationIssue]:
    if is_valid_win_rate(win_rate, config):
        return []
    return [
        ValidationIssue(
            "win_rate",
            f"Win rate must be between {config.min_win_rate} and {config.max_win_rate}",
        )
    ]


def check_time_budget(time_budget: Any, config: EngineConfig) -> list[ValidationIssue]:
    if is_valid_time_budget(time_budget, config):
        return []
    return [
        ValidationIssue(
            "time_budget",
            f"Time budget must be a whole number of minutes between "
            f"{config.min_time_budget} and {config.max_time_budget}",
        )
    ]


def check_quests(
    quests: Sequence[Quest], config: EngineConfig = DEFAULT_ENGINE_CONFIG
) -> list[ValidationIssue]:
    """Validate a batch of quests, prefixing each issue with its index."""
    issues: list[ValidationIssue] = []
    seen: set[str] = set()
    for index, quest in enumerate(quests):
        if not isinstance(quest, Quest):
            issues.append(ValidationIssue(f"quests[{index}]", "Expected a quest record"))
            continue
        issues.extend(quest.validate_quest(config, prefix=f"quests[{index}]."))
        if quest.quest_id in seen:
            issues.append(
                ValidationIssue(f"quests[{index}].quest_id", "Quest IDs must be unique")
            )
        seen.add(quest.quest_id)
    return issues


def ensure_finite(value: float, what: str) -> float:
    if not math.isfinite(value):
        raise InvariantViolation(f"{what} is not finite: {value!r}")
    return value


def round_half_up(value: float) -> int:
    """Whole reward units; halves round away from zero."""
    return int(math.floor(value + 0.5)) if value >= 0 else -int(math.floor(-value + 0.5))


def ceil_games(value: float) -> int:
    """Whole games needed to cover ``value``; near-integer quotients snap first."""
    nearest = round(value)
    if math.isclose(value, nearest, rel_tol=1e-9, abs_tol=1e-9):
        return int(nearest)
    return math.ceil(value)
