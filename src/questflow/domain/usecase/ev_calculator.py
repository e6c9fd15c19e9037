"""Expected-value and quest-progress arithmetic for a single queue.

Every function here is pure: it reads a reward profile, never mutates its
inputs and raises ``ValidationError`` for inputs outside the documented
domain instead of producing NaN or infinite values.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from questflow.core.settings import DEFAULT_ENGINE_CONFIG, EngineConfig
from questflow.domain.errors import ValidationIssue, raise_if_issues
from questflow.domain.models.QuestModel import Quest, QuestType
from questflow.domain.models.QueueModel import QueueRewardProfile, QueueType
from questflow.domain.usecase._shared import ceil_games, check_probability
from questflow.domain.usecase.reward_model import RewardModel, expected_reward


@dataclass(frozen=True, slots=True)
class QueueEV:
    queue: QueueType
    expected_primary: float
    expected_secondary: float
    expected_bonus: float
    expected_value: float  # gross, in primary units
    entry_cost: float
    net_value: float
    ev_per_minute: float


@dataclass(frozen=True, slots=True)
class CombinedEV(QueueEV):
    quest_completion_bonus: float = 0.0


@dataclass(frozen=True, slots=True)
class QuestProgressRate:
    progress_per_game: float
    games_to_complete: float  # math.inf when the queue cannot progress the quest
    minutes_to_complete: float


@dataclass(frozen=True, slots=True)
class CompletionEstimate:
    can_complete: bool
    minutes_needed: float
    games_needed: float
    progress_per_game: float
    time_remaining: float


@dataclass(frozen=True, slots=True)
class QueueComparison:
    queue: QueueType
    ev: CombinedEV
    progress: QuestProgressRate


def _resolve_rewards(rewards: Optional[RewardModel]) -> RewardModel:
    if rewards is not None:
        return rewards
    from questflow.infra.reward_tables import get_reward_model

    return get_reward_model()


def _check_quest(quest: Quest) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    if not isinstance(quest.quest_type, QuestType):
        issues.append(
            ValidationIssue("quest.quest_type", "Quest type must be win, cast, or play_colors")
        )
    remaining = quest.remaining
    if (
        not isinstance(remaining, (int, float))
        or isinstance(remaining, bool)
        or not math.isfinite(remaining)
        or remaining < 0
    ):
        issues.append(ValidationIssue("quest.remaining", "Remaining count cannot be negative"))
    return issues


def _check_budget(time_budget: float) -> list[ValidationIssue]:
    if (
        not isinstance(time_budget, (int, float))
        or isinstance(time_budget, bool)
        or math.isnan(time_budget)
        or time_budget < 0
    ):
        return [ValidationIssue("time_budget", "Time budget cannot be negative")]
    return []


def profile_ev(
    profile: QueueRewardProfile,
    win_rate: float,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> QueueEV:
    """EV of one game on an already resolved profile."""
    raise_if_issues(check_probability(win_rate))

    expected_primary = expected_reward(profile.primary_rewards, win_rate)
    expected_secondary = expected_reward(profile.secondary_rewards, win_rate)
    expected_bonus = expected_reward(profile.bonus_rewards, win_rate)

    expected_value = (
        expected_primary
        + expected_secondary * config.secondary_to_primary
        + expected_bonus * config.bonus_to_primary
    )
    net_value = expected_value - profile.entry_cost

    return QueueEV(
        queue=profile.queue,
        expected_primary=expected_primary,
        expected_secondary=expected_secondary,
        expected_bonus=expected_bonus,
        expected_value=expected_value,
        entry_cost=profile.entry_cost,
        net_value=net_value,
        ev_per_minute=net_value / profile.average_game_minutes,
    )


def queue_ev(
    queue: QueueType | str,
    win_rate: float,
    *,
    rewards: Optional[RewardModel] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> QueueEV:
    """Expected value of one game in ``queue`` at ``win_rate``."""
    profile = _resolve_rewards(rewards).lookup(queue)
    return profile_ev(profile, win_rate, config)


def progress_per_game(
    quest: Quest,
    profile: QueueRewardProfile,
    win_rate: float,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> float:
    multiplier = profile.multiplier_for(quest.quest_type)

    if quest.quest_type is QuestType.WIN_GAMES:
        base = win_rate * multiplier
    elif quest.quest_type is QuestType.CAST_SPELLS:
        base = config.base_spells_per_game * multiplier
    elif quest.quest_type is QuestType.PLAY_COLORS:
        base = 1.0 * multiplier
    else:  # pragma: no cover - QuestType is closed
        raise ValueError(f"Unhandled quest type: {quest.quest_type!r}")

    return min(base, quest.remaining)


def quest_progress_rate(
    quest: Quest,
    queue: QueueType | str,
    win_rate: float,
    *,
    rewards: Optional[RewardModel] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> QuestProgressRate:
    """Per-game progress on ``quest`` and the games/minutes left to finish it."""
    raise_if_issues(check_probability(win_rate) + _check_quest(quest))
    profile = _resolve_rewards(rewards).lookup(queue)

    if quest.remaining == 0:
        return QuestProgressRate(0.0, 0, 0.0)

    per_game = progress_per_game(quest, profile, win_rate, config)
    if per_game <= 0:
        return QuestProgressRate(per_game, math.inf, math.inf)

    games = ceil_games(quest.remaining / per_game)
    return QuestProgressRate(
        progress_per_game=per_game,
        games_to_complete=games,
        minutes_to_complete=games * profile.average_game_minutes,
    )


def estimate_completion(
    quest: Quest,
    queue: QueueType | str,
    win_rate: float,
    time_budget: float,
    *,
    rewards: Optional[RewardModel] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> CompletionEstimate:
    raise_if_issues(_check_budget(time_budget))
    rate = quest_progress_rate(quest, queue, win_rate, rewards=rewards, config=config)
    return CompletionEstimate(
        can_complete=rate.minutes_to_complete <= time_budget,
        minutes_needed=rate.minutes_to_complete,
        games_needed=rate.games_to_complete,
        progress_per_game=rate.progress_per_game,
        time_remaining=max(0.0, time_budget - rate.minutes_to_complete),
    )


def combined_ev(
    quest: Quest,
    queue: QueueType | str,
    win_rate: float,
    *,
    rewards: Optional[RewardModel] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> CombinedEV:
    """Queue EV plus the quest completion bonus amortized per game."""
    model = _resolve_rewards(rewards)
    profile = model.lookup(queue)
    base = profile_ev(profile, win_rate, config)
    rate = quest_progress_rate(quest, queue, win_rate, rewards=model, config=config)

    games = rate.games_to_complete
    bonus_per_game = (
        config.quest_completion_bonus / games if 0 < games < math.inf else 0.0
    )
    net_value = base.net_value + bonus_per_game

    return CombinedEV(
        queue=base.queue,
        expected_primary=base.expected_primary,
        expected_secondary=base.expected_secondary,
        expected_bonus=base.expected_bonus,
        expected_value=base.expected_value + bonus_per_game,
        entry_cost=base.entry_cost,
        net_value=net_value,
        ev_per_minute=net_value / profile.average_game_minutes,
        quest_completion_bonus=bonus_per_game,
    )


def compare_queues_for_quest(
    quest: Quest,
    queues: Sequence[QueueType | str],
    win_rate: float,
    *,
    rewards: Optional[RewardModel] = None,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[QueueComparison]:
    """Rank ``queues`` for one quest by combined EV per minute, best first."""
    model = _resolve_rewards(rewards)
    results = [
        QueueComparison(
            queue=model.lookup(queue).queue,
            ev=combined_ev(quest, queue, win_rate, rewards=model, config=config),
            progress=quest_progress_rate(
                quest, queue, win_rate, rewards=model, config=config
            ),
        )
        for queue in queues
    ]
    return sorted(results, key=lambda r: (-r.ev.ev_per_minute, r.queue.value))


__all__ = [
    "QueueEV",
    "CombinedEV",
    "QuestProgressRate",
    "CompletionEstimate",
    "QueueComparison",
    "profile_ev",
    "queue_ev",
    "progress_per_game",
    "quest_progress_rate",
    "estimate_completion",
    "combined_ev",
    "compare_queues_for_quest",
]
