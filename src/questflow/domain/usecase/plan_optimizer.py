"""Greedy, time-boxed quest plan optimizer.

The planner walks a small state machine. While time and incomplete quests
remain, every allowed queue is scored as a ``QueueOption`` against the
current ``PlannerState`` and the best option that fits becomes the next
``PlanStep``. ``advance`` is the only transition and never mutates its
input, so each iteration can be inspected or replayed in isolation.
"""

from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional, Sequence, Tuple

from questflow.core.settings import DEFAULT_ENGINE_CONFIG, EngineConfig
from questflow.domain.errors import (
    InsufficientTimeError,
    InvariantViolation,
    NoActiveQuestsError,
    ValidationError,
)
from questflow.domain.models.PlanModel import OptimizedPlan, PlanStep, QuestProgress, Rewards
from questflow.domain.models.QuestModel import Quest
from questflow.domain.models.QueueModel import QueueRewardProfile, QueueType
from questflow.domain.models.ResultModel import OptimizationResult
from questflow.domain.models.SettingsModel import UserSettings, create_default_settings
from questflow.domain.usecase._shared import (
    ceil_games,
    check_quests,
    check_time_budget,
    check_win_rate,
    ensure_finite,
    round_half_up,
)
from questflow.domain.usecase.ev_calculator import (
    QueueEV,
    estimate_completion,
    profile_ev,
    progress_per_game,
)
from questflow.domain.usecase.reward_model import RewardModel

logger = logging.getLogger(__name__)

ALL_QUESTS_DONE_ADVICE = "All quests are already completed"
INSUFFICIENT_TIME_ADVICE = "Consider increasing time budget or adjusting win rate"

# tracked remaining below this counts as finished
_EPSILON = 1e-9


@dataclass(frozen=True)
class PlannerState:
    """Everything the greedy loop knows between two iterations."""

    remaining_minutes: float
    remaining: Mapping[str, float]
    completed: Tuple[str, ...] = ()
    steps: Tuple[PlanStep, ...] = ()

    @classmethod
    def start(cls, quests: Sequence[Quest], time_budget: int) -> "PlannerState":
        return cls(
            remaining_minutes=float(time_budget),
            remaining={q.quest_id: float(q.remaining) for q in quests},
        )

    def open_quest_ids(self) -> list[str]:
        return [qid for qid, left in self.remaining.items() if left > 0]

    @property
    def is_done(self) -> bool:
        return not self.open_quest_ids()


@dataclass(frozen=True)
class QueueOption:
    """One candidate step: a queue, a game count and what it would achieve."""

    queue: QueueType
    ev: QueueEV
    games: int
    minutes: float
    contributions: Tuple[QuestProgress, ...]
    completion_bonus: float
    urgency: float
    priority: float
    soonest_expiry: float = field(default=math.inf)

    def fits(self, remaining_minutes: float) -> bool:
        return self.minutes <= remaining_minutes + _EPSILON

    def sort_key(self) -> tuple:
        return (-round(self.priority, 9), self.soonest_expiry, self.queue.value)


def urgency_multiplier(
    expires_in_days: int, config: EngineConfig = DEFAULT_ENGINE_CONFIG
) -> float:
    if expires_in_days <= config.critical_expiry_days:
        return config.critical_urgency_multiplier
    if expires_in_days <= config.soon_expiry_days:
        return config.soon_urgency_multiplier
    return 1.0


def games_for_step(
    remaining_minutes: float,
    average_game_minutes: float,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> Optional[int]:
    """Games for the next block, or None when not even one game fits."""
    fits = math.floor((remaining_minutes + _EPSILON) / average_game_minutes)
    if fits < config.min_games_per_step:
        return None
    half = ceil_games(remaining_minutes / average_game_minutes / 2)
    return max(config.min_games_per_step, min(config.max_games_per_step, half, fits))


def evaluate_option(
    queue: QueueType,
    profile: QueueRewardProfile,
    quests: Sequence[Quest],
    state: PlannerState,
    win_rate: float,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> Optional[QueueOption]:
    games = games_for_step(state.remaining_minutes, profile.average_game_minutes, config)
    if games is None:
        return None

    contributions: list[QuestProgress] = []
    bonus = 0.0
    urgency = 1.0
    soonest = math.inf
    for quest in quests:
        left = state.remaining.get(quest.quest_id, 0.0)
        if left <= 0:
            continue
        per_game = progress_per_game(quest.with_remaining(left), profile, win_rate, config)
        if per_game <= 0:
            continue
        amount = min(per_game * games, left)
        contributions.append(QuestProgress(quest_id=quest.quest_id, amount=amount))
        bonus += config.quest_completion_bonus * (amount / left)
        urgency = max(urgency, urgency_multiplier(quest.expires_in_days, config))
        soonest = min(soonest, quest.expires_in_days)

    ev = profile_ev(profile, win_rate, config)
    minutes = games * profile.average_game_minutes
    total_ev = ev.net_value * games + bonus
    priority = ensure_finite(total_ev / minutes * urgency, f"{queue.value} priority")

    return QueueOption(
        queue=queue,
        ev=ev,
        games=games,
        minutes=minutes,
        contributions=tuple(contributions),
        completion_bonus=bonus,
        urgency=urgency,
        priority=priority,
        soonest_expiry=soonest,
    )


def best_option(options: Sequence[Optional[QueueOption]], remaining_minutes: float) -> Optional[QueueOption]:
    viable = [o for o in options if o is not None and o.fits(remaining_minutes)]
    if not viable:
        return None
    return min(viable, key=QueueOption.sort_key)


def build_step(option: QueueOption, step_id: str) -> PlanStep:
    ev = option.ev
    return PlanStep(
        step_id=step_id,
        queue=option.queue,
        target_games=option.games,
        estimated_minutes=option.minutes,
        expected_rewards=Rewards(
            primary=round_half_up(ev.expected_primary * option.games),
            secondary=round_half_up(ev.expected_secondary * option.games),
            bonus=round_half_up(ev.expected_bonus * option.games),
        ),
        quest_progress=option.contributions,
    )


def advance(state: PlannerState, option: QueueOption, step: PlanStep) -> PlannerState:
    """Apply one emitted step and return the successor state."""
    remaining = dict(state.remaining)
    completed = list(state.completed)
    for progress in option.contributions:
        left = remaining.get(progress.quest_id, 0.0) - progress.amount
        if left <= _EPSILON:
            left = 0.0
            if progress.quest_id not in completed:
                completed.append(progress.quest_id)
        remaining[progress.quest_id] = left

    return PlannerState(
        remaining_minutes=state.remaining_minutes - option.minutes,
        remaining=remaining,
        completed=tuple(completed),
        steps=state.steps + (step,),
    )


def allowed_queues(settings: UserSettings, rewards: RewardModel) -> list[QueueType]:
    if settings.preferred_queues:
        return list(settings.preferred_queues)
    return rewards.queues()


def is_feasible(
    quest: Quest,
    queues: Sequence[QueueType],
    time_budget: int,
    win_rate: float,
    rewards: RewardModel,
    config: EngineConfig,
) -> bool:
    return any(
        estimate_completion(
            quest, queue, win_rate, time_budget, rewards=rewards, config=config
        ).can_complete
        for queue in queues
    )


def _format_minutes(minutes: float) -> str:
    if float(minutes).is_integer():
        return str(int(minutes))
    return f"{minutes:.1f}"


def build_warnings(
    active: Sequence[Quest],
    feasible: Sequence[Quest],
    plan: OptimizedPlan,
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> list[str]:
    warnings: list[str] = []

    feasible_ids = {q.quest_id for q in feasible}
    infeasible = [q for q in active if q.quest_id not in feasible_ids]
    if infeasible:
        warnings.append(
            f"{len(infeasible)} quest(s) cannot be completed within time budget"
        )

    expiring = [q for q in active if q.expires_in_days <= config.critical_expiry_days]
    if expiring:
        warnings.append(f"{len(expiring)} quest(s) expire within 24 hours")

    unused = plan.time_budget - plan.total_estimated_minutes
    if unused > config.unused_time_warning_minutes:
        warnings.append(
            f"{_format_minutes(unused)} minutes of unused time - "
            "consider adding more quests or increasing targets"
        )
    return warnings


def _check_totals(plan: OptimizedPlan) -> None:
    minutes = math.fsum(step.estimated_minutes for step in plan.steps)
    ensure_finite(minutes, "total estimated minutes")
    if not math.isclose(minutes, plan.total_estimated_minutes, abs_tol=1e-6):
        raise InvariantViolation("Plan minutes do not match the sum of its steps")
    if plan.total_estimated_minutes > plan.time_budget + 1e-6:
        raise InvariantViolation(
            f"Plan uses {plan.total_estimated_minutes} of {plan.time_budget} minutes"
        )
    if Rewards.total(step.expected_rewards for step in plan.steps) != plan.total_expected_rewards:
        raise InvariantViolation("Plan rewards do not match the sum of its steps")


def optimize_plan(
    quests: Sequence[Quest],
    time_budget: int,
    win_rate: Optional[float] = None,
    settings: Optional[UserSettings] = None,
    *,
    rewards: Optional[RewardModel] = None,
    config: Optional[EngineConfig] = None,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> OptimizationResult:
    """Build the best plan that fits ``time_budget`` minutes.

    Expected failures (bad input, nothing to do, nothing fits) come back as
    an unsuccessful ``OptimizationResult``. Only an ``InvariantViolation``
    escapes, since it signals a defect rather than a user problem.
    """
    config = config or DEFAULT_ENGINE_CONFIG
    settings = settings or create_default_settings()
    if win_rate is None:
        win_rate = settings.default_win_rate
    if rewards is None:
        from questflow.infra.reward_tables import get_reward_model

        rewards = get_reward_model()

    issues = (
        check_time_budget(time_budget, config)
        + check_win_rate(win_rate, config)
        + check_quests(quests, config)
        + settings.validate_settings(config)
    )
    if issues:
        logger.info("Rejected optimization input: %d issue(s)", len(issues))
        return OptimizationResult.fail(ValidationError(issues))

    logger.info(
        "Optimizing %d quest(s) for %s minutes at win rate %.2f",
        len(quests),
        time_budget,
        win_rate,
    )

    active = [q for q in quests if q.is_active]
    if not active:
        return OptimizationResult.fail(NoActiveQuestsError([ALL_QUESTS_DONE_ADVICE]))

    queues = allowed_queues(settings, rewards)
    feasible = [
        q for q in active if is_feasible(q, queues, time_budget, win_rate, rewards, config)
    ]
    if not feasible:
        logger.info("No quest fits in %s minutes", time_budget)
        return OptimizationResult.fail(InsufficientTimeError([INSUFFICIENT_TIME_ADVICE]))

    profiles = [(queue, rewards.lookup(queue)) for queue in queues]
    state = PlannerState.start(feasible, time_budget)

    while not state.is_done and len(state.steps) < config.max_plan_steps:
        options = [
            evaluate_option(queue, profile, feasible, state, win_rate, config)
            for queue, profile in profiles
        ]
        option = best_option(options, state.remaining_minutes)
        if option is None:
            break
        step = build_step(option, id_factory())
        logger.debug(
            "Step %d: %s x%d (%.1f min, priority %.3f)",
            len(state.steps) + 1,
            option.queue.value,
            option.games,
            option.minutes,
            option.priority,
        )
        state = advance(state, option, step)

    if not state.steps:
        return OptimizationResult.fail(InsufficientTimeError([INSUFFICIENT_TIME_ADVICE]))

    now = datetime.now(timezone.utc)
    plan = OptimizedPlan(
        plan_id=id_factory(),
        steps=state.steps,
        total_estimated_minutes=math.fsum(s.estimated_minutes for s in state.steps),
        total_expected_rewards=Rewards.total(s.expected_rewards for s in state.steps),
        quests_completed=state.completed,
        time_budget=int(time_budget),
        win_rate=float(win_rate),
        created_at=now,
        updated_at=now,
    )
    _check_totals(plan)

    warnings = build_warnings(active, feasible, plan, config)
    logger.info(
        "Planned %d step(s), %s of %s minutes, %d quest(s) completed",
        len(plan.steps),
        _format_minutes(plan.total_estimated_minutes),
        time_budget,
        len(plan.quests_completed),
    )
    return OptimizationResult.ok(plan, warnings)


__all__ = [
    "PlannerState",
    "QueueOption",
    "urgency_multiplier",
    "games_for_step",
    "evaluate_option",
    "best_option",
    "build_step",
    "advance",
    "allowed_queues",
    "build_warnings",
    "optimize_plan",
]
