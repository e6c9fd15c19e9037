from __future__ import annotations

import logging
import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from questflow.core.settings import DEFAULT_ENGINE_CONFIG, EngineConfig
from questflow.domain.errors import ValidationError, raise_if_issues
from questflow.domain.models.PlanModel import OptimizedPlan
from questflow.domain.models.QuestModel import Quest
from questflow.domain.models.ResultModel import OptimizationResult
from questflow.domain.models.SettingsModel import UserSettings
from questflow.domain.usecase.plan_optimizer import optimize_plan
from questflow.domain.usecase.reward_model import RewardModel

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

ALL_TIME_USED_WARNING = "All allocated time has been used"
LOW_TIME_WARNING = "Insufficient remaining time for additional optimization"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def mark_step(
    plan: OptimizedPlan,
    step_id: str,
    completed: bool,
    *,
    config: Optional[EngineConfig] = None,
    clock: Optional[Clock] = None,
) -> OptimizedPlan:
    """Return a copy of ``plan`` with one step's completion flag set.

    Nothing but that flag and ``updated_at`` changes; quest state is never
    touched. Raises ValidationError for an inconsistent plan and ValueError
    when the plan has no such step.
    """
    raise_if_issues(plan.validate_plan(config or DEFAULT_ENGINE_CONFIG))
    if plan.find_step(step_id) is None:
        raise ValueError(f"Step ID does not exist: {step_id}")

    steps = tuple(
        replace(step, completed=bool(completed)) if step.step_id == step_id else step
        for step in plan.steps
    )
    return replace(plan, steps=steps, updated_at=(clock or _utcnow)())


def recalculate(
    plan: OptimizedPlan,
    updated_quests: Sequence[Quest],
    settings: Optional[UserSettings] = None,
    *,
    rewards: Optional[RewardModel] = None,
    config: Optional[EngineConfig] = None,
    clock: Optional[Clock] = None,
) -> OptimizationResult:
    """Re-plan the unused part of ``plan``'s budget against fresh quest state."""
    config = config or DEFAULT_ENGINE_CONFIG
    issues = plan.validate_plan(config)
    if issues:
        logger.info("Rejected plan %s: %d issue(s)", plan.plan_id, len(issues))
        return OptimizationResult.fail(ValidationError(issues))

    remaining = plan.remaining_minutes

    if remaining <= 0:
        logger.info("Plan %s has no time left", plan.plan_id)
        return OptimizationResult.ok(
            replace(plan, updated_at=(clock or _utcnow)()), [ALL_TIME_USED_WARNING]
        )

    if remaining < config.min_time_budget:
        logger.info(
            "Plan %s has %.1f minutes left; below the %d minute minimum",
            plan.plan_id,
            remaining,
            config.min_time_budget,
        )
        return OptimizationResult.ok(
            replace(plan, updated_at=(clock or _utcnow)()), [LOW_TIME_WARNING]
        )

    logger.info("Recalculating plan %s with %.1f minutes left", plan.plan_id, remaining)
    return optimize_plan(
        updated_quests,
        int(math.floor(remaining)),
        plan.win_rate,
        settings,
        rewards=rewards,
        config=config,
    )


__all__ = ["mark_step", "recalculate", "ALL_TIME_USED_WARNING", "LOW_TIME_WARNING"]
