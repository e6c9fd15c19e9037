from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Tuple

from questflow.core.settings import DEFAULT_ENGINE_CONFIG, EngineConfig
from questflow.domain.errors import ValidationIssue
from questflow.domain.models.QueueModel import QueueType


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_count(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value) and float(value).is_integer()


@dataclass(frozen=True, slots=True)
class Rewards:
    """Reward triple: primary currency, secondary currency, bonus items."""

    primary: int = 0
    secondary: int = 0
    bonus: int = 0

    def __add__(self, other: "Rewards") -> "Rewards":
        return Rewards(
            primary=self.primary + other.primary,
            secondary=self.secondary + other.secondary,
            bonus=self.bonus + other.bonus,
        )

    @classmethod
    def total(cls, items: Iterable["Rewards"]) -> "Rewards":
        result = cls()
        for item in items:
            result = result + item
        return result


@dataclass(frozen=True, slots=True)
class QuestProgress:
    quest_id: str
    amount: float


@dataclass(frozen=True, slots=True)
class PlanStep:
    step_id: str
    queue: QueueType
    target_games: int
    estimated_minutes: float
    expected_rewards: Rewards
    quest_progress: Tuple[QuestProgress, ...] = field(default_factory=tuple)
    completed: bool = False

    def progress_for(self, quest_id: str) -> float:
        return sum(p.amount for p in self.quest_progress if p.quest_id == quest_id)


@dataclass(frozen=True, slots=True)
class OptimizedPlan:
    plan_id: str
    steps: Tuple[PlanStep, ...]
    total_estimated_minutes: float
    total_expected_rewards: Rewards
    quests_completed: Tuple[str, ...]
    time_budget: int
    win_rate: float
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    # ------- Property Helpers -------

    @property
    def completed_minutes(self) -> float:
        return sum(step.estimated_minutes for step in self.steps if step.completed)

    @property
    def remaining_minutes(self) -> float:
        return self.time_budget - self.completed_minutes

    @property
    def is_finished(self) -> bool:
        return all(step.completed for step in self.steps)

    def find_step(self, step_id: str) -> Optional[PlanStep]:
        for step in self.steps:
            if step.step_id == step_id:
                return step
        return None

    # ------- Validation -------

    def validate_plan(
        self, config: EngineConfig = DEFAULT_ENGINE_CONFIG, prefix: str = "plan."
    ) -> list[ValidationIssue]:
        """Check a plan handed back by a caller before trusting its numbers."""
        issues: list[ValidationIssue] = []

        def issue(name: str, message: str) -> None:
            issues.append(ValidationIssue(f"{prefix}{name}", message))

        if not str(self.plan_id or "").strip():
            issue("plan_id", "Plan ID is required")

        if not _is_count(self.time_budget) or not (
            config.min_time_budget <= self.time_budget <= config.max_time_budget
        ):
            issue(
                "time_budget",
                f"Time budget must be a whole number of minutes between "
                f"{config.min_time_budget} and {config.max_time_budget}",
            )
        if not (
            _is_number(self.win_rate)
            and math.isfinite(self.win_rate)
            and config.min_win_rate <= self.win_rate <= config.max_win_rate
        ):
            issue(
                "win_rate",
                f"Win rate must be between {config.min_win_rate} and {config.max_win_rate}",
            )

        seen: set[str] = set()
        steps_ok = True
        for index, step in enumerate(self.steps):
            where = f"steps[{index}]."
            if step.step_id in seen:
                issue(f"{where}step_id", "Step IDs must be unique")
            seen.add(step.step_id)
            if not _is_count(step.target_games) or step.target_games < config.min_games_per_step:
                issue(
                    f"{where}target_games",
                    f"Target games must be a whole number of at least {config.min_games_per_step}",
                )
            minutes = step.estimated_minutes
            if not _is_number(minutes) or not math.isfinite(minutes) or minutes <= 0:
                issue(f"{where}estimated_minutes", "Estimated minutes must be positive")
                steps_ok = False
            for k, progress in enumerate(step.quest_progress):
                amount = progress.amount
                if not _is_number(amount) or not math.isfinite(amount) or amount < 0:
                    issue(
                        f"{where}quest_progress[{k}].amount",
                        "Quest progress cannot be negative",
                    )

        total = self.total_estimated_minutes
        if not _is_number(total) or not math.isfinite(total):
            issue("total_estimated_minutes", "Total minutes must be a finite number")
        else:
            if steps_ok and not math.isclose(
                math.fsum(step.estimated_minutes for step in self.steps), total, abs_tol=1e-6
            ):
                issue(
                    "total_estimated_minutes",
                    "Total minutes must equal the sum of step minutes",
                )
            if _is_number(self.time_budget) and total > self.time_budget + 1e-6:
                issue("total_estimated_minutes", "Total minutes cannot exceed the time budget")

        if Rewards.total(step.expected_rewards for step in self.steps) != self.total_expected_rewards:
            issue(
                "total_expected_rewards",
                "Total rewards must equal the sum of step rewards",
            )

        return issues


__all__ = ["Rewards", "QuestProgress", "PlanStep", "OptimizedPlan"]
