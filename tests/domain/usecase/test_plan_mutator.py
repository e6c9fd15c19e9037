from dataclasses import replace
from datetime import datetime, timezone

import pytest

from questflow.domain.errors import ValidationError
from questflow.domain.models.PlanModel import OptimizedPlan, PlanStep, Rewards
from questflow.domain.models.QueueModel import QueueType
from questflow.domain.usecase.plan_mutator import (
    ALL_TIME_USED_WARNING,
    LOW_TIME_WARNING,
    mark_step,
    recalculate,
)
from questflow.domain.usecase.plan_optimizer import optimize_plan

FIXED = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _step(step_id: str, minutes: float, completed: bool = True) -> PlanStep:
    return PlanStep(
        step_id=step_id,
        queue=QueueType.STANDARD_BO1,
        target_games=2,
        estimated_minutes=minutes,
        expected_rewards=Rewards(primary=61),
        completed=completed,
    )


def _hand_plan(budget: int, *steps: PlanStep) -> OptimizedPlan:
    return OptimizedPlan(
        plan_id="p1",
        steps=steps,
        total_estimated_minutes=sum(s.estimated_minutes for s in steps),
        total_expected_rewards=Rewards.total(s.expected_rewards for s in steps),
        quests_completed=(),
        time_budget=budget,
        win_rate=0.55,
        created_at=FIXED,
        updated_at=FIXED,
    )


@pytest.fixture
def plan(rewards, quest_factory):
    quests = [quest_factory("a", remaining=6), quest_factory("b", remaining=3, expires_in_days=1)]
    return optimize_plan(quests, 120, 0.5, rewards=rewards).unwrap()


# ─────────────────────────────────────────────────────────────
# 1) mark_step
# ─────────────────────────────────────────────────────────────
def test_mark_step_changes_only_the_target(plan):
    target = plan.steps[0].step_id
    later = datetime(2030, 1, 1, tzinfo=timezone.utc)

    updated = mark_step(plan, target, True, clock=lambda: later)

    assert updated.steps[0].completed is True
    assert updated.steps[1:] == plan.steps[1:]
    assert updated.updated_at == later
    assert replace(updated, steps=plan.steps, updated_at=plan.updated_at) == plan
    assert plan.steps[0].completed is False


def test_mark_twice_round_trips(plan):
    target = plan.steps[0].step_id
    back = mark_step(mark_step(plan, target, True), target, False)
    assert replace(back, updated_at=plan.updated_at) == plan


def test_mark_unknown_step(plan):
    with pytest.raises(ValueError, match="Step ID does not exist: nope"):
        mark_step(plan, "nope", True)


def test_mark_step_rejects_inconsistent_plan(plan):
    tampered = replace(plan, total_estimated_minutes=plan.total_estimated_minutes + 500)
    with pytest.raises(ValidationError) as excinfo:
        mark_step(tampered, plan.steps[0].step_id, True)
    assert {i.field for i in excinfo.value.issues} == {"plan.total_estimated_minutes"}


# ─────────────────────────────────────────────────────────────
# 2) recalculate
# ─────────────────────────────────────────────────────────────
def test_recalculate_when_all_time_used(rewards, quest_factory):
    spent = _hand_plan(30, _step("s1", 16), _step("s2", 14))

    result = recalculate(spent, [quest_factory()], rewards=rewards, clock=lambda: FIXED)

    assert result.success is True
    assert result.warnings == [ALL_TIME_USED_WARNING]
    assert result.plan == spent


def test_recalculate_after_marking_every_step_of_a_spent_budget(plan, rewards, quest_factory):
    # budget shrunk to exactly what the steps use
    done = plan
    for step in plan.steps:
        done = mark_step(done, step.step_id, True)
    done = replace(done, time_budget=int(done.total_estimated_minutes))

    result = recalculate(done, [quest_factory()], rewards=rewards)

    assert result.warnings == [ALL_TIME_USED_WARNING]
    assert result.plan.steps == done.steps


def test_recalculate_after_marking_every_step_with_minutes_to_spare(rewards, quest_factory):
    done = _hand_plan(60, _step("s1", 24, completed=False), _step("s2", 24, completed=False))
    for step_id in ("s1", "s2"):
        done = mark_step(done, step_id, True)
    assert done.remaining_minutes == 12

    result = recalculate(done, [quest_factory()], rewards=rewards, clock=lambda: FIXED)

    assert result.success is True
    assert result.warnings == [LOW_TIME_WARNING]
    assert result.plan.steps == done.steps
    assert result.plan.plan_id == done.plan_id


def test_recalculate_after_marking_every_optimized_step(plan, rewards, quest_factory):
    done = plan
    for step in plan.steps:
        done = mark_step(done, step.step_id, True)
    left = done.remaining_minutes
    assert left == plan.time_budget - plan.total_estimated_minutes

    result = recalculate(done, [quest_factory(remaining=1)], rewards=rewards)

    assert result.success is True
    if left <= 0:
        assert result.warnings == [ALL_TIME_USED_WARNING]
    elif left < 15:
        assert result.warnings == [LOW_TIME_WARNING]
    if left < 15:
        assert result.plan.steps == done.steps
    else:
        assert result.plan.time_budget == int(left)
        assert result.plan.plan_id != done.plan_id


def test_recalculate_with_too_little_time(rewards, quest_factory):
    nearly = _hand_plan(30, _step("s1", 24), _step("s2", 6, completed=False))

    result = recalculate(nearly, [quest_factory()], rewards=rewards, clock=lambda: FIXED)

    assert result.success is True
    assert result.warnings == [LOW_TIME_WARNING]
    assert result.plan.steps == nearly.steps


def test_recalculate_replans_remaining_time(rewards, quest_factory):
    partial = _hand_plan(120, _step("s1", 24), _step("s2", 24, completed=False))

    result = recalculate(partial, [quest_factory(remaining=3)], rewards=rewards)

    assert result.success is True
    fresh = result.plan
    assert fresh.plan_id != partial.plan_id
    assert fresh.time_budget == 96
    assert fresh.win_rate == 0.55
    assert fresh.total_estimated_minutes <= 96


def test_recalculate_surfaces_optimizer_failures(rewards, quest_factory):
    partial = _hand_plan(120, _step("s1", 24))
    result = recalculate(partial, [quest_factory(remaining=0)], rewards=rewards)
    assert result.success is False
    assert result.warnings == ["All quests are already completed"]


def test_recalculate_rejects_tampered_plan(rewards, quest_factory):
    tampered = _hand_plan(60, _step("s1", -30), _step("s2", 24, completed=False))

    result = recalculate(tampered, [quest_factory()], rewards=rewards)

    assert result.success is False
    assert isinstance(result.error, ValidationError)
    assert [i.field for i in result.error.issues] == ["plan.steps[0].estimated_minutes"]
    assert result.plan is None
