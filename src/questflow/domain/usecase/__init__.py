from .reward_model import RewardModel, expected_reward, streak_probabilities
from .ev_calculator import (
    CombinedEV,
    CompletionEstimate,
    QuestProgressRate,
    QueueComparison,
    QueueEV,
    combined_ev,
    compare_queues_for_quest,
    estimate_completion,
    quest_progress_rate,
    queue_ev,
)
from .plan_optimizer import PlannerState, QueueOption, advance, optimize_plan
from .plan_mutator import mark_step, recalculate

__all__ = [
    "RewardModel",
    "expected_reward",
    "streak_probabilities",
    "CombinedEV",
    "CompletionEstimate",
    "QuestProgressRate",
    "QueueComparison",
    "QueueEV",
    "combined_ev",
    "compare_queues_for_quest",
    "estimate_completion",
    "quest_progress_rate",
    "queue_ev",
    "PlannerState",
    "QueueOption",
    "advance",
    "optimize_plan",
    "mark_step",
    "recalculate",
]
