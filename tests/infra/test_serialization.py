from __future__ import annotations

from datetime import datetime, timezone

import pytest

from questflow.domain.models.PlanModel import OptimizedPlan, PlanStep, QuestProgress, Rewards
from questflow.domain.models.QuestModel import Quest, QuestColor, QuestType
from questflow.domain.models.QueueModel import QueueRewardProfile, QueueType
from questflow.infra.serialization import from_document, to_document


def _plan() -> OptimizedPlan:
	step = PlanStep(
		step_id="s1",
		queue=QueueType.STANDARD_BO3,
		target_games=2,
		estimated_minutes=30.0,
		expected_rewards=Rewards(primary=97),
		quest_progress=(QuestProgress("q1", 2.5),),
	)
	stamp = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
	return OptimizedPlan(
		plan_id="p1",
		steps=(step,),
		total_estimated_minutes=30.0,
		total_expected_rewards=Rewards(primary=97),
		quests_completed=("q1",),
		time_budget=60,
		win_rate=0.5,
		created_at=stamp,
		updated_at=stamp,
	)


def test_to_document_flattens_enums_and_tuples() -> None:
	quest = Quest("q1", QuestType.PLAY_COLORS, "Play red", 20, 3, (QuestColor.RED,))

	payload = to_document(quest)

	assert payload["quest_type"] == "play_colors"
	assert payload["colors"] == ["R"]
	assert payload["created_at"] is None


def test_naive_datetimes_are_treated_as_utc() -> None:
	assert to_document(datetime(2024, 1, 2, 3, 4)) == "2024-01-02T03:04:00+00:00"


def test_plan_survives_a_document_round_trip() -> None:
	plan = _plan()

	restored = from_document(OptimizedPlan, to_document(plan))

	assert restored == plan
	assert isinstance(restored.steps, tuple)
	assert restored.steps[0].queue is QueueType.STANDARD_BO3


def test_profile_decoding_coerces_numbers_and_keys() -> None:
	profile = from_document(
		QueueRewardProfile,
		{
			"queue": "standard_bo1",
			"entry_cost": 0,
			"primary_rewards": [0, 25],
			"average_game_minutes": 8,
			"progress_multiplier": {"win": 1},
			"ignored": True,
		},
	)

	assert profile.average_game_minutes == 8.0
	assert isinstance(profile.average_game_minutes, float)
	assert profile.primary_rewards == (0.0, 25.0)
	assert profile.secondary_rewards is None
	assert profile.multiplier_for(QuestType.WIN_GAMES) == 1.0


def test_decoding_rejects_non_objects() -> None:
	with pytest.raises(TypeError):
		from_document(QueueRewardProfile, ["standard_bo1"])
