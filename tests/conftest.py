from __future__ import annotations

import pytest

from questflow.domain.models.QuestModel import Quest, QuestColor, QuestType
from questflow.domain.usecase.reward_model import RewardModel
from questflow.infra.reward_tables import load_reward_model


@pytest.fixture(scope="session")
def rewards() -> RewardModel:
    return load_reward_model()


def make_quest(
    quest_id: str = "q1",
    quest_type: QuestType = QuestType.WIN_GAMES,
    remaining: int = 5,
    expires_in_days: int = 3,
    description: str = "Win games",
    colors: tuple[QuestColor, ...] = (),
) -> Quest:
    return Quest(
        quest_id=quest_id,
        quest_type=quest_type,
        description=description,
        remaining=remaining,
        expires_in_days=expires_in_days,
        colors=colors,
    )


@pytest.fixture
def quest_factory():
    return make_quest
