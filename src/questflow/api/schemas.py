from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from questflow.domain.models.QuestModel import QuestColor, QuestType
from questflow.domain.models.QueueModel import QueueType

# --- Quests & settings ---


class QuestIn(BaseModel):
    quest_id: Optional[str] = None
    quest_type: QuestType
    description: str
    remaining: int
    expires_in_days: int
    colors: List[QuestColor] = Field(default_factory=list)


class SettingsIn(BaseModel):
    default_win_rate: float = 0.5
    preferred_queues: List[QueueType] = Field(default_factory=list)
    minutes_per_game: float = 8


# --- Plans ---


class Rewards(BaseModel):
    primary: int = 0
    secondary: int = 0
    bonus: int = 0


class QuestProgress(BaseModel):
    quest_id: str
    amount: float


class PlanStep(BaseModel):
    step_id: str
    queue: QueueType
    target_games: int
    estimated_minutes: float
    expected_rewards: Rewards
    quest_progress: List[QuestProgress] = Field(default_factory=list)
    completed: bool = False


class Plan(BaseModel):
    plan_id: str
    steps: List[PlanStep]
    total_estimated_minutes: float
    total_expected_rewards: Rewards
    quests_completed: List[str] = Field(default_factory=list)
    time_budget: int
    win_rate: float
    created_at: datetime
    updated_at: datetime


class PlanError(BaseModel):
    kind: str
    message: str


class PlanResult(BaseModel):
    success: bool
    plan: Optional[Plan] = None
    error: Optional[PlanError] = None
    warnings: List[str] = Field(default_factory=list)


class OptimizeRequest(BaseModel):
    quests: List[QuestIn]
    time_budget: int
    win_rate: Optional[float] = None
    settings: Optional[SettingsIn] = None


class MarkStepRequest(BaseModel):
    plan: Plan
    step_id: str
    completed: bool = True


class RecalculateRequest(BaseModel):
    plan: Plan
    quests: List[QuestIn]
    settings: Optional[SettingsIn] = None


# --- Queues ---


class QueueProfile(BaseModel):
    queue: QueueType
    entry_cost: float
    primary_rewards: List[float]
    secondary_rewards: Optional[List[float]] = None
    bonus_rewards: Optional[List[float]] = None
    average_game_minutes: float
    progress_multiplier: dict[str, float] = Field(default_factory=dict)


class QueueTable(BaseModel):
    version: str
    default_queue: QueueType
    queues: List[QueueProfile]


class QueueEV(BaseModel):
    queue: QueueType
    win_rate: float
    expected_primary: float
    expected_secondary: float
    expected_bonus: float
    expected_value: float
    entry_cost: float
    net_value: float
    ev_per_minute: float
