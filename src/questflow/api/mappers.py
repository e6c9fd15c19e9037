from __future__ import annotations

import uuid
from typing import List, Optional

from questflow.api.schemas import Plan as APIPlan
from questflow.api.schemas import PlanError, PlanResult, QuestIn, SettingsIn
from questflow.api.schemas import QueueEV as APIQueueEV
from questflow.api.schemas import QueueProfile as APIQueueProfile
from questflow.api.schemas import QueueTable
from questflow.domain.models.PlanModel import OptimizedPlan
from questflow.domain.models.QuestModel import Quest
from questflow.domain.models.QueueModel import QueueRewardProfile
from questflow.domain.models.ResultModel import OptimizationResult
from questflow.domain.models.SettingsModel import UserSettings
from questflow.domain.usecase.ev_calculator import QueueEV
from questflow.domain.usecase.reward_model import RewardModel
from questflow.infra.serialization import from_document, to_document

# ---------- quests & settings ----------


def quest_from_api(body: QuestIn) -> Quest:
    return Quest(
        quest_id=body.quest_id or str(uuid.uuid4()),
        quest_type=body.quest_type,
        description=body.description,
        remaining=body.remaining,
        expires_in_days=body.expires_in_days,
        colors=tuple(body.colors),
    )


def quests_from_api(bodies: List[QuestIn]) -> List[Quest]:
    return [quest_from_api(body) for body in bodies]


def settings_from_api(body: Optional[SettingsIn]) -> Optional[UserSettings]:
    if body is None:
        return None
    return UserSettings(
        default_win_rate=body.default_win_rate,
        preferred_queues=tuple(body.preferred_queues),
        minutes_per_game=body.minutes_per_game,
    )


# ---------- plans ----------


def plan_to_api(plan: OptimizedPlan) -> APIPlan:
    return APIPlan.model_validate(to_document(plan))


def plan_from_api(body: APIPlan) -> OptimizedPlan:
    return from_document(OptimizedPlan, body.model_dump())


def result_to_api(result: OptimizationResult) -> PlanResult:
    error = None
    if result.error is not None:
        error = PlanError(kind=result.error.kind, message=result.error.message)
    return PlanResult(
        success=result.success,
        plan=plan_to_api(result.plan) if result.plan is not None else None,
        error=error,
        warnings=list(result.warnings),
    )


# ---------- queues ----------


def profile_to_api(profile: QueueRewardProfile) -> APIQueueProfile:
    return APIQueueProfile.model_validate(to_document(profile))


def reward_model_to_api(model: RewardModel) -> QueueTable:
    return QueueTable(
        version=model.version,
        default_queue=model.default_queue,
        queues=[profile_to_api(model.profiles[q]) for q in model.queues()],
    )


def queue_ev_to_api(ev: QueueEV, win_rate: float) -> APIQueueEV:
    return APIQueueEV(win_rate=win_rate, **to_document(ev))
