"""REST endpoints for building, ticking off and re-planning quest plans."""

from fastapi import APIRouter, Depends, HTTPException

from questflow.api.deps import get_engine_config, get_rewards
from questflow.api.mappers import (
    plan_from_api,
    plan_to_api,
    quests_from_api,
    result_to_api,
    settings_from_api,
)
from questflow.api.schemas import (
    MarkStepRequest,
    OptimizeRequest,
    Plan,
    PlanResult,
    RecalculateRequest,
)
from questflow.core.settings import EngineConfig
from questflow.domain.errors import ValidationError
from questflow.domain.models.ResultModel import OptimizationResult
from questflow.domain.usecase import plan_mutator, plan_optimizer
from questflow.domain.usecase.reward_model import RewardModel

router = APIRouter(prefix="/v1/plans", tags=["Plans"])


def _bad_request(error: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=400,
        detail={
            "message": error.message,
            "issues": [
                {"field": issue.field, "message": issue.message} for issue in error.issues
            ],
        },
    )


def _respond(result: OptimizationResult) -> PlanResult:
    if isinstance(result.error, ValidationError):
        raise _bad_request(result.error)
    return result_to_api(result)


@router.post(":optimize", response_model=PlanResult)
def optimize(
    body: OptimizeRequest,
    rewards: RewardModel = Depends(get_rewards),
    config: EngineConfig = Depends(get_engine_config),
) -> PlanResult:
    """Build a plan for the submitted quests and time budget."""
    result = plan_optimizer.optimize_plan(
        quests_from_api(body.quests),
        body.time_budget,
        body.win_rate,
        settings_from_api(body.settings),
        rewards=rewards,
        config=config,
    )
    return _respond(result)


@router.post(":markStep", response_model=Plan)
def mark_step(
    body: MarkStepRequest,
    config: EngineConfig = Depends(get_engine_config),
) -> Plan:
    """Flip one step's completion flag and return the updated plan."""
    try:
        plan = plan_mutator.mark_step(
            plan_from_api(body.plan), body.step_id, body.completed, config=config
        )
    except ValidationError as err:
        raise _bad_request(err) from err
    except ValueError as err:
        raise HTTPException(status_code=404, detail=str(err)) from err
    return plan_to_api(plan)


@router.post(":recalculate", response_model=PlanResult)
def recalculate(
    body: RecalculateRequest,
    rewards: RewardModel = Depends(get_rewards),
    config: EngineConfig = Depends(get_engine_config),
) -> PlanResult:
    """Re-plan whatever time the submitted plan has left."""
    result = plan_mutator.recalculate(
        plan_from_api(body.plan),
        quests_from_api(body.quests),
        settings_from_api(body.settings),
        rewards=rewards,
        config=config,
    )
    return _respond(result)
