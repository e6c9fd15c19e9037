"""Read-only views over the loaded reward table."""

from fastapi import APIRouter, Depends, HTTPException, Query

from questflow.api.deps import get_engine_config, get_rewards
from questflow.api.mappers import queue_ev_to_api, reward_model_to_api
from questflow.api.schemas import QueueEV, QueueTable
from questflow.core.settings import EngineConfig
from questflow.domain.errors import ValidationError
from questflow.domain.usecase.ev_calculator import queue_ev
from questflow.domain.usecase.reward_model import RewardModel

router = APIRouter(prefix="/v1/queues", tags=["Queues"])


@router.get("", response_model=QueueTable)
def list_queues(rewards: RewardModel = Depends(get_rewards)) -> QueueTable:
    return reward_model_to_api(rewards)


@router.get("/{queue}/ev", response_model=QueueEV)
def get_queue_ev(
    queue: str,
    win_rate: float = Query(...),
    rewards: RewardModel = Depends(get_rewards),
    config: EngineConfig = Depends(get_engine_config),
) -> QueueEV:
    """Per-game EV breakdown; unknown queue ids use the default profile."""
    try:
        ev = queue_ev(queue, win_rate, rewards=rewards, config=config)
    except ValidationError as err:
        raise HTTPException(status_code=400, detail=err.message) from err
    return queue_ev_to_api(ev, win_rate)
