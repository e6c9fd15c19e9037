"""Versioned reward table source backing the reward model."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from questflow.core.settings import load_engine_config
from questflow.domain.errors import ValidationError
from questflow.domain.models.QueueModel import QueueRewardProfile, QueueType
from questflow.domain.usecase.reward_model import RewardModel
from questflow.infra.serialization import from_document

logger = logging.getLogger(__name__)

BUNDLED_TABLE = "reward_tables.json"


class RewardTableError(ValueError):
    """Raised when a reward table document cannot be turned into profiles."""


def _read_document(path: Optional[str]) -> Mapping[str, Any]:
    try:
        if path:
            raw = Path(path).read_text(encoding="utf-8")
        else:
            raw = (
                resources.files("questflow")
                .joinpath("data", BUNDLED_TABLE)
                .read_text(encoding="utf-8")
            )
    except OSError as exc:
        raise RewardTableError(f"Unable to read reward table {path or BUNDLED_TABLE}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise RewardTableError(f"Reward table is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise RewardTableError("Reward table must be a JSON object")
    return data


def parse_reward_tables(document: Mapping[str, Any]) -> RewardModel:
    """Build a RewardModel from a ``{version, default_queue, queues}`` document."""
    version = str(document.get("version") or "").strip()
    if not version:
        raise RewardTableError("Reward table is missing a version")

    raw_queues = document.get("queues")
    if not isinstance(raw_queues, dict) or not raw_queues:
        raise RewardTableError("Reward table must define at least one queue")

    profiles: Dict[QueueType, QueueRewardProfile] = {}
    for key, body in raw_queues.items():
        queue = QueueType.parse(key)
        if queue is None:
            logger.warning("Skipping unknown queue %r in reward table %s", key, version)
            continue
        if not isinstance(body, dict):
            raise RewardTableError(f"Queue {key!r} must be an object")
        try:
            profile = from_document(QueueRewardProfile, {**body, "queue": queue.value})
        except (TypeError, ValueError) as exc:
            raise RewardTableError(f"Queue {key!r} is malformed: {exc}") from exc

        issues = profile.validate_profile()
        if issues:
            raise RewardTableError(str(ValidationError(issues)))
        profiles[queue] = profile

    if not profiles:
        raise RewardTableError("Reward table defines no known queues")

    default_queue = QueueType.parse(document.get("default_queue") or "")
    if default_queue is None or default_queue not in profiles:
        default_queue = next(iter(profiles))
        logger.warning(
            "Reward table %s has no usable default_queue; falling back to %s",
            version,
            default_queue.value,
        )

    return RewardModel(profiles=profiles, default_queue=default_queue, version=version)


def load_reward_model(path: Optional[str] = None) -> RewardModel:
    model = parse_reward_tables(_read_document(path))
    logger.info(
        "Loaded reward table %s (%d queues) from %s",
        model.version,
        len(model.queues()),
        path or "bundled data",
    )
    return model


@lru_cache(maxsize=1)
def get_reward_model() -> RewardModel:
    """Process-wide reward model, read once from the configured source."""
    return load_reward_model(load_engine_config().reward_tables_path)


__all__ = [
    "RewardTableError",
    "parse_reward_tables",
    "load_reward_model",
    "get_reward_model",
]
