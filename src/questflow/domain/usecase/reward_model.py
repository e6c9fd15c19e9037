from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Mapping, Sequence

from questflow.domain.models.QueueModel import QueueRewardProfile, QueueType

logger = logging.getLogger(__name__)


def streak_probabilities(length: int, win_rate: float) -> list[float]:
    """Probability of finishing a run with exactly ``i`` wins, for each index.

    A run stops at the first loss; the last index is reached by never losing.
    Index 0 is a first-game loss (``1 - p``), index ``i`` in between is
    ``p**i * (1 - p)`` and the last index ``n`` is ``p**n``.
    """
    if length <= 0:
        return []
    last = length - 1
    if last == 0:
        # a single-entry table pays the same whatever happens
        return [1.0]
    if win_rate <= 0:
        return [1.0] + [0.0] * last
    if win_rate >= 1:
        return [0.0] * last + [1.0]

    lose = 1.0 - win_rate
    probabilities = [math.pow(win_rate, wins) * lose for wins in range(last)]
    probabilities.append(math.pow(win_rate, last))
    return probabilities


def expected_reward(rewards: Sequence[float] | None, win_rate: float) -> float:
    """Expected payout of one reward array under the win-streak model."""
    if not rewards:
        return 0.0
    if win_rate <= 0:
        return float(rewards[0])
    if win_rate >= 1:
        return float(rewards[-1])
    probabilities = streak_probabilities(len(rewards), win_rate)
    return math.fsum(p * r for p, r in zip(probabilities, rewards))


@dataclass(frozen=True)
class RewardModel:
    """Immutable set of queue reward profiles with a designated fallback."""

    profiles: Mapping[QueueType, QueueRewardProfile]
    default_queue: QueueType
    version: str = "unversioned"

    def __post_init__(self) -> None:
        if self.default_queue not in self.profiles:
            raise ValueError(
                f"Default queue {self.default_queue.value} has no reward profile"
            )

    def lookup(self, queue: QueueType | str) -> QueueRewardProfile:
        """Profile for ``queue``; unknown keys resolve to the default profile."""
        parsed = QueueType.parse(queue)
        profile = self.profiles.get(parsed) if parsed is not None else None
        if profile is None:
            logger.debug(
                "No reward profile for %r; using default %s",
                queue,
                self.default_queue.value,
            )
            return self.profiles[self.default_queue]
        return profile

    def knows(self, queue: QueueType | str) -> bool:
        parsed = QueueType.parse(queue)
        return parsed is not None and parsed in self.profiles

    def queues(self) -> list[QueueType]:
        return list(self.profiles.keys())


__all__ = ["RewardModel", "expected_reward", "streak_probabilities"]
