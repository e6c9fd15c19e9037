from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple

from questflow.domain.errors import ValidationIssue
from questflow.domain.models.QuestModel import QuestType


class QueueType(str, Enum):
    STANDARD_BO1 = "standard_bo1"
    STANDARD_BO3 = "standard_bo3"
    HISTORIC_BO1 = "historic_bo1"
    EXPLORER_BO1 = "explorer_bo1"
    QUICK_DRAFT = "quick_draft"
    MIDWEEK_MAGIC = "midweek_magic"

    @classmethod
    def parse(cls, raw: "QueueType | str") -> Optional["QueueType"]:
        """Return the matching queue, or None for keys outside the known set."""
        if isinstance(raw, QueueType):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


def _empty_multipliers() -> Dict[QuestType, float]:
    return {}


@dataclass(frozen=True)
class QueueRewardProfile:
    """Static reward table for one queue; arrays are indexed by win count."""

    queue: QueueType
    entry_cost: float
    primary_rewards: Tuple[float, ...]
    average_game_minutes: float
    secondary_rewards: Optional[Tuple[float, ...]] = None
    bonus_rewards: Optional[Tuple[float, ...]] = None
    progress_multiplier: Mapping[QuestType, float] = field(
        default_factory=_empty_multipliers
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "primary_rewards", tuple(self.primary_rewards))
        if self.secondary_rewards is not None:
            object.__setattr__(self, "secondary_rewards", tuple(self.secondary_rewards))
        if self.bonus_rewards is not None:
            object.__setattr__(self, "bonus_rewards", tuple(self.bonus_rewards))
        object.__setattr__(
            self,
            "progress_multiplier",
            {QuestType(k): float(v) for k, v in dict(self.progress_multiplier).items()},
        )

    def multiplier_for(self, quest_type: QuestType) -> float:
        return self.progress_multiplier.get(quest_type, 0.0)

    def validate_profile(self) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        prefix = f"queues.{self.queue.value}"

        if not math.isfinite(self.entry_cost) or self.entry_cost < 0:
            issues.append(
                ValidationIssue(f"{prefix}.entry_cost", "Entry cost cannot be negative")
            )
        if not math.isfinite(self.average_game_minutes) or self.average_game_minutes <= 0:
            issues.append(
                ValidationIssue(
                    f"{prefix}.average_game_minutes",
                    "Average game length must be positive",
                )
            )
        if not self.primary_rewards:
            issues.append(
                ValidationIssue(
                    f"{prefix}.primary_rewards", "Primary reward array is required"
                )
            )

        arrays = (
            ("primary_rewards", self.primary_rewards),
            ("secondary_rewards", self.secondary_rewards),
            ("bonus_rewards", self.bonus_rewards),
        )
        for name, values in arrays:
            if values is None:
                continue
            if any(not math.isfinite(v) or v < 0 for v in values):
                issues.append(
                    ValidationIssue(f"{prefix}.{name}", "Rewards cannot be negative")
                )

        for quest_type, value in self.progress_multiplier.items():
            if not math.isfinite(value) or value < 0:
                issues.append(
                    ValidationIssue(
                        f"{prefix}.progress_multiplier.{quest_type.value}",
                        "Progress multiplier cannot be negative",
                    )
                )
        return issues


__all__ = ["QueueType", "QueueRewardProfile"]
