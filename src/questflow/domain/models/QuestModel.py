from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Tuple

from questflow.core.settings import DEFAULT_ENGINE_CONFIG, EngineConfig
from questflow.domain.errors import ValidationIssue


class QuestType(str, Enum):
    WIN_GAMES = "win"
    CAST_SPELLS = "cast"
    PLAY_COLORS = "play_colors"


class QuestColor(str, Enum):
    WHITE = "W"
    BLUE = "U"
    BLACK = "B"
    RED = "R"
    GREEN = "G"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_whole_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


@dataclass(frozen=True)
class Quest:
    quest_id: str
    quest_type: QuestType
    description: str
    remaining: int
    expires_in_days: int
    colors: Tuple[QuestColor, ...] = field(default_factory=tuple)

    # Telemetry
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", tuple(self.colors))

    @staticmethod
    def new(
        quest_type: QuestType,
        description: str,
        remaining: int,
        expires_in_days: int,
        colors: Tuple[QuestColor, ...] = (),
    ) -> "Quest":
        now = _utcnow()
        return Quest(
            quest_id=str(uuid.uuid4()),
            quest_type=quest_type,
            description=description,
            remaining=remaining,
            expires_in_days=expires_in_days,
            colors=colors,
            created_at=now,
            updated_at=now,
        )

    # ------- Property Helpers -------

    @property
    def is_active(self) -> bool:
        return self.remaining > 0

    def with_remaining(self, remaining: int | float) -> "Quest":
        return replace(self, remaining=remaining)

    # ---------- Helpers ----------

    def validate_quest(
        self, config: EngineConfig = DEFAULT_ENGINE_CONFIG, prefix: str = ""
    ) -> list[ValidationIssue]:
        """Return every issue found; an empty list means the quest is usable."""
        issues: list[ValidationIssue] = []

        def issue(name: str, message: str) -> None:
            issues.append(ValidationIssue(field=f"{prefix}{name}", message=message))

        if not str(self.quest_id or "").strip():
            issue("quest_id", "Quest ID is required")

        if not isinstance(self.quest_type, QuestType):
            issue("quest_type", "Quest type must be win, cast, or play_colors")

        description = self.description if isinstance(self.description, str) else ""
        if not description.strip():
            issue("description", "Quest description cannot be empty")
        elif len(description) > config.max_description_length:
            issue(
                "description",
                f"Quest description must be {config.max_description_length} characters or less",
            )

        if not _is_whole_number(self.remaining):
            issue("remaining", "Remaining count must be a whole number")
        elif self.remaining < 0:
            issue("remaining", "Remaining count cannot be negative")
        elif self.remaining > config.max_quest_remaining:
            issue(
                "remaining",
                f"Remaining count cannot exceed {config.max_quest_remaining}",
            )

        if not _is_whole_number(self.expires_in_days):
            issue("expires_in_days", "Expiration days must be a whole number")
        elif self.expires_in_days < 0:
            issue("expires_in_days", "Quest cannot have negative expiration days")
        elif self.expires_in_days > config.max_quest_expiry_days:
            issue(
                "expires_in_days",
                f"Quest expiration cannot exceed {config.max_quest_expiry_days} days",
            )

        if any(not isinstance(color, QuestColor) for color in self.colors):
            issue("colors", "Colors must be one of W, U, B, R, G")
        if len(set(self.colors)) != len(self.colors):
            issue("colors", "Colors must be unique")
        if len(self.colors) > config.max_quest_colors:
            issue("colors", f"Cannot have more than {config.max_quest_colors} colors")
        if self.quest_type is QuestType.PLAY_COLORS and not self.colors:
            issue("colors", "Color quests must name at least one color")
        if (
            isinstance(self.quest_type, QuestType)
            and self.quest_type is not QuestType.PLAY_COLORS
            and self.colors
        ):
            issue("colors", "Only color quests can name colors")

        return issues


__all__ = ["Quest", "QuestType", "QuestColor"]
