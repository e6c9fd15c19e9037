from .PlanModel import OptimizedPlan, PlanStep, QuestProgress, Rewards
from .QuestModel import Quest, QuestColor, QuestType
from .QueueModel import QueueRewardProfile, QueueType
from .ResultModel import OptimizationResult
from .SettingsModel import UserSettings, create_default_settings

__all__ = [
    "OptimizedPlan",
    "PlanStep",
    "QuestProgress",
    "Rewards",
    "Quest",
    "QuestColor",
    "QuestType",
    "QueueRewardProfile",
    "QueueType",
    "OptimizationResult",
    "UserSettings",
    "create_default_settings",
]
