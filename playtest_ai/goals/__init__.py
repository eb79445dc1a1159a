"""
Goal system for long-running bot objectives.

Package structure:
    core       - Goal record, GoalType, GoalState and the per-type target
                 payloads.
    templates  - One GoalTemplate per goal type: target generation, progress,
                 follow-ups and base priority.
    manager    - GoalManager: lifecycle, priority adjustment, emergent goal
                 chains and action recommendations.
"""

from .core import (
    ANY,
    BossTarget,
    CollectTarget,
    CraftTarget,
    DuelTarget,
    ExploreTarget,
    FollowUp,
    FriendTarget,
    GangTarget,
    Goal,
    GoalState,
    GoalTarget,
    GoalType,
    GoldTarget,
    LevelTarget,
    LocationTarget,
    PurchaseTarget,
    QuestTarget,
    RankTarget,
    SkillTarget,
    goal_description,
    goal_name,
)
from .manager import (
    CONTRIBUTING_KEYWORDS,
    RECOMMENDED_ACTIONS,
    GoalManager,
    GoalStats,
    emergent_follow_ups,
    goal_accepts_label,
)
from .templates import GOAL_TEMPLATES, GoalTemplate, calculate_progress

__all__ = [
    "ANY",
    "CONTRIBUTING_KEYWORDS",
    "GOAL_TEMPLATES",
    "RECOMMENDED_ACTIONS",
    "BossTarget",
    "CollectTarget",
    "CraftTarget",
    "DuelTarget",
    "ExploreTarget",
    "FollowUp",
    "FriendTarget",
    "GangTarget",
    "Goal",
    "GoalManager",
    "GoalState",
    "GoalStats",
    "GoalTarget",
    "GoalTemplate",
    "GoalType",
    "GoldTarget",
    "LevelTarget",
    "LocationTarget",
    "PurchaseTarget",
    "QuestTarget",
    "RankTarget",
    "SkillTarget",
    "calculate_progress",
    "emergent_follow_ups",
    "goal_accepts_label",
    "goal_description",
    "goal_name",
]
