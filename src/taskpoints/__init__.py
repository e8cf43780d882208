"""
TASKPOINTS - Tasks That Pay, Rewards That Cost
==============================================

Personal task-and-reward tracker backed by two JSON files.
Completing a task credits its points; buying a reward spends them.

Usage:
    from taskpoints import TaskManager, load_config

    manager = TaskManager(load_config("config.yaml"))
    task = manager.add_task("buy milk", points=10)

    manager.complete_task(task.id)       # +10 points, once
    manager.add_reward("cinema night", price=5)
    manager.buy_reward(1)

    print(manager.get_reward_report())
"""

from .schema import (
    Task,
    TaskLedger,
    Reward,
    RewardLedger
)
from .errors import (
    TaskPointsError,
    LockContention,
    CorruptData,
    ConfigError,
    NotFound,
    InvalidId,
    InvalidAmount,
    InsufficientPoints,
    AlreadyComplete,
    NotComplete,
    NothingToRestore
)
from .store import JsonStore
from .config import Settings, load_config, save_config, update_defaults
from .settlement import settle_completion, revoke_completion
from .manager import TaskManager

__version__ = "1.0.0"
__all__ = [
    "TaskManager",
    "JsonStore",
    "Settings",
    "load_config",
    "save_config",
    "update_defaults",
    "settle_completion",
    "revoke_completion",
    "Task",
    "TaskLedger",
    "Reward",
    "RewardLedger",
    "TaskPointsError",
    "LockContention",
    "CorruptData",
    "ConfigError",
    "NotFound",
    "InvalidId",
    "InvalidAmount",
    "InsufficientPoints",
    "AlreadyComplete",
    "NotComplete",
    "NothingToRestore"
]
