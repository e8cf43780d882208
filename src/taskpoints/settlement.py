"""
TASKPOINTS - Completion Settlement
==================================
Ties a task's completion state to the reward balance.

`points_settled` on the task gates the transfer, so points move at most
once per completion edge no matter how often the flows run.
"""

import logging

from .schema import RewardLedger, Task

logger = logging.getLogger("taskpoints")


def settle_completion(task: Task, rewards: RewardLedger) -> int:
    """Credit the task's points if not already credited. Returns points credited."""
    if task.points_settled:
        logger.debug(f"Task {task.id} already settled, balance untouched")
        return 0

    rewards.adjust_balance(task.task_points)
    task.points_settled = True
    return task.task_points


def revoke_completion(task: Task, rewards: RewardLedger) -> int:
    """Take back previously credited points. Returns points debited."""
    if not task.points_settled:
        logger.debug(f"Task {task.id} was never settled, balance untouched")
        return 0

    rewards.adjust_balance(-task.task_points)
    task.points_settled = False
    return task.task_points
