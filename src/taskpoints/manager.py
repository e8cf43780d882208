"""
TASKPOINTS - Task Manager
=========================
One method per user-level operation. Each call loads the ledger(s) fresh
from disk, applies a single mutation and saves, so two overlapping
invocations of the CLI only ever meet at the store's file locks.
"""

import logging
from typing import Callable, List, Optional, Tuple, Union

from .config import Settings
from .errors import InvalidAmount
from .lookup import resolve_id, validate_id
from .schema import Reward, RewardLedger, Task, TaskLedger
from .settlement import revoke_completion, settle_completion
from .store import JsonStore

logger = logging.getLogger("taskpoints")

# Asked before destructive operations; False cancels
Confirm = Callable[[str], bool]
IdLike = Union[str, int]


class TaskManager:
    """
    Task and reward operations on top of two JSON stores

    Tasks:   todo.json    (+ todo.json.lock)
    Rewards: rewards.json (+ rewards.json.lock)

    The two files are saved independently. Settlement writes the task file
    first and the reward file second; a crash between the two leaves them
    out of step.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        self.task_store = JsonStore(self.settings.storage.todo_file)
        self.reward_store = JsonStore(self.settings.storage.reward_file)

    # ========================================
    # PERSISTENCE OPERATIONS
    # ========================================

    def load_tasks(self) -> TaskLedger:
        return self.task_store.load(TaskLedger)

    def save_tasks(self, ledger: TaskLedger) -> None:
        self.task_store.save(ledger)

    def load_rewards(self) -> RewardLedger:
        return self.reward_store.load(RewardLedger)

    def save_rewards(self, ledger: RewardLedger) -> None:
        self.reward_store.save(ledger)

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def add_task(self, text: str, points: Optional[int] = None) -> Task:
        """Add a task; points fall back to the configured default"""
        if points is None:
            points = self.settings.defaults.task_points
        if points < 0:
            raise InvalidAmount(str(points))

        ledger = self.load_tasks()
        task = ledger.add(text, points)
        self.save_tasks(ledger)

        logger.info(f"➕ Added task {task.id}: {task.text} ({task.task_points} points)")
        return task

    def list_tasks(self) -> List[Task]:
        return list(self.load_tasks().tasks)

    def complete_task(self, task_id: IdLike) -> Tuple[Task, int]:
        """Mark a task complete and credit its points once.

        Returns the task and the number of points credited (0 when the task
        had already been settled).
        """
        ledger = self.load_tasks()
        rewards = self.load_rewards()
        index = self._resolve_task(ledger, task_id)

        task = ledger.complete(index)
        credited = settle_completion(task, rewards)

        self.save_tasks(ledger)
        if credited:
            self.save_rewards(rewards)

        logger.info(f"✅ Completed task {task.id} (+{credited} points, balance {rewards.balance})")
        return task, credited

    def uncomplete_task(self, task_id: IdLike) -> Tuple[Task, int]:
        """Mark a task pending again and take back its points if they were credited"""
        ledger = self.load_tasks()
        rewards = self.load_rewards()
        index = self._resolve_task(ledger, task_id)

        task = ledger.uncomplete(index)
        debited = revoke_completion(task, rewards)

        self.save_tasks(ledger)
        if debited:
            self.save_rewards(rewards)

        logger.info(f"↩️ Task {task.id} is not completed (-{debited} points, balance {rewards.balance})")
        return task, debited

    def edit_task(self, task_id: IdLike, text: str) -> Task:
        ledger = self.load_tasks()
        task = ledger.edit_text(self._resolve_task(ledger, task_id), text)
        self.save_tasks(ledger)
        logger.info(f"✏️ Edited text of task {task.id}")
        return task

    def edit_task_points(self, task_id: IdLike, points: int) -> Task:
        if points < 0:
            raise InvalidAmount(str(points))
        ledger = self.load_tasks()
        task = ledger.edit_points(self._resolve_task(ledger, task_id), points)
        self.save_tasks(ledger)
        logger.info(f"✏️ Task {task.id} now pays {points} points")
        return task

    def delete_task(self, task_id: IdLike, confirm: Optional[Confirm] = None) -> Optional[Task]:
        """Soft-delete a task (restorable with restore_last_deleted). None if cancelled."""
        ledger = self.load_tasks()
        index = self._resolve_task(ledger, task_id)

        if not self._confirmed(confirm, f"You want to delete task: {describe_task(ledger.tasks[index])}"):
            return None

        task = ledger.delete(index)
        self.save_tasks(ledger)
        logger.info(f"🗑️ Deleted task {task.id}")
        return task

    def restore_last_deleted(self) -> Task:
        """Undo the last delete; the task comes back pending with a new id"""
        ledger = self.load_tasks()
        task = ledger.restore_last()
        self.save_tasks(ledger)
        logger.info(f"♻️ Restored task with new id {task.id}")
        return task

    def clear_tasks(self, confirm: Optional[Confirm] = None) -> Optional[int]:
        """Remove every active task. Returns how many were removed, None if cancelled."""
        ledger = self.load_tasks()

        if not self._confirmed(confirm, "The tasks cannot be restored!\nAre you sure you want to delete ALL tasks?"):
            return None

        removed = ledger.clear_all()
        self.save_tasks(ledger)
        logger.info(f"🧹 Removed all {removed} tasks")
        return removed

    # ========================================
    # REWARD OPERATIONS
    # ========================================

    def add_reward(self, description: str, price: Optional[int] = None) -> Reward:
        if price is None:
            price = self.settings.defaults.reward_price
        if price < 0:
            raise InvalidAmount(str(price))

        rewards = self.load_rewards()
        reward = rewards.add(description, price)
        self.save_rewards(rewards)

        logger.info(f"🎁 Added reward {reward.id}: {reward.description} ({reward.price} points)")
        return reward

    def list_rewards(self) -> RewardLedger:
        """Load rewards with fresh availability; persists the refresh when it was stale"""
        rewards = self.load_rewards()
        if rewards.balance_dirty:
            rewards.recompute_all_availability()
            self.save_rewards(rewards)
        return rewards

    def buy_reward(self, reward_id: IdLike) -> Tuple[Reward, int]:
        """Spend points on a reward. Returns the reward and the new balance."""
        rewards = self.load_rewards()
        reward = rewards.purchase(self._resolve_reward(rewards, reward_id))
        self.save_rewards(rewards)

        logger.info(f"🛒 Bought reward {reward.id} for {reward.price} points, balance {rewards.balance}")
        return reward, rewards.balance

    def edit_reward_description(self, reward_id: IdLike, description: str) -> Reward:
        rewards = self.load_rewards()
        reward = rewards.edit_description(self._resolve_reward(rewards, reward_id), description)
        self.save_rewards(rewards)
        logger.info(f"✏️ Edited description of reward {reward.id}")
        return reward

    def edit_reward_price(self, reward_id: IdLike, price: int) -> Reward:
        if price < 0:
            raise InvalidAmount(str(price))
        rewards = self.load_rewards()
        reward = rewards.edit_price(self._resolve_reward(rewards, reward_id), price)
        self.save_rewards(rewards)
        logger.info(f"✏️ Reward {reward.id} now costs {price} points")
        return reward

    def delete_reward(self, reward_id: IdLike, confirm: Optional[Confirm] = None) -> Optional[Reward]:
        """Remove a reward for good. None if cancelled."""
        rewards = self.load_rewards()
        index = self._resolve_reward(rewards, reward_id)

        if not self._confirmed(confirm, f"You want to delete reward: {describe_reward(rewards.rewards[index])}"):
            return None

        reward = rewards.delete(index)
        self.save_rewards(rewards)
        logger.info(f"🗑️ Deleted reward {reward.id}")
        return reward

    def clear_rewards(self, confirm: Optional[Confirm] = None) -> Optional[int]:
        rewards = self.load_rewards()

        if not self._confirmed(confirm, "The rewards cannot be restored!\nAre you sure you want to delete ALL rewards?"):
            return None

        removed = rewards.clear_all()
        self.save_rewards(rewards)
        logger.info(f"🧹 Removed all {removed} rewards")
        return removed

    def reset_points(self, confirm: Optional[Confirm] = None) -> Optional[int]:
        """Zero the balance. Returns the old balance, None if cancelled."""
        rewards = self.load_rewards()

        if not self._confirmed(confirm, "The count of points cannot be restored!\nAre you sure you want to reset your points to zero?"):
            return None

        previous = rewards.reset_balance()
        self.save_rewards(rewards)
        logger.info(f"🧹 Balance reset to 0 (was {previous})")
        return previous

    # ========================================
    # HELPER METHODS
    # ========================================

    def _resolve_task(self, ledger: TaskLedger, task_id: IdLike) -> int:
        item_id = validate_id(str(task_id), ledger.max_issued_id)
        return resolve_id(item_id, ledger.tasks, kind="task")

    def _resolve_reward(self, rewards: RewardLedger, reward_id: IdLike) -> int:
        item_id = validate_id(str(reward_id), rewards.max_issued_id)
        return resolve_id(item_id, rewards.rewards, kind="reward")

    def _confirmed(self, confirm: Optional[Confirm], question: str) -> bool:
        if confirm is None or confirm(question):
            return True
        logger.info("Operation was cancelled by user")
        return False

    # ========================================
    # REPORTING
    # ========================================

    def get_task_report(self, show_points: bool = False) -> str:
        """Aligned task table, optionally with the points column"""
        tasks = self.list_tasks()
        if not tasks:
            return "No tasks, well done!"

        header = ["Done", "ID", "Task"]
        if show_points:
            header.append("Points for task")

        rows = [header]
        for task in tasks:
            row = [f"[{'✓' if task.is_complete else ' '}]", f"{task.id}.", task.text]
            if show_points:
                row.append(str(task.task_points))
            rows.append(row)

        return _format_table(rows)

    def get_reward_report(self) -> str:
        """Balance line followed by the reward table"""
        rewards = self.list_rewards()
        lines = [f"Your balance of points: {rewards.balance}"]

        if not rewards.rewards:
            lines.append("No rewards added yet")
            return "\n".join(lines)

        rows = [["Available", "ID", "Description", "Price"]]
        for reward in rewards.rewards:
            rows.append([
                "yes" if reward.is_available else "no",
                f"{reward.id}.",
                reward.description,
                str(reward.price)
            ])
        lines.append(_format_table(rows))
        return "\n".join(lines)


def describe_task(task: Task) -> str:
    return f"[{'✓' if task.is_complete else ' '}] {task.id}. {task.text}"


def describe_reward(reward: Reward) -> str:
    return f"{reward.id}. {reward.description} ({reward.price} points)"


def _format_table(rows: List[List[str]], gap: int = 2) -> str:
    widths = [max(len(row[col]) for row in rows) for col in range(len(rows[0]))]
    lines = []
    for row in rows:
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        lines.append((" " * gap).join(cells).rstrip())
    return "\n".join(lines)
