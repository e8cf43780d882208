"""
TASKPOINTS - Ledger Schema Definition
=====================================
Tasks earn points, rewards spend them.

Both ledgers are pydantic models so they round-trip to the JSON documents
the store writes. Field aliases keep the on-disk camelCase keys; Python code
uses the snake_case names.
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import AlreadyComplete, InsufficientPoints, NotComplete, NothingToRestore


class Task(BaseModel):
    """Single task with the points it pays out on completion"""
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(ge=1)
    text: str
    is_complete: bool = Field(default=False, alias="isComplete")
    task_points: int = Field(default=0, ge=0, alias="taskPoints")
    # True once the points for the current completion have been credited
    points_settled: bool = Field(default=False, alias="isTaskPointsReceive")


class TaskLedger(BaseModel):
    """Active tasks, the deleted-task buffer and the id counter"""
    model_config = ConfigDict(populate_by_name=True)

    tasks: List[Task] = Field(default_factory=list)
    deleted_tasks: List[Task] = Field(default_factory=list, alias="deletedTasks")
    next_id: int = Field(default=1, alias="nextId")

    @field_validator("tasks", "deleted_tasks", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def max_issued_id(self) -> int:
        return self.next_id - 1

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.is_complete)

    # ========================================
    # MUTATIONS (index-based, see lookup.resolve_id)
    # ========================================

    def add(self, text: str, points: int) -> Task:
        """Append a new pending task with the next id"""
        if not self.tasks:
            # keep ids low after everything has been removed
            self.next_id = 1
        task = Task(id=self.next_id, text=text, task_points=points)
        self.tasks.append(task)
        self.next_id += 1
        return task

    def complete(self, index: int) -> Task:
        task = self.tasks[index]
        if task.is_complete:
            raise AlreadyComplete(task.id)
        task.is_complete = True
        return task

    def uncomplete(self, index: int) -> Task:
        task = self.tasks[index]
        if not task.is_complete:
            raise NotComplete(task.id)
        task.is_complete = False
        return task

    def edit_text(self, index: int, text: str) -> Task:
        self.tasks[index].text = text
        return self.tasks[index]

    def edit_points(self, index: int, points: int) -> Task:
        self.tasks[index].task_points = points
        return self.tasks[index]

    def delete(self, index: int) -> Task:
        """Move a task into the deleted buffer (appends, never replaces)"""
        task = self.tasks.pop(index)
        self.deleted_tasks.append(task)
        return task

    def restore_last(self) -> Task:
        """Bring back the most recently deleted task as pending with a fresh id.

        Single-shot undo: the whole deleted buffer is cleared, so any earlier
        deletions can no longer be restored.
        """
        if not self.deleted_tasks:
            raise NothingToRestore()

        task = self.deleted_tasks[-1]
        task.id = self.next_id
        task.is_complete = False
        self.next_id += 1

        self.tasks.append(task)
        self.deleted_tasks = []
        return task

    def clear_all(self) -> int:
        """Drop every active task and reset the counter. Returns how many were dropped."""
        removed = len(self.tasks)
        self.tasks = []
        self.next_id = 1
        return removed


class Reward(BaseModel):
    """Something the user can buy with points"""
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(ge=1)
    description: str
    price: int = Field(default=0, ge=0, alias="priceOfReward")
    # Cached projection of balance >= price, refreshed by RewardLedger
    is_available: bool = Field(default=False, alias="isAvailable")


class RewardLedger(BaseModel):
    """Rewards plus the running point balance"""
    model_config = ConfigDict(populate_by_name=True)

    rewards: List[Reward] = Field(default_factory=list)
    balance: int = Field(default=0, alias="userPoints")
    # Balance changed since availability was last recomputed
    balance_dirty: bool = Field(default=False, alias="isUserPointsUpdate")
    next_id: int = Field(default=1, alias="nextId")

    @field_validator("rewards", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def max_issued_id(self) -> int:
        return self.next_id - 1

    def can_afford(self, price: int) -> bool:
        return self.balance >= price

    # ========================================
    # MUTATIONS
    # ========================================

    def add(self, description: str, price: int) -> Reward:
        if not self.rewards:
            self.next_id = 1
        reward = Reward(
            id=self.next_id,
            description=description,
            price=price,
            is_available=self.can_afford(price)
        )
        self.rewards.append(reward)
        self.next_id += 1
        return reward

    def purchase(self, index: int) -> Reward:
        """Spend points on a reward. Nothing changes when it is unaffordable."""
        reward = self.rewards[index]
        if not self.can_afford(reward.price):
            raise InsufficientPoints(reward.price - self.balance)
        self.balance -= reward.price
        self.balance_dirty = True
        return reward

    def adjust_balance(self, delta: int) -> None:
        if delta == 0:
            return
        self.balance += delta
        self.balance_dirty = True

    def edit_description(self, index: int, description: str) -> Reward:
        self.rewards[index].description = description
        return self.rewards[index]

    def edit_price(self, index: int, price: int) -> Reward:
        reward = self.rewards[index]
        reward.price = price
        reward.is_available = self.can_afford(price)
        return reward

    def delete(self, index: int) -> Reward:
        return self.rewards.pop(index)

    def recompute_all_availability(self) -> None:
        for reward in self.rewards:
            reward.is_available = self.can_afford(reward.price)
        self.balance_dirty = False

    def clear_all(self) -> int:
        removed = len(self.rewards)
        self.rewards = []
        self.next_id = 1
        return removed

    def reset_balance(self) -> int:
        """Zero the balance. Returns the balance it had before."""
        previous = self.balance
        self.balance = 0
        self.balance_dirty = True
        return previous
