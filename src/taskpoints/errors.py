"""
TASKPOINTS - Error Kinds
========================
Every core operation either succeeds or raises exactly one of these.
The CLI decides how they are shown to the user.
"""

from pathlib import Path
from typing import Union


class TaskPointsError(Exception):
    """Base class for all taskpoints errors"""


class LockContention(TaskPointsError):
    """Another process holds the advisory lock for a data file"""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"file is locked by another process: {self.path}")


class CorruptData(TaskPointsError):
    """Persisted content could not be parsed into a ledger"""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"corrupt data in {self.path}: {reason}")


class ConfigError(TaskPointsError):
    """The configuration file could not be read or validated"""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"could not read config file {self.path}: {reason}")


class NotFound(TaskPointsError):
    def __init__(self, item_id: int, kind: str = "item"):
        self.item_id = item_id
        self.kind = kind
        super().__init__(f"{kind} {item_id} was not found")


class InvalidId(TaskPointsError):
    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"incorrect id: {raw!r}")


class InvalidAmount(TaskPointsError):
    """Points or price text is not a non-negative integer"""

    def __init__(self, raw: str):
        self.raw = raw
        super().__init__(f"incorrect count: {raw!r} (must be a whole number >= 0)")


class InsufficientPoints(TaskPointsError):
    """Purchase precondition failed; `shortfall` is how many points are missing"""

    def __init__(self, shortfall: int):
        self.shortfall = shortfall
        super().__init__(f"not enough {shortfall} points")


class AlreadyComplete(TaskPointsError):
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"task {task_id} has already been completed")


class NotComplete(TaskPointsError):
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"task {task_id} has not been completed yet")


class NothingToRestore(TaskPointsError):
    def __init__(self):
        super().__init__("no deleted tasks")
