"""
TASKPOINTS - Configuration
==========================
Settings live in a small YAML file next to the data:

    storage:
      todo_file: todo.json
      reward_file: rewards.json
    defaults:
      task_points: 20
      reward_price: 20

Environment variables override the file (see ENV_OVERRIDES). The loaded
Settings value is passed explicitly to TaskManager; nothing here is global.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError

logger = logging.getLogger("taskpoints")

DEFAULT_CONFIG_PATH = "config.yaml"

# env var -> (section, key)
ENV_OVERRIDES = {
    "TASKPOINTS_TODO_FILE": ("storage", "todo_file"),
    "TASKPOINTS_REWARD_FILE": ("storage", "reward_file"),
    "TASKPOINTS_TASK_POINTS": ("defaults", "task_points"),
    "TASKPOINTS_REWARD_PRICE": ("defaults", "reward_price"),
}


class StorageSettings(BaseModel):
    todo_file: str = "todo.json"
    reward_file: str = "rewards.json"


class DefaultSettings(BaseModel):
    task_points: int = Field(default=20, ge=0)
    reward_price: int = Field(default=20, ge=0)


class Settings(BaseModel):
    """Everything the core needs: two file paths and two defaults"""
    storage: StorageSettings = Field(default_factory=StorageSettings)
    defaults: DefaultSettings = Field(default_factory=DefaultSettings)


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH, apply_env: bool = True) -> Settings:
    """Read settings, creating the file with defaults on first run.

    With apply_env=False the result is exactly what the file holds, which is
    what callers that write the file back must start from.
    """
    path = Path(path)

    if not path.exists():
        settings = Settings()
        save_config(settings, path)
        logger.info(f"Config file not found, created {path} with default values")
    else:
        settings = _read_config_file(path)

    return _apply_env_overrides(settings, path) if apply_env else settings


def _read_config_file(path: Path) -> Settings:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(path, str(exc)) from exc

    if not isinstance(data, dict):
        raise ConfigError(path, "top level must be a mapping")

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(path, str(exc)) from exc


def save_config(settings: Settings, path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(settings.model_dump(), f, default_flow_style=False, sort_keys=False)
    logger.debug(f"💾 Saved config to {path}")


def update_defaults(
    settings: Settings,
    task_points: Optional[int] = None,
    reward_price: Optional[int] = None
) -> Settings:
    """Return a copy of settings with new defaults; the caller persists it"""
    changes: Dict[str, Any] = {}
    if task_points is not None:
        changes["task_points"] = task_points
    if reward_price is not None:
        changes["reward_price"] = reward_price

    defaults = settings.defaults.model_copy(update=changes)
    return settings.model_copy(update={"defaults": defaults})


def _apply_env_overrides(settings: Settings, path: Path) -> Settings:
    data = settings.model_dump()
    overridden = False
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value is not None:
            data[section][key] = value
            overridden = True

    if not overridden:
        return settings

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(path, f"bad environment override: {exc}") from exc
