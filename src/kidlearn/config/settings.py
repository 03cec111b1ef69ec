"""Configuration model for KidLearn."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from kidlearn.engine.adaptive import DEFAULT_ADJUSTMENT_SENSITIVITY, DEFAULT_LEARNING_CURVE

DEFAULT_DATA_DIR = Path.home() / ".kidlearn"


class StorageBackend(str, Enum):
    SQLITE = "sqlite"
    JSON = "json"
    MEMORY = "memory"


class StorageConfig(BaseModel):
    backend: StorageBackend = StorageBackend.SQLITE


class AdaptiveConfig(BaseModel):
    """Damping defaults applied to newly initialized learners."""
    learning_curve: float = Field(default=DEFAULT_LEARNING_CURVE, gt=0)
    adjustment_sensitivity: float = Field(default=DEFAULT_ADJUSTMENT_SENSITIVITY, gt=0)


class Settings(BaseModel):
    storage: StorageConfig = Field(default_factory=StorageConfig)
    adaptive: AdaptiveConfig = Field(default_factory=AdaptiveConfig)
    data_dir: Path = DEFAULT_DATA_DIR
    log_level: str = "INFO"
    debug: bool = False

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        config_path = config_path or (DEFAULT_DATA_DIR / "config.yaml")
        data: dict = {}
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        settings = cls(**data)

        data_dir = os.environ.get("KIDLEARN_DATA_DIR")
        if data_dir:
            settings.data_dir = Path(data_dir)
        backend = os.environ.get("KIDLEARN_STORAGE_BACKEND")
        if backend:
            settings.storage.backend = StorageBackend(backend)
        log_level = os.environ.get("KIDLEARN_LOG_LEVEL")
        if log_level:
            settings.log_level = log_level
        return settings

    def save(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        config_path = self.data_dir / "config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False)
