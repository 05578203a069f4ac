"""Typed view over the Hydra config tree (``config/config.yaml``)."""

from __future__ import annotations

from typing import Any

from omegaconf import DictConfig, OmegaConf
from pydantic import BaseModel, Field

from lexevo.database.factory import StorageConfig
from lexevo.evolution.engine.config import EngineConfig
from lexevo.runner.runner import RunnerConfig
from lexevo.sync.models import SyncConfig
from lexevo.utils.logger_setup import LoggingConfig


class ApiConfig(BaseModel):
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3460, gt=0, lt=65536)


class LexiconConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)

    model_config = {"extra": "forbid"}

    @classmethod
    def from_omegaconf(cls, cfg: DictConfig | dict[str, Any]) -> LexiconConfig:
        if isinstance(cfg, DictConfig):
            cfg = OmegaConf.to_container(cfg, resolve=True)
        return cls.model_validate(cfg)
