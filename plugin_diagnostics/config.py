# SPDX-FileCopyrightText: 2026 Christian-Hauke Poensgen
# SPDX-FileCopyrightText: 2026 Maximilian Dolling
# SPDX-FileContributor: AUTHORS.md
#
# SPDX-License-Identifier: BSD-3-Clause

"""Configuration settings for Plugin Diagnostics."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from pathlib import Path
from shutil import rmtree

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_PORT = 65_535
DEFAULT_STORAGE_KEY = "plugin_diagnostics.filters.v1"


class LoggingConfigFile(BaseModel):
    """File-based logging configuration."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    log_dir: Path = Path("./logs")
    log_rotation_hours: int = Field(default=24, gt=0)
    log_level: str = "INFO"
    delete_on_boot: bool = False

    @field_validator("log_dir", mode="after")
    @classmethod
    def _expand_log_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @model_validator(mode="after")
    def _ensure_log_dir(self) -> LoggingConfigFile:
        if self.delete_on_boot and self.log_dir.exists():
            for entry in self.log_dir.iterdir():
                if entry.is_dir():
                    rmtree(entry)
                else:
                    entry.unlink(missing_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        return self


class StorageConfigBase(BaseModel):
    """Base configuration for the persisted filter state."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    storage_key: str = DEFAULT_STORAGE_KEY

    @field_validator("storage_key", mode="after")
    @classmethod
    def _normalize_key(cls, value: str) -> str:
        cleaned = value.strip()
        return cleaned or DEFAULT_STORAGE_KEY


class StorageConfigSqlite(StorageConfigBase):
    """SQLite-backed state storage."""

    db_path: Path = Path("./plugin_diagnostics.db")

    @field_validator("db_path", mode="after")
    @classmethod
    def _expand_db_path(cls, value: Path) -> Path:
        return value.expanduser()

    @model_validator(mode="after")
    def _ensure_db_parent(self) -> StorageConfigSqlite:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return self


class StorageConfigMemory(StorageConfigBase):
    """In-memory state storage, lost on exit."""


class RuntimeConfig(BaseModel):
    """Refresh cadence and limits for the task-queue collaborator."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    task_list_limit: int = Field(default=300, gt=0)
    refresh_interval_seconds: float = Field(default=5.0, gt=0)
    event_debounce_seconds: float = Field(default=0.2, ge=0)
    quick_range_minutes: list[int] = Field(default_factory=lambda: [15, 30, 60])

    @field_validator("quick_range_minutes", mode="after")
    @classmethod
    def _validate_minutes(cls, value: list[int]) -> list[int]:
        if any(minutes <= 0 for minutes in value):
            message = "quick_range_minutes entries must be positive"
            raise ValueError(message)
        return value


class FrontendConfig(BaseModel):
    """Web frontend configuration."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    host: str = "127.0.0.1"
    port: int = Field(default=5556, ge=1, le=MAX_PORT)
    debug: bool = True
    secret_key: str = Field(default_factory=lambda: secrets.token_urlsafe(32))
    tasks_snapshot_path: Path | None = None

    @field_validator("tasks_snapshot_path", mode="after")
    @classmethod
    def _expand_snapshot_path(cls, value: Path | None) -> Path | None:
        if value is None:
            return None
        return value.expanduser()


class DiagnosticsConfig(BaseModel):
    """Central configuration for Plugin Diagnostics."""

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    logging: LoggingConfigFile = Field(default_factory=LoggingConfigFile)
    storage: StorageConfigSqlite | StorageConfigMemory = Field(default_factory=StorageConfigMemory)
    runtime: RuntimeConfig = Field(default_factory=RuntimeConfig)
    frontend: FrontendConfig | None = Field(default_factory=FrontendConfig)

    @field_validator("storage", mode="before")
    @classmethod
    def _coerce_storage(cls, value: object) -> object:
        if isinstance(value, StorageConfigSqlite | StorageConfigMemory):
            return value
        if isinstance(value, dict):
            if "db_path" in value:
                return StorageConfigSqlite(**value)
            return StorageConfigMemory(**value)
        return value


@dataclass
class _SettingsState:
    cache: DiagnosticsConfig | None = None
    runtime: DiagnosticsConfig | None = None


_STATE = _SettingsState()


def get_settings() -> DiagnosticsConfig:
    """Return the active configuration, reading defaults if needed."""
    if _STATE.runtime is not None:
        return _STATE.runtime
    if _STATE.cache is None:
        _STATE.cache = DiagnosticsConfig()
    return _STATE.cache


def set_settings(config: DiagnosticsConfig) -> None:
    """Override the global settings for the current process."""
    _STATE.runtime = config


def reset_settings() -> None:
    """Clear cached settings."""
    _STATE.cache = None
    _STATE.runtime = None


__all__ = [
    "DEFAULT_STORAGE_KEY",
    "MAX_PORT",
    "DiagnosticsConfig",
    "FrontendConfig",
    "LoggingConfigFile",
    "RuntimeConfig",
    "StorageConfigBase",
    "StorageConfigMemory",
    "StorageConfigSqlite",
    "get_settings",
    "reset_settings",
    "set_settings",
]
