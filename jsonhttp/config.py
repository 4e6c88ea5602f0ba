from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from jsonhttp.http.request import DEFAULT_ACCEPT_ENCODING


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or validated."""


class ClientConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    accept_encoding: str = Field(default=DEFAULT_ACCEPT_ENCODING, min_length=1)
    accepted_statuses: list[int] = Field(default_factory=lambda: list(range(200, 300)))
    default_headers: dict[str, str] = Field(default_factory=dict)

    @field_validator("accepted_statuses")
    @classmethod
    def _validate_accepted_statuses(cls, value: list[int]) -> list[int]:
        if not value:
            raise ValueError("accepted_statuses must not be empty")
        for status in value:
            if not 100 <= status <= 599:
                raise ValueError(f"Invalid HTTP status in accepted_statuses: {status}")
        return value


class ObsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    log_level: str = Field(default="INFO")
    log_jsonl: bool = Field(default=True)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log_level: {value}")
        return level


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client: ClientConfig = Field(default_factory=ClientConfig)
    obs: ObsConfig = Field(default_factory=ObsConfig)


@dataclass(frozen=True)
class LoadedConfig:
    config: AppConfig
    raw: dict[str, Any]


def load_config(path: Path) -> LoadedConfig:
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")

    try:
        payload = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML: {exc}") from exc

    if not isinstance(payload, dict):
        raise ConfigError("Config root must be a mapping")

    try:
        config = AppConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    return LoadedConfig(config=config, raw=payload)
