from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sigflow.core.codec import DEFAULT_LINE_WIDTH
from sigflow.core.key_manager import DEFAULT_KEY_SIZE, DEFAULT_PUBLIC_EXPONENT, RSAKeyManager

TAMPER_MARKER = " [MODIFIED BY ATTACK]"


class CryptoConfig(BaseModel):
    """RSA parameters. Values the provider rejects surface as KeyGenError."""

    key_size: int = DEFAULT_KEY_SIZE
    public_exponent: int = DEFAULT_PUBLIC_EXPONENT


class ArmorConfig(BaseModel):
    line_width: int = Field(default=DEFAULT_LINE_WIDTH, ge=4)
    strict: bool = False
    """Reject armored keys without exactly one matching BEGIN/END pair."""

    @field_validator("line_width")
    @classmethod
    def _whole_base64_quanta(cls, value: int) -> int:
        if value % 4 != 0:
            raise ValueError("line_width must be a multiple of 4")
        return value


class WorkflowConfig(BaseModel):
    tamper_marker: str = Field(default=TAMPER_MARKER, min_length=1)


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    json_output: bool = False

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return normalized


class SigflowSettings(BaseSettings):
    crypto: CryptoConfig = Field(default_factory=CryptoConfig)
    armor: ArmorConfig = Field(default_factory=ArmorConfig)
    workflow: WorkflowConfig = Field(default_factory=WorkflowConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="SIGFLOW_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    def build_key_manager(self) -> RSAKeyManager:
        return RSAKeyManager(
            key_size=self.crypto.key_size,
            public_exponent=self.crypto.public_exponent,
            line_width=self.armor.line_width,
            strict_armor=self.armor.strict,
        )


def _set_nested(mapping: dict[str, object], path: list[str], value: object) -> None:
    current = mapping
    for key in path[:-1]:
        existing = current.get(key)
        if not isinstance(existing, dict):
            existing = {}
            current[key] = existing
        current = existing
    current[path[-1]] = value


def _apply_env_overrides(data: dict[str, object]) -> dict[str, object]:
    merged = dict(data)
    prefix = "SIGFLOW_"
    for key, raw_value in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = key[len(prefix) :].lower().split("__")
        # values stay strings; pydantic coerces them per field
        _set_nested(merged, path, raw_value)
    return merged


def load_config(path: str | Path = "config/sigflow.yaml") -> SigflowSettings:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(loaded, dict):
        raise ValueError("config file must contain a top-level mapping")

    raw = loaded.get("sigflow", loaded)
    if not isinstance(raw, dict):
        raise ValueError("sigflow config section must be a mapping")

    return SigflowSettings.model_validate(_apply_env_overrides(raw))


__all__ = [
    "ArmorConfig",
    "CryptoConfig",
    "LoggingConfig",
    "SigflowSettings",
    "TAMPER_MARKER",
    "WorkflowConfig",
    "load_config",
]
