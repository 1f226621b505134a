"""Configuration model and loading for lsp-tools.

Values resolve by precedence: CLI overrides, environment, ``config.toml``,
then defaults.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lsp_tools.errors import ConfigError
from lsp_tools.paths import get_lsp_tools_home

ENV_ALLOWED_DIRS = "LSP_TOOLS_ALLOWED_DIRS"
ENV_LOG_LEVEL = "LSP_TOOLS_LOG_LEVEL"


class LogLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class Settings(BaseModel):
    """Resolved lsp-tools settings."""

    model_config = ConfigDict(frozen=True, validate_default=True, extra="forbid")

    allowed_directories: tuple[str, ...] = Field(default_factory=tuple)
    log_level: LogLevel = LogLevel.INFO

    @field_validator("allowed_directories")
    @classmethod
    def _strip_directories(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(item.strip() for item in value if item and item.strip())


def default_config_path() -> Path:
    return get_lsp_tools_home() / "config.toml"


def load_settings(
    cli_overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
    config_path: Path | str | None = None,
) -> Settings:
    env = env if env is not None else os.environ
    cli_overrides = cli_overrides or {}
    path = Path(config_path) if config_path else default_config_path()

    config_data: dict[str, Any] = {}
    if path.exists():
        config_data = _read_toml(path)

    allowed_directories = _first_value(
        _clean_list(cli_overrides.get("allowed_directories")),
        _split_env_dirs(env.get(ENV_ALLOWED_DIRS)),
        _clean_list(_get_config_value(config_data, "sandbox", "allowed_directories")),
        (),
    )

    log_level = _first_value(
        _clean_str(cli_overrides.get("log_level")),
        _clean_str(env.get(ENV_LOG_LEVEL)),
        _clean_str(_get_config_value(config_data, "logging", "log_level")),
    )

    return Settings(
        allowed_directories=tuple(allowed_directories),
        log_level=_coerce_log_level(log_level),
    )


def write_config(settings: Settings, config_path: Path | str | None = None) -> Path:
    path = Path(config_path) if config_path else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    sections: list[str] = []
    if settings.allowed_directories:
        rendered = ", ".join(_quote(item) for item in settings.allowed_directories)
        sections.append(f"[sandbox]\nallowed_directories = [{rendered}]")
    sections.append(f"[logging]\nlog_level = {_quote(settings.log_level.value)}")

    path.write_text("\n\n".join(sections) + "\n", encoding="utf-8")
    return path


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc


def _get_config_value(config: Mapping[str, Any], section: str, key: str) -> Any:
    section_data = config.get(section)
    if not isinstance(section_data, dict):
        return None
    return section_data.get(key)


def _clean_str(value: Any) -> Any:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped if stripped else None
    return value


def _clean_list(value: Any) -> tuple[str, ...] | None:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, Sequence):
        return None
    cleaned = tuple(item.strip() for item in value if isinstance(item, str) and item.strip())
    return cleaned or None


def _split_env_dirs(value: str | None) -> tuple[str, ...] | None:
    if not value:
        return None
    return _clean_list(value.split(os.pathsep))


def _first_value(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _coerce_log_level(value: Any) -> LogLevel:
    if isinstance(value, LogLevel):
        return value
    if isinstance(value, str):
        try:
            return LogLevel(value.lower())
        except ValueError:
            return LogLevel.INFO
    return LogLevel.INFO


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


__all__ = [
    "ENV_ALLOWED_DIRS",
    "ENV_LOG_LEVEL",
    "LogLevel",
    "Settings",
    "default_config_path",
    "load_settings",
    "write_config",
]
