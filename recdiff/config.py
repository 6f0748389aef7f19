"""Configuration loading from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

from recdiff.core import ByIdentity
from recdiff.logging import setup_logging


@dataclass
class DiffConfig:
    """Defaults for list reconciliation and logging."""

    identity_fields: tuple[str, ...] = ("id",)
    report_removed: bool = False
    log_level: str = "info"

    def list_mode(self) -> ByIdentity:
        return ByIdentity(self.identity_fields, report_removed=self.report_removed)


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"RECDIFF_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_list(key: str, default: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in _env(key, default).split(",") if part.strip())


def _validate_identity_fields(value: tuple[str, ...]) -> tuple[str, ...]:
    if not value:
        raise ValueError("Identity fields must name at least one field")
    return value


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> DiffConfig:
    """Load configuration from RECDIFF_* environment variables."""
    return DiffConfig(
        identity_fields=_validate_identity_fields(_env_list("IDENTITY_FIELDS", "id")),
        report_removed=_env_bool("REPORT_REMOVED", False),
        log_level=_validate_log_level(_env("LOG_LEVEL", "info")),
    )


def configure(config: DiffConfig | None = None) -> DiffConfig:
    """Load configuration (unless given) and set up logging at its level."""
    if config is None:
        config = load_config()
    setup_logging(config.log_level)
    return config
