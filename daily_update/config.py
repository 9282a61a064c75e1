"""Configuration loading for the daily update service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_FILE_PREFIX = "ToDo"

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


class ConfigError(RuntimeError):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class AppConfig:
    vault_path: Path
    file_prefix: str
    run_on_startup: bool
    commit_changes: bool
    log_level: int


def _read_dotenv_value(dotenv_path: Path, key: str) -> str | None:
    """Read a single key from a .env file without mutating the environment."""
    if not dotenv_path.is_file():
        return None
    try:
        content = dotenv_path.read_text(encoding="utf-8")
    except OSError:
        return None

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("export "):
            stripped = stripped[len("export ") :].strip()
        if "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        if name.strip() != key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        return value or None
    return None


def _lookup(dotenv_path: Path, key: str) -> str | None:
    raw_value = os.environ.get(key)
    if raw_value is None:
        raw_value = _read_dotenv_value(dotenv_path, key)
    return raw_value


def _read_bool(raw_value: str | None, *, default: bool, key: str) -> bool:
    if raw_value is None:
        return default
    normalized = raw_value.strip().lower()
    if not normalized:
        return default
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"{key} must be a boolean value.")


def _read_log_level(raw_value: str | None, *, key: str) -> int:
    if raw_value is None or not raw_value.strip():
        return logging.INFO
    normalized = raw_value.strip().upper()
    if normalized not in _LOG_LEVELS:
        raise ConfigError(f"{key} must be one of {', '.join(sorted(_LOG_LEVELS))}.")
    return getattr(logging, normalized)


def load_config() -> AppConfig:
    """Load configuration from the environment, falling back to ./.env."""
    dotenv_path = Path.cwd() / ".env"

    vault_key = "TODO_VAULT_PATH"
    raw_path = (_lookup(dotenv_path, vault_key) or "").strip()
    if not raw_path:
        raise ConfigError("TODO_VAULT_PATH is required; set it to the vault root path.")
    vault_path = Path(raw_path).expanduser()
    if not vault_path.is_absolute():
        vault_path = dotenv_path.parent / vault_path
    vault_path = vault_path.resolve()

    prefix_key = "TODO_FILE_PREFIX"
    file_prefix = (_lookup(dotenv_path, prefix_key) or "").strip()
    if not file_prefix:
        file_prefix = DEFAULT_FILE_PREFIX

    run_key = "TODO_RUN_ON_STARTUP"
    run_on_startup = _read_bool(_lookup(dotenv_path, run_key), default=True, key=run_key)

    commit_key = "TODO_COMMIT_CHANGES"
    commit_changes = _read_bool(
        _lookup(dotenv_path, commit_key), default=False, key=commit_key
    )

    level_key = "TODO_LOG_LEVEL"
    log_level = _read_log_level(_lookup(dotenv_path, level_key), key=level_key)

    return AppConfig(
        vault_path=vault_path,
        file_prefix=file_prefix,
        run_on_startup=run_on_startup,
        commit_changes=commit_changes,
        log_level=log_level,
    )
