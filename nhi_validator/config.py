"""
Runtime settings read from the environment (and ``.env`` via python-dotenv).

    NHI_EXCLUDE_TEST_VALUES   reject Z-prefixed test NHIs      (default: false)
    NHI_MAX_BATCH_SIZE        largest accepted batch            (default: 1000)
    NHI_LOG_LEVEL             root log level for CLI and API    (default: INFO)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigurationError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True)
class Settings:
    exclude_test_values: bool = False
    max_batch_size: int = 1000
    log_level: str = "INFO"


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {raw!r}", {"variable": name, "value": raw}
    )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {raw!r}", {"variable": name, "value": raw}
        ) from None
    if value < 1:
        raise ConfigurationError(
            f"{name} must be at least 1, got {value}", {"variable": name, "value": raw}
        )
    return value


def _env_log_level(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(
            f"{name} is not a logging level: {raw!r}", {"variable": name, "value": raw}
        )
    return level


def load_settings(env_file: str | Path | None = None, dotenv: bool = True) -> Settings:
    """Build :class:`Settings` from the process environment.

    Args:
        env_file: Path to a ``.env`` file. Defaults to python-dotenv's search.
        dotenv: Populate the environment from the ``.env`` file first. Values
            already set in the environment win.

    Raises:
        ConfigurationError: if a variable is present but unparsable.
    """
    if dotenv:
        load_dotenv(env_file)

    defaults = Settings()
    return Settings(
        exclude_test_values=_env_bool("NHI_EXCLUDE_TEST_VALUES", defaults.exclude_test_values),
        max_batch_size=_env_int("NHI_MAX_BATCH_SIZE", defaults.max_batch_size),
        log_level=_env_log_level("NHI_LOG_LEVEL", defaults.log_level),
    )


def configure_logging(settings: Settings) -> None:
    """Configure the root logger for the CLI and API entry points."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
