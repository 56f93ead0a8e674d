"""Layered settings for the hpm client (CLI > env > user config > defaults)."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomllib

from .paths import UserDirs

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.toml"
STORE_DIR_NAME = "hpm_modules"
DEFAULT_REGISTRY = "https://registry.npmjs.org"
DEFAULT_MODULES_DIR = "node_modules"
DEFAULT_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "WARNING"

_ENV_KEY_MAP: dict[str, str] = {
    "registry": "HPM_REGISTRY",
    "store_dir": "HPM_STORE_DIR",
    "modules_dir": "HPM_MODULES_DIR",
    "timeout": "HPM_TIMEOUT",
    "log_level": "HPM_LOG_LEVEL",
}
CONFIG_PATH_ENV = "HPM_CONFIG"


def _load_config_from_file(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("ignoring unreadable config file %s: %s", path, exc)
        return {}
    return {key: str(value) for key, value in data.items() if not isinstance(value, dict)}


@dataclass(frozen=True)
class HpmSettings:
    registry: str
    store_dir: Path
    modules_dir: str
    timeout: float
    log_level: str


@dataclass
class SettingsResolver:
    """Resolve hpm settings while honoring layered configuration."""

    user_dirs: UserDirs | None = None
    cli_overrides: Mapping[str, Any] | None = None
    env: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        self.user_dirs = self.user_dirs or UserDirs()
        self.cli_overrides = {
            key: value for key, value in dict(self.cli_overrides or {}).items() if value
        }
        self.env = self.env if self.env is not None else os.environ
        self._file_layer: dict[str, str] | None = None

    # ---------- Public API ----------

    def config_path(self) -> Path:
        override = self.env.get(CONFIG_PATH_ENV)
        if override:
            return Path(override).expanduser()
        return self.user_dirs.config_dir() / CONFIG_FILE_NAME

    def resolve_setting(self, key: str) -> str | None:
        """Return the raw value for `key` using CLI, env, user config order."""
        if value := self.cli_overrides.get(key):
            return str(value)
        if value := self._env_value(key):
            return value
        if value := self._user_config_layer().get(key):
            return value
        return None

    def resolve(self) -> HpmSettings:
        registry = (self.resolve_setting("registry") or DEFAULT_REGISTRY).rstrip("/")
        store_value = self.resolve_setting("store_dir")
        store_dir = (
            Path(store_value).expanduser()
            if store_value
            else self.user_dirs.data_dir() / STORE_DIR_NAME
        )
        return HpmSettings(
            registry=registry,
            store_dir=store_dir.resolve(),
            modules_dir=self.resolve_setting("modules_dir") or DEFAULT_MODULES_DIR,
            timeout=self._timeout(),
            log_level=(self.resolve_setting("log_level") or DEFAULT_LOG_LEVEL).upper(),
        )

    # ---------- Internal helpers ----------

    def _env_value(self, key: str) -> str | None:
        alias = _ENV_KEY_MAP.get(key)
        if alias:
            return self.env.get(alias) or None
        return None

    def _user_config_layer(self) -> dict[str, str]:
        if self._file_layer is None:
            self._file_layer = _load_config_from_file(self.config_path())
        return self._file_layer

    def _timeout(self) -> float:
        raw = self.resolve_setting("timeout")
        if raw is None:
            return DEFAULT_TIMEOUT
        try:
            value = float(raw)
        except ValueError:
            logger.warning("invalid timeout %r, using %s seconds", raw, DEFAULT_TIMEOUT)
            return DEFAULT_TIMEOUT
        if value <= 0:
            logger.warning("timeout must be positive, using %s seconds", DEFAULT_TIMEOUT)
            return DEFAULT_TIMEOUT
        return value
