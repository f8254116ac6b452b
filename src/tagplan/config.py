"""YAML configuration for the planning engine and its executors."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from .executors import AwesomeExecutor, DryRunExecutor, SlotExecutor
from .executors.awesome import DEFAULT_CLIENT
from .models import DEFAULT_MAX_INDEX, ScreenContext

DEFAULT_CONFIG_NAME = "tagplan.yaml"

DEFAULT_CONFIG_TEMPLATE: Dict[str, Any] = {
    "engine": {
        "max_index": DEFAULT_MAX_INDEX,
    },
    "executor": {
        "mode": "dry-run",
        "client": DEFAULT_CLIENT,
        "timeout": 5,
    },
    "logging": {
        "level": "WARNING",
    },
}

EXECUTOR_MODES = ("dry-run", "awesome")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised when the configuration file cannot be used."""


@dataclass(slots=True)
class Settings:
    """Resolved configuration values with defaults applied."""

    max_index: int = DEFAULT_MAX_INDEX
    executor_mode: str = "dry-run"
    client: str = DEFAULT_CLIENT
    timeout: float = 5.0
    log_level: str = "WARNING"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Settings":
        """Instantiate settings from a configuration mapping."""
        engine_cfg = config.get("engine") if isinstance(config.get("engine"), Mapping) else {}
        executor_cfg = config.get("executor") if isinstance(config.get("executor"), Mapping) else {}
        logging_cfg = config.get("logging") if isinstance(config.get("logging"), Mapping) else {}

        settings = cls()

        max_index = engine_cfg.get("max_index")
        if isinstance(max_index, int) and not isinstance(max_index, bool) and max_index > 0:
            settings.max_index = max_index

        mode = executor_cfg.get("mode")
        if isinstance(mode, str) and mode.strip().lower() in EXECUTOR_MODES:
            settings.executor_mode = mode.strip().lower()

        client = executor_cfg.get("client")
        if isinstance(client, str) and client.strip():
            settings.client = client.strip()

        timeout = executor_cfg.get("timeout")
        if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
            settings.timeout = float(timeout)

        level = logging_cfg.get("level")
        if isinstance(level, str) and level.strip().upper() in LOG_LEVELS:
            settings.log_level = level.strip().upper()

        return settings

    def build_executor(
        self,
        *,
        live: bool | None = None,
        context: ScreenContext | None = None,
    ) -> SlotExecutor:
        """Create the executor selected by ``live`` or the configured mode."""
        use_live = self.executor_mode == "awesome" if live is None else live
        if use_live:
            return AwesomeExecutor(client=self.client, timeout=self.timeout)
        return DryRunExecutor(context)


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration template."""
    return copy.deepcopy(DEFAULT_CONFIG_TEMPLATE)


def load_config(config_path: Path | str) -> Dict[str, Any]:
    """Load YAML configuration from disk, falling back to defaults when absent."""
    path = Path(config_path)
    if not path.exists():
        return default_config()

    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse config {path}: {error}") from error

    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping at the top level.")
    return data


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG_NAME",
    "DEFAULT_CONFIG_TEMPLATE",
    "EXECUTOR_MODES",
    "LOG_LEVELS",
    "Settings",
    "default_config",
    "load_config",
]
