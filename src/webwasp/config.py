"""Console configuration. Stored at ~/.webwasp/config.json."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from webwasp.errors import ConfigError
from webwasp.history import DEFAULT_HISTORY_MAX
from webwasp.line_buffer import DEFAULT_CAPACITY

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".webwasp"

# JSON key -> ConsoleConfig attribute
_JSON_KEYS: dict[str, str] = {
    "historyMax": "history_max",
    "lineCapacity": "line_capacity",
    "prompt": "prompt",
    "showBanner": "show_banner",
}


@dataclass
class ConsoleConfig:
    history_max: int = DEFAULT_HISTORY_MAX
    line_capacity: int = DEFAULT_CAPACITY
    prompt: str = "> "
    show_banner: bool = True

    def validate(self) -> ConsoleConfig:
        for name in ("history_max", "line_capacity"):
            value = getattr(self, name)
            # bool is an int subclass; JSON true must not pass as 1
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.prompt, str):
            raise ConfigError(f"prompt must be a string, got {self.prompt!r}")
        if not isinstance(self.show_banner, bool):
            raise ConfigError(f"show_banner must be true or false, got {self.show_banner!r}")
        return self

    def with_overrides(self, **overrides: Any) -> ConsoleConfig:
        """Copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()


def get_config_dir() -> Path:
    return Path(os.environ.get("WEBWASP_CONFIG_DIR", Path.home() / CONFIG_DIR_NAME))


def get_config_path() -> Path:
    return get_config_dir() / "config.json"


def config_from_dict(data: dict[str, Any]) -> ConsoleConfig:
    """Build a config from the JSON representation, ignoring unknown keys."""
    values = {attr: data[key] for key, attr in _JSON_KEYS.items() if key in data}
    return ConsoleConfig(**values).validate()


def load_config(path: Path | str | None = None) -> ConsoleConfig:
    """Load the config file, falling back to defaults if it is missing or unreadable.

    Raises :class:`ConfigError` when the file parses but holds an invalid value.
    """
    config_path = Path(path) if path is not None else get_config_path()
    if not config_path.exists():
        return ConsoleConfig()
    try:
        data = json.loads(config_path.read_text())
    except (OSError, ValueError) as e:
        logger.warning("error reading config %s: %s", config_path, e)
        return ConsoleConfig()
    if not isinstance(data, dict):
        logger.warning("ignoring config %s: expected a JSON object", config_path)
        return ConsoleConfig()
    return config_from_dict(data)
