"""HistoryConfig: load store settings from YAML and the environment.

Resolution order (later wins):

1. built-in ``resources/defaults.yml``
2. user YAML file passed to ``load_config``
3. ``HISTORY_STATE_CAPACITY`` / ``HISTORY_STATE_MODE`` environment variables
"""

from __future__ import annotations

import logging
import os
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from history_state.core.models import HistoryMode
from history_state.core.resources import get_default_config_path
from history_state.core.transition import DEFAULT_CAPACITY, check_capacity

_log = logging.getLogger(__name__)

ENV_CAPACITY = "HISTORY_STATE_CAPACITY"
ENV_MODE = "HISTORY_STATE_MODE"


@dataclass
class HistoryConfig:
    capacity: int = DEFAULT_CAPACITY
    mode: HistoryMode = HistoryMode.COMPATIBLE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HistoryConfig":
        """Build from the ``history:`` section of a config file."""
        capacity = data.get("capacity", DEFAULT_CAPACITY)
        try:
            check_capacity(capacity)
        except ValueError:
            raise ValueError(f"history.capacity must be a positive integer, got {capacity!r}") from None
        try:
            mode = HistoryMode.parse(data.get("mode", HistoryMode.COMPATIBLE))
        except ValueError as exc:
            raise ValueError(f"history.mode: {exc}") from None
        return cls(capacity=capacity, mode=mode)


def deep_merge(base: dict, overlay: dict) -> dict:
    """Merge overlay into base. Overlay wins on scalar conflicts.

    Dicts are merged recursively. Lists are replaced (not concatenated).
    """
    result = deepcopy(base)
    for key, val in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = deep_merge(result[key], val)
        else:
            result[key] = deepcopy(val)
    return result


def _read_yaml(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(data).__name__}")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict:
    section: dict = {}
    raw_capacity = environ.get(ENV_CAPACITY, "").strip()
    if raw_capacity:
        try:
            section["capacity"] = int(raw_capacity)
        except ValueError:
            raise ValueError(f"{ENV_CAPACITY} must be an integer, got {raw_capacity!r}") from None
    raw_mode = environ.get(ENV_MODE, "").strip()
    if raw_mode:
        section["mode"] = raw_mode
    return {"history": section} if section else {}


def load_config(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> HistoryConfig:
    """Return the merged configuration.

    Args:
        path: Optional user YAML file. A missing file is ignored with a warning.
        environ: Environment mapping; defaults to ``os.environ``.
    """
    config = _read_yaml(get_default_config_path())

    if path is not None:
        user_path = Path(path)
        if user_path.exists():
            config = deep_merge(config, _read_yaml(user_path))
        else:
            _log.warning("Config file %s not found; using defaults.", user_path)

    config = deep_merge(config, _env_overrides(os.environ if environ is None else environ))

    section = config.get("history") or {}
    if not isinstance(section, dict):
        raise ValueError(f"'history' must be a mapping, got {type(section).__name__}")
    return HistoryConfig.from_dict(section)
