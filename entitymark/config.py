"""Load mention engine settings from TOML (e.g. entitymark.toml).

Config file is looked up in order:
  1. Path in ENTITYMARK_CONFIG env var (if set)
  2. entitymark.toml in the current working directory

Settings live in an ``[engine]`` table:

    [engine]
    mark_kind = "entityMark"
    scan_delay_seconds = 0.15
    case_sensitive = false

If no file is found, or a value has the wrong type, built-in defaults are used.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from entitymark.marks import ENTITY_MARK

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "ENTITYMARK_CONFIG"
CONFIG_FILE_NAME = "entitymark.toml"


class EngineConfig(BaseModel, frozen=True):
    """Settings shared by the scanner, synchronizer, resolver and binder."""

    mark_kind: str = Field(default=ENTITY_MARK, min_length=1, description="Mark kind owned by the engine.")
    scan_delay_seconds: float = Field(
        default=0.0,
        ge=0.0,
        description="Yield delay before a scan starts (the editor UI used 0.15).",
    )
    case_sensitive: bool = Field(default=False, description="Match names case-sensitively.")


def _default_config_paths() -> list[Path]:
    """Return paths to check for entitymark.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get(CONFIG_ENV_VAR):
        paths.append(Path(os.environ[CONFIG_ENV_VAR]))
    paths.append(Path.cwd() / CONFIG_FILE_NAME)
    return paths


_EXPECTED_TYPES: dict[str, tuple[type, ...]] = {
    "mark_kind": (str,),
    "scan_delay_seconds": (int, float),
    "case_sensitive": (bool,),
}


def load_engine_config(path: Path | None = None) -> EngineConfig:
    """Load engine settings.

    Args:
        path: Explicit config file. When None, the default lookup is used.

    Returns:
        An EngineConfig; defaults for anything missing or mistyped.
    """
    paths = [path] if path is not None else _default_config_paths()
    values: dict[str, Any] = {}
    for candidate in paths:
        if not candidate.is_file():
            continue
        try:
            with open(candidate, "rb") as f:
                data = tomllib.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable config %s: %s", candidate, exc)
            continue
        engine = data.get("engine")
        if isinstance(engine, dict):
            for key, expected in _EXPECTED_TYPES.items():
                value = engine.get(key)
                # bool is an int subclass; keep it out of numeric settings
                if isinstance(value, expected) and not (isinstance(value, bool) and bool not in expected):
                    values[key] = value
        break
    try:
        return EngineConfig(**values)
    except ValueError as exc:
        logger.warning("Invalid engine config values %s: %s", values, exc)
        return EngineConfig()
