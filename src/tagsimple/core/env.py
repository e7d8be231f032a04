"""Environment overrides shared across tagsimple."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def resolve_config_path(default_path: Path) -> Path:
    """Pick config path based on environment overrides."""

    env_path = os.environ.get("TAGSIMPLE_CONFIG_PATH")
    if env_path:
        return Path(env_path)
    env_dir = os.environ.get("TAGSIMPLE_CONFIG_DIR")
    if env_dir:
        return Path(env_dir) / "settings.yaml"
    return default_path


def resolve_log_level(default: Optional[str] = None) -> str:
    """Return the log level name, honoring the LOGLEVEL override."""

    env_level = os.environ.get("LOGLEVEL")
    return (env_level or default or "WARNING").strip().upper()
