"""Configuration management package.

The public API is available as `tagsimple.core.config` while implementation is
split into focused modules.
"""

from __future__ import annotations

from .defaults import DEFAULT_CONFIG, OUTPUT_FORMATS
from .settings import SettingsManager

__all__ = [
    "DEFAULT_CONFIG",
    "OUTPUT_FORMATS",
    "SettingsManager",
]
