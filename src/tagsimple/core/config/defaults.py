"""Default configuration values."""

from __future__ import annotations

from typing import Any, Dict

OUTPUT_FORMATS = ("json", "pretty", "yaml", "pp")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG: Dict[str, Any] = {
    "read": {
        # fast, average, accurate or null to skip audio properties
        "audio_properties": None,
    },
    "cli": {
        "format": "json",
        "patterns": ["**/*.*"],
    },
    "logging": {
        "level": "WARNING",
    },
}
