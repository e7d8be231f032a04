"""Configuration management module."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .defaults import DEFAULT_CONFIG, LOG_LEVELS, OUTPUT_FORMATS
from .merge import merge_settings
from tagsimple.backend import ReadStyle
from tagsimple.core.env import resolve_config_path


@dataclass
class SettingsManager:
    """YAML configuration merged over the defaults."""

    config_path: Path = Path("config/settings.yaml")

    def __post_init__(self) -> None:
        self.config_path = resolve_config_path(Path(self.config_path))
        self._data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if self.config_path.exists():
            with self.config_path.open("r", encoding="utf-8") as file:
                user_config = yaml.safe_load(file) or {}
            if not isinstance(user_config, dict):
                user_config = {}
            self._data = merge_settings(DEFAULT_CONFIG, user_config)
        else:
            self._data = copy.deepcopy(DEFAULT_CONFIG)

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as file:
            yaml.safe_dump(self._data, file, allow_unicode=False, sort_keys=True)

    def get_raw(self) -> Dict[str, Any]:
        return copy.deepcopy(self._data)

    def get_audio_properties_style(self) -> Optional[ReadStyle]:
        read = self._data.get("read", {})
        value = read.get("audio_properties") if isinstance(read, dict) else None
        if not isinstance(value, str):
            return None
        try:
            return ReadStyle.parse(value)
        except ValueError:
            return None

    def set_audio_properties_style(self, style: Optional[str]) -> None:
        read = self._data.setdefault("read", {})
        read["audio_properties"] = ReadStyle.parse(style).value if style is not None else None

    def get_output_format(self) -> str:
        cli = self._data.get("cli", {})
        value = str(cli.get("format", DEFAULT_CONFIG["cli"]["format"])).lower()
        return value if value in OUTPUT_FORMATS else DEFAULT_CONFIG["cli"]["format"]

    def set_output_format(self, value: str) -> None:
        value = str(value).lower()
        if value not in OUTPUT_FORMATS:
            raise ValueError(f"output format must be one of {', '.join(OUTPUT_FORMATS)}")
        cli = self._data.setdefault("cli", {})
        cli["format"] = value

    def get_patterns(self) -> List[str]:
        cli = self._data.get("cli", {})
        patterns = cli.get("patterns")
        if isinstance(patterns, str):
            patterns = [patterns]
        if not isinstance(patterns, list):
            return list(DEFAULT_CONFIG["cli"]["patterns"])
        cleaned = [str(pattern) for pattern in patterns if str(pattern).strip()]
        return cleaned or list(DEFAULT_CONFIG["cli"]["patterns"])

    def set_patterns(self, patterns: List[str]) -> None:
        cli = self._data.setdefault("cli", {})
        cli["patterns"] = [str(pattern) for pattern in patterns if str(pattern).strip()]

    def get_log_level(self) -> str:
        logging_config = self._data.get("logging", {})
        level = str(logging_config.get("level", DEFAULT_CONFIG["logging"]["level"])).upper()
        return level if level in LOG_LEVELS else DEFAULT_CONFIG["logging"]["level"]

    def set_log_level(self, level: str) -> None:
        logging_config = self._data.setdefault("logging", {})
        logging_config["level"] = str(level).upper()
