from pathlib import Path

import pytest
import yaml

from tagsimple.backend import ReadStyle
from tagsimple.core.config import DEFAULT_CONFIG, SettingsManager
from tagsimple.core.config.merge import merge_settings
from tagsimple.core.env import resolve_config_path, resolve_log_level


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for name in ("TAGSIMPLE_CONFIG_PATH", "TAGSIMPLE_CONFIG_DIR", "LOGLEVEL"):
        monkeypatch.delenv(name, raising=False)


def test_defaults_without_file(tmp_path):
    settings = SettingsManager(tmp_path / "settings.yaml")

    assert settings.get_raw() == DEFAULT_CONFIG
    assert settings.get_audio_properties_style() is None
    assert settings.get_output_format() == "json"
    assert settings.get_patterns() == ["**/*.*"]
    assert settings.get_log_level() == "WARNING"


def test_user_values_merge_over_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "read:\n  audio_properties: Accurate\ncli:\n  format: yaml\nlogging:\n  level: debug\n",
        encoding="utf-8",
    )

    settings = SettingsManager(path)

    assert settings.get_audio_properties_style() is ReadStyle.ACCURATE
    assert settings.get_output_format() == "yaml"
    assert settings.get_patterns() == ["**/*.*"]
    assert settings.get_log_level() == "DEBUG"


def test_invalid_values_fall_back(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "read:\n  audio_properties: slow\ncli:\n  format: xml\n  patterns: []\nlogging:\n  level: loud\n",
        encoding="utf-8",
    )

    settings = SettingsManager(path)

    assert settings.get_audio_properties_style() is None
    assert settings.get_output_format() == "json"
    assert settings.get_patterns() == ["**/*.*"]
    assert settings.get_log_level() == "WARNING"


def test_non_mapping_document_is_ignored(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")

    assert SettingsManager(path).get_raw() == DEFAULT_CONFIG


def test_setters_validate_and_save(tmp_path):
    path = tmp_path / "nested" / "settings.yaml"
    settings = SettingsManager(path)

    settings.set_audio_properties_style("fast")
    settings.set_output_format("PP")
    settings.set_patterns(["*.flac", " ", "*.mp3"])
    settings.set_log_level("info")
    with pytest.raises(ValueError):
        settings.set_output_format("xml")
    with pytest.raises(ValueError):
        settings.set_audio_properties_style("slow")
    settings.save()

    saved = yaml.safe_load(path.read_text(encoding="utf-8"))
    assert saved["read"]["audio_properties"] == "fast"
    assert saved["cli"] == {"format": "pp", "patterns": ["*.flac", "*.mp3"]}
    assert saved["logging"]["level"] == "INFO"
    assert SettingsManager(path).get_audio_properties_style() is ReadStyle.FAST


def test_environment_overrides_path(tmp_path, monkeypatch):
    monkeypatch.setenv("TAGSIMPLE_CONFIG_DIR", str(tmp_path))
    assert resolve_config_path(Path("config/settings.yaml")) == tmp_path / "settings.yaml"

    monkeypatch.setenv("TAGSIMPLE_CONFIG_PATH", str(tmp_path / "other.yaml"))
    assert SettingsManager().config_path == tmp_path / "other.yaml"


def test_log_level_override(monkeypatch):
    assert resolve_log_level() == "WARNING"
    assert resolve_log_level("info") == "INFO"
    monkeypatch.setenv("LOGLEVEL", "debug")
    assert resolve_log_level("info") == "DEBUG"


def test_merge_keeps_defaults_untouched():
    defaults = {"a": {"b": 1, "c": 2}}

    merged = merge_settings(defaults, {"a": {"c": 3}, "d": 4})

    assert merged == {"a": {"b": 1, "c": 3}, "d": 4}
    assert defaults == {"a": {"b": 1, "c": 2}}


def test_merge_ignores_scalar_over_section(caplog):
    merged = merge_settings({"cli": {"format": "json"}}, {"cli": "yaml"})

    assert merged == {"cli": {"format": "json"}}
    assert "Ignoring setting cli" in caplog.text
