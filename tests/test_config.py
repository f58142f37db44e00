"""
Tests for configuration loading.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from slotengine.config import EngineConfig


def _write(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "config.yaml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def test_defaults():
    config = EngineConfig()

    assert config.timezone == "Europe/London"
    assert config.step_min == 15
    assert config.tenant_id == "default"
    assert config.data_file is None
    assert config.cache.ttl_seconds == 300.0


def test_load_from_yaml(tmp_path):
    config_path = _write(
        tmp_path,
        "timezone: America/New_York\n"
        "step_min: 30\n"
        "tenant_id: salon-1\n"
        "log_level: debug\n"
        "data_file: data/schedule.json\n"
        "cache:\n"
        "  ttl_seconds: 60\n"
        "  max_entries: 10\n",
    )

    config = EngineConfig.load_from_yaml(config_path)

    assert config.timezone == "America/New_York"
    assert config.step_min == 30
    assert config.tenant_id == "salon-1"
    assert config.log_level == "DEBUG"
    assert config.data_file == (tmp_path / "data" / "schedule.json").resolve()
    assert config.cache.max_entries == 10


def test_absolute_data_file_is_kept(tmp_path):
    data_file = tmp_path / "elsewhere.json"
    config = EngineConfig.load_from_yaml(_write(tmp_path, f"data_file: {data_file}\n"))

    assert config.data_file == data_file


def test_empty_file_uses_defaults(tmp_path):
    assert EngineConfig.load_from_yaml(_write(tmp_path, "")) == EngineConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        EngineConfig.load_from_yaml(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    with pytest.raises(ValueError, match="Invalid YAML"):
        EngineConfig.load_from_yaml(_write(tmp_path, "timezone: [unclosed\n"))


def test_root_must_be_mapping(tmp_path):
    with pytest.raises(ValueError, match="mapping"):
        EngineConfig.load_from_yaml(_write(tmp_path, "- a\n- b\n"))


@pytest.mark.parametrize(
    "field, value",
    [
        ("timezone", "Mars/Olympus_Mons"),
        ("step_min", 0),
        ("log_level", "LOUD"),
    ],
)
def test_invalid_values_are_rejected(field, value):
    with pytest.raises(ValidationError):
        EngineConfig(**{field: value})


def test_invalid_cache_settings_are_rejected():
    with pytest.raises(ValidationError):
        EngineConfig(cache={"ttl_seconds": -1})
