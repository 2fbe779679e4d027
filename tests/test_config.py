"""
Tests for configuration loading.
"""

import pytest
import yaml

from office_saboteur.config import GameConfig, default_config, load_config, load_config_from_yaml


def test_defaults():
    config = GameConfig()
    assert config.max_players == 8
    assert config.min_players == 4
    assert config.meeting_duration_ms == 120000
    assert config.room_ttl_ms == 3600000
    assert config.cleanup_interval_seconds == 300


def test_load_from_yaml(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(yaml.safe_dump({"max_players": 6, "port": 8080, "record_events": True}))

    config = load_config_from_yaml(str(config_file))

    assert config.max_players == 6
    assert config.port == 8080
    assert config.record_events is True
    assert config.min_players == 4


def test_unknown_key_warns(tmp_path, capsys):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("bogus_key: 1\n")

    config = load_config_from_yaml(str(config_file))

    assert "Unknown config key 'bogus_key'" in capsys.readouterr().out
    assert not hasattr(config, "bogus_key")


def test_empty_yaml_gives_defaults(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("")

    config = load_config_from_yaml(str(config_file))
    assert config == default_config
    assert config is not default_config


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_from_yaml(str(tmp_path / "missing.yaml"))


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "4567")
    monkeypatch.setenv("HOST", "127.0.0.1")

    config = load_config()

    assert config.port == 4567
    assert config.host == "127.0.0.1"
    assert default_config.port == 3000


def test_load_config_without_env(monkeypatch):
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.delenv("HOST", raising=False)
    assert load_config().port == 3000
