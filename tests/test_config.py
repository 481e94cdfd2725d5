"""
Tests for game modes, game configs and settings loading.
"""

import logging
from pathlib import Path

import pytest

from impostor.config import (
    ClassicConfig, DoubleTroubleConfig, GameMode, RelampagoConfig, Settings, SpyConfig,
    config_for_mode, load_settings, load_settings_from_yaml,
)
from impostor.exceptions import InvalidConfig


def test_mode_parsing():
    """Modes parse case-insensitively; unknown names are InvalidConfig."""
    assert GameMode.parse("spy") is GameMode.SPY
    assert GameMode.parse(" Double_Trouble ") is GameMode.DOUBLE_TROUBLE
    assert GameMode.parse(GameMode.RELAMPAGO) is GameMode.RELAMPAGO
    with pytest.raises(InvalidConfig):
        GameMode.parse("WEREWOLF")
    with pytest.raises(InvalidConfig):
        GameMode.parse(None)


def test_mode_requirements():
    """Two distinct cards for Spy and Double Trouble, one otherwise; only Relampago is timed."""
    assert [m.min_distinct_cards for m in GameMode] == [1, 2, 2, 1]
    assert [m for m in GameMode if m.is_timed] == [GameMode.RELAMPAGO]


def test_config_variants():
    """The factory returns one config type per mode."""
    assert isinstance(config_for_mode("CLASSIC", 4, 1), ClassicConfig)
    assert isinstance(config_for_mode("SPY", 4, 1), SpyConfig)
    assert isinstance(config_for_mode("DOUBLE_TROUBLE", 4, 1), DoubleTroubleConfig)
    relampago = config_for_mode("RELAMPAGO", 4, 1)
    assert isinstance(relampago, RelampagoConfig)
    assert relampago.is_timed
    assert not config_for_mode("SPY", 4, 1).is_timed


@pytest.mark.parametrize("players,impostors", [(3, 2), (10, 9), (10, 1)])
def test_config_bounds_accepted(players, impostors):
    config = config_for_mode("CLASSIC", players, impostors)
    assert config.to_dict() == {"mode": "CLASSIC", "playersCount": players, "impostorsCount": impostors}


def test_relampago_durations_must_be_positive():
    with pytest.raises(InvalidConfig):
        RelampagoConfig(players_count=4, impostors_count=1, reveal_seconds=0)


def test_load_settings_from_yaml(tmp_path, caplog):
    """Known keys are applied, unknown keys are warned about and skipped."""
    config_file = tmp_path / "impostor.yaml"
    config_file.write_text(
        "default_players: 6\n"
        "default_mode: SPY\n"
        "round_seconds: 120\n"
        "favourite_colour: blue\n"
    )

    with caplog.at_level(logging.WARNING):
        settings = load_settings_from_yaml(str(config_file))

    assert settings.default_players == 6
    assert settings.default_mode == "SPY"
    assert settings.round_seconds == 120
    assert not hasattr(settings, "favourite_colour")
    assert "favourite_colour" in caplog.text


def test_empty_yaml_gives_defaults(tmp_path):
    config_file = tmp_path / "empty.yaml"
    config_file.write_text("")
    assert load_settings_from_yaml(str(config_file)) == Settings()


def test_missing_config_file():
    with pytest.raises(FileNotFoundError):
        load_settings_from_yaml("/nonexistent/impostor.yaml")


def test_api_key_from_environment(monkeypatch):
    """The catalog key falls back to the environment and is stripped."""
    monkeypatch.setenv("CLASH_ROYALE_API_KEY", "  secret-token \n")
    assert load_settings().catalog_api_key == "secret-token"

    monkeypatch.delenv("CLASH_ROYALE_API_KEY")
    assert load_settings().catalog_api_key is None


def test_example_config_loads(caplog):
    """The shipped example config has no unknown keys."""
    example = Path(__file__).resolve().parent.parent / "impostor.example.yaml"
    with caplog.at_level(logging.WARNING):
        settings = load_settings_from_yaml(str(example))
    assert settings.card_source == "MIXED"
    assert settings.round_seconds == 90
    assert "Unknown config key" not in caplog.text


def test_yaml_must_be_a_mapping(tmp_path):
    config_file = tmp_path / "list.yaml"
    config_file.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_settings_from_yaml(str(config_file))
