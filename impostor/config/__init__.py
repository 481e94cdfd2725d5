"""Game modes, settings and configuration loading."""

from .game_config import (
    GameMode, GameConfig, ClassicConfig, SpyConfig, DoubleTroubleConfig, RelampagoConfig,
    config_for_mode, validate_counts, MIN_PLAYERS, MAX_PLAYERS,
    RELAMPAGO_REVEAL_SECONDS, RELAMPAGO_ROUND_SECONDS,
)
from .settings import Settings, default_settings, configure_logging
from .config_loader import load_settings, load_settings_from_yaml

__all__ = [
    'GameMode',
    'GameConfig',
    'ClassicConfig',
    'SpyConfig',
    'DoubleTroubleConfig',
    'RelampagoConfig',
    'config_for_mode',
    'validate_counts',
    'MIN_PLAYERS',
    'MAX_PLAYERS',
    'RELAMPAGO_REVEAL_SECONDS',
    'RELAMPAGO_ROUND_SECONDS',
    'Settings',
    'default_settings',
    'configure_logging',
    'load_settings',
    'load_settings_from_yaml',
]
