"""
Game modes and the per-round game configuration.

``GameConfig`` is a tagged variant: one frozen dataclass per mode, each
carrying the player counts plus whatever that mode needs on top.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Dict, Optional, Type, Union

from ..exceptions import InvalidConfig

MIN_PLAYERS = 3
MAX_PLAYERS = 10

# Relampago timing, in seconds
RELAMPAGO_REVEAL_SECONDS = 3
RELAMPAGO_ROUND_SECONDS = 90


class GameMode(Enum):
    """Available game modes."""
    CLASSIC = "CLASSIC"
    SPY = "SPY"
    DOUBLE_TROUBLE = "DOUBLE_TROUBLE"
    RELAMPAGO = "RELAMPAGO"

    @property
    def min_distinct_cards(self) -> int:
        """Distinct card ids the pool must hold for this mode."""
        return 2 if self in (GameMode.SPY, GameMode.DOUBLE_TROUBLE) else 1

    @property
    def is_timed(self) -> bool:
        return self is GameMode.RELAMPAGO

    @classmethod
    def parse(cls, value: Union[str, "GameMode"]) -> "GameMode":
        """
        Resolve a mode selector.

        Raises:
            InvalidConfig: If the value names no known mode
        """
        if isinstance(value, GameMode):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        valid = ", ".join(m.value for m in cls)
        raise InvalidConfig(f"Unknown game mode: {value!r}. Must be one of: {valid}")


@dataclass(frozen=True)
class GameConfig:
    """Player counts shared by every mode."""
    mode: ClassVar[GameMode]

    players_count: int
    impostors_count: int

    def __post_init__(self):
        validate_counts(self.players_count, self.impostors_count)

    @property
    def is_timed(self) -> bool:
        return self.mode.is_timed

    def to_dict(self) -> Dict[str, object]:
        return {
            "mode": self.mode.value,
            "playersCount": self.players_count,
            "impostorsCount": self.impostors_count,
        }


@dataclass(frozen=True)
class ClassicConfig(GameConfig):
    mode: ClassVar[GameMode] = GameMode.CLASSIC


@dataclass(frozen=True)
class SpyConfig(GameConfig):
    mode: ClassVar[GameMode] = GameMode.SPY


@dataclass(frozen=True)
class DoubleTroubleConfig(GameConfig):
    mode: ClassVar[GameMode] = GameMode.DOUBLE_TROUBLE


@dataclass(frozen=True)
class RelampagoConfig(GameConfig):
    """Timed Classic: reveals close on their own and the round has a deadline."""
    mode: ClassVar[GameMode] = GameMode.RELAMPAGO

    reveal_seconds: int = RELAMPAGO_REVEAL_SECONDS
    round_seconds: int = RELAMPAGO_ROUND_SECONDS

    def __post_init__(self):
        super().__post_init__()
        if self.reveal_seconds < 1 or self.round_seconds < 1:
            raise InvalidConfig("Reveal and round durations must be at least 1 second")

    def to_dict(self) -> Dict[str, object]:
        data = super().to_dict()
        data["revealSeconds"] = self.reveal_seconds
        data["roundSeconds"] = self.round_seconds
        return data


_CONFIG_TYPES: Dict[GameMode, Type[GameConfig]] = {
    GameMode.CLASSIC: ClassicConfig,
    GameMode.SPY: SpyConfig,
    GameMode.DOUBLE_TROUBLE: DoubleTroubleConfig,
    GameMode.RELAMPAGO: RelampagoConfig,
}


def validate_counts(players_count: int, impostors_count: int) -> None:
    """
    Check player and impostor counts.

    Raises:
        InvalidConfig: If a count is not an integer or is out of range
    """
    for name, value in (("playersCount", players_count), ("impostorsCount", impostors_count)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidConfig(f"{name} must be an integer, got {value!r}")
    if not MIN_PLAYERS <= players_count <= MAX_PLAYERS:
        raise InvalidConfig(f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")
    if impostors_count < 1 or impostors_count >= players_count:
        raise InvalidConfig("Number of impostors must be at least 1 and less than the number of players")


def config_for_mode(mode: Union[str, GameMode], players_count: int, impostors_count: int,
                    reveal_seconds: Optional[int] = None,
                    round_seconds: Optional[int] = None) -> GameConfig:
    """Build the config variant for ``mode``. Timing only applies to Relampago."""
    game_mode = GameMode.parse(mode)
    config_type = _CONFIG_TYPES[game_mode]
    if config_type is RelampagoConfig:
        return RelampagoConfig(
            players_count=players_count,
            impostors_count=impostors_count,
            reveal_seconds=RELAMPAGO_REVEAL_SECONDS if reveal_seconds is None else reveal_seconds,
            round_seconds=RELAMPAGO_ROUND_SECONDS if round_seconds is None else round_seconds,
        )
    return config_type(players_count=players_count, impostors_count=impostors_count)
