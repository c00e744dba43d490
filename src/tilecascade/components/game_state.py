"""Game state resource describing the active rule set."""
from dataclasses import dataclass
from enum import Enum


class GameMode(Enum):
    """Rule sets selectable by the caller."""
    OFF = "off"
    LIFE = "life"
    COLOR = "color"

    @classmethod
    def parse(cls, value: "GameMode | str") -> "GameMode":
        if isinstance(value, GameMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown game mode '{value}'") from None


@dataclass
class GameState:
    """Singleton component storing the currently active game mode."""
    mode: GameMode = GameMode.OFF
