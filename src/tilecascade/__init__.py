"""Headless tile-matching puzzle engine built on an esper world and a blinker event bus."""
from tilecascade.components.game_state import GameMode
from tilecascade.config import RulesConfig
from tilecascade.game import Game, create_game

__all__ = [
    "Game",
    "GameMode",
    "RulesConfig",
    "create_game",
]
