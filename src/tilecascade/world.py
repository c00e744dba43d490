import random

from esper import World

from tilecascade.components.color_goal import ColorGoalState
from tilecascade.components.game_state import GameMode, GameState
from tilecascade.components.life import Life
from tilecascade.components.palette import Palette
from tilecascade.components.score import Score
from tilecascade.components.turn_state import TurnState
from tilecascade.config import RulesConfig
from tilecascade.constants import COLOR_LABELS, COLOR_NAMES
from .events.bus import EventBus


def create_world(
    event_bus: EventBus,
    initial_mode: GameMode = GameMode.OFF,
    *,
    rng: random.Random | None = None,
    config: RulesConfig | None = None,
) -> World:
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "rules", config or RulesConfig())
    rules: RulesConfig = world.rules

    # Session-wide state resources live together on a single entity.
    world.create_entity(
        GameState(mode=initial_mode),
        Score(),
        TurnState(),
        Life(current=rules.life_max, max_value=rules.life_max, enabled=initial_mode is GameMode.LIFE),
        ColorGoalState(),
    )

    # Palette registry entity
    world.create_entity(Palette(names=list(COLOR_NAMES), labels=dict(COLOR_LABELS)))
    return world
