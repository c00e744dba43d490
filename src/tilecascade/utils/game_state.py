from __future__ import annotations

import logging

from esper import World

from tilecascade.components.game_state import GameMode
from tilecascade.events.bus import EVENT_GAME_MODE_CHANGED, EventBus
from tilecascade.utils.resources import (
    get_color_goal,
    get_game_state,
    get_life,
    get_or_create_turn_state,
)

logger = logging.getLogger(__name__)


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode | str) -> bool:
    """Update the global game mode and emit a change event when it differs."""

    mode = GameMode.parse(mode)
    state = get_game_state(world)
    previous_mode = state.mode
    if previous_mode == mode:
        return False
    state.mode = mode
    logger.info("Game mode changed: %s -> %s", previous_mode.value, mode.value)
    event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous_mode, new_mode=mode)
    return True


def current_mode(world: World) -> GameMode:
    return get_game_state(world).mode


def is_input_locked(world: World) -> bool:
    """True while a new move must not start."""

    if get_or_create_turn_state(world).cascade_active:
        return True
    mode = current_mode(world)
    if mode is GameMode.LIFE and get_life(world).lost:
        return True
    if mode is GameMode.COLOR:
        goal = get_color_goal(world)
        return goal.round_over or goal.lost
    return False
