"""Mode selection and full game reset."""
from __future__ import annotations

import logging

from esper import World

from tilecascade.components.game_state import GameMode
from tilecascade.events.bus import EventBus, EVENT_GAME_RESET, EVENT_TICK, EVENT_VISIBILITY_CHANGED
from tilecascade.utils.game_state import current_mode, set_game_mode
from tilecascade.utils.resources import get_or_create_turn_state

logger = logging.getLogger(__name__)


class GameFlowSystem:
    """Entry point for the controls around the board.

    Systems owning a piece of state react to ``game_reset`` themselves: the
    board reseeds, score and life return to their starting values and color
    mode seeds a new board around its current goal.
    """

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus

    def set_mode(self, mode: GameMode | str) -> bool:
        return set_game_mode(self.world, self.event_bus, mode)

    def reset(self) -> None:
        state = get_or_create_turn_state(self.world)
        state.action_source = None
        state.cascade_depth = 0
        mode = current_mode(self.world)
        logger.info("Game reset (mode=%s)", mode.value)
        self.event_bus.emit(EVENT_GAME_RESET, mode=mode)

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def set_hidden(self, hidden: bool) -> None:
        self.event_bus.emit(EVENT_VISIBILITY_CHANGED, hidden=hidden)
