import logging
from typing import List, Optional, Tuple

from esper import World

from tilecascade.components.board import Board
from tilecascade.components.game_state import GameMode
from tilecascade.events.bus import (EventBus, EVENT_TILE_SWAP_DO, EVENT_TILE_SWAP_FINALIZE, EVENT_GAME_RESET,
                                    EVENT_GAME_MODE_CHANGED, EVENT_BOARD_SEEDED)
from tilecascade.systems.board_ops import seed_board, swap_cells
from tilecascade.utils.resources import get_game_state, get_palette, get_rng, get_rules

logger = logging.getLogger(__name__)


class BoardSystem:
    def __init__(self, world: World, event_bus: EventBus, rows: Optional[int] = None, cols: Optional[int] = None):
        self.world = world
        self.event_bus = event_bus
        size = get_rules(world).grid_size
        # Create a single board entity with Board component
        self.board_entity = self.world.create_entity()
        self.world.add_component(self.board_entity, Board(rows=rows or size, cols=cols or size))
        self.event_bus.subscribe(EVENT_TILE_SWAP_DO, self.on_swap_do)
        self.event_bus.subscribe(EVENT_GAME_RESET, self.on_game_reset)
        self.event_bus.subscribe(EVENT_GAME_MODE_CHANGED, self.on_game_mode_changed)
        self._init_board()

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    def _init_board(self):
        self.reseed(reason="init")

    def reseed(self, reason: str = "reseed") -> None:
        """Fill the board with fresh tiles that contain no runs."""
        board = self.board
        palette = get_palette(self.world)
        board.cells = seed_board(board.rows, board.cols, len(palette), get_rng(self.world))
        logger.debug("Board seeded (%s)", reason)
        self.event_bus.emit(EVENT_BOARD_SEEDED, reason=reason)

    def load(self, cells: List[List[Optional[int]]]) -> None:
        """Replace the board contents, e.g. with a prepared layout."""
        board = self.board
        if len(cells) != board.rows or any(len(row) != board.cols for row in cells):
            raise ValueError(f"Layout must be {board.rows}x{board.cols}")
        board.cells = [list(row) for row in cells]

    def swap_tiles(self, a: Tuple[int, int], b: Tuple[int, int]):
        swap_cells(self.board, a, b)

    def on_swap_do(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        self.swap_tiles(src, dst)
        self.event_bus.emit(EVENT_TILE_SWAP_FINALIZE, src=src, dst=dst)

    def on_game_reset(self, sender, **kwargs):
        # Color mode seeds its own board around the goal color.
        if get_game_state(self.world).mode is GameMode.COLOR:
            return
        self.reseed(reason="reset")

    def on_game_mode_changed(self, sender, **kwargs):
        # A won color round leaves the board empty.
        if kwargs.get('new_mode') is GameMode.COLOR:
            return
        if any(value is None for row in self.board.cells for value in row):
            self.reseed(reason="mode_change")
