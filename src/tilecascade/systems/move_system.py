from __future__ import annotations

import logging
from typing import List, Tuple

from esper import World

from tilecascade.components.swap_path import SwapPath
from tilecascade.events.bus import (
    EventBus,
    EVENT_DRAG_END,
    EVENT_DRAG_ENTER,
    EVENT_DRAG_START,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_RESOLVED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SWAP_DO,
)
from tilecascade.systems.board_ops import is_adjacent
from tilecascade.systems.match_resolution import MatchResolutionSystem
from tilecascade.utils.game_state import is_input_locked
from tilecascade.utils.resources import get_board

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class MoveSystem:
    """Drag gesture over tiles: every step swaps the dragged tile onward.

    ``begin`` picks up a tile, ``enter`` follows the pointer to a neighbouring
    cell (stepping back along the path undoes the last swap; diagonal steps
    go horizontally first, then vertically) and ``release`` resolves the
    board. A release that clears nothing walks the path back in reverse.
    """

    def __init__(self, world: World, event_bus: EventBus, resolver: MatchResolutionSystem):
        self.world = world
        self.event_bus = event_bus
        self.resolver = resolver
        self.dragging = False
        self.path_entity = self.world.create_entity(SwapPath())
        self.event_bus.subscribe(EVENT_DRAG_START, self.on_drag_start)
        self.event_bus.subscribe(EVENT_DRAG_ENTER, self.on_drag_enter)
        self.event_bus.subscribe(EVENT_DRAG_END, self.on_drag_end)

    @property
    def path(self) -> SwapPath:
        return self.world.component_for_entity(self.path_entity, SwapPath)

    # --- bus adapters ---------------------------------------------------

    def on_drag_start(self, sender, **kwargs):
        row, col = kwargs.get('row'), kwargs.get('col')
        if row is None or col is None:
            return
        self.begin((row, col))

    def on_drag_enter(self, sender, **kwargs):
        row, col = kwargs.get('row'), kwargs.get('col')
        if row is None or col is None:
            return
        self.enter((row, col))

    def on_drag_end(self, sender, **kwargs):
        self.release()

    # --- gesture --------------------------------------------------------

    def begin(self, pos: Position) -> bool:
        if is_input_locked(self.world):
            return False
        if not self._on_board(pos):
            return False
        r, c = pos
        self.path.cells = [pos]
        self.dragging = True
        self.event_bus.emit(EVENT_TILE_SELECTED, row=r, col=c)
        return True

    def enter(self, pos: Position) -> None:
        if not self.dragging or not self._on_board(pos):
            return
        cells = self.path.cells
        last = cells[-1]
        if pos == last:
            return
        dr = pos[0] - last[0]
        dc = pos[1] - last[1]
        if abs(dr) + abs(dc) == 1:
            self._step(pos)
        elif abs(dr) == 1 and abs(dc) == 1:
            self._step((last[0], last[1] + dc))
            self._step(pos)

    def _on_board(self, pos: Position) -> bool:
        board = get_board(self.world)
        return 0 <= pos[0] < board.rows and 0 <= pos[1] < board.cols

    def _step(self, pos: Position) -> None:
        cells = self.path.cells
        last = cells[-1]
        if len(cells) >= 2 and cells[-2] == pos:
            self._swap(last, pos)
            cells.pop()
            return
        self._swap(last, pos)
        cells.append(pos)

    def _swap(self, a: Position, b: Position) -> None:
        self.event_bus.emit(EVENT_TILE_SWAP_DO, src=a, dst=b)

    def release(self) -> int:
        """Resolve the board; undo the drag when nothing matched.

        Returns the number of clusters cleared.
        """
        if not self.dragging:
            return 0
        self.dragging = False
        path: List[Position] = list(self.path.cells)
        self.path.cells = []
        match_count = self.resolver.resolve(reason="swap")
        if match_count == 0:
            did_swap = len(path) > 1
            for i in range(len(path) - 1, 0, -1):
                self._swap(path[i], path[i - 1])
            logger.debug("Move rejected (did_swap=%s, path=%s)", did_swap, path)
            self.event_bus.emit(EVENT_MOVE_REJECTED, did_swap=did_swap, path=path)
        else:
            self.event_bus.emit(EVENT_MOVE_RESOLVED, match_count=match_count, path=path)
        return match_count

    def play_swap(self, a: Position, b: Position) -> int:
        """Swap two adjacent tiles as a one-step drag and resolve."""
        if not is_adjacent(a, b):
            raise ValueError(f"{a} and {b} are not adjacent")
        if not self.begin(a):
            return 0
        self.enter(b)
        return self.release()
