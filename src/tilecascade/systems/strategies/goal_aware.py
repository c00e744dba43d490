from __future__ import annotations

import logging
from typing import List

from tilecascade.components.board import Position
from tilecascade.events.bus import EVENT_BOARD_RESHUFFLED
from tilecascade.systems.board_ops import find_matches
from tilecascade.systems.goal_ops import (
    banned_colors_for,
    count_color,
    distinct_non_goal_colors,
    goal_weighted_spawner,
    shuffle_whole_board,
)
from tilecascade.systems.gravity import SpawnPicker
from tilecascade.systems.strategies.base import ResolutionContext
from tilecascade.utils.resources import get_color_goal

logger = logging.getLogger(__name__)


class GoalAwareStrategy:
    """Color mode rules.

    Goal-colored runs never clear. Refills favour colors still on the board,
    and the last surviving non-goal color is protected from partial clears by
    reshuffling the whole board instead. The reshuffle is redrawn while it
    leaves a live non-goal run.
    """

    name = "goal_aware"
    awards_score = False

    def find_matches(self, ctx: ResolutionContext) -> List[Position]:
        goal = get_color_goal(ctx.world).goal_color
        return find_matches(ctx.board.cells, exempt_color=goal)

    def intercept_wave(self, ctx: ResolutionContext, to_clear: List[Position]) -> bool:
        state = get_color_goal(ctx.world)
        cells = ctx.board.cells
        remaining = distinct_non_goal_colors(cells, state.goal_color, ctx.palette_size)
        if len(remaining) != 1:
            return False
        last_color = remaining[0]
        total = count_color(cells, last_color)
        cleared = sum(1 for r, c in to_clear if cells[r][c] == last_color)
        if not 0 < cleared < total:
            return False
        logger.info(
            "Last non-goal color %d would lose %d of %d tiles; reshuffling board",
            last_color, cleared, total,
        )
        shuffled = shuffle_whole_board(cells, ctx.rng)
        for _ in range(ctx.rules.stalemate_shuffle_attempts):
            if not find_matches(shuffled, exempt_color=state.goal_color):
                break
            shuffled = shuffle_whole_board(cells, ctx.rng)
        ctx.board.cells = shuffled
        state.banned = banned_colors_for(ctx.board.cells, state.goal_color, ctx.palette_size)
        ctx.event_bus.emit(
            EVENT_BOARD_RESHUFFLED,
            reason="last_color_guard",
            positions=list(ctx.board.positions()),
        )
        return True

    def spawn_picker(self, ctx: ResolutionContext, snapshot) -> SpawnPicker:
        state = get_color_goal(ctx.world)
        return goal_weighted_spawner(
            ctx.rng,
            snapshot,
            goal=state.goal_color,
            banned=state.banned,
            palette_size=ctx.palette_size,
            goal_chance=ctx.rules.goal_spawn_chance,
        )

    def after_commit(self, ctx: ResolutionContext) -> None:
        state = get_color_goal(ctx.world)
        state.banned = banned_colors_for(ctx.board.cells, state.goal_color, ctx.palette_size)
