from __future__ import annotations

import logging

from esper import World

from tilecascade.components.color_goal import ColorGoalState
from tilecascade.components.game_state import GameMode
from tilecascade.events.bus import (
    EventBus,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_GAME_MODE_CHANGED,
    EVENT_GAME_OVER,
    EVENT_GAME_RESET,
    EVENT_MOVE_REJECTED,
    EVENT_ROUND_STARTED,
    EVENT_ROUND_WON,
    EVENT_STALEMATE_RESOLVED,
    EVENT_STEPS_CHANGED,
)
from tilecascade.systems.board_ops import has_single_swap_solution
from tilecascade.systems.goal_ops import (
    banned_colors_for,
    has_any_non_goal_with_at_least,
    is_all_goal,
    pick_different_goal,
    pick_goal_color_from_board,
    seed_goal_board,
    shuffle_non_goal_until_solvable,
)
from tilecascade.utils.resources import get_board, get_color_goal, get_game_state, get_palette, get_rng, get_rules

logger = logging.getLogger(__name__)


class ColorGoalSystem:
    """Round bookkeeping for color mode.

    Counts steps, and after every cascade that clears something decides
    whether the round is won (whole board shows the goal color), lost (no
    non-goal color can still form a run) or stuck (no single swap matches),
    in that order.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_GAME_MODE_CHANGED, self.on_game_mode_changed)
        self.event_bus.subscribe(EVENT_GAME_RESET, self.on_game_reset)
        self.event_bus.subscribe(EVENT_CASCADE_COMPLETE, self.on_cascade_complete)
        self.event_bus.subscribe(EVENT_MOVE_REJECTED, self.on_move_rejected)
        if self._active():
            self.enter_mode()

    @property
    def state(self) -> ColorGoalState:
        return get_color_goal(self.world)

    def _active(self) -> bool:
        return get_game_state(self.world).mode is GameMode.COLOR

    # --- event handlers -------------------------------------------------

    def on_game_mode_changed(self, sender, **kwargs):
        new_mode = kwargs.get('new_mode')
        if new_mode is GameMode.COLOR:
            self.enter_mode()
        else:
            state = self.state
            state.round_over = False
            state.lost = False

    def on_game_reset(self, sender, **kwargs):
        if not self._active():
            return
        # Same goal, fresh board.
        self._seed_round(self.state.goal_color)

    def on_cascade_complete(self, sender, **kwargs):
        if not self._active() or kwargs.get('match_count', 0) <= 0:
            return
        self._add_steps(1)
        self.evaluate()

    def on_move_rejected(self, sender, **kwargs):
        if not self._active() or not kwargs.get('did_swap'):
            return
        self._add_steps(2)

    # --- round control --------------------------------------------------

    def enter_mode(self) -> None:
        """Pick a goal from the colors on the current board and seed a round."""
        palette = get_palette(self.world)
        goal = pick_goal_color_from_board(get_board(self.world).cells, len(palette), get_rng(self.world))
        self._seed_round(goal)

    def start_new_round(self) -> None:
        """Begin the next round with a goal color different from the last one."""
        palette = get_palette(self.world)
        goal = pick_different_goal(self.state.goal_color, len(palette), get_rng(self.world))
        self._seed_round(goal)

    def _seed_round(self, goal: int) -> None:
        board = get_board(self.world)
        palette = get_palette(self.world)
        rules = get_rules(self.world)
        state = self.state
        state.goal_color = goal
        board.cells = seed_goal_board(
            board.rows,
            board.cols,
            goal=goal,
            palette_size=len(palette),
            rng=get_rng(self.world),
            goal_count=rules.goal_seed_count,
        )
        state.banned = banned_colors_for(board.cells, goal, len(palette))
        state.round_over = False
        state.lost = False
        state.steps = 0
        logger.info("Color round started; goal is %s", palette.name_for(goal))
        self.event_bus.emit(EVENT_STEPS_CHANGED, steps=0)
        self.event_bus.emit(EVENT_ROUND_STARTED, goal_color=goal, goal_label=palette.label_for(goal))

    def _add_steps(self, amount: int) -> None:
        state = self.state
        state.steps += amount
        self.event_bus.emit(EVENT_STEPS_CHANGED, steps=state.steps)

    def evaluate(self) -> str:
        """Run the post-move checks; return "won", "lost", "reshuffled" or "playing"."""
        board = get_board(self.world)
        palette = get_palette(self.world)
        state = self.state
        goal = state.goal_color
        if is_all_goal(board.cells, goal):
            board.cells = [[None] * board.cols for _ in range(board.rows)]
            state.round_over = True
            logger.info("Color round won in %d steps", state.steps)
            self.event_bus.emit(EVENT_ROUND_WON, goal_color=goal, steps=state.steps)
            return "won"
        if not has_any_non_goal_with_at_least(board.cells, goal, len(palette), 3):
            state.lost = True
            logger.info("No non-goal color can still match; game over")
            self.event_bus.emit(EVENT_GAME_OVER, reason="no_moves")
            return "lost"
        if not has_single_swap_solution(board.cells, exempt_color=goal):
            result = shuffle_non_goal_until_solvable(
                board.cells,
                goal=goal,
                palette_size=len(palette),
                rng=get_rng(self.world),
                attempts=get_rules(self.world).stalemate_shuffle_attempts,
            )
            board.cells = result.cells
            logger.info("Stalemate reshuffle (constructive=%s, solvable=%s)", result.constructive, result.solvable)
            self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason="stalemate", positions=result.positions)
            self.event_bus.emit(
                EVENT_STALEMATE_RESOLVED,
                constructive=result.constructive,
                solvable=result.solvable,
            )
            return "reshuffled"
        return "playing"
