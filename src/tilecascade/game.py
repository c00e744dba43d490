"""Session wiring: one world, one bus, every engine system.

Front ends drive a session through ``Game`` and listen on ``game.event_bus``
for the per-wave events needed to animate the board.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from esper import World

from tilecascade.components.color_goal import ColorGoalState
from tilecascade.components.game_state import GameMode
from tilecascade.components.life import Life
from tilecascade.config import RulesConfig
from tilecascade.events.bus import EventBus, EVENT_TILE_SWAP_DO
from tilecascade.systems.board import BoardSystem
from tilecascade.systems.color_goal_system import ColorGoalSystem
from tilecascade.systems.game_flow_system import GameFlowSystem
from tilecascade.systems.life_system import LifeSystem
from tilecascade.systems.match_resolution import MatchResolutionSystem
from tilecascade.systems.move_system import MoveSystem
from tilecascade.systems.score_system import ScoreSystem
from tilecascade.utils.game_state import current_mode, is_input_locked
from tilecascade.utils.resources import get_color_goal, get_life, get_palette, get_score
from tilecascade.world import create_world

Position = Tuple[int, int]


@dataclass
class Game:
    world: World
    event_bus: EventBus
    board_system: BoardSystem
    resolver: MatchResolutionSystem
    life_system: LifeSystem
    color_goal_system: ColorGoalSystem
    move_system: MoveSystem
    score_system: ScoreSystem
    flow: GameFlowSystem

    # --- moves ----------------------------------------------------------

    def swap(self, a: Position, b: Position) -> None:
        """Exchange two tiles without resolving."""
        self.event_bus.emit(EVENT_TILE_SWAP_DO, src=a, dst=b)

    def resolve(self) -> int:
        return self.resolver.resolve(reason="swap")

    def play_move(self, a: Position, b: Position) -> int:
        """Swap two adjacent tiles and resolve, reverting when nothing clears."""
        return self.move_system.play_swap(a, b)

    def drag(self, path: List[Position]) -> int:
        """Play a full drag gesture over ``path`` and release it."""
        if not path or not self.move_system.begin(path[0]):
            return 0
        for pos in path[1:]:
            self.move_system.enter(pos)
        return self.move_system.release()

    # --- session --------------------------------------------------------

    def tick(self, dt: float) -> None:
        self.flow.tick(dt)

    def set_hidden(self, hidden: bool) -> None:
        self.flow.set_hidden(hidden)

    def set_mode(self, mode: GameMode | str) -> bool:
        return self.flow.set_mode(mode)

    def reset(self) -> None:
        self.flow.reset()

    def start_new_round(self) -> None:
        self.color_goal_system.start_new_round()

    def load_board(self, cells: List[List[Optional[int]]]) -> None:
        self.board_system.load(cells)

    # --- observation ----------------------------------------------------

    @property
    def mode(self) -> GameMode:
        return current_mode(self.world)

    @property
    def cells(self) -> List[List[Optional[int]]]:
        return self.board_system.board.snapshot()

    def board_names(self) -> List[List[Optional[str]]]:
        palette = get_palette(self.world)
        return [[palette.name_for(value) for value in row] for row in self.board_system.board.cells]

    @property
    def score(self) -> int:
        return get_score(self.world).value

    @property
    def life(self) -> Life:
        return get_life(self.world)

    @property
    def color_goal(self) -> ColorGoalState:
        return get_color_goal(self.world)

    @property
    def input_locked(self) -> bool:
        return is_input_locked(self.world)


def create_game(
    mode: GameMode | str = GameMode.OFF,
    *,
    rng: random.Random | None = None,
    config: RulesConfig | None = None,
    size: int | None = None,
) -> Game:
    """Build a ready-to-play session.

    ``size`` overrides ``config.grid_size``; pass a seeded ``rng`` for
    reproducible boards.
    """
    if size is not None:
        config = replace(config or RulesConfig(), grid_size=size)
    event_bus = EventBus()
    world = create_world(event_bus, GameMode.parse(mode), rng=rng, config=config)
    board_system = BoardSystem(world, event_bus)
    resolver = MatchResolutionSystem(world, event_bus)
    life_system = LifeSystem(world, event_bus)
    color_goal_system = ColorGoalSystem(world, event_bus)
    move_system = MoveSystem(world, event_bus, resolver)
    score_system = ScoreSystem(world, event_bus)
    flow = GameFlowSystem(world, event_bus)
    return Game(
        world=world,
        event_bus=event_bus,
        board_system=board_system,
        resolver=resolver,
        life_system=life_system,
        color_goal_system=color_goal_system,
        move_system=move_system,
        score_system=score_system,
        flow=flow,
    )
