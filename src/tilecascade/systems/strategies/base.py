from __future__ import annotations

import random
from dataclasses import dataclass
from typing import List, Protocol

from esper import World

from tilecascade.components.board import Board, Position
from tilecascade.config import RulesConfig
from tilecascade.events.bus import EventBus
from tilecascade.systems.gravity import SpawnPicker


@dataclass(slots=True)
class ResolutionContext:
    """Execution context shared by resolution strategies for one cascade."""

    world: World
    event_bus: EventBus
    board: Board
    rng: random.Random
    rules: RulesConfig
    palette_size: int


class ResolutionStrategy(Protocol):
    """Rule variant plugged into the cascade resolver.

    ``find_matches`` seeds each wave; ``intercept_wave`` may take over a wave
    before its clear is committed (returning True ends the cascade);
    ``spawn_picker`` chooses refill colors against the cleared snapshot and
    ``after_commit`` runs once the collapsed board is in place.
    """

    name: str
    awards_score: bool

    def find_matches(self, ctx: ResolutionContext) -> List[Position]:
        ...

    def intercept_wave(self, ctx: ResolutionContext, to_clear: List[Position]) -> bool:
        ...

    def spawn_picker(self, ctx: ResolutionContext, snapshot: List[List[int | None]]) -> SpawnPicker:
        ...

    def after_commit(self, ctx: ResolutionContext) -> None:
        ...
