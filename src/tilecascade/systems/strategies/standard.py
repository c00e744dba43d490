from __future__ import annotations

from typing import List

from tilecascade.components.board import Position
from tilecascade.systems.board_ops import find_matches
from tilecascade.systems.gravity import SpawnPicker, uniform_spawner
from tilecascade.systems.strategies.base import ResolutionContext


class StandardStrategy:
    """Plain match-three rules: every run clears, refills are uniform."""

    name = "standard"
    awards_score = True

    def find_matches(self, ctx: ResolutionContext) -> List[Position]:
        return find_matches(ctx.board.cells)

    def intercept_wave(self, ctx: ResolutionContext, to_clear: List[Position]) -> bool:
        return False

    def spawn_picker(self, ctx: ResolutionContext, snapshot) -> SpawnPicker:
        return uniform_spawner(ctx.rng, range(ctx.palette_size))

    def after_commit(self, ctx: ResolutionContext) -> None:
        return None
