from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, List, Sequence

from tilecascade.components.board import Position, Tile

Grid = List[List[Tile]]
SpawnPicker = Callable[[Position], int]


@dataclass(slots=True, frozen=True)
class Survivor:
    """A tile that outlived the clear; ``rows`` is how far it fell (may be 0)."""
    source: Position
    target: Position
    rows: int
    color: int


@dataclass(slots=True, frozen=True)
class Spawn:
    """A new tile dropped into a vacated cell from above the board."""
    target: Position
    rows_from_top: int
    color: int


@dataclass(slots=True)
class GravityPlan:
    next_board: Grid
    survivors: List[Survivor]
    spawns: List[Spawn]

    def moved(self) -> List[Survivor]:
        return [survivor for survivor in self.survivors if survivor.rows > 0]

    def column(self, col: int) -> tuple[List[Survivor], List[Spawn]]:
        return (
            [s for s in self.survivors if s.target[1] == col],
            [s for s in self.spawns if s.target[1] == col],
        )


def compute_gravity_plan(snapshot: Grid, pick_color: SpawnPicker) -> GravityPlan:
    """Collapse every column of a cleared snapshot and refill it from the top.

    ``snapshot`` already holds None at cleared cells and is not modified.
    Survivors keep their relative order and settle at the bottom; ``pick_color``
    is asked for one color per vacated cell, bottom-most vacancy first.
    """
    rows = len(snapshot)
    cols = len(snapshot[0]) if rows else 0
    next_board: Grid = [[None] * cols for _ in range(rows)]
    survivors: List[Survivor] = []
    spawns: List[Spawn] = []
    for c in range(cols):
        write = rows - 1
        for r in range(rows - 1, -1, -1):
            value = snapshot[r][c]
            if value is None:
                continue
            next_board[write][c] = value
            survivors.append(Survivor(source=(r, c), target=(write, c), rows=write - r, color=value))
            write -= 1
        for r in range(write, -1, -1):
            color = pick_color((r, c))
            next_board[r][c] = color
            spawns.append(Spawn(target=(r, c), rows_from_top=r + 1, color=color))
    return GravityPlan(next_board=next_board, survivors=survivors, spawns=spawns)


def uniform_spawner(rng: random.Random, choices: Sequence[int]) -> SpawnPicker:
    options = list(choices)

    def pick(_pos: Position) -> int:
        return rng.choice(options)

    return pick
