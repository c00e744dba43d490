"""Board helpers specific to color mode.

Color mode keeps one goal color immune to clearing; the round is won once the
whole board shows that color. These helpers are pure with respect to the
world: they take grids and plain values and return new grids or facts about
them.
"""
from __future__ import annotations

import logging
import random
from collections import Counter
from dataclasses import dataclass
from typing import List, Set

from tilecascade.components.board import Position, Tile
from tilecascade.systems.board_ops import (
    color_counts,
    fill_without_runs,
    find_matches,
    has_single_swap_solution,
)
from tilecascade.systems.gravity import SpawnPicker

logger = logging.getLogger(__name__)

Grid = List[List[Tile]]


def distinct_non_goal_colors(cells: Grid, goal: int, palette_size: int) -> List[int]:
    counts = color_counts(cells, palette_size)
    return [idx for idx, count in enumerate(counts) if idx != goal and count > 0]


def count_color(cells: Grid, color: int) -> int:
    return sum(1 for row in cells for value in row if value == color)


def banned_colors_for(cells: Grid, goal: int, palette_size: int) -> Set[int]:
    """Non-goal colors with no tile left on the board."""
    counts = color_counts(cells, palette_size)
    return {idx for idx, count in enumerate(counts) if idx != goal and count == 0}


def is_all_goal(cells: Grid, goal: int) -> bool:
    return all(value == goal for row in cells for value in row)


def has_any_non_goal_with_at_least(cells: Grid, goal: int, palette_size: int, minimum: int = 3) -> bool:
    counts = color_counts(cells, palette_size)
    return any(count >= minimum for idx, count in enumerate(counts) if idx != goal)


def goal_weighted_spawner(
    rng: random.Random,
    snapshot: Grid,
    *,
    goal: int,
    banned: Set[int],
    palette_size: int,
    goal_chance: float,
) -> SpawnPicker:
    """Spawn picker for color mode.

    Eligible colors are the non-goal colors still present in ``snapshot`` and
    not banned. With none eligible every spawn is the goal color.
    """
    counts = color_counts(snapshot, palette_size)
    eligible = [
        idx for idx, count in enumerate(counts)
        if idx != goal and count > 0 and idx not in banned
    ]

    def pick(_pos: Position) -> int:
        if not eligible:
            return goal
        if rng.random() < goal_chance:
            return goal
        return rng.choice(eligible)

    return pick


def pick_goal_color_from_board(cells: Grid, palette_size: int, rng: random.Random) -> int:
    present = [idx for idx, count in enumerate(color_counts(cells, palette_size)) if count > 0]
    if not present:
        return rng.randrange(palette_size)
    return rng.choice(present)


def pick_different_goal(current: int, palette_size: int, rng: random.Random) -> int:
    return rng.choice([idx for idx in range(palette_size) if idx != current])


def seed_goal_board(
    rows: int,
    cols: int,
    *,
    goal: int,
    palette_size: int,
    rng: random.Random,
    goal_count: int,
) -> Grid:
    """Place ``goal_count`` goal tiles at random distinct cells, fill the rest.

    The remaining cells get non-goal colors with no horizontal or vertical
    triple among them.
    """
    cells: Grid = [[None] * cols for _ in range(rows)]
    positions = [(r, c) for r in range(rows) for c in range(cols)]
    rng.shuffle(positions)
    for r, c in positions[:min(goal_count, len(positions))]:
        cells[r][c] = goal
    non_goal = [idx for idx in range(palette_size) if idx != goal]
    return fill_without_runs(cells, non_goal, rng)


def shuffle_whole_board(cells: Grid, rng: random.Random) -> Grid:
    """Permute every tile color over every cell, goal tiles included."""
    flat = [value for row in cells for value in row]
    rng.shuffle(flat)
    cols = len(cells[0]) if cells else 0
    return [flat[r * cols:(r + 1) * cols] for r in range(len(cells))]


@dataclass(slots=True)
class ReshuffleResult:
    cells: Grid
    positions: List[Position]
    constructive: bool
    solvable: bool


def shuffle_non_goal_until_solvable(
    cells: Grid,
    *,
    goal: int,
    palette_size: int,
    rng: random.Random,
    attempts: int,
) -> ReshuffleResult:
    """Permute non-goal tiles among their own cells until one swap can match.

    Goal tiles never move. A permutation is accepted only when it leaves no
    live non-goal run and some single swap creates one. After ``attempts``
    failed permutations a constructive layout places three tiles of one
    non-goal color a single swap away from a run.
    """
    positions = [(r, c) for r, row in enumerate(cells) for c, value in enumerate(row) if value != goal]
    colors = [cells[r][c] for r, c in positions]

    def with_pool(pool: List[Tile]) -> Grid:
        trial = [row[:] for row in cells]
        for (r, c), value in zip(positions, pool):
            trial[r][c] = value
        return trial

    for _ in range(attempts):
        pool = colors[:]
        rng.shuffle(pool)
        trial = with_pool(pool)
        if is_settled_and_solvable(trial, goal):
            return ReshuffleResult(cells=trial, positions=positions, constructive=False, solvable=True)

    constructed = _one_swap_from_run(cells, positions, colors, goal, palette_size, rng)
    if constructed is not None:
        return ReshuffleResult(cells=constructed, positions=positions, constructive=True, solvable=True)
    logger.warning("Constructive stalemate fallback failed; board left unchanged")
    original = [row[:] for row in cells]
    return ReshuffleResult(
        cells=original,
        positions=positions,
        constructive=True,
        solvable=has_single_swap_solution(original, exempt_color=goal),
    )


def is_settled_and_solvable(cells: Grid, goal: int) -> bool:
    """No live non-goal run, and at least one swap that would make one."""
    return not find_matches(cells, exempt_color=goal) and has_single_swap_solution(cells, exempt_color=goal)


# Three cells that one adjacent swap turns into a run: X X _ X, the same
# with the gap first, and a pair with the third tile one step off the line.
_NEAR_RUN_SHAPES = (
    ((0, 0), (0, 1), (0, 3)),
    ((0, 0), (0, 2), (0, 3)),
    ((0, 0), (1, 0), (3, 0)),
    ((0, 0), (2, 0), (3, 0)),
    ((0, 0), (0, 1), (1, 2)),
    ((0, 0), (0, 1), (-1, 2)),
    ((0, 1), (0, 2), (1, 0)),
    ((0, 1), (0, 2), (-1, 0)),
    ((0, 0), (1, 0), (2, 1)),
    ((0, 0), (1, 0), (2, -1)),
    ((1, 0), (2, 0), (0, 1)),
    ((1, 0), (2, 0), (0, -1)),
)
_FILL_TRIES = 4


def _near_run_slots(cells: Grid, goal: int) -> List[List[Position]]:
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    found = []
    for r in range(rows):
        for c in range(cols):
            for shape in _NEAR_RUN_SHAPES:
                slots = [(r + dr, c + dc) for dr, dc in shape]
                if all(0 <= sr < rows and 0 <= sc < cols and cells[sr][sc] != goal for sr, sc in slots):
                    found.append(slots)
    return found


def _completes_run(cells: Grid, r: int, c: int, color: int) -> bool:
    rows, cols = len(cells), len(cells[0])
    for dr, dc in ((0, 1), (1, 0)):
        for start in (-2, -1, 0):
            window = [(r + (start + k) * dr, c + (start + k) * dc) for k in range(3)]
            if not all(0 <= wr < rows and 0 <= wc < cols for wr, wc in window):
                continue
            if all(cells[wr][wc] == color for wr, wc in window if (wr, wc) != (r, c)):
                return True
    return False


def _fill_avoiding_runs(base: Grid, open_cells: List[Position], pool: List[int], rng: random.Random) -> Grid | None:
    """Place ``pool`` on ``open_cells`` in row-major order without closing a run.

    The most plentiful allowed color goes first, ties broken at random.
    Returns None on a dead end.
    """
    trial = [row[:] for row in base]
    for r, c in open_cells:
        trial[r][c] = None
    remaining = Counter(pool)
    for r, c in sorted(open_cells):
        allowed = sorted(color for color, n in remaining.items() if n > 0 and not _completes_run(trial, r, c, color))
        if not allowed:
            return None
        top = max(remaining[color] for color in allowed)
        choice = rng.choice([color for color in allowed if remaining[color] == top])
        trial[r][c] = choice
        remaining[choice] -= 1
    return trial


def _one_swap_from_run(
    cells: Grid,
    positions: List[Position],
    colors: List[Tile],
    goal: int,
    palette_size: int,
    rng: random.Random,
) -> Grid | None:
    counts = color_counts(cells, palette_size)
    targets = sorted(
        (idx for idx, count in enumerate(counts) if idx != goal and count >= 3),
        key=lambda idx: -counts[idx],
    )
    candidates = _near_run_slots(cells, goal)
    rng.shuffle(candidates)
    for target in targets:
        pool = colors[:]
        for _ in range(3):
            pool.remove(target)
        for slots in candidates:
            base = [row[:] for row in cells]
            for r, c in slots:
                base[r][c] = target
            rest = [pos for pos in positions if pos not in slots]
            for _ in range(_FILL_TRIES):
                trial = _fill_avoiding_runs(base, rest, pool, rng)
                if trial is not None and is_settled_and_solvable(trial, goal):
                    return trial
    return None
