from __future__ import annotations

import random
from typing import Iterable, Iterator, List, Sequence, Set, Tuple

from tilecascade.components.board import Board, Position, Tile

Grid = List[List[Tile]]

_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def swap_cells(board: Board, a: Position, b: Position) -> None:
    """Exchange two cells. No adjacency or bounds validation; callers decide."""
    (ar, ac), (br, bc) = a, b
    board.cells[ar][ac], board.cells[br][bc] = board.cells[br][bc], board.cells[ar][ac]


def is_adjacent(a: Position, b: Position) -> bool:
    ar, ac = a
    br, bc = b
    return (abs(ar - br) == 1 and ac == bc) or (abs(ac - bc) == 1 and ar == br)


def _mark_runs(line: Sequence[Tile], exempt_color: Tile) -> List[int]:
    """Return indices belonging to runs of three or more equal, non-empty tiles."""
    marked: List[int] = []
    run_start = 0
    for idx in range(1, len(line) + 1):
        if idx < len(line) and line[idx] is not None and line[idx] == line[run_start]:
            continue
        color = line[run_start]
        if idx - run_start >= 3 and color is not None and color != exempt_color:
            marked.extend(range(run_start, idx))
        run_start = idx
    return marked


def find_matches(cells: Grid, exempt_color: Tile = None) -> List[Position]:
    """Detect every cell on a horizontal or vertical run of length >= 3.

    Runs of ``exempt_color`` are skipped entirely; color mode passes its goal
    color here. A cell on both a horizontal and a vertical run is reported once.
    """
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    marked: Set[Position] = set()
    for r in range(rows):
        for c in _mark_runs(cells[r], exempt_color):
            marked.add((r, c))
    for c in range(cols):
        column = [cells[r][c] for r in range(rows)]
        for r in _mark_runs(column, exempt_color):
            marked.add((r, c))
    return sorted(marked)


def has_any_match(cells: Grid, exempt_color: Tile = None) -> bool:
    return bool(find_matches(cells, exempt_color))


def expand_connected_same_color(cells: Grid, seeds: Iterable[Position]) -> List[Position]:
    """Flood-fill the same-color region around every seed.

    The result is the union of the 4-connected regions, each cell listed once,
    in discovery order. Seeds sitting on empty cells are skipped.
    """
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    seen: Set[Position] = set()
    out: List[Position] = []
    for seed in seeds:
        if seed in seen:
            continue
        color = cells[seed[0]][seed[1]]
        if color is None:
            continue
        stack = [seed]
        seen.add(seed)
        while stack:
            r, c = stack.pop()
            out.append((r, c))
            for dr, dc in _NEIGHBOURS:
                nr, nc = r + dr, c + dc
                if not (0 <= nr < rows and 0 <= nc < cols):
                    continue
                if (nr, nc) in seen or cells[nr][nc] != color:
                    continue
                seen.add((nr, nc))
                stack.append((nr, nc))
    return out


def clear_clusters(cells: Grid, to_clear: Sequence[Position]) -> List[List[Position]]:
    """Partition a clear set into 4-connected same-color clusters.

    Connectivity is restricted to members of ``to_clear``.
    """
    members = set(to_clear)
    seen: Set[Position] = set()
    clusters: List[List[Position]] = []
    for start in to_clear:
        if start in seen:
            continue
        color = cells[start[0]][start[1]]
        cluster = [start]
        seen.add(start)
        stack = [start]
        while stack:
            r, c = stack.pop()
            for dr, dc in _NEIGHBOURS:
                nxt = (r + dr, c + dc)
                if nxt not in members or nxt in seen:
                    continue
                if cells[nxt[0]][nxt[1]] != color:
                    continue
                seen.add(nxt)
                cluster.append(nxt)
                stack.append(nxt)
        clusters.append(cluster)
    return clusters


def count_clear_clusters(cells: Grid, to_clear: Sequence[Position]) -> int:
    return len(clear_clusters(cells, to_clear))


def cluster_sizes_for_clear(cells: Grid, to_clear: Sequence[Position]) -> List[int]:
    return [len(cluster) for cluster in clear_clusters(cells, to_clear)]


def color_counts(cells: Grid, palette_size: int) -> List[int]:
    counts = [0] * palette_size
    for row in cells:
        for value in row:
            if value is not None:
                counts[value] += 1
    return counts


def predict_swap_creates_match(cells: Grid, src: Position, dst: Position, *, exempt_color: Tile = None) -> bool:
    """Return True if swapping src/dst leaves at least one match on the board."""
    trial = [row[:] for row in cells]
    (sr, sc), (dr, dc) = src, dst
    trial[sr][sc], trial[dr][dc] = trial[dr][dc], trial[sr][sc]
    return has_any_match(trial, exempt_color)


def iter_valid_swaps(cells: Grid, *, exempt_color: Tile = None) -> Iterator[Tuple[Position, Position]]:
    """Yield adjacent swaps (right and down neighbours) that produce a match."""
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    for r in range(rows):
        for c in range(cols):
            for dr, dc in ((0, 1), (1, 0)):
                nr, nc = r + dr, c + dc
                if nr >= rows or nc >= cols:
                    continue
                if predict_swap_creates_match(cells, (r, c), (nr, nc), exempt_color=exempt_color):
                    yield (r, c), (nr, nc)


def find_valid_swaps(cells: Grid, *, exempt_color: Tile = None) -> List[Tuple[Position, Position]]:
    return list(iter_valid_swaps(cells, exempt_color=exempt_color))


def has_single_swap_solution(cells: Grid, *, exempt_color: Tile = None) -> bool:
    return any(True for _ in iter_valid_swaps(cells, exempt_color=exempt_color))


def fill_without_runs(
    cells: Grid,
    choices: Sequence[int],
    rng: random.Random,
) -> Grid:
    """Fill every empty cell so that no new horizontal or vertical triple forms.

    Cells are visited in row-major order; a candidate is excluded when the two
    cells before it in the row, or above it in the column, already share it.
    """
    rows = len(cells)
    cols = len(cells[0]) if rows else 0
    for r in range(rows):
        for c in range(cols):
            if cells[r][c] is not None:
                continue
            available = list(choices)
            if c >= 2:
                left1 = cells[r][c - 1]
                left2 = cells[r][c - 2]
                if left1 is not None and left1 == left2 and left1 in available:
                    available = [t for t in available if t != left1]
            if r >= 2:
                up1 = cells[r - 1][c]
                up2 = cells[r - 2][c]
                if up1 is not None and up1 == up2 and up1 in available:
                    available = [t for t in available if t != up1]
            cells[r][c] = rng.choice(available) if available else rng.choice(list(choices))
    return cells


def seed_board(rows: int, cols: int, palette_size: int, rng: random.Random) -> Grid:
    """Fresh grid with no pre-existing runs."""
    empty: Grid = [[None] * cols for _ in range(rows)]
    return fill_without_runs(empty, range(palette_size), rng)


def format_board(cells: Grid, names: Sequence[str] | None = None) -> str:
    """Render a grid one line per row, one initial per tile, '.' for empty."""
    def initial(value: Tile) -> str:
        if value is None:
            return "."
        if names is not None:
            return names[value][0].upper()
        return str(value)
    return "\n".join(" ".join(initial(v) for v in row) for row in cells)
