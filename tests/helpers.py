from __future__ import annotations

import random
from typing import Dict, List, Optional, Sequence, Tuple

from tilecascade import create_game
from tilecascade.systems.strategies import StandardStrategy

# One letter per palette color, '.' for an empty cell.
LETTERS: Dict[str, Optional[int]] = {
    "R": 0,  # red
    "P": 1,  # pink
    "Y": 2,  # yellow
    "G": 3,  # green
    "B": 4,  # blue
    "O": 5,  # orange
    ".": None,
}
RED, PINK, YELLOW, GREEN, BLUE, ORANGE = range(6)


def grid(*rows: str) -> List[List[Optional[int]]]:
    """Build a board from letter rows, e.g. grid("RRG", "PYB", "OBG")."""
    return [[LETTERS[ch] for ch in row.replace(" ", "")] for row in rows]


def letters(cells) -> List[str]:
    inverse = {v: k for k, v in LETTERS.items()}
    return ["".join(inverse[v] for v in row) for row in cells]


class ScriptedSpawnStrategy(StandardStrategy):
    """Standard rules with refill colors dictated per wave, keyed by cell."""

    def __init__(self, waves: Sequence[Dict[Tuple[int, int], str]]):
        self.waves = [dict(w) for w in waves]

    def spawn_picker(self, ctx, snapshot):
        mapping = self.waves.pop(0) if self.waves else {}
        fallback = super().spawn_picker(ctx, snapshot)

        def pick(pos):
            if pos in mapping:
                return LETTERS[mapping[pos]]
            return fallback(pos)

        return pick


def record(bus, *event_names):
    """Subscribe a recorder to each event; returns a list of (name, payload)."""
    seen = []
    for name in event_names:
        bus.subscribe(name, lambda sender, _name=name, **kw: seen.append((_name, kw)))
    return seen


def scripted_game(layout, waves=(), mode="off", seed=0):
    game = create_game(mode, rng=random.Random(seed))
    game.load_board(layout)
    game.resolver.strategy = ScriptedSpawnStrategy(waves)
    return game


# The swap (0,2)<->(0,3) turns row 0 into R R R G B; (1,0) joins the clear.
PRE_SWAP = (
    "RRGRB",
    "RGYBO",
    "YBOPG",
    "GOPYB",
    "BYGOP",
)
# Refill that leaves the board quiet after the first wave.
QUIET_REFILL = {(0, 0): "O", (1, 0): "P", (0, 1): "B", (0, 2): "P"}
