from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

# A tile is a palette index, or None while a cell is cleared mid-resolution.
Tile = Optional[int]
Position = Tuple[int, int]


@dataclass(slots=True)
class Board:
    rows: int
    cols: int
    cells: List[List[Tile]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[None] * self.cols for _ in range(self.rows)]

    def snapshot(self) -> List[List[Tile]]:
        return [row[:] for row in self.cells]

    def positions(self) -> Iterator[Position]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)
