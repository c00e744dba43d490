from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(slots=True)
class SwapPath:
    """Cells visited by the tile being dragged, oldest first.

    The dragged tile currently sits on ``cells[-1]``; every consecutive pair
    of cells corresponds to one swap already applied to the board.
    """
    cells: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def start(self) -> Tuple[int, int] | None:
        return self.cells[0] if self.cells else None

    @property
    def did_swap(self) -> bool:
        return len(self.cells) > 1
