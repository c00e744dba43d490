from dataclasses import dataclass, field
from typing import Set


@dataclass(slots=True)
class ColorGoalState:
    """Per-round state of color mode."""

    goal_color: int = 0
    # Non-goal colors with no tiles left; never spawned again this round.
    banned: Set[int] = field(default_factory=set)
    steps: int = 0
    round_over: bool = False
    lost: bool = False
