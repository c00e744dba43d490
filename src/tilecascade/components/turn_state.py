from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class TurnState:
    """Tracks resolution state shared across systems."""

    action_source: Optional[str] = None
    cascade_active: bool = False
    cascade_depth: int = 0
