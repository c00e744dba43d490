from dataclasses import dataclass, field
from typing import Dict, List


@dataclass(slots=True)
class Palette:
    """Ordered tile color definitions stored on a single entity.

    Tiles store an index into ``names``; ``labels`` maps internal names to the
    names shown to the player.
    """
    names: List[str]
    labels: Dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.names)

    def name_for(self, index: int | None) -> str | None:
        if index is None:
            return None
        return self.names[index]

    def label_for(self, index: int) -> str:
        name = self.names[index]
        return self.labels.get(name, name.capitalize())
