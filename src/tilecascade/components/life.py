from dataclasses import dataclass


@dataclass
class Life:
    """Endurance meter used by life mode.

    ``active`` stays False until the first successful match of the session;
    ``lost`` is terminal until the game is reset.
    """
    current: int
    max_value: int
    active: bool = False
    lost: bool = False
    enabled: bool = False

    def clamp(self) -> None:
        if self.current < 0:
            self.current = 0
        if self.current > self.max_value:
            self.current = self.max_value
