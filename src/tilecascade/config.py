"""Tunable rule parameters for a game session."""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping, Tuple

from tilecascade import constants


@dataclass(slots=True)
class RulesConfig:
    """Rule constants used by the engine systems.

    Defaults mirror ``tilecascade.constants``. Times are in seconds and are
    measured against the ``tick`` events driving the session.
    """

    grid_size: int = constants.GRID_SIZE
    life_max: int = constants.LIFE_MAX
    decay_step: int = constants.DECAY_STEP
    decay_interval: float = constants.DECAY_INTERVAL
    no_match_penalty: int = constants.NO_MATCH_PENALTY
    game_over_grace: float = constants.GAME_OVER_GRACE
    score_per_match: int = constants.SCORE_PER_MATCH
    goal_seed_count: int = constants.GOAL_SEED_COUNT
    goal_spawn_chance: float = constants.GOAL_SPAWN_CHANCE
    stalemate_shuffle_attempts: int = constants.STALEMATE_SHUFFLE_ATTEMPTS
    life_gain_tiers: Tuple[Tuple[int, int], ...] = constants.LIFE_GAIN_TIERS
    multi_cluster_multiplier: int = constants.MULTI_CLUSTER_MULTIPLIER

    def __post_init__(self) -> None:
        if self.grid_size < 3:
            raise ValueError(f"grid_size must be at least 3, got {self.grid_size}")
        if self.life_max <= 0:
            raise ValueError(f"life_max must be positive, got {self.life_max}")
        for name in ("decay_step", "no_match_penalty", "score_per_match", "stalemate_shuffle_attempts"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.decay_interval <= 0 or self.game_over_grace < 0:
            raise ValueError("decay_interval must be positive and game_over_grace non-negative")
        if not 0.0 <= self.goal_spawn_chance <= 1.0:
            raise ValueError(f"goal_spawn_chance must be within [0, 1], got {self.goal_spawn_chance}")
        if not 0 <= self.goal_seed_count <= self.grid_size * self.grid_size:
            raise ValueError("goal_seed_count must fit on the board")
        # Normalise tiers so lookups can stop at the first qualifying size.
        tiers = tuple((int(size), int(gain)) for size, gain in self.life_gain_tiers)
        self.life_gain_tiers = tuple(sorted(tiers, key=lambda tier: tier[0], reverse=True))

    def life_gain_for_cluster(self, size: int) -> int:
        for minimum, gain in self.life_gain_tiers:
            if size >= minimum:
                return gain
        return 0

    def life_gain_for_wave(self, cluster_sizes: list[int]) -> int:
        gain = sum(self.life_gain_for_cluster(size) for size in cluster_sizes)
        if len(cluster_sizes) >= 2:
            gain *= self.multi_cluster_multiplier
        return gain

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> "RulesConfig":
        """Build a config from user overrides, rejecting unknown keys."""

        if not values:
            return cls()
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown rule settings: {', '.join(unknown)}")
        return cls(**dict(values))
