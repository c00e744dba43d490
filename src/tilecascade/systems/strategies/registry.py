from __future__ import annotations

from typing import Dict

from tilecascade.components.game_state import GameMode
from tilecascade.systems.strategies.base import ResolutionStrategy
from tilecascade.systems.strategies.goal_aware import GoalAwareStrategy
from tilecascade.systems.strategies.standard import StandardStrategy

_registry: Dict[GameMode, ResolutionStrategy] = {}


def register_strategy(mode: GameMode, strategy: ResolutionStrategy) -> None:
    """Override the strategy used for a game mode."""

    _registry[mode] = strategy


def _builtin_strategies() -> Dict[GameMode, ResolutionStrategy]:
    standard = StandardStrategy()
    return {
        GameMode.OFF: standard,
        GameMode.LIFE: standard,
        GameMode.COLOR: GoalAwareStrategy(),
    }


def strategy_for_mode(mode: GameMode, overrides: Dict[GameMode, ResolutionStrategy] | None = None) -> ResolutionStrategy:
    combined = _builtin_strategies()
    combined.update(_registry)
    if overrides:
        combined.update(overrides)
    return combined[mode]
