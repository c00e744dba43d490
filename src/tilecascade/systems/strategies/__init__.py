from tilecascade.systems.strategies.base import ResolutionContext, ResolutionStrategy
from tilecascade.systems.strategies.goal_aware import GoalAwareStrategy
from tilecascade.systems.strategies.registry import register_strategy, strategy_for_mode
from tilecascade.systems.strategies.standard import StandardStrategy

__all__ = [
    "GoalAwareStrategy",
    "ResolutionContext",
    "ResolutionStrategy",
    "StandardStrategy",
    "register_strategy",
    "strategy_for_mode",
]
