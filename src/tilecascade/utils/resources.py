"""Lookups for the singleton components registered by ``create_world``."""
from __future__ import annotations

import random
from typing import Type, TypeVar

from esper import World

from tilecascade.components.board import Board
from tilecascade.components.color_goal import ColorGoalState
from tilecascade.components.game_state import GameState
from tilecascade.components.life import Life
from tilecascade.components.palette import Palette
from tilecascade.components.score import Score
from tilecascade.components.turn_state import TurnState
from tilecascade.config import RulesConfig

C = TypeVar("C")


def get_singleton(world: World, component_type: Type[C]) -> C:
    for _, component in world.get_component(component_type):
        return component
    raise RuntimeError(f"{component_type.__name__} resource not found")


def get_board(world: World) -> Board:
    return get_singleton(world, Board)


def get_palette(world: World) -> Palette:
    return get_singleton(world, Palette)


def get_game_state(world: World) -> GameState:
    return get_singleton(world, GameState)


def get_life(world: World) -> Life:
    return get_singleton(world, Life)


def get_color_goal(world: World) -> ColorGoalState:
    return get_singleton(world, ColorGoalState)


def get_score(world: World) -> Score:
    return get_singleton(world, Score)


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def get_rng(world: World) -> random.Random:
    candidate = getattr(world, "random", None)
    if isinstance(candidate, random.Random):
        return candidate
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def get_rules(world: World) -> RulesConfig:
    rules = getattr(world, "rules", None)
    if isinstance(rules, RulesConfig):
        return rules
    rules = RulesConfig()
    setattr(world, "rules", rules)
    return rules
