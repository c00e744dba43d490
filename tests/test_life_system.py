import random

from tilecascade import create_game
from tilecascade.events.bus import (
    EVENT_GAME_OVER,
    EVENT_LIFE_ACTIVATED,
    EVENT_LIFE_CHANGED,
    EVENT_MATCH_CLEARED,
    EVENT_MOVE_REJECTED,
    EVENT_TICK,
)
from tests.helpers import PRE_SWAP, QUIET_REFILL, grid, record, scripted_game


def _life_game():
    return create_game("life", rng=random.Random(5))


def _clear(bus, *sizes):
    bus.emit(EVENT_MATCH_CLEARED, positions=[], cluster_sizes=list(sizes), cluster_count=len(sizes), depth=1)


def _reject(bus, did_swap=True):
    bus.emit(EVENT_MOVE_REJECTED, did_swap=did_swap, path=[])


def test_meter_sleeps_until_first_clear():
    game = _life_game()
    bus = game.event_bus
    activated = record(bus, EVENT_LIFE_ACTIVATED)

    game.tick(5.0)
    _reject(bus)
    assert game.life.active is False
    assert game.life.current == 60

    _clear(bus, 3)
    assert game.life.active is True
    assert game.life.current == 60
    assert len(activated) == 1


def test_decay_runs_on_ticks():
    game = _life_game()
    _clear(game.event_bus, 3)
    game.tick(0.5)
    assert game.life.current == 60
    game.tick(0.5)
    assert game.life.current == 55
    game.tick(2.0)
    assert game.life.current == 45


def test_penalty_only_for_actual_swaps():
    game = _life_game()
    bus = game.event_bus
    _clear(bus, 3)
    _reject(bus, did_swap=False)
    assert game.life.current == 60
    _reject(bus)
    assert game.life.current == 40


def test_gains_follow_cluster_tiers():
    game = _life_game()
    bus = game.event_bus
    changes = record(bus, EVENT_LIFE_CHANGED)
    _clear(bus, 3)
    _reject(bus)
    _reject(bus)
    assert game.life.current == 20
    _clear(bus, 6)
    assert game.life.current == 35
    _clear(bus, 3, 3)
    assert game.life.current == 55
    _clear(bus, 8)
    assert game.life.current == 60
    assert changes[-1][1]['delta'] == 5
    assert changes[-1][1]['reason'] == "match"


def test_depletion_ends_game_after_grace():
    game = _life_game()
    bus = game.event_bus
    over = record(bus, EVENT_GAME_OVER)
    _clear(bus, 3)
    for _ in range(3):
        _reject(bus)
    assert game.life.current == 0
    assert not game.life.lost

    game.tick(0.25)
    assert not game.life.lost
    game.tick(0.25)
    assert game.life.lost
    assert over == [(EVENT_GAME_OVER, {'reason': "life_depleted"})]
    assert game.input_locked

    # No decay or second game over once lost.
    game.tick(3.0)
    assert game.life.current == 0
    assert len(over) == 1


def test_recovery_cancels_grace_window():
    game = _life_game()
    bus = game.event_bus
    _clear(bus, 3)
    for _ in range(3):
        _reject(bus)
    game.tick(0.25)
    _clear(bus, 3)
    assert game.life.current == 5
    game.tick(0.5)
    assert not game.life.lost

    # Next decay drops it to zero again and a fresh grace window opens.
    game.tick(0.25)
    assert game.life.current == 0
    game.tick(0.25)
    assert not game.life.lost
    game.tick(0.25)
    assert game.life.lost


def test_hidden_session_pauses_decay():
    game = _life_game()
    _clear(game.event_bus, 3)
    game.tick(0.5)
    game.set_hidden(True)
    game.tick(3.0)
    assert game.life.current == 60
    game.set_hidden(False)
    game.tick(0.5)
    assert game.life.current == 60
    game.tick(0.5)
    assert game.life.current == 55


def test_reset_returns_meter_to_dormant_state():
    game = _life_game()
    bus = game.event_bus
    _clear(bus, 3)
    for _ in range(3):
        _reject(bus)
    game.tick(0.5)
    assert game.life.lost

    game.reset()
    assert game.life.lost is False
    assert game.life.active is False
    assert game.life.current == 60
    game.tick(2.0)
    assert game.life.current == 60


def test_leaving_life_mode_disables_meter():
    game = _life_game()
    bus = game.event_bus
    _clear(bus, 3)
    game.set_mode("off")
    assert game.life.enabled is False
    assert game.life.active is False
    _clear(bus, 3)
    game.tick(2.0)
    assert game.life.active is False
    assert game.life.current == 60


def test_first_real_match_activates_meter():
    game = scripted_game(grid(*PRE_SWAP), waves=[QUIET_REFILL], mode="life")
    assert game.play_move((0, 2), (0, 3)) == 1
    assert game.life.active
    assert game.life.current == 60
    assert game.score == 10
    bus = game.event_bus
    bus.emit(EVENT_TICK, dt=1.0)
    assert game.life.current == 55


def test_penalty_overshoot_clamps_at_zero():
    game = _life_game()
    bus = game.event_bus
    _clear(bus, 3)
    game.tick(1.0)
    _reject(bus)
    _reject(bus)
    assert game.life.current == 15
    changes = record(bus, EVENT_LIFE_CHANGED)

    _reject(bus)

    assert game.life.current == 0
    assert changes == [(EVENT_LIFE_CHANGED, {'current': 0, 'max_value': 60, 'delta': -15, 'reason': "no_match"})]


def test_reset_refills_meter_observers():
    game = _life_game()
    bus = game.event_bus
    _clear(bus, 3)
    _reject(bus)
    changes = record(bus, EVENT_LIFE_CHANGED)

    game.reset()

    assert changes == [(EVENT_LIFE_CHANGED, {'current': 60, 'max_value': 60, 'delta': 20, 'reason': "reset"})]
