import random

from tilecascade import create_game
from tilecascade.events.bus import (
    EVENT_BOARD_RESHUFFLED,
    EVENT_GAME_OVER,
    EVENT_ROUND_STARTED,
    EVENT_ROUND_WON,
    EVENT_STALEMATE_RESOLVED,
    EVENT_STEPS_CHANGED,
)
from tilecascade.systems.board_ops import color_counts, find_matches, has_single_swap_solution
from tilecascade.systems.goal_ops import banned_colors_for
from tests.helpers import GREEN, RED, grid, record


def _color_game(layout, goal=GREEN, seed=0):
    game = create_game("color", rng=random.Random(seed))
    game.load_board(layout)
    state = game.color_goal
    state.goal_color = goal
    state.banned = banned_colors_for(game.cells, goal, 6)
    return game


def _almost_won(extra=()):
    cells = [[GREEN] * 5 for _ in range(5)]
    for r, c in [(0, 0), (0, 1), (0, 3), *extra]:
        cells[r][c] = RED
    return cells


def test_entering_color_mode_seeds_a_goal_board():
    game = create_game("off", rng=random.Random(2))
    game.load_board(grid("RPRPR", "PRPRP", "RPRPR", "PRPRP", "RPRPR"))
    started = record(game.event_bus, EVENT_ROUND_STARTED)

    assert game.set_mode("color")

    state = game.color_goal
    assert state.goal_color in (0, 1)
    assert sum(row.count(state.goal_color) for row in game.cells) == 5
    assert find_matches(game.cells, exempt_color=state.goal_color) == []
    assert state.steps == 0
    assert started[0][1]['goal_color'] == state.goal_color
    assert started[0][1]['goal_label'] in ("brown", "pink")
    assert game.resolver.strategy.name == "goal_aware"


def test_goal_runs_never_clear():
    game = _color_game(grid(
        "GGGRB",
        "PRYBO",
        "YBOPY",
        "RORYB",
        "BYROP",
    ))
    before = game.cells
    assert game.resolve() == 0
    assert game.cells == before


def test_clearing_the_last_color_wins_the_round():
    game = _color_game(_almost_won())
    won = record(game.event_bus, EVENT_ROUND_WON)

    assert game.play_move((0, 2), (0, 3)) == 1

    state = game.color_goal
    assert state.round_over
    assert state.steps == 1
    assert won == [(EVENT_ROUND_WON, {'goal_color': GREEN, 'steps': 1})]
    assert all(value is None for row in game.cells for value in row)
    assert game.input_locked
    assert game.score == 0


def test_new_round_picks_a_different_goal():
    game = _color_game(_almost_won())
    game.play_move((0, 2), (0, 3))

    game.start_new_round()

    state = game.color_goal
    assert state.goal_color != GREEN
    assert not state.round_over
    assert state.steps == 0
    assert sum(row.count(state.goal_color) for row in game.cells) == 5
    assert not game.input_locked


def test_partial_clear_of_last_color_reshuffles_board():
    game = _color_game(_almost_won(extra=[(4, 4)]))
    reshuffles = record(game.event_bus, EVENT_BOARD_RESHUFFLED)

    assert game.play_move((0, 2), (0, 3)) == 1

    assert reshuffles[0][1]['reason'] == "last_color_guard"
    counts = color_counts(game.cells, 6)
    assert counts[RED] == 4
    assert counts[GREEN] == 21
    assert game.color_goal.steps == 1


def test_too_few_tiles_left_loses():
    cells = [[GREEN] * 5 for _ in range(5)]
    cells[0][0] = cells[0][1] = RED
    cells[4][4] = 1
    game = _color_game(cells)
    over = record(game.event_bus, EVENT_GAME_OVER)

    assert game.color_goal_system.evaluate() == "lost"

    assert game.color_goal.lost
    assert over == [(EVENT_GAME_OVER, {'reason': "no_moves"})]
    assert game.input_locked


def _stripes():
    cells = [[(r + c) % 3 for c in range(5)] for r in range(5)]
    for r, c in ((0, 0), (2, 2), (4, 4)):
        cells[r][c] = GREEN
    return cells


def test_stalemate_is_reshuffled_into_a_solvable_board():
    game = _color_game(_stripes(), seed=4)
    reshuffles = record(game.event_bus, EVENT_BOARD_RESHUFFLED)
    resolved = record(game.event_bus, EVENT_STALEMATE_RESOLVED)

    assert game.color_goal_system.evaluate() == "reshuffled"

    cells = game.cells
    assert has_single_swap_solution(cells, exempt_color=GREEN)
    assert all(cells[r][c] == GREEN for r, c in ((0, 0), (2, 2), (4, 4)))
    assert color_counts(cells, 6) == color_counts(_stripes(), 6)
    assert reshuffles[0][1]['reason'] == "stalemate"
    assert resolved[0][1]['solvable'] is True


def test_constructive_fallback_when_shuffles_run_out():
    game = create_game("color", rng=random.Random(1))
    game.world.rules.stalemate_shuffle_attempts = 0
    game.load_board(_stripes())
    game.color_goal.goal_color = GREEN
    resolved = record(game.event_bus, EVENT_STALEMATE_RESOLVED)

    game.color_goal_system.evaluate()

    assert resolved[0][1] == {'constructive': True, 'solvable': True}
    assert has_single_swap_solution(game.cells, exempt_color=GREEN)
    assert find_matches(game.cells, exempt_color=GREEN) == []
    assert color_counts(game.cells, 6) == color_counts(_stripes(), 6)


def test_step_counting():
    game = _color_game(_stripes())
    steps = record(game.event_bus, EVENT_STEPS_CHANGED)
    moves = game.move_system

    moves.begin((1, 1))
    moves.enter((1, 2))
    assert moves.release() == 0
    assert game.color_goal.steps == 2

    moves.begin((1, 1))
    assert moves.release() == 0
    assert game.color_goal.steps == 2
    assert [k['steps'] for _, k in steps] == [2]


def test_reset_keeps_goal_and_reseeds():
    game = _color_game(_stripes())
    game.color_goal.steps = 7
    game.color_goal.lost = True

    game.reset()

    state = game.color_goal
    assert state.goal_color == GREEN
    assert state.steps == 0
    assert not state.lost
    assert sum(row.count(GREEN) for row in game.cells) == 5


def test_leaving_color_mode_restores_standard_rules():
    game = _color_game(_stripes())
    game.color_goal.round_over = True
    game.set_mode("off")
    assert not game.color_goal.round_over
    assert game.resolver.strategy.name == "standard"
    assert game.cells == _stripes()


def test_swap_then_resolve_runs_the_round_checks():
    game = _color_game(_almost_won())
    won = record(game.event_bus, EVENT_ROUND_WON)
    steps = record(game.event_bus, EVENT_STEPS_CHANGED)

    game.swap((0, 2), (0, 3))
    assert game.resolve() == 1

    assert game.color_goal.round_over
    assert game.color_goal.steps == 1
    assert steps == [(EVENT_STEPS_CHANGED, {'steps': 1})]
    assert won == [(EVENT_ROUND_WON, {'goal_color': GREEN, 'steps': 1})]


def test_resolve_without_a_match_leaves_steps_alone():
    game = _color_game(_stripes())
    assert game.resolve() == 0
    assert game.color_goal.steps == 0
    assert game.cells == _stripes()


def test_leaving_a_won_round_reseeds_the_board():
    game = _color_game(_almost_won())
    game.play_move((0, 2), (0, 3))
    assert game.color_goal.round_over

    game.set_mode("off")

    cells = game.cells
    assert not game.input_locked
    assert all(value is not None for row in cells for value in row)
    assert find_matches(cells) == []
