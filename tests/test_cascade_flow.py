from tilecascade.events.bus import EVENT_CASCADE_STEP, EVENT_CASCADE_COMPLETE, EVENT_MATCH_CLEARED
from tests.helpers import PRE_SWAP, grid, letters, record, scripted_game


def test_two_step_cascade():
    # First refill lines up three blues on the top row; the second settles.
    game = scripted_game(
        grid(*PRE_SWAP),
        waves=[
            {(0, 0): "B", (1, 0): "P", (0, 1): "B", (0, 2): "B"},
            {(0, 0): "O", (0, 1): "R", (0, 2): "P"},
        ],
    )
    steps = record(game.event_bus, EVENT_CASCADE_STEP)
    cleared = record(game.event_bus, EVENT_MATCH_CLEARED)
    complete = record(game.event_bus, EVENT_CASCADE_COMPLETE)

    assert game.play_move((0, 2), (0, 3)) == 2

    assert [k['depth'] for _, k in steps] == [1, 2]
    assert [k['positions'] for _, k in cleared][1] == [(0, 0), (0, 1), (0, 2)]
    assert complete[0][1]['depth'] == 2
    assert complete[0][1]['match_count'] == 2
    assert letters(game.cells) == ["ORPGB", "PGYBO", "YBOPG", "GOPYB", "BYGOP"]
    assert game.score == 20


def test_multi_cluster_wave_counts_each_cluster():
    game = scripted_game(
        grid(
            "RRRGB",
            "PGYBO",
            "YBOPG",
            "GOPYB",
            "BBBOP",
        ),
        waves=[{(0, 0): "O", (0, 1): "Y", (0, 2): "B", (1, 0): "R", (1, 1): "P", (1, 2): "R"}],
    )
    cleared = record(game.event_bus, EVENT_MATCH_CLEARED)

    assert game.resolve() == 2
    assert sorted(cleared[0][1]['cluster_sizes']) == [3, 3]
    assert game.score == 20
    assert letters(game.cells) == ["OYBGB", "RPRBO", "PGYPG", "YBOYB", "GOPOP"]
