import io

import pytest

from tty2048.driver import (
    OUTCOME_EOF,
    OUTCOME_GAME_OVER,
    OUTCOME_QUIT,
    GameDriver,
)
from tty2048.game import STEP_LEFT, STEP_UP, new_game
from tty2048.render import BoardRenderer
from tty2048.terminal import KeyReader

_SCREEN = [
    [1, 1, 0, 0],
    [0, 0, 0, 0],
    [0, 0, 0, 2],
    [0, 0, 0, 2],
]

# a left move leaves no move at all, whatever spawns
_LAST_MOVE = [
    [1, 1, 3, 4],
    [5, 6, 7, 8],
    [9, 10, 11, 12],
    [13, 14, 15, 16],
]


def _make_driver(keys, cells=None, delay=0.15):
    game = new_game(seed=0)
    if cells is not None:
        game.load(cells)

    out = io.StringIO()
    it = iter(keys)
    sleeps = []
    driver = GameDriver(
        game,
        BoardRenderer(out),
        lambda: next(it, None),
        delay=delay,
        sleep=sleeps.append,
    )

    events = []
    driver.add_callback(
        GameDriver.EVENT_MOVED, lambda g, d, r: events.append(("moved", d, r))
    )
    driver.add_callback(GameDriver.EVENT_SPAWNED, lambda g: events.append(("spawned",)))
    driver.add_callback(
        GameDriver.EVENT_RESTARTED, lambda g: events.append(("restarted",))
    )
    driver.add_callback(GameDriver.EVENT_ENDED, lambda g, o: events.append(("ended", o)))

    return driver, out, events, sleeps


def test_move_then_quit():
    driver, out, events, sleeps = _make_driver(["a", "q", "y"], _SCREEN)

    assert driver.run() == OUTCOME_QUIT
    assert events == [
        ("moved", STEP_LEFT, 4),
        ("spawned",),
        ("ended", OUTCOME_QUIT),
    ]
    assert sleeps == [0.15]
    assert driver.game.score == 4
    assert "QUIT? (y/n)" in out.getvalue()


def test_arrow_and_vim_keys():
    driver, _, events, _ = _make_driver(["up", "q", "y"], _SCREEN, delay=0)
    driver.run()
    assert events[0] == ("moved", STEP_UP, 8)

    driver, _, events, _ = _make_driver(["h", "q", "y"], _SCREEN, delay=0)
    driver.run()
    assert events[0] == ("moved", STEP_LEFT, 4)


def test_blocked_move():
    cells = [[1, 2, 0, 0], [0] * 4, [0] * 4, [0] * 4]
    driver, _, events, sleeps = _make_driver(["a", "w", "x"], cells)

    assert driver.run() == OUTCOME_EOF
    assert events == [("ended", OUTCOME_EOF)]
    assert sleeps == []


def test_game_over():
    driver, out, events, _ = _make_driver(["a", "q", "y"], _LAST_MOVE, delay=0)

    assert driver.run() == OUTCOME_GAME_OVER
    assert events[-1] == ("ended", OUTCOME_GAME_OVER)
    assert driver.game.is_terminal()
    assert "GAME OVER" in out.getvalue()


def test_quit_declined():
    driver, out, events, _ = _make_driver(["q", "n"], _SCREEN)

    assert driver.run() == OUTCOME_EOF
    assert "Error! Cannot read keyboard input!" in out.getvalue()


def test_restart():
    driver, out, events, _ = _make_driver(["a", "r", "y", "q", "y"], _SCREEN, delay=0)

    assert driver.run() == OUTCOME_QUIT
    assert ("restarted",) in events
    assert driver.game.score == 0
    assert "RESTART? (y/n)" in out.getvalue()


def test_restart_declined():
    driver, _, events, _ = _make_driver(["a", "r", "n", "q", "y"], _SCREEN, delay=0)

    driver.run()
    assert ("restarted",) not in events
    assert driver.game.score == 4


def test_bad_delay():
    with pytest.raises(ValueError):
        _make_driver([], delay=-1)


def test_escape_then_quit():
    game = new_game(seed=0)
    out = io.StringIO()
    driver = GameDriver(
        game, BoardRenderer(out), KeyReader(io.StringIO("\033qy")), delay=0
    )

    assert driver.run() == OUTCOME_QUIT
    assert "QUIT? (y/n)" in out.getvalue()
