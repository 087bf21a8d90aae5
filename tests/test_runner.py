import numpy as np
import pytest

from tty2048.game import Summary, new_game
from tty2048.runner import GameStats, autoplay, play_random


def test_play_random():
    game = new_game(seed=1)
    summary = play_random(game, np.random.default_rng(1))

    assert game.completed
    assert game.is_terminal()
    assert summary.maxcell >= 4, summary
    assert summary.maxcell == game.maxcell()
    assert summary.score == game.score
    assert summary.steps == game.steps > 0


def test_autoplay_reproducible():
    stats = autoplay(5, seed=3)
    other = autoplay(5, seed=3)

    assert stats.total == 5
    assert stats.summary() == other.summary()
    assert stats.format() == other.format()


def test_autoplay_rounds():
    with pytest.raises(ValueError):
        autoplay(0)


def test_game_stats():
    stats = GameStats()
    stats.add(Summary(maxcell=128, score=1000, steps=100))
    stats.add(Summary(maxcell=256, score=3000, steps=250))
    stats.add(Summary(maxcell=128, score=1200, steps=120))

    assert stats.summary() == [(256, 1, 1 / 3), (128, 2, 2 / 3)]
    assert stats.format() == [
        "256:   33.3% count=1, steps=250.000, score=3000.000",
        "128:   66.7% count=2, steps=110.000, score=1100.000",
    ]
