import dataclasses
import logging
import time
from collections import defaultdict
from typing import Optional

import numpy as np

from tty2048.game import DIRECTIONS, Game, Summary

logger = logging.getLogger(__name__)


def play_random(game: Game, rand: np.random.Generator) -> Summary:
    """
    Play a game to the end with uniformly random valid moves.
    """
    directions = np.array(DIRECTIONS)

    while not game.completed:
        # not terminal so at least one direction is valid
        for direction in rand.permutation(directions):
            valid, _ = game.step(int(direction))
            if valid:
                break
        else:
            raise RuntimeError(f"No valid move on a live board: {game.cells()}")

    return game.summary()


@dataclasses.dataclass
class StatEntry:
    count: int = 0
    score_sum: int = 0
    step_sum: int = 0


class GameStats:
    """
    Games grouped by their max tile
    """

    def __init__(self):
        self.entries: defaultdict[int, StatEntry] = defaultdict(StatEntry)

    @property
    def total(self) -> int:
        return sum(s.count for s in self.entries.values())

    def add(self, summary: Summary):
        entry = self.entries[summary.maxcell]
        entry.count += 1
        entry.score_sum += summary.score
        entry.step_sum += summary.steps

    def summary(self) -> list[tuple[int, int, float]]:
        total = self.total
        return [
            (maxcell, entry.count, entry.count / total)
            for maxcell, entry in sorted(self.entries.items(), reverse=True)
        ]

    def format(self) -> list[str]:
        total = self.total
        lines = []

        for maxcell, entry in sorted(self.entries.items(), reverse=True):
            heading = f"{maxcell}:"
            lines.append(
                " ".join(
                    [
                        f"{heading:6s}",
                        f"{entry.count / total:5.1%}",
                        f"count={entry.count},",
                        f"steps={entry.step_sum / entry.count:.3f},",
                        f"score={entry.score_sum / entry.count:.3f}",
                    ]
                )
            )

        return lines


def autoplay(
    rounds: int,
    seed: Optional[int] = None,
    *,
    report_interval: float = 60,
) -> GameStats:
    """
    Play a number of games with random moves and collect the max tile distribution.
    """
    if rounds <= 0:
        raise ValueError(f"rounds={rounds}")

    rand = np.random.default_rng(seed)
    # one generator for spawning and one for moving
    game = Game(seed=rand.integers(0, 2**63))
    stats = GameStats()

    t0 = time.perf_counter()
    last_time = time.monotonic()

    for i in range(rounds):
        if i:
            game.reset()

        stats.add(play_random(game, rand))

        now = time.monotonic()
        if now - last_time >= report_interval:
            last_time = now
            logger.info("Progress: %.1f%%, games=%d", 100 * (i + 1) / rounds, i + 1)

    t1 = time.perf_counter()
    logger.info("Played %d games in %.3f seconds", rounds, t1 - t0)

    return stats
