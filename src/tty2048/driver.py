import logging
import time
from typing import Any, Callable

from tty2048.event import EventEmitter
from tty2048.game import (
    DIRECTION_NAMES,
    STEP_DOWN,
    STEP_LEFT,
    STEP_RIGHT,
    STEP_UP,
    Game,
)
from tty2048.render import BoardRenderer

logger = logging.getLogger(__name__)

KEY_BINDINGS = {
    "a": STEP_LEFT,
    "h": STEP_LEFT,
    "left": STEP_LEFT,
    "d": STEP_RIGHT,
    "l": STEP_RIGHT,
    "right": STEP_RIGHT,
    "w": STEP_UP,
    "k": STEP_UP,
    "up": STEP_UP,
    "s": STEP_DOWN,
    "j": STEP_DOWN,
    "down": STEP_DOWN,
}

OUTCOME_GAME_OVER = "game_over"
OUTCOME_QUIT = "quit"
OUTCOME_EOF = "eof"

SPAWN_DELAY = 0.15


class GameDriver:
    """
    Feed key presses to a game and draw it.

    Keys come from a callable returning None at end of input.
    """

    EVENT_MOVED: str = "moved"
    """
    args: (game, direction, reward)
    """

    EVENT_SPAWNED: str = "spawned"
    """
    args: (game,)
    """

    EVENT_RESTARTED: str = "restarted"
    """
    args: (game,)
    """

    EVENT_ENDED: str = "ended"
    """
    args: (game, outcome)
    """

    def __init__(
        self,
        game: Game,
        renderer: BoardRenderer,
        read_key: Callable[[], str | None],
        *,
        delay: float = SPAWN_DELAY,
        sleep: Callable[[float], Any] = time.sleep,
    ):
        if delay < 0:
            raise ValueError(f"delay={delay}")

        self.game = game
        self.renderer = renderer
        self._read_key = read_key
        self._delay = delay
        self._sleep = sleep
        self._emitter = EventEmitter()

    def add_callback(self, event: str, fn: Callable[..., Any]):
        assert event in {
            self.EVENT_MOVED,
            self.EVENT_SPAWNED,
            self.EVENT_RESTARTED,
            self.EVENT_ENDED,
        }, event

        self._emitter.add_listener(event, fn)

    def _confirm(self, question: str) -> bool:
        self.renderer.message(question)
        return self._read_key() == "y"

    def _end(self, outcome: str) -> str:
        logger.info(
            "Game ended: outcome=%s score=%d maxcell=%d steps=%d",
            outcome,
            self.game.score,
            self.game.maxcell(),
            self.game.steps,
        )
        self._emitter.emit(self.EVENT_ENDED, self.game, outcome)
        return outcome

    def play_key(self, direction: int) -> bool:
        """
        Move, draw, wait, spawn, draw.

        Return whether the game is over.
        """
        game = self.game
        score = game.score

        if not game.move(direction):
            logger.debug("Blocked move %s", DIRECTION_NAMES[direction])
            return False

        reward = game.score - score
        logger.debug("Moved %s reward=%d", DIRECTION_NAMES[direction], reward)
        self._emitter.emit(self.EVENT_MOVED, game, direction, reward)

        self.renderer.draw(game)
        if self._delay:
            self._sleep(self._delay)

        game.spawn()
        self._emitter.emit(self.EVENT_SPAWNED, game)
        self.renderer.draw(game)

        return game.is_terminal()

    def run(self) -> str:
        """
        Play until game over, quit, or end of input.
        """
        self.renderer.draw(self.game)

        while True:
            key = self._read_key()
            if key is None:
                self.renderer.message("Error! Cannot read keyboard input!")
                logger.error("Cannot read keyboard input")
                return self._end(OUTCOME_EOF)

            direction = KEY_BINDINGS.get(key)
            if direction is not None and self.play_key(direction):
                self.renderer.message("GAME OVER")
                return self._end(OUTCOME_GAME_OVER)

            if key == "q":
                if self._confirm("QUIT? (y/n)"):
                    return self._end(OUTCOME_QUIT)
                self.renderer.draw(self.game)

            elif key == "r":
                if self._confirm("RESTART? (y/n)"):
                    logger.info("Restart at score=%d", self.game.score)
                    self.game.reset()
                    self._emitter.emit(self.EVENT_RESTARTED, self.game)
                self.renderer.draw(self.game)
