"""
Play 2048 in the terminal.

    tty2048                 play with the original colors
    tty2048 blackwhite      play with another color scheme
    tty2048 test            run the self test
    tty2048 --autoplay 100  play 100 random games and print the max tile distribution
"""

import logging
import sys
from argparse import ArgumentParser
from pathlib import Path
from typing import Sequence

from tty2048.driver import SPAWN_DELAY, GameDriver
from tty2048.game import new_game
from tty2048.render import BoardRenderer
from tty2048.runner import autoplay
from tty2048.scheme import DEFAULT_SCHEME, SCHEMES
from tty2048.selftest import run_selftest
from tty2048.terminal import KeyReader, hidden_cursor, raw_mode

MODE_TEST = "test"

EXIT_INTERRUPTED = 130


def parser() -> ArgumentParser:
    p = ArgumentParser(prog="tty2048")
    p.add_argument(
        "mode",
        nargs="?",
        choices=SCHEMES + (MODE_TEST,),
        default=DEFAULT_SCHEME,
        help="color scheme, or 'test' to run the self test",
    )
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--delay", type=float, default=SPAWN_DELAY)
    p.add_argument("--log-file", type=Path, default=None)
    p.add_argument("--autoplay", type=int, default=None, metavar="N")
    return p


def setup_logging(log_file: Path | None) -> logging.Logger:
    logger = logging.getLogger("tty2048")

    # replace handlers of a previous run
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # stdout belongs to the board
    if log_file is None:
        logger.setLevel(logging.NOTSET)
        logger.addHandler(logging.NullHandler())
        return logger

    logger.setLevel(logging.DEBUG)
    handler = logging.FileHandler(str(log_file), encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    return logger


def play(scheme: str, seed: int | None, delay: float) -> int:
    game = new_game(seed=seed)
    stdin, stdout = sys.stdin, sys.stdout

    with hidden_cursor(stdout), raw_mode(stdin):
        renderer = BoardRenderer(stdout, scheme=scheme)
        driver = GameDriver(game, renderer, KeyReader(stdin), delay=delay)
        driver.run()

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    p = parser()
    ns = p.parse_args(argv)

    if ns.autoplay is not None and ns.autoplay < 1:
        p.error(f"--autoplay must be positive: {ns.autoplay}")
    if ns.delay < 0:
        p.error(f"--delay must not be negative: {ns.delay}")

    logger = setup_logging(ns.log_file)
    logger.debug("Arguments: %r", vars(ns))

    if ns.mode == MODE_TEST:
        return run_selftest()

    if ns.autoplay is not None:
        stats = autoplay(ns.autoplay, seed=ns.seed)
        for line in stats.format():
            print(line)
        return 0

    try:
        return play(ns.mode, ns.seed, ns.delay)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        print("         TERMINATED         ")
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
