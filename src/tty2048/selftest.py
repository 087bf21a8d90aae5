"""
Check the line sliding against a table of known results.
"""

import sys
from typing import TextIO

import numpy as np

from tty2048.game import slide_line

# these are exponents with base 2 (1=2 2=4 3=8)
CASES: tuple[tuple[tuple[int, ...], tuple[int, ...]], ...] = (
    ((0, 0, 0, 1), (1, 0, 0, 0)),
    ((0, 0, 1, 1), (2, 0, 0, 0)),
    ((0, 1, 0, 1), (2, 0, 0, 0)),
    ((1, 0, 0, 1), (2, 0, 0, 0)),
    ((1, 0, 1, 0), (2, 0, 0, 0)),
    ((1, 1, 1, 0), (2, 1, 0, 0)),
    ((1, 0, 1, 1), (2, 1, 0, 0)),
    ((1, 1, 0, 1), (2, 1, 0, 0)),
    ((1, 1, 1, 1), (2, 2, 0, 0)),
    ((2, 2, 1, 1), (3, 2, 0, 0)),
    ((1, 1, 2, 2), (2, 3, 0, 0)),
    ((3, 0, 1, 1), (3, 2, 0, 0)),
    ((2, 0, 1, 1), (2, 2, 0, 0)),
)


def _fmt(items) -> str:
    return " ".join(str(int(s)) for s in items)


def run_selftest(out: TextIO | None = None) -> int:
    """
    Return 0 if every case passes. Otherwise report the first failure and return 1.
    """
    if out is None:
        out = sys.stdout

    for given, expected in CASES:
        line = np.array(given, dtype=np.uint8)
        slide_line(line)

        if tuple(line.tolist()) != expected:
            print(
                f"{_fmt(given)} => {_fmt(line)} expected {_fmt(given)} => {_fmt(expected)}",
                file=out,
            )
            return 1

    print(f"All {len(CASES)} tests executed successfully", file=out)
    return 0
