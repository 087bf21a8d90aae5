"""
2048 implemented with numpy and numba

The board is a (4, 4) array of ranks. Rank 0 is an empty cell,
rank r is rendered as 2**r.

The board is indexed as board[x, y] where x is the column and y is the row
on screen. Hence board[x] is a screen column read from top to bottom
and "up" is toward index 0 of every array row.

         x=0  x=1  x=2  x=3
      +----+----+----+----+
y=0   |    |    |    |    |
y=1   |    |    |    |    |
y=2   |    |    |    |    |
y=3   |    |    |    |    |
      +----+----+----+----+

Every direction is handled by rotating the board counter-clockwise
until the direction becomes "up", sliding the array rows, and rotating back.
"""

from typing import NamedTuple, Optional, Sequence

import numpy as np
from numba import njit

SIZE = 4

# Direction value is the number of rotations to bring it up.
STEP_UP = 0
STEP_LEFT = 1
STEP_DOWN = 2
STEP_RIGHT = 3

DIRECTIONS = (STEP_UP, STEP_LEFT, STEP_DOWN, STEP_RIGHT)

DIRECTION_NAMES = {
    STEP_UP: "up",
    STEP_LEFT: "left",
    STEP_DOWN: "down",
    STEP_RIGHT: "right",
}

# probability to spawn 2. otherwise 4.
TWO_PROB = 0.9

# 16 cells can at most build a 2**17 tile in play
MAX_RANK = 17

# Map rank to its rendered value.
# A loaded board may merge past MAX_RANK, so leave room up to int64.
ITEM_VALUES = np.array([0] + [2**r for r in range(1, 63)], dtype=np.int64)

_BOARD_SHAPE = (SIZE, SIZE)
_BOARD_DTYPE = np.uint8


@njit(inline="always")
def _find_target(line: np.ndarray, x: int, stop: int) -> int:
    """
    Find where the item at x goes.

    Scan backward from x - 1 and never pass stop,
    which is the cell right after the last merge.
    """
    if x == 0:
        return x

    for t in range(x - 1, stop - 1, -1):
        if line[t] != 0:
            if line[t] != line[x]:
                # cannot merge, take the next one
                return t + 1
            return t

        if t == stop:
            return t

    return x


@njit
def _slide_line(line: np.ndarray) -> tuple[bool, int]:
    changed = False
    reward = 0
    stop = 0

    for x in range(line.shape[0]):
        if line[x] == 0:
            continue

        t = _find_target(line, x, stop)
        if t == x:
            continue

        if line[t] == 0:
            line[t] = line[x]
        elif line[t] == line[x]:
            line[t] += 1
            reward += 1 << int(line[t])

            # a merged cell does not merge again
            stop = t + 1

        line[x] = 0
        changed = True

    return changed, reward


@njit
def _rotate_board(board: np.ndarray):
    # counter-clockwise, ring by ring
    n = board.shape[0]
    for i in range(n // 2):
        for j in range(i, n - i - 1):
            tmp = board[i, j]
            board[i, j] = board[j, n - i - 1]
            board[j, n - i - 1] = board[n - i - 1, n - j - 1]
            board[n - i - 1, n - j - 1] = board[n - j - 1, i]
            board[n - j - 1, i] = tmp


@njit
def _move_up(board: np.ndarray) -> tuple[bool, int]:
    changed = False
    reward = 0

    for x in range(board.shape[0]):
        row_changed, row_reward = _slide_line(board[x])
        if row_changed:
            changed = True
        reward += row_reward

    return changed, reward


@njit
def _move_kernel(board: np.ndarray, rotations: int) -> tuple[bool, int]:
    for _ in range(rotations):
        _rotate_board(board)

    changed, reward = _move_up(board)

    for _ in range((4 - rotations) % 4):
        _rotate_board(board)

    return changed, reward


@njit
def _count_empty(board: np.ndarray) -> int:
    count = 0
    for x in range(board.shape[0]):
        for y in range(board.shape[1]):
            if board[x, y] == 0:
                count += 1
    return count


@njit
def _find_pair_down(board: np.ndarray) -> bool:
    for x in range(board.shape[0]):
        for y in range(board.shape[1] - 1):
            if board[x, y] == board[x, y + 1]:
                return True
    return False


@njit
def _game_ended(board: np.ndarray) -> bool:
    if _count_empty(board) > 0:
        return False
    if _find_pair_down(board):
        return False

    # the other axis
    _rotate_board(board)
    ended = not _find_pair_down(board)
    _rotate_board(board)
    _rotate_board(board)
    _rotate_board(board)

    return ended


def _check_direction(direction: int) -> int:
    if direction not in DIRECTION_NAMES:
        raise ValueError(f"direction={direction!r}")
    return int(direction)


def slide_line(line: np.ndarray) -> tuple[bool, int]:
    """
    Slide and merge a line toward index 0 in place.

    Return whether the line changed and the score earned by merges.
    """
    changed, reward = _slide_line(line)
    return bool(changed), int(reward)


def rotate_board(board: np.ndarray):
    """Rotate the board 90 degrees counter-clockwise in place"""
    _rotate_board(board)


def apply_move(board: np.ndarray, direction: int) -> tuple[bool, int]:
    """
    Move the board in place without spawning.

    Return whether the board changed and the score earned by merges.
    """
    changed, reward = _move_kernel(board, _check_direction(direction))
    return bool(changed), int(reward)


def spawn(
    board: np.ndarray,
    rand: np.random.Generator,
    two_prob: float = TWO_PROB,
) -> bool:
    """
    Spawn one number in empty cells

    Drawing from a numpy Generator, so this function is not jitted.

    :param two_prob: probability to spawn 2. otherwise 4.
    """

    empty_indices = np.flatnonzero(board == 0)
    if empty_indices.size == 0:
        return False

    if empty_indices.size == 1:
        idx = empty_indices[0]
    else:
        idx = rand.choice(empty_indices)

    x, y = divmod(int(idx), board.shape[1])

    chance = rand.uniform()
    if chance < two_prob:
        board[x, y] = 1
    else:
        board[x, y] = 2

    return True


def is_terminal(board: np.ndarray) -> bool:
    """No empty cell and no equal neighbours. The board is left untouched."""
    return bool(_game_ended(board))


class Summary(NamedTuple):
    maxcell: int
    score: int
    steps: int


class Game:
    """
    A game session.

    The session owns the board, the score and the random generator.
    The generator is created once and only reseeded by an explicit seed.
    """

    _rand: np.random.Generator
    _board: np.ndarray

    score: int
    steps: int

    def __init__(
        self,
        two_prob: float = TWO_PROB,
        seed: Optional[int] = None,
    ):
        if not 0 <= two_prob <= 1:
            raise ValueError(f"two_prob={two_prob}")

        self._two_prob = two_prob
        self._rand = np.random.default_rng(seed)
        self._board = np.zeros(_BOARD_SHAPE, dtype=_BOARD_DTYPE)
        self._completed = False

        self.reset()

    def reset(self, seed: Optional[int] = None):
        if seed is not None:
            self._rand = np.random.default_rng(seed)

        self._board.fill(0)
        self._completed = False
        self.score = 0
        self.steps = 0

        self.spawn()
        self.spawn()

    def load(self, cells: Sequence[Sequence[int]] | np.ndarray, score: int = 0):
        """
        Replace the board by rows of ranks as seen on screen.
        """
        cells = np.asarray(cells)
        if cells.shape != _BOARD_SHAPE:
            raise ValueError(f"Bad board shape {cells.shape}")
        if cells.min() < 0 or cells.max() > MAX_RANK:
            raise ValueError(f"Rank out of range: {cells.min()}..{cells.max()}")
        if score < 0:
            raise ValueError(f"score={score}")

        self._board[:, :] = cells.T
        self.score = int(score)
        self.steps = 0
        self._completed = is_terminal(self._board)

    @property
    def board(self) -> np.ndarray:
        """The raw board, indexed by [x, y]"""
        return self._board

    @property
    def completed(self) -> bool:
        return self._completed

    def rank(self, row: int, col: int) -> int:
        return int(self._board[col, row])

    def cells(self) -> np.ndarray:
        """Ranks as seen on screen, indexed by [row, col]"""
        return self._board.T.copy()

    def maxcell(self) -> int:
        return int(ITEM_VALUES[self._board.max()])

    def render(self, output: np.ndarray):
        output[:] = ITEM_VALUES[self._board.T]

    def summary(self) -> Summary:
        return Summary(maxcell=self.maxcell(), score=self.score, steps=self.steps)

    def move(self, direction: int) -> bool:
        """
        Move the tiles. Return whether the board changed.

        No tile is spawned.
        """
        changed, reward = apply_move(self._board, direction)
        if changed:
            self.score += reward
            self.steps += 1
        return changed

    def spawn(self) -> bool:
        spawned = spawn(self._board, self._rand, self._two_prob)

        # a changed move always leaves an empty cell, only spawning can end the game
        if spawned:
            self._completed = self.is_terminal()

        return spawned

    def is_terminal(self) -> bool:
        return is_terminal(self._board)

    def step(self, direction: int) -> tuple[bool, bool]:
        """
        Move, then spawn if the move is valid.

        A tuple:

        1. Is the step valid?
        2. Is the game over?
        """

        if self._completed:
            raise RuntimeError("Game over")

        if not self.move(direction):
            # the board may be shared through the board property
            self._completed = self.is_terminal()
            return False, self._completed

        spawned = self.spawn()
        assert spawned, self._board

        return True, self._completed


def new_game(seed: Optional[int] = None, two_prob: float = TWO_PROB) -> Game:
    return Game(two_prob=two_prob, seed=seed)
