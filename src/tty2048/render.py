import io
from typing import TextIO

from tty2048.game import Game
from tty2048.scheme import DEFAULT_SCHEME, RESET, TileStyle, make_tile_styles

CELL_WIDTH = 7

CURSOR_HOME = "\033[H"
CURSOR_UP = "\033[A"


def format_value(rank: int, width: int = CELL_WIDTH) -> str:
    """Center the tile value in a cell"""
    if rank == 0:
        return "·".center(width)

    s = str(1 << rank)
    t = width - len(s)
    return " " * (t - t // 2) + s + " " * (t // 2)


class BoardRenderer:
    """
    Draw a game in place on an ANSI terminal.

    Each tile is a block of 3 lines x 7 columns.
    """

    def __init__(self, out: TextIO, scheme: str = DEFAULT_SCHEME):
        self.out = out
        self.scheme = scheme
        self._styles = make_tile_styles(scheme)

    def style(self, rank: int) -> TileStyle:
        return self._styles[min(rank, len(self._styles) - 1)]

    def format(self, game: Game) -> str:
        blank = " " * CELL_WIDTH

        with io.StringIO() as sio:
            sio.write(CURSOR_HOME)
            sio.write(f"2048.py {game.score:17d} pts\n\n")

            for row in game.cells():
                ranks = [int(r) for r in row]
                escapes = [self.style(r).escape() for r in ranks]

                padding = "".join(f"{e}{blank}{RESET}" for e in escapes)
                values = "".join(
                    f"{e}{format_value(r)}{RESET}" for e, r in zip(escapes, ranks)
                )

                sio.write(padding + "\n")
                sio.write(values + "\n")
                sio.write(padding + "\n")

            sio.write("\n")
            sio.write("        ←,↑,→,↓ or q        \n")
            sio.write(CURSOR_UP)
            return sio.getvalue()

    def draw(self, game: Game):
        self.out.write(self.format(game))
        self.out.flush()

    def message(self, text: str):
        """Print a status line below the board"""
        self.out.write(f"{text:^28s}\n")
        self.out.flush()
