from dataclasses import dataclass

from tty2048.game import MAX_RANK

RESET = "\033[m"


@dataclass(frozen=True)
class TileStyle:
    # xterm 256 color indices
    background: int
    foreground: int

    def escape(self) -> str:
        return f"\033[38;5;{self.foreground};48;5;{self.background}m"


# background,foreground,tile
_SCHEME_SPECS = {
    "original": """
    8,255,empty
    1,255,2
    2,255,4
    3,255,8
    4,255,16
    5,255,32
    6,255,64
    7,255,128
    9,0,256
    10,0,512
    11,0,1024
    12,0,2048
    13,0,4096
    14,0,8192
    255,0,16384
    255,0,32768
    """,
    "blackwhite": """
    232,255,empty
    234,255,2
    236,255,4
    238,255,8
    240,255,16
    242,255,32
    244,255,64
    246,0,128
    248,0,256
    249,0,512
    250,0,1024
    251,0,2048
    252,0,4096
    253,0,8192
    254,0,16384
    255,0,32768
    """,
    "bluered": """
    235,255,empty
    63,255,2
    57,255,4
    93,255,8
    129,255,16
    165,255,32
    201,255,64
    200,255,128
    199,255,256
    198,255,512
    197,255,1024
    196,255,2048
    196,255,4096
    196,255,8192
    196,255,16384
    196,255,32768
    """,
}

SCHEMES = tuple(_SCHEME_SPECS)
DEFAULT_SCHEME = "original"


def make_tile_styles(name: str = DEFAULT_SCHEME) -> list[TileStyle]:
    """
    Tile styles indexed by rank.

    Ranks beyond the table share the style of the last entry.
    """
    try:
        spec = _SCHEME_SPECS[name]
    except KeyError:
        raise ValueError(f"Unknown scheme {name!r}") from None

    styles = []
    for line in spec.strip().splitlines():
        background, foreground = line.strip().split(",")[:2]
        styles.append(TileStyle(background=int(background), foreground=int(foreground)))

    # rank 0 is empty so array length is MAX_RANK + 1
    more = MAX_RANK + 1 - len(styles)
    styles += [styles[-1]] * more

    return styles
