"""
pwmatch.adjacency_graphs

Keyboard adjacency graphs, built from drawings of each layout.

A graph maps a character to a fixed-length list of neighbour keys, one slot
per direction (clockwise from the key on the left). A slot is None when the
key sits on an edge. Each neighbour is the whole key token, e.g. '2@':
index 0 is the unshifted character, index 1 the shifted one.
"""

from functools import lru_cache
from typing import Dict, List, Optional, Tuple

Graph = Dict[str, List[Optional[str]]]

QWERTY = r"""
`~ 1! 2@ 3# 4$ 5% 6^ 7& 8* 9( 0) -_ =+
    qQ wW eE rR tT yY uU iI oO pP [{ ]} \|
     aA sS dD fF gG hH jJ kK lL ;: '"
      zZ xX cC vV bB nN mM ,< .> /?
"""

DVORAK = r"""
`~ 1! 2@ 3# 4$ 5% 6^ 7& 8* 9( 0) [{ ]}
    '" ,< .> pP yY fF gG cC rR lL /? =+ \|
     aA oO eE uU iI dD hH tT nN sS -_
      ;: qQ jJ kK xX bB mM wW vV zZ
"""

KEYPAD = r"""
  / * -
7 8 9 +
4 5 6
1 2 3
  0 .
"""

MAC_KEYPAD = r"""
  = / *
7 8 9 -
4 5 6 +
1 2 3
  0 .
"""


def get_slanted_adjacent_coords(x: int, y: int) -> List[Tuple[int, int]]:
    """
    Six neighbours on a keyboard whose rows are each shifted right of the
    row above: left, two keys above, right, two keys below.
    So g touches t, y, b and v but not r, u, n or c.
    """
    return [(x - 1, y), (x, y - 1), (x + 1, y - 1), (x + 1, y), (x, y + 1), (x - 1, y + 1)]


def get_aligned_adjacent_coords(x: int, y: int) -> List[Tuple[int, int]]:
    """Eight neighbours, clockwise from the left, on a vertically aligned keypad."""
    return [(x - 1, y), (x - 1, y - 1), (x, y - 1), (x + 1, y - 1),
            (x + 1, y), (x + 1, y + 1), (x, y + 1), (x - 1, y + 1)]


def build_graph(layout: str, slanted: bool) -> Graph:
    """
    Build {character: [neighbour tokens]} from a layout drawing.

    qwerty 'g' -> ['fF', 'tT', 'yY', 'hH', 'bB', 'vV']
    keypad '7' -> [None, None, None, '/', '8', '5', '4', None]
    """
    positions: Dict[Tuple[int, int], str] = {}
    tokens = layout.split()
    token_size = len(tokens[0])
    if any(len(t) != token_size for t in tokens):
        raise ValueError("token length mismatch in layout:\n" + layout)
    x_unit = token_size + 1  # token plus the whitespace after it
    adjacent = get_slanted_adjacent_coords if slanted else get_aligned_adjacent_coords

    for y, line in enumerate(layout.split("\n")):
        # each slanted row is drawn one space further right than the last
        slant = y - 1 if slanted else 0
        for token in line.split():
            x, remainder = divmod(line.index(token) - slant, x_unit)
            if remainder != 0:
                raise ValueError("unexpected x offset for %s in:\n%s" % (token, layout))
            positions[(x, y)] = token

    graph: Graph = {}
    for (x, y), chars in positions.items():
        for char in chars:
            graph[char] = [positions.get(coord) for coord in adjacent(x, y)]
    return graph


@lru_cache(maxsize=None)
def _build_all() -> Dict[str, Graph]:
    return {
        "qwerty": build_graph(QWERTY, slanted=True),
        "dvorak": build_graph(DVORAK, slanted=True),
        "keypad": build_graph(KEYPAD, slanted=False),
        "mac_keypad": build_graph(MAC_KEYPAD, slanted=False),
    }


def graphs() -> Dict[str, Graph]:
    """All layouts by name. Shared and cached: do not mutate."""
    return _build_all()


def calc_average_degree(graph: Graph) -> float:
    if not graph:
        return 0.0
    total = sum(len([n for n in neighbours if n]) for neighbours in graph.values())
    return total / float(len(graph))
