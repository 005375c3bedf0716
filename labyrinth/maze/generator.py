"""Perfect-maze carving via randomized depth-first backtracking.

Cells are carved on a parity-2 lattice: neighbours are two tiles away and the
tile between them is opened when the neighbour is first visited, so a wall
always separates parallel corridors. The carved PATH tiles form a spanning
tree over every lattice cell reachable from the start.
"""

from __future__ import annotations

import random
from typing import Iterator, List, Tuple

from .cells import Coord
from .tiles import PATH, WALL

# Row-major deltas: x is the row, y is the column
CARDINALS: Tuple[Coord, ...] = ((0, -1), (0, 1), (-1, 0), (1, 0))


def init_grid(size: int) -> List[List[str]]:
    return [[WALL for _ in range(size)] for _ in range(size)]


def _shuffled(rng, directions=CARDINALS) -> List[Coord]:
    dirs = list(directions)
    rng.shuffle(dirs)
    return dirs


def carve(grid: List[List[str]], start: Coord, rng=None) -> int:
    """Carve passages into ``grid`` starting from ``start``.

    Equivalent to the recursive formulation (visit, shuffle directions, descend
    into each unvisited neighbour in order) but driven by an explicit stack of
    direction iterators so deep mazes do not hit the interpreter recursion
    limit. Returns the number of lattice cells visited.
    """
    if rng is None:
        rng = random
    size = len(grid)
    visited = [[False for _ in range(size)] for _ in range(size)]

    def _valid(x: int, y: int) -> bool:
        return 0 < x < size - 1 and 0 < y < size - 1 and not visited[x][y]

    sx, sy = start
    visited[sx][sy] = True
    grid[sx][sy] = PATH
    stack: List[Tuple[Coord, Iterator[Coord]]] = [((sx, sy), iter(_shuffled(rng)))]
    count = 1
    while stack:
        (x, y), dirs = stack[-1]
        for dx, dy in dirs:
            nx, ny = x + dx * 2, y + dy * 2
            if _valid(nx, ny):
                grid[x + dx][y + dy] = PATH
                visited[nx][ny] = True
                grid[nx][ny] = PATH
                count += 1
                stack.append(((nx, ny), iter(_shuffled(rng))))
                break
        else:
            stack.pop()
    return count


__all__ = ["CARDINALS", "init_grid", "carve"]
