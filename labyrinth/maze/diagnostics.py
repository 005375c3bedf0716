"""Structural diagnostics for carved mazes.

``analyze(maze)`` walks the open tiles reachable from the start and reports
the numbers the perfect-maze invariant is stated in: a connected open region
with ``edges == nodes - 1`` is a tree, i.e. exactly one simple route between
any two tiles. Every non-WALL tile counts as open so the check can also run
after placement (entities only ever replace PATH tiles).
"""

from __future__ import annotations

from collections import deque
from typing import Any, Dict, List, Set

from .cells import Coord
from .generator import CARDINALS
from .tiles import WALL


def _open(maze, x: int, y: int) -> bool:
    return maze.in_bounds(x, y) and maze.grid[x][y] != WALL


def reachable_from(maze, start: Coord) -> Set[Coord]:
    if not _open(maze, *start):
        return set()
    seen = {start}
    q = deque([start])
    while q:
        cx, cy = q.popleft()
        for dx, dy in CARDINALS:
            nxt = (cx + dx, cy + dy)
            if nxt not in seen and _open(maze, *nxt):
                seen.add(nxt)
                q.append(nxt)
    return seen


def analyze(maze) -> Dict[str, Any]:
    size = maze.size
    open_tiles = [(x, y) for x, y, c in maze.cells() if c != WALL]
    reach = reachable_from(maze, maze.start)
    edges = 0
    for x, y in reach:
        # count each undirected edge once (right and down neighbours only)
        for dx, dy in ((0, 1), (1, 0)):
            if (x + dx, y + dy) in reach:
                edges += 1
    border_breaches: List[Coord] = [
        (x, y) for x, y in open_tiles if x in (0, size - 1) or y in (0, size - 1)
    ]
    sx, sy = maze.start
    # both coordinates even-offset from start means a lattice cell; both odd-offset means a pillar
    pillars: List[Coord] = [
        (x, y) for x, y in open_tiles if (x - sx) % 2 == 1 and (y - sy) % 2 == 1
    ]
    unreachable = [c for c in open_tiles if c not in reach]
    return {
        "open_tiles": len(open_tiles),
        "reachable": len(reach),
        "edges": edges,
        "is_tree": len(reach) > 0 and edges == len(reach) - 1,
        "unreachable": unreachable,
        "border_breaches": border_breaches,
        "pillar_breaches": pillars,
        "ok": bool(reach) and edges == len(reach) - 1 and not unreachable and not border_breaches and not pillars,
    }


__all__ = ["analyze", "reachable_from"]
