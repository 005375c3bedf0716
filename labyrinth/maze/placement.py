"""Rejection-sampling placement of traps, portals, keys and treasure.

Each entity draws uniformly random interior coordinates until one lands on a
plain PATH tile that satisfies the entity's exclusion rule. Draws are capped
by ``attempts``; running out raises ``PlacementError`` instead of spinning on
a maze with too few free tiles.

Exclusion rules relative to the player start ``(sx, sy)``:
    * traps, treasure: any PATH tile except the start itself
    * portals, keys: any PATH tile outside the start's row and column
"""

from __future__ import annotations

import random
from typing import Callable, List

from ..errors import PlacementError
from ..logging_utils import get_logger
from .cells import Coord, Key, Portal
from .tiles import PATH, TRAP, TREASURE

logger = get_logger("labyrinth.placement")

__all__ = [
    "sample_path_cell",
    "place_traps",
    "place_portals",
    "place_key",
    "place_treasure",
]


def _not_start(start: Coord) -> Callable[[int, int], bool]:
    return lambda x, y: (x, y) != start


def _off_start_lines(start: Coord) -> Callable[[int, int], bool]:
    return lambda x, y: x != start[0] and y != start[1]


def sample_path_cell(maze, rng, allowed: Callable[[int, int], bool], attempts: int, kind: str = "entity") -> Coord:
    size = maze.size
    for _ in range(attempts):
        x = rng.randint(1, size - 2)
        y = rng.randint(1, size - 2)
        if maze.grid[x][y] == PATH and allowed(x, y):
            return (x, y)
    logger.error(event="placement_failed", kind=kind, attempts=attempts)
    raise PlacementError(kind, attempts)


def place_traps(maze, count: int, rng=None, start: Coord | None = None, attempts: int = 10_000) -> List[Coord]:
    rng = rng or random
    start = start or maze.start
    placed: List[Coord] = []
    for _ in range(max(0, count)):
        try:
            x, y = sample_path_cell(maze, rng, _not_start(start), attempts, "trap")
        except PlacementError as exc:
            raise PlacementError("trap", attempts, placed=len(placed)) from exc
        maze.set_cell(x, y, TRAP)
        placed.append((x, y))
    return placed


def place_key(maze, key_id: str, rng=None, start: Coord | None = None, attempts: int = 10_000) -> Key:
    rng = rng or random
    start = start or maze.start
    x, y = sample_path_cell(maze, rng, _off_start_lines(start), attempts, "key")
    key = Key(x, y, key_id)
    maze.set_cell(x, y, key)
    return key


def place_portals(
    maze,
    group_id: str,
    key_id: str,
    count: int,
    rng=None,
    start: Coord | None = None,
    attempts: int = 10_000,
) -> List[Portal]:
    """Place ``count`` linked portals followed by the single key that opens them."""
    rng = rng or random
    start = start or maze.start
    portals: List[Portal] = []
    for _ in range(max(0, count)):
        try:
            x, y = sample_path_cell(maze, rng, _off_start_lines(start), attempts, "portal")
        except PlacementError as exc:
            raise PlacementError("portal", attempts, placed=len(portals)) from exc
        portal = Portal(x, y, group_id, key_id)
        maze.set_cell(x, y, portal)
        portals.append(portal)
    place_key(maze, key_id, rng, start, attempts)
    return portals


def place_treasure(maze, rng=None, start: Coord | None = None, attempts: int = 10_000) -> Coord:
    rng = rng or random
    start = start or maze.start
    x, y = sample_path_cell(maze, rng, _not_start(start), attempts, "treasure")
    maze.set_cell(x, y, TREASURE)
    return (x, y)
