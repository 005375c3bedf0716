"""Movement resolution for a single requested displacement.

A move is resolved as a small state machine rather than mutual recursion:

    CHECKING      classify the destination tile
    CONSUME_TRAP  trap fires once (HP - 1), tile becomes PATH, re-check
    CONSUME_KEY   key is collected, tile becomes PATH, re-check
    TELEPORTING   keyed portal: pick a random linked portal and queue its
                  non-wall neighbours (shuffled) as new candidate destinations
    ARRIVED       player stands on the destination (terminal, success)
    BLOCKED       this candidate failed; try the next queued one (if any)

Candidates live on an explicit stack of iterators. A portal that is already
being teleported through in the current resolution is BLOCKED, so portal
chains are bounded by the number of portals on the board.

Walls bump (HP - 1) only when targeted directly; teleport exits never queue
a wall tile. A portal entered without its key is a silent failure.

Bounds are deliberately symmetric: every border tile is in bounds, so walking
into any side of the outer wall bumps, and wall-break never opens the border
ring on any side. Only destinations off the grid are silent no-ops.
"""

from __future__ import annotations

import enum
import random
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .cells import Coord, Key, Portal
from .generator import CARDINALS
from .tiles import PATH, TAKEN_PATH, TRAP, WALKABLE, WALL

LEFT: Coord = (0, -1)
RIGHT: Coord = (0, 1)
UP: Coord = (-1, 0)
DOWN: Coord = (1, 0)

DIRECTIONS: Dict[str, Coord] = {"left": LEFT, "right": RIGHT, "up": UP, "down": DOWN}


def step(pos: Coord, direction: Coord, distance: int = 1) -> Coord:
    return (pos[0] + direction[0] * distance, pos[1] + direction[1] * distance)


class MoveState(str, enum.Enum):
    CHECKING = "checking"
    CONSUME_TRAP = "consume_trap"
    CONSUME_KEY = "consume_key"
    TELEPORTING = "teleporting"
    ARRIVED = "arrived"
    BLOCKED = "blocked"


_TERMINAL = (MoveState.ARRIVED, MoveState.BLOCKED, MoveState.TELEPORTING)


class MovementResolver:
    def __init__(self, maze, player, rng: Optional[random.Random] = None):
        self.maze = maze
        self.player = player
        self._rng = rng or random.Random()
        self.last_trail: List[Tuple[MoveState, Coord]] = []

    # ------------------------------------------------------------------
    def resolve(self, origin: Coord, dest: Coord) -> bool:
        """Move the player from ``origin`` toward ``dest``; return True if they moved."""
        self.last_trail = []
        frames: List[Tuple[Optional[Portal], Iterator[Coord]]] = [(None, iter([dest]))]
        in_flight: Set[Coord] = set()
        while frames:
            via, candidates = frames[-1]
            target = next(candidates, None)
            if target is None:
                frames.pop()
                if via is not None:
                    in_flight.discard(via.position)
                continue
            state = MoveState.CHECKING
            while True:
                self.last_trail.append((state, target))
                if state in _TERMINAL:
                    break
                state = self._advance(state, origin, target, in_flight)
            if state is MoveState.ARRIVED:
                return True
            if state is MoveState.TELEPORTING:
                portal = self.maze.cell(*target)
                exits = self._teleport_exits(portal)
                if exits is None:
                    self.last_trail.append((MoveState.BLOCKED, target))
                    continue
                in_flight.add(portal.position)
                frames.append((portal, iter(exits)))
        return False

    def _advance(self, state: MoveState, origin: Coord, target: Coord, in_flight: Set[Coord]) -> MoveState:
        x, y = target
        if state is MoveState.CONSUME_TRAP:
            self.player.damage(1)
            self.maze.set_cell(x, y, PATH)
            return MoveState.CHECKING
        if state is MoveState.CONSUME_KEY:
            self.player.add_key(self.maze.cell(x, y).key_id)
            self.maze.set_cell(x, y, PATH)
            return MoveState.CHECKING

        # CHECKING
        if not self.maze.in_bounds(x, y):
            return MoveState.BLOCKED
        cell = self.maze.cell(x, y)
        if isinstance(cell, Portal):
            if not self.player.has_key(cell.key_id) or cell.position in in_flight:
                return MoveState.BLOCKED
            return MoveState.TELEPORTING
        if isinstance(cell, Key):
            return MoveState.CONSUME_KEY
        if cell == WALL:
            self.player.damage(1)
            return MoveState.BLOCKED
        if cell == TRAP:
            return MoveState.CONSUME_TRAP
        if cell in WALKABLE:
            self._arrive(origin, target)
            return MoveState.ARRIVED
        return MoveState.BLOCKED

    def _arrive(self, origin: Coord, target: Coord) -> None:
        ox, oy = origin
        if self.maze.in_bounds(ox, oy) and self.maze.cell(ox, oy) == PATH:
            self.maze.set_cell(ox, oy, TAKEN_PATH)
        self.player.move_to(*target)

    def _teleport_exits(self, portal: Portal) -> Optional[List[Coord]]:
        """Shuffled non-wall neighbours of a random linked portal, or None if unlinked."""
        linked = self.maze.linked_portals(portal)
        if not linked:
            return None
        destination = self._rng.choice(linked)
        dirs = list(CARDINALS)
        self._rng.shuffle(dirs)
        exits = []
        for dx, dy in dirs:
            nx, ny = destination.x + dx, destination.y + dy
            if self.maze.in_bounds(nx, ny) and self.maze.cell(nx, ny) != WALL:
                exits.append((nx, ny))
        return exits

    # ------------------------------------------------------------------
    def break_wall(self, dest: Coord) -> bool:
        """Open ``dest`` if it is an interior WALL. Any interior target counts as success."""
        x, y = dest
        if not self.maze.is_interior(x, y):
            return False
        if self.maze.cell(x, y) == WALL:
            self.maze.set_cell(x, y, PATH)
        return True


__all__ = [
    "LEFT",
    "RIGHT",
    "UP",
    "DOWN",
    "DIRECTIONS",
    "step",
    "MoveState",
    "MovementResolver",
]
