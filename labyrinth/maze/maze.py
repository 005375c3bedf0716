"""Maze grid and generation pipeline.

Generation phases:
    * Fill the grid with WALL.
    * Carve a perfect maze from the start cell (bottom-left interior corner).
    * Scatter traps (``config.trap_count``).
    * Place each portal link group followed by the key that opens it.
    * Place the treasure.

Public contract consumed elsewhere:
    Maze(config) OR Maze(seed=..., size=...)
    Attributes: grid[x][y] (x is the row), size, seed, start, config, metrics
    Tiles: '#' WALL, '.' PATH, ':' TAKEN_PATH, '^' TRAP, '$' TREASURE
    Entities: Portal ('O'), Key ('k')

Invariants enforced by code & tests:
    * Border ring is entirely WALL.
    * Before placement the PATH tiles form a spanning tree over the carved
      lattice (exactly one simple route between any two PATH tiles).
    * Placement only ever overwrites PATH tiles.
"""

from __future__ import annotations

import dataclasses
import random
import time
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..logging_utils import get_logger
from .cells import Cell, Coord, Key, Portal, cell_char
from .config import MazeConfig
from .generator import carve, init_grid
from .placement import place_portals, place_traps, place_treasure
from .tiles import PATH, TAKEN_PATH, TRAP, TREASURE, WALL

logger = get_logger("labyrinth.maze")

_CHAR_TO_TILE = {WALL: WALL, PATH: PATH, TAKEN_PATH: TAKEN_PATH, TRAP: TRAP, TREASURE: TREASURE}


class Maze:
    def __init__(
        self,
        config: MazeConfig | None = None,
        *,
        seed: int | None = None,
        size: int | None = None,
        rng: random.Random | None = None,
        generate: bool = True,
    ):
        # Accept either config object or (seed, size) keywords. The maze works
        # on its own copy so a shared config stays unseeded for the next game.
        if config is None:
            config = MazeConfig()
        changes: Dict[str, Any] = {}
        if seed is not None:
            changes["seed"] = seed
        if size is not None:
            changes.update(size=size, vision_radius=max(1, size // 10))
        if changes.get("seed", config.seed) is None:
            changes["seed"] = random.randint(0, 2**31 - 1)
        self.config = dataclasses.replace(config, **changes)
        self.seed = self.config.seed
        # Local RNG so external random usage does not affect generation
        self._rng = rng or random.Random(self.seed)
        self.size = self.config.size
        self.start: Coord = self.config.start
        self.grid: List[List[Cell]] = init_grid(self.size)
        self._portal_index: Dict[Tuple[str, str], List[Portal]] = {}
        self.metrics: Dict[str, Any] = {}
        if generate:
            self._generate()

    # ------------------------------------------------------------------
    # Generation Pipeline
    # ------------------------------------------------------------------
    def _generate(self):
        t0 = time.perf_counter()
        cfg = self.config
        self.metrics["lattice_cells"] = carve(self.grid, self.start, self._rng)
        self.metrics["tiles_path_carved"] = self.count(PATH)
        place_traps(self, cfg.trap_count, self._rng, self.start, cfg.placement_attempts)
        for n in range(1, cfg.portal_groups + 1):
            place_portals(
                self,
                f"portal-{n}",
                f"key-{n}",
                cfg.portals_per_group,
                self._rng,
                self.start,
                cfg.placement_attempts,
            )
        place_treasure(self, self._rng, self.start, cfg.placement_attempts)
        self._collect_counts()
        self.metrics["runtime_ms"] = round((time.perf_counter() - t0) * 1000, 2)
        logger.debug(event="maze_generated", **self.metrics)

    def _collect_counts(self):
        self.metrics.update(
            seed=self.seed,
            size=self.size,
            tiles_wall=self.count(WALL),
            tiles_path=self.count(PATH),
            traps=self.count(TRAP),
            portals=len(self.portals()),
            keys=sum(1 for _, _, c in self.cells() if isinstance(c, Key)),
            treasure=self.count(TREASURE),
        )

    # ------------------------------------------------------------------
    # Grid access
    # ------------------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def is_interior(self, x: int, y: int) -> bool:
        return 0 < x < self.size - 1 and 0 < y < self.size - 1

    def cell(self, x: int, y: int) -> Cell:
        return self.grid[x][y]

    def set_cell(self, x: int, y: int, value: Cell) -> None:
        old = self.grid[x][y]
        if isinstance(old, Portal):
            members = self._portal_index.get(old.link_key, [])
            if old in members:
                members.remove(old)
        if isinstance(value, (Portal, Key)):
            value.x, value.y = x, y
        if isinstance(value, Portal):
            self._portal_index.setdefault(value.link_key, []).append(value)
        self.grid[x][y] = value

    def cells(self) -> Iterable[Tuple[int, int, Cell]]:
        for x in range(self.size):
            for y in range(self.size):
                yield x, y, self.grid[x][y]

    def count(self, tile: str) -> int:
        return sum(1 for _, _, c in self.cells() if c == tile)

    def portals(self) -> List[Portal]:
        return [p for members in self._portal_index.values() for p in members]

    def linked_portals(self, portal: Portal) -> List[Portal]:
        """Return the other members of ``portal``'s link group."""
        return [p for p in self._portal_index.get(portal.link_key, []) if p.links_with(portal)]

    def treasure_position(self) -> Optional[Coord]:
        for x, y, c in self.cells():
            if c == TREASURE:
                return (x, y)
        return None

    # ------------------------------------------------------------------
    # Text form
    # ------------------------------------------------------------------
    def to_rows(self) -> List[str]:
        return ["".join(cell_char(c) for c in row) for row in self.grid]

    def __str__(self):
        return "\n".join(self.to_rows())

    @classmethod
    def from_rows(
        cls,
        rows: List[str],
        *,
        start: Coord | None = None,
        portal_links: Dict[Coord, Tuple[str, str]] | None = None,
        key_ids: Dict[Coord, str] | None = None,
        config: MazeConfig | None = None,
        rng: random.Random | None = None,
    ) -> "Maze":
        """Build a maze from text rows without running generation.

        ``O`` and ``k`` characters become portals and keys; their identifiers
        come from ``portal_links`` / ``key_ids`` keyed by coordinate and
        default to ``("portal-1", "key-1")`` / ``"key-1"``.
        """
        size = len(rows)
        if any(len(r) != size for r in rows):
            raise ValueError("maze rows must form a square")
        cfg = dataclasses.replace(config, size=size) if config is not None else MazeConfig(size=size, seed=0)
        maze = cls(cfg, rng=rng, generate=False)
        if start is not None:
            maze.start = start
        portal_links = portal_links or {}
        key_ids = key_ids or {}
        for x, row in enumerate(rows):
            for y, ch in enumerate(row):
                if ch == Portal.char:
                    group_id, key_id = portal_links.get((x, y), ("portal-1", "key-1"))
                    maze.set_cell(x, y, Portal(x, y, group_id, key_id))
                elif ch == Key.char:
                    maze.set_cell(x, y, Key(x, y, key_ids.get((x, y), "key-1")))
                elif ch in _CHAR_TO_TILE:
                    maze.set_cell(x, y, _CHAR_TO_TILE[ch])
                else:
                    raise ValueError(f"unknown tile {ch!r} at {(x, y)}")
        maze._collect_counts()
        return maze

    def to_dict(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "size": self.size,
            "start": list(self.start),
            "rows": self.to_rows(),
            "portals": [p.to_dict() for p in self.portals()],
            "metrics": dict(self.metrics),
        }


__all__ = ["Maze"]
