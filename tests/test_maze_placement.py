import random
import unittest

import pytest

from labyrinth.errors import PlacementError
from labyrinth.maze import PATH, TRAP, TREASURE, WALL, Key, Maze, MazeConfig, Portal
from labyrinth.maze.placement import place_portals, place_traps, place_treasure

from maze_test_utils import find_cells


class TestPlacementCounts(unittest.TestCase):
    def setUp(self):
        self.cfg = MazeConfig(size=49, seed=42)
        self.maze = Maze(self.cfg)

    def test_trap_count_follows_ratio(self):
        self.assertEqual(self.cfg.trap_count, 16)
        self.assertEqual(self.maze.count(TRAP), 16)

    def test_one_group_of_four_portals_and_one_key(self):
        portals = self.maze.portals()
        self.assertEqual(len(portals), 4)
        self.assertEqual({p.link_key for p in portals}, {("portal-1", "key-1")})
        keys = find_cells(self.maze, lambda c: isinstance(c, Key))
        self.assertEqual(len(keys), 1)
        kx, ky = keys[0]
        self.assertEqual(self.maze.cell(kx, ky).key_id, "key-1")

    def test_exactly_one_treasure(self):
        self.assertEqual(self.maze.count(TREASURE), 1)
        self.assertIsNotNone(self.maze.treasure_position())

    def test_start_cell_left_plain(self):
        sx, sy = self.maze.start
        self.assertEqual(self.maze.cell(sx, sy), PATH)

    def test_portals_and_key_avoid_start_row_and_column(self):
        sx, sy = self.maze.start
        for x, y in find_cells(self.maze, lambda c: isinstance(c, (Portal, Key))):
            self.assertNotEqual(x, sx)
            self.assertNotEqual(y, sy)

    def test_entity_coordinates_match_grid(self):
        for x, y, c in self.maze.cells():
            if isinstance(c, (Portal, Key)):
                self.assertEqual(c.position, (x, y))


def test_placement_never_overwrites_walls():
    cfg = MazeConfig(size=21, seed=8)
    bare = Maze(MazeConfig(size=21, seed=8), generate=False)
    from labyrinth.maze.generator import carve

    carve(bare.grid, bare.start, random.Random(8))
    walls_before = {(x, y) for x, y, c in bare.cells() if c == WALL}
    full = Maze(cfg)
    walls_after = {(x, y) for x, y, c in full.cells() if c == WALL}
    assert walls_before == walls_after


def test_multiple_portal_groups():
    maze = Maze(MazeConfig(size=31, seed=11, portal_groups=3, portals_per_group=2))
    groups = {}
    for p in maze.portals():
        groups.setdefault(p.link_key, []).append(p)
    assert set(groups) == {("portal-1", "key-1"), ("portal-2", "key-2"), ("portal-3", "key-3")}
    assert all(len(v) == 2 for v in groups.values())
    assert maze.metrics["keys"] == 3


def test_linked_portals_excludes_self():
    maze = Maze(MazeConfig(size=31, seed=12))
    p = maze.portals()[0]
    linked = maze.linked_portals(p)
    assert p not in linked
    assert len(linked) == 3


def test_trap_placement_raises_when_maze_is_full():
    rows = [
        "#####",
        "#...#",
        "#####",
        "#####",
        "#####",
    ]
    maze = Maze.from_rows(rows, start=(1, 1))
    with pytest.raises(PlacementError) as exc:
        place_traps(maze, 5, random.Random(0), attempts=200)
    assert exc.value.kind == "trap"
    assert exc.value.placed == 2
    assert maze.count(TRAP) == 2


def test_portal_placement_cap():
    rows = [
        "#####",
        "#...#",
        "#####",
        "#####",
        "#####",
    ]
    # every PATH tile shares the start row, so no portal can ever be placed
    maze = Maze.from_rows(rows, start=(1, 1))
    with pytest.raises(PlacementError):
        place_portals(maze, "g", "k", 1, random.Random(0), attempts=50)


def test_treasure_skips_start():
    rows = [
        "#####",
        "#..##",
        "#####",
        "#####",
        "#####",
    ]
    maze = Maze.from_rows(rows, start=(1, 1))
    pos = place_treasure(maze, random.Random(3), attempts=500)
    assert pos == (1, 2)


def test_generation_surfaces_placement_error_for_overfull_config():
    with pytest.raises(PlacementError):
        Maze(MazeConfig(size=5, seed=1, trap_ratio=0.9, placement_attempts=100))
