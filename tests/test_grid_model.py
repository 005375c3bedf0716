import pytest

from labyrinth.maze import PATH, TRAP, WALL, Key, Maze, Portal
from labyrinth.maze.cells import cell_char
from labyrinth.maze.tiles import char_to_type
from labyrinth.models.player import Player

ROWS = [
    "#####",
    "#.O.#",
    "#k#$#",
    "#.O^#",
    "#####",
]


def test_from_rows_round_trips_text():
    maze = Maze.from_rows(ROWS, start=(3, 1))
    assert maze.to_rows() == ROWS
    assert str(maze) == "\n".join(ROWS)
    assert maze.treasure_position() == (2, 3)
    assert maze.metrics["portals"] == 2
    assert maze.metrics["keys"] == 1


def test_from_rows_rejects_bad_input():
    with pytest.raises(ValueError):
        Maze.from_rows(["###", "##"])
    with pytest.raises(ValueError):
        Maze.from_rows(["###", "#?#", "###"])


def test_bounds_and_interior():
    maze = Maze.from_rows(ROWS)
    assert maze.in_bounds(0, 4)
    assert not maze.in_bounds(5, 0)
    assert not maze.in_bounds(-1, 2)
    assert maze.is_interior(1, 1)
    assert not maze.is_interior(0, 2)
    assert not maze.is_interior(2, 4)


def test_set_cell_keeps_portal_index_current():
    maze = Maze.from_rows(ROWS)
    a, b = maze.portals()
    assert maze.linked_portals(a) == [b]
    maze.set_cell(b.x, b.y, PATH)
    assert maze.linked_portals(a) == []
    maze.set_cell(1, 3, Portal(0, 0, "portal-1", "key-1"))
    linked = maze.linked_portals(a)
    assert [p.position for p in linked] == [(1, 3)]


def test_portal_identity():
    p = Portal(1, 2, "portal-1", "key-1")
    assert p == Portal(1, 2, "portal-1", "key-1")
    assert p != Portal(1, 2, "portal-2", "key-1")
    assert not p.links_with(p)
    assert p.links_with(Portal(3, 3, "portal-1", "key-1"))
    assert not p.links_with(Portal(3, 3, "portal-1", "key-2"))
    assert p.to_dict()["group_id"] == "portal-1"


def test_cell_chars_and_names():
    assert cell_char(WALL) == "#"
    assert cell_char(Key(1, 1, "key-1")) == "k"
    assert char_to_type(TRAP) == "trap"
    assert char_to_type("O") == "portal"
    assert char_to_type("z") == "unknown"


def test_to_dict_lists_portals():
    maze = Maze.from_rows(ROWS, start=(3, 1))
    data = maze.to_dict()
    assert data["start"] == [3, 1]
    assert len(data["portals"]) == 2
    assert data["rows"] == ROWS


def test_player_snapshot_is_immutable_copy():
    player = Player("dana", 3, 1)
    snap = player.snapshot()
    player.move_to(2, 1)
    player.add_key("key-1")
    player.damage()
    assert snap.position == (3, 1)
    assert snap.keys == ()
    assert player.steps == 1
    assert player.hp == 2
    assert player.has_key("key-1")
    with pytest.raises(AttributeError):
        snap.hp = 10
    with pytest.raises(AttributeError):
        player.username = "eve"
