import random

import pytest

from labyrinth.maze import DOWN, LEFT, RIGHT, UP, Maze, MoveState
from labyrinth.maze.movement import MovementResolver
from labyrinth.maze.tiles import PATH, TAKEN_PATH, TRAP, WALL
from labyrinth.models.player import Player

START = (5, 1)

OPEN = [
    "#######",
    "#.....#",
    "#.###.#",
    "#.#...#",
    "#.#.#.#",
    "#.....#",
    "#######",
]


def _with(rows, x, y, ch):
    rows = list(rows)
    rows[x] = rows[x][:y] + ch + rows[x][y + 1 :]
    return rows


def test_plain_step_marks_origin_taken(make_session):
    s = make_session(OPEN, START)
    assert s.do_action(UP) is True
    assert s.player.position == (4, 1)
    assert s.player.steps == 1
    assert s.maze.cell(*START) == TAKEN_PATH
    # stepping back keeps the already-taken tile taken
    assert s.do_action(DOWN) is True
    assert s.maze.cell(*START) == TAKEN_PATH
    assert s.maze.cell(4, 1) == TAKEN_PATH
    assert s.player.steps == 2


def test_wall_bump_costs_hp_and_does_not_move(make_session):
    s = make_session(OPEN, START)
    assert s.do_action(LEFT) is False
    assert s.player.position == START
    assert s.player.hp == 2
    assert s.player.steps == 0
    assert s.resolver.last_trail == [(MoveState.CHECKING, (5, 0)), (MoveState.BLOCKED, (5, 0))]


def test_out_of_bounds_is_a_silent_no_op(make_session):
    s = make_session(OPEN, START)
    assert s.do_action(LEFT, move_count=2) is False
    assert s.player.position == START
    assert s.player.hp == 3


def test_trap_fires_once_then_player_lands(make_session):
    s = make_session(_with(OPEN, 5, 2, "^"), START)
    assert s.do_action(RIGHT) is True
    assert s.player.position == (5, 2)
    assert s.player.hp == 2
    assert s.maze.cell(5, 2) == PATH
    states = [st for st, _ in s.resolver.last_trail]
    assert states == [MoveState.CHECKING, MoveState.CONSUME_TRAP, MoveState.CHECKING, MoveState.ARRIVED]
    # walking back over the same tile costs nothing
    s.do_action(LEFT)
    s.do_action(RIGHT)
    assert s.player.hp == 2


def test_key_pickup_is_free(make_session):
    s = make_session(_with(OPEN, 5, 2, "k"), START, key_ids={(5, 2): "key-7"})
    assert s.do_action(RIGHT) is True
    assert s.player.position == (5, 2)
    assert s.player.keys == ["key-7"]
    assert s.player.hp == 3
    assert s.maze.cell(5, 2) == PATH


def test_portal_without_key_is_refused(make_session):
    rows = _with(_with(OPEN, 5, 2, "O"), 1, 5, "O")
    s = make_session(rows, START)
    assert s.do_action(RIGHT) is False
    assert s.player.position == START
    assert s.player.hp == 3
    assert s.player.steps == 0


def test_portal_with_key_lands_next_to_linked_portal(make_session):
    rows = _with(_with(OPEN, 5, 2, "O"), 1, 5, "O")
    for seed in range(8):
        s = make_session(rows, START, rng_seed=seed)
        s.player.add_key("key-1")
        assert s.do_action(RIGHT) is True
        assert s.player.position in {(1, 4), (2, 5)}
        assert s.player.position != (1, 5)
        assert s.maze.cell(*START) == TAKEN_PATH
        assert s.player.steps == 1


def test_wrong_key_does_not_open_portal(make_session):
    rows = _with(_with(OPEN, 5, 2, "O"), 1, 5, "O")
    s = make_session(rows, START)
    s.player.add_key("key-2")
    assert s.do_action(RIGHT) is False
    assert s.player.position == START


def test_single_member_group_cannot_teleport(make_session):
    s = make_session(_with(OPEN, 5, 2, "O"), START)
    s.player.add_key("key-1")
    assert s.do_action(RIGHT) is False
    assert s.player.position == START
    assert s.resolver.last_trail[-1] == (MoveState.BLOCKED, (5, 2))


def test_portals_in_other_groups_are_not_linked(make_session):
    rows = _with(_with(OPEN, 5, 2, "O"), 1, 5, "O")
    links = {(5, 2): ("portal-1", "key-1"), (1, 5): ("portal-2", "key-1")}
    s = make_session(rows, START, portal_links=links)
    s.player.add_key("key-1")
    assert s.do_action(RIGHT) is False


def test_walled_in_destination_fails_without_damage(make_session):
    rows = [
        "#######",
        "#.....#",
        "#.###.#",
        "#.#O#.#",
        "#.###.#",
        "#.O...#",
        "#######",
    ]
    s = make_session(rows, START)
    s.player.add_key("key-1")
    assert s.do_action(RIGHT) is False
    assert s.player.position == START
    assert s.player.hp == 3


def test_portal_loop_terminates():
    # the only exit of the destination portal is the portal being entered
    rows = [
        "#######",
        "#.....#",
        "#.###.#",
        "#.#...#",
        "##O#..#",
        "#.O...#",
        "#######",
    ]
    maze = Maze.from_rows(rows, start=START)
    player = Player("bob", *START)
    player.add_key("key-1")
    resolver = MovementResolver(maze, player, random.Random(0))
    assert resolver.resolve(START, (5, 2)) is False
    assert player.position == START
    assert (MoveState.BLOCKED, (5, 2)) in resolver.last_trail


def test_teleport_exit_onto_trap_fires_it(make_session):
    rows = [
        "#######",
        "#.....#",
        "#.###.#",
        "#.#O^##",
        "#.#####",
        "#.O...#",
        "#######",
    ]
    s = make_session(rows, START)
    s.player.add_key("key-1")
    assert s.do_action(RIGHT) is True
    assert s.player.position == (3, 4)
    assert s.player.hp == 2
    assert s.maze.cell(3, 4) == PATH


def test_break_wall_opens_interior_walls_only():
    maze = Maze.from_rows(OPEN, start=START)
    resolver = MovementResolver(maze, Player("bob", *START), random.Random(0))
    assert resolver.break_wall((2, 2)) is True
    assert maze.cell(2, 2) == PATH
    assert resolver.break_wall((0, 3)) is False
    assert maze.cell(0, 3) == WALL
    assert resolver.break_wall((6, 3)) is False
    # an interior non-wall target still counts as a successful use
    assert resolver.break_wall((1, 1)) is True
    assert maze.cell(1, 1) == PATH


def test_trap_tile_is_consumed(make_session):
    s = make_session(_with(OPEN, 4, 1, "^"), START)
    s.do_action(UP)
    assert s.maze.cell(4, 1) == PATH
    assert s.maze.count(TRAP) == 0


@pytest.mark.parametrize("direction,target", [(DOWN, (6, 1)), (LEFT, (5, 0))])
def test_every_border_side_bumps(make_session, direction, target):
    s = make_session(OPEN, START)
    assert s.do_action(direction) is False
    assert s.player.hp == 2
    assert s.maze.cell(*target) == WALL
