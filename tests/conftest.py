import os
import random
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from labyrinth.maze import Maze, MazeConfig  # noqa: E402
from labyrinth.services.leaderboard import LeaderboardFile  # noqa: E402
from labyrinth.services.session import GameSession  # noqa: E402


class FakeClock:
    """Manually advanced replacement for time.time."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for name in list(os.environ):
        if name.startswith("LABYRINTH_"):
            monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture()
def small_config(tmp_path):
    return MazeConfig(size=15, seed=1234, leaderboard_path=str(tmp_path / "leaderboard.txt"))


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def leaderboard(tmp_path):
    return LeaderboardFile(tmp_path / "leaderboard.txt")


@pytest.fixture()
def make_session(tmp_path, clock):
    """Build a session on a hand-written maze.

    make_session(rows, start=(x, y), username="alice", **maze_kwargs)
    """

    def _make(rows, start, username="alice", hp=3, abilities=2, rng_seed=0, **maze_kwargs):
        cfg = MazeConfig(
            size=len(rows),
            seed=0,
            starting_hp=hp,
            starting_ability_count=abilities,
            leaderboard_path=str(tmp_path / "leaderboard.txt"),
        )
        maze = Maze.from_rows(rows, start=start, config=cfg, **maze_kwargs)
        return GameSession(
            username,
            cfg,
            rng=random.Random(rng_seed),
            clock=clock,
            maze=maze,
        )

    return _make
