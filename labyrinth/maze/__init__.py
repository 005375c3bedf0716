"""Public maze package interface."""

from .cells import Key, Portal  # noqa: F401
from .config import MazeConfig  # noqa: F401
from .maze import Maze  # noqa: F401
from .movement import DIRECTIONS, DOWN, LEFT, RIGHT, UP, MoveState, MovementResolver  # noqa: F401
from .tiles import PATH, TAKEN_PATH, TRAP, TREASURE, WALL  # noqa: F401

__all__ = [
    "Maze",
    "MazeConfig",
    "MovementResolver",
    "MoveState",
    "Portal",
    "Key",
    "WALL",
    "PATH",
    "TAKEN_PATH",
    "TRAP",
    "TREASURE",
    "DIRECTIONS",
    "LEFT",
    "RIGHT",
    "UP",
    "DOWN",
]
