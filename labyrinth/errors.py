"""Exception types raised by the engine.

Gameplay conditions (walls, missing keys, blocked portals) are never errors;
these cover misconfiguration and leaderboard I/O only.
"""

from __future__ import annotations


class LabyrinthError(Exception):
    """Base class for engine errors."""


class ConfigError(LabyrinthError):
    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class PlacementError(LabyrinthError):
    """Rejection sampling ran out of attempts for an entity."""

    def __init__(self, kind: str, attempts: int, placed: int = 0):
        super().__init__(f"could not place {kind} after {attempts} attempts ({placed} placed)")
        self.kind = kind
        self.attempts = attempts
        self.placed = placed


class LeaderboardError(LabyrinthError):
    def __init__(self, path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message
