import os
from dataclasses import dataclass, field
from typing import Optional

from ..errors import ConfigError

DEFAULT_SIZE = 49


def _env_int(name: str, default):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass
class MazeConfig:
    size: int = DEFAULT_SIZE
    seed: Optional[int] = None
    trap_ratio: float = 0.33
    portal_groups: int = 1
    portals_per_group: int = 4
    starting_hp: int = 3
    starting_ability_count: int = 2
    jump_distance: int = 2
    move_count: int = 1
    # Renderer only; the engine never reads it
    vision_radius: Optional[int] = None
    placement_attempts: int = 10_000
    leaderboard_path: str = field(default_factory=lambda: os.path.join("instance", "leaderboard.txt"))

    def __post_init__(self):
        if self.vision_radius is None:
            self.vision_radius = max(1, self.size // 10)

    @property
    def trap_count(self) -> int:
        return int(self.size * self.trap_ratio)

    @property
    def start(self):
        return (self.size - 2, 1)

    def validate(self) -> "MazeConfig":
        if self.size < 5:
            raise ConfigError("size", "must be at least 5")
        if not 0 <= self.trap_ratio < 1:
            raise ConfigError("trap_ratio", "must be in [0, 1)")
        if self.portal_groups < 0 or self.portals_per_group < 0:
            raise ConfigError("portals", "counts must not be negative")
        if self.starting_hp <= 0:
            raise ConfigError("starting_hp", "must be positive")
        if self.starting_ability_count < 0:
            raise ConfigError("starting_ability_count", "must not be negative")
        if self.jump_distance < 1 or self.move_count < 1:
            raise ConfigError("jump_distance", "distances must be at least 1")
        if self.placement_attempts < 1:
            raise ConfigError("placement_attempts", "must be at least 1")
        return self

    @classmethod
    def from_env(cls, **overrides) -> "MazeConfig":
        """Build a config from ``LABYRINTH_*`` variables; keyword overrides win."""
        values = dict(
            size=_env_int("LABYRINTH_MAZE_SIZE", DEFAULT_SIZE),
            seed=_env_int("LABYRINTH_SEED", None),
            trap_ratio=_env_float("LABYRINTH_TRAP_RATIO", 0.33),
            portal_groups=_env_int("LABYRINTH_PORTAL_GROUPS", 1),
            portals_per_group=_env_int("LABYRINTH_PORTALS_PER_GROUP", 4),
            starting_hp=_env_int("LABYRINTH_STARTING_HP", 3),
            starting_ability_count=_env_int("LABYRINTH_ABILITY_COUNT", 2),
            jump_distance=_env_int("LABYRINTH_JUMP_DISTANCE", 2),
            vision_radius=_env_int("LABYRINTH_VISION_RADIUS", None),
        )
        leaderboard = os.getenv("LABYRINTH_LEADERBOARD")
        if leaderboard:
            values["leaderboard_path"] = leaderboard
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values).validate()


__all__ = ["MazeConfig", "DEFAULT_SIZE"]
