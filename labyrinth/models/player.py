"""Player state for a single run.

HP only goes down, steps only go up, ability charges are consumed and never
replenished, and keys are append-only. A fresh ``Player`` is created for
every new game; nothing here is global.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class PlayerSnapshot:
    username: str
    x: int
    y: int
    hp: int
    steps: int
    jump_ability_count: int
    wall_break_ability_count: int
    keys: Tuple[str, ...]

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)


class Player:
    def __init__(
        self,
        username: str,
        x: int,
        y: int,
        hp: int = 3,
        jump_ability_count: int = 2,
        wall_break_ability_count: int = 2,
        steps: int = 0,
        keys: Optional[List[str]] = None,
    ):
        self._username = username
        self.x = x
        self.y = y
        self.hp = hp
        self.steps = steps
        self.jump_ability_count = max(0, jump_ability_count)
        self.wall_break_ability_count = max(0, wall_break_ability_count)
        self.keys: List[str] = list(keys or [])

    @classmethod
    def new(cls, username: str, config, start=None) -> "Player":
        x, y = start or config.start
        return cls(
            username,
            x,
            y,
            hp=config.starting_hp,
            jump_ability_count=config.starting_ability_count,
            wall_break_ability_count=config.starting_ability_count,
        )

    @property
    def username(self) -> str:
        return self._username

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    def move_to(self, x: int, y: int) -> None:
        self.x, self.y = x, y
        self.steps += 1

    def damage(self, amount: int = 1) -> int:
        self.hp -= amount
        return self.hp

    def add_key(self, key_id: str) -> None:
        self.keys.append(key_id)

    def has_key(self, key_id: str) -> bool:
        return key_id in self.keys

    def use_jump(self) -> bool:
        if self.jump_ability_count <= 0:
            return False
        self.jump_ability_count -= 1
        return True

    def use_wall_break(self) -> bool:
        if self.wall_break_ability_count <= 0:
            return False
        self.wall_break_ability_count -= 1
        return True

    def snapshot(self) -> PlayerSnapshot:
        return PlayerSnapshot(
            username=self.username,
            x=self.x,
            y=self.y,
            hp=self.hp,
            steps=self.steps,
            jump_ability_count=self.jump_ability_count,
            wall_break_ability_count=self.wall_break_ability_count,
            keys=tuple(self.keys),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "username": self.username,
            "pos": [self.x, self.y],
            "hp": self.hp,
            "steps": self.steps,
            "jump_ability_count": self.jump_ability_count,
            "wall_break_ability_count": self.wall_break_ability_count,
            "keys": list(self.keys),
        }

    def __repr__(self):
        return f"Player({self.username!r}, pos={self.position}, hp={self.hp}, steps={self.steps})"
