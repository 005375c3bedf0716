"""Limited-vision helpers for front ends.

The engine itself never consults vision; renderers use these to decide which
tiles to draw. Vision is a square window of ``radius`` tiles around the
player, limited once the first step has been taken and lifted when the game
ends.
"""

from __future__ import annotations

from typing import Set

from .cells import Coord

__all__ = ["vision_limited", "is_visible", "visible_cells"]


def vision_limited(player_steps: int, game_over: bool) -> bool:
    return player_steps > 0 and not game_over


def is_visible(center: Coord, target: Coord, radius: int) -> bool:
    return abs(center[0] - target[0]) <= radius and abs(center[1] - target[1]) <= radius


def visible_cells(center: Coord, radius: int, size: int) -> Set[Coord]:
    cx, cy = center
    return {
        (x, y)
        for x in range(max(0, cx - radius), min(size, cx + radius + 1))
        for y in range(max(0, cy - radius), min(size, cy + radius + 1))
    }
