"""
project: Labyrinth
module: services/session.py
License: MIT

Game session: one maze, one player, one run.

The session owns all mutable game state and is the only object front ends
talk to. Every directional input becomes a ``do_action`` call which is
resolved to completion (including trap/key/portal chaining) before it
returns. After each resolved action observers receive a player snapshot in
registration order, then the end-of-game check runs.

Mode listeners are told whenever jump mode or wall-break mode flips. At most
one of the two modes is active; turning one on turns the other off first.
"""

from __future__ import annotations

import random
import time
from typing import Callable, List, Optional, Protocol

from ..errors import LeaderboardError
from ..logging_utils import get_logger
from ..maze import Maze, MazeConfig, MovementResolver
from ..maze.cells import Coord
from ..maze.movement import step
from ..maze.tiles import TREASURE
from ..models.player import Player, PlayerSnapshot
from .leaderboard import LeaderboardFile, LeaderboardRecord
from .time_service import GameClock, Ticker

logger = get_logger("labyrinth.session")

WON = "won"
LOST = "lost"

Observer = Callable[[PlayerSnapshot], None]


class ModeListener(Protocol):
    def on_jump_mode_toggled(self, active: bool) -> None: ...

    def on_wall_break_mode_toggled(self, active: bool) -> None: ...


class GameSession:
    def __init__(
        self,
        username: str,
        config: MazeConfig | None = None,
        *,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
        leaderboard: LeaderboardFile | None = None,
        maze: Maze | None = None,
    ):
        self.config = config or MazeConfig.from_env()
        if maze is None:
            maze = Maze(self.config)
        self.maze = maze
        # Movement randomness (teleport picks) is seeded from the maze so a
        # seeded game replays identically
        self._rng = rng or random.Random(maze.seed)
        self.player = Player.new(username, self.config, maze.start)
        self.resolver = MovementResolver(self.maze, self.player, self._rng)
        self.leaderboard = leaderboard or LeaderboardFile(self.config.leaderboard_path)
        self.clock = GameClock(clock)
        self._log = logger.bind(seed=maze.seed, username=username)

        self.jump_mode = False
        self.wall_break_mode = False
        self.game_over = False
        self.outcome: Optional[str] = None
        self.final_time: Optional[int] = None
        self.leaderboard_updated = False
        self.last_message: Optional[str] = None

        self._observers: List[Observer] = []
        self._mode_listeners: List[ModeListener] = []
        self._ticker: Optional[Ticker] = None

    # ------------------------------------------------------------------
    # Observers & listeners
    # ------------------------------------------------------------------
    def register_observer(self, observer: Observer) -> None:
        self._observers.append(observer)

    def remove_observer(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def add_mode_listener(self, listener: ModeListener) -> None:
        self._mode_listeners.append(listener)

    def remove_mode_listener(self, listener: ModeListener) -> None:
        if listener in self._mode_listeners:
            self._mode_listeners.remove(listener)

    def _notify_observers(self) -> None:
        snap = self.player.snapshot()
        for observer in list(self._observers):
            observer(snap)

    def _set_jump_mode(self, active: bool) -> None:
        self.jump_mode = active
        for listener in list(self._mode_listeners):
            listener.on_jump_mode_toggled(active)

    def _set_wall_break_mode(self, active: bool) -> None:
        self.wall_break_mode = active
        for listener in list(self._mode_listeners):
            listener.on_wall_break_mode_toggled(active)

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------
    def toggle_jump_mode(self) -> bool:
        """Flip jump mode if a charge remains; returns the resulting state."""
        if self.player.jump_ability_count > 0:
            if self.wall_break_mode:
                self._set_wall_break_mode(False)
            self._set_jump_mode(not self.jump_mode)
        return self.jump_mode

    def toggle_wall_break_mode(self) -> bool:
        if self.player.wall_break_ability_count > 0:
            if self.jump_mode:
                self._set_jump_mode(False)
            self._set_wall_break_mode(not self.wall_break_mode)
        return self.wall_break_mode

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def do_action(self, direction: Coord, move_count: int | None = None, jump_distance: int | None = None) -> bool:
        """Resolve one directional input under the current mode.

        Returns whether the action succeeded (player moved, or a wall-break
        landed on an interior tile). Inputs after game over are ignored.
        """
        if self.game_over:
            return False
        move_count = self.config.move_count if move_count is None else move_count
        jump_distance = self.config.jump_distance if jump_distance is None else jump_distance
        origin = self.player.position

        if self.jump_mode:
            if not self.player.use_jump():
                self._set_jump_mode(False)
                return False
            ok = self.resolver.resolve(origin, step(origin, direction, jump_distance))
            self._set_jump_mode(False)
        elif self.wall_break_mode:
            if not self.player.use_wall_break():
                self._set_wall_break_mode(False)
                return False
            ok = self.resolver.break_wall(step(origin, direction, move_count))
            self._set_wall_break_mode(False)
        else:
            ok = self.resolver.resolve(origin, step(origin, direction, move_count))

        self._notify_observers()
        self.check_game_condition()
        return ok

    def give_up(self) -> None:
        if self.game_over:
            return
        self._finish(LOST, reason="gave_up")

    # ------------------------------------------------------------------
    # End of game
    # ------------------------------------------------------------------
    def check_game_condition(self) -> Optional[str]:
        if self.game_over:
            return self.outcome
        if self.player.hp <= 0:
            self._finish(LOST, reason="hp")
        elif self.maze.cell(*self.player.position) == TREASURE:
            self._finish(WON, reason="treasure")
        return self.outcome

    def _finish(self, outcome: str, reason: str) -> None:
        self.game_over = True
        self.outcome = outcome
        self.final_time = self.clock.freeze()
        self.stop_ticker()
        self._log.info(
            event="game_over",
            outcome=outcome,
            reason=reason,
            steps=self.player.steps,
            time=self.final_time,
            pos=self.player.position,
        )
        if outcome == WON:
            self.last_message = f"You found the treasure! You win!\n{self.player.steps} steps in {self.final_time} s"
            self._record_win()
        elif reason == "hp":
            self.last_message = f"Game over, you ran out of HP.\n{self.player.steps} steps in {self.final_time} s"
        else:
            self.last_message = f"You gave up.\n{self.player.steps} steps in {self.final_time} s"

    def _record_win(self) -> None:
        record = LeaderboardRecord(self.player.username, self.player.steps, self.final_time)
        try:
            self.leaderboard_updated = self.leaderboard.submit(record)
        except LeaderboardError as e:
            self.last_message = f"{self.last_message}\nLeaderboard could not be updated: {e.message}"

    def elapsed_seconds(self) -> int:
        return self.clock.elapsed_seconds()

    # ------------------------------------------------------------------
    # Ticker
    # ------------------------------------------------------------------
    def start_ticker(self, callback: Callable[[int], None], interval: float = 1.0) -> Ticker:
        self.stop_ticker()
        self._ticker = Ticker(interval, callback, self.elapsed_seconds).start()
        return self._ticker

    def stop_ticker(self) -> None:
        if self._ticker is not None:
            self._ticker.stop()
            self._ticker = None

    def close(self) -> None:
        self.stop_ticker()

    def summary(self) -> dict:
        return {
            "player": self.player.to_dict(),
            "jump_mode": self.jump_mode,
            "wall_break_mode": self.wall_break_mode,
            "game_over": self.game_over,
            "outcome": self.outcome,
            "time": self.final_time if self.final_time is not None else self.elapsed_seconds(),
            "seed": self.maze.seed,
        }


__all__ = ["GameSession", "ModeListener", "Observer", "WON", "LOST"]
