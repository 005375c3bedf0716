"""
project: Labyrinth
module: terminal.py
License: MIT

Line-oriented terminal front end.

Renders the maze as text with limited vision, turns typed commands into
session calls, and prints observer / mode-toggle notifications. All game
rules live in ``GameSession``; this module only presents them.
"""

from __future__ import annotations

import sys
from typing import Callable, Iterable, List, Optional

from colorama import Fore, Style

from .errors import LeaderboardError
from .maze import DIRECTIONS, Maze
from .maze.cells import Key, Portal, cell_char
from .maze.perception import is_visible, vision_limited
from .maze.tiles import PATH, TAKEN_PATH, TRAP, TREASURE, WALL
from .models.player import PlayerSnapshot
from .services.leaderboard import LeaderboardFile, format_table
from .services.session import WON, GameSession

HIDDEN = "?"
PLAYER = "@"

KEYMAP = {"w": "up", "a": "left", "s": "down", "d": "right"}

HELP = """Inputs:
  w / a / s / d   move up / left / down / right
  j               toggle jump mode (next move skips one tile)
  g               toggle wall-break mode (next direction opens a wall)
  q               give up
  h               show this help
Rules:
  Find the treasure ($) as fast as possible in as few steps as possible.
  Walls (#) and traps (^) cost 1 HP. A portal (O) works once you hold its key (k).
  Vision is limited after the first step; the clock starts immediately."""

_COLORS = {
    WALL: Fore.WHITE + Style.DIM,
    PATH: "",
    TAKEN_PATH: Fore.MAGENTA,
    TRAP: Fore.RED,
    TREASURE: Fore.YELLOW + Style.BRIGHT,
    Portal.char: Fore.CYAN + Style.BRIGHT,
    Key.char: Fore.YELLOW,
    PLAYER: Fore.GREEN + Style.BRIGHT,
}


def render_rows(
    maze: Maze,
    player: Optional[PlayerSnapshot] = None,
    *,
    limited: bool = False,
    radius: int = 4,
    color: bool = False,
) -> List[str]:
    rows = []
    for x in range(maze.size):
        chars = []
        for y in range(maze.size):
            if player is not None and (x, y) == player.position:
                ch = PLAYER
            elif limited and player is not None and not is_visible(player.position, (x, y), radius):
                ch = HIDDEN
            else:
                ch = cell_char(maze.cell(x, y))
            if color and _COLORS.get(ch):
                ch = f"{_COLORS[ch]}{ch}{Style.RESET_ALL}"
            chars.append(ch)
        rows.append("".join(chars))
    return rows


def status_line(snap: PlayerSnapshot, elapsed: int) -> str:
    keys = ",".join(snap.keys) or "-"
    return (
        f"HP {snap.hp} | steps {snap.steps} | jump {snap.jump_ability_count} | "
        f"wall-break {snap.wall_break_ability_count} | keys {keys} | {elapsed} s"
    )


class _ModePrinter:
    def __init__(self, out: Callable[[str], None]):
        self.out = out

    def on_jump_mode_toggled(self, active: bool) -> None:
        self.out(f"Jump mode {'ON' if active else 'OFF'}")

    def on_wall_break_mode_toggled(self, active: bool) -> None:
        self.out(f"Wall-break mode {'ON' if active else 'OFF'}")


def play(
    session: GameSession,
    commands: Iterable[str],
    out: Callable[[str], None] = print,
    color: bool = False,
) -> GameSession:
    """Drive ``session`` from an iterable of command strings until the game ends.

    Running out of commands counts as giving up.
    """
    elapsed = {"s": 0}
    session.start_ticker(lambda s: elapsed.__setitem__("s", s))
    session.add_mode_listener(_ModePrinter(out))
    # the status line shows the ticker value, as a clock label would
    session.register_observer(lambda snap: out(status_line(snap, elapsed["s"])))

    def draw():
        snap = session.player.snapshot()
        limited = vision_limited(snap.steps, session.game_over)
        for row in render_rows(session.maze, snap, limited=limited, radius=session.config.vision_radius, color=color):
            out(row)

    out(HELP)
    draw()
    try:
        for raw in commands:
            cmd = raw.strip().lower()
            if not cmd:
                continue
            if cmd in KEYMAP:
                session.do_action(DIRECTIONS[KEYMAP[cmd]])
                draw()
            elif cmd == "j":
                session.toggle_jump_mode()
            elif cmd == "g":
                session.toggle_wall_break_mode()
            elif cmd == "q":
                session.give_up()
            elif cmd == "h":
                out(HELP)
            else:
                out(f"Unknown command {cmd!r} (h for help)")
            if session.game_over:
                break
        if not session.game_over:
            session.give_up()
    finally:
        session.close()
    if session.last_message:
        out(session.last_message)
    return session


def _stdin_commands(prompt: str = "> "):
    while True:
        try:
            yield input(prompt)
        except EOFError:
            return


def start_game(config, username: Optional[str] = None, color: bool = False) -> int:  # pragma: no cover (interactive)
    if not username:
        try:
            username = input("Username: ").strip()
        except EOFError:
            return 1
    if not username:
        print("A username is required.", file=sys.stderr)
        return 1
    session = GameSession(username, config)
    play(session, _stdin_commands(), color=color)
    if session.outcome == WON:
        show_leaderboard(config.leaderboard_path)
    return 0


def show_leaderboard(path, out: Callable[[str], None] = print) -> int:
    try:
        records = LeaderboardFile(path).ranked()
    except LeaderboardError as e:
        out(f"[ERROR] Leaderboard unavailable: {e.message}")
        return 1
    out("Leaderboard")
    for line in format_table(records):
        out(line)
    return 0
