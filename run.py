"""Labyrinth CLI entry point.

Provides subcommands for playing a game in the terminal, printing the
leaderboard and dumping generated mazes. Accepts configuration via flags and
LABYRINTH_* environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

from labyrinth import __version__  # noqa: E402


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Labyrinth

    Find the treasure in a procedurally generated perfect maze while dodging
    traps, collecting portal keys and rationing jump / wall-break abilities.
    Configuration can be provided via CLI flags or environment variables. If
    both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          LABYRINTH_MAZE_SIZE        Grid size (default: 49)
          LABYRINTH_SEED             Fixed generation seed (default: random)
          LABYRINTH_TRAP_RATIO       Traps per grid row (default: 0.33)
          LABYRINTH_STARTING_HP      Starting HP (default: 3)
          LABYRINTH_ABILITY_COUNT    Jump / wall-break charges (default: 2)
          LABYRINTH_LEADERBOARD      Leaderboard file (default: instance/leaderboard.txt)
          LABYRINTH_LOG_LEVEL        debug|info|warn|error (default: info)
          LABYRINTH_LOG_JSON         1 to emit JSON log lines

        Examples:
          # Play with a random maze
          python run.py play

          # Replay a fixed maze
          python run.py play --seed 1234 --username alice

          # Print a maze and its structural diagnostics
          python run.py generate --seed 7 --size 21 --check

          # Load variables from .env then show the leaderboard
          python run.py --env-file .env leaderboard
        """
    )

    parser = argparse.ArgumentParser(
        prog="Labyrinth",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Labyrinth {__version__}",
    )

    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["debug", "info", "warn", "error"],
        default=None,
        help="Override LABYRINTH_LOG_LEVEL",
    )

    subparsers = parser.add_subparsers(dest="command")

    # play subcommand
    play_parser = subparsers.add_parser(
        "play",
        help="Play a game in the terminal",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a maze and play it with w/a/s/d, j (jump), g (wall-break), q (give up).",
    )
    play_parser.add_argument("--username", default=None, help="Player name (prompted if omitted)")
    play_parser.add_argument("--seed", type=int, default=None, help="Generation seed (default: env or random)")
    play_parser.add_argument("--size", type=int, default=None, help="Grid size (default: env or 49)")
    play_parser.set_defaults(command="play")

    # leaderboard subcommand
    lb_parser = subparsers.add_parser(
        "leaderboard",
        help="Print the leaderboard",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    lb_parser.add_argument("--path", default=None, help="Leaderboard file (default: env or instance/leaderboard.txt)")
    lb_parser.set_defaults(command="leaderboard")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Print a generated maze",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a maze and print it as text (one row per line).",
    )
    gen_parser.add_argument("--seed", type=int, default=None, help="Generation seed")
    gen_parser.add_argument("--size", type=int, default=None, help="Grid size")
    gen_parser.add_argument(
        "--check",
        action="store_true",
        help="Print structural diagnostics as JSON; exit 1 if the maze is not perfect",
    )
    gen_parser.set_defaults(command="generate")

    # If no subcommand provided, default to play
    if len(argv) == 0:
        argv = ["play"]

    args = parser.parse_args(argv)
    return args


def _generate(args, config) -> int:
    from labyrinth.maze import Maze
    from labyrinth.maze.diagnostics import analyze

    maze = Maze(config)
    print("\n".join(maze.to_rows()))
    if not args.check:
        return 0
    res = analyze(maze)
    report = {
        "seed": maze.seed,
        "size": maze.size,
        "reachable": res["reachable"],
        "edges": res["edges"],
        "is_tree": res["is_tree"],
        "unreachable": len(res["unreachable"]),
        "border_breaches": len(res["border_breaches"]),
        "pillar_breaches": len(res["pillar_breaches"]),
        "ok": res["ok"],
    }
    print(json.dumps(report, indent=2))
    return 0 if res["ok"] else 1


def main(argv: list[str]) -> int:
    # Load .env if requested, otherwise the default .env if present
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file, override=True)
    else:
        load_dotenv()

    from labyrinth import logging_utils
    from labyrinth.errors import ConfigError, PlacementError
    from labyrinth.maze import MazeConfig

    if args.log_level:
        logging_utils.configure(level=args.log_level)

    def handle_sigint(sig, frame):
        print("\n[INFO] Leaving the labyrinth...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    mode = (getattr(args, "command", None) or "play").lower()

    try:
        config = MazeConfig.from_env(seed=getattr(args, "seed", None), size=getattr(args, "size", None))
    except ConfigError as e:
        print(f"[ERROR] Invalid configuration: {e}")
        return 1

    if mode == "leaderboard":
        from labyrinth.terminal import show_leaderboard

        return show_leaderboard(getattr(args, "path", None) or config.leaderboard_path)

    if mode == "generate":
        try:
            return _generate(args, config)
        except PlacementError as e:
            print(f"[ERROR] {e}")
            return 1

    # Startup banner
    title = f"{Fore.CYAN}{Style.BRIGHT}Labyrinth{Style.RESET_ALL}" if _COLOR_ENABLED else "Labyrinth"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val: str | int) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [
        divider,
        f"  {title}",
        divider,
        f"  {label('Size:'):12} {value(config.size)}",
        f"  {label('Seed:'):12} {value(config.seed if config.seed is not None else 'random')}",
        f"  {label('HP:'):12} {value(config.starting_hp)}",
        f"  {label('Abilities:'):12} {value(config.starting_ability_count)}",
        f"  {label('Leaderboard:'):12} {value(os.path.normpath(config.leaderboard_path))}",
        divider,
        "",
    ]
    print("\n".join(lines))

    from labyrinth.terminal import start_game

    try:
        return start_game(config, getattr(args, "username", None), color=_COLOR_ENABLED)
    except PlacementError as e:
        print(f"[ERROR] {e}")
        return 1


def cli() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(cli())
