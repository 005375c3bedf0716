"""
project: Labyrinth
module: __init__.py
License: MIT

Maze construction and turn-based game engine.

Configuration is sourced from environment variables (optionally via a local
`.env` file) with defaults suitable for a single-player terminal session.
Runtime data such as the leaderboard lives under `instance/`.
"""

from dotenv import load_dotenv

# Load .env if present so LABYRINTH_* settings can be supplied without
# exporting shell variables during development.
load_dotenv()

__version__ = "0.4.0"

__all__ = ["__version__"]
