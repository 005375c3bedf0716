# Tile constants centralized for modular imports
WALL = "#"
PATH = "."
TAKEN_PATH = ":"  # path the player has already walked off
TRAP = "^"
TREASURE = "$"

# Tiles a player can stand on without any interaction
WALKABLE = (PATH, TAKEN_PATH, TREASURE)

_NAMES = {
    WALL: "wall",
    PATH: "path",
    TAKEN_PATH: "taken_path",
    TRAP: "trap",
    TREASURE: "treasure",
    "O": "portal",
    "k": "key",
}


def char_to_type(ch: str) -> str:
    return _NAMES.get(ch, "unknown")


__all__ = ["WALL", "PATH", "TAKEN_PATH", "TRAP", "TREASURE", "WALKABLE", "char_to_type"]
