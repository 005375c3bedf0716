from typing import Tuple, Union

Coord = Tuple[int, int]


class Portal:
    """Teleport tile usable while holding ``key_id``.

    Portals sharing ``(group_id, key_id)`` form a link group; entering one
    sends the player next to another member of the group.
    """

    __slots__ = ("x", "y", "group_id", "key_id")
    char = "O"

    def __init__(self, x: int, y: int, group_id: str, key_id: str):
        self.x = x
        self.y = y
        self.group_id = group_id
        self.key_id = key_id

    @property
    def position(self) -> Coord:
        return (self.x, self.y)

    @property
    def link_key(self) -> Tuple[str, str]:
        return (self.group_id, self.key_id)

    def links_with(self, other: "Portal") -> bool:
        return self.link_key == other.link_key and self.position != other.position

    def __eq__(self, other):
        if not isinstance(other, Portal):
            return NotImplemented
        return self.link_key == other.link_key and self.position == other.position

    def __hash__(self):
        return hash((self.group_id, self.key_id, self.x, self.y))

    def __repr__(self):
        return f"Portal({self.x}, {self.y}, {self.group_id!r}, {self.key_id!r})"

    def to_dict(self):
        return {"type": "portal", "x": self.x, "y": self.y, "group_id": self.group_id, "key_id": self.key_id}


class Key:
    __slots__ = ("x", "y", "key_id")
    char = "k"

    def __init__(self, x: int, y: int, key_id: str):
        self.x = x
        self.y = y
        self.key_id = key_id

    @property
    def position(self) -> Coord:
        return (self.x, self.y)

    def __repr__(self):
        return f"Key({self.x}, {self.y}, {self.key_id!r})"

    def to_dict(self):
        return {"type": "key", "x": self.x, "y": self.y, "key_id": self.key_id}


# A grid cell holds either a tile character or one of the entities above
Cell = Union[str, Portal, Key]


def cell_char(cell: Cell) -> str:
    return cell if isinstance(cell, str) else cell.char
