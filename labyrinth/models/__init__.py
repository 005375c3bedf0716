from .player import Player, PlayerSnapshot  # noqa: F401

__all__ = ["Player", "PlayerSnapshot"]
