"""Save/restore of games in progress."""

from .player_file import PlayerData, PlayerDataFile
from .records import SAVE_FORMAT_VERSION, SavedGame
from .repository import GameRepository

__all__ = ["GameRepository", "PlayerData", "PlayerDataFile", "SAVE_FORMAT_VERSION", "SavedGame"]
