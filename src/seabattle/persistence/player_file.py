"""Two-line plain-text record of the human player's progress."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayerData:
    nickname: str
    sunk_ships_count: int


class PlayerDataFile:
    """Keeps ``nickname`` and ``sunk_ships_count`` readable without the full save."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def save(self, nickname: str, sunk_ships_count: int) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            handle.write(f"{nickname}\n{sunk_ships_count}\n")

    def load(self) -> PlayerData | None:
        try:
            with self._path.open("r", encoding="utf-8") as handle:
                lines = handle.read().splitlines()
        except OSError:
            return None
        if len(lines) < 2:
            logger.warning("player_file_truncated", extra={"path": str(self._path)})
            return None
        try:
            sunk = int(lines[1])
        except ValueError:
            logger.warning("player_file_bad_count", extra={"path": str(self._path)})
            return None
        return PlayerData(nickname=lines[0], sunk_ships_count=sunk)

    def delete(self) -> None:
        self._path.unlink(missing_ok=True)
