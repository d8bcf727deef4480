"""File-backed storage for the game in progress."""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from seabattle.config import SeaBattleSettings
from seabattle.engine.player import ComputerPlayer, Player
from seabattle.engine.states import GameStatus
from seabattle.telemetry import get_meter, get_tracer

from .player_file import PlayerDataFile
from .records import SavedGame

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.persistence")
meter = get_meter("seabattle.persistence")

SAVE_COUNTER = meter.create_counter(
    "seabattle_persistence_saves",
    unit="1",
    description="Game saves attempted",
)

LOAD_COUNTER = meter.create_counter(
    "seabattle_persistence_loads",
    unit="1",
    description="Game loads attempted",
)


class GameRepository:
    """Writes the full game as JSON and mirrors the player summary as text."""

    def __init__(self, save_path: Path, player_file: PlayerDataFile) -> None:
        self._save_path = save_path
        self._player_file = player_file

    @classmethod
    def from_settings(cls, settings: SeaBattleSettings) -> "GameRepository":
        return cls(settings.save_path, PlayerDataFile(settings.player_file_path))

    @property
    def save_path(self) -> Path:
        return self._save_path

    @property
    def player_file(self) -> PlayerDataFile:
        return self._player_file

    def save_game(
        self,
        human: Player,
        computer: ComputerPlayer,
        status: GameStatus,
        is_player_turn: bool,
    ) -> bool:
        """Persist the game; failures are logged and reported as False."""
        with tracer.start_as_current_span("repository.save_game") as span:
            span.set_attribute("game.status", status.value)
            payload = SavedGame.capture(human, computer, status, is_player_turn)
            try:
                self._write_atomically(payload.model_dump_json(indent=2))
                self._player_file.save(human.nickname, human.sunk_ships_count)
            except OSError:
                SAVE_COUNTER.add(1, attributes={"result": "failed"})
                logger.exception("game_save_failed", extra={"path": str(self._save_path)})
                return False
            SAVE_COUNTER.add(1, attributes={"result": "success"})
            logger.debug(
                "game_saved",
                extra={
                    "path": str(self._save_path),
                    "status": status.value,
                    "is_player_turn": is_player_turn,
                },
            )
            return True

    def load_game(self) -> SavedGame | None:
        """Return the saved game, or None if there is none or it cannot be read."""
        with tracer.start_as_current_span("repository.load_game") as span:
            if not self._save_path.exists():
                LOAD_COUNTER.add(1, attributes={"result": "missing"})
                span.set_attribute("load.result", "missing")
                return None
            try:
                raw = self._save_path.read_text(encoding="utf-8")
                saved = SavedGame.model_validate_json(raw)
                # Rebuild once so inconsistent boards are rejected here, not mid-game.
                saved.restore()
            except (OSError, ValidationError, ValueError) as exc:
                LOAD_COUNTER.add(1, attributes={"result": "unreadable"})
                span.set_attribute("load.result", "unreadable")
                logger.warning(
                    "save_unreadable",
                    extra={"path": str(self._save_path), "error": str(exc)},
                )
                return None
            LOAD_COUNTER.add(1, attributes={"result": "success"})
            span.set_attribute("load.result", "success")
            return saved

    def has_saved_game(self) -> bool:
        return self._save_path.exists()

    def delete_saved_game(self) -> None:
        try:
            self._save_path.unlink(missing_ok=True)
            self._player_file.delete()
        except OSError:
            logger.exception("game_delete_failed", extra={"path": str(self._save_path)})
            return
        logger.debug("game_save_deleted", extra={"path": str(self._save_path)})

    def _write_atomically(self, text: str) -> None:
        self._save_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._save_path.parent, prefix=f".{self._save_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_name, self._save_path)
        except OSError:
            Path(tmp_name).unlink(missing_ok=True)
            raise
