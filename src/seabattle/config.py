"""Game settings loaded from the environment."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field


class SeaBattleSettings(BaseModel):
    """Runtime knobs for a game session."""

    save_dir: Path = Field(default_factory=Path.cwd)
    save_file_name: str = "seabattle_save.json"
    player_file_name: str = "player_data.txt"
    board_size: int = Field(default=10, ge=1)
    placement_attempts: int = Field(default=1000, ge=1)
    computer_turn_delay: float = Field(default=1.0, ge=0.0)
    computer_followup_delay: float = Field(default=1.0, ge=0.0)
    rng_seed: int | None = None

    @property
    def save_path(self) -> Path:
        return self.save_dir / self.save_file_name

    @property
    def player_file_path(self) -> Path:
        return self.save_dir / self.player_file_name

    @classmethod
    def from_env(cls, **overrides: Any) -> "SeaBattleSettings":
        """Construct settings from `SEABATTLE_*` env vars; overrides win."""

        data: Dict[str, Any] = {}
        env_fields = {
            "save_dir": "SEABATTLE_SAVE_DIR",
            "save_file_name": "SEABATTLE_SAVE_FILE",
            "player_file_name": "SEABATTLE_PLAYER_FILE",
            "board_size": "SEABATTLE_BOARD_SIZE",
            "placement_attempts": "SEABATTLE_PLACEMENT_ATTEMPTS",
            "computer_turn_delay": "SEABATTLE_COMPUTER_TURN_DELAY",
            "computer_followup_delay": "SEABATTLE_COMPUTER_FOLLOWUP_DELAY",
            "rng_seed": "SEABATTLE_RNG_SEED",
        }
        for field, env_name in env_fields.items():
            value = os.getenv(env_name)
            if value is not None and value.strip():
                data[field] = value.strip()
        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**data)


@lru_cache(maxsize=1)
def load_settings() -> SeaBattleSettings:
    """Load and cache settings from the environment."""

    return SeaBattleSettings.from_env()
