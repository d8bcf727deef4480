"""Lifecycle and shot-outcome enums shared by the engine and its callers."""

from __future__ import annotations

from enum import Enum


class GameStatus(Enum):
    """High-level lifecycle of a match."""

    SETUP = "setup"
    PLAYING = "playing"
    PLAYER_WON = "player_won"
    COMPUTER_WON = "computer_won"

    @property
    def is_finished(self) -> bool:
        return self in (GameStatus.PLAYER_WON, GameStatus.COMPUTER_WON)


class ShotResult(Enum):
    """What the caller learns from a shot request."""

    WATER = "water"
    HIT = "hit"
    SUNK = "sunk"
    INVALID = "invalid"
