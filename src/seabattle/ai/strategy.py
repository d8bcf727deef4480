"""Targeting strategy contract for the computer player."""

from __future__ import annotations

from abc import ABC, abstractmethod

from seabattle.engine.board import Board
from seabattle.engine.ship import Coordinate


class TargetingStrategy(ABC):
    """Chooses where the computer fires next and learns from the outcome."""

    @abstractmethod
    def select_target(self, opponent_board: Board) -> Coordinate | None:
        """Return the next coordinate to fire at, or None when nothing is left."""

    @abstractmethod
    def update_strategy(self, last_shot: Coordinate, was_hit: bool) -> None:
        """Record the outcome of the shot fired at ``last_shot``."""

    @abstractmethod
    def reset(self) -> None:
        """Forget everything learned during the current game."""
