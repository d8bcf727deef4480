"""Hunt/target strategy with checkerboard hunting."""

from __future__ import annotations

import logging
import random
from enum import Enum

from seabattle.ai.strategy import TargetingStrategy
from seabattle.engine.board import DEFAULT_BOARD_SIZE, Board
from seabattle.engine.ship import Coordinate

logger = logging.getLogger(__name__)


class TargetingMode(Enum):
    HUNT = "hunt"
    TARGET = "target"


class HuntTargetStrategy(TargetingStrategy):
    """Sweep a checkerboard until something is hit, then work the neighbours.

    Ships are at least two cells long except for frigates, so the even-parity
    cells find every longer ship; once those run out the hunt falls back to
    the remaining cells.
    """

    def __init__(self, rng: random.Random | None = None, board_size: int = DEFAULT_BOARD_SIZE) -> None:
        self._rng = rng or random.Random()
        self._size = board_size
        self.mode = TargetingMode.HUNT
        self.available: set[Coordinate] = set()
        self.queue: list[Coordinate] = []
        self.reset()

    def reset(self) -> None:
        self.available = {Coordinate(x, y) for x in range(self._size) for y in range(self._size)}
        self.queue = []
        self.mode = TargetingMode.HUNT

    def select_target(self, opponent_board: Board) -> Coordinate | None:
        if not self.available and not self.queue:
            return None

        if self.mode is TargetingMode.TARGET:
            while self.queue:
                candidate = self.queue.pop(0)
                if candidate in self.available:
                    return candidate
            logger.debug("target_queue_exhausted")
            self.mode = TargetingMode.HUNT

        return self._hunt_target()

    def update_strategy(self, last_shot: Coordinate, was_hit: bool) -> None:
        self.available.discard(last_shot)
        if was_hit:
            self.mode = TargetingMode.TARGET
            for neighbour in last_shot.neighbours():
                if self._in_bounds(neighbour) and neighbour not in self.queue:
                    self.queue.append(neighbour)
        elif not self.queue:
            self.mode = TargetingMode.HUNT

    def _hunt_target(self) -> Coordinate | None:
        if not self.available:
            return None
        # Sorted so a seeded rng picks the same cell regardless of set order.
        candidates = sorted(
            (coord for coord in self.available if (coord.x + coord.y) % 2 == 0),
            key=lambda coord: (coord.x, coord.y),
        )
        if not candidates:
            candidates = sorted(self.available, key=lambda coord: (coord.x, coord.y))
        return self._rng.choice(candidates)

    def _in_bounds(self, coord: Coordinate) -> bool:
        return 0 <= coord.x < self._size and 0 <= coord.y < self._size
