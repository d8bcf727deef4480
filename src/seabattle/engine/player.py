"""Human and computer participants."""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from .board import DEFAULT_BOARD_SIZE, Board
from .ship import Coordinate

COMPUTER_NICKNAME = "Computer"


@dataclass
class Player:
    """A participant, its own board, and how many enemy ships it has sunk."""

    nickname: str
    board: Board = field(default_factory=Board)
    sunk_ships_count: int = 0

    def __post_init__(self) -> None:
        if self.board.owner == "unknown":
            self.board.owner = self.nickname

    def has_lost(self) -> bool:
        return self.board.all_ships_sunk()

    def increment_sunk_ships(self) -> None:
        self.sunk_ships_count += 1

    def reset(self) -> None:
        self.board.reset()
        self.sunk_ships_count = 0


@dataclass
class ComputerPlayer(Player):
    """Computer opponent with a pool of coordinates it has not fired at yet.

    The pool is part of the saved game; the random source is not and has to be
    handed back in after a load.
    """

    nickname: str = COMPUTER_NICKNAME
    available_shots: list[Coordinate] | None = None
    rng: random.Random = field(default_factory=random.Random, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.available_shots is None:
            self.available_shots = self._all_coordinates()

    @classmethod
    def with_board_size(cls, size: int = DEFAULT_BOARD_SIZE, rng: random.Random | None = None) -> "ComputerPlayer":
        return cls(board=Board(size=size), rng=rng or random.Random())

    def next_shot(self) -> Coordinate | None:
        """Draw (and remove) a random coordinate from the untried pool."""
        if not self.available_shots:
            return None
        return self.available_shots.pop(self.rng.randrange(len(self.available_shots)))

    def mark_shot_taken(self, coord: Coordinate) -> None:
        if coord in self.available_shots:
            self.available_shots.remove(coord)

    def is_shot_available(self, coord: Coordinate) -> bool:
        return coord in self.available_shots

    def reset(self) -> None:
        super().reset()
        self.available_shots = self._all_coordinates()

    def _all_coordinates(self) -> list[Coordinate]:
        return list(self.board.coordinates())
