"""Single-player board management for the SeaBattle engine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from seabattle.telemetry import get_meter, get_tracer

from .ship import Coordinate, Orientation, Ship

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.board")
meter = get_meter("seabattle.engine.board")

PLACEMENT_COUNTER = meter.create_counter(
    "seabattle_engine_ship_placements",
    unit="1",
    description="Number of attempted ship placements",
)

SHOT_COUNTER = meter.create_counter(
    "seabattle_engine_shots_received",
    unit="1",
    description="Shots received by a board",
)

DEFAULT_BOARD_SIZE = 10


class CellStatus(Enum):
    """Occupancy and shot state of a single cell."""

    EMPTY = "empty"
    SHIP = "ship"
    HIT = "hit"
    MISS = "miss"
    SUNK = "sunk"

    @property
    def is_shot(self) -> bool:
        return self in (CellStatus.HIT, CellStatus.MISS, CellStatus.SUNK)


@dataclass
class Cell:
    coordinate: Coordinate
    status: CellStatus = CellStatus.EMPTY


def _empty_grid(size: int) -> list[list[Cell]]:
    return [[Cell(Coordinate(x, y)) for y in range(size)] for x in range(size)]


@dataclass
class Board:
    """A size×size grid of cells plus the fleet placed on it."""

    size: int = DEFAULT_BOARD_SIZE
    owner: str = "unknown"
    ships: list[Ship] = field(default_factory=list)
    cells: list[list[Cell]] = field(init=False, repr=False)
    _ship_positions: dict[Coordinate, Ship] = field(init=False, repr=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.cells = _empty_grid(self.size)
        placed, self.ships = self.ships, []
        for ship in placed:
            if not self.place_ship(ship):
                raise ValueError(f"Cannot place {ship.ship_type.name} at {ship.start}.")

    def is_valid_coordinate(self, coord: Coordinate) -> bool:
        """Check whether a coordinate lies inside the board boundaries."""
        return 0 <= coord.x < self.size and 0 <= coord.y < self.size

    def coordinates(self) -> Iterator[Coordinate]:
        for x in range(self.size):
            for y in range(self.size):
                yield Coordinate(x, y)

    def get_cell(self, coord: Coordinate) -> Cell | None:
        if not self.is_valid_coordinate(coord):
            return None
        return self.cells[coord.x][coord.y]

    def get_cell_status(self, coord: Coordinate) -> CellStatus:
        return self.cells[coord.x][coord.y].status

    def is_shootable(self, coord: Coordinate) -> bool:
        """True if the coordinate is on the board and has not been fired at."""
        cell = self.get_cell(coord)
        return cell is not None and not cell.status.is_shot

    def get_ship_at(self, coord: Coordinate) -> Ship | None:
        return self._ship_positions.get(coord)

    def has_ship_at(self, coord: Coordinate) -> bool:
        return coord in self._ship_positions

    def contains(self, ship: Ship) -> bool:
        return any(existing is ship for existing in self.ships)

    def can_place_ship(self, ship: Ship) -> bool:
        """Determine whether a ship fits in bounds without overlapping another."""
        if not ship.is_placed or self.contains(ship):
            return False
        return all(
            self.is_valid_coordinate(coord) and not self.has_ship_at(coord)
            for coord in ship.coordinates()
        )

    def place_ship(self, ship: Ship) -> bool:
        """Add ship to the board if placement is valid; all cells or none."""
        with tracer.start_as_current_span("board.place_ship") as span:
            span.set_attribute("ship.type", ship.ship_type.name)
            span.set_attribute("board.owner", self.owner)
            extra = {
                "owner": self.owner,
                "ship_type": ship.ship_type.name,
                "orientation": ship.orientation.name,
                "x": ship.start.x if ship.start else None,
                "y": ship.start.y if ship.start else None,
            }
            if not self.can_place_ship(ship):
                PLACEMENT_COUNTER.add(1, attributes={"result": "failed", "owner": self.owner})
                logger.warning("ship_placement_failed", extra=extra)
                return False

            for coord in ship.coordinates():
                self.cells[coord.x][coord.y].status = CellStatus.SHIP
                self._ship_positions[coord] = ship
            self.ships.append(ship)
            PLACEMENT_COUNTER.add(1, attributes={"result": "success", "owner": self.owner})
            logger.debug("ship_placed", extra=extra)
            return True

    def remove_ship(self, ship: Ship) -> bool:
        """Take a ship off the board, clearing its cells back to EMPTY."""
        if not self.contains(ship):
            return False
        for coord in [c for c, owner in self._ship_positions.items() if owner is ship]:
            self.cells[coord.x][coord.y].status = CellStatus.EMPTY
            del self._ship_positions[coord]
        self.ships = [existing for existing in self.ships if existing is not ship]
        logger.debug(
            "ship_removed", extra={"owner": self.owner, "ship_type": ship.ship_type.name}
        )
        return True

    def receive_shot(self, coord: Coordinate) -> tuple[CellStatus, Ship | None]:
        """Register a shot at this board and return the resulting cell status."""
        with tracer.start_as_current_span("board.receive_shot") as span:
            span.set_attribute("shot.x", coord.x)
            span.set_attribute("shot.y", coord.y)
            span.set_attribute("board.owner", self.owner)
            if not self.is_shootable(coord):
                raise ValueError(f"Cell {coord} is off the board or already targeted.")

            ship = self._ship_positions.get(coord)
            if ship is None:
                self.cells[coord.x][coord.y].status = CellStatus.MISS
                outcome = CellStatus.MISS
            else:
                ship.hit(coord)
                self.cells[coord.x][coord.y].status = CellStatus.HIT
                outcome = CellStatus.HIT
                if ship.is_sunk():
                    self._mark_sunk(ship)
                    outcome = CellStatus.SUNK

            span.set_attribute("shot.outcome", outcome.value)
            SHOT_COUNTER.add(1, attributes={"outcome": outcome.value, "owner": self.owner})
            return outcome, ship

    def sunk_ships_count(self) -> int:
        return sum(1 for ship in self.ships if ship.is_sunk())

    def all_ships_sunk(self) -> bool:
        """True once every placed ship is sunk; never for an empty board."""
        return bool(self.ships) and all(ship.is_sunk() for ship in self.ships)

    def shot_coordinates(self) -> list[Coordinate]:
        return [coord for coord in self.coordinates() if self.get_cell_status(coord).is_shot]

    def reset(self) -> None:
        self.ships = []
        self._ship_positions = {}
        self.cells = _empty_grid(self.size)

    def random_placement(
        self, rng: random.Random, fleet: Iterable[Ship], max_attempts: int = 1000
    ) -> list[Ship]:
        """Place each ship of ``fleet`` at random; returns the ships that never fit."""
        with tracer.start_as_current_span("board.random_placement") as span:
            span.set_attribute("board.owner", self.owner)
            unplaced: list[Ship] = []
            for ship in fleet:
                attempts = 0
                placed = False
                while not placed and attempts < max_attempts:
                    start = Coordinate(rng.randrange(self.size), rng.randrange(self.size))
                    ship.set_position(start, rng.choice(list(Orientation)))
                    placed = self._place_quietly(ship)
                    attempts += 1
                if placed:
                    logger.debug(
                        "random_ship_placed",
                        extra={
                            "ship_type": ship.ship_type.name,
                            "attempts": attempts,
                            "owner": self.owner,
                        },
                    )
                else:
                    unplaced.append(ship)
                    logger.error(
                        "random_ship_placement_exhausted",
                        extra={"ship_type": ship.ship_type.name, "owner": self.owner},
                    )
            span.set_attribute("ships.placed", len(self.ships))
            return unplaced

    def _place_quietly(self, ship: Ship) -> bool:
        if not self.can_place_ship(ship):
            return False
        return self.place_ship(ship)

    def _mark_sunk(self, ship: Ship) -> None:
        for coord in ship.coordinates():
            self.cells[coord.x][coord.y].status = CellStatus.SUNK
