"""Ship domain model for the SeaBattle engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate; ``x`` is the column, ``y`` the row."""

    x: int
    y: int

    def neighbours(self) -> tuple[Coordinate, Coordinate, Coordinate, Coordinate]:
        """Return the orthogonal neighbours in up, down, left, right order."""
        return (
            Coordinate(self.x, self.y - 1),
            Coordinate(self.x, self.y + 1),
            Coordinate(self.x - 1, self.y),
            Coordinate(self.x + 1, self.y),
        )


class Orientation(Enum):
    """Allowed ship orientations."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ShipType(Enum):
    """Ship classes of the fleet, valued by the number of cells they occupy."""

    CARRIER = 4
    SUBMARINE = 3
    DESTROYER = 2
    FRIGATE = 1

    @property
    def size(self) -> int:
        return self.value

    @property
    def display_name(self) -> str:
        return self.name.title()


@dataclass
class Ship:
    """A single ship; unplaced until :meth:`set_position` is called."""

    ship_type: ShipType
    start: Coordinate | None = None
    orientation: Orientation = Orientation.HORIZONTAL
    hits: set[Coordinate] = field(default_factory=set)
    _coordinates: list[Coordinate] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self) -> None:
        if self.start is not None:
            hits = set(self.hits)
            self.set_position(self.start, self.orientation)
            self.hits = {coord for coord in hits if coord in self._coordinates}

    @property
    def size(self) -> int:
        return self.ship_type.size

    @property
    def hit_count(self) -> int:
        return len(self.hits)

    @property
    def is_placed(self) -> bool:
        return self.start is not None

    def set_position(self, start: Coordinate, orientation: Orientation) -> None:
        """Lay the ship out from ``start``; bounds are the board's concern."""
        self.start = start
        self.orientation = orientation
        self.hits = set()
        if orientation is Orientation.HORIZONTAL:
            self._coordinates = [Coordinate(start.x + i, start.y) for i in range(self.size)]
        else:
            self._coordinates = [Coordinate(start.x, start.y + i) for i in range(self.size)]

    def coordinates(self) -> list[Coordinate]:
        """Return the ordered list of coordinates occupied by this ship."""
        return list(self._coordinates)

    def occupies(self, coord: Coordinate) -> bool:
        return coord in self._coordinates

    def hit(self, coord: Coordinate) -> bool:
        """Record a hit; False if the coordinate is not ours or already hit."""
        if coord not in self._coordinates or coord in self.hits:
            return False
        self.hits.add(coord)
        return True

    def is_hit_at(self, coord: Coordinate) -> bool:
        return coord in self.hits

    def is_sunk(self) -> bool:
        return self.hit_count == self.size

    def overlaps(self, other: Ship) -> bool:
        """Return True if any coordinate overlaps with another ship."""
        return bool(set(self._coordinates) & set(other._coordinates))
