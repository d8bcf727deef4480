"""Fixed fleet composition."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Mapping

from .ship import Ship, ShipType

FleetComposition = Mapping[ShipType, int]

FLEET_COMPOSITION: dict[ShipType, int] = {
    ShipType.CARRIER: 1,
    ShipType.SUBMARINE: 2,
    ShipType.DESTROYER: 3,
    ShipType.FRIGATE: 4,
}


def total_ships(composition: FleetComposition = FLEET_COMPOSITION) -> int:
    return sum(composition.values())


def create_fleet(composition: FleetComposition = FLEET_COMPOSITION) -> list[Ship]:
    """Return one unplaced ship per fleet slot, largest first."""
    return [
        Ship(ship_type)
        for ship_type, count in composition.items()
        for _ in range(count)
    ]


def fleet_counts(ships: Iterable[Ship]) -> Counter[ShipType]:
    return Counter(ship.ship_type for ship in ships)


def has_room_for(ships: Iterable[Ship], ship_type: ShipType, composition: FleetComposition = FLEET_COMPOSITION) -> bool:
    """True while fewer ships of ``ship_type`` are placed than the fleet allows."""
    return fleet_counts(ships)[ship_type] < composition.get(ship_type, 0)


def is_complete_fleet(ships: Iterable[Ship], composition: FleetComposition = FLEET_COMPOSITION) -> bool:
    counts = fleet_counts(ships)
    expected = {ship_type: count for ship_type, count in composition.items() if count}
    return dict(counts) == expected
