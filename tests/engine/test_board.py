"""Tests for the Board mechanics."""

import random

import pytest

from seabattle.engine.board import Board, CellStatus
from seabattle.engine.fleet import create_fleet, total_ships
from seabattle.engine.ship import Coordinate, Orientation, Ship, ShipType


def test_board_shot_tracking() -> None:
    board = Board()
    ship = Ship(ShipType.DESTROYER, Coordinate(0, 0), Orientation.VERTICAL)
    assert board.place_ship(ship)

    hit_state, hit_ship = board.receive_shot(Coordinate(0, 0))
    assert hit_state is CellStatus.HIT
    assert hit_ship is ship
    assert not board.all_ships_sunk()

    miss_state, miss_ship = board.receive_shot(Coordinate(5, 5))
    assert miss_state is CellStatus.MISS
    assert miss_ship is None

    with pytest.raises(ValueError):
        board.receive_shot(Coordinate(0, 0))

    with pytest.raises(ValueError):
        board.receive_shot(Coordinate(11, 11))

    sunk_state, _ = board.receive_shot(Coordinate(0, 1))
    assert sunk_state is CellStatus.SUNK
    assert board.get_cell_status(Coordinate(0, 0)) is CellStatus.SUNK
    assert board.get_cell_status(Coordinate(0, 1)) is CellStatus.SUNK
    assert board.all_ships_sunk()
    assert board.sunk_ships_count() == 1


def test_ship_placement_rejects_overlap_and_bounds() -> None:
    board = Board()
    assert board.place_ship(Ship(ShipType.SUBMARINE, Coordinate(0, 0), Orientation.HORIZONTAL))

    overlapping = Ship(ShipType.DESTROYER, Coordinate(1, 0), Orientation.VERTICAL)
    assert not board.place_ship(overlapping)

    off_board = Ship(ShipType.CARRIER, Coordinate(8, 5), Orientation.HORIZONTAL)
    assert not board.place_ship(off_board)
    # A failed placement leaves no partial footprint behind.
    assert board.get_cell_status(Coordinate(8, 5)) is CellStatus.EMPTY
    assert board.get_cell_status(Coordinate(9, 5)) is CellStatus.EMPTY
    assert len(board.ships) == 1


def test_adjacent_ships_are_allowed() -> None:
    board = Board()
    assert board.place_ship(Ship(ShipType.DESTROYER, Coordinate(0, 0)))
    assert board.place_ship(Ship(ShipType.DESTROYER, Coordinate(0, 1)))


def test_same_ship_cannot_be_placed_twice() -> None:
    board = Board()
    ship = Ship(ShipType.FRIGATE, Coordinate(3, 3))
    assert board.place_ship(ship)
    assert not board.place_ship(ship)
    assert not board.place_ship(Ship(ShipType.FRIGATE))


def test_remove_ship_clears_cells() -> None:
    board = Board()
    ship = Ship(ShipType.SUBMARINE, Coordinate(2, 2), Orientation.VERTICAL)
    board.place_ship(ship)

    assert board.remove_ship(ship)
    assert not board.remove_ship(ship)
    assert board.ships == []
    assert all(board.get_cell_status(coord) is CellStatus.EMPTY for coord in board.coordinates())


def test_empty_board_is_never_defeated() -> None:
    assert not Board().all_ships_sunk()


def test_get_cell_outside_board_is_none() -> None:
    board = Board(size=5)
    assert board.get_cell(Coordinate(5, 0)) is None
    assert board.get_cell(Coordinate(-1, 2)) is None
    assert not board.is_shootable(Coordinate(0, 5))
    assert board.get_cell(Coordinate(4, 4)).coordinate == Coordinate(4, 4)


def test_random_placement_places_full_fleet() -> None:
    board = Board()
    unplaced = board.random_placement(random.Random(3), create_fleet())

    assert unplaced == []
    assert len(board.ships) == total_ships()
    ship_cells = [c for c in board.coordinates() if board.get_cell_status(c) is CellStatus.SHIP]
    assert len(ship_cells) == sum(ship.size for ship in board.ships)


def test_random_placement_reports_ships_that_do_not_fit() -> None:
    board = Board(size=2)
    unplaced = board.random_placement(
        random.Random(0), [Ship(ShipType.CARRIER), Ship(ShipType.FRIGATE)], max_attempts=20
    )
    assert [ship.ship_type for ship in unplaced] == [ShipType.CARRIER]
    assert len(board.ships) == 1


def test_reset_clears_ships_and_shots() -> None:
    board = Board()
    board.place_ship(Ship(ShipType.FRIGATE, Coordinate(1, 1)))
    board.receive_shot(Coordinate(4, 4))

    board.reset()

    assert board.ships == []
    assert board.shot_coordinates() == []
    assert not board.has_ship_at(Coordinate(1, 1))


def test_shot_coordinates_lists_every_fired_cell() -> None:
    board = Board()
    board.place_ship(Ship(ShipType.FRIGATE, Coordinate(0, 0)))
    board.receive_shot(Coordinate(0, 0))
    board.receive_shot(Coordinate(9, 9))

    assert board.shot_coordinates() == [Coordinate(0, 0), Coordinate(9, 9)]
    assert not board.is_shootable(Coordinate(0, 0))


def test_has_ship_at_matches_ship_footprint() -> None:
    board = Board()
    ship = Ship(ShipType.SUBMARINE, Coordinate(6, 2), Orientation.VERTICAL)
    board.place_ship(ship)

    occupied = {coord for coord in board.coordinates() if board.has_ship_at(coord)}
    assert occupied == set(ship.coordinates())
    assert board.get_ship_at(Coordinate(6, 4)) is ship
