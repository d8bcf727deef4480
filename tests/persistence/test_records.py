"""Validation rules of the saved-game records."""

import json
import random

import pytest
from pydantic import ValidationError

from seabattle.engine.board import Board, CellStatus
from seabattle.engine.player import ComputerPlayer, Player
from seabattle.engine.ship import Coordinate, Orientation, Ship, ShipType
from seabattle.engine.states import GameStatus
from seabattle.persistence import SavedGame
from seabattle.persistence.records import BoardRecord, CoordinateRecord, ShipRecord


def test_negative_coordinates_are_rejected() -> None:
    with pytest.raises(ValidationError):
        CoordinateRecord(x=-1, y=0)


def test_board_grid_must_match_size() -> None:
    with pytest.raises(ValidationError):
        BoardRecord(size=2, owner="Ada", ships=[], cells=[[CellStatus.EMPTY]])


def test_unplaced_ship_cannot_be_recorded() -> None:
    with pytest.raises(ValueError):
        ShipRecord.from_domain(Ship(ShipType.FRIGATE))


def test_overlapping_saved_ships_are_rejected() -> None:
    record = BoardRecord.from_domain(Board(ships=[Ship(ShipType.DESTROYER, Coordinate(0, 0))]))
    record.ships.append(ShipRecord.from_domain(Ship(ShipType.FRIGATE, Coordinate(1, 0))))

    with pytest.raises(ValueError):
        record.to_domain()


def test_saved_game_json_uses_enum_values() -> None:
    human = Player("Ada", Board(ships=[Ship(ShipType.CARRIER, Coordinate(0, 0), Orientation.VERTICAL)]))
    computer = ComputerPlayer(board=Board(size=10))
    saved = SavedGame.capture(human, computer, GameStatus.PLAYING, True)

    payload = json.loads(saved.model_dump_json())

    assert payload["version"] == 1
    assert payload["status"] == "playing"
    assert payload["human"]["board"]["ships"][0]["ship_type"] == 4
    assert payload["human"]["board"]["ships"][0]["orientation"] == "vertical"
    assert payload["human"]["board"]["cells"][0][3] == "ship"
    assert len(payload["computer"]["available_shots"]) == 100


def test_restore_hands_rng_to_computer() -> None:
    human = Player("Ada", Board(ships=[Ship(ShipType.FRIGATE, Coordinate(2, 2))]))
    computer = ComputerPlayer(board=Board(size=10))
    rng = random.Random(5)

    _, restored = SavedGame.capture(human, computer, GameStatus.PLAYING, True).restore(rng)

    assert restored.rng is rng


def test_hit_cell_without_a_ship_is_rejected() -> None:
    record = BoardRecord.from_domain(Board(ships=[Ship(ShipType.FRIGATE, Coordinate(0, 0))]))
    record.cells[4][4] = CellStatus.HIT

    with pytest.raises(ValueError, match="contradicts"):
        record.to_domain()


def test_ship_cell_must_agree_with_recorded_hits() -> None:
    board = Board(ships=[Ship(ShipType.DESTROYER, Coordinate(0, 0), Orientation.HORIZONTAL)])
    board.receive_shot(Coordinate(0, 0))
    record = BoardRecord.from_domain(board)
    record.cells[0][0] = CellStatus.SHIP

    with pytest.raises(ValueError, match="contradicts"):
        record.to_domain()


def test_sunk_ship_needs_sunk_cells() -> None:
    board = Board(ships=[Ship(ShipType.FRIGATE, Coordinate(3, 3))])
    board.receive_shot(Coordinate(3, 3))
    record = BoardRecord.from_domain(board)
    assert record.to_domain().get_cell_status(Coordinate(3, 3)) is CellStatus.SUNK

    record.cells[3][3] = CellStatus.HIT
    with pytest.raises(ValueError):
        record.to_domain()
