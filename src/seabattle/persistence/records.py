"""Serialized form of a game in progress."""

from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict, Field, model_validator

from seabattle.engine.board import Board, CellStatus
from seabattle.engine.player import ComputerPlayer, Player
from seabattle.engine.ship import Coordinate, Orientation, Ship, ShipType
from seabattle.engine.states import GameStatus

SAVE_FORMAT_VERSION = 1


class CoordinateRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0)
    y: int = Field(ge=0)

    @classmethod
    def from_domain(cls, coord: Coordinate) -> "CoordinateRecord":
        return cls(x=coord.x, y=coord.y)

    def to_domain(self) -> Coordinate:
        return Coordinate(self.x, self.y)


class ShipRecord(BaseModel):
    ship_type: ShipType
    start: CoordinateRecord
    orientation: Orientation
    hits: list[CoordinateRecord] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, ship: Ship) -> "ShipRecord":
        if ship.start is None:
            raise ValueError("Only placed ships can be saved.")
        return cls(
            ship_type=ship.ship_type,
            start=CoordinateRecord.from_domain(ship.start),
            orientation=ship.orientation,
            hits=[CoordinateRecord.from_domain(c) for c in sorted(ship.hits, key=lambda c: (c.x, c.y))],
        )

    def to_domain(self) -> Ship:
        ship = Ship(self.ship_type, self.start.to_domain(), self.orientation)
        for hit in self.hits:
            if not ship.hit(hit.to_domain()):
                raise ValueError(f"Hit {hit} does not belong to {self.ship_type.name}.")
        return ship


class BoardRecord(BaseModel):
    size: int = Field(ge=1)
    owner: str
    ships: list[ShipRecord]
    cells: list[list[CellStatus]]

    @model_validator(mode="after")
    def _grid_matches_size(self) -> "BoardRecord":
        if len(self.cells) != self.size or any(len(column) != self.size for column in self.cells):
            raise ValueError("Cell grid does not match board size.")
        return self

    @classmethod
    def from_domain(cls, board: Board) -> "BoardRecord":
        return cls(
            size=board.size,
            owner=board.owner,
            ships=[ShipRecord.from_domain(ship) for ship in board.ships],
            cells=[[cell.status for cell in column] for column in board.cells],
        )

    def to_domain(self) -> Board:
        board = Board(size=self.size, owner=self.owner)
        for record in self.ships:
            if not board.place_ship(record.to_domain()):
                raise ValueError(f"Saved {record.ship_type.name} overlaps or is off the board.")
        for x, column in enumerate(self.cells):
            for y, status in enumerate(column):
                coord = Coordinate(x, y)
                if status not in _allowed_statuses(board, coord):
                    raise ValueError(f"Cell {coord} is {status.value}, which contradicts the ships.")
                board.cells[x][y].status = status
        return board


def _allowed_statuses(board: Board, coord: Coordinate) -> tuple[CellStatus, ...]:
    """Statuses a cell can have given the ship (and its hits) covering it."""
    ship = board.get_ship_at(coord)
    if ship is None:
        return (CellStatus.EMPTY, CellStatus.MISS)
    if ship.is_sunk():
        return (CellStatus.SUNK,)
    if ship.is_hit_at(coord):
        return (CellStatus.HIT,)
    return (CellStatus.SHIP,)


class PlayerRecord(BaseModel):
    nickname: str
    sunk_ships_count: int = Field(default=0, ge=0)
    board: BoardRecord

    @classmethod
    def from_domain(cls, player: Player) -> "PlayerRecord":
        return cls(
            nickname=player.nickname,
            sunk_ships_count=player.sunk_ships_count,
            board=BoardRecord.from_domain(player.board),
        )

    def to_domain(self) -> Player:
        return Player(self.nickname, self.board.to_domain(), self.sunk_ships_count)


class ComputerPlayerRecord(PlayerRecord):
    available_shots: list[CoordinateRecord]

    @classmethod
    def from_domain(cls, player: ComputerPlayer) -> "ComputerPlayerRecord":  # type: ignore[override]
        base = PlayerRecord.from_domain(player)
        return cls(
            **base.model_dump(),
            available_shots=[CoordinateRecord.from_domain(c) for c in player.available_shots],
        )

    def to_domain(self, rng: random.Random | None = None) -> ComputerPlayer:  # type: ignore[override]
        return ComputerPlayer(
            nickname=self.nickname,
            board=self.board.to_domain(),
            sunk_ships_count=self.sunk_ships_count,
            available_shots=[c.to_domain() for c in self.available_shots],
            rng=rng or random.Random(),
        )


class SavedGame(BaseModel):
    """Everything needed to resume a game after a restart."""

    version: int = SAVE_FORMAT_VERSION
    human: PlayerRecord
    computer: ComputerPlayerRecord
    status: GameStatus
    is_player_turn: bool

    @model_validator(mode="after")
    def _supported_version(self) -> "SavedGame":
        if self.version != SAVE_FORMAT_VERSION:
            raise ValueError(f"Unsupported save format version {self.version}.")
        return self

    @classmethod
    def capture(
        cls,
        human: Player,
        computer: ComputerPlayer,
        status: GameStatus,
        is_player_turn: bool,
    ) -> "SavedGame":
        return cls(
            human=PlayerRecord.from_domain(human),
            computer=ComputerPlayerRecord.from_domain(computer),
            status=status,
            is_player_turn=is_player_turn,
        )

    def restore(self, rng: random.Random | None = None) -> tuple[Player, ComputerPlayer]:
        """Rebuild both players; ``rng`` becomes the computer's random source."""
        return self.human.to_domain(), self.computer.to_domain(rng)
