"""Human-versus-computer game controller."""

from __future__ import annotations

import logging
import random
import threading

from seabattle.ai import HuntTargetStrategy, TargetingStrategy
from seabattle.config import SeaBattleSettings, load_settings
from seabattle.persistence import GameRepository
from seabattle.telemetry import get_meter, get_tracer

from .board import Board, CellStatus
from .fleet import (
    FLEET_COMPOSITION,
    FleetComposition,
    create_fleet,
    has_room_for,
    is_complete_fleet,
)
from .player import ComputerPlayer, Player
from .ship import Coordinate, Ship
from .states import GameStatus, ShotResult

logger = logging.getLogger(__name__)
tracer = get_tracer("seabattle.engine.game")
meter = get_meter("seabattle.engine.game")

MOVE_COUNTER = meter.create_counter(
    "seabattle_engine_moves",
    unit="1",
    description="Shots processed by the GameEngine",
)

_SHOT_RESULTS = {
    CellStatus.MISS: ShotResult.WATER,
    CellStatus.HIT: ShotResult.HIT,
    CellStatus.SUNK: ShotResult.SUNK,
}


class GameEngine:
    """Turn/state machine for one human against the computer.

    Every public operation runs under one re-entrant lock, including the save
    that follows a shot, so a save never observes a half-applied move.
    """

    def __init__(
        self,
        repository: GameRepository | None = None,
        strategy: TargetingStrategy | None = None,
        rng: random.Random | None = None,
        settings: SeaBattleSettings | None = None,
        fleet: FleetComposition | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self._fleet = dict(fleet or FLEET_COMPOSITION)
        self._rng = rng or random.Random(self.settings.rng_seed)
        self._repository = repository or GameRepository.from_settings(self.settings)
        self._strategy = strategy or HuntTargetStrategy(self._rng, self.settings.board_size)
        self._lock = threading.RLock()
        self._human = Player("Player", Board(size=self.settings.board_size))
        self._computer = ComputerPlayer.with_board_size(self.settings.board_size, self._rng)
        self._status = GameStatus.SETUP
        self._player_turn = True
        self._last_computer_shot: Coordinate | None = None

    @property
    def repository(self) -> GameRepository:
        return self._repository

    @property
    def strategy(self) -> TargetingStrategy:
        return self._strategy

    @property
    def fleet(self) -> FleetComposition:
        """Ships per type that each side puts on the board."""
        return dict(self._fleet)

    @property
    def human_player(self) -> Player:
        with self._lock:
            return self._human

    @property
    def computer_player(self) -> ComputerPlayer:
        with self._lock:
            return self._computer

    @property
    def status(self) -> GameStatus:
        with self._lock:
            return self._status

    @property
    def is_player_turn(self) -> bool:
        with self._lock:
            return self._player_turn

    @property
    def last_computer_shot(self) -> Coordinate | None:
        with self._lock:
            return self._last_computer_shot

    def start_new_game(self, nickname: str) -> None:
        """Fresh players, a randomly placed computer fleet, and an empty AI memory."""
        with self._lock, tracer.start_as_current_span("game.start_new_game"):
            size = self.settings.board_size
            self._human = Player(nickname, Board(size=size))
            self._computer = ComputerPlayer.with_board_size(size, self._rng)
            unplaced = self._computer.board.random_placement(
                self._rng, create_fleet(self._fleet), self.settings.placement_attempts
            )
            self._status = GameStatus.SETUP
            self._player_turn = True
            self._last_computer_shot = None
            self._strategy.reset()
            logger.info(
                "game_started",
                extra={
                    "nickname": nickname,
                    "computer_ships": len(self._computer.board.ships),
                    "unplaced_ships": len(unplaced),
                },
            )

    def place_human_ship(self, ship: Ship) -> bool:
        with self._lock:
            if self._status is not GameStatus.SETUP:
                logger.warning("placement_rejected_not_setup", extra={"status": self._status.value})
                return False
            if not has_room_for(self._human.board.ships, ship.ship_type, self._fleet):
                logger.warning(
                    "placement_rejected_fleet_full", extra={"ship_type": ship.ship_type.name}
                )
                return False
            return self._human.board.place_ship(ship)

    def remove_human_ship(self, ship: Ship) -> bool:
        with self._lock:
            if self._status is not GameStatus.SETUP:
                return False
            return self._human.board.remove_ship(ship)

    def place_human_fleet_randomly(self) -> list[Ship]:
        """Replace the human layout with a random one; returns ships that did not fit."""
        with self._lock:
            if self._status is not GameStatus.SETUP:
                return []
            self._human.board.reset()
            return self._human.board.random_placement(
                self._rng, create_fleet(self._fleet), self.settings.placement_attempts
            )

    def start_battle(self) -> bool:
        """Leave SETUP once the whole human fleet is down, and save straight away."""
        with self._lock:
            ready = is_complete_fleet(self._human.board.ships, self._fleet)
            if self._status is not GameStatus.SETUP or not ready:
                logger.warning(
                    "battle_start_rejected",
                    extra={"status": self._status.value, "ships": len(self._human.board.ships)},
                )
                return False
            self._status = GameStatus.PLAYING
            self._player_turn = True
            logger.info("battle_started", extra={"nickname": self._human.nickname})
            self.save_game()
            return True

    def process_player_shot(self, coord: Coordinate) -> ShotResult:
        with self._lock, tracer.start_as_current_span("game.process_player_shot") as span:
            span.set_attribute("x", coord.x)
            span.set_attribute("y", coord.y)
            if not self._player_turn or self._status is not GameStatus.PLAYING:
                return self._reject("player", coord, "out_of_turn")

            board = self._computer.board
            if not board.is_shootable(coord):
                return self._reject("player", coord, "not_shootable")

            result = self._resolve_shot(self._human, board, coord)
            if result is ShotResult.WATER:
                self._player_turn = False
            elif result is ShotResult.SUNK and board.all_ships_sunk():
                self._status = GameStatus.PLAYER_WON

            span.set_attribute("shot.result", result.value)
            self._after_shot("player", coord, result)
            return result

    def process_computer_shot(self) -> ShotResult:
        with self._lock, tracer.start_as_current_span("game.process_computer_shot") as span:
            if self._player_turn or self._status is not GameStatus.PLAYING:
                return ShotResult.INVALID

            board = self._human.board
            coord = self._choose_computer_target(board)
            if coord is None:
                logger.error("computer_out_of_moves")
                return ShotResult.INVALID

            span.set_attribute("x", coord.x)
            span.set_attribute("y", coord.y)
            self._last_computer_shot = coord
            self._computer.mark_shot_taken(coord)

            result = self._resolve_shot(self._computer, board, coord)
            self._strategy.update_strategy(coord, result is not ShotResult.WATER)
            if result is ShotResult.WATER:
                self._player_turn = True
            elif result is ShotResult.SUNK and board.all_ships_sunk():
                self._status = GameStatus.COMPUTER_WON

            span.set_attribute("shot.result", result.value)
            self._after_shot("computer", coord, result)
            return result

    def reset_game(self) -> None:
        """Back to SETUP with cleared boards; the save file is left alone."""
        with self._lock:
            self._human.reset()
            self._computer.reset()
            self._status = GameStatus.SETUP
            self._player_turn = True
            self._last_computer_shot = None
            self._strategy.reset()
            logger.info("game_reset")

    def save_game(self) -> bool:
        with self._lock:
            if self._status is not GameStatus.PLAYING:
                return False
            return self._repository.save_game(
                self._human, self._computer, self._status, self._player_turn
            )

    def load_game(self) -> bool:
        """Resume the saved game; False (state untouched) when there is none usable."""
        with self._lock, tracer.start_as_current_span("game.load_game") as span:
            saved = self._repository.load_game()
            if saved is None:
                span.set_attribute("load.restored", False)
                return False
            self._human, self._computer = saved.restore(self._rng)
            self._status = saved.status
            self._player_turn = saved.is_player_turn
            self._last_computer_shot = None
            self._sync_computer_memory()
            span.set_attribute("load.restored", True)
            logger.info(
                "game_loaded",
                extra={
                    "nickname": self._human.nickname,
                    "status": self._status.value,
                    "is_player_turn": self._player_turn,
                },
            )
            return True

    def has_saved_game(self) -> bool:
        with self._lock:
            return self._repository.has_saved_game()

    def delete_saved_game(self) -> None:
        with self._lock:
            self._repository.delete_saved_game()

    def has_winner(self) -> bool:
        with self._lock:
            return self._status.is_finished

    def get_winner(self) -> Player | None:
        with self._lock:
            if self._status is GameStatus.PLAYER_WON:
                return self._human
            if self._status is GameStatus.COMPUTER_WON:
                return self._computer
            return None

    def _resolve_shot(self, shooter: Player, board: Board, coord: Coordinate) -> ShotResult:
        outcome, _ship = board.receive_shot(coord)
        result = _SHOT_RESULTS[outcome]
        if result is ShotResult.SUNK:
            shooter.increment_sunk_ships()
        return result

    def _choose_computer_target(self, board: Board) -> Coordinate | None:
        coord = self._strategy.select_target(board)
        while coord is None or not board.is_shootable(coord):
            if coord is not None:
                # Keep the strategy from offering the same cell again.
                self._strategy.update_strategy(coord, False)
            coord = self._computer.next_shot()
            if coord is None:
                return None
        return coord

    def _after_shot(self, shooter: str, coord: Coordinate, result: ShotResult) -> None:
        MOVE_COUNTER.add(1, attributes={"result": result.value, "shooter": shooter})
        logger.info(
            "shot_processed",
            extra={"shooter": shooter, "x": coord.x, "y": coord.y, "result": result.value},
        )
        if self._status.is_finished:
            logger.info("game_finished", extra={"status": self._status.value})
        self.save_game()

    def _reject(self, shooter: str, coord: Coordinate, reason: str) -> ShotResult:
        MOVE_COUNTER.add(1, attributes={"result": ShotResult.INVALID.value, "shooter": shooter})
        logger.warning(
            "shot_rejected",
            extra={
                "shooter": shooter,
                "x": coord.x,
                "y": coord.y,
                "reason": reason,
                "status": self._status.value,
            },
        )
        return ShotResult.INVALID

    def _sync_computer_memory(self) -> None:
        """Rebuild runtime-only targeting state from the human board's shot history."""
        board = self._human.board
        shot = board.shot_coordinates()
        for coord in shot:
            self._computer.mark_shot_taken(coord)

        self._strategy.reset()
        open_hits = [c for c in shot if board.get_cell_status(c) is CellStatus.HIT]
        for coord in shot:
            if board.get_cell_status(coord) is not CellStatus.HIT:
                self._strategy.update_strategy(coord, False)
        for coord in open_hits:
            self._strategy.update_strategy(coord, True)
