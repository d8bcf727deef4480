"""Application session: owns the engine and drives the computer's turns."""

from __future__ import annotations

import logging
import random
import threading
from typing import Callable

from seabattle.ai import HuntTargetStrategy
from seabattle.config import SeaBattleSettings, load_settings
from seabattle.engine.game import GameEngine
from seabattle.engine.instrumented_game import InstrumentedGameEngine
from seabattle.engine.ship import Coordinate
from seabattle.engine.states import GameStatus, ShotResult
from seabattle.persistence import GameRepository
from seabattle.telemetry import (
    TelemetryConfig,
    init_telemetry,
    load_telemetry_config,
    shutdown_tracing,
)

logger = logging.getLogger(__name__)

ShotCallback = Callable[[ShotResult, Coordinate], None]


class ComputerTurnDriver:
    """Fires the computer's shots until the turn passes back or the game ends."""

    def __init__(
        self,
        engine: GameEngine,
        on_shot: ShotCallback | None = None,
        followup_delay: float = 0.0,
    ) -> None:
        self._engine = engine
        self._on_shot = on_shot
        self._followup_delay = followup_delay
        self._busy = threading.Lock()
        self._timer_lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._stop = threading.Event()

    def take_turn(self) -> list[tuple[ShotResult, Coordinate]]:
        """Play the computer's whole turn; a second concurrent call does nothing."""
        if not self._busy.acquire(blocking=False):
            logger.debug("computer_turn_already_running")
            return []
        stop = self._stop
        shots: list[tuple[ShotResult, Coordinate]] = []
        try:
            while self._computer_to_move():
                result = self._engine.process_computer_shot()
                coord = self._engine.last_computer_shot
                if result is ShotResult.INVALID or coord is None:
                    break
                shots.append((result, coord))
                if self._on_shot is not None:
                    self._on_shot(result, coord)
                if result is ShotResult.WATER or self._engine.has_winner():
                    break
                if self._followup_delay and stop.wait(self._followup_delay):
                    break
        finally:
            self._busy.release()
        return shots

    def schedule(self, delay: float, turn: Callable[[], object] | None = None) -> threading.Timer:
        """Run ``turn`` (default :meth:`take_turn`) on a timer thread after ``delay`` seconds."""
        with self._timer_lock:
            timer = threading.Timer(delay, turn or self.take_turn)
            timer.daemon = True
            self._timer = timer
            timer.start()
            return timer

    def cancel(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            # Stops a turn in progress; later turns get a fresh event.
            self._stop.set()
            self._stop = threading.Event()

    def _computer_to_move(self) -> bool:
        return self._engine.status is GameStatus.PLAYING and not self._engine.is_player_turn


class GameSession:
    """Top-level object a front-end holds for the lifetime of the process."""

    def __init__(
        self,
        settings: SeaBattleSettings | None = None,
        telemetry: TelemetryConfig | None = None,
        engine: GameEngine | None = None,
        on_computer_shot: ShotCallback | None = None,
    ) -> None:
        self.settings = settings or load_settings()
        self.telemetry = init_telemetry(telemetry or load_telemetry_config())
        self.engine = engine or self._build_engine()
        self.driver = ComputerTurnDriver(
            self.engine,
            on_shot=on_computer_shot,
            followup_delay=self.settings.computer_followup_delay,
        )

    def _build_engine(self) -> GameEngine:
        rng = random.Random(self.settings.rng_seed)
        engine_cls = InstrumentedGameEngine if self.telemetry.enabled else GameEngine
        return engine_cls(
            repository=GameRepository.from_settings(self.settings),
            strategy=HuntTargetStrategy(rng, self.settings.board_size),
            rng=rng,
            settings=self.settings,
        )

    def new_game(self, nickname: str) -> None:
        self.driver.cancel()
        self.engine.delete_saved_game()
        self.engine.start_new_game(nickname)

    def resume(self, background: bool = False) -> bool:
        """Pick up the saved game; an unusable save is discarded and SETUP restored.

        If the save was taken on the computer's turn, that turn is played next.
        """
        if not self.engine.has_saved_game():
            return False
        if self.engine.load_game() and self.engine.status is GameStatus.PLAYING:
            if not self.engine.is_player_turn:
                self._hand_over(background)
            return True
        logger.warning("saved_game_discarded")
        self.engine.delete_saved_game()
        self.engine.reset_game()
        return False

    def start_battle(self) -> bool:
        return self.engine.start_battle()

    def fire(
        self, coord: Coordinate, background: bool = False, hand_over: bool = True
    ) -> ShotResult:
        """Player shot; a miss hands over to the computer, a win clears the save.

        With ``background`` the computer's turn runs on a timer after
        ``computer_turn_delay``, otherwise it is played before this call returns.
        ``hand_over=False`` leaves the computer's turn to the caller.
        """
        result = self.engine.process_player_shot(coord)
        if result is ShotResult.INVALID:
            return result
        if self.engine.has_winner():
            self.engine.delete_saved_game()
        elif result is ShotResult.WATER and hand_over:
            self._hand_over(background)
        return result

    def play_computer_turn(self) -> list[tuple[ShotResult, Coordinate]]:
        shots = self.driver.take_turn()
        if self.engine.has_winner():
            self.engine.delete_saved_game()
        return shots

    def abandon(self) -> None:
        """Drop the current game and its save, back to SETUP."""
        self.driver.cancel()
        self.engine.delete_saved_game()
        self.engine.reset_game()

    def close(self) -> None:
        self.driver.cancel()
        if self.telemetry.enable_tracing:
            shutdown_tracing()

    def _hand_over(self, background: bool) -> None:
        if background:
            self.driver.schedule(self.settings.computer_turn_delay, self.play_computer_turn)
        else:
            self.play_computer_turn()
