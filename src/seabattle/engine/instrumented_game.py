"""GameEngine with game-level telemetry."""

from __future__ import annotations

import time
from typing import Any

from seabattle.engine.game import GameEngine
from seabattle.engine.ship import Coordinate
from seabattle.engine.states import ShotResult
from seabattle.telemetry import (
    get_logger,
    get_tracer,
    record_game_duration,
    record_game_metric,
)


class InstrumentedGameEngine(GameEngine):
    """Adds a span per game and per-shot counters on top of GameEngine."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._logger = get_logger("seabattle.engine")
        self._tracer = get_tracer("seabattle.engine")
        self._game_span = None
        self._game_start_time: float | None = None
        self._game_id_counter = 0

    def start_new_game(self, nickname: str) -> None:
        with self._lock:
            self._start_game_span()
            with self._tracer.start_as_current_span("seabattle.engine.start_new_game") as span:
                super().start_new_game(nickname)
                ships = len(self.computer_player.board.ships)
                span.set_attribute("computer_ships", ships)
                record_game_metric("seabattle_games_started_total", 1, {"computer_ships": ships})

    def load_game(self) -> bool:
        with self._lock:
            restored = super().load_game()
            record_game_metric("seabattle_games_loaded_total", 1, {"restored": restored})
            if restored:
                self._start_game_span()
            return restored

    # Shots are recorded under the engine lock so the winning shot is the only
    # one that can observe the finished status.
    def process_player_shot(self, coord: Coordinate) -> ShotResult:
        with self._lock:
            result = super().process_player_shot(coord)
            self._record_shot("player", result)
            return result

    def process_computer_shot(self) -> ShotResult:
        with self._lock:
            result = super().process_computer_shot()
            self._record_shot("computer", result)
            return result

    def reset_game(self) -> None:
        with self._lock:
            super().reset_game()
            self._close_game_span()

    def _record_shot(self, shooter: str, result: ShotResult) -> None:
        if result is ShotResult.INVALID:
            record_game_metric("seabattle_invalid_shots_total", 1, {"shooter": shooter})
            return
        record_game_metric(
            "seabattle_shots_by_result_total", 1, {"shooter": shooter, "result": result.value}
        )
        if result is ShotResult.SUNK and self.has_winner():
            self._finish_game()

    def _start_game_span(self) -> None:
        self._close_game_span()
        self._game_start_time = time.perf_counter()
        self._game_id_counter += 1
        # Not made current: computer turns may finish the game on a timer thread.
        self._game_span = self._tracer.start_span("seabattle.engine.game")
        self._game_span.set_attribute("game.id", self._game_id_counter)

    def _finish_game(self) -> None:
        duration = (time.perf_counter() - self._game_start_time) if self._game_start_time else 0.0
        status = self.status.value
        shots = len(self.human_player.board.shot_coordinates()) + len(
            self.computer_player.board.shot_coordinates()
        )

        record_game_metric("seabattle_games_completed_total", 1, {"status": status})
        record_game_duration("seabattle_game_duration_seconds", duration, {"status": status})

        if self._game_span is not None:
            self._game_span.set_attribute("status", status)
            self._game_span.set_attribute("shots", shots)
            self._game_span.set_attribute("duration_ms", duration * 1000)

        self._logger.info("Game finished. status=%s shots=%d duration_s=%.3f", status, shots, duration)
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span is not None:
            self._game_span.end()
            self._game_span = None
