"""GameSession and computer-turn driver tests."""

from __future__ import annotations

import threading
import time

from seabattle.config import SeaBattleSettings
from seabattle.engine.game import GameEngine
from seabattle.engine.instrumented_game import InstrumentedGameEngine
from seabattle.engine.ship import Coordinate, Orientation, Ship, ShipType
from seabattle.engine.states import GameStatus, ShotResult
from seabattle.session import ComputerTurnDriver, GameSession
from seabattle.telemetry import TelemetryConfig


def _session(settings: SeaBattleSettings, **kwargs) -> GameSession:
    return GameSession(settings, telemetry=TelemetryConfig(), **kwargs)


def _rig(session: GameSession) -> None:
    """New game where the computer has a lone carrier along the top row."""
    session.new_game("Ada")
    board = session.engine.computer_player.board
    board.reset()
    board.place_ship(Ship(ShipType.CARRIER, Coordinate(0, 0), Orientation.HORIZONTAL))
    session.engine.place_human_fleet_randomly()
    assert session.start_battle()


def test_session_builds_plain_engine_without_telemetry(settings: SeaBattleSettings) -> None:
    session = _session(settings)
    assert type(session.engine) is GameEngine
    assert session.engine.repository.save_path == settings.save_path
    session.close()


def test_session_builds_instrumented_engine_when_enabled(settings: SeaBattleSettings, monkeypatch) -> None:
    from seabattle.telemetry import metrics as metrics_module

    monkeypatch.setattr(metrics_module, "init_metrics", lambda cfg: None)
    session = GameSession(settings, telemetry=TelemetryConfig(enable_metrics=True))
    assert isinstance(session.engine, InstrumentedGameEngine)
    session.close()


def test_new_game_discards_old_save(settings: SeaBattleSettings) -> None:
    session = _session(settings)
    _rig(session)
    assert session.engine.has_saved_game()

    session.new_game("Bob")

    assert not session.engine.has_saved_game()
    assert session.engine.status is GameStatus.SETUP
    assert session.engine.human_player.nickname == "Bob"


def test_miss_plays_computer_turn_synchronously(settings: SeaBattleSettings) -> None:
    seen: list[tuple[ShotResult, Coordinate]] = []
    session = _session(settings, on_computer_shot=lambda result, coord: seen.append((result, coord)))
    _rig(session)

    assert session.fire(Coordinate(9, 9)) is ShotResult.WATER

    engine = session.engine
    assert seen
    assert all(result is not ShotResult.INVALID for result, _ in seen)
    assert engine.is_player_turn or engine.status is GameStatus.COMPUTER_WON
    if engine.is_player_turn:
        assert seen[-1][0] is ShotResult.WATER


def test_hand_over_can_be_left_to_the_caller(settings: SeaBattleSettings) -> None:
    session = _session(settings)
    _rig(session)

    assert session.fire(Coordinate(9, 9), hand_over=False) is ShotResult.WATER
    assert not session.engine.is_player_turn

    shots = session.play_computer_turn()
    assert shots
    assert session.engine.is_player_turn or session.engine.has_winner()


def test_background_computer_turn(settings: SeaBattleSettings) -> None:
    done = threading.Event()

    def on_shot(result: ShotResult, coord: Coordinate) -> None:
        if result is ShotResult.WATER:
            done.set()

    session = _session(settings, on_computer_shot=on_shot)
    _rig(session)

    assert session.fire(Coordinate(9, 9), background=True) is ShotResult.WATER
    deadline = time.monotonic() + 5
    while time.monotonic() < deadline:
        if session.engine.is_player_turn or session.engine.has_winner():
            break
        time.sleep(0.01)

    assert session.engine.is_player_turn or session.engine.has_winner()
    assert done.is_set() or session.engine.has_winner()
    session.close()


def test_winning_shot_deletes_save(settings: SeaBattleSettings) -> None:
    session = _session(settings)
    _rig(session)

    for x in range(3):
        assert session.fire(Coordinate(x, 0)) is ShotResult.HIT
    assert session.fire(Coordinate(3, 0)) is ShotResult.SUNK

    assert session.engine.status is GameStatus.PLAYER_WON
    assert not session.engine.has_saved_game()


def test_resume_picks_up_saved_game(settings: SeaBattleSettings) -> None:
    first = _session(settings)
    _rig(first)
    first.fire(Coordinate(0, 0))

    second = _session(settings)
    assert second.resume()
    assert second.engine.status is GameStatus.PLAYING
    assert second.engine.human_player == first.engine.human_player
    assert second.fire(Coordinate(0, 0)) is ShotResult.INVALID
    assert second.fire(Coordinate(1, 0)) is ShotResult.HIT


def test_resume_saved_on_computer_turn_plays_it(settings: SeaBattleSettings) -> None:
    first = _session(settings)
    _rig(first)
    assert first.fire(Coordinate(9, 9), hand_over=False) is ShotResult.WATER

    second = _session(settings)
    assert second.resume()
    assert second.engine.is_player_turn or second.engine.has_winner()
    assert second.engine.human_player.board.shot_coordinates()


def test_resume_discards_corrupt_save(settings: SeaBattleSettings) -> None:
    settings.save_path.write_text("{}", encoding="utf-8")
    session = _session(settings)

    assert not session.resume()
    assert not session.engine.has_saved_game()
    assert session.engine.status is GameStatus.SETUP


def test_resume_without_save(settings: SeaBattleSettings) -> None:
    assert not _session(settings).resume()


def test_abandon_resets_and_forgets(settings: SeaBattleSettings) -> None:
    session = _session(settings)
    _rig(session)

    session.abandon()

    assert session.engine.status is GameStatus.SETUP
    assert not session.engine.has_saved_game()


def test_driver_ignores_overlapping_turns(engine: GameEngine, rig_battle) -> None:
    rig_battle(engine, [Ship(ShipType.FRIGATE, Coordinate(0, 0))])
    engine.process_player_shot(Coordinate(9, 9))
    driver = ComputerTurnDriver(engine)

    driver._busy.acquire()
    try:
        assert driver.take_turn() == []
    finally:
        driver._busy.release()

    assert driver.take_turn()


def test_driver_does_nothing_on_player_turn(engine: GameEngine, rig_battle) -> None:
    rig_battle(engine, [Ship(ShipType.FRIGATE, Coordinate(0, 0))])
    assert ComputerTurnDriver(engine).take_turn() == []


def test_cancelled_timer_never_fires(engine: GameEngine, rig_battle) -> None:
    rig_battle(engine, [Ship(ShipType.FRIGATE, Coordinate(0, 0))])
    engine.process_player_shot(Coordinate(9, 9))
    driver = ComputerTurnDriver(engine)

    timer = driver.schedule(0.5)
    driver.cancel()
    timer.join(timeout=2)

    assert not engine.is_player_turn
    assert engine.last_computer_shot is None
