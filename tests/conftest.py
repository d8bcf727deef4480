"""Shared fixtures: every engine writes its saves under ``tmp_path``."""

from __future__ import annotations

import random
from pathlib import Path

import pytest

from seabattle.ai import HuntTargetStrategy
from seabattle.config import SeaBattleSettings
from seabattle.engine.fleet import create_fleet
from seabattle.engine.game import GameEngine
from seabattle.engine.ship import Coordinate, Orientation, Ship
from seabattle.persistence import GameRepository


def _human_fleet() -> list[Ship]:
    """The full fleet, one ship per row from column 5: carrier on row 0, frigates on rows 6-9."""
    fleet = create_fleet()
    for row, ship in enumerate(fleet):
        ship.set_position(Coordinate(5, row), Orientation.HORIZONTAL)
    return fleet


@pytest.fixture
def settings(tmp_path: Path) -> SeaBattleSettings:
    return SeaBattleSettings(
        save_dir=tmp_path,
        rng_seed=11,
        computer_turn_delay=0.0,
        computer_followup_delay=0.0,
    )


@pytest.fixture
def repository(settings: SeaBattleSettings) -> GameRepository:
    return GameRepository.from_settings(settings)


@pytest.fixture
def engine(settings: SeaBattleSettings, repository: GameRepository) -> GameEngine:
    rng = random.Random(settings.rng_seed)
    return GameEngine(
        repository=repository,
        strategy=HuntTargetStrategy(rng),
        rng=rng,
        settings=settings,
    )


def _rig_battle(
    engine: GameEngine,
    computer_ships: list[Ship],
    human_ships: list[Ship] | None = None,
    nickname: str = "Ada",
) -> None:
    """Start a game with hand-picked fleets on both sides and enter PLAYING."""
    engine.start_new_game(nickname)
    computer_board = engine.computer_player.board
    computer_board.reset()
    for ship in computer_ships:
        assert computer_board.place_ship(ship)
    for ship in human_ships or _human_fleet():
        assert engine.place_human_ship(ship)
    assert engine.start_battle()


@pytest.fixture
def human_fleet() -> list[Ship]:
    return _human_fleet()


@pytest.fixture
def rig_battle():
    return _rig_battle
