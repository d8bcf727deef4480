"""Command-line driver for playing SeaBattle against the hunt/target AI."""

from __future__ import annotations

import argparse
import string
from pathlib import Path
from typing import Sequence

from seabattle.config import SeaBattleSettings
from seabattle.engine.board import Board, CellStatus
from seabattle.engine.fleet import create_fleet
from seabattle.engine.ship import Coordinate, Orientation, Ship
from seabattle.engine.states import GameStatus, ShotResult
from seabattle.session import GameSession
from seabattle.telemetry import configure_console_logging

ROW_LABELS = string.ascii_uppercase

_SYMBOLS = {
    CellStatus.EMPTY: ".",
    CellStatus.SHIP: "S",
    CellStatus.HIT: "X",
    CellStatus.MISS: "o",
    CellStatus.SUNK: "#",
}


def coordinate_from_input(text: str, size: int = 10) -> Coordinate:
    """Parse ``A5`` (row letter, column number) or ``"x y"`` into a Coordinate."""
    cleaned = text.strip().upper()
    if not cleaned:
        raise ValueError("Empty coordinate.")
    if cleaned[0].isalpha():
        y = ROW_LABELS.find(cleaned[0])
        if y < 0 or y >= size:
            raise ValueError(f"Row must be between A and {ROW_LABELS[size - 1]}.")
        try:
            x = int(cleaned[1:]) - 1
        except ValueError as exc:
            raise ValueError(f"Column must be a number between 1 and {size}.") from exc
    else:
        parts = cleaned.split()
        if len(parts) != 2:
            raise ValueError("Use formats like A5 or '4 0'.")
        x, y = map(int, parts)
    if x not in range(size) or y not in range(size):
        raise ValueError(f"Coordinates must be within the {size}x{size} board.")
    return Coordinate(x, y)


def coordinate_label(coord: Coordinate) -> str:
    return f"{ROW_LABELS[coord.y]}{coord.x + 1}"


def format_board(board: Board, show_ships: bool) -> str:
    header = "    " + " ".join(f"{x + 1:>2}" for x in range(board.size))
    rows = [header]
    for y in range(board.size):
        symbols = []
        for x in range(board.size):
            status = board.get_cell_status(Coordinate(x, y))
            if status is CellStatus.SHIP and not show_ships:
                status = CellStatus.EMPTY
            symbols.append(f"{_SYMBOLS[status]:>2}")
        rows.append(f"{ROW_LABELS[y]} |" + " ".join(symbols))
    return "\n".join(rows)


def describe_shot(shooter: str, coord: Coordinate, result: ShotResult) -> str:
    outcome = {
        ShotResult.WATER: "water",
        ShotResult.HIT: "hit!",
        ShotResult.SUNK: "sunk a ship!",
        ShotResult.INVALID: "invalid shot",
    }[result]
    return f"{shooter} fired at {coordinate_label(coord)}: {outcome}"


def _prompt_coordinate(prompt: str, size: int) -> Coordinate:
    while True:
        raw = input(prompt).strip()
        if raw.lower() == "q":
            raise SystemExit("Goodbye!")
        try:
            return coordinate_from_input(raw, size)
        except ValueError as exc:
            print(f"Invalid input: {exc}")


def _prompt_orientation(ship: Ship) -> Orientation:
    while True:
        raw = (
            input(f"Place your {ship.ship_type.display_name} (length {ship.size}). Orientation [H/V]: ")
            .strip()
            .upper()
        )
        if raw in {"H", "HOR", "HORIZONTAL"}:
            return Orientation.HORIZONTAL
        if raw in {"V", "VER", "VERTICAL"}:
            return Orientation.VERTICAL
        print("Please enter H for horizontal or V for vertical.")


def _ask_yes_no(question: str, default: bool = True) -> bool:
    suffix = "[Y/n]" if default else "[y/N]"
    while True:
        raw = input(f"{question} {suffix}: ").strip().lower()
        if not raw:
            return default
        if raw in {"y", "yes"}:
            return True
        if raw in {"n", "no"}:
            return False
        print("Please answer with 'y' or 'n'.")


def _manual_ship_placement(session: GameSession) -> None:
    board = session.engine.human_player.board
    for ship in create_fleet(session.engine.fleet):
        while True:
            print("\nCurrent layout:")
            print(format_board(board, show_ships=True))
            orientation = _prompt_orientation(ship)
            start = _prompt_coordinate("Enter starting coordinate (e.g., A1): ", board.size)
            ship.set_position(start, orientation)
            if session.engine.place_human_ship(ship):
                break
            print("Ship cannot be placed there (out of bounds or overlaps). Try again.")


def _print_boards(session: GameSession) -> None:
    engine = session.engine
    print("\nYour Board:")
    print(format_board(engine.human_player.board, show_ships=True))
    print("\nEnemy Waters:")
    print(format_board(engine.computer_player.board, show_ships=False))
    print(
        f"\nShips sunk - you: {engine.human_player.sunk_ships_count}"
        f"  computer: {engine.computer_player.sunk_ships_count}"
    )


def _setup_new_game(session: GameSession) -> None:
    nickname = input("Your nickname: ").strip() or "Player"
    session.new_game(nickname)
    if _ask_yes_no("Would you like to place your ships manually?"):
        _manual_ship_placement(session)
    else:
        session.engine.place_human_fleet_randomly()
        print("\nYour ships have been positioned automatically.")
    session.start_battle()


def play_game(session: GameSession) -> GameStatus:
    print("Welcome to SeaBattle!\n")
    resumed = False
    if session.engine.has_saved_game() and _ask_yes_no("A saved game was found. Resume it?"):
        resumed = session.resume()
        if not resumed:
            print("The saved game could not be loaded; starting a new one.")
    if not resumed:
        _setup_new_game(session)

    engine = session.engine
    while engine.status is GameStatus.PLAYING:
        _print_boards(session)
        coord = _prompt_coordinate(
            "Enter target coordinate (e.g., A5) or 'q' to save and quit: ", engine.computer_player.board.size
        )
        result = session.fire(coord, hand_over=False)
        if result is ShotResult.INVALID:
            print("That cell has already been targeted. Choose another.")
            continue
        print(describe_shot(engine.human_player.nickname, coord, result))
        if result is ShotResult.WATER:
            session.play_computer_turn()

    _print_boards(session)
    if engine.status is GameStatus.PLAYER_WON:
        print("\nCongratulations, you won!")
    else:
        print("\nThe computer won this time. Better luck next battle!")
    return engine.status


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play SeaBattle via the CLI.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Optional RNG seed for reproducibility."
    )
    parser.add_argument(
        "--save-dir", type=Path, default=None, help="Directory for the save files."
    )
    parser.add_argument(
        "--log-level", default="WARNING", help="Console log level (default: WARNING)."
    )
    args = parser.parse_args(argv)
    configure_console_logging(args.log_level.upper())

    settings = SeaBattleSettings.from_env(rng_seed=args.seed, save_dir=args.save_dir)
    session = GameSession(
        settings,
        on_computer_shot=lambda result, coord: print(describe_shot("Computer", coord, result)),
    )
    try:
        play_game(session)
    finally:
        session.close()


if __name__ == "__main__":
    main()
