"""
Signal Path CLI - Command-line interface for the engine.

Usage:
    signalpath levels                        List levels and progress
    signalpath validate <level_file>         Validate a level file
    signalpath solve [<level_file|level_id>] Find the shortest solution (all levels if omitted)
    signalpath replay <level> <actions...>   Replay actions and show the final board
    signalpath progress [--reset]            Show or reset the progress ledger
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from .engine_core.action import Action
from .engine_core.rules import status_message
from .engine_core.state import GameState, InteractableType, TileType
from .engine_core.turn import replay
from .levels.converter import create_game_state
from .levels.loader import LevelRepository, load_level_file
from .levels.schema import LevelData
from .levels.solver import verify_level
from .progress.ledger import get_completed_count, get_progress, is_unlocked
from .progress.storage import SaveStore


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Signal Path - Turn-based grid puzzle engine",
        prog="signalpath",
    )
    parser.add_argument(
        "--levels-dir",
        default=os.getenv("SIGNALPATH_LEVELS_DIR"),
        help="Directory with manifest.json and level files (default: bundled levels)",
    )
    parser.add_argument(
        "--save-path",
        default=os.getenv("SIGNALPATH_SAVE_PATH"),
        help="Progress file (default: ~/.signalpath/save.json)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Levels command
    subparsers.add_parser("levels", help="List levels with unlock state and best scores")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate a level file")
    validate_parser.add_argument("level_file", help="Path to level JSON file")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Find the shortest solution for a level")
    solve_parser.add_argument(
        "level", nargs="?", help="Level file or level id (verifies every level if omitted)"
    )

    # Replay command
    replay_parser = subparsers.add_parser("replay", help="Replay actions against a level")
    replay_parser.add_argument("level", help="Level file or level id")
    replay_parser.add_argument("actions", nargs="+", help="Actions, e.g. right down wait undo")

    # Progress command
    progress_parser = subparsers.add_parser("progress", help="Show the progress ledger")
    progress_parser.add_argument("--reset", action="store_true", help="Delete all progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "levels":
        cmd_levels(args)
    elif args.command == "validate":
        cmd_validate(args)
    elif args.command == "solve":
        cmd_solve(args)
    elif args.command == "replay":
        cmd_replay(args)
    elif args.command == "progress":
        cmd_progress(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_levels(args):
    """List levels in play order."""
    repo = LevelRepository(args.levels_dir)
    save = SaveStore(args.save_path).load()
    level_ids = repo.level_ids()

    for index, info in enumerate(repo.list_levels()):
        progress = get_progress(save, info.id)
        if progress.completed:
            marker = "*"
            best = f"  best: {progress.best_turns} turns, {progress.best_energy} energy left"
        elif is_unlocked(save, index, level_ids):
            marker = " "
            best = ""
        else:
            marker = "#"
            best = ""
        print(f"[{marker}] {index + 1:2d}. {info.id:<20} {info.name}{best}")

    print(f"\n{get_completed_count(save)}/{repo.count} completed")


def cmd_validate(args):
    """Validate a level file."""
    print(f"Validating: {args.level_file}")
    result = load_level_file(args.level_file)
    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)

    level = result.level
    print(f"OK: {level.id} ({level.name}) {level.width}x{level.height}, energy {level.energy}")


def cmd_solve(args):
    """Solve one level, or verify every level in the pack."""
    if args.level:
        levels = [_resolve_level(args.level, args.levels_dir)]
    else:
        repo = LevelRepository(args.levels_dir)
        levels, errors = repo.load_all()
        for error in errors:
            print(f"Error: {error}")
        if errors:
            sys.exit(1)

    failed = 0
    for level in levels:
        verification = verify_level(level)
        if not verification.solvable:
            print(f"FAIL {level.id}: no path to the goal")
        elif not verification.within_budget:
            print(
                f"FAIL {level.id}: needs {verification.optimal_moves} moves, "
                f"energy is {verification.energy}"
            )
        elif not verification.ok:
            print(f"FAIL {level.id}: solution did not win when replayed")
        else:
            print(
                f"OK   {level.id}: {verification.optimal_moves} moves, "
                f"energy {verification.energy} (slack {verification.slack})"
            )
            if args.level:
                print("     " + " ".join(str(a) for a in verification.path))
            continue
        failed += 1

    if failed:
        sys.exit(1)


def cmd_replay(args):
    """Replay a list of actions and print the resulting board."""
    level = _resolve_level(args.level, args.levels_dir)

    try:
        actions = [Action.parse(text) for text in args.actions]
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = replay(create_game_state(level), actions)
    for index, action, reason in result.rejected:
        print(f"  #{index + 1} {action}: rejected ({reason.value})")

    print(render_state(result.state))
    print(
        f"\nTurn {result.state.turn_count}, energy {result.state.energy}/{result.state.max_energy}, "
        f"{result.applied} applied, {len(result.rejected)} rejected"
    )
    print(status_message(result.state))


def cmd_progress(args):
    """Show or reset the progress ledger."""
    store = SaveStore(args.save_path)
    if args.reset:
        if not store.clear():
            print(f"Error: could not remove {store.path}")
            sys.exit(1)
        print("Progress reset")
        return

    save = store.load()
    print(f"Save file: {store.path}")
    print(f"Version {save.version}, updated {save.timestamp}")
    if not save.level_progress:
        print("No levels completed yet")
        return
    for level_id, progress in sorted(save.level_progress.items()):
        status = "completed" if progress.completed else "in progress"
        print(f"  {level_id:<20} {status}  turns={progress.best_turns} energy={progress.best_energy}")


def render_state(state: GameState) -> str:
    """
    Draw the board as text.

    P player, G goal, # wall, ^ hazard, lower-case letter key,
    upper-case letter locked door, / open door, . empty
    """
    cells = [
        ["#" if tile.type == TileType.WALL else "." for tile in row]
        for row in state.grid.tiles
    ]
    cells[state.goal.y][state.goal.x] = "G"
    for hazard in state.hazards:
        if state.grid.in_bounds(hazard.position):
            cells[hazard.position.y][hazard.position.x] = "^"
    for interactable in state.interactables:
        pos = interactable.position
        if not state.grid.in_bounds(pos):
            continue
        letter = interactable.color.value[0]
        if interactable.is_uncollected_key:
            cells[pos.y][pos.x] = letter
        elif interactable.is_locked_door:
            cells[pos.y][pos.x] = letter.upper()
        elif interactable.type == InteractableType.DOOR:
            cells[pos.y][pos.x] = "/"
    player = state.player.position
    cells[player.y][player.x] = "P"
    return "\n".join(" ".join(row) for row in cells)


def _resolve_level(target: str, levels_dir=None) -> LevelData:
    """Load a level from a file path, or by id from the level directory."""
    if Path(target).suffix == ".json" or Path(target).is_file():
        result = load_level_file(target)
    else:
        result = LevelRepository(levels_dir).load_level(target)

    if not result.success:
        print(f"Error: {result.error}")
        sys.exit(1)
    return result.level


if __name__ == "__main__":
    main()
