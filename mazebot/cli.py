"""
Console runner for the maze robot.

Usage:
    mazebot solve <maze file> [--interval SECONDS] [--max-ticks N] [--no-clear]
    mazebot validate <maze file>...
"""

import argparse
import logging
import sys
import time
from typing import Optional, Sequence, TextIO

from mazebot.config import get_settings
from mazebot.core import (
    Cell,
    Grid,
    MazeError,
    build_engine,
    load_maze_file,
    render,
    render_path,
)

logger = logging.getLogger("mazebot.cli")

EXIT_OK = 0
EXIT_FILE_NOT_FOUND = 1
EXIT_INVALID_MAZE = 2
EXIT_STUCK = 3
EXIT_TICK_LIMIT = 4

CLEAR_SCREEN = "\033[2J\033[H"


class ConsoleRenderer:
    """Render callback that redraws the maze on a text stream."""

    def __init__(self, out: TextIO, clear: bool = True):
        self.out = out
        self.clear = clear

    def __call__(self, grid: Grid, robot_cell: Cell, history_cells: tuple[Cell, ...]) -> None:
        if self.clear:
            self.out.write(CLEAR_SCREEN)
        self.out.write(render(grid, robot_cell, history_cells) + "\n")
        self.out.flush()


def solve(
    maze_path: str,
    interval: float,
    max_ticks: Optional[int] = None,
    clear: bool = True,
    out: Optional[TextIO] = None,
) -> int:
    """
    Animate the robot through a maze file.

    Returns:
        Process exit code.
    """
    if out is None:
        out = sys.stdout

    try:
        parsed = load_maze_file(maze_path)
        engine = build_engine(parsed, render=ConsoleRenderer(out, clear))
    except FileNotFoundError:
        print(f"Error: No such file '{maze_path}'", file=out)
        return EXIT_FILE_NOT_FOUND
    except MazeError as e:
        logger.debug(f"Rejected {maze_path}: {e}")
        print(f"Error: {e}", file=out)
        return EXIT_INVALID_MAZE

    print(f"Going to solve a {parsed.width}x{parsed.height} maze: ", file=out)
    print(render(engine.grid, engine.robot.cell), file=out)

    while max_ticks is None or engine.ticks < max_ticks:
        if interval:
            time.sleep(interval)

        outcome = engine.step()

        if outcome.status == "solved":
            # Most recent cell first
            for cell in reversed(outcome.path):
                print(cell, file=out)
            print(render_path(engine.grid, outcome.path), file=out)
            print("Bot has found the exit!", file=out)
            print("The path taken is designated by '*' ", file=out)
            logger.info(f"Solved {maze_path} in {outcome.ticks} ticks")
            return EXIT_OK

        if outcome.status == "stuck":
            print(f"Error: {outcome.message}", file=out)
            logger.info(f"Stuck in {maze_path} after {outcome.ticks} ticks")
            return EXIT_STUCK

        print(f"Position: {outcome.position}", file=out)
        if outcome.message:
            print(outcome.message, file=out)

    print(f"Error: Gave up after {engine.ticks} ticks", file=out)
    return EXIT_TICK_LIMIT


def validate(maze_paths: Sequence[str], out: Optional[TextIO] = None) -> int:
    """Validate maze files and report each result."""
    if out is None:
        out = sys.stdout
    exit_code = EXIT_OK
    for maze_path in maze_paths:
        try:
            parsed = load_maze_file(maze_path)
        except (FileNotFoundError, MazeError) as e:
            print(f"{maze_path}: invalid ({e})", file=out)
            exit_code = EXIT_INVALID_MAZE
            continue

        print(
            f"{maze_path}: ok ({parsed.width}x{parsed.height}, "
            f"{parsed.opening_count} openings)",
            file=out,
        )
    return exit_code


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="mazebot", description="Maze-solving robot")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="animate the robot through a maze")
    solve_parser.add_argument("maze", help="path to a maze file")
    solve_parser.add_argument(
        "--interval",
        type=float,
        default=settings.tick_interval_seconds,
        help="seconds between ticks (default: %(default)s)",
    )
    solve_parser.add_argument("--max-ticks", type=int, default=None, help="give up after N ticks")
    solve_parser.add_argument(
        "--no-clear",
        dest="clear",
        action="store_false",
        help="do not clear the screen between frames",
    )

    validate_parser = subparsers.add_parser("validate", help="check maze files")
    validate_parser.add_argument("mazes", nargs="+", help="paths to maze files")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    if args.command == "solve":
        if args.interval < 0:
            print("Error: --interval must not be negative", file=sys.stderr)
            return EXIT_INVALID_MAZE
        return solve(args.maze, args.interval, args.max_ticks, args.clear)

    return validate(args.mazes)


if __name__ == "__main__":
    sys.exit(main())
