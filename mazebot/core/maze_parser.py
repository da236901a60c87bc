"""
Maze Parser for the maze robot.

Loads and validates maze files from the filesystem.

Maze Format:
    X = Wall (impassable)
    O = User-marked exit
    . = Open path (can also be space)

Blank lines are ignored. Every remaining line must have the same length.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .grid import (
    EXIT_CHAR,
    OPEN_CHARS,
    WALL_CHAR,
    Grid,
    InsufficientOpeningsError,
    MazeError,
    build_grid,
)
from .traversal import RenderCallback, TraversalEngine

logger = logging.getLogger(__name__)


class MazeParseError(MazeError):
    """Exception raised when maze parsing fails."""

    pass


class MazeValidationError(MazeError):
    """Exception raised when maze validation fails."""

    pass


@dataclass
class ParsedMaze:
    """Parsed maze data ready for storage or use."""

    name: str
    grid_data: str
    width: int
    height: int
    entrance_column: int
    entrance_row: int
    entrance_direction: str
    opening_count: int

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "name": self.name,
            "grid_data": self.grid_data,
            "width": self.width,
            "height": self.height,
            "entrance_column": self.entrance_column,
            "entrance_row": self.entrance_row,
            "entrance_direction": self.entrance_direction,
            "opening_count": self.opening_count,
        }

    def to_grid(self) -> Grid:
        """Build the grid described by grid_data."""
        grid, _ = build_grid(split_rows(self.grid_data))
        return grid


VALID_CHARS = {WALL_CHAR, EXIT_CHAR, *OPEN_CHARS}


def split_rows(maze_text: str) -> list[str]:
    """Split maze text into rows, dropping blank lines and line endings."""
    rows = []
    for line in maze_text.split("\n"):
        line = line.rstrip("\r")
        if line:
            rows.append(line)
    return rows


def parse_maze_text(maze_text: str, name: str = "Unnamed") -> ParsedMaze:
    """
    Parse maze text and extract metadata.

    Args:
        maze_text: Multi-line string representing the maze grid.
        name: Name of the maze.

    Returns:
        ParsedMaze with grid data and metadata.

    Raises:
        MazeParseError: If the maze text is empty.
        MazeValidationError: If the maze holds an invalid character.
        MalformedGridError: If row lengths are inconsistent.
        InsufficientOpeningsError: If there are fewer than two openings.
    """
    if not maze_text or not maze_text.strip():
        raise MazeParseError("Maze text is empty")

    rows = split_rows(maze_text)

    for y, line in enumerate(rows):
        for x, char in enumerate(line):
            if char not in VALID_CHARS:
                raise MazeValidationError(
                    f"Invalid character '{char}' at position ({x}, {y}). "
                    f"Valid characters: {', '.join(repr(c) for c in sorted(VALID_CHARS))}"
                )

    grid, user_exits = build_grid(rows)

    entrances = grid.find_boundary_entrances()
    if not entrances:
        raise InsufficientOpeningsError(
            "The maze must have at least two entrances/exits on the exterior sides"
        )

    openings = {opening.cell for opening in entrances}
    openings.update(opening.cell for opening in user_exits)
    entrance = entrances[0]

    return ParsedMaze(
        name=name,
        grid_data="\n".join(rows),
        width=grid.column_count,
        height=grid.row_count,
        entrance_column=entrance.cell.column,
        entrance_row=entrance.cell.row,
        entrance_direction=entrance.direction.value,
        opening_count=len(openings),
    )


def load_maze_file(
    file_path: Union[Path, str],
    name: Optional[str] = None,
) -> ParsedMaze:
    """
    Load and parse a maze file from the filesystem.

    Args:
        file_path: Path to the maze file.
        name: Optional name override. If not provided, uses filename.

    Returns:
        ParsedMaze with grid data and metadata.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        MazeError: If the maze cannot be parsed or is invalid.
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Maze file not found: {file_path}")

    if not file_path.is_file():
        raise MazeParseError(f"Path is not a file: {file_path}")

    try:
        maze_text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MazeParseError(f"Failed to read maze file: {e}") from e

    if name is None:
        name = file_path.stem.replace("_", " ").replace("-", " ").title()

    return parse_maze_text(maze_text, name=name)


def load_all_mazes(mazes_dir: Union[Path, str]) -> list[ParsedMaze]:
    """
    Load all maze files from a directory.

    Files that fail to parse are logged and skipped.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
    """
    mazes_dir = Path(mazes_dir)

    if not mazes_dir.exists():
        raise FileNotFoundError(f"Mazes directory not found: {mazes_dir}")

    if not mazes_dir.is_dir():
        raise MazeParseError(f"Path is not a directory: {mazes_dir}")

    mazes = []
    for maze_file in sorted(mazes_dir.glob("*.txt")):
        try:
            mazes.append(load_maze_file(maze_file))
        except MazeError as e:
            logger.warning(f"Failed to load {maze_file}: {e}")

    return mazes


def validate_maze_text(maze_text: str) -> tuple[bool, Optional[str]]:
    """
    Validate maze text without raising exceptions.

    Returns:
        Tuple of (is_valid, error_message).
        error_message is None if valid.
    """
    try:
        parse_maze_text(maze_text)
        return True, None
    except MazeError as e:
        return False, str(e)


def build_engine(
    maze: Union[ParsedMaze, str],
    render: Optional[RenderCallback] = None,
) -> TraversalEngine:
    """
    Create a traversal engine for a parsed maze or raw maze text.

    Raises:
        MazeError: If raw text fails to parse.
    """
    if isinstance(maze, str):
        maze = parse_maze_text(maze)
    return TraversalEngine(maze.to_grid(), render=render)

