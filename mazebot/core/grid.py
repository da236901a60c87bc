"""
Grid model for the maze robot.

A grid is an immutable rectangle of wall flags built once from text rows.

Maze Format:
    X = Wall (impassable)
    O = User-marked exit (always open)
    . = Open path (can also be space)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


WALL_CHAR = "X"
EXIT_CHAR = "O"
OPEN_CHARS = frozenset({" ", "."})


class MazeError(Exception):
    """Base class for maze loading errors."""

    pass


class MalformedGridError(MazeError):
    """Raised when grid rows are missing or have inconsistent lengths."""

    pass


class InsufficientOpeningsError(MazeError):
    """Raised when a maze has fewer than two usable entrances/exits."""

    pass


class OutOfBoundsError(IndexError):
    """Raised when a cell outside the grid is queried."""

    pass


class Direction(Enum):
    """Robot headings."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Get (d_column, d_row) for this direction."""
        deltas = {
            Direction.UP: (0, -1),
            Direction.DOWN: (0, 1),
            Direction.LEFT: (-1, 0),
            Direction.RIGHT: (1, 0),
        }
        return deltas[self]

    @property
    def opposite(self) -> "Direction":
        opposites = {
            Direction.UP: Direction.DOWN,
            Direction.DOWN: Direction.UP,
            Direction.LEFT: Direction.RIGHT,
            Direction.RIGHT: Direction.LEFT,
        }
        return opposites[self]


@dataclass(frozen=True)
class Cell:
    """A (column, row) coordinate in the grid."""
    column: int
    row: int

    def step(self, direction: Direction) -> "Cell":
        """Return the cell one unit away in direction (may be off-grid)."""
        d_column, d_row = direction.delta
        return Cell(self.column + d_column, self.row + d_row)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"column": self.column, "row": self.row}

    def __str__(self) -> str:
        return f"{self.column},{self.row}"


@dataclass(frozen=True)
class Opening:
    """An entrance or exit cell.

    ``direction`` is the inward heading a robot takes when entering there;
    user-marked exits have none.
    """
    cell: Cell
    direction: Optional[Direction] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "cell": self.cell.to_dict(),
            "direction": self.direction.value if self.direction else None,
        }


class Grid:
    """
    Immutable wall grid.

    Use ``build_grid`` to construct one from text rows. Cells outside
    ``[0, column_count) x [0, row_count)`` are never valid; ``neighbor`` and
    ``is_open`` report them as blocked instead of raising.
    """

    def __init__(self, walls: Iterable[Iterable[bool]], user_exits: Iterable[Opening] = ()):
        self._walls: tuple[tuple[bool, ...], ...] = tuple(tuple(row) for row in walls)
        self.row_count: int = len(self._walls)
        self.column_count: int = len(self._walls[0]) if self._walls else 0
        self.user_exits: tuple[Opening, ...] = tuple(user_exits)
        self._exit_cells = frozenset(opening.cell for opening in self.user_exits)

        if any(len(row) != self.column_count for row in self._walls):
            raise MalformedGridError("Inconsistent maze proportions")

    def __repr__(self) -> str:
        return f"<Grid {self.column_count}x{self.row_count}>"

    def contains(self, cell: Cell) -> bool:
        """Check whether cell lies inside the grid."""
        return 0 <= cell.row < self.row_count and 0 <= cell.column < self.column_count

    def is_wall(self, cell: Cell) -> bool:
        """
        Check whether cell is a wall.

        Raises:
            OutOfBoundsError: If cell is outside the grid.
        """
        if not self.contains(cell):
            raise OutOfBoundsError(
                f"Cell ({cell}) outside {self.column_count}x{self.row_count} grid"
            )
        return self._walls[cell.row][cell.column]

    def neighbor(self, cell: Cell, direction: Direction) -> Optional[Cell]:
        """Get the adjacent cell in direction, or None past the edge."""
        target = cell.step(direction)
        if not self.contains(target):
            return None
        return target

    def is_open(self, cell: Cell, direction: Direction) -> bool:
        """Check whether the neighbour in direction exists and is not a wall."""
        target = self.neighbor(cell, direction)
        return target is not None and not self.is_wall(target)

    def is_user_exit(self, cell: Cell) -> bool:
        return cell in self._exit_cells

    def find_boundary_entrances(self) -> list[Opening]:
        """
        Find entrances on the outer edge of the grid.

        Takes the first open cell of the top row, then walks the interior
        rows in order checking the left edge before the right edge of each
        row, then takes the first open cell of the bottom row. Each side
        yields at most one opening, so an interior side opening on an
        earlier row comes first.

        Returns:
            List of boundary openings, or an empty list when the boundary
            openings and user-marked exits together give fewer than two
            distinct cells.
        """
        if self.row_count == 0 or self.column_count == 0:
            return []

        entrances: list[Opening] = []
        last_row = self.row_count - 1
        last_column = self.column_count - 1

        top = self._first_open_in_row(0)
        if top is not None:
            entrances.append(Opening(top, Direction.DOWN))

        left_found = right_found = False
        for row in range(1, last_row):
            if not left_found and not self._walls[row][0]:
                entrances.append(Opening(Cell(0, row), Direction.RIGHT))
                left_found = True
            # A single-column grid has no separate right edge
            if not right_found and last_column > 0 and not self._walls[row][last_column]:
                entrances.append(Opening(Cell(last_column, row), Direction.LEFT))
                right_found = True
            if left_found and right_found:
                break

        if last_row > 0:
            bottom = self._first_open_in_row(last_row)
            if bottom is not None:
                entrances.append(Opening(bottom, Direction.UP))

        cells = {opening.cell for opening in entrances}
        cells.update(opening.cell for opening in self.user_exits)
        if not entrances or len(cells) < 2:
            return []

        return entrances

    def _first_open_in_row(self, row: int) -> Optional[Cell]:
        for column, wall in enumerate(self._walls[row]):
            if not wall:
                return Cell(column, row)
        return None


def build_grid(raw_rows: Iterable[str]) -> tuple[Grid, list[Opening]]:
    """
    Build a grid from text rows.

    Any cell holding the user-exit symbol is open and recorded as an
    opening, wherever it sits.

    Args:
        raw_rows: Sequence of equal-length strings.

    Returns:
        Tuple of (grid, user-marked exits).

    Raises:
        MalformedGridError: If there are no rows, a row is empty, or row
            lengths disagree with the first row.
    """
    rows = list(raw_rows)
    if not rows:
        raise MalformedGridError("Maze has no rows")

    column_count = len(rows[0])
    if column_count == 0:
        raise MalformedGridError("Maze has no columns")

    walls: list[list[bool]] = []
    user_exits: list[Opening] = []

    for row_index, line in enumerate(rows):
        if len(line) != column_count:
            raise MalformedGridError(
                f"Inconsistent maze proportions: row {row_index} has {len(line)} "
                f"columns, expected {column_count}"
            )

        row = []
        for column_index, char in enumerate(line):
            if char == EXIT_CHAR:
                user_exits.append(Opening(Cell(column_index, row_index)))
            row.append(char == WALL_CHAR)
        walls.append(row)

    return Grid(walls, user_exits), user_exits
