"""Text rendering of a grid with the robot and its trail."""

from typing import Iterable, Optional

from .grid import Cell, EXIT_CHAR, Grid, WALL_CHAR

ROBOT_CHAR = "B"
PATH_CHAR = "*"
OPEN_CHAR = " "


def render(
    grid: Grid,
    robot_cell: Optional[Cell],
    history_cells: Iterable[Cell] = (),
) -> str:
    """
    Generate an ASCII drawing of the grid.

    Args:
        grid: Grid to draw.
        robot_cell: Robot position, drawn as ``B``. None hides the robot.
        history_cells: Cells drawn as ``*``.

    Returns:
        One line per grid row joined with newlines.
    """
    trail = set(history_cells)

    lines = []
    for row in range(grid.row_count):
        line = ""
        for column in range(grid.column_count):
            cell = Cell(column, row)
            if cell == robot_cell:
                line += ROBOT_CHAR
            elif cell in trail:
                line += PATH_CHAR
            elif grid.is_wall(cell):
                line += WALL_CHAR
            elif grid.is_user_exit(cell):
                line += EXIT_CHAR
            else:
                line += OPEN_CHAR
        lines.append(line)

    return "\n".join(lines)


def render_path(grid: Grid, path: Iterable[Cell]) -> str:
    """Draw a finished solution with every path cell marked ``*``."""
    return render(grid, None, path)
