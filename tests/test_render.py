"""Tests for text rendering."""

from mazebot.core import Cell, build_grid, render, render_path


ROWS = ["X XX", "X  X", "XXOX"]


def test_render_plain_grid():
    grid, _ = build_grid(ROWS)
    assert render(grid, None) == "X XX\nX  X\nXXOX"


def test_render_robot_and_history():
    grid, _ = build_grid(ROWS)

    drawing = render(grid, Cell(2, 1), [Cell(1, 0), Cell(1, 1)])

    assert drawing.split("\n") == ["X*XX", "X*BX", "XXOX"]


def test_robot_drawn_over_history():
    grid, _ = build_grid(ROWS)

    drawing = render(grid, Cell(1, 1), (Cell(1, 0), Cell(1, 1)))

    assert drawing.split("\n")[1] == "XB X"


def test_render_path_marks_every_cell():
    grid, _ = build_grid(ROWS)

    drawing = render_path(grid, (Cell(1, 0), Cell(1, 1), Cell(2, 1), Cell(2, 2)))

    assert drawing.split("\n") == ["X*XX", "X**X", "XX*X"]


def test_dots_render_as_spaces():
    grid, _ = build_grid(["X.X", "X.X"])
    assert render(grid, None) == "X X\nX X"
