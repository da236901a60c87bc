"""Tests for the traversal state machine."""

import pytest

from mazebot.core import (
    Cell,
    Direction,
    Grid,
    InsufficientOpeningsError,
    MalformedGridError,
    Opening,
    TraversalEngine,
    TraversalState,
    VisitedNode,
    build_grid,
)
from mazebot.core.traversal import BACKTRACK_ORDER, PERPENDICULAR


TUTORIAL_ROWS = [
    "X XXXXXXX",
    "X   X   X",
    "X X X X X",
    "X X   X X",
    "X XXXXX X",
    "X       X",
    "XXXXXXX X",
]

LOOP_ROWS = [
    "XXXXXXXXX X",
    "    X     X",
    "X X X XXX X",
    "X X   X   X",
    "X XXXXX XXX",
    "X         X",
    "XXXXXXXXXXX",
]


def engine_for(rows, render=None) -> TraversalEngine:
    grid, _ = build_grid(rows)
    return TraversalEngine(grid, render=render)


def run_to_end(engine: TraversalEngine) -> list:
    """Step until terminal, collecting every outcome."""
    outcomes = []
    limit = engine.grid.row_count * engine.grid.column_count * 4
    while not engine.finished:
        outcomes.append(engine.step())
        assert len(outcomes) <= limit
    return outcomes


def assert_valid_path(grid, path):
    for cell in path:
        assert not grid.is_wall(cell)
    for a, b in zip(path, path[1:]):
        assert abs(a.column - b.column) + abs(a.row - b.row) == 1


class TestPriorityTables:
    """Tests for the direction priority tables."""

    def test_backtrack_order(self):
        assert BACKTRACK_ORDER == (
            Direction.DOWN,
            Direction.UP,
            Direction.LEFT,
            Direction.RIGHT,
        )

    def test_perpendicular_branches(self):
        assert PERPENDICULAR[Direction.UP] == (Direction.LEFT, Direction.RIGHT)
        assert PERPENDICULAR[Direction.DOWN] == (Direction.LEFT, Direction.RIGHT)
        assert PERPENDICULAR[Direction.LEFT] == (Direction.UP, Direction.DOWN)
        assert PERPENDICULAR[Direction.RIGHT] == (Direction.UP, Direction.DOWN)


class TestVisitedNode:
    """Tests for per-cell bookkeeping."""

    def test_scan_records_open_neighbours(self):
        grid, _ = build_grid(["X X", "   ", "X X"])
        node = VisitedNode.scan(grid, Cell(1, 1))

        assert all(node.open.values())
        assert not any(node.departed.values())

    def test_edges_are_closed(self):
        grid, _ = build_grid(["X X", "   ", "X X"])
        node = VisitedNode.scan(grid, Cell(1, 0))

        assert node.open[Direction.UP] is False
        assert node.open[Direction.DOWN] is True

    def test_exhausted_after_departures(self):
        grid, _ = build_grid(["X X", "X X"])
        node = VisitedNode.scan(grid, Cell(1, 0))

        assert node.exhausted is False
        node.mark_departed(Direction.DOWN)
        assert node.can_depart(Direction.DOWN) is False
        assert node.exhausted is True


class TestEngineSetup:
    """Tests for engine construction."""

    def test_starts_on_first_entrance(self):
        engine = engine_for(TUTORIAL_ROWS)

        assert engine.robot.cell == Cell(1, 0)
        assert engine.robot.direction == Direction.DOWN
        assert engine.exits == (Cell(7, 6),)
        assert engine.state == TraversalState.ADVANCING
        assert engine.ticks == 0
        assert engine.history == []

    def test_user_exits_are_goals(self):
        engine = engine_for(["X XX", "X OX", "XXXX"])
        assert engine.exits == (Cell(2, 1),)

    def test_start_is_never_a_goal(self):
        engine = engine_for(["XOX", "X X", "X X"])

        assert engine.start.cell == Cell(1, 0)
        assert engine.exits == (Cell(1, 2),)

    def test_single_opening_raises_before_any_step(self):
        grid, _ = build_grid(["X XX", "X  X", "XXXX"])
        with pytest.raises(InsufficientOpeningsError):
            TraversalEngine(grid)

    def test_starts_on_earliest_side_opening(self):
        engine = engine_for(["XXXXX", "X    ", "X XXX", "  XXX", "XXXXX"])

        assert engine.start == Opening(Cell(4, 1), Direction.LEFT)
        assert engine.robot.direction == Direction.LEFT
        assert engine.exits == (Cell(0, 3),)

    def test_empty_grid_raises_before_any_step(self):
        with pytest.raises(InsufficientOpeningsError):
            TraversalEngine(Grid([]))

    def test_malformed_grid_raises_before_any_step(self):
        with pytest.raises(MalformedGridError):
            build_grid(["X X X", "X   X", "X XX"])


class TestScenarios:
    """End-to-end traversal scenarios."""

    def test_open_square(self):
        """3x3 with wall corners is solved within 9 ticks."""
        engine = engine_for(["X X", "   ", "X X"])

        outcomes = run_to_end(engine)

        assert outcomes[-1].status == "solved"
        assert len(outcomes) <= 9
        assert len(outcomes[-1].path) >= 3
        assert_valid_path(engine.grid, outcomes[-1].path)

    def test_dead_end_is_stuck_after_one_tick(self):
        engine = engine_for(["X XXX", "XXXXX", "XXXXX", "XXOXX"])

        outcome = engine.step()

        assert outcome.status == "stuck"
        assert outcome.ticks == 1
        assert engine.state == TraversalState.STUCK
        assert engine.history == []

    def test_straight_corridor(self):
        rows = ["X X"] * 6
        engine = engine_for(rows)
        states = []

        outcomes = []
        while not engine.finished:
            outcomes.append(engine.step())
            states.append(engine.state)

        assert len(outcomes) == len(rows) - 1
        assert outcomes[-1].status == "solved"
        assert TraversalState.BACKTRACKING not in states
        assert outcomes[-1].path == tuple(Cell(1, row) for row in range(len(rows)))

    def test_tutorial_maze(self):
        engine = engine_for(TUTORIAL_ROWS)

        outcomes = run_to_end(engine)
        final = outcomes[-1]

        assert final.status == "solved"
        assert final.ticks == 38
        assert final.position == Cell(7, 6)
        assert final.path[0] == Cell(1, 0)
        assert final.path[-1] == Cell(7, 6)
        assert len(final.path) == 13
        assert_valid_path(engine.grid, final.path)

    def test_tutorial_backtracks_from_dead_end(self):
        engine = engine_for(TUTORIAL_ROWS)

        outcomes = run_to_end(engine)
        backtracking = [o for o in outcomes if o.state == TraversalState.BACKTRACKING]

        assert len(backtracking) == 12
        assert outcomes[24].position == Cell(3, 1)
        assert outcomes[36].position == Cell(7, 5)
        assert outcomes[36].state == TraversalState.ADVANCING

    def test_maze_with_loop_terminates(self):
        engine = engine_for(LOOP_ROWS)

        outcomes = run_to_end(engine)

        assert outcomes[-1].status == "solved"
        assert outcomes[-1].position == Cell(0, 1)
        assert_valid_path(engine.grid, outcomes[-1].path)

    def test_path_cells_are_unique(self):
        engine = engine_for(LOOP_ROWS)

        outcome = engine.run()

        assert len(set(outcome.path)) == len(outcome.path)

    def test_inner_user_exit(self):
        rows = [
            "XXXXXXX",
            "X     X",
            "X XXX X",
            "X XOX X",
            "X X X X",
            "  X   X",
            "XXXXXXX",
        ]
        engine = engine_for(rows)

        outcome = engine.run()

        assert outcome.status == "solved"
        assert outcome.position == Cell(3, 3)
        assert_valid_path(engine.grid, outcome.path)

    def test_unreachable_exit_is_stuck(self):
        rows = [
            "X XXXX",
            "X    X",
            "X XX X",
            "XXXXXX",
            "XXX XX",
        ]
        engine = engine_for(rows)

        outcomes = run_to_end(engine)

        assert outcomes[-1].status == "stuck"
        assert TraversalState.BACKTRACKING in {o.state for o in outcomes}


class TestStepping:
    """Tests for tick mechanics."""

    def test_each_tick_moves_one_cell(self):
        engine = engine_for(TUTORIAL_ROWS)
        previous = engine.robot.cell

        for outcome in run_to_end(engine):
            delta = abs(outcome.position.column - previous.column) + abs(
                outcome.position.row - previous.row
            )
            assert delta == 1
            previous = outcome.position

    def test_history_top_is_robot_while_advancing(self):
        engine = engine_for(TUTORIAL_ROWS)

        while not engine.finished:
            engine.step()
            if engine.state == TraversalState.ADVANCING and engine.history:
                top = engine.history[-1].cell
                assert top == engine.robot.cell or top == engine.path[-2]

    def test_terminal_outcome_is_repeated(self):
        engine = engine_for(["X X", "X X"])

        first = engine.step()
        again = engine.step()

        assert first.status == "solved"
        assert again is first
        assert engine.ticks == 1

    def test_run_respects_max_ticks(self):
        engine = engine_for(TUTORIAL_ROWS)

        outcome = engine.run(max_ticks=5)

        assert outcome.status == "moved"
        assert engine.ticks == 5
        assert outcome.position == Cell(1, 5)

    def test_run_rejects_zero_ticks(self):
        engine = engine_for(TUTORIAL_ROWS)
        with pytest.raises(ValueError):
            engine.run(max_ticks=0)

    def test_render_called_after_each_move(self):
        calls = []

        def sink(grid, robot_cell, history_cells):
            calls.append((robot_cell, history_cells))
            return "ignored"

        engine = engine_for(["X X", "X X", "X X"], render=sink)
        engine.run()

        assert [cell for cell, _ in calls] == [Cell(1, 1), Cell(1, 2)]
        assert calls[-1][1] == (Cell(1, 0), Cell(1, 1))
        assert all(isinstance(history, tuple) for _, history in calls)

    def test_render_not_called_when_stuck(self):
        calls = []
        engine = engine_for(
            ["X XXX", "XXXXX", "XXXXX", "XXOXX"],
            render=lambda *args: calls.append(args),
        )

        engine.step()

        assert calls == []

    def test_snapshot(self):
        engine = engine_for(TUTORIAL_ROWS)
        engine.run(max_ticks=3)

        snapshot = engine.snapshot()

        assert snapshot.state == TraversalState.ADVANCING
        assert snapshot.position == Cell(1, 3)
        assert snapshot.direction == Direction.DOWN
        assert snapshot.history == (Cell(1, 0), Cell(1, 1), Cell(1, 2))
        assert snapshot.ticks == 3
        assert snapshot.to_dict()["position"] == {"column": 1, "row": 3}

    def test_outcome_to_dict(self):
        engine = engine_for(["X X", "X X"])

        data = engine.step().to_dict()

        assert data["status"] == "solved"
        assert data["state"] == "solved"
        assert data["path"] == [{"column": 1, "row": 0}, {"column": 1, "row": 1}]
        assert data["message"] == "Bot has found the exit!"
