"""
Maze robot traversal engine.

Drives a robot through a grid one tick at a time:
- Keep going straight while the cell ahead is open
- Turn onto a perpendicular branch when blocked
- Backtrack along the visited path when no branch is left
- Stop on an exit (solved) or when the path is exhausted (stuck)

The engine is synchronous; callers own pacing and call ``step()`` once
per tick.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Literal, Optional

from .grid import (
    Cell,
    Direction,
    Grid,
    InsufficientOpeningsError,
    Opening,
)

logger = logging.getLogger(__name__)

# Branch priorities
BACKTRACK_ORDER = (Direction.DOWN, Direction.UP, Direction.LEFT, Direction.RIGHT)
PERPENDICULAR = {
    Direction.UP: (Direction.LEFT, Direction.RIGHT),
    Direction.DOWN: (Direction.LEFT, Direction.RIGHT),
    Direction.LEFT: (Direction.UP, Direction.DOWN),
    Direction.RIGHT: (Direction.UP, Direction.DOWN),
}

RenderCallback = Callable[[Grid, Cell, tuple[Cell, ...]], object]


class TraversalState(Enum):
    """States of the traversal state machine."""
    ADVANCING = "advancing"
    BACKTRACKING = "backtracking"
    SOLVED = "solved"
    STUCK = "stuck"

    @property
    def is_terminal(self) -> bool:
        return self in (TraversalState.SOLVED, TraversalState.STUCK)


@dataclass
class VisitedNode:
    """Per-cell record of open neighbours and directions already taken."""
    cell: Cell
    open: dict[Direction, bool] = field(default_factory=dict)
    departed: dict[Direction, bool] = field(
        default_factory=lambda: {direction: False for direction in Direction}
    )

    @classmethod
    def scan(cls, grid: Grid, cell: Cell) -> "VisitedNode":
        """Create a node for cell with its neighbours read from grid."""
        return cls(
            cell=cell,
            open={direction: grid.is_open(cell, direction) for direction in Direction},
        )

    def can_depart(self, direction: Direction) -> bool:
        return self.open[direction] and not self.departed[direction]

    def mark_departed(self, direction: Direction) -> None:
        self.departed[direction] = True

    @property
    def exhausted(self) -> bool:
        """True when every direction is closed or already taken."""
        return not any(self.can_depart(direction) for direction in Direction)


@dataclass
class RobotState:
    """Robot position and heading."""
    cell: Cell
    direction: Direction


@dataclass(frozen=True)
class TickOutcome:
    """Result of a single tick."""
    status: Literal["moved", "solved", "stuck"]
    position: Cell
    ticks: int
    state: TraversalState
    path: tuple[Cell, ...] = ()
    message: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        result = {
            "status": self.status,
            "position": self.position.to_dict(),
            "ticks": self.ticks,
            "state": self.state.value,
        }
        if self.status == "solved":
            result["path"] = [cell.to_dict() for cell in self.path]
        if self.message:
            result["message"] = self.message
        return result


@dataclass(frozen=True)
class TraversalSnapshot:
    """Immutable view of an engine's state."""
    state: TraversalState
    position: Cell
    direction: Direction
    history: tuple[Cell, ...]
    ticks: int
    start: Opening
    exits: tuple[Cell, ...]

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "state": self.state.value,
            "position": self.position.to_dict(),
            "direction": self.direction.value,
            "history": [cell.to_dict() for cell in self.history],
            "ticks": self.ticks,
            "start": self.start.to_dict(),
            "exits": [cell.to_dict() for cell in self.exits],
        }


class TraversalEngine:
    """
    Tick-driven maze traversal.

    The robot starts on the first boundary entrance, heading inward. Every
    other boundary entrance and every user-marked exit is a goal. A cell is
    entered at most once, so a run always ends within
    ``rows * columns * 4`` ticks.

    Example usage:
        grid, _ = build_grid(rows)
        engine = TraversalEngine(grid)

        while not engine.finished:
            outcome = engine.step()
    """

    def __init__(self, grid: Grid, render: Optional[RenderCallback] = None):
        """
        Initialize the engine on grid.

        Args:
            grid: Grid to traverse.
            render: Optional callback invoked with
                ``(grid, robot_cell, history_cells)`` after every tick that
                moves the robot.

        Raises:
            InsufficientOpeningsError: If the grid does not offer an
                entrance plus at least one exit.
        """
        entrances = grid.find_boundary_entrances()
        if not entrances:
            raise InsufficientOpeningsError(
                "The maze must have at least two entrances/exits on the exterior sides"
            )

        self.grid = grid
        self.start: Opening = entrances[0]

        # The start is never a goal, even when it is also user-marked
        candidates = [opening.cell for opening in entrances[1:]]
        candidates.extend(opening.cell for opening in grid.user_exits)
        self.exits: tuple[Cell, ...] = tuple(
            dict.fromkeys(cell for cell in candidates if cell != self.start.cell)
        )

        self.robot = RobotState(cell=self.start.cell, direction=self.start.direction)
        self.history: list[VisitedNode] = []
        self.state = TraversalState.ADVANCING
        self.ticks = 0

        self._visited: set[Cell] = {self.start.cell}
        self._render = render
        self._last_outcome: Optional[TickOutcome] = None

    @property
    def finished(self) -> bool:
        return self.state.is_terminal

    @property
    def history_cells(self) -> tuple[Cell, ...]:
        return tuple(node.cell for node in self.history)

    @property
    def path(self) -> tuple[Cell, ...]:
        """Cells from the entrance to the robot, in traversal order."""
        cells = self.history_cells
        if not cells or cells[-1] != self.robot.cell:
            cells += (self.robot.cell,)
        return cells

    def snapshot(self) -> TraversalSnapshot:
        return TraversalSnapshot(
            state=self.state,
            position=self.robot.cell,
            direction=self.robot.direction,
            history=self.history_cells,
            ticks=self.ticks,
            start=self.start,
            exits=self.exits,
        )

    def step(self) -> TickOutcome:
        """
        Run one tick.

        Returns:
            TickOutcome describing the move, the solution, or a dead run.
            Once the run is over the terminal outcome is returned again
            without ticking.
        """
        if self.state.is_terminal and self._last_outcome is not None:
            return self._last_outcome

        self.ticks += 1
        if self.state == TraversalState.BACKTRACKING:
            outcome = self._backtrack()
        else:
            outcome = self._advance()

        self._last_outcome = outcome
        return outcome

    def run(self, max_ticks: Optional[int] = None) -> TickOutcome:
        """
        Step until the run ends or max_ticks ticks have been spent.

        Args:
            max_ticks: Optional cap on the number of ticks for this call.

        Returns:
            The last outcome produced.
        """
        if max_ticks is not None and max_ticks < 1:
            raise ValueError("max_ticks must be at least 1")

        outcome = self.step()
        spent = 1
        while not self.state.is_terminal:
            if max_ticks is not None and spent >= max_ticks:
                break
            outcome = self.step()
            spent += 1
        return outcome

    def _advance(self) -> TickOutcome:
        node = self._current_node()
        heading = self.robot.direction

        if self._is_fresh(node, heading):
            return self._move(node, heading)

        for direction in PERPENDICULAR[heading]:
            if node.can_depart(direction) and self._is_fresh(node, direction):
                return self._move(node, direction)

        logger.debug("Dead end at %s, backtracking", node.cell)
        self.state = TraversalState.BACKTRACKING
        return self._backtrack()

    def _backtrack(self) -> TickOutcome:
        self.history.pop()

        if not self.history:
            self.state = TraversalState.STUCK
            logger.debug("History exhausted after %d ticks", self.ticks)
            return TickOutcome(
                status="stuck",
                position=self.robot.cell,
                ticks=self.ticks,
                state=self.state,
                message="Bot got stuck! No solution.",
            )

        node = self.history[-1]
        self.robot.cell = node.cell

        for direction in BACKTRACK_ORDER:
            # Visited cells include the one just popped
            if node.can_depart(direction) and self._is_fresh(node, direction):
                node.mark_departed(direction)
                self.robot.direction = direction
                self.state = TraversalState.ADVANCING
                logger.debug("Branch %s found at %s", direction.value, node.cell)
                break

        self._redraw()
        return TickOutcome(
            status="moved",
            position=self.robot.cell,
            ticks=self.ticks,
            state=self.state,
            message="The bot is currently backtracking to an unused branch",
        )

    def _current_node(self) -> VisitedNode:
        if not self.history or self.history[-1].cell != self.robot.cell:
            self.history.append(VisitedNode.scan(self.grid, self.robot.cell))
        return self.history[-1]

    def _is_fresh(self, node: VisitedNode, direction: Direction) -> bool:
        """Check that direction leads from node to an open, unvisited cell."""
        if not node.open[direction]:
            return False
        return node.cell.step(direction) not in self._visited

    def _move(self, node: VisitedNode, direction: Direction) -> TickOutcome:
        node.mark_departed(direction)
        self.robot.direction = direction
        self.robot.cell = node.cell.step(direction)
        self._visited.add(self.robot.cell)
        self._redraw()

        if self.robot.cell in self.exits:
            self.state = TraversalState.SOLVED
            logger.debug("Exit %s reached after %d ticks", self.robot.cell, self.ticks)
            return TickOutcome(
                status="solved",
                position=self.robot.cell,
                ticks=self.ticks,
                state=self.state,
                path=self.path,
                message="Bot has found the exit!",
            )

        return TickOutcome(
            status="moved",
            position=self.robot.cell,
            ticks=self.ticks,
            state=self.state,
        )

    def _redraw(self) -> None:
        if self._render is not None:
            self._render(self.grid, self.robot.cell, self.history_cells)
