"""Run service for driving traversal engines and recording their outcomes."""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from mazebot.config import get_settings
from mazebot.core import TickOutcome, TraversalEngine, build_grid, render
from mazebot.core.maze_parser import split_rows
from mazebot.models.maze import Maze
from mazebot.models.run import Run

logger = logging.getLogger(__name__)


class RunLimitError(Exception):
    """Raised when too many runs are live at once."""

    pass


@dataclass
class LiveRun:
    """An engine in memory together with its database identity."""

    id: uuid.UUID
    maze_id: uuid.UUID
    engine: TraversalEngine
    created_at: datetime
    completed_at: Optional[datetime] = None

    @property
    def finished(self) -> bool:
        return self.engine.finished

    def render(self) -> str:
        """Draw the maze with the robot and its history."""
        engine = self.engine
        return render(engine.grid, engine.robot.cell, engine.history_cells)


class RunRegistry:
    """In-memory registry of live runs."""

    def __init__(self, max_active_runs: int):
        self.max_active_runs = max_active_runs
        self._runs: dict[uuid.UUID, LiveRun] = {}
        self._lock = asyncio.Lock()

    async def add(self, run: LiveRun) -> None:
        """Register a run, evicting finished runs when the registry is full."""
        async with self._lock:
            if len(self._runs) >= self.max_active_runs:
                for run_id in [r.id for r in self._runs.values() if r.finished]:
                    del self._runs[run_id]

            if len(self._runs) >= self.max_active_runs:
                raise RunLimitError(
                    f"Too many active runs (limit {self.max_active_runs})"
                )

            self._runs[run.id] = run

    def get(self, run_id: uuid.UUID) -> Optional[LiveRun]:
        return self._runs.get(run_id)

    async def remove(self, run_id: uuid.UUID) -> bool:
        async with self._lock:
            return self._runs.pop(run_id, None) is not None

    def clear(self) -> None:
        self._runs.clear()

    @property
    def active_count(self) -> int:
        """Number of registered runs."""
        return len(self._runs)


class RunService:
    """Service that creates, steps and records traversal runs."""

    def __init__(self, registry: RunRegistry):
        self.registry = registry

    async def start_run(self, db: AsyncSession, maze: Maze) -> LiveRun:
        """
        Create a run for maze and register its engine.

        Raises:
            MazeError: If the stored maze no longer loads.
            RunLimitError: If the registry is full.
        """
        grid, _ = build_grid(split_rows(maze.grid_data))
        engine = TraversalEngine(grid)

        live = LiveRun(
            id=uuid.uuid4(),
            maze_id=maze.id,
            engine=engine,
            created_at=datetime.now(timezone.utc),
        )
        await self.registry.add(live)

        db.add(
            Run(
                id=live.id,
                maze_id=maze.id,
                status=engine.state.value,
                tick_count=0,
                current_column=engine.robot.cell.column,
                current_row=engine.robot.cell.row,
                created_at=live.created_at,
            )
        )
        try:
            await db.commit()
        except Exception:
            await self.registry.remove(live.id)
            raise

        logger.info(f"Started run {live.id} on maze {maze.name}")
        return live

    async def step(self, db: AsyncSession, live: LiveRun) -> TickOutcome:
        """Run one tick and record it."""
        outcome = live.engine.step()
        await self._record(db, live, outcome)
        return outcome

    async def solve(
        self,
        db: AsyncSession,
        live: LiveRun,
        max_ticks: Optional[int] = None,
    ) -> TickOutcome:
        """Step until the run ends or max_ticks ticks have been spent."""
        limit = max_ticks or get_settings().max_solve_ticks
        outcome = live.engine.run(max_ticks=limit)
        await self._record(db, live, outcome)
        return outcome

    async def cancel(self, db: AsyncSession, live: LiveRun) -> None:
        """Drop a run's engine and mark unfinished runs as cancelled."""
        await self.registry.remove(live.id)

        row = await db.get(Run, live.id)
        if row is not None and not live.finished:
            row.status = "cancelled"
            row.completed_at = datetime.now(timezone.utc)
            await db.commit()

        logger.info(f"Cancelled run {live.id}")

    async def _record(self, db: AsyncSession, live: LiveRun, outcome: TickOutcome) -> None:
        row = await db.get(Run, live.id)
        if row is None:
            logger.warning(f"Run {live.id} missing from database")
            return

        row.status = outcome.state.value
        row.tick_count = outcome.ticks
        row.current_column = outcome.position.column
        row.current_row = outcome.position.row

        if outcome.state.is_terminal and live.completed_at is None:
            live.completed_at = datetime.now(timezone.utc)
            row.completed_at = live.completed_at
            if outcome.status == "solved":
                row.path_data = json.dumps(
                    [[cell.column, cell.row] for cell in outcome.path]
                )
            logger.info(
                f"Run {live.id} finished: {outcome.status} after {outcome.ticks} ticks"
            )

        await db.commit()


# Global service instance
_run_service: Optional[RunService] = None


def get_run_service() -> RunService:
    """Get singleton run service."""
    global _run_service
    if _run_service is None:
        settings = get_settings()
        _run_service = RunService(RunRegistry(settings.max_active_runs))
    return _run_service
