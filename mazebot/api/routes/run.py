"""Run routes for driving the maze robot tick by tick."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response, status
from fastapi.responses import PlainTextResponse

from mazebot.api.deps import CurrentRun, DbSession, Runs, limiter
from mazebot.api.routes.maze import get_maze_or_404
from mazebot.config import get_settings
from mazebot.core import MazeError, TickOutcome
from mazebot.schemas.run import RunCreateRequest, RunState, TickResponse
from mazebot.services.run_service import LiveRun, RunLimitError

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/run", tags=["Runs"])


def _run_state(live: LiveRun) -> RunState:
    return RunState(
        id=live.id,
        maze_id=live.maze_id,
        created_at=live.created_at,
        completed_at=live.completed_at,
        **live.engine.snapshot().to_dict(),
    )


def _tick_response(outcome: TickOutcome) -> TickResponse:
    return TickResponse(**outcome.to_dict())


@router.post(
    "",
    response_model=RunState,
    status_code=status.HTTP_201_CREATED,
)
async def create_run(
    request: RunCreateRequest,
    db: DbSession,
    runs: Runs,
) -> RunState:
    """Create a traversal run on a maze.

    The robot starts on the maze's first boundary entrance, facing inward.
    """
    maze = await get_maze_or_404(db, request.maze_id)

    if not maze.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Maze is not active",
        )

    try:
        live = await runs.start_run(db, maze)
    except MazeError as e:
        logger.error(f"Stored maze {maze.id} failed to load: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except RunLimitError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )

    return _run_state(live)


@router.get(
    "/{run_id}",
    response_model=RunState,
)
async def get_run(live: CurrentRun) -> RunState:
    """Get the live state of a run."""
    return _run_state(live)


@router.post(
    "/{run_id}/step",
    response_model=TickResponse,
)
@limiter.limit(f"{settings.rate_limit_requests}/minute")
async def step_run(
    request: Request,
    live: CurrentRun,
    db: DbSession,
    runs: Runs,
) -> TickResponse:
    """Advance the run by one tick.

    Finished runs keep returning their final outcome.
    """
    outcome = await runs.step(db, live)
    return _tick_response(outcome)


@router.post(
    "/{run_id}/solve",
    response_model=TickResponse,
)
@limiter.limit(f"{settings.rate_limit_solves}/minute")
async def solve_run(
    request: Request,
    live: CurrentRun,
    db: DbSession,
    runs: Runs,
    max_ticks: Optional[int] = Query(
        None,
        gt=0,
        description="Stop after this many ticks even if the run is not finished",
    ),
) -> TickResponse:
    """Step the run until it is solved or stuck."""
    outcome = await runs.solve(db, live, max_ticks=max_ticks)
    return _tick_response(outcome)


@router.get(
    "/{run_id}/render",
    response_class=PlainTextResponse,
)
async def render_run(live: CurrentRun) -> str:
    """Draw the maze with the robot (B) and its visited path (*)."""
    return live.render()


@router.delete(
    "/{run_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def cancel_run(
    live: CurrentRun,
    db: DbSession,
    runs: Runs,
) -> Response:
    """Cancel a run and drop its engine."""
    await runs.cancel(db, live)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
