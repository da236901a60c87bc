"""Maze routes for listing, creating and drawing mazes."""

import uuid

from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import PlainTextResponse
from sqlalchemy import select

from mazebot.api.deps import DbSession
from mazebot.core import MazeError, parse_maze_text, render
from mazebot.core.maze_parser import split_rows
from mazebot.core.grid import build_grid
from mazebot.models.maze import Maze
from mazebot.schemas.maze import (
    CellPosition,
    MazeCreateRequest,
    MazeDetail,
    MazeListItem,
    MazeListResponse,
)

router = APIRouter(prefix="/maze", tags=["Mazes"])


def maze_detail(maze: Maze) -> MazeDetail:
    """Convert a maze row to its detailed response."""
    return MazeDetail(
        id=maze.id,
        name=maze.name,
        grid_data=maze.grid_data,
        width=maze.width,
        height=maze.height,
        opening_count=maze.opening_count,
        entrance=CellPosition(column=maze.entrance_column, row=maze.entrance_row),
        entrance_direction=maze.entrance_direction,
        is_active=maze.is_active,
        created_at=maze.created_at,
    )


async def get_maze_or_404(db: DbSession, maze_id: uuid.UUID) -> Maze:
    """Fetch a maze by ID or raise 404."""
    result = await db.execute(select(Maze).where(Maze.id == maze_id))
    maze = result.scalar_one_or_none()

    if not maze:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Maze not found: {maze_id}",
        )
    return maze


@router.get(
    "",
    response_model=MazeListResponse,
)
async def list_mazes(
    db: DbSession,
    active_only: bool = Query(True, description="Only return active mazes"),
) -> MazeListResponse:
    """List all available mazes.

    Grid data is not included - use GET /v1/maze/{id} for full details.
    """
    query = select(Maze)

    if active_only:
        query = query.where(Maze.is_active == True)  # noqa: E712

    query = query.order_by(Maze.width * Maze.height, Maze.name)

    result = await db.execute(query)
    mazes = result.scalars().all()

    maze_items = [MazeListItem.model_validate(maze) for maze in mazes]

    return MazeListResponse(
        mazes=maze_items,
        total=len(maze_items),
    )


@router.post(
    "",
    response_model=MazeDetail,
    status_code=status.HTTP_201_CREATED,
)
async def create_maze(
    request: MazeCreateRequest,
    db: DbSession,
) -> MazeDetail:
    """Create a maze from its text grid.

    The grid is validated before it is stored: rows must have equal length,
    only X, O, '.' and spaces are allowed, and the maze needs an entrance
    plus at least one exit.
    """
    try:
        parsed = parse_maze_text(request.grid_data, name=request.name)
    except MazeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    existing = await db.execute(select(Maze).where(Maze.name == parsed.name))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Maze already exists: {parsed.name}",
        )

    maze = Maze(**parsed.to_dict())
    db.add(maze)
    await db.commit()
    await db.refresh(maze)

    return maze_detail(maze)


@router.get(
    "/{maze_id}",
    response_model=MazeDetail,
)
async def get_maze(
    maze_id: uuid.UUID,
    db: DbSession,
) -> MazeDetail:
    """Get detailed information about a specific maze, including grid data."""
    maze = await get_maze_or_404(db, maze_id)
    return maze_detail(maze)


@router.get(
    "/{maze_id}/render",
    response_class=PlainTextResponse,
)
async def render_maze(
    maze_id: uuid.UUID,
    db: DbSession,
) -> str:
    """Draw the maze as plain text."""
    maze = await get_maze_or_404(db, maze_id)
    grid, _ = build_grid(split_rows(maze.grid_data))
    return render(grid, None)
