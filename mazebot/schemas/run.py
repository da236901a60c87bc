"""Run schemas for request/response validation."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from mazebot.schemas.maze import CellPosition


class RunCreateRequest(BaseModel):
    """Schema for creating a new traversal run."""

    maze_id: uuid.UUID


class RunStart(BaseModel):
    """Schema for the entrance a run starts from."""

    cell: CellPosition
    direction: Optional[str] = None


class RunState(BaseModel):
    """Schema for the live state of a run."""

    id: uuid.UUID
    maze_id: uuid.UUID
    state: str  # advancing, backtracking, solved, stuck
    position: CellPosition
    direction: str
    ticks: int
    start: RunStart
    history: list[CellPosition]
    exits: list[CellPosition]
    created_at: datetime
    completed_at: Optional[datetime] = None


class TickResponse(BaseModel):
    """Schema for the result of one or more ticks."""

    status: str  # moved, solved, stuck
    state: str
    position: CellPosition
    ticks: int
    path: Optional[list[CellPosition]] = None
    message: Optional[str] = None

