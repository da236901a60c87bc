"""Maze schemas for request/response validation."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CellPosition(BaseModel):
    """Schema for a cell in the maze."""

    column: int = Field(..., ge=0)
    row: int = Field(..., ge=0)


class MazeBase(BaseModel):
    """Base maze schema with common fields."""

    name: str
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    opening_count: int = Field(..., ge=2)


class MazeListItem(MazeBase):
    """Schema for maze list item (without grid data)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    is_active: bool = True
    created_at: datetime


class MazeDetail(MazeBase):
    """Schema for detailed maze response with grid data."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    grid_data: str
    entrance: CellPosition
    entrance_direction: str
    is_active: bool = True
    created_at: datetime


class MazeListResponse(BaseModel):
    """Schema for maze list response."""

    mazes: list[MazeListItem]
    total: int


class MazeCreateRequest(BaseModel):
    """Schema for creating a new maze."""

    name: str = Field(..., min_length=1, max_length=100)
    grid_data: str = Field(..., min_length=3)
