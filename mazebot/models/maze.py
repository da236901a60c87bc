"""Maze model."""

import uuid
from datetime import datetime

from sqlalchemy import String, Integer, Text, Boolean, DateTime, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from mazebot.db.database import Base


class Maze(Base):
    """Maze model for storing maze definitions."""

    __tablename__ = "mazes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        unique=True,
        index=True,
    )
    grid_data: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    width: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    height: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    entrance_column: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    entrance_row: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    entrance_direction: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
    )  # up, down, left, right
    opening_count: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Maze {self.name}>"
