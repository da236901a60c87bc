"""Run model for maze traversal runs."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, Text, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from mazebot.db.database import Base


class Run(Base):
    """Run model recording the progress and outcome of a traversal."""

    __tablename__ = "runs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    maze_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("mazes.id"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default="advancing",
        nullable=False,
        index=True,
    )  # advancing, backtracking, solved, stuck, cancelled
    tick_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    current_column: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    current_row: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    path_data: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )  # JSON list of [column, row] once solved
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Run {self.id} status={self.status} ticks={self.tick_count}>"
