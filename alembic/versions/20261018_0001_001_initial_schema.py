"""Initial schema with Maze and Run tables.

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create mazes table
    op.create_table(
        "mazes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("grid_data", sa.Text(), nullable=False),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column("entrance_column", sa.Integer(), nullable=False),
        sa.Column("entrance_row", sa.Integer(), nullable=False),
        sa.Column("entrance_direction", sa.String(length=10), nullable=False),
        sa.Column("opening_count", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_mazes_name"), "mazes", ["name"], unique=True)

    # Create runs table
    op.create_table(
        "runs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("maze_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="advancing"),
        sa.Column("tick_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("current_column", sa.Integer(), nullable=False),
        sa.Column("current_row", sa.Integer(), nullable=False),
        sa.Column("path_data", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["maze_id"], ["mazes.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_runs_maze_id"), "runs", ["maze_id"])
    op.create_index(op.f("ix_runs_status"), "runs", ["status"])


def downgrade() -> None:
    op.drop_index(op.f("ix_runs_status"), table_name="runs")
    op.drop_index(op.f("ix_runs_maze_id"), table_name="runs")
    op.drop_table("runs")
    op.drop_index(op.f("ix_mazes_name"), table_name="mazes")
    op.drop_table("mazes")
