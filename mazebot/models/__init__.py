"""Database models package."""

from mazebot.models.maze import Maze
from mazebot.models.run import Run

__all__ = ["Maze", "Run"]
