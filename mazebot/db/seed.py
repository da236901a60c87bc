"""Seed script to load maze files into the database."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from mazebot.config import get_settings
from mazebot.core.maze_parser import ParsedMaze, load_all_mazes
from mazebot.db.database import async_session_maker, init_db
from mazebot.models.maze import Maze

logger = logging.getLogger(__name__)


async def seed_maze(session: AsyncSession, parsed: ParsedMaze) -> Maze:
    """Create or update a single maze.

    Args:
        session: Database session
        parsed: Parsed maze file

    Returns:
        Created or updated Maze object
    """
    result = await session.execute(
        select(Maze).where(Maze.name == parsed.name)
    )
    existing = result.scalar_one_or_none()

    if existing:
        # Update existing maze with latest data from file
        for key, value in parsed.to_dict().items():
            setattr(existing, key, value)
        logger.info(f"Updated maze: {parsed.name} ({parsed.width}x{parsed.height})")
        return existing

    maze = Maze(**parsed.to_dict())

    session.add(maze)
    await session.flush()
    await session.refresh(maze)

    logger.info(f"Created maze: {maze.name} ({maze.width}x{maze.height})")
    return maze


async def seed_mazes(
    session: Optional[AsyncSession] = None,
    mazes_dir: Optional[Path] = None,
) -> list[Maze]:
    """Seed every maze file into the database.

    Args:
        session: Optional database session. If not provided, creates one.
        mazes_dir: Directory of *.txt maze files. Defaults to settings.

    Returns:
        List of created or updated Maze objects
    """
    mazes_dir = Path(mazes_dir or get_settings().mazes_dir)

    if not mazes_dir.exists():
        logger.warning(f"Mazes directory not found: {mazes_dir}")
        return []

    if session is None:
        async with async_session_maker() as session:
            return await seed_mazes(session, mazes_dir)

    seeded = [await seed_maze(session, parsed) for parsed in load_all_mazes(mazes_dir)]
    await session.commit()

    logger.info(f"Seeded {len(seeded)} mazes")
    return seeded


async def main():
    """Main entry point for running seed script."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")
    await init_db()
    await seed_mazes()


if __name__ == "__main__":
    asyncio.run(main())
