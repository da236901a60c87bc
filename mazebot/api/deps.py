"""API dependencies for dependency injection."""

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from mazebot.db.database import get_db
from mazebot.services.run_service import LiveRun, RunService, get_run_service

# Shared rate limiter
limiter = Limiter(key_func=get_remote_address)


def get_live_run(
    run_id: uuid.UUID,
    service: RunService = Depends(get_run_service),
) -> LiveRun:
    """Get a live run by ID from the registry."""
    live = service.registry.get(run_id)
    if live is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Run not found: {run_id}",
        )
    return live


# Type aliases for cleaner route signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
Runs = Annotated[RunService, Depends(get_run_service)]
CurrentRun = Annotated[LiveRun, Depends(get_live_run)]
