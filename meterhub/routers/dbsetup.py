"""Database reset endpoint — drops and recreates all tables. Development aid."""

import logging

from fastapi import APIRouter, HTTPException, status

from meterhub.database import reset_schema
from meterhub.schemas.common import MessageResponse
from meterhub.settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["setup"])


@router.delete("/setupDB", response_model=MessageResponse)
def reset_database() -> MessageResponse:
    if settings.is_production:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Database reset is disabled in production",
        )
    logger.warning("Resetting database schema")
    reset_schema()
    return MessageResponse(message="Database reset")
