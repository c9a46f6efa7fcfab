"""Health check endpoint — used by the hosting platform's service monitor."""

from fastapi import APIRouter
from pydantic import BaseModel

from meterhub.database import check_db_connection
from meterhub.settings import settings

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    environment: str
    database: str
    version: str = "1.0.0"


@router.get("/health", response_model=HealthResponse, include_in_schema=False)
def health_check() -> HealthResponse:
    """
    Returns status "ok" if the service is up and the DB is reachable,
    "degraded" otherwise.
    """
    db_ok = check_db_connection()
    return HealthResponse(
        status="ok" if db_ok else "degraded",
        environment=settings.environment,
        database="connected" if db_ok else "unreachable",
    )
