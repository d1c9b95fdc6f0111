# This project was developed with assistance from AI tools.
"""Liveness and database health."""

from db import DatabaseService, get_db_service
from fastapi import APIRouter, Depends

from .. import __version__
from ..schemas.health import HealthItem

router = APIRouter()


@router.get("/", response_model=list[HealthItem])
async def health(db_service: DatabaseService = Depends(get_db_service)) -> list[HealthItem]:
    """Report the API and its database. Always 200; read the item statuses."""
    db_health = await db_service.health_check()
    return [
        HealthItem(name="API", status="healthy", message="API is running", version=__version__),
        HealthItem(**db_health),
    ]
