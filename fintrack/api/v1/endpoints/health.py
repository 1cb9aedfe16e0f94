import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fintrack.api import deps
from fintrack.core.config import settings
from fintrack.services.cache import ResponseCache

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(deps.get_db), cache: ResponseCache = Depends(deps.get_cache)):
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}")
        database = "disconnected"
    redis_status = "connected" if cache.ping() else "disconnected"
    return {
        "status": "healthy" if database == "connected" else "unhealthy",
        "version": settings.VERSION,
        "database": database,
        "redis": redis_status,
    }
