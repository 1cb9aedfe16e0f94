from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session
from starlette.requests import HTTPConnection

from fintrack import crud, models
from fintrack.core import security
from fintrack.core.config import settings
from fintrack.core.services import AppServices
from fintrack.db.session import SessionLocal
from fintrack.reminders.scheduler import ReminderScheduler
from fintrack.services.allocations import AllocationService
from fintrack.services.cache import ResponseCache
from fintrack.services.dashboard import DashboardService
from fintrack.services.notifications import NotificationService
from fintrack.services.transactions import TransactionService

reusable_oauth2 = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False
)


def get_db() -> Generator:
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def get_current_user(
    db: Session = Depends(get_db), token: Optional[str] = Depends(reusable_oauth2)
) -> models.User:
    if not token:
        raise _unauthorized()
    user_id = security.decode_token(token, expected_type="access")
    if not user_id:
        raise _unauthorized()
    user = crud.user.get(db, id=user_id)
    if not user:
        raise _unauthorized()
    return user


def get_services(conn: HTTPConnection) -> AppServices:
    return conn.app.state.services


def get_cache(services: AppServices = Depends(get_services)) -> ResponseCache:
    return services.cache


def get_reminder_scheduler(
    db: Session = Depends(get_db), services: AppServices = Depends(get_services)
) -> ReminderScheduler:
    return ReminderScheduler(db, services.job_queue, services.cache)


def get_allocation_service(
    db: Session = Depends(get_db), cache: ResponseCache = Depends(get_cache)
) -> AllocationService:
    return AllocationService(db, cache)


def get_transaction_service(
    db: Session = Depends(get_db), cache: ResponseCache = Depends(get_cache)
) -> TransactionService:
    return TransactionService(db, cache)


def get_notification_service(
    db: Session = Depends(get_db), cache: ResponseCache = Depends(get_cache)
) -> NotificationService:
    return NotificationService(db, cache)


def get_dashboard_service(
    db: Session = Depends(get_db), cache: ResponseCache = Depends(get_cache)
) -> DashboardService:
    return DashboardService(db, cache)
