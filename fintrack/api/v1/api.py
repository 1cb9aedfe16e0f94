from fastapi import APIRouter

from fintrack.api.v1.endpoints import auth
from fintrack.api.v1.endpoints import allocations
from fintrack.api.v1.endpoints import transactions
from fintrack.api.v1.endpoints import reminders
from fintrack.api.v1.endpoints import notifications
from fintrack.api.v1.endpoints import dashboard
from fintrack.api.v1.endpoints import health
from fintrack.api.v1.endpoints import push_socket

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(allocations.router, prefix="/allocation", tags=["allocation"])
api_router.include_router(transactions.router, prefix="/transaction", tags=["transaction"])
api_router.include_router(reminders.router, prefix="/reminder", tags=["reminder"])
api_router.include_router(notifications.router, prefix="/notification", tags=["notification"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(health.router, tags=["health"])
api_router.include_router(push_socket.router, tags=["socket"])
