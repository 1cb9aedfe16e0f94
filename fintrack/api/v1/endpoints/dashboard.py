from fastapi import APIRouter, Depends

from fintrack.api import deps
from fintrack.models.user import User
from fintrack.services.dashboard import DashboardService

router = APIRouter()


@router.get("")
def get_dashboard(
    current_user: User = Depends(deps.get_current_user),
    service: DashboardService = Depends(deps.get_dashboard_service),
):
    return {"status": True, "data": service.get(current_user.id)}
