import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from fintrack.api import deps
from fintrack.core.security import room_id_for
from fintrack.core.services import AppServices
from fintrack.models.user import User
from fintrack.reminders.scheduler import ReminderScheduler
from fintrack.reminders.worker import NEW_NOTIFICATION_EVENT
from fintrack.schemas.base import StatusMessage
from fintrack.schemas.reminder import ReminderCreate, ReminderUpdate
from fintrack.utils.server_time import server_now

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_reminders(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, alias="perPage"),
    search: Optional[str] = None,
    allocation_id: Optional[str] = Query(None, alias="allocationId"),
    month: Optional[int] = Query(None, ge=1, le=12),
    current_user: User = Depends(deps.get_current_user),
    scheduler: ReminderScheduler = Depends(deps.get_reminder_scheduler),
):
    data = scheduler.list(
        current_user.id, page=page, per_page=per_page, search=search,
        allocation_id=allocation_id, month=month,
    )
    return {"status": True, **data}


@router.post("/test", response_model=StatusMessage)
async def test_notification(
    current_user: User = Depends(deps.get_current_user),
    services: AppServices = Depends(deps.get_services),
):
    """Push a sample notification to the caller's room, bypassing the job queue."""
    payload = {
        "title": "Test notification",
        "message": "Notifications are working.",
        "createdAt": server_now().isoformat(),
    }
    reached = await services.push(room_id_for(current_user.id), NEW_NOTIFICATION_EVENT, payload)
    logger.info(f"Test notification for user {current_user.id} reached {reached} receiver(s)")
    return StatusMessage(message="Test notification sent successfully.")


@router.get("/{reminder_id}")
def get_reminder(
    reminder_id: str,
    current_user: User = Depends(deps.get_current_user),
    scheduler: ReminderScheduler = Depends(deps.get_reminder_scheduler),
):
    return {"status": True, "data": scheduler.get(current_user.id, reminder_id)}


@router.post("", response_model=StatusMessage, status_code=status.HTTP_201_CREATED)
def create_reminder(
    payload: ReminderCreate,
    response: Response,
    current_user: User = Depends(deps.get_current_user),
    scheduler: ReminderScheduler = Depends(deps.get_reminder_scheduler),
):
    _, created = scheduler.create(
        current_user.id, payload.allocation_id, payload.title, payload.amount, payload.due_date
    )
    if not created:
        response.status_code = status.HTTP_200_OK
        return StatusMessage(message="Reminder already exists.")
    return StatusMessage(message="Reminder created successfully.")


@router.put("/{reminder_id}", response_model=StatusMessage)
def update_reminder(
    reminder_id: str,
    payload: ReminderUpdate,
    current_user: User = Depends(deps.get_current_user),
    scheduler: ReminderScheduler = Depends(deps.get_reminder_scheduler),
):
    if not scheduler.update(reminder_id, current_user.id, payload):
        return StatusMessage(message="No changes to update.")
    return StatusMessage(message="Reminder updated successfully.")


@router.delete("/{reminder_id}", response_model=StatusMessage)
def delete_reminder(
    reminder_id: str,
    current_user: User = Depends(deps.get_current_user),
    scheduler: ReminderScheduler = Depends(deps.get_reminder_scheduler),
):
    scheduler.delete(reminder_id, current_user.id)
    return StatusMessage(message="Reminder deleted successfully.")
