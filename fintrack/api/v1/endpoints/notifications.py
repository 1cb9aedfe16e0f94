from fastapi import APIRouter, Depends, Query

from fintrack.api import deps
from fintrack.models.user import User
from fintrack.schemas.base import StatusMessage
from fintrack.schemas.notification import NotificationBulkAction
from fintrack.services.notifications import NotificationService

router = APIRouter()


@router.get("")
def list_notifications(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, alias="perPage"),
    current_user: User = Depends(deps.get_current_user),
    service: NotificationService = Depends(deps.get_notification_service),
):
    return {"status": True, **service.list(current_user.id, page=page, per_page=per_page)}


@router.post("", response_model=StatusMessage)
def bulk_update_notifications(
    payload: NotificationBulkAction,
    current_user: User = Depends(deps.get_current_user),
    service: NotificationService = Depends(deps.get_notification_service),
):
    return StatusMessage(message=service.bulk(current_user.id, payload.action))


@router.put("/{notification_id}", response_model=StatusMessage)
def read_notification(
    notification_id: str,
    current_user: User = Depends(deps.get_current_user),
    service: NotificationService = Depends(deps.get_notification_service),
):
    service.mark_read(current_user.id, notification_id)
    return StatusMessage(message="Notification read successfully.")


@router.delete("/{notification_id}", response_model=StatusMessage)
def delete_notification(
    notification_id: str,
    current_user: User = Depends(deps.get_current_user),
    service: NotificationService = Depends(deps.get_notification_service),
):
    service.delete(current_user.id, notification_id)
    return StatusMessage(message="Notification deleted successfully.")
