from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from fintrack.api import deps
from fintrack.models.user import User
from fintrack.schemas.allocation import AllocationCreate, AllocationUpdate
from fintrack.schemas.base import StatusMessage
from fintrack.services.allocations import AllocationService

router = APIRouter()


@router.get("")
def list_allocations(
    month: int = Query(..., ge=1, le=12),
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, alias="perPage"),
    search: Optional[str] = None,
    current_user: User = Depends(deps.get_current_user),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return {"status": True, **service.list(current_user.id, month, page=page, per_page=per_page, search=search)}


@router.get("/{allocation_id}")
def get_allocation(
    allocation_id: str,
    current_user: User = Depends(deps.get_current_user),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    return {"status": True, "data": service.get(current_user.id, allocation_id)}


@router.post("", response_model=StatusMessage, status_code=status.HTTP_201_CREATED)
def create_allocation(
    payload: AllocationCreate,
    current_user: User = Depends(deps.get_current_user),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    service.create(current_user.id, payload)
    return StatusMessage(message="Allocation created successfully.")


@router.put("/{allocation_id}", response_model=StatusMessage)
def update_allocation(
    allocation_id: str,
    payload: AllocationUpdate,
    current_user: User = Depends(deps.get_current_user),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    service.update(current_user.id, allocation_id, payload)
    return StatusMessage(message="Allocation updated successfully.")


@router.delete("/{allocation_id}", response_model=StatusMessage)
def delete_allocation(
    allocation_id: str,
    current_user: User = Depends(deps.get_current_user),
    service: AllocationService = Depends(deps.get_allocation_service),
):
    service.delete(current_user.id, allocation_id)
    return StatusMessage(message="Allocation deleted successfully.")
