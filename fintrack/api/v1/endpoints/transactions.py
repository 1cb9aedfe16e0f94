from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from fintrack.api import deps
from fintrack.models.user import User
from fintrack.schemas.base import StatusMessage
from fintrack.schemas.transaction import TransactionCreate, TransactionUpdate
from fintrack.services.transactions import TransactionService

router = APIRouter()


@router.get("")
def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(10, ge=1, alias="perPage"),
    search: Optional[str] = None,
    allocation_id: Optional[str] = Query(None, alias="allocationId"),
    month: Optional[int] = Query(None, ge=1, le=12),
    type: Optional[str] = Query(None, pattern="^(income|expense|All)?$"),
    current_user: User = Depends(deps.get_current_user),
    service: TransactionService = Depends(deps.get_transaction_service),
):
    data = service.list(
        current_user.id, page=page, per_page=per_page, search=search,
        allocation_id=allocation_id, month=month, type=type,
    )
    return {"status": True, **data}


@router.get("/{transaction_id}")
def get_transaction(
    transaction_id: str,
    current_user: User = Depends(deps.get_current_user),
    service: TransactionService = Depends(deps.get_transaction_service),
):
    return {"status": True, "data": service.get(current_user.id, transaction_id)}


@router.post("", response_model=StatusMessage, status_code=status.HTTP_201_CREATED)
def create_transaction(
    payload: TransactionCreate,
    current_user: User = Depends(deps.get_current_user),
    service: TransactionService = Depends(deps.get_transaction_service),
):
    service.create(current_user.id, payload)
    return StatusMessage(message="Transaction added successfully.")


@router.put("/{transaction_id}", response_model=StatusMessage)
def update_transaction(
    transaction_id: str,
    payload: TransactionUpdate,
    current_user: User = Depends(deps.get_current_user),
    service: TransactionService = Depends(deps.get_transaction_service),
):
    if not service.update(current_user.id, transaction_id, payload):
        return StatusMessage(message="No changes to update.")
    return StatusMessage(message="Transaction updated successfully.")


@router.delete("/{transaction_id}", response_model=StatusMessage)
def delete_transaction(
    transaction_id: str,
    current_user: User = Depends(deps.get_current_user),
    service: TransactionService = Depends(deps.get_transaction_service),
):
    service.delete(current_user.id, transaction_id)
    return StatusMessage(message="Transaction deleted successfully.")
