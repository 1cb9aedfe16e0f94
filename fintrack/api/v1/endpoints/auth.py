import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fintrack import crud
from fintrack.api import deps
from fintrack.core import security
from fintrack.core.errors import ValidationError
from fintrack.schemas.base import StatusMessage
from fintrack.schemas.user import LoginResponse, RefreshResponse, UserCreate, UserLogin

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=StatusMessage, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, db: Session = Depends(deps.get_db)):
    if crud.user.get_by_email(db, email=user_in.email):
        raise ValidationError("Email already exists.")
    user = crud.user.create(db, obj_in=user_in)
    logger.info(f"Registered user {user.id}")
    return StatusMessage(message="Registered successfully.")


@router.post("/login", response_model=LoginResponse)
def login(credentials: UserLogin, db: Session = Depends(deps.get_db)):
    user = crud.user.authenticate(db, email=credentials.email, password=credentials.password)
    if not user:
        raise ValidationError("Invalid credentials.")
    return LoginResponse(
        message="Login successfully.",
        roomId=security.room_id_for(user.id),
        accessToken=security.create_access_token(user.id),
        refreshToken=security.create_refresh_token(user.id),
    )


@router.get("/refresh-token", response_model=RefreshResponse)
def refresh_token(
    db: Session = Depends(deps.get_db),
    token: Optional[str] = Depends(deps.reusable_oauth2),
):
    user_id = security.decode_token(token, expected_type="refresh") if token else None
    if not user_id or not crud.user.get(db, id=user_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid refresh token.")
    return RefreshResponse(
        message="Token refreshed successfully.",
        accessToken=security.create_access_token(user_id),
    )
