from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_current_user_email
from app.core.exceptions import (
    ResetTokenExpiredError,
    ResetTokenNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from app.core.logging_config import logger
from app.schemas.common import MessageResponse
from app.schemas.user import (
    NewPasswordRequest,
    PasswordResetRequest,
    UserDetailResponse,
    UserStatisticsResponse,
    UserUpdate,
)
from app.services.password_reset import password_reset_service
from app.services.user import user_service

router = APIRouter()


@router.get("", response_model=UserStatisticsResponse)
def get_user_statistics(db: Session = Depends(get_db)):
    """Total number of registered users."""
    return UserStatisticsResponse(total=user_service.count_users(db))


@router.post("/reset-password", response_model=MessageResponse)
def request_password_reset(request: PasswordResetRequest, db: Session = Depends(get_db)):
    """
    Issue a password reset token for a user.

    The token itself is not returned; delivering it is outside this API.

    Raises:
        HTTPException 404: If the user does not exist
    """
    try:
        password_reset_service.create_reset_token(db, request.username)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return MessageResponse(message="Password reset token sent")


@router.post("/send-password", response_model=MessageResponse)
def set_new_password(request: NewPasswordRequest, db: Session = Depends(get_db)):
    """
    Set a new password using a reset token.

    Raises:
        HTTPException 400: If the token is unknown or expired
    """
    try:
        password_reset_service.reset_password(db, request.token, request.password)
    except (ResetTokenNotFoundError, ResetTokenExpiredError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or expired token")
    return MessageResponse(message="Password updated successfully")


@router.post("/deactivate", response_model=MessageResponse)
def deactivate_user(email: str = Depends(get_current_user_email)):
    """
    Acknowledge a deactivation request.

    Users have no deactivated state, so nothing changes.
    """
    logger.info(f"Deactivation requested by {email}")
    return MessageResponse(message="User deactivated successfully")


@router.get("/{email}", response_model=UserDetailResponse)
def get_user_details(
    email: str,
    db: Session = Depends(get_db),
    _current_email: str = Depends(get_current_user_email)
):
    try:
        user = user_service.get_user(db, email)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserDetailResponse(email=user.email)


@router.put("/{email}", response_model=UserDetailResponse)
def update_user_details(
    email: str,
    request: UserUpdate,
    db: Session = Depends(get_db),
    _current_email: str = Depends(get_current_user_email)
):
    """
    Change a user's email.

    Raises:
        HTTPException 404: If the user does not exist
        HTTPException 409: If the new email is taken
    """
    try:
        new_email = user_service.update_email(db, email, request.email)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except UserAlreadyExistsError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    return UserDetailResponse(email=new_email)


@router.delete("/{email}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    email: str,
    db: Session = Depends(get_db),
    _current_email: str = Depends(get_current_user_email)
):
    logger.info(f"Deleting user {email} (requested by {_current_email})")
    user_service.delete_user(db, email)
    return None
