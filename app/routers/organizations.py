from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from app.database import get_db
from app.dependencies import get_current_user, get_current_user_email
from app.core.exceptions import OrganizationNotFoundError, StoreError
from app.core.logging_config import logger
from app.models.user import User
from app.schemas.organization import (
    ActiveOrganizationUpdate,
    OrganizationCreate,
    OrganizationResponse,
)
from app.services.organization import organization_service

router = APIRouter()


@router.get("", response_model=List[OrganizationResponse])
def get_organizations(
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email)
):
    """Organizations you are a member of."""
    return organization_service.get_organizations(db=db, user_email=_user_email)


@router.post("", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
def create_organization(
    data: OrganizationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """
    Create an organization with you as a member. Your active organization is unchanged.

    Raises:
        HTTPException 401: If the token's user no longer exists
    """
    logger.info(f"Creating organization: name={data.name}, user={current_user.email}")
    try:
        return organization_service.create_organization(db=db, name=data.name, user_email=current_user.email)
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create organization"
        )


@router.put("/active", response_model=OrganizationResponse)
def set_active_organization(
    data: ActiveOrganizationUpdate,
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email)
):
    """
    Switch the organization that scopes your tags.

    Raises:
        HTTPException 404: If the organization does not exist or you are not a member
    """
    try:
        return organization_service.set_active_organization(
            db=db,
            user_email=_user_email,
            organization_id=data.organization_id
        )
    except OrganizationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
