from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from app.database import get_db
from app.dependencies import get_current_user_email
from app.core.exceptions import OrganizationNotFoundError, TagNotFoundError
from app.core.tenant_context import get_organization_id
from app.core.logging_config import logger
from app.schemas.item import ItemListResponse
from app.schemas.tag import TagCreate, TagResponse
from app.services.item import item_service
from app.services.tag import tag_service

router = APIRouter()


@router.get("", response_model=List[TagResponse])
def get_tags(
    db: Session = Depends(get_db),
    _organization_id: Optional[int] = Depends(get_organization_id)
):
    """Retrieve all tags of your active organization."""
    try:
        return tag_service.get_tags(db=db, organization_id=_organization_id)
    except OrganizationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=TagResponse, status_code=status.HTTP_201_CREATED)
def create_tag(
    tag_data: TagCreate,
    db: Session = Depends(get_db),
    _organization_id: Optional[int] = Depends(get_organization_id)
):
    """Create a tag in your active organization."""
    try:
        logger.info(f"Creating tag: name={tag_data.name}, organization_id={_organization_id}")
        return tag_service.create_tag(db=db, tag_data=tag_data, organization_id=_organization_id)
    except OrganizationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{tag_id}/items", response_model=ItemListResponse)
def get_items_by_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email),
    _organization_id: Optional[int] = Depends(get_organization_id)
):
    """
    Retrieve your items carrying a tag of your active organization.

    Raises:
        HTTPException 404: If the tag is not found
    """
    try:
        tag_service.get_tag(db=db, tag_id=tag_id, organization_id=_organization_id)
    except (TagNotFoundError, OrganizationNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    items = item_service.get_items_by_tag(db=db, tag_id=tag_id, user_email=_user_email)
    return ItemListResponse(items=items)


@router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_tag(
    tag_id: int,
    db: Session = Depends(get_db),
    _organization_id: Optional[int] = Depends(get_organization_id)
):
    """
    Delete a tag; it is removed from every item carrying it.

    Raises:
        HTTPException 404: If the tag is not found
    """
    try:
        tag_service.delete_tag(db=db, tag_id=tag_id, organization_id=_organization_id)
    except (TagNotFoundError, OrganizationNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return None
