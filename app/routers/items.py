from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import Optional
from app.database import get_db
from app.dependencies import get_current_user_email
from app.core.exceptions import ItemNotFoundError, StoreError, UserNotFoundError
from app.core.tenant_context import get_organization_id
from app.core.logging_config import logger
from app.schemas.item import ItemCreate, ItemUpdate, ItemResponse, ItemListResponse
from app.services.item import item_service

router = APIRouter()


@router.get("", response_model=ItemListResponse)
def get_items(
    name: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email)
):
    """
    Retrieve your items.

    Args:
        name: Optional case-insensitive substring filter on the item name
        skip: Number of records to skip (default: 0)
        limit: Maximum number of records to return (default: 100)
        db: Database session
        _user_email: Owner (auto-set from the access token)

    Returns:
        Object with key "items" holding the list
    """
    items = item_service.get_items(db=db, user_email=_user_email, name=name, skip=skip, limit=limit)
    return ItemListResponse(items=items)


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: int,
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email)
):
    """
    Retrieve one of your items by ID.

    Raises:
        HTTPException 404: If item not found
    """
    try:
        return item_service.get_item(db=db, item_id=item_id, user_email=_user_email)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    item_data: ItemCreate,
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email)
):
    """
    Create a new item. Its backpack_id is allocated from your prefix.

    Raises:
        HTTPException 404: If the parent item is not yours
        HTTPException 500: If allocation or insert failed (nothing is saved)
    """
    try:
        logger.info(f"Creating item: name={item_data.name}, user={_user_email}")
        result = item_service.create_item(db=db, item_data=item_data, user_email=_user_email)
        logger.info(f"Item created successfully: id={result.id}, backpack_id={result.backpack_id}")
        return result
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create item"
        )


@router.patch("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    item_data: ItemUpdate,
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email),
    _organization_id: Optional[int] = Depends(get_organization_id)
):
    """
    Update an item's name, description, parent or tags.

    Raises:
        HTTPException 400: If the item would become its own parent
        HTTPException 404: If the item or parent is not found
    """
    try:
        return item_service.update_item(
            db=db,
            item_id=item_id,
            item_data=item_data,
            user_email=_user_email,
            organization_id=_organization_id
        )
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        logger.error(f"Error updating item {item_id}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update item"
        )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    _user_email: str = Depends(get_current_user_email)
):
    """
    Delete an item. Its children keep existing without a parent.

    Raises:
        HTTPException 404: If item not found
    """
    try:
        item_service.delete_item(db=db, item_id=item_id, user_email=_user_email)
    except ItemNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return None
