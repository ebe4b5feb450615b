from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.crud import item as item_crud
from app.crud import tag as tag_crud
from app.crud import user as user_crud
from app.core.exceptions import ItemNotFoundError, StoreError, UserNotFoundError
from app.core.logging_config import logger
from app.database import transaction
from app.models.item import Item
from app.schemas.item import ItemCreate, ItemUpdate
from app.services.id_allocator import BackpackIdAllocator, backpack_id_allocator


class ItemService:
    """
    Service layer for item business logic.

    Items are owned by a user; every lookup is scoped by the caller's email.
    """

    def __init__(self, allocator: BackpackIdAllocator = backpack_id_allocator):
        self.crud = item_crud
        self.allocator = allocator

    def get_item(self, db: Session, item_id: int, user_email: str) -> Item:
        """
        Get an item by ID within the user's scope.

        Raises:
            ItemNotFoundError: If the item does not exist or belongs to someone else
        """
        item = self.crud.get(db=db, id=item_id, scope=user_email)
        if not item:
            raise ItemNotFoundError("Item not found")
        return item

    def get_items(
        self,
        db: Session,
        user_email: str,
        name: Optional[str] = None,
        skip: int = 0,
        limit: int = 100
    ) -> List[Item]:
        return self.crud.get_multi(db=db, scope=user_email, skip=skip, limit=limit, name=name)

    def get_items_by_tag(self, db: Session, tag_id: int, user_email: str) -> List[Item]:
        return self.crud.get_by_tag(db=db, tag_id=tag_id, scope=user_email)

    def _check_parent(self, db: Session, parent_id: Optional[int], user_email: str) -> None:
        if parent_id is not None and not self.crud.get(db=db, id=parent_id, scope=user_email):
            raise ItemNotFoundError("Parent item not found")

    def _is_descendant(self, db: Session, candidate_id: int, item_id: int, user_email: str) -> bool:
        """True if `candidate_id` is `item_id` or sits somewhere below it."""
        seen = set()
        current = candidate_id
        while current is not None and current not in seen:
            if current == item_id:
                return True
            seen.add(current)
            current = self.crud.get_parent_id(db, id=current, scope=user_email)
        return False

    def create_item(self, db: Session, item_data: ItemCreate, user_email: str) -> Item:
        """
        Create an item with a freshly allocated backpack ID.

        Prefix assignment, counter advance and item insert form one
        transaction: if any step fails, none of them persist.

        Args:
            db: Database session
            item_data: Item creation data
            user_email: Owner of the new item

        Returns:
            Created Item instance

        Raises:
            UserNotFoundError: If the owner no longer exists
            ItemNotFoundError: If the parent is not one of the owner's items
            StoreError: On any database failure (nothing is persisted)
        """
        try:
            with transaction(db):
                user = user_crud.get_by_email_for_update(db, email=user_email)
                if user is None:
                    raise UserNotFoundError(user_email)
                self._check_parent(db, item_data.parent_id, user_email)

                prefix = self.allocator.ensure_prefix(db, user)
                backpack_id = self.allocator.next_backpack_id(db, prefix)
                item = self.crud.create_with_backpack_id(
                    db,
                    obj_in=item_data,
                    user_email=user_email,
                    backpack_id=backpack_id,
                )
                item_id = item.id
        except SQLAlchemyError as e:
            logger.error(f"Item creation rolled back for {user_email}: {type(e).__name__}: {str(e)}")
            raise StoreError("Failed to create item") from e

        logger.info(f"Allocated backpack_id={backpack_id} for item id={item_id}")
        return self.get_item(db, item_id, user_email)

    def update_item(
        self,
        db: Session,
        item_id: int,
        item_data: ItemUpdate,
        user_email: str,
        organization_id: Optional[int]
    ) -> Item:
        """
        Update an item. Empty strings and nulls leave fields unchanged;
        `tags`, when given, replaces the item's tags with those of the
        user's active organization.

        Raises:
            ItemNotFoundError: If the item or the new parent is not the user's
            ValueError: If the item would become its own parent or ancestor
        """
        item = self.get_item(db, item_id, user_email)
        updates = {
            field: value
            for field, value in item_data.model_dump(exclude_unset=True, exclude={"tags"}).items()
            if value not in (None, "")
        }
        new_parent_id = updates.get("parent_id")
        if new_parent_id == item.id:
            raise ValueError("An item cannot be its own parent")
        if new_parent_id is not None and self._is_descendant(db, new_parent_id, item.id, user_email):
            raise ValueError("An item cannot be placed inside one of its own descendants")

        try:
            with transaction(db):
                self._check_parent(db, updates.get("parent_id"), user_email)
                self.crud.update(db=db, db_obj=item, obj_in=updates, commit=False)
                if item_data.tags is not None:
                    tags = []
                    if organization_id is not None:
                        tags = tag_crud.get_many(db, ids=item_data.tags, scope=organization_id)
                    self.crud.replace_tags(db, db_obj=item, tags=tags)
        except SQLAlchemyError as e:
            raise StoreError("Failed to update item") from e

        db.refresh(item)
        return item

    def delete_item(self, db: Session, item_id: int, user_email: str) -> None:
        """
        Raises:
            ItemNotFoundError: If the item does not exist or belongs to someone else
        """
        deleted = self.crud.delete(db=db, id=item_id, scope=user_email)
        if not deleted:
            raise ItemNotFoundError("Item not found")


# Create a singleton instance
item_service = ItemService()
