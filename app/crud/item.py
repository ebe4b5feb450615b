from typing import List, Optional
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import select, func
from app.crud.base import CRUDBase
from app.models.item import Item, item_tags
from app.models.tag import Tag
from app.schemas.item import ItemCreate, ItemUpdate


class CRUDItem(CRUDBase[Item, ItemCreate, ItemUpdate]):
    """
    CRUD operations for Item model.

    Items are owned by a user and scoped by user_email.
    """

    def get(self, db: Session, id: int, scope: str) -> Optional[Item]:
        stmt = (
            select(Item)
            .where(Item.id == id, Item.user_email == scope)
            .options(selectinload(Item.tags))
        )
        return db.execute(stmt).scalar_one_or_none()

    def get_multi(
        self,
        db: Session,
        *,
        scope: str,
        skip: int = 0,
        limit: int = 100,
        name: Optional[str] = None
    ) -> List[Item]:
        """
        List a user's items, optionally filtered by a case-insensitive
        substring of the name.
        """
        stmt = (
            select(Item)
            .where(Item.user_email == scope)
            .options(selectinload(Item.tags))
        )
        if name:
            stmt = stmt.where(func.lower(Item.name).contains(name.lower(), autoescape=True))
        stmt = stmt.order_by(Item.id).offset(skip).limit(limit)
        return list(db.execute(stmt).scalars().all())

    def get_by_tag(self, db: Session, *, tag_id: int, scope: str) -> List[Item]:
        stmt = (
            select(Item)
            .join(item_tags, Item.id == item_tags.c.item_id)
            .where(item_tags.c.tag_id == tag_id, Item.user_email == scope)
            .options(selectinload(Item.tags))
            .order_by(Item.id)
        )
        return list(db.execute(stmt).scalars().all())

    def get_parent_id(self, db: Session, *, id: int, scope: str) -> Optional[int]:
        stmt = select(Item.parent_id).where(Item.id == id, Item.user_email == scope)
        return db.execute(stmt).scalar_one_or_none()

    def create_with_backpack_id(
        self,
        db: Session,
        *,
        obj_in: ItemCreate,
        user_email: str,
        backpack_id: str
    ) -> Item:
        """
        Insert an item carrying an already allocated backpack ID.

        Flushes only; the caller owns the transaction so the item and the
        counter update commit or roll back together.
        """
        db_obj = Item(
            name=obj_in.name,
            description=obj_in.description,
            parent_id=obj_in.parent_id,
            user_email=user_email,
            backpack_id=backpack_id,
        )
        db.add(db_obj)
        db.flush()
        return db_obj

    def replace_tags(self, db: Session, *, db_obj: Item, tags: List[Tag]) -> Item:
        db_obj.tags = list(tags)
        db.add(db_obj)
        db.flush()
        return db_obj


# Create a singleton instance
item = CRUDItem(Item, scope_field="user_email")
