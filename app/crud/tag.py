from typing import List
from sqlalchemy.orm import Session
from sqlalchemy import select
from app.crud.base import CRUDBase
from app.models.tag import Tag
from app.schemas.tag import TagCreate


class CRUDTag(CRUDBase[Tag, TagCreate, TagCreate]):
    """
    CRUD operations for Tag model.

    Tags belong to an organization and are scoped by organization_id.
    """

    def get_many(self, db: Session, *, ids: List[int], scope: int) -> List[Tag]:
        """Fetch the tags among `ids` that belong to the organization."""
        if not ids:
            return []
        stmt = select(Tag).where(Tag.id.in_(ids), Tag.organization_id == scope).order_by(Tag.id)
        return list(db.execute(stmt).scalars().all())


# Create a singleton instance
tag = CRUDTag(Tag, scope_field="organization_id")
