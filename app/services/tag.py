from typing import List
from sqlalchemy.orm import Session
from app.crud import tag as tag_crud
from app.core.exceptions import OrganizationNotFoundError, TagNotFoundError
from app.models.tag import Tag
from app.schemas.tag import TagCreate


class TagService:
    """
    Service layer for tags. Tags live in an organization; callers pass the
    user's active organization id.
    """

    def __init__(self):
        self.crud = tag_crud

    @staticmethod
    def _require_organization(organization_id):
        if organization_id is None:
            raise OrganizationNotFoundError("User has no active organization")

    def get_tags(self, db: Session, organization_id: int) -> List[Tag]:
        self._require_organization(organization_id)
        return self.crud.get_multi(db=db, scope=organization_id, limit=1000)

    def get_tag(self, db: Session, tag_id: int, organization_id: int) -> Tag:
        self._require_organization(organization_id)
        tag = self.crud.get(db=db, id=tag_id, scope=organization_id)
        if not tag:
            raise TagNotFoundError("Tag not found")
        return tag

    def create_tag(self, db: Session, tag_data: TagCreate, organization_id: int) -> Tag:
        self._require_organization(organization_id)
        return self.crud.create(db=db, obj_in=tag_data, scope=organization_id)

    def delete_tag(self, db: Session, tag_id: int, organization_id: int) -> None:
        self._require_organization(organization_id)
        deleted = self.crud.delete(db=db, id=tag_id, scope=organization_id)
        if not deleted:
            raise TagNotFoundError("Tag not found")


# Create a singleton instance
tag_service = TagService()
