from typing import List
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.crud import organization as organization_crud
from app.crud import user as user_crud
from app.core.exceptions import OrganizationNotFoundError, StoreError
from app.database import transaction
from app.models.organization import Organization


class OrganizationService:
    def __init__(self):
        self.crud = organization_crud

    def get_organizations(self, db: Session, user_email: str) -> List[Organization]:
        return self.crud.get_by_user(db, email=user_email)

    def create_organization(self, db: Session, name: str, user_email: str) -> Organization:
        """
        Create an organization with the caller as its first member.

        Raises:
            StoreError: If the organization or membership cannot be written
        """
        try:
            with transaction(db):
                organization = self.crud.create(db, name=name, commit=False)
                self.crud.add_user(db, organization_id=organization.id, email=user_email)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create organization: {type(e).__name__}") from e
        db.refresh(organization)
        return organization

    def set_active_organization(self, db: Session, user_email: str, organization_id: int) -> Organization:
        """
        Switch the user's active organization.

        Raises:
            OrganizationNotFoundError: If the organization does not exist or
                the user is not a member of it
        """
        organization = self.crud.get(db, organization_id)
        if organization is None or not self.crud.is_member(db, organization_id=organization_id, email=user_email):
            raise OrganizationNotFoundError("Organization not found")

        with transaction(db):
            user_crud.set_active_organization(db, email=user_email, organization_id=organization_id)
        return organization


# Create a singleton instance
organization_service = OrganizationService()
