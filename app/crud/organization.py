from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import select, insert
from app.models.organization import Organization, organization_users
from app.models.user import User
from app.crud.user import user as user_crud
from app.core.exceptions import UserAlreadyExistsError
from app.core.logging_config import logger


class CRUDOrganization:
    """
    CRUD operations for Organization model.

    Note: Organization is the tenancy boundary itself (it has no owner
    column), so we don't inherit from CRUDBase.
    """

    def __init__(self):
        self.model = Organization

    def get(self, db: Session, organization_id: int) -> Optional[Organization]:
        return db.get(Organization, organization_id)

    def get_by_user(self, db: Session, email: str) -> List[Organization]:
        """Organizations the user is a member of."""
        stmt = (
            select(Organization)
            .join(organization_users, Organization.id == organization_users.c.organization_id)
            .where(organization_users.c.user_email == email)
            .order_by(Organization.id)
        )
        return list(db.execute(stmt).scalars().all())

    def is_member(self, db: Session, *, organization_id: int, email: str) -> bool:
        stmt = select(organization_users.c.organization_id).where(
            organization_users.c.organization_id == organization_id,
            organization_users.c.user_email == email,
        )
        return db.execute(stmt).first() is not None

    def create(self, db: Session, *, name: str, commit: bool = True) -> Organization:
        organization = Organization(name=name)
        db.add(organization)
        if commit:
            db.commit()
            db.refresh(organization)
        else:
            db.flush()
        return organization

    def add_user(self, db: Session, *, organization_id: int, email: str) -> None:
        """Add a membership row. No-op if the user is already a member."""
        if self.is_member(db, organization_id=organization_id, email=email):
            return
        db.execute(insert(organization_users).values(organization_id=organization_id, user_email=email))

    def create_with_user(
        self,
        db: Session,
        *,
        email: str,
        password: str,
        prefix: str
    ) -> Tuple[Organization, User]:
        """
        Create an organization and its owning user atomically.

        The organization and the user are committed together. The
        membership row is best-effort: it is written in a savepoint, and
        a failure there is logged and skipped because the user can still
        authenticate and owns the organization through
        active_organization_id.

        Args:
            db: Database session
            email: User email
            password: Plain text password (stored as-is)
            prefix: Item identifier prefix for the user

        Returns:
            Tuple of (created Organization, created User)

        Raises:
            UserAlreadyExistsError: If a user with this email already exists
        """
        try:
            organization = self.create(db, name=f"{email}_org", commit=False)

            user = user_crud.create(
                db=db,
                email=email,
                password=password,
                prefix=prefix,
                active_organization_id=organization.id,
                commit=False  # Don't commit yet - we'll commit both together
            )

            try:
                with db.begin_nested():
                    self.add_user(db, organization_id=organization.id, email=email)
            except SQLAlchemyError as e:
                logger.warning(f"Could not add {email} to organization {organization.id}: {type(e).__name__}")

            # Commit organization, user and membership atomically
            db.commit()
            db.refresh(organization)
            db.refresh(user)

            return organization, user

        except IntegrityError as e:
            db.rollback()
            raise UserAlreadyExistsError(email) from e


# Create singleton instance
organization = CRUDOrganization()
