from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, update, delete, func
from app.models.user import User
from app.core.exceptions import UserAlreadyExistsError


class CRUDUser:
    """
    CRUD operations for User model.

    Users are keyed by email and are not owned by an organization, so this
    does not inherit from CRUDBase. Passwords are stored exactly as given.
    """

    def __init__(self):
        self.model = User

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        """
        Retrieve user by email address.

        Args:
            db: Database session
            email: User email

        Returns:
            User instance or None if not found
        """
        stmt = select(User).where(User.email == email)
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def get_by_email_for_update(self, db: Session, email: str) -> Optional[User]:
        """
        Retrieve user by email and lock the row until the transaction ends.

        Used before lazily assigning a prefix so two concurrent first items
        for the same user agree on one prefix.
        """
        stmt = select(User).where(User.email == email).with_for_update()
        result = db.execute(stmt)
        return result.scalar_one_or_none()

    def count(self, db: Session) -> int:
        return db.execute(select(func.count()).select_from(User)).scalar_one()

    def create(
        self,
        db: Session,
        *,
        email: str,
        password: str,
        prefix: Optional[str] = None,
        active_organization_id: Optional[int] = None,
        commit: bool = True
    ) -> User:
        """
        Create a new user.

        Args:
            db: Database session
            email: User email
            password: Plain text password (stored as-is)
            prefix: Item identifier prefix, or None to assign lazily
            active_organization_id: Organization used for tag scoping
            commit: Whether to commit immediately

        Returns:
            Created User instance

        Raises:
            UserAlreadyExistsError: If the email is taken
        """
        db_user = User(
            email=email,
            password=password,
            prefix=prefix,
            active_organization_id=active_organization_id,
        )
        db.add(db_user)

        try:
            if commit:
                db.commit()
                db.refresh(db_user)
            else:
                db.flush()
        except IntegrityError as e:
            db.rollback()
            raise UserAlreadyExistsError(email) from e

        return db_user

    def set_prefix(self, db: Session, *, db_user: User, prefix: str) -> User:
        """Persist a prefix on the user within the current transaction."""
        db_user.prefix = prefix
        db.add(db_user)
        db.flush()
        return db_user

    def update_password(self, db: Session, *, email: str, password: str) -> int:
        stmt = update(User).where(User.email == email).values(password=password)
        return db.execute(stmt).rowcount

    def update_email(self, db: Session, *, email: str, new_email: str) -> int:
        # Primary key change; in-session objects keep the old identity
        stmt = (
            update(User)
            .where(User.email == email)
            .values(email=new_email)
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount

    def set_active_organization(self, db: Session, *, email: str, organization_id: int) -> int:
        stmt = update(User).where(User.email == email).values(active_organization_id=organization_id)
        return db.execute(stmt).rowcount

    def delete(self, db: Session, *, email: str) -> int:
        """
        Delete a user. Items, memberships and reset tokens go with it via
        ON DELETE CASCADE.

        Returns:
            Number of rows removed (0 or 1)
        """
        stmt = delete(User).where(User.email == email)
        return db.execute(stmt).rowcount


# Create singleton instance
user = CRUDUser()
