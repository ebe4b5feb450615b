from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.crud import user as user_crud
from app.core.exceptions import UserAlreadyExistsError, UserNotFoundError
from app.database import transaction
from app.models.user import User


class UserService:
    """
    Account housekeeping outside the auth flow.
    """

    def __init__(self):
        self.crud = user_crud

    def count_users(self, db: Session) -> int:
        return self.crud.count(db)

    def get_user(self, db: Session, email: str) -> User:
        user = self.crud.get_by_email(db, email=email)
        if user is None:
            raise UserNotFoundError(email)
        return user

    def update_email(self, db: Session, email: str, new_email: str) -> str:
        """
        Change a user's email. Owned rows follow via ON UPDATE CASCADE.

        Raises:
            UserNotFoundError: If no user has `email`
            UserAlreadyExistsError: If `new_email` is taken
        """
        self.get_user(db, email)
        try:
            with transaction(db):
                self.crud.update_email(db, email=email, new_email=new_email)
        except IntegrityError as e:
            raise UserAlreadyExistsError(new_email) from e
        return new_email

    def delete_user(self, db: Session, email: str) -> None:
        """
        Delete a user and, by cascade, its items, memberships and reset
        tokens. Outstanding refresh tokens stop working at the next refresh.
        """
        with transaction(db):
            self.crud.delete(db, email=email)


# Create a singleton instance
user_service = UserService()
