import secrets
import string
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.exceptions import ResetTokenExpiredError, ResetTokenNotFoundError, UserNotFoundError
from app.core.logging_config import logger
from app.crud import reset_token as reset_token_crud
from app.crud import user as user_crud
from app.database import transaction
from app.models.reset_token import ResetToken

RESET_TOKEN_LENGTH = 15
RESET_TOKEN_ALPHABET = string.ascii_letters + string.digits


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timezone-aware columns back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class PasswordResetService:
    """
    Single-use, time-boxed password reset tokens.

    A user has at most one live token: issuing a new one deletes the old.
    Tokens are deleted when used and when found expired.
    """

    def __init__(self, ttl: timedelta = timedelta(minutes=5)):
        self.ttl = ttl

    @staticmethod
    def generate_token() -> str:
        return "".join(secrets.choice(RESET_TOKEN_ALPHABET) for _ in range(RESET_TOKEN_LENGTH))

    def create_reset_token(self, db: Session, email: str) -> str:
        """
        Issue a reset token for `email`.

        Raises:
            UserNotFoundError: If no such user exists
        """
        if user_crud.get_by_email(db, email=email) is None:
            raise UserNotFoundError(email)

        token = self.generate_token()
        with transaction(db):
            reset_token_crud.delete_for_user(db, email=email)
            reset_token_crud.create(db, email=email, token=token, expired_at=_utcnow() + self.ttl)

        logger.info(f"Reset token issued for {email}")
        return token

    def validate_reset_token(self, db: Session, token: str) -> ResetToken:
        """
        Raises:
            ResetTokenNotFoundError: Unknown token
            ResetTokenExpiredError: Token past its expiry (it is deleted)
        """
        row = reset_token_crud.get_by_token(db, token)
        if row is None:
            raise ResetTokenNotFoundError("Reset token not found")

        if _utcnow() > _as_utc(row.expired_at):
            with transaction(db):
                reset_token_crud.delete(db, row=row)
            raise ResetTokenExpiredError("Reset token expired")

        return row

    def reset_password(self, db: Session, token: str, new_password: str) -> None:
        """Set a new plaintext password and consume the token."""
        row = self.validate_reset_token(db, token)
        email = row.user_email
        with transaction(db):
            user_crud.update_password(db, email=email, password=new_password)
            reset_token_crud.delete(db, row=row)
        logger.info(f"Password reset completed for {email}")

    def cleanup_expired_tokens(self, db: Session) -> int:
        """Delete every expired token. Returns how many were removed."""
        with transaction(db):
            removed = reset_token_crud.delete_expired(db, now=_utcnow())
        return removed


# Create a singleton instance
password_reset_service = PasswordResetService(
    ttl=timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
)
