from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select, delete
from app.models.reset_token import ResetToken


class CRUDResetToken:
    """CRUD operations for ResetToken model."""

    def __init__(self):
        self.model = ResetToken

    def get_by_token(self, db: Session, token: str) -> Optional[ResetToken]:
        stmt = select(ResetToken).where(ResetToken.token == token)
        return db.execute(stmt).scalar_one_or_none()

    def delete_for_user(self, db: Session, *, email: str) -> int:
        stmt = delete(ResetToken).where(ResetToken.user_email == email)
        return db.execute(stmt).rowcount

    def create(self, db: Session, *, email: str, token: str, expired_at: datetime) -> ResetToken:
        row = ResetToken(token=token, expired_at=expired_at, user_email=email)
        db.add(row)
        db.flush()
        return row

    def delete(self, db: Session, *, row: ResetToken) -> None:
        db.delete(row)
        db.flush()

    def delete_expired(self, db: Session, *, now: datetime) -> int:
        stmt = (
            delete(ResetToken)
            .where(ResetToken.expired_at < now)
            .execution_options(synchronize_session=False)
        )
        return db.execute(stmt).rowcount


# Create singleton instance
reset_token = CRUDResetToken()
