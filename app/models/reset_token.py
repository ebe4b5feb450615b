from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from app.database import Base

class ResetToken(Base):
    __tablename__ = "reset_tokens"

    id = Column(Integer, primary_key=True)
    token = Column(String(30), nullable=False, unique=True, index=True)
    expired_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_email = Column(
        String(255),
        ForeignKey("users.email", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
