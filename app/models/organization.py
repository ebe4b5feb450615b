from sqlalchemy import Column, Integer, String, ForeignKey, Table
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

organization_users = Table(
    "organization_users",
    Base.metadata,
    Column("organization_id", Integer, ForeignKey("organizations.id", ondelete="CASCADE"), primary_key=True),
    Column(
        "user_email",
        String(255),
        ForeignKey("users.email", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
    ),
)

class Organization(Base, TimestampMixin):
    __tablename__ = "organizations"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)

    users = relationship("User", secondary=organization_users, back_populates="organizations")
    tags = relationship("Tag", back_populates="organization", passive_deletes=True)
