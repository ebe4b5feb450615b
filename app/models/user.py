from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

class User(Base, TimestampMixin):
    __tablename__ = "users"

    email = Column(String(255), primary_key=True)
    # Stored and compared verbatim; there is no hashing.
    password = Column(String(255), nullable=False)
    prefix = Column(String(10), nullable=True)
    active_organization_id = Column(Integer, ForeignKey("organizations.id"), nullable=True)

    active_organization = relationship("Organization", foreign_keys=[active_organization_id])
    organizations = relationship(
        "Organization",
        secondary="organization_users",
        back_populates="users",
    )
    items = relationship("Item", back_populates="user", passive_deletes=True)
