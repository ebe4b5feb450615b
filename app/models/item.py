from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Table, func
from sqlalchemy.orm import relationship
from app.database import Base, TimestampMixin

item_tags = Table(
    "item_tags",
    Base.metadata,
    Column("item_id", Integer, ForeignKey("items.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Integer, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

class Item(Base, TimestampMixin):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    # Allocator output; unique per prefix by construction, not by constraint.
    backpack_id = Column(String(20), nullable=False, index=True)
    description = Column(String(1000), nullable=True)
    added_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    user_email = Column(
        String(255),
        ForeignKey("users.email", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    parent_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True, index=True)

    user = relationship("User", back_populates="items")
    parent = relationship("Item", remote_side=[id], back_populates="children")
    children = relationship("Item", back_populates="parent", passive_deletes=True)
    tags = relationship("Tag", secondary=item_tags, back_populates="items")
