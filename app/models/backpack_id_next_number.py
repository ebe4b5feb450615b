from sqlalchemy import Column, Integer, String
from app.database import Base

class BackpackIdNextNumber(Base):
    """
    Allocator state: one row per user prefix.

    backpack_id holds the prefix (e.g. "ABC"), not a full item code.
    number is the last sequence value handed out for that prefix.
    """
    __tablename__ = "backpack_id_next_numbers"

    id = Column(Integer, primary_key=True)
    backpack_id = Column(String(20), nullable=False, unique=True)
    number = Column(Integer, nullable=False, default=1)
