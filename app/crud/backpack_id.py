from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import select
from app.models.backpack_id_next_number import BackpackIdNextNumber


class CRUDBackpackIdNextNumber:
    """
    Row access for the per-prefix counter.

    Nothing here commits. Every call runs inside the allocator's
    transaction.
    """

    def __init__(self):
        self.model = BackpackIdNextNumber

    def get_for_update(self, db: Session, prefix: str) -> Optional[BackpackIdNextNumber]:
        """
        Read the counter row for a prefix and lock it for the rest of the
        transaction. Other prefixes' rows are unaffected.
        """
        stmt = (
            select(BackpackIdNextNumber)
            .where(BackpackIdNextNumber.backpack_id == prefix)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return db.execute(stmt).scalar_one_or_none()

    def create(self, db: Session, *, prefix: str, number: int) -> BackpackIdNextNumber:
        row = BackpackIdNextNumber(backpack_id=prefix, number=number)
        db.add(row)
        db.flush()
        return row

    def increment(self, db: Session, *, row: BackpackIdNextNumber) -> BackpackIdNextNumber:
        row.number = row.number + 1
        db.add(row)
        db.flush()
        return row


# Create singleton instance
backpack_id_next_number = CRUDBackpackIdNextNumber()
