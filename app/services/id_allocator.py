"""
Backpack ID allocation.

A backpack ID is a user's prefix followed by a zero-padded sequence number,
e.g. ``ABC0007``. The sequence lives in ``backpack_id_next_numbers``, one row
per prefix, and is advanced with a read-increment-write under a row lock
inside the caller's transaction. Two allocations for the same prefix
therefore serialize on that row, while different prefixes never contend.

The first allocation for a prefix emits 1. Sequence values above 9999 simply
grow past four digits.
"""
import secrets
import string
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.core.config import settings
from app.crud import backpack_id_next_number as counter_crud
from app.crud import user as user_crud
from app.models.user import User

SEQUENCE_WIDTH = 4


class BackpackIdAllocator:
    def __init__(self, prefix_length: int = 3):
        if not 1 <= prefix_length <= 10:
            raise ValueError("prefix_length must be between 1 and 10")
        self.prefix_length = prefix_length

    def generate_prefix(self) -> str:
        """Random uppercase letters, `prefix_length` long."""
        return "".join(secrets.choice(string.ascii_uppercase) for _ in range(self.prefix_length))

    def ensure_prefix(self, db: Session, user: User) -> str:
        """
        Return the user's prefix, generating and persisting one first if the
        user has none. Must run inside the caller's transaction with the user
        row locked (see CRUDUser.get_by_email_for_update).
        """
        if not user.prefix:
            user_crud.set_prefix(db, db_user=user, prefix=self.generate_prefix())
        return user.prefix

    def allocate(self, db: Session, prefix: str) -> int:
        """
        Advance the counter for `prefix` and return the value to use.

        Does not commit. Wrap the call (and whatever consumes the number) in
        `transaction()` so the counter and the consumer persist together.
        """
        row = counter_crud.get_for_update(db, prefix)
        if row is not None:
            return counter_crud.increment(db, row=row).number

        try:
            with db.begin_nested():
                row = counter_crud.create(db, prefix=prefix, number=1)
            return row.number
        except IntegrityError:
            # A concurrent transaction inserted the first row between our
            # read and our insert; its row is committed now, so lock it.
            row = counter_crud.get_for_update(db, prefix)
            if row is None:
                raise
            return counter_crud.increment(db, row=row).number

    @staticmethod
    def format_backpack_id(prefix: str, number: int) -> str:
        return f"{prefix}{number:0{SEQUENCE_WIDTH}d}"

    def next_backpack_id(self, db: Session, prefix: str) -> str:
        return self.format_backpack_id(prefix, self.allocate(db, prefix))


# Create a singleton instance
backpack_id_allocator = BackpackIdAllocator(prefix_length=settings.BACKPACK_PREFIX_LENGTH)
