from app.crud.base import CRUDBase
from app.crud.user import user
from .organization import organization
from .item import item
from .tag import tag
from .backpack_id import backpack_id_next_number
from .reset_token import reset_token

__all__ = [
    "CRUDBase",
    "user",
    "organization",
    "item",
    "tag",
    "backpack_id_next_number",
    "reset_token",
]
