from app.services.auth import AuthService, TokenPair
from app.services.id_allocator import backpack_id_allocator
from .item import item_service
from .tag import tag_service
from .organization import organization_service
from .password_reset import password_reset_service
from .user import user_service

__all__ = [
    "AuthService",
    "TokenPair",
    "backpack_id_allocator",
    "item_service",
    "tag_service",
    "organization_service",
    "password_reset_service",
    "user_service",
]
