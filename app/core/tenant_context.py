from typing import Optional
from fastapi import Depends
from app.models.user import User
from app.dependencies import get_current_user


def get_organization_id(current_user: User = Depends(get_current_user)) -> Optional[int]:
    """
    FastAPI dependency that extracts the active organization from the
    authenticated user.

    Tag routes use this for organization isolation; the id is then passed
    explicitly through service and CRUD layers.

    Args:
        current_user: Authenticated user from the access token

    Returns:
        Active organization ID of the current user, or None if unset
    """
    return current_user.active_organization_id
