from datetime import timedelta
from functools import lru_cache
from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from app.database import get_db
from app.models.user import User
from app.core.config import settings
from app.core.exceptions import InvalidTokenError
from app.core.security import TokenCodec
from app.crud.user import user as user_crud
from app.services.auth import AuthService


@lru_cache
def get_token_codec() -> TokenCodec:
    """One codec for the configured secret, built on first use."""
    return TokenCodec(settings.JWT_SECRET, algorithm=settings.ALGORITHM)


def get_auth_service(codec: TokenCodec = Depends(get_token_codec)) -> AuthService:
    return AuthService(
        codec=codec,
        access_token_ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        refresh_token_ttl=timedelta(hours=settings.REFRESH_TOKEN_EXPIRE_HOURS),
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_email(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service)
) -> str:
    """
    Extract the bearer token from the Authorization header and return the
    email it was issued to.

    Args:
        request: FastAPI Request to extract Authorization header
        auth_service: Verifies the access token

    Returns:
        Email of the authenticated user

    Raises:
        HTTPException 401: Missing header, non-Bearer scheme, or invalid token
    """
    authorization = request.headers.get("Authorization")
    if not authorization:
        raise _unauthorized("Authorization header required")
    if not authorization.startswith("Bearer "):
        raise _unauthorized("Invalid authorization header format")

    token = authorization[len("Bearer "):]
    try:
        return auth_service.validate_access_token(token)
    except InvalidTokenError:
        raise _unauthorized("Invalid token")


def get_current_user(
    email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db)
) -> User:
    """
    Load the authenticated user's row.

    A token whose user has been deleted is still cryptographically valid
    until it expires; routes that need the row treat that as 401.
    """
    user = user_crud.get_by_email(db, email=email)
    if user is None:
        raise _unauthorized("User not found")
    return user
