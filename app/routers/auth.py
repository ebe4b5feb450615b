from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.database import get_db
from app.dependencies import get_auth_service
from app.core.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    StoreError,
    TokenSigningError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from app.core.logging_config import logger
from app.schemas.common import MessageResponse
from app.schemas.user import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
    VerifyRequest,
    VerifyResponse,
)
from app.services.auth import AuthService

router = APIRouter()


def _token_response(auth_service: AuthService, email: str) -> TokenPairResponse:
    try:
        pair = auth_service.issue_token_pair(email)
    except TokenSigningError as e:
        logger.error(f"Token generation failed for {email}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate tokens"
        )
    return TokenPairResponse(token=pair.token, refresh_token=pair.refresh_token)


@router.post("/users", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    request: RegisterRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Register a new user.

    Creates the user, a personal organization, and assigns the item prefix.

    Raises:
        HTTPException 409: If the email is already registered
        HTTPException 500: If the user could not be stored
    """
    try:
        auth_service.register(db, email=request.email, password=request.password)
    except UserAlreadyExistsError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreError as e:
        logger.error(f"Error creating user: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user"
        )
    return MessageResponse(message="User created successfully")


@router.post("/token", response_model=TokenPairResponse)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Exchange email and password for an access/refresh token pair.

    Raises:
        HTTPException 401: If the credentials do not match
    """
    logger.info(f"Login attempt for {credentials.email}")
    try:
        auth_service.validate_credentials(db, email=credentials.email, password=credentials.password)
    except InvalidCredentialsError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    except StoreError as e:
        logger.error(f"Login failed for {credentials.email}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed")

    return _token_response(auth_service, credentials.email)


@router.post("/refresh", response_model=TokenPairResponse)
def refresh_token(
    request: RefreshRequest,
    db: Session = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Rotate a refresh token into a brand-new token pair.

    Raises:
        HTTPException 401: Invalid/expired refresh token, or the user was deleted
    """
    try:
        pair = auth_service.refresh(db, request.refresh_token)
    except InvalidTokenError as e:
        logger.info(f"Refresh rejected: {str(e)}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid refresh token")
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    except StoreError as e:
        logger.error(f"Refresh failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to validate user"
        )
    except TokenSigningError as e:
        logger.error(f"Refresh failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate tokens"
        )

    return TokenPairResponse(token=pair.token, refresh_token=pair.refresh_token)


@router.post("/token/verify", response_model=VerifyResponse)
def verify_token(
    request: VerifyRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Check an access token and report whom it belongs to.

    Raises:
        HTTPException 401: If the token is not a valid access token
    """
    try:
        email = auth_service.validate_access_token(request.token)
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return VerifyResponse(valid=True, email=email)
