import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from app.core.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    StoreError,
    UserNotFoundError,
)
from app.core.logging_config import logger
from app.core.security import TokenClaims, TokenCodec, TokenDecodeError, TokenKind
from app.crud import organization as organization_crud
from app.crud import user as user_crud
from app.models.user import User


@dataclass(frozen=True)
class TokenPair:
    token: str
    refresh_token: str


class AuthService:
    """
    Registration, credential checks and the access/refresh token lifecycle.

    Tokens are stateless: nothing is persisted when they are issued or
    verified. The only revocation is the user-exists check in refresh().
    """

    def __init__(
        self,
        codec: TokenCodec,
        access_token_ttl: timedelta = timedelta(minutes=15),
        refresh_token_ttl: timedelta = timedelta(hours=24)
    ):
        self.codec = codec
        self.access_token_ttl = access_token_ttl
        self.refresh_token_ttl = refresh_token_ttl

    @staticmethod
    def prefix_for_email(email: str) -> str:
        """Registration-time prefix: the first three characters, uppercased."""
        return email[:3].upper()

    def register(self, db: Session, email: str, password: str) -> User:
        """
        Create a user together with its own organization.

        Args:
            db: Database session
            email: User email (already syntactically validated by the caller)
            password: Plain text password, stored as-is

        Returns:
            Created User instance

        Raises:
            ValueError: If email or password is empty
            UserAlreadyExistsError: If the email is taken
            StoreError: On any other database failure
        """
        if not email:
            raise ValueError("email cannot be empty")
        if not password:
            raise ValueError("password cannot be empty")

        try:
            _, user = organization_crud.create_with_user(
                db=db,
                email=email,
                password=password,
                prefix=self.prefix_for_email(email),
            )
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Failed to create user: {type(e).__name__}") from e

        logger.info(f"Registered user {email} with organization {user.active_organization_id}")
        return user

    def validate_credentials(self, db: Session, email: str, password: str) -> User:
        """
        Check an email/password pair.

        An unknown email and a wrong password raise the same error.

        Raises:
            InvalidCredentialsError: If the pair does not match a user
            StoreError: If the lookup fails
        """
        try:
            user = user_crud.get_by_email(db, email=email)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up user: {type(e).__name__}") from e

        if user is None or user.password != password:
            raise InvalidCredentialsError()
        return user

    def _issue(self, email: str, kind: TokenKind, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc).replace(microsecond=0)
        claims = TokenClaims(
            email=email,
            expires_at=now + ttl,
            kind=kind,
            token_id=secrets.token_hex(8),
        )
        return self.codec.encode(claims)

    def issue_token_pair(self, email: str) -> TokenPair:
        """
        Issue a fresh access/refresh pair for `email`.

        Raises:
            TokenSigningError: If either token cannot be signed
        """
        return TokenPair(
            token=self._issue(email, TokenKind.access, self.access_token_ttl),
            refresh_token=self._issue(email, TokenKind.refresh, self.refresh_token_ttl),
        )

    def _validate(self, token: str, kind: TokenKind) -> str:
        try:
            claims = self.codec.decode(token)
        except TokenDecodeError as e:
            raise InvalidTokenError(f"Invalid {kind.value} token: {type(e).__name__}") from e

        if not claims.accepts(kind):
            raise InvalidTokenError(f"Expected {kind.value} token, got {claims.kind.value}")
        return claims.email

    def validate_access_token(self, token: str) -> str:
        """
        Return the email carried by a valid access token.

        Tokens without a kind tag are accepted.

        Raises:
            InvalidTokenError: Bad signature, malformed, expired, or a refresh token
        """
        return self._validate(token, TokenKind.access)

    def validate_refresh_token(self, token: str) -> str:
        """
        Return the email carried by a valid refresh token.

        Raises:
            InvalidTokenError: Bad signature, malformed, expired, or an access token
        """
        return self._validate(token, TokenKind.refresh)

    def refresh(self, db: Session, refresh_token: str) -> TokenPair:
        """
        Exchange a refresh token for a completely new pair.

        The subject must still exist: deleting a user invalidates every
        refresh token issued to it, even ones whose signature and expiry
        are still good.

        Raises:
            InvalidTokenError: If the refresh token is rejected
            UserNotFoundError: If the user has been deleted
            StoreError: If the user lookup fails
            TokenSigningError: If the new pair cannot be signed
        """
        email = self.validate_refresh_token(refresh_token)

        try:
            user = user_crud.get_by_email(db, email=email)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to look up user: {type(e).__name__}") from e

        if user is None:
            raise UserNotFoundError(email)

        return self.issue_token_pair(email)
