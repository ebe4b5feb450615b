"""
Signed claim sets for access and refresh tokens.

A TokenCodec is bound to exactly one secret and one HMAC algorithm for its
whole lifetime. There is no key rotation and no key-id header; build one
codec per configured secret and hand it to whoever needs it.
"""
import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWSError, JWTClaimsError, JWTError
from app.core.exceptions import TokenSigningError


class TokenKind(str, enum.Enum):
    access = "access"
    refresh = "refresh"


@dataclass(frozen=True)
class TokenClaims:
    """
    The complete set of claims a token may carry.

    kind is None for tokens minted before access/refresh tagging existed.
    expires_at is a timezone-aware UTC instant; sub-second precision is
    dropped on encoding.
    """

    email: str
    expires_at: datetime
    kind: Optional[TokenKind] = None
    token_id: Optional[str] = None

    def accepts(self, kind: TokenKind) -> bool:
        """True if this token may be used as `kind` (untagged tokens pass)."""
        return self.kind is None or self.kind == kind


class TokenDecodeError(Exception):
    """Base class for every reason a token string is rejected."""


class MalformedTokenError(TokenDecodeError):
    pass


class BadSignatureError(TokenDecodeError):
    pass


class TokenExpiredError(TokenDecodeError):
    pass


class TokenCodec:
    def __init__(self, secret: str, algorithm: str = "HS256"):
        if not secret:
            raise ValueError("token signing secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def encode(self, claims: TokenClaims) -> str:
        """
        Sign a claim set.

        Args:
            claims: Claims to embed

        Returns:
            Compact JWS string

        Raises:
            TokenSigningError: If the claims cannot be signed
        """
        payload: Dict[str, Any] = {
            "email": claims.email,
            "exp": int(claims.expires_at.timestamp()),
        }
        if claims.kind is not None:
            payload["token_type"] = claims.kind.value
        if claims.token_id is not None:
            payload["jti"] = claims.token_id

        try:
            return jwt.encode(payload, self._secret, algorithm=self._algorithm)
        except (JWTError, JWSError) as e:
            raise TokenSigningError(f"Failed to sign token: {e}") from e

    def decode(self, token: str) -> TokenClaims:
        """
        Verify a token and return its claims.

        Expiry is evaluated against the wall clock now, not at issuance.

        Raises:
            MalformedTokenError: Not a JWT, or required claims missing/mistyped
            BadSignatureError: Signature does not verify with this codec's secret
            TokenExpiredError: The exp claim is in the past
        """
        try:
            unverified = jwt.get_unverified_claims(token)
        except JWTError as e:
            raise MalformedTokenError(str(e)) from e

        claims = self._parse_claims(unverified)

        try:
            jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JWTClaimsError as e:
            raise MalformedTokenError(str(e)) from e
        except JWTError as e:
            raise BadSignatureError(str(e)) from e

        return claims

    @staticmethod
    def _parse_claims(payload: Dict[str, Any]) -> TokenClaims:
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise MalformedTokenError("email claim missing")

        exp = payload.get("exp")
        # bool is an int subclass; reject it explicitly
        if not isinstance(exp, int) or isinstance(exp, bool):
            raise MalformedTokenError("exp claim missing or not an integer")

        kind = None
        raw_kind = payload.get("token_type")
        if raw_kind is not None:
            if not isinstance(raw_kind, str):
                raise MalformedTokenError("token_type claim must be a string")
            try:
                kind = TokenKind(raw_kind)
            except ValueError as e:
                raise MalformedTokenError(f"unknown token_type {raw_kind!r}") from e

        token_id = payload.get("jti")
        if token_id is not None and not isinstance(token_id, str):
            raise MalformedTokenError("jti claim must be a string")

        try:
            expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
        except (OverflowError, ValueError, OSError) as e:
            raise MalformedTokenError("exp claim out of range") from e

        return TokenClaims(
            email=email,
            expires_at=expires_at,
            kind=kind,
            token_id=token_id,
        )
