"""
JWT token issuance and verification for authentication.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from userhub.config import Settings


class TokenClaims(BaseModel):
    """Identity bound into a token at issuance time."""

    id: str
    email: str
    issued_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None


class TokenService:
    """
    Signed, time-limited identity tokens.

    Tokens are stateless: validity depends only on signature and expiry,
    so a token stays accepted until it expires even if the user changes.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_days: int = 7,
    ):
        if not secret_key:
            raise ValueError("A signing secret is required")
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_days = expire_days

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_days=settings.token_expire_days,
        )

    def issue(self, claims: TokenClaims, now: Optional[datetime] = None) -> str:
        """
        Create a signed token for the given identity.

        Args:
            claims: Identity to bind (only id and email are signed)
            now: Issuance time, defaults to the current UTC time

        Returns:
            Encoded JWT
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "id": claims.id,
            "email": claims.email,
            "iat": issued_at,
            "exp": issued_at + timedelta(days=self.expire_days),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """
        Verify and decode a token.

        Returns:
            TokenClaims if valid, None for malformed, expired or tampered tokens
        """
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require_exp": True},
            )
            return TokenClaims(
                id=payload["id"],
                email=payload["email"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc) if "iat" in payload else None,
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (JWTError, KeyError, TypeError, ValidationError):
            return None
