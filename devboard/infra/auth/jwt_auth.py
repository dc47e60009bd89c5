"""
JWT verification for callers of the generation endpoints.

Tokens are issued elsewhere; this module only answers "is the bearer valid
and who is it". The subject is the caller's GitHub username.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import HTTPException, status
from pydantic import BaseModel, ValidationError

from devboard.infra.config.settings import Settings, get_settings


class JWTPayload(BaseModel):
    """JWT token payload structure."""

    sub: str
    exp: int
    iat: Optional[int] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTAuth:
    """JWT Authentication handler."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def create_access_token(self, subject: str, expires_minutes: int = 30) -> str:
        """Issue a token; used by tests and local tooling."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "exp": int((now + timedelta(minutes=expires_minutes)).timestamp()),
            "iat": int(now.timestamp()),
        }
        return jwt.encode(
            payload, self.settings.jwt_secret_key, algorithm=self.settings.jwt_algorithm
        )

    def verify_token(self, token: str) -> JWTPayload:
        """Verify JWT token and return its payload."""
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret_key,
                algorithms=[self.settings.jwt_algorithm],
                options={"require": ["exp", "sub"]},
            )
            jwt_payload = JWTPayload(**payload)
        except jwt.ExpiredSignatureError:
            raise _unauthorized("Token has expired")
        except jwt.MissingRequiredClaimError as e:
            raise _unauthorized(f"Token missing required claim: {e.claim}")
        except jwt.InvalidSignatureError:
            raise _unauthorized("Invalid token signature")
        except jwt.InvalidTokenError:
            raise _unauthorized("Invalid token format")
        except ValidationError:
            raise _unauthorized("Invalid token payload structure")

        if not jwt_payload.sub.strip():
            raise _unauthorized("Token subject is empty")
        return jwt_payload

    def subject_from_authorization(self, authorization: Optional[str]) -> str:
        """Resolve the caller from an ``Authorization: Bearer`` header value."""
        if not authorization:
            raise _unauthorized("Authorization required")
        try:
            scheme, token = authorization.split()
        except ValueError:
            raise _unauthorized("Invalid authorization header format")
        if scheme.lower() != "bearer":
            raise _unauthorized("Invalid authorization header format")
        return self.verify_token(token).sub
