"""
Bearer token authentication.

Token format: "<user_id>.<signature>", where signature is
HMAC-SHA256(AUTH_SECRET, user_id) in hex. Issuing tokens (login, password
reset) lives outside this service; this module only verifies identity.
"""

import hashlib
import hmac
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from aura.config import config


@dataclass
class AuthUser:
    """Validated user identity from the bearer token."""

    id: int


def _signature(user_id: int, secret: str) -> str:
    return hmac.new(
        secret.encode("utf-8"), str(user_id).encode("utf-8"), hashlib.sha256
    ).hexdigest()


def issue_token(user_id: int, secret: str | None = None) -> str:
    """Create a signed token for user_id."""
    secret = secret or config.AUTH_SECRET.get_secret_value()
    return f"{user_id}.{_signature(user_id, secret)}"


def validate_token(token: str, secret: str) -> int | None:
    """
    Validate a bearer token.

    Args:
        token: Raw token string
        secret: Signing secret

    Returns:
        User id if valid, None otherwise
    """
    if not token:
        return None

    user_part, _, received = token.partition(".")
    if not user_part.isdigit() or not received:
        return None

    user_id = int(user_part)

    # Constant-time comparison
    if not hmac.compare_digest(_signature(user_id, secret), received):
        return None

    return user_id


async def get_current_user(request: Request) -> AuthUser:
    """
    FastAPI dependency for authenticated endpoints.

    Usage:
        @router.get("/api/me")
        async def get_me(auth: AuthUser = Depends(get_current_user)):
            ...

    Raises:
        HTTPException 401 if auth fails
    """
    auth_header = request.headers.get("Authorization")

    if not auth_header:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header missing",
        )

    # Expect format: "Bearer <token>"
    parts = auth_header.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization format. Expected: Bearer <token>",
        )

    user_id = validate_token(parts[1].strip(), config.AUTH_SECRET.get_secret_value())
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token signature",
        )

    return AuthUser(id=user_id)
