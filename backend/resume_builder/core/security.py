"""
Authentication for the Resume Builder API.

Passwords are stored as bcrypt hashes and sessions are stateless HS256 JWT
bearer tokens whose ``sub`` claim is the user id. ``get_current_user`` and
``get_current_admin`` are the dependencies routes use to require a login or
the administrator role.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.config import get_settings
from resume_builder.core.database import get_db
from resume_builder.core.exceptions import AuthenticationError, PermissionDeniedError
from resume_builder.core.logging import security_logger, user_id_var
from resume_builder.models.user import User

# missing credentials are reported through AuthenticationError, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """False for a wrong password and for a stored value that is not a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed access token for a user.

    Args:
        user_id: Becomes the ``sub`` claim
        expires_delta: Lifetime; defaults to ACCESS_TOKEN_EXPIRE_MINUTES
    """
    settings = get_settings()
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    issued_at = datetime.now(timezone.utc)
    claims = {"sub": str(user_id), "type": "access", "iat": issued_at, "exp": issued_at + lifetime}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid, unexpired access token, else None."""
    settings = get_settings()
    try:
        claims = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.PyJWTError:
        return None
    return claims if claims.get("type") == "access" else None


def get_client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.headers.get("X-Real-IP") or (request.client.host if request.client else "unknown")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    claims = decode_access_token(credentials.credentials)
    subject = claims.get("sub") if claims else None
    if subject is None or not str(subject).isdigit():
        raise AuthenticationError("Could not validate credentials")

    user = await db.get(User, int(subject))
    if user is None or not user.is_active:
        raise AuthenticationError("User not found or inactive")

    user_id_var.set(user.id)
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        security_logger.log_permission_denied(current_user.id, "admin")
        raise PermissionDeniedError("Admin privileges required")
    return current_user
