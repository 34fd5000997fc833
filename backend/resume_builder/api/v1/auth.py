from fastapi import APIRouter, Depends, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.api.deps import get_activity_service
from resume_builder.core.config import settings
from resume_builder.core.database import get_db
from resume_builder.core.exceptions import AuthenticationError, DuplicateError
from resume_builder.core.logging import security_logger
from resume_builder.core.security import (
    create_access_token,
    get_client_ip,
    get_current_user,
    get_password_hash,
    verify_password,
)
from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.models.base import utcnow
from resume_builder.models.user import User
from resume_builder.schemas.common import success
from resume_builder.schemas.user import Token, UserCreate, UserLogin, UserResponse
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor

router = APIRouter()


def _token_for(user: User) -> Token:
    return Token(
        access_token=create_access_token(user.id),
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    """
    Register a new user account.
    """
    email = user_data.email.lower()
    existing = await db.execute(select(User).where(User.email == email))
    if existing.scalars().first():
        raise DuplicateError("Email already registered")

    user = User(
        email=email,
        name=user_data.name,
        hashed_password=get_password_hash(user_data.password),
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    await activity.record_outcome(
        RequestActor(user.id, get_client_ip(request), request.headers.get("user-agent")),
        ActivityAction.REGISTER, EntityType.USER, user.id, {"email": user.email},
    )
    return success(_token_for(user), "User registered successfully")


@router.post("/login")
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    """
    Login and receive access token.
    """
    ip_address = get_client_ip(request)
    result = await db.execute(select(User).where(User.email == credentials.email.lower()))
    user = result.scalars().first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        security_logger.log_login_attempt(credentials.email, False, ip_address)
        raise AuthenticationError("Incorrect email or password")
    if not user.is_active:
        security_logger.log_login_attempt(credentials.email, False, ip_address)
        raise AuthenticationError("Account is disabled")

    user.last_login = utcnow()
    await db.commit()
    await db.refresh(user)
    security_logger.log_login_attempt(user.email, True, ip_address)

    await activity.record_outcome(
        RequestActor(user.id, ip_address, request.headers.get("user-agent")),
        ActivityAction.LOGIN, EntityType.USER, user.id, {"email": user.email},
    )
    return success(_token_for(user), "Login successful")


@router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    """
    Return the authenticated user.
    """
    return success(UserResponse.model_validate(current_user))
