from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.api.deps import get_activity_service, get_actor
from resume_builder.core.database import count_query_results, get_db, paginate_query
from resume_builder.core.exceptions import DuplicateError, NotFoundError, ValidationError
from resume_builder.core.security import (
    get_current_admin,
    get_current_user,
    get_password_hash,
    verify_password,
)
from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.models.user import User
from resume_builder.schemas.common import Page, success
from resume_builder.schemas.user import PasswordChange, UserResponse, UserUpdate
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor

router = APIRouter()


@router.get("/profile")
async def get_profile(current_user: User = Depends(get_current_user)):
    return success(UserResponse.model_validate(current_user))


@router.put("/profile")
async def update_profile(
    profile: UserUpdate,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    """
    Update the caller's name or email.
    """
    changes = profile.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        if changes["email"] != current_user.email:
            taken = await db.execute(select(User.id).where(User.email == changes["email"]))
            if taken.first():
                raise DuplicateError("Email already registered")

    for field, value in changes.items():
        setattr(current_user, field, value)
    await db.commit()
    await db.refresh(current_user)

    await activity.record_outcome(
        actor, ActivityAction.UPDATE_PROFILE, EntityType.USER, current_user.id,
        {"updatedFields": sorted(changes)},
    )
    return success(UserResponse.model_validate(current_user), "Profile updated successfully")


@router.post("/change-password")
async def change_password(
    passwords: PasswordChange,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    if not verify_password(passwords.current_password, current_user.hashed_password):
        raise ValidationError("Current password is incorrect")

    current_user.hashed_password = get_password_hash(passwords.new_password)
    await db.commit()

    await activity.record_outcome(actor, ActivityAction.CHANGE_PASSWORD, EntityType.USER, current_user.id)
    return success(message="Password changed successfully")


@router.get("")
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    List users (admin only).
    """
    query = select(User)
    total = await count_query_results(db, query)
    result = await db.execute(paginate_query(query.order_by(User.id), page, page_size))
    users = [UserResponse.model_validate(u) for u in result.scalars().all()]
    return success(Page[UserResponse](items=users, total=total, page=page, page_size=page_size))


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    admin: User = Depends(get_current_admin),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    if user_id == admin.id:
        raise ValidationError("Administrators cannot delete their own account")

    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", details={"id": user_id})

    email = user.email
    await db.delete(user)
    await db.commit()

    await activity.record_outcome(
        actor, ActivityAction.DELETE_USER, EntityType.USER, user_id, {"email": email},
    )
    return success(message="User deleted successfully")
