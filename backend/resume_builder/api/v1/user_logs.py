from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.api.deps import get_activity_service
from resume_builder.core.database import get_db
from resume_builder.core.security import get_current_admin, get_current_user
from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.models.user import User
from resume_builder.schemas.activity_log import ActivityLogFilter, ActivityLogResponse
from resume_builder.schemas.common import Page, success
from resume_builder.services.activity_log_service import ActivityLogService

router = APIRouter()


def log_filters(
    action: Optional[ActivityAction] = Query(None),
    entity_type: Optional[EntityType] = Query(None, alias="entityType"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
) -> ActivityLogFilter:
    return ActivityLogFilter(
        action=action,
        entity_type=entity_type,
        start_date=start_date,
        end_date=end_date,
        page=page,
        page_size=page_size,
    )


async def _page(service: ActivityLogService, db: AsyncSession, filters: ActivityLogFilter):
    logs, total = await service.list_logs(db, filters)
    items = [ActivityLogResponse.model_validate(log) for log in logs]
    return success(
        Page[ActivityLogResponse](items=items, total=total, page=filters.page, page_size=filters.page_size)
    )


@router.get("/me")
async def my_logs(
    filters: ActivityLogFilter = Depends(log_filters),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: ActivityLogService = Depends(get_activity_service),
):
    """
    The caller's own activity, newest first.
    """
    filters.user_id = current_user.id
    return await _page(service, db, filters)


@router.get("/me/stats")
async def my_stats(
    days: int = Query(30, ge=1, le=365),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: ActivityLogService = Depends(get_activity_service),
):
    return success(await service.stats(db, current_user.id, days, start_date, end_date))


@router.get("")
async def all_logs(
    user_id: Optional[int] = Query(None, alias="userId"),
    filters: ActivityLogFilter = Depends(log_filters),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: ActivityLogService = Depends(get_activity_service),
):
    """
    Activity across all users (admin only).
    """
    filters.user_id = user_id
    return await _page(service, db, filters)


@router.get("/stats")
async def system_stats(
    user_id: Optional[int] = Query(None, alias="userId"),
    days: int = Query(30, ge=1, le=365),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    service: ActivityLogService = Depends(get_activity_service),
):
    return success(await service.stats(db, user_id, days, start_date, end_date))
