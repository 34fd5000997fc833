from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.api.deps import get_activity_service, get_actor
from resume_builder.core.database import get_db
from resume_builder.core.security import get_current_user
from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.models.user import User
from resume_builder.schemas.common import Page, success
from resume_builder.schemas.cv import CVCreate, CVResponse, CVUpdate
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor
from resume_builder.services.document_service import cv_documents

router = APIRouter()


@router.get("")
async def list_cvs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cvs, total = await cv_documents(db).list_user_documents(current_user.id, page, page_size)
    items = [CVResponse.model_validate(cv) for cv in cvs]
    return success(Page[CVResponse](items=items, total=total, page=page, page_size=page_size))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_cv(
    cv_data: CVCreate,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    cv = await cv_documents(db).create_document(current_user.id, cv_data.model_dump())
    await activity.record_outcome(actor, ActivityAction.CREATE_CV, EntityType.CV, cv.id, {"name": cv.name})
    return success(CVResponse.model_validate(cv), "CV created successfully")


@router.get("/{cv_id}")
async def get_cv(
    cv_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    cv = await cv_documents(db).get_document(cv_id, current_user.id)
    return success(CVResponse.model_validate(cv))


@router.put("/{cv_id}")
async def update_cv(
    cv_id: int,
    cv_data: CVUpdate,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    changes = cv_data.model_dump(exclude_unset=True, exclude_none=True)
    cv = await cv_documents(db).update_document(cv_id, current_user.id, changes)
    await activity.record_outcome(
        actor, ActivityAction.UPDATE_CV, EntityType.CV, cv.id, {"updatedFields": sorted(changes)},
    )
    return success(CVResponse.model_validate(cv), "CV updated successfully")


@router.delete("/{cv_id}")
async def delete_cv(
    cv_id: int,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    cv = await cv_documents(db).delete_document(cv_id, current_user.id)
    await activity.record_outcome(actor, ActivityAction.DELETE_CV, EntityType.CV, cv_id, {"name": cv.name})
    return success(message="CV deleted successfully")
