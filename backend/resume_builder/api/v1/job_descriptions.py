from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.api.deps import get_activity_service, get_actor
from resume_builder.core.database import get_db
from resume_builder.core.security import get_current_user
from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.models.user import User
from resume_builder.schemas.common import Page, success
from resume_builder.schemas.job_description import (
    JobDescriptionCreate,
    JobDescriptionResponse,
    JobDescriptionUpdate,
)
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor
from resume_builder.services.document_service import job_description_documents

router = APIRouter()


@router.get("")
async def list_job_descriptions(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    documents = job_description_documents(db)
    job_descriptions, total = await documents.list_user_documents(current_user.id, page, page_size)
    items = [JobDescriptionResponse.model_validate(jd) for jd in job_descriptions]
    return success(Page[JobDescriptionResponse](items=items, total=total, page=page, page_size=page_size))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_job_description(
    jd_data: JobDescriptionCreate,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    jd = await job_description_documents(db).create_document(current_user.id, jd_data.model_dump())
    await activity.record_outcome(
        actor, ActivityAction.CREATE_JOB_DESCRIPTION, EntityType.JOB_DESCRIPTION, jd.id,
        {"position": jd.position},
    )
    return success(JobDescriptionResponse.model_validate(jd), "Job description created successfully")


@router.get("/{job_description_id}")
async def get_job_description(
    job_description_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    jd = await job_description_documents(db).get_document(job_description_id, current_user.id)
    return success(JobDescriptionResponse.model_validate(jd))


@router.put("/{job_description_id}")
async def update_job_description(
    job_description_id: int,
    jd_data: JobDescriptionUpdate,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    changes = jd_data.model_dump(exclude_unset=True, exclude_none=True)
    jd = await job_description_documents(db).update_document(job_description_id, current_user.id, changes)
    await activity.record_outcome(
        actor, ActivityAction.UPDATE_JOB_DESCRIPTION, EntityType.JOB_DESCRIPTION, jd.id,
        {"updatedFields": sorted(changes)},
    )
    return success(JobDescriptionResponse.model_validate(jd), "Job description updated successfully")


@router.delete("/{job_description_id}")
async def delete_job_description(
    job_description_id: int,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    jd = await job_description_documents(db).delete_document(job_description_id, current_user.id)
    await activity.record_outcome(
        actor, ActivityAction.DELETE_JOB_DESCRIPTION, EntityType.JOB_DESCRIPTION, job_description_id,
        {"position": jd.position},
    )
    return success(message="Job description deleted successfully")
