from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.api.deps import get_activity_service, get_actor, get_executor, limiter, settings
from resume_builder.core.database import get_db
from resume_builder.core.security import get_current_user
from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.models.user import User
from resume_builder.schemas.common import Page, success
from resume_builder.schemas.resume import (
    ResumeMatchRequest,
    ResumeResponse,
    ResumeTipsRequest,
    ResumeUpdate,
)
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor
from resume_builder.services.ai.executor import TaskExecutor
from resume_builder.services.document_service import (
    cv_documents,
    job_description_documents,
    match_log_details,
    resume_documents,
    resume_from_match,
)

router = APIRouter()


@router.get("")
async def list_resumes(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100, alias="pageSize"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    resumes, total = await resume_documents(db).list_user_documents(current_user.id, page, page_size)
    items = [ResumeResponse.model_validate(r) for r in resumes]
    return success(Page[ResumeResponse](items=items, total=total, page=page, page_size=page_size))


@router.post("/match", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.ai_rate_limit)
async def match_resume(
    request: Request,
    match: ResumeMatchRequest,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    executor: TaskExecutor = Depends(get_executor),
    activity: ActivityLogService = Depends(get_activity_service),
):
    """
    Match a CV to a job description and save the result as a draft resume.
    """
    cv = await cv_documents(db).get_document(match.cv_id, current_user.id)
    job_description = await job_description_documents(db).get_document(
        match.job_description_id, current_user.id
    )
    details = match_log_details(cv, job_description)

    matched = await executor.match_resume(
        cv.to_prompt_dict(), job_description.to_prompt_dict(), actor, log_details=details
    )

    try:
        resume = resume_from_match(current_user.id, cv, job_description, matched, match.template_id)
        db.add(resume)
        await db.commit()
        await db.refresh(resume)
    except Exception as e:
        await db.rollback()
        await activity.record_outcome(
            actor, ActivityAction.EXTRACT_RESUME_FROM_CV_JD, EntityType.RESUME, None,
            {**details, "error": f"Failed to save resume: {e}", "success": False},
        )
        raise

    await activity.record_outcome(
        actor, ActivityAction.CREATE_RESUME, EntityType.RESUME, resume.id,
        {
            "resumeName": resume.name,
            "roleApply": resume.role_apply,
            "cvId": resume.cv_id,
            "jobDescriptionId": resume.job_description_id,
        },
    )
    await activity.record_outcome(
        actor, ActivityAction.EXTRACT_RESUME_FROM_CV_JD, EntityType.RESUME, resume.id,
        {
            **details,
            "resumeId": resume.id,
            "resumeName": resume.name,
            "skillsCount": len(resume.matched_skills or []),
            "experienceCount": len(resume.matched_experience or []),
            "success": True,
        },
    )
    return success(ResumeResponse.model_validate(resume), "Resume created successfully")


@router.post("/tips")
@limiter.limit(settings.ai_rate_limit)
async def resume_tips(
    request: Request,
    tips_request: ResumeTipsRequest,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    executor: TaskExecutor = Depends(get_executor),
):
    """
    Section-by-section tips for tailoring a CV to a job description.
    """
    cv = await cv_documents(db).get_document(tips_request.cv_id, current_user.id)
    job_description = await job_description_documents(db).get_document(
        tips_request.job_description_id, current_user.id
    )
    tips = await executor.resume_tips(
        cv.to_prompt_dict(),
        job_description.to_prompt_dict(),
        actor,
        log_details=match_log_details(cv, job_description),
    )
    return success(tips, "Resume tips extracted successfully")


@router.get("/{resume_id}")
async def get_resume(
    resume_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    resume = await resume_documents(db).get_document(resume_id, current_user.id)
    return success(ResumeResponse.model_validate(resume))


@router.put("/{resume_id}")
async def update_resume(
    resume_id: int,
    resume_data: ResumeUpdate,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    changes = resume_data.model_dump(exclude_unset=True, exclude_none=True)
    resume = await resume_documents(db).update_document(resume_id, current_user.id, changes)
    await activity.record_outcome(
        actor, ActivityAction.UPDATE_RESUME, EntityType.RESUME, resume.id,
        {"updatedFields": sorted(changes)},
    )
    return success(ResumeResponse.model_validate(resume), "Resume updated successfully")


@router.delete("/{resume_id}")
async def delete_resume(
    resume_id: int,
    current_user: User = Depends(get_current_user),
    actor: RequestActor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
    activity: ActivityLogService = Depends(get_activity_service),
):
    resume = await resume_documents(db).delete_document(resume_id, current_user.id)
    await activity.record_outcome(
        actor, ActivityAction.DELETE_RESUME, EntityType.RESUME, resume_id, {"name": resume.name},
    )
    return success(message="Resume deleted successfully")
