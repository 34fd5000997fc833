from fastapi import APIRouter, Depends, Request

from resume_builder.api.deps import get_actor, get_executor, limiter, settings
from resume_builder.schemas.common import success
from resume_builder.schemas.extract import PreprocessResult, TextExtractRequest
from resume_builder.services.activity_log_service import RequestActor
from resume_builder.services.ai.executor import TaskExecutor

router = APIRouter()


@router.post("/cv")
@limiter.limit(settings.ai_rate_limit)
async def extract_cv(
    request: Request,
    body: TextExtractRequest,
    actor: RequestActor = Depends(get_actor),
    executor: TaskExecutor = Depends(get_executor),
):
    """
    Extract structured CV data from raw text.
    """
    data = await executor.extract_cv(body.text, actor)
    return success(data, "CV data extracted successfully")


@router.post("/job-description")
@limiter.limit(settings.ai_rate_limit)
async def extract_job_description(
    request: Request,
    body: TextExtractRequest,
    actor: RequestActor = Depends(get_actor),
    executor: TaskExecutor = Depends(get_executor),
):
    """
    Extract a structured job description from raw text.
    """
    data = await executor.extract_job_description(body.text, actor)
    return success(data, "Job description data extracted successfully")


@router.post("/preprocess")
@limiter.limit(settings.ai_rate_limit)
async def preprocess_cv(
    request: Request,
    body: TextExtractRequest,
    actor: RequestActor = Depends(get_actor),
    executor: TaskExecutor = Depends(get_executor),
):
    """
    Rebuild scrambled CV text as clean key-value lines.
    """
    result = await executor.preprocess_cv(body.text, actor)
    return success(PreprocessResult.model_validate(result), "CV text preprocessed successfully")
