"""
API v1 router configuration for the resume builder.

This module sets up all the API endpoints and their routing configuration.
"""

from fastapi import APIRouter

from resume_builder.api.v1 import (
    ai_configs,
    auth,
    chatbot,
    cvs,
    extract,
    job_descriptions,
    knowledge,
    resumes,
    templates,
    user_logs,
    users,
)

api_router = APIRouter()

_auth_responses = {
    401: {"description": "Unauthorized"},
    400: {"description": "Validation Error"},
}
_admin_responses = {**_auth_responses, 403: {"description": "Forbidden"}}
_ai_responses = {
    **_auth_responses,
    429: {"description": "Too Many Requests"},
    500: {"description": "AI processing, response parsing or configuration error"},
}

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"], responses=_auth_responses)
api_router.include_router(users.router, prefix="/users", tags=["users"], responses=_admin_responses)
api_router.include_router(cvs.router, prefix="/cvs", tags=["cvs"], responses=_auth_responses)
api_router.include_router(
    job_descriptions.router, prefix="/job-descriptions", tags=["job descriptions"], responses=_auth_responses
)
api_router.include_router(resumes.router, prefix="/resumes", tags=["resumes"], responses=_ai_responses)
api_router.include_router(templates.router, prefix="/templates", tags=["templates"], responses=_admin_responses)
api_router.include_router(extract.router, prefix="/extract", tags=["extract"], responses=_ai_responses)
api_router.include_router(chatbot.router, prefix="/chatbot", tags=["chatbot"], responses=_ai_responses)
api_router.include_router(ai_configs.router, prefix="/ai-configs", tags=["ai configs"], responses=_admin_responses)
api_router.include_router(knowledge.router, prefix="/knowledge", tags=["knowledge"], responses=_admin_responses)
api_router.include_router(user_logs.router, prefix="/user-logs", tags=["user logs"], responses=_admin_responses)


__all__ = ["api_router"]
