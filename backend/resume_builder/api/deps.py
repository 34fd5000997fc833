"""
Shared FastAPI dependencies: services bound to the request session, the AI
client, the activity recorder and the rate limiter.
"""

from fastapi import Depends, Request
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.config import get_settings
from resume_builder.core.database import db_manager, get_db
from resume_builder.core.security import get_client_ip, get_current_user
from resume_builder.models.user import User
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor
from resume_builder.services.ai.client import AIClient, GeminiClient
from resume_builder.services.ai.executor import TaskExecutor
from resume_builder.services.ai.intent import IntentRouter
from resume_builder.services.ai.resolver import ConfigResolver

settings = get_settings()

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def get_ai_client() -> AIClient:
    return GeminiClient(get_settings().gemini_api_key)


def get_activity_service() -> ActivityLogService:
    """Activity recorder writing through its own sessions."""
    return ActivityLogService(db_manager.sessionmaker)


async def get_actor(request: Request, current_user: User = Depends(get_current_user)) -> RequestActor:
    return RequestActor(
        user_id=current_user.id,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


def get_executor(
    db: AsyncSession = Depends(get_db),
    client: AIClient = Depends(get_ai_client),
    activity: ActivityLogService = Depends(get_activity_service),
) -> TaskExecutor:
    return TaskExecutor(
        db,
        client,
        activity=activity,
        resolver=ConfigResolver(db),
        timeout=get_settings().ai_request_timeout,
    )


def get_intent_router(
    db: AsyncSession = Depends(get_db),
    client: AIClient = Depends(get_ai_client),
) -> IntentRouter:
    current = get_settings()
    return IntentRouter(
        db,
        client,
        resolver=ConfigResolver(db),
        history_turns=current.intent_history_turns,
        timeout=current.ai_request_timeout,
    )
