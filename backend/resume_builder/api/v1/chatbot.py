from fastapi import APIRouter, Depends, Request

from resume_builder.api.deps import get_actor, get_executor, get_intent_router, limiter, settings
from resume_builder.core.security import get_current_user
from resume_builder.models.user import User
from resume_builder.schemas.chatbot import ChatRequest, IntentRequest, IntentResult
from resume_builder.schemas.common import success
from resume_builder.services.activity_log_service import RequestActor
from resume_builder.services.ai.executor import TaskExecutor
from resume_builder.services.ai.intent import IntentRouter

router = APIRouter()


def _turns(history):
    return [turn.model_dump() for turn in history]


@router.post("")
@limiter.limit(settings.ai_rate_limit)
async def chat(
    request: Request,
    body: ChatRequest,
    actor: RequestActor = Depends(get_actor),
    executor: TaskExecutor = Depends(get_executor),
    intent_router: IntentRouter = Depends(get_intent_router),
):
    """
    Answer a chat message. Without ``taskName`` the message is routed by
    intent detection first.
    """
    history = _turns(body.history)

    intent = None
    task_name = body.task_name
    if not task_name:
        intent = await intent_router.classify(body.user_message, history)
        task_name = intent["taskName"]

    output = await executor.chat(body.user_message, task_name, history, body.current_data, actor)

    payload = success(output, key="output")
    payload["taskName"] = task_name
    if intent is not None:
        payload["intent"] = IntentResult.model_validate(intent).to_api()
    return payload


@router.post("/intent")
@limiter.limit(settings.ai_rate_limit)
async def detect_intent(
    request: Request,
    body: IntentRequest,
    current_user: User = Depends(get_current_user),
    intent_router: IntentRouter = Depends(get_intent_router),
):
    """
    Classify a message into one of the active tasks.
    """
    intent = await intent_router.classify(body.user_message, _turns(body.history))
    return success(IntentResult.model_validate(intent))
