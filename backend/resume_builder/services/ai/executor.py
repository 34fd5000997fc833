"""
Execution of one AI task: resolve its configuration, build the prompt with
the task's knowledge, call the model, parse and repair the response, and
record the outcome in the activity log.
"""

import asyncio
import json
import logging
import re
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.exceptions import AIProcessingError, ResponseParseError, ServiceError
from resume_builder.core.logging import performance_logger
from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.services.activity_log_service import ActivityLogService, RequestActor
from resume_builder.services.ai import prompts
from resume_builder.services.ai.client import AIClient
from resume_builder.services.ai.defaults import (
    CHATBOT,
    EXTRACT_CV,
    EXTRACT_JOB_DESCRIPTION,
    EXTRACT_RESUME_TIPS,
    MATCH_RESUME,
    PREPROCESS_CV,
    EffectiveConfig,
)
from resume_builder.services.ai.repair import repair_job_description, repair_professional_headline
from resume_builder.services.ai.resolver import ConfigResolver
from resume_builder.services.knowledge_service import KnowledgeService
from resume_builder.utils.text_processing import truncate

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def parse_json_response(raw: str) -> Any:
    """
    Parse a model response holding exactly one JSON document.

    A surrounding markdown ```json fence is removed first.

    Raises:
        ResponseParseError: if the text is not valid JSON
    """
    text = (raw or "").strip()
    match = _FENCE.match(text)
    if match:
        text = match.group(1)
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        raise ResponseParseError("Failed to parse AI response as valid JSON", raw_text=raw)


def without_leading_assistant(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Drop the first turn when it is from the assistant; later turns are kept."""
    if history and history[0].get("role") in ("assistant", "model"):
        return list(history[1:])
    return list(history)


def to_provider_history(history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert ``{role, content}`` turns to the provider's ``{role, parts}`` contents."""
    return [
        {
            "role": "model" if turn.get("role") in ("assistant", "model") else "user",
            "parts": [turn.get("content", "")],
        }
        for turn in without_leading_assistant(history)
    ]


def _name(personal_info: Any) -> str:
    if not isinstance(personal_info, dict):
        return ""
    return f"{personal_info.get('firstName') or ''} {personal_info.get('lastName') or ''}".strip()


def _count(data: Dict[str, Any], key: str) -> int:
    value = data.get(key)
    return len(value) if isinstance(value, list) else 0


class TaskExecutor:
    """Runs AI tasks for one request."""

    def __init__(
        self,
        db: AsyncSession,
        client: AIClient,
        activity: Optional[ActivityLogService] = None,
        resolver: Optional[ConfigResolver] = None,
        timeout: float = 45.0,
    ):
        self.db = db
        self.client = client
        self.activity = activity
        self.resolver = resolver or ConfigResolver(db)
        self.knowledge = KnowledgeService(db)
        self.timeout = timeout

    async def _call(self, config: EffectiveConfig, prompt: str, history: Optional[List[Dict[str, Any]]]) -> str:
        if history is None:
            call = self.client.generate(config, prompt)
        else:
            call = self.client.chat(config, to_provider_history(history), prompt)

        start_time = time.time()
        try:
            raw = await asyncio.wait_for(call, timeout=self.timeout)
        except asyncio.TimeoutError:
            error = AIProcessingError(
                f"AI request timed out after {self.timeout:g}s", details={"taskName": config.task_name}
            )
        except ServiceError as e:
            error = e
        except Exception as e:
            error = AIProcessingError("Failed to process text with AI", details={"error": str(e)})
        else:
            performance_logger.log_ai_call(
                config.task_name, config.model_name, time.time() - start_time, config_source=config.source
            )
            return raw

        performance_logger.log_ai_call(
            config.task_name, config.model_name, time.time() - start_time,
            config_source=config.source, error=error.message,
        )
        raise error

    async def run(
        self,
        task_name: str,
        build_prompt: Callable[[List[Dict[str, Any]]], str],
        *,
        history: Optional[List[Dict[str, Any]]] = None,
        base_task: Optional[str] = None,
        include_general: bool = False,
        repair: Optional[Callable[[Any], Any]] = None,
        on_parse_error: Optional[Callable[[str], Any]] = None,
    ) -> Tuple[Any, EffectiveConfig]:
        """
        Execute a task and return the parsed result with the config used.

        ``history`` switches to chat-session mode. Text-only tasks return the
        raw response string.

        Raises:
            ConfigError: if the task cannot be resolved or the API key is missing
            AIProcessingError: if the call fails or times out
            ResponseParseError: if a JSON task returns unparseable text
        """
        config = await self.resolver.resolve(task_name, base_task=base_task)
        knowledge = await self.knowledge.knowledge_for_prompt(task_name, include_general=include_general)
        logger.debug(
            f"Running task '{task_name}' with {config.source} config "
            f"({config.model_name}, {len(knowledge)} knowledge entries)"
        )

        raw = await self._call(config, build_prompt(knowledge), history)
        if not config.expects_json:
            return raw, config

        try:
            parsed = parse_json_response(raw)
        except ResponseParseError:
            if on_parse_error is None:
                logger.error(f"Unparseable response for task '{task_name}'")
                raise
            parsed = on_parse_error(raw)

        if repair is not None:
            parsed = repair(parsed)
        return parsed, config

    async def _record(
        self,
        actor: Optional[RequestActor],
        action: ActivityAction,
        entity_type: EntityType,
        details: Dict[str, Any],
        entity_id: Optional[int] = None,
    ) -> None:
        if self.activity is not None:
            await self.activity.record_outcome(actor, action, entity_type, entity_id, details)

    async def _logged(
        self,
        actor: Optional[RequestActor],
        action: ActivityAction,
        entity_type: EntityType,
        base_details: Dict[str, Any],
        work,
        summarize: Callable[[Any], Dict[str, Any]],
    ) -> Any:
        try:
            result = await work
        except Exception as e:
            message = e.message if isinstance(e, ServiceError) else str(e)
            await self._record(actor, action, entity_type, {**base_details, "error": message, "success": False})
            raise
        await self._record(actor, action, entity_type, {**base_details, **summarize(result), "success": True})
        return result

    async def extract_cv(self, text: str, actor: Optional[RequestActor] = None) -> Dict[str, Any]:
        """Structured CV data from raw text, with the professional headline filled in."""

        async def work():
            parsed, _ = await self.run(
                EXTRACT_CV,
                lambda knowledge: prompts.cv_extraction_prompt(text, knowledge),
                repair=repair_professional_headline,
            )
            return parsed

        def summarize(data):
            personal_info = data.get("personalInfo") or {}
            return {
                "extractedData": {
                    "name": _name(personal_info),
                    "professionalHeadline": personal_info.get("professionalHeadline"),
                    "experienceCount": _count(data, "experience"),
                    "educationCount": _count(data, "education"),
                    "skillsCount": _count(data, "skills"),
                }
            }

        return await self._logged(
            actor, ActivityAction.EXTRACT_CV_FROM_TEXT, EntityType.CV,
            {"textLength": len(text)}, work(), summarize,
        )

    async def extract_job_description(self, text: str, actor: Optional[RequestActor] = None) -> Dict[str, Any]:
        """Structured job description from raw text, deadline normalised to UTC."""

        async def work():
            parsed, _ = await self.run(
                EXTRACT_JOB_DESCRIPTION,
                lambda knowledge: prompts.job_description_prompt(text, knowledge),
                repair=repair_job_description,
            )
            return parsed

        def summarize(data):
            return {
                "extractedData": {
                    "position": data.get("position"),
                    "companyName": data.get("companyName"),
                    "requirementsCount": _count(data, "requirements"),
                    "keywordsCount": _count(data, "keywords"),
                }
            }

        return await self._logged(
            actor, ActivityAction.EXTRACT_JOB_DESCRIPTION_FROM_TEXT, EntityType.JOB_DESCRIPTION,
            {"textLength": len(text)}, work(), summarize,
        )

    async def preprocess_cv(self, text: str, actor: Optional[RequestActor] = None) -> Dict[str, str]:
        """Clean key-value text reconstructed from scrambled CV content."""

        async def work():
            preprocessed, _ = await self.run(PREPROCESS_CV, lambda knowledge: text)
            if not isinstance(preprocessed, str):
                preprocessed = json.dumps(preprocessed, ensure_ascii=False)
            return {"originalText": text, "preprocessedText": preprocessed.strip()}

        def summarize(result):
            return {
                "preprocessedLength": len(result["preprocessedText"]),
                "preview": truncate(result["preprocessedText"]),
            }

        return await self._logged(
            actor, ActivityAction.PREPROCESS_CV_TEXT, EntityType.CV,
            {"textLength": len(text)}, work(), summarize,
        )

    async def match_resume(
        self,
        cv: Dict[str, Any],
        job_description: Dict[str, Any],
        actor: Optional[RequestActor] = None,
        log_details: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Match a CV against a job description.

        Only failures are logged here; the caller logs success once the
        resume row exists.
        """
        try:
            parsed, _ = await self.run(
                MATCH_RESUME,
                lambda knowledge: prompts.resume_match_prompt(cv, job_description, knowledge),
            )
        except Exception as e:
            message = e.message if isinstance(e, ServiceError) else str(e)
            await self._record(
                actor, ActivityAction.EXTRACT_RESUME_FROM_CV_JD, EntityType.RESUME,
                {**(log_details or {}), "error": message, "success": False},
            )
            raise
        return parsed

    async def resume_tips(
        self,
        cv: Dict[str, Any],
        job_description: Dict[str, Any],
        actor: Optional[RequestActor] = None,
        log_details: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Section-by-section tips for tailoring a CV to a job description."""

        async def work():
            parsed, _ = await self.run(
                EXTRACT_RESUME_TIPS,
                lambda knowledge: prompts.resume_tips_prompt(cv, job_description, knowledge),
            )
            return parsed

        def summarize(data):
            return {"tipCategories": sorted(data) if isinstance(data, dict) else []}

        return await self._logged(
            actor, ActivityAction.EXTRACT_RESUME_TIPS, EntityType.RESUME,
            log_details or {}, work(), summarize,
        )

    async def chat(
        self,
        user_message: str,
        task_name: str,
        history: Optional[List[Dict[str, Any]]] = None,
        current_data: Optional[Dict[str, Any]] = None,
        actor: Optional[RequestActor] = None,
    ) -> Dict[str, Any]:
        """
        Answer one chat turn for ``task_name``, replaying ``history``.

        Any active stored config for the task is overlaid on the chatbot
        defaults. Unparseable replies become the output message.
        """

        async def work():
            output, _ = await self.run(
                task_name,
                lambda knowledge: prompts.chatbot_prompt(user_message, task_name, current_data, knowledge),
                history=history or [],
                base_task=CHATBOT,
                include_general=True,
                on_parse_error=lambda raw: {"outputMessage": raw, "currentTask": task_name},
            )
            if not isinstance(output, dict):
                output = {"outputMessage": str(output)}
            output.setdefault("currentTask", task_name)
            return output

        def summarize(output):
            return {"response": truncate(output.get("outputMessage"))}

        return await self._logged(
            actor, ActivityAction.CHATBOT_MESSAGE, EntityType.OTHER,
            {"taskName": task_name, "message": truncate(user_message)}, work(), summarize,
        )
