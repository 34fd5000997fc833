"""
Routing of a free-text chat message to one of the active task names.

Classification is best effort: every failure collapses to the GENERAL
fallback so a chat turn always gets a task.
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.logging import performance_logger
from resume_builder.models.task_config import TaskConfig
from resume_builder.services.ai import prompts
from resume_builder.services.ai.client import AIClient
from resume_builder.services.ai.defaults import GENERAL, INTENT_DETECTION
from resume_builder.services.ai.executor import parse_json_response, without_leading_assistant
from resume_builder.services.ai.resolver import ConfigResolver
from resume_builder.services.knowledge_service import KnowledgeService

logger = logging.getLogger(__name__)

FALLBACK_RESULT = {"intent": "general_query", "confidence": 0.5, "taskName": GENERAL}
UNKNOWN_TASK_CONFIDENCE = 0.3


def _clamp(value: Any) -> float:
    return min(1.0, max(0.0, float(value)))


class IntentRouter:
    """Classify chat messages with a low-temperature AI call."""

    def __init__(
        self,
        db: AsyncSession,
        client: AIClient,
        resolver: Optional[ConfigResolver] = None,
        history_turns: int = 10,
        timeout: float = 45.0,
    ):
        self.db = db
        self.client = client
        self.resolver = resolver or ConfigResolver(db)
        self.knowledge = KnowledgeService(db)
        self.history_turns = history_turns
        self.timeout = timeout

    async def catalogue(self) -> List[Dict[str, Optional[str]]]:
        """Active task names with descriptions, from knowledge and stored configs."""
        tasks = {item["taskName"]: item for item in await self.knowledge.task_descriptions()}

        result = await self.db.execute(select(TaskConfig).where(TaskConfig.is_active.is_(True)))
        for config in result.scalars().all():
            entry = tasks.setdefault(
                config.task_name,
                {"taskName": config.task_name, "title": config.name, "description": None},
            )
            if not entry.get("description"):
                entry["description"] = config.description
        return [tasks[name] for name in sorted(tasks)]

    async def active_task_names(self) -> Set[str]:
        names = await self.knowledge.active_task_names()
        result = await self.db.execute(
            select(TaskConfig.task_name).where(TaskConfig.is_active.is_(True)).distinct()
        )
        return names | set(result.scalars().all())

    def recent_history(self, history: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        recent = history[-self.history_turns:] if self.history_turns > 0 else []
        return without_leading_assistant(recent)

    async def classify(self, user_message: str, history: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Return ``{intent, confidence, taskName}`` for the message.

        Never raises; failures return :data:`FALLBACK_RESULT`.
        """
        start_time = time.time()
        config = None
        try:
            catalogue = await self.catalogue()
            config = await self.resolver.resolve(INTENT_DETECTION)
            prompt = prompts.intent_prompt(user_message, self.recent_history(history or []), catalogue)

            raw = await asyncio.wait_for(self.client.generate(config, prompt), timeout=self.timeout)
            parsed = parse_json_response(raw)

            intent = str(parsed.get("intent") or FALLBACK_RESULT["intent"])
            confidence = _clamp(parsed.get("confidence", 0))
            task_name = parsed.get("taskName")

            # Validate against the names active right now, not the prompt catalogue
            known = task_name == GENERAL or (
                isinstance(task_name, str) and task_name in await self.active_task_names()
            )
            if not known:
                logger.info(f"Intent returned unknown task '{task_name}', routing to {GENERAL}")
                result = {"intent": intent, "confidence": UNKNOWN_TASK_CONFIDENCE, "taskName": GENERAL}
            else:
                result = {"intent": intent, "confidence": confidence, "taskName": task_name}

            performance_logger.log_ai_call(
                INTENT_DETECTION, config.model_name, time.time() - start_time, config_source=config.source
            )
            return result

        except Exception as e:
            logger.warning(f"Intent detection failed, using fallback: {e}")
            performance_logger.log_ai_call(
                INTENT_DETECTION,
                config.model_name if config else "unknown",
                time.time() - start_time,
                config_source=config.source if config else None,
                error=str(e),
            )
            return dict(FALLBACK_RESULT)
