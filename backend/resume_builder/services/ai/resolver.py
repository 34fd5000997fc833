"""
Resolution of a task name to the configuration used for an AI call.
"""

import copy
import logging
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.exceptions import ConfigError
from resume_builder.models.task_config import TaskConfig
from resume_builder.services.ai.defaults import (
    DEFAULT_SAFETY_SETTINGS,
    DEFAULT_SYSTEM_INSTRUCTION,
    GENERAL,
    DefaultConfig,
    DefaultConfigRegistry,
    EffectiveConfig,
    default_registry,
)

logger = logging.getLogger(__name__)


def merge_config(default: DefaultConfig, stored: TaskConfig, task_name: str) -> EffectiveConfig:
    """
    Overlay a stored configuration on a default one.

    Generation parameters present (and not None) in the stored config win, but
    the response schema and MIME type always come from the default.
    """
    generation_config: Dict[str, Any] = copy.deepcopy(dict(default.generation_config))
    for key, value in (stored.generation_config or {}).items():
        if value is not None:
            generation_config[key] = copy.deepcopy(value)

    schema = default.response_schema
    if schema is None:
        generation_config.pop("responseSchema", None)
    else:
        generation_config["responseSchema"] = schema
    generation_config["responseMimeType"] = default.response_mime_type

    safety_settings = stored.safety_settings or DEFAULT_SAFETY_SETTINGS

    return EffectiveConfig(
        task_name=task_name,
        model_name=stored.model_name or default.model_name,
        generation_config=generation_config,
        system_instruction=stored.system_instruction or DEFAULT_SYSTEM_INSTRUCTION,
        safety_settings=[dict(s) for s in safety_settings],
        source="stored",
        config_id=stored.id,
    )


class ConfigResolver:
    """
    Produce the effective configuration for a task.

    Read-only: it never writes to the store.
    """

    def __init__(self, db: AsyncSession, registry: DefaultConfigRegistry = default_registry):
        self.db = db
        self.registry = registry

    async def get_active_config(self, task_name: str) -> Optional[TaskConfig]:
        result = await self.db.execute(
            select(TaskConfig).where(
                TaskConfig.task_name == task_name,
                TaskConfig.is_active.is_(True),
            )
        )
        return result.scalars().first()

    async def resolve(self, task_name: str, base_task: Optional[str] = None) -> EffectiveConfig:
        """
        Resolve ``task_name`` to an :class:`EffectiveConfig`.

        Args:
            task_name: Task to resolve
            base_task: Registry entry to overlay the stored config on instead of
                the task's own; chat turns always use the chatbot schema this way

        Raises:
            ConfigError: if the task cannot be resolved
        """
        stored = await self.get_active_config(task_name)

        if base_task is not None:
            default = self.registry.get(base_task)
        elif self.registry.has(task_name):
            default = self.registry.get(task_name)
        elif stored is not None:
            default = self.registry.get(GENERAL)
        else:
            raise ConfigError(
                f"Unknown task '{task_name}' and no active stored configuration",
                details={"taskName": task_name},
            )

        if stored is None:
            logger.debug(f"No active config for '{task_name}', using default")
            return EffectiveConfig.from_default(default, task_name=task_name)

        logger.debug(f"Using stored config {stored.id} for '{task_name}'")
        return merge_config(default, stored, task_name)
