"""
Administrator CRUD over stored AI task configurations.

Activation is an explicit command: within one transaction the sibling rows
for the task name are locked, every other active sibling is switched off and
the target is switched on. The partial unique index on active task names
backs this up when several processes write concurrently.
"""

import logging
from typing import List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.exceptions import DuplicateError, NotFoundError
from resume_builder.models.task_config import TaskConfig
from resume_builder.schemas.task_config import TaskConfigCreate, TaskConfigUpdate

logger = logging.getLogger(__name__)


class TaskConfigService:
    """Store for :class:`TaskConfig` rows."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_configs(self, task_name: Optional[str] = None) -> List[TaskConfig]:
        """All configs, newest first, optionally for one task name."""
        query = select(TaskConfig)
        if task_name:
            query = query.where(TaskConfig.task_name == task_name)
        query = query.order_by(TaskConfig.created_at.desc(), TaskConfig.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(self, config_id: int) -> TaskConfig:
        config = await self.db.get(TaskConfig, config_id)
        if config is None:
            raise NotFoundError("AI config not found", details={"id": config_id})
        return config

    async def get_by_task(self, key: str) -> TaskConfig:
        """
        Find a config whose name or task name equals ``key``, ignoring case.

        The active config wins when several rows match.
        """
        lowered = key.lower()
        result = await self.db.execute(
            select(TaskConfig)
            .where(or_(func.lower(TaskConfig.name) == lowered, func.lower(TaskConfig.task_name) == lowered))
            .order_by(TaskConfig.is_active.desc(), TaskConfig.created_at.desc(), TaskConfig.id.desc())
        )
        config = result.scalars().first()
        if config is None:
            raise NotFoundError(f"AI config not found for task '{key}'", details={"taskName": key})
        return config

    async def _ensure_unique_name(self, name: str, exclude_id: Optional[int] = None) -> None:
        query = select(TaskConfig.id).where(TaskConfig.name == name)
        if exclude_id is not None:
            query = query.where(TaskConfig.id != exclude_id)
        if (await self.db.execute(query)).first() is not None:
            raise DuplicateError(f"AI config with name '{name}' already exists", details={"name": name})

    async def _flush(self, name: str) -> None:
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateError(
                f"AI config '{name}' conflicts with an existing config", details={"error": str(e.orig)}
            )

    async def _set_active(self, config: TaskConfig, is_active: bool) -> None:
        # Written as a statement: the loaded flag may be stale if another session changed it
        await self.db.execute(
            update(TaskConfig)
            .where(TaskConfig.id == config.id)
            .values(is_active=is_active)
            .execution_options(synchronize_session="fetch")
        )

    async def _activate_in_transaction(self, config: TaskConfig) -> None:
        name = config.name
        # Lock the siblings; SQLite has no row locks and ignores FOR UPDATE
        await self.db.execute(
            select(TaskConfig.id).where(TaskConfig.task_name == config.task_name).with_for_update()
        )
        await self.db.execute(
            update(TaskConfig)
            .where(
                TaskConfig.task_name == config.task_name,
                TaskConfig.id != config.id,
                TaskConfig.is_active.is_(True),
            )
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        try:
            await self._set_active(config, True)
        except IntegrityError as e:
            await self.db.rollback()
            raise DuplicateError(
                f"AI config '{name}' conflicts with an existing config", details={"error": str(e.orig)}
            )

    async def create(self, data: TaskConfigCreate) -> TaskConfig:
        """
        Create a config; when ``is_active`` is set it is activated in the same transaction.

        Raises:
            DuplicateError: if the name is already used
        """
        await self._ensure_unique_name(data.name)

        config = TaskConfig(
            name=data.name,
            description=data.description,
            task_name=data.task_name,
            model_name=data.model_name,
            system_instruction=data.system_instruction,
            generation_config=data.generation_config.to_stored(),
            safety_settings=[s.model_dump() for s in data.safety_settings],
            type=data.type,
            is_active=False,
        )
        self.db.add(config)
        await self._flush(data.name)

        if data.is_active:
            await self._activate_in_transaction(config)

        await self.db.commit()
        await self.db.refresh(config)
        logger.info(f"Created AI config {config.id} for task '{config.task_name}'")
        return config

    async def update(self, config_id: int, data: TaskConfigUpdate) -> TaskConfig:
        """
        Apply a partial update.

        Raises:
            NotFoundError: if the config does not exist
            DuplicateError: if the new name is already used
        """
        config = await self.get(config_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("name") and changes["name"] != config.name:
            await self._ensure_unique_name(changes["name"], exclude_id=config.id)

        want_active = changes.pop("is_active", None)
        if want_active is None:
            want_active = config.is_active
        else:
            want_active = bool(want_active)

        # Leave the active slot while the task name may change
        if config.is_active:
            config.is_active = False
            await self._flush(config.name)

        if "generation_config" in changes:
            changes["generation_config"] = (
                data.generation_config.to_stored() if data.generation_config else {}
            )
        if "safety_settings" in changes:
            changes["safety_settings"] = [s.model_dump() for s in data.safety_settings or []]

        for field, value in changes.items():
            if value is None and field in ("name", "task_name", "model_name", "type"):
                continue
            setattr(config, field, value)
        await self._flush(config.name)

        if want_active:
            await self._activate_in_transaction(config)

        await self.db.commit()
        await self.db.refresh(config)
        logger.info(f"Updated AI config {config.id}")
        return config

    async def delete(self, config_id: int) -> None:
        config = await self.get(config_id)
        await self.db.delete(config)
        await self.db.commit()
        logger.info(f"Deleted AI config {config_id}")

    async def activate(self, config_id: int) -> TaskConfig:
        """Make this config the only active one for its task name."""
        config = await self.get(config_id)
        await self._activate_in_transaction(config)
        await self.db.commit()
        await self.db.refresh(config)
        logger.info(f"Activated AI config {config.id} for task '{config.task_name}'")
        return config

    async def deactivate(self, config_id: int) -> TaskConfig:
        config = await self.get(config_id)
        await self._set_active(config, False)
        await self.db.commit()
        await self.db.refresh(config)
        logger.info(f"Deactivated AI config {config.id}")
        return config
