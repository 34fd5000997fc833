"""
Knowledge entry CRUD and the lookups used when building prompts.
"""

import logging
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.exceptions import NotFoundError
from resume_builder.models.knowledge import (
    GENERAL_TASK,
    KnowledgeEntry,
    KnowledgeType,
    check_knowledge_scope,
)
from resume_builder.schemas.knowledge import KnowledgeCreate, KnowledgeUpdate

logger = logging.getLogger(__name__)

# Fields an update addressed by task name may touch
_TASK_UPDATE_FIELDS = {
    "title", "description", "text_content", "qa_content", "tags",
    "priority", "is_active", "extra_metadata",
}


def _prompt_order(query):
    return query.order_by(
        KnowledgeEntry.priority.desc(),
        KnowledgeEntry.created_at.desc(),
        KnowledgeEntry.id.desc(),
    )


class KnowledgeService:
    """Administrator CRUD plus active-knowledge lookups."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_entries(
        self,
        task_name: Optional[str] = None,
        knowledge_type: Optional[KnowledgeType] = None,
        tags: Optional[List[str]] = None,
        include_inactive: bool = False,
    ) -> List[KnowledgeEntry]:
        query = select(KnowledgeEntry)
        if not include_inactive:
            query = query.where(KnowledgeEntry.is_active.is_(True))
        if task_name:
            query = query.where(KnowledgeEntry.task_name == task_name)
        if knowledge_type is not None:
            query = query.where(KnowledgeEntry.type == knowledge_type)

        entries = list((await self.db.execute(_prompt_order(query))).scalars().all())
        if tags:
            # JSON array membership, filtered in Python to stay dialect-neutral
            wanted = set(tags)
            entries = [e for e in entries if wanted.intersection(e.tags or [])]
        return entries

    async def get(self, entry_id: int) -> KnowledgeEntry:
        entry = await self.db.get(KnowledgeEntry, entry_id)
        if entry is None:
            raise NotFoundError("Knowledge entry not found", details={"id": entry_id})
        return entry

    async def create(self, data: KnowledgeCreate, user_id: Optional[int] = None) -> KnowledgeEntry:
        check_knowledge_scope(data.type, data.task_name)

        entry = KnowledgeEntry(
            title=data.title,
            description=data.description,
            text_content=data.text_content,
            qa_content=[qa.model_dump() for qa in data.qa_content],
            type=data.type,
            task_name=data.task_name,
            tags=data.tags,
            priority=data.priority,
            is_active=data.is_active,
            extra_metadata=data.extra_metadata,
            created_by=user_id,
            updated_by=user_id,
        )
        self.db.add(entry)
        await self.db.commit()
        await self.db.refresh(entry)
        logger.info(f"Created knowledge entry {entry.id} for task '{entry.task_name}'")
        return entry

    def _apply(self, entry: KnowledgeEntry, changes: Dict[str, Any], user_id: Optional[int]) -> None:
        # Validate the final type/task pair before touching the row
        check_knowledge_scope(
            changes.get("type") or entry.type,
            changes.get("task_name") or entry.task_name,
        )
        if changes.get("qa_content") is not None:
            changes["qa_content"] = [
                {"question": qa["question"], "answer": qa["answer"]} for qa in changes["qa_content"]
            ]
        for field, value in changes.items():
            if value is None and field in ("title", "type", "task_name", "priority", "is_active"):
                continue
            setattr(entry, field, value)
        entry.updated_by = user_id

    async def update(self, entry_id: int, data: KnowledgeUpdate, user_id: Optional[int] = None) -> KnowledgeEntry:
        """
        Raises:
            NotFoundError: if the entry does not exist
            ValidationError: if the resulting type and task name disagree
        """
        entry = await self.get(entry_id)
        self._apply(entry, data.model_dump(exclude_unset=True), user_id)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def update_by_task_name(
        self, task_name: str, data: KnowledgeUpdate, user_id: Optional[int] = None
    ) -> KnowledgeEntry:
        """Update the highest-priority entry for a task name; type and task name are left alone."""
        result = await self.db.execute(
            _prompt_order(select(KnowledgeEntry).where(KnowledgeEntry.task_name == task_name))
        )
        entry = result.scalars().first()
        if entry is None:
            raise NotFoundError(
                f"No knowledge found with taskName: {task_name}", details={"taskName": task_name}
            )

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if field in _TASK_UPDATE_FIELDS
        }
        self._apply(entry, changes, user_id)
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def delete(self, entry_id: int) -> None:
        entry = await self.get(entry_id)
        await self.db.delete(entry)
        await self.db.commit()
        logger.info(f"Deleted knowledge entry {entry_id}")

    async def find_by_task(self, task_name: str) -> List[KnowledgeEntry]:
        """Active entries for a task, highest priority then newest first."""
        result = await self.db.execute(
            _prompt_order(
                select(KnowledgeEntry).where(
                    KnowledgeEntry.task_name == task_name,
                    KnowledgeEntry.is_active.is_(True),
                )
            )
        )
        return list(result.scalars().all())

    async def find_general(self) -> List[KnowledgeEntry]:
        result = await self.db.execute(
            _prompt_order(
                select(KnowledgeEntry).where(
                    KnowledgeEntry.type == KnowledgeType.GENERAL,
                    KnowledgeEntry.is_active.is_(True),
                )
            )
        )
        return list(result.scalars().all())

    async def knowledge_for_prompt(self, task_name: str, include_general: bool = False) -> List[Dict[str, Any]]:
        """Prompt-ready knowledge for a task, optionally followed by GENERAL knowledge."""
        entries = await self.find_by_task(task_name)
        if include_general and task_name != GENERAL_TASK:
            entries += await self.find_general()
        return [entry.to_prompt_dict() for entry in entries]

    async def active_task_names(self) -> Set[str]:
        result = await self.db.execute(
            select(KnowledgeEntry.task_name).where(KnowledgeEntry.is_active.is_(True)).distinct()
        )
        return set(result.scalars().all())

    async def task_descriptions(self) -> List[Dict[str, Optional[str]]]:
        """
        One ``{taskName, title, description}`` per active task name.

        ``metadata.title`` / ``metadata.description`` of the top entry win over
        the entry's own title and description.
        """
        result = await self.db.execute(
            _prompt_order(select(KnowledgeEntry).where(KnowledgeEntry.is_active.is_(True)))
        )
        descriptions: Dict[str, Dict[str, Optional[str]]] = {}
        for entry in result.scalars().all():
            if entry.task_name in descriptions:
                continue
            metadata = entry.extra_metadata or {}
            descriptions[entry.task_name] = {
                "taskName": entry.task_name,
                "title": metadata.get("title") or entry.title,
                "description": metadata.get("description") or entry.description,
            }
        return [descriptions[name] for name in sorted(descriptions)]
