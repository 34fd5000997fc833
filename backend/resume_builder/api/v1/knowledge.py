from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.database import get_db
from resume_builder.core.security import get_current_admin
from resume_builder.models.knowledge import KnowledgeType
from resume_builder.models.user import User
from resume_builder.schemas.common import success
from resume_builder.schemas.knowledge import (
    KnowledgeCreate,
    KnowledgeResponse,
    KnowledgeUpdate,
    TaskDescription,
)
from resume_builder.services.knowledge_service import KnowledgeService

router = APIRouter()


def get_knowledge_service(db: AsyncSession = Depends(get_db)) -> KnowledgeService:
    return KnowledgeService(db)


def _out(entry) -> KnowledgeResponse:
    return KnowledgeResponse.model_validate(entry)


@router.get("")
async def list_knowledge(
    task_name: Optional[str] = Query(None, alias="taskName"),
    knowledge_type: Optional[KnowledgeType] = Query(None, alias="type"),
    tags: Optional[str] = Query(None, description="Comma-separated tags"),
    include_inactive: bool = Query(False, alias="includeInactive"),
    admin: User = Depends(get_current_admin),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    """
    List knowledge entries, highest priority then newest first.
    """
    tag_list: Optional[List[str]] = [t.strip() for t in tags.split(",") if t.strip()] if tags else None
    entries = await service.list_entries(task_name, knowledge_type, tag_list, include_inactive)
    return success([_out(e) for e in entries])


@router.get("/tasks")
async def list_task_descriptions(
    admin: User = Depends(get_current_admin),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    """
    Active task names with their titles and descriptions.
    """
    tasks = await service.task_descriptions()
    return success([TaskDescription.model_validate(t) for t in tasks])


@router.put("/task/{task_name}")
async def update_knowledge_by_task(
    task_name: str,
    entry_data: KnowledgeUpdate,
    admin: User = Depends(get_current_admin),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    entry = await service.update_by_task_name(task_name, entry_data, admin.id)
    return success(_out(entry), "Knowledge updated successfully")


@router.get("/{entry_id}")
async def get_knowledge(
    entry_id: int,
    admin: User = Depends(get_current_admin),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(_out(await service.get(entry_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_knowledge(
    entry_data: KnowledgeCreate,
    admin: User = Depends(get_current_admin),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    entry = await service.create(entry_data, admin.id)
    return success(_out(entry), "Knowledge created successfully")


@router.put("/{entry_id}")
async def update_knowledge(
    entry_id: int,
    entry_data: KnowledgeUpdate,
    admin: User = Depends(get_current_admin),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    entry = await service.update(entry_id, entry_data, admin.id)
    return success(_out(entry), "Knowledge updated successfully")


@router.delete("/{entry_id}")
async def delete_knowledge(
    entry_id: int,
    admin: User = Depends(get_current_admin),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    await service.delete(entry_id)
    return success(message="Knowledge deleted successfully")
