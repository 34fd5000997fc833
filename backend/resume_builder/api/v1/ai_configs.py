from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.database import get_db
from resume_builder.core.security import get_current_admin
from resume_builder.models.user import User
from resume_builder.schemas.common import success
from resume_builder.schemas.task_config import TaskConfigCreate, TaskConfigResponse, TaskConfigUpdate
from resume_builder.services.task_config_service import TaskConfigService

router = APIRouter()


def get_task_config_service(db: AsyncSession = Depends(get_db)) -> TaskConfigService:
    return TaskConfigService(db)


def _out(config) -> TaskConfigResponse:
    return TaskConfigResponse.model_validate(config)


@router.get("")
async def list_configs(
    task_name: Optional[str] = Query(None, alias="taskName"),
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    """
    List AI configs, newest first.
    """
    configs = await service.list_configs(task_name)
    return success([_out(c) for c in configs])


@router.get("/task/{task_name}")
async def get_config_by_task(
    task_name: str,
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    """
    Find a config by name or task name, ignoring case.
    """
    return success(_out(await service.get_by_task(task_name)))


@router.get("/{config_id}")
async def get_config(
    config_id: int,
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    return success(_out(await service.get(config_id)))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_config(
    config_data: TaskConfigCreate,
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    config = await service.create(config_data)
    return success(_out(config), "AI config created successfully")


@router.put("/{config_id}")
async def update_config(
    config_id: int,
    config_data: TaskConfigUpdate,
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    config = await service.update(config_id, config_data)
    return success(_out(config), "AI config updated successfully")


@router.delete("/{config_id}")
async def delete_config(
    config_id: int,
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    await service.delete(config_id)
    return success(message="AI config deleted successfully")


@router.post("/{config_id}/activate")
async def activate_config(
    config_id: int,
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    """
    Make this config the only active one for its task name.
    """
    config = await service.activate(config_id)
    return success(_out(config), "AI config activated successfully")


@router.post("/{config_id}/deactivate")
async def deactivate_config(
    config_id: int,
    admin: User = Depends(get_current_admin),
    service: TaskConfigService = Depends(get_task_config_service),
):
    config = await service.deactivate(config_id)
    return success(_out(config), "AI config deactivated successfully")
