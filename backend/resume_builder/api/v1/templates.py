from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.database import get_db
from resume_builder.core.exceptions import DuplicateError, NotFoundError
from resume_builder.core.security import get_current_admin, get_current_user
from resume_builder.models.template import Template, TemplateStatus
from resume_builder.models.user import User
from resume_builder.schemas.common import success
from resume_builder.schemas.template import TemplateCreate, TemplateResponse, TemplateUpdate

router = APIRouter()


async def _get_template(db: AsyncSession, template_id: int) -> Template:
    template = await db.get(Template, template_id)
    if template is None:
        raise NotFoundError("Template not found", details={"id": template_id})
    return template


async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: Optional[int] = None) -> None:
    query = select(Template.id).where(Template.name == name)
    if exclude_id is not None:
        query = query.where(Template.id != exclude_id)
    if (await db.execute(query)).first():
        raise DuplicateError(f"Template '{name}' already exists")


@router.get("")
async def list_templates(
    template_status: Optional[TemplateStatus] = Query(None, alias="status"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    List templates. Non-admin users only see active templates.
    """
    query = select(Template)
    if not current_user.is_admin:
        query = query.where(Template.status == TemplateStatus.ACTIVE)
    elif template_status is not None:
        query = query.where(Template.status == template_status)
    result = await db.execute(query.order_by(Template.usage_count.desc(), Template.name))
    return success([TemplateResponse.model_validate(t) for t in result.scalars().all()])


@router.get("/{template_id}")
async def get_template(
    template_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    template = await _get_template(db, template_id)
    if template.status is not TemplateStatus.ACTIVE and not current_user.is_admin:
        raise NotFoundError("Template not found", details={"id": template_id})
    return success(TemplateResponse.model_validate(template))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_template(
    template_data: TemplateCreate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_unique_name(db, template_data.name)
    template = Template(**template_data.model_dump())
    db.add(template)
    await db.commit()
    await db.refresh(template)
    return success(TemplateResponse.model_validate(template), "Template created successfully")


@router.put("/{template_id}")
async def update_template(
    template_id: int,
    template_data: TemplateUpdate,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    template = await _get_template(db, template_id)
    changes = template_data.model_dump(exclude_unset=True, exclude_none=True)
    if "name" in changes:
        await _ensure_unique_name(db, changes["name"], exclude_id=template_id)

    for field, value in changes.items():
        setattr(template, field, value)
    await db.commit()
    await db.refresh(template)
    return success(TemplateResponse.model_validate(template), "Template updated successfully")


@router.delete("/{template_id}")
async def delete_template(
    template_id: int,
    admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    template = await _get_template(db, template_id)
    await db.delete(template)
    await db.commit()
    return success(message="Template deleted successfully")
