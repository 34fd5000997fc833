"""
Template schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from resume_builder.models.template import TemplateStatus
from resume_builder.schemas.common import CamelModel


class TemplateCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    thumbnail: Optional[str] = Field(None, max_length=500)
    categories: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    components: Dict[str, Any] = Field(default_factory=dict)
    status: TemplateStatus = TemplateStatus.DRAFT


class TemplateUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    categories: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    components: Optional[Dict[str, Any]] = None
    status: Optional[TemplateStatus] = None


class TemplateResponse(TemplateCreate):
    id: int
    usage_count: int = 0
    download_count: int = 0
    created_at: datetime
    updated_at: datetime
