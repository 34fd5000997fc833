"""
Knowledge entry schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator

from resume_builder.core.exceptions import ValidationError as ScopeError
from resume_builder.models.knowledge import KnowledgeType, check_knowledge_scope
from resume_builder.schemas.common import CamelModel


class QAPair(CamelModel):
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)

    @field_validator("question", "answer")
    @classmethod
    def strip_text(cls, v):
        return v.strip()


_metadata_field = dict(
    validation_alias=AliasChoices("extra_metadata", "metadata"),
    serialization_alias="metadata",
)


class KnowledgeCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    text_content: Optional[str] = None
    qa_content: List[QAPair] = Field(default_factory=list)
    type: KnowledgeType = KnowledgeType.SPECIFIC
    task_name: str = Field(..., min_length=1, max_length=100)
    tags: List[str] = Field(default_factory=list)
    priority: int = Field(0, ge=0, description="Higher sorts first")
    is_active: bool = True
    extra_metadata: Dict[str, Any] = Field(default_factory=dict, **_metadata_field)

    @model_validator(mode="after")
    def check_scope(self):
        try:
            check_knowledge_scope(self.type, self.task_name)
        except ScopeError as e:
            raise ValueError(e.message)
        return self


class KnowledgeUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    text_content: Optional[str] = None
    qa_content: Optional[List[QAPair]] = None
    type: Optional[KnowledgeType] = None
    task_name: Optional[str] = Field(None, min_length=1, max_length=100)
    tags: Optional[List[str]] = None
    priority: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    extra_metadata: Optional[Dict[str, Any]] = Field(None, **_metadata_field)


class KnowledgeResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    text_content: Optional[str] = None
    qa_content: List[Dict[str, Any]] = Field(default_factory=list)
    type: KnowledgeType
    task_name: str
    tags: List[str] = Field(default_factory=list)
    priority: int
    is_active: bool
    extra_metadata: Dict[str, Any] = Field(default_factory=dict, **_metadata_field)
    created_by: Optional[int] = None
    updated_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class TaskDescription(CamelModel):
    task_name: str
    title: Optional[str] = None
    description: Optional[str] = None
