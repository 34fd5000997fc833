"""
CV schemas. Section contents follow the CV extraction schema and are kept as
free-form JSON.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from resume_builder.schemas.common import CamelModel


class CVBase(CamelModel):
    personal_info: Dict[str, Any] = Field(default_factory=dict)
    summary: Optional[str] = Field(None, max_length=2000)
    education: List[Dict[str, Any]] = Field(default_factory=list)
    experience: List[Dict[str, Any]] = Field(default_factory=list)
    skills: List[Any] = Field(default_factory=list)
    projects: List[Dict[str, Any]] = Field(default_factory=list)
    certifications: List[Dict[str, Any]] = Field(default_factory=list)
    languages: List[Dict[str, Any]] = Field(default_factory=list)
    additional_info: Dict[str, Any] = Field(default_factory=dict)
    custom_fields: List[Dict[str, Any]] = Field(default_factory=list)


class CVCreate(CVBase):
    name: str = Field(..., min_length=1, max_length=255, description="Name of the CV")


class CVUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    personal_info: Optional[Dict[str, Any]] = None
    summary: Optional[str] = Field(None, max_length=2000)
    education: Optional[List[Dict[str, Any]]] = None
    experience: Optional[List[Dict[str, Any]]] = None
    skills: Optional[List[Any]] = None
    projects: Optional[List[Dict[str, Any]]] = None
    certifications: Optional[List[Dict[str, Any]]] = None
    languages: Optional[List[Dict[str, Any]]] = None
    additional_info: Optional[Dict[str, Any]] = None
    custom_fields: Optional[List[Dict[str, Any]]] = None


class CVResponse(CVBase):
    id: int
    user_id: int
    name: str
    created_at: datetime
    updated_at: datetime
