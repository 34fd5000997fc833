"""
Resume schemas, including the match and tips requests.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from resume_builder.models.resume import ResumeStatus
from resume_builder.schemas.common import CamelModel


class TemplateRef(CamelModel):
    id: str
    name: str


class ResumeUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    template: Optional[TemplateRef] = None
    personal_info: Optional[Dict[str, Any]] = None
    summary: Optional[str] = Field(None, max_length=2000)
    role_apply: Optional[str] = None
    education: Optional[List[Dict[str, Any]]] = None
    matched_experience: Optional[List[Dict[str, Any]]] = None
    matched_skills: Optional[List[Dict[str, Any]]] = None
    matched_projects: Optional[List[Dict[str, Any]]] = None
    matched_certifications: Optional[List[Dict[str, Any]]] = None
    matched_languages: Optional[List[Dict[str, Any]]] = None
    additional_info: Optional[Dict[str, Any]] = None
    custom_fields: Optional[List[Dict[str, Any]]] = None
    status: Optional[ResumeStatus] = None
    is_default: Optional[bool] = None


class ResumeResponse(CamelModel):
    id: int
    user_id: int
    cv_id: Optional[int] = None
    job_description_id: Optional[int] = None
    name: str
    template: TemplateRef
    personal_info: Dict[str, Any] = Field(default_factory=dict)
    summary: Optional[str] = None
    role_apply: Optional[str] = None
    education: List[Dict[str, Any]] = Field(default_factory=list)
    matched_experience: List[Dict[str, Any]] = Field(default_factory=list)
    matched_skills: List[Dict[str, Any]] = Field(default_factory=list)
    matched_projects: List[Dict[str, Any]] = Field(default_factory=list)
    matched_certifications: List[Dict[str, Any]] = Field(default_factory=list)
    matched_languages: List[Dict[str, Any]] = Field(default_factory=list)
    additional_info: Dict[str, Any] = Field(default_factory=dict)
    custom_fields: List[Dict[str, Any]] = Field(default_factory=list)
    status: ResumeStatus
    is_default: bool
    created_at: datetime
    updated_at: datetime


class ResumeMatchRequest(CamelModel):
    """Create a tailored resume from a CV and a job description."""

    cv_id: int = Field(..., description="ID of the source CV")
    job_description_id: int = Field(..., description="ID of the target job description")
    template_id: Optional[str] = Field(None, description="Template id, defaults to professionalBlue")


class ResumeTipsRequest(CamelModel):
    cv_id: int
    job_description_id: int
