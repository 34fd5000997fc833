"""
Job description schemas.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from resume_builder.models.job_description import REMOTE_STATUSES
from resume_builder.schemas.common import CamelModel


class JobDescriptionBase(CamelModel):
    company_name: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    location: List[str] = Field(default_factory=list)
    remote_status: Optional[str] = Field("On-site", description="On-site, Remote or Hybrid")
    job_level: Optional[str] = None
    employment_type: Optional[str] = None
    experience_required: Dict[str, Any] = Field(default_factory=dict)
    summary: Optional[str] = None
    requirements: List[str] = Field(default_factory=list)
    responsibilities: List[str] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)
    salary: Dict[str, Any] = Field(default_factory=dict)
    keywords: List[str] = Field(default_factory=list)
    application_deadline: Optional[str] = None
    contact_info: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("remote_status")
    @classmethod
    def validate_remote_status(cls, v):
        if v is not None and v not in REMOTE_STATUSES:
            raise ValueError(f"remoteStatus must be one of: {', '.join(REMOTE_STATUSES)}")
        return v

    @field_validator("location", mode="before")
    @classmethod
    def coerce_location(cls, v):
        if isinstance(v, str):
            return [v]
        return v


class JobDescriptionCreate(JobDescriptionBase):
    position: str = Field(..., min_length=1, max_length=255)


class JobDescriptionUpdate(CamelModel):
    position: Optional[str] = Field(None, min_length=1, max_length=255)
    company_name: Optional[str] = None
    department: Optional[str] = None
    location: Optional[List[str]] = None
    remote_status: Optional[str] = None
    job_level: Optional[str] = None
    employment_type: Optional[str] = None
    experience_required: Optional[Dict[str, Any]] = None
    summary: Optional[str] = None
    requirements: Optional[List[str]] = None
    responsibilities: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    salary: Optional[Dict[str, Any]] = None
    keywords: Optional[List[str]] = None
    application_deadline: Optional[str] = None
    contact_info: Optional[Dict[str, Any]] = None

    @field_validator("remote_status")
    @classmethod
    def validate_remote_status(cls, v):
        if v is not None and v not in REMOTE_STATUSES:
            raise ValueError(f"remoteStatus must be one of: {', '.join(REMOTE_STATUSES)}")
        return v


class JobDescriptionResponse(JobDescriptionBase):
    id: int
    user_id: int
    position: str
    created_at: datetime
    updated_at: datetime
