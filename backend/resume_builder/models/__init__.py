"""
SQLAlchemy models package for the Resume Builder API.

Models included:
- User: authentication and the admin role
- CV, JobDescription, Resume: the user's documents
- Template: resume layout metadata
- TaskConfig: stored AI task configurations
- KnowledgeEntry: prompt knowledge per task
- ActivityLog: audit trail of user actions
"""

from resume_builder.core.database import Base

# Import all models so they are registered on Base.metadata
from .user import User
from .cv import CV
from .job_description import JobDescription, REMOTE_STATUSES
from .resume import Resume, ResumeStatus, TEMPLATE_NAMES, template_ref
from .template import Template, TemplateStatus
from .task_config import TaskConfig, TaskConfigType, HARM_CATEGORIES, BLOCK_THRESHOLDS
from .knowledge import KnowledgeEntry, KnowledgeType, GENERAL_TASK, check_knowledge_scope
from .activity_log import ActivityLog, ActivityAction, EntityType

__all__ = [
    "Base",
    "User",
    "CV",
    "JobDescription",
    "REMOTE_STATUSES",
    "Resume",
    "ResumeStatus",
    "TEMPLATE_NAMES",
    "template_ref",
    "Template",
    "TemplateStatus",
    "TaskConfig",
    "TaskConfigType",
    "HARM_CATEGORIES",
    "BLOCK_THRESHOLDS",
    "KnowledgeEntry",
    "KnowledgeType",
    "GENERAL_TASK",
    "check_knowledge_scope",
    "ActivityLog",
    "ActivityAction",
    "EntityType",
]
