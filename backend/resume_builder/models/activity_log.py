"""
Activity log of user and admin actions.
"""

import enum

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Integer, String

from resume_builder.models.base import Base, utcnow


class ActivityAction(enum.Enum):
    """Closed vocabulary of logged actions."""
    REGISTER = "register"
    LOGIN = "login"
    UPDATE_PROFILE = "update_profile"
    CHANGE_PASSWORD = "change_password"
    CREATE_CV = "create_cv"
    UPDATE_CV = "update_cv"
    DELETE_CV = "delete_cv"
    CREATE_RESUME = "create_resume"
    UPDATE_RESUME = "update_resume"
    DELETE_RESUME = "delete_resume"
    CREATE_JOB_DESCRIPTION = "create_job_description"
    UPDATE_JOB_DESCRIPTION = "update_job_description"
    DELETE_JOB_DESCRIPTION = "delete_job_description"
    EXTRACT_CV_FROM_TEXT = "extract_cv_from_text"
    EXTRACT_JOB_DESCRIPTION_FROM_TEXT = "extract_job_description_from_text"
    PREPROCESS_CV_TEXT = "preprocess_cv_text"
    EXTRACT_RESUME_FROM_CV_JD = "extract_resume_from_cv_jd"
    EXTRACT_RESUME_TIPS = "extract_resume_tips"
    CHATBOT_MESSAGE = "chatbot_message"
    DELETE_USER = "delete_user"


class EntityType(enum.Enum):
    CV = "CV"
    RESUME = "Resume"
    JOB_DESCRIPTION = "JobDescription"
    USER = "User"
    TASK_CONFIG = "TaskConfig"
    KNOWLEDGE = "Knowledge"
    OTHER = "other"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class ActivityLog(Base):
    """
    One recorded action. Rows are append-only.
    """
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    action = Column(Enum(ActivityAction, values_callable=_values), nullable=False, index=True)
    entity_type = Column(Enum(EntityType, values_callable=_values), default=EntityType.OTHER, nullable=False)
    entity_id = Column(Integer, nullable=True)
    details = Column(JSON, nullable=False, default=dict)
    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String(500), nullable=True)
    timestamp = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self):
        return f"<ActivityLog(id={self.id}, user_id={self.user_id}, action='{self.action.value}')>"
