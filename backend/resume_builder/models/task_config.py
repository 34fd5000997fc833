"""
Stored generation configuration for one AI task.

Several configs may share a ``task_name`` (versions of the same task), but at
most one of them is active. The partial unique index makes the database reject
a second active row regardless of which process writes it.
"""

import enum

from sqlalchemy import JSON, Boolean, Column, Enum, Index, Integer, String, Text, text

from resume_builder.models.base import Base, TimestampMixin


class TaskConfigType(enum.Enum):
    CHATBOT = "CHATBOT"
    TOOL = "TOOL"


HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)

BLOCK_THRESHOLDS = (
    "BLOCK_NONE",
    "BLOCK_ONLY_HIGH",
    "BLOCK_LOW_AND_ABOVE",
    "BLOCK_MEDIUM_AND_ABOVE",
)


class TaskConfig(TimestampMixin, Base):
    """
    Administrator-managed override of a task's default generation settings.
    """
    __tablename__ = "task_configs"
    __table_args__ = (
        Index(
            "uq_task_configs_active_task_name",
            "task_name",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    task_name = Column(String(100), nullable=False, index=True)
    model_name = Column(String(100), nullable=False, default="gemini-1.5-flash")
    system_instruction = Column(Text, nullable=True)

    # {temperature, topP, topK, maxOutputTokens, stopSequences, responseSchema}
    generation_config = Column(JSON, nullable=False, default=dict)
    # [{category, threshold}, ...]
    safety_settings = Column(JSON, nullable=False, default=list)

    type = Column(Enum(TaskConfigType), default=TaskConfigType.TOOL, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<TaskConfig(id={self.id}, task_name='{self.task_name}', active={self.is_active})>"
