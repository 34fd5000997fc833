"""
Knowledge entries injected into prompts for a task.
"""

import enum

from sqlalchemy import JSON, Boolean, Column, Enum, ForeignKey, Integer, String, Text

from resume_builder.core.exceptions import ValidationError
from resume_builder.models.base import Base, TimestampMixin

GENERAL_TASK = "GENERAL"


class KnowledgeType(enum.Enum):
    GENERAL = "GENERAL"
    SPECIFIC = "SPECIFIC"


def check_knowledge_scope(knowledge_type, task_name) -> None:
    """
    Enforce that GENERAL knowledge uses the GENERAL task name and only it.

    Raises:
        ValidationError: if type and task name disagree
    """
    if isinstance(knowledge_type, str):
        knowledge_type = KnowledgeType(knowledge_type)
    if knowledge_type is KnowledgeType.GENERAL and task_name != GENERAL_TASK:
        raise ValidationError("General knowledge must have taskName GENERAL")
    if knowledge_type is KnowledgeType.SPECIFIC and task_name == GENERAL_TASK:
        raise ValidationError("Specific knowledge cannot have taskName GENERAL")


class KnowledgeEntry(TimestampMixin, Base):
    """
    Reference text or Q&A pairs for one task name.
    """
    __tablename__ = "knowledge_entries"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    text_content = Column(Text, nullable=True)
    qa_content = Column(JSON, nullable=False, default=list)  # [{question, answer}]
    type = Column(Enum(KnowledgeType), default=KnowledgeType.SPECIFIC, nullable=False, index=True)
    task_name = Column(String(100), nullable=False, index=True)
    tags = Column(JSON, nullable=False, default=list)
    priority = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    # "metadata" is reserved on declarative classes
    extra_metadata = Column("metadata", JSON, nullable=False, default=dict)

    created_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    def to_prompt_dict(self):
        return {
            "title": self.title,
            "description": self.description,
            "textContent": self.text_content,
            "qaContent": self.qa_content,
            "type": self.type.value if self.type else None,
            "priority": self.priority,
        }

    def __repr__(self):
        return f"<KnowledgeEntry(id={self.id}, task_name='{self.task_name}', priority={self.priority})>"
