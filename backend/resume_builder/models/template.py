"""
Template model describing the visual layout a resume is rendered with.
"""

import enum

from sqlalchemy import JSON, Column, Enum, Integer, String, Text

from resume_builder.models.base import Base, TimestampMixin


class TemplateStatus(enum.Enum):
    """Template status enumeration."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    DRAFT = "draft"


class Template(TimestampMixin, Base):
    __tablename__ = "templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    thumbnail = Column(String(500), nullable=True)
    categories = Column(JSON, nullable=False, default=list)
    tags = Column(JSON, nullable=False, default=list)
    components = Column(JSON, nullable=False, default=dict)  # layout, styles, sections
    status = Column(Enum(TemplateStatus), default=TemplateStatus.DRAFT, nullable=False)

    # Analytics
    usage_count = Column(Integer, default=0, nullable=False)
    download_count = Column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Template(id={self.id}, name='{self.name}', status='{self.status}')>"
