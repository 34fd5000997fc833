"""
Resume model. A resume is a CV tailored to one job description.
"""

import enum

from sqlalchemy import JSON, Boolean, Column, Enum, ForeignKey, Integer, String, Text

from resume_builder.models.base import Base, TimestampMixin


class ResumeStatus(enum.Enum):
    """Resume status enumeration."""
    DRAFT = "draft"
    COMPLETED = "completed"


TEMPLATE_NAMES = {
    "professionalBlue": "Professional Blue",
    "modernMinimal": "Modern Minimal",
    "creativeDesign": "Creative Design",
    "corporateClassic": "Corporate Classic",
    "default": "Default Template",
}

DEFAULT_TEMPLATE_ID = "professionalBlue"


def template_ref(template_id=None):
    """Build the ``{id, name}`` template reference stored on a resume."""
    if not template_id:
        template_id = DEFAULT_TEMPLATE_ID
    return {"id": template_id, "name": TEMPLATE_NAMES.get(template_id, "Default Template")}


class Resume(TimestampMixin, Base):
    """
    Tailored resume with AI-assessed matched sections.
    """
    __tablename__ = "resumes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    cv_id = Column(Integer, ForeignKey("cvs.id", ondelete="SET NULL"), nullable=True, index=True)
    job_description_id = Column(
        Integer, ForeignKey("job_descriptions.id", ondelete="SET NULL"), nullable=True, index=True
    )

    name = Column(String(255), nullable=False)
    template = Column(JSON, nullable=False, default=template_ref)
    personal_info = Column(JSON, nullable=False, default=dict)
    summary = Column(Text, nullable=True)
    role_apply = Column(String(255), nullable=True)
    education = Column(JSON, nullable=False, default=list)

    # Matched sections carry relevance scores and comments
    matched_experience = Column(JSON, nullable=False, default=list)
    matched_skills = Column(JSON, nullable=False, default=list)
    matched_projects = Column(JSON, nullable=False, default=list)
    matched_certifications = Column(JSON, nullable=False, default=list)
    matched_languages = Column(JSON, nullable=False, default=list)

    additional_info = Column(JSON, nullable=False, default=dict)
    custom_fields = Column(JSON, nullable=False, default=list)
    status = Column(Enum(ResumeStatus), default=ResumeStatus.DRAFT, nullable=False)
    is_default = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Resume(id={self.id}, name='{self.name}', status='{self.status}')>"
