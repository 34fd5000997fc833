"""
CV model. A CV is the user's master document that resumes are tailored from.
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text

from resume_builder.models.base import Base, TimestampMixin


class CV(TimestampMixin, Base):
    """
    Structured CV whose sections follow the CV extraction schema.
    """
    __tablename__ = "cvs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)

    # Sections
    personal_info = Column(JSON, nullable=False, default=dict)
    summary = Column(Text, nullable=True)
    education = Column(JSON, nullable=False, default=list)
    experience = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    projects = Column(JSON, nullable=False, default=list)
    certifications = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)
    additional_info = Column(JSON, nullable=False, default=dict)
    custom_fields = Column(JSON, nullable=False, default=list)

    def __repr__(self):
        return f"<CV(id={self.id}, user_id={self.user_id}, name='{self.name}')>"

    @property
    def full_name(self) -> str:
        info = self.personal_info or {}
        return f"{info.get('firstName', '')} {info.get('lastName', '')}".strip()

    def to_prompt_dict(self):
        """Sections passed to the model when matching a CV to a job."""
        return {
            "personalInfo": self.personal_info,
            "summary": self.summary,
            "education": self.education,
            "experience": self.experience,
            "skills": self.skills,
            "projects": self.projects,
            "certifications": self.certifications,
            "languages": self.languages,
            "additionalInfo": self.additional_info,
            "customFields": self.custom_fields,
        }
