"""
Job description model, holding the fields of the job-description extraction schema.
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text

from resume_builder.models.base import Base, TimestampMixin

REMOTE_STATUSES = ("On-site", "Remote", "Hybrid")


class JobDescription(TimestampMixin, Base):
    """
    A job posting saved by a user.
    """
    __tablename__ = "job_descriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    position = Column(String(255), nullable=False)
    company_name = Column(String(255), nullable=True)
    department = Column(String(255), nullable=True)
    location = Column(JSON, nullable=False, default=list)
    remote_status = Column(String(20), default="On-site", nullable=True)
    job_level = Column(String(50), nullable=True)
    employment_type = Column(String(50), nullable=True)
    experience_required = Column(JSON, nullable=False, default=dict)  # {min, max, description}
    summary = Column(Text, nullable=True)
    requirements = Column(JSON, nullable=False, default=list)
    responsibilities = Column(JSON, nullable=False, default=list)
    benefits = Column(JSON, nullable=False, default=list)
    salary = Column(JSON, nullable=False, default=dict)  # {min, max, currency, period}
    keywords = Column(JSON, nullable=False, default=list)
    application_deadline = Column(String(40), nullable=True)
    contact_info = Column(JSON, nullable=False, default=dict)

    def __repr__(self):
        return f"<JobDescription(id={self.id}, position='{self.position}', company='{self.company_name}')>"

    def to_prompt_dict(self):
        return {
            "position": self.position,
            "companyName": self.company_name,
            "department": self.department,
            "location": self.location,
            "remoteStatus": self.remote_status,
            "jobLevel": self.job_level,
            "employmentType": self.employment_type,
            "experienceRequired": self.experience_required,
            "summary": self.summary,
            "requirements": self.requirements,
            "responsibilities": self.responsibilities,
            "benefits": self.benefits,
            "salary": self.salary,
            "keywords": self.keywords,
            "applicationDeadline": self.application_deadline,
        }
