"""
Owner-scoped access to user documents (CVs, job descriptions, resumes) and
assembly of a resume from a match result.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_builder.core.database import count_query_results, paginate_query
from resume_builder.core.exceptions import NotFoundError
from resume_builder.models.cv import CV
from resume_builder.models.job_description import JobDescription
from resume_builder.models.resume import Resume, ResumeStatus, template_ref

logger = logging.getLogger(__name__)


class DocumentService:
    """CRUD over one document model, restricted to the owning user."""

    def __init__(self, db: AsyncSession, model: Type, label: str):
        self.db = db
        self.model = model
        self.label = label

    async def get_document(self, document_id: int, user_id: int):
        """
        Raises:
            NotFoundError: if the document does not exist or belongs to someone else
        """
        result = await self.db.execute(
            select(self.model).where(self.model.id == document_id, self.model.user_id == user_id)
        )
        document = result.scalars().first()
        if document is None:
            raise NotFoundError(f"{self.label} not found", details={"id": document_id})
        return document

    async def list_user_documents(self, user_id: int, page: int = 1, page_size: int = 20) -> Tuple[List[Any], int]:
        """A user's documents, newest first."""
        query = select(self.model).where(self.model.user_id == user_id)
        total = await count_query_results(self.db, query)
        query = query.order_by(self.model.created_at.desc(), self.model.id.desc())
        result = await self.db.execute(paginate_query(query, page, page_size))
        return list(result.scalars().all()), total

    async def create_document(self, user_id: int, fields: Dict[str, Any]):
        document = self.model(user_id=user_id, **fields)
        self.db.add(document)
        await self.db.commit()
        await self.db.refresh(document)
        logger.info(f"Created {self.label} {document.id} for user {user_id}")
        return document

    async def update_document(self, document_id: int, user_id: int, changes: Dict[str, Any]):
        document = await self.get_document(document_id, user_id)
        for field, value in changes.items():
            setattr(document, field, value)
        await self.db.commit()
        await self.db.refresh(document)
        return document

    async def delete_document(self, document_id: int, user_id: int):
        document = await self.get_document(document_id, user_id)
        await self.db.delete(document)
        await self.db.commit()
        return document


def cv_documents(db: AsyncSession) -> DocumentService:
    return DocumentService(db, CV, "CV")


def job_description_documents(db: AsyncSession) -> DocumentService:
    return DocumentService(db, JobDescription, "Job description")


def resume_documents(db: AsyncSession) -> DocumentService:
    return DocumentService(db, Resume, "Resume")


def resume_from_match(
    user_id: int,
    cv: CV,
    job_description: JobDescription,
    matched: Dict[str, Any],
    template_id: Optional[str] = None,
) -> Resume:
    """Build an unsaved draft resume from a CV, a job description and the model's match."""
    return Resume(
        user_id=user_id,
        cv_id=cv.id,
        job_description_id=job_description.id,
        name=f"Resume for {cv.full_name} - {job_description.position}",
        template=template_ref(template_id),
        personal_info=cv.personal_info or {},
        summary=matched.get("matchedSummaryContent"),
        role_apply=job_description.position,
        education=matched.get("educationData") or [],
        matched_experience=matched.get("matchedExperience") or [],
        matched_skills=matched.get("matchedSkills") or [],
        matched_projects=matched.get("matchedProjects") or [],
        matched_certifications=matched.get("matchedCertifications") or [],
        matched_languages=matched.get("matchedLanguages") or [],
        additional_info=matched.get("additionalInfoData") or {},
        custom_fields=matched.get("customFieldsData") or [],
        status=ResumeStatus.DRAFT,
        is_default=False,
    )


def match_log_details(cv: CV, job_description: JobDescription) -> Dict[str, Any]:
    return {
        "cvId": cv.id,
        "cvName": cv.full_name,
        "jobDescriptionId": job_description.id,
        "jobTitle": job_description.position,
        "companyName": job_description.company_name,
    }
