"""Shared column helpers for all models."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime

from resume_builder.core.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Adds created/updated timestamps set on the Python side."""

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)


__all__ = ["Base", "TimestampMixin", "utcnow"]
