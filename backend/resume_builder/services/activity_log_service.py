"""
Activity logging service.

Log rows are written through their own session so that recording an action
never commits or rolls back the caller's unit of work. ``record_outcome`` is
the best-effort variant used after the primary result or error is known: it
logs and discards its own failures.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_builder.core.database import count_query_results, paginate_query
from resume_builder.models.activity_log import ActivityAction, ActivityLog, EntityType
from resume_builder.models.base import utcnow
from resume_builder.schemas.activity_log import (
    ActionCount,
    ActivityLogFilter,
    ActivityStats,
    DailyActivity,
)

logger = logging.getLogger(__name__)


@dataclass
class RequestActor:
    """Who performed an action, and from where."""

    user_id: Optional[int]
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class ActivityLogService:
    """Records and queries activity logs."""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def record(
        self,
        actor: RequestActor,
        action: Union[ActivityAction, str],
        entity_type: Union[EntityType, str] = EntityType.OTHER,
        entity_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> ActivityLog:
        """
        Insert one log row and commit it.

        Raises:
            SQLAlchemyError: if the write fails
        """
        entry = ActivityLog(
            user_id=actor.user_id,
            action=ActivityAction(action),
            entity_type=EntityType(entity_type),
            entity_id=entity_id,
            details=details or {},
            ip_address=actor.ip_address,
            user_agent=(actor.user_agent or "")[:500] or None,
        )
        async with self.session_factory() as session:
            session.add(entry)
            await session.commit()
        return entry

    async def record_outcome(
        self,
        actor: Optional[RequestActor],
        action: Union[ActivityAction, str],
        entity_type: Union[EntityType, str] = EntityType.OTHER,
        entity_id: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[ActivityLog]:
        """Best-effort ``record``; never raises."""
        if actor is None:
            return None
        try:
            return await self.record(actor, action, entity_type, entity_id, details)
        except Exception as e:
            logger.warning(f"Failed to record activity '{action}': {e}")
            return None

    @staticmethod
    def _filtered(query, filters: ActivityLogFilter):
        if filters.user_id is not None:
            query = query.where(ActivityLog.user_id == filters.user_id)
        if filters.action is not None:
            query = query.where(ActivityLog.action == filters.action)
        if filters.entity_type is not None:
            query = query.where(ActivityLog.entity_type == filters.entity_type)
        if filters.start_date is not None:
            query = query.where(ActivityLog.timestamp >= filters.start_date)
        if filters.end_date is not None:
            query = query.where(ActivityLog.timestamp <= filters.end_date)
        return query

    async def list_logs(self, db: AsyncSession, filters: ActivityLogFilter) -> Tuple[List[ActivityLog], int]:
        """Return one page of logs, newest first, and the total match count."""
        query = self._filtered(select(ActivityLog), filters)
        total = await count_query_results(db, query)

        query = query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        result = await db.execute(paginate_query(query, filters.page, filters.page_size))
        return list(result.scalars().all()), total

    async def stats(
        self,
        db: AsyncSession,
        user_id: Optional[int] = None,
        days: int = 30,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> ActivityStats:
        """
        Per-action counts and daily activity, for one user or system-wide.

        Every figure covers the same window: ``start_date``..``end_date`` when
        given, otherwise the last ``days`` days.
        """
        filters = ActivityLogFilter(
            user_id=user_id,
            start_date=start_date or utcnow() - timedelta(days=days),
            end_date=end_date,
        )

        by_action_query = self._filtered(
            select(ActivityLog.action, func.count(ActivityLog.id)).group_by(ActivityLog.action),
            filters,
        )
        rows = (await db.execute(by_action_query)).all()
        by_action = sorted(
            (ActionCount(action=action.value, count=count) for action, count in rows),
            key=lambda item: (-item.count, item.action),
        )

        day = func.date(ActivityLog.timestamp).label("day")
        daily_query = self._filtered(
            select(day, func.count(ActivityLog.id)).group_by(day).order_by(day.desc()),
            filters,
        )
        daily = [
            # SQLite returns the day as text, PostgreSQL as a date
            DailyActivity(date=value if isinstance(value, str) else value.isoformat(), count=count)
            for value, count in (await db.execute(daily_query)).all()
        ]

        last_query = self._filtered(select(func.max(ActivityLog.timestamp)), filters)
        last_activity = (await db.execute(last_query)).scalar_one_or_none()

        return ActivityStats(
            total=sum(item.count for item in by_action),
            by_action=by_action,
            daily=daily,
            last_activity=last_activity,
        )
