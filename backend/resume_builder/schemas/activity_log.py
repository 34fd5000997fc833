"""
Activity log schemas and statistics.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from resume_builder.models.activity_log import ActivityAction, EntityType
from resume_builder.schemas.common import CamelModel


class ActivityLogResponse(CamelModel):
    id: int
    user_id: Optional[int] = None
    action: ActivityAction
    entity_type: EntityType
    entity_id: Optional[int] = None
    details: Dict[str, Any] = Field(default_factory=dict)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    timestamp: datetime


class ActivityLogFilter(CamelModel):
    user_id: Optional[int] = None
    action: Optional[ActivityAction] = None
    entity_type: Optional[EntityType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=100)


class ActionCount(CamelModel):
    action: str
    count: int


class DailyActivity(CamelModel):
    date: str
    count: int


class ActivityStats(CamelModel):
    total: int
    by_action: List[ActionCount]
    daily: List[DailyActivity]
    last_activity: Optional[datetime] = None
