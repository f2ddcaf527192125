"""Admin activity log: recording and filtered listing."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models.activity_log import ActivityLog
from ...schemas.activity_log import ActivityLogPage, ActivityLogResponse, Pagination

logger = logging.getLogger(__name__)

ENTITY_ASSESSMENT = "ASSESSMENT"


@dataclass(frozen=True)
class AdminContext:
    """Who is acting, and from where."""

    admin_email: str = "unknown"
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


def log_activity(
    db: Session,
    context: AdminContext,
    action: str,
    entity_type: str,
    entity_id: Optional[str] = None,
    entity_name: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> None:
    """Persist one activity row. A logging failure never fails the admin operation."""
    try:
        db.add(
            ActivityLog(
                admin_email=context.admin_email or "unknown",
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                entity_name=entity_name,
                details=details,
                ip_address=context.ip_address,
                user_agent=context.user_agent,
            )
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to log activity action=%s entity_type=%s entity_id=%s", action, entity_type, entity_id)


def list_activity_logs(
    db: Session,
    *,
    page: int = 1,
    limit: int = 50,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    admin_email: Optional[str] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> ActivityLogPage:
    query = db.query(ActivityLog)
    if action:
        query = query.filter(ActivityLog.action == action)
    if entity_type:
        query = query.filter(ActivityLog.entity_type == entity_type)
    if admin_email:
        query = query.filter(ActivityLog.admin_email.ilike(f"%{admin_email.strip()}%"))
    if start is not None:
        query = query.filter(ActivityLog.created_at >= start)
    if end is not None:
        query = query.filter(ActivityLog.created_at <= end)

    total = query.count()
    rows = (
        query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return ActivityLogPage(
        logs=[ActivityLogResponse.model_validate(row) for row in rows],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit) if limit else 0,
        ),
    )
