"""Admin activity log listing."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...components.activity.service import list_activity_logs
from ...platform.config import settings
from ...platform.database import get_db
from ...shared.utils import parse_filter_datetime

router = APIRouter(prefix="/admin", tags=["Admin Activity"])


@router.get("/activity-logs")
def get_activity_logs(
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1),
    action: Optional[str] = Query(None),
    entity_type: Optional[str] = Query(None, alias="entityType"),
    admin_email: Optional[str] = Query(None, alias="adminEmail"),
    start_date: Optional[str] = Query(None, alias="startDate"),
    end_date: Optional[str] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    result = list_activity_logs(
        db,
        page=page,
        limit=min(limit, settings.ACTIVITY_LOG_PAGE_SIZE_MAX),
        action=action,
        entity_type=entity_type,
        admin_email=admin_email,
        start=parse_filter_datetime(start_date),
        end=parse_filter_datetime(end_date, end_of_day=True),
    )
    return {"success": True, "data": result.model_dump(by_alias=True)}
