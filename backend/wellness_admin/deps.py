"""
Shared dependencies. Wires request-scoped repositories and services.
"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .components.activity.service import AdminContext
from .components.assessments.repository import AssessmentDefinitionRepository
from .components.assessments.service import AssessmentAdminService
from .platform.database import get_db
from .platform.middleware import get_client_ip


def get_admin_context(request: Request) -> AdminContext:
    return AdminContext(
        admin_email=(request.headers.get("X-Admin-Email") or "").strip() or "unknown",
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


def get_assessment_repository(db: Session = Depends(get_db)) -> AssessmentDefinitionRepository:
    return AssessmentDefinitionRepository(db)


def get_assessment_service(
    repository: AssessmentDefinitionRepository = Depends(get_assessment_repository),
    context: AdminContext = Depends(get_admin_context),
) -> AssessmentAdminService:
    return AssessmentAdminService(repository, context)


__all__ = ["get_admin_context", "get_assessment_repository", "get_assessment_service"]
