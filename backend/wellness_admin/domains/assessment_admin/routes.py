"""Admin routes for assessment definitions: thin handlers over the admin service."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ...components.assessments.service import AssessmentAdminService
from ...deps import get_assessment_service
from ...platform.config import settings
from ...schemas.assessment_definition import (
    AssessmentDefinitionCreate,
    AssessmentDefinitionUpdate,
    BulkAssessmentIds,
    BulkPublishRequest,
    BulkTagsRequest,
    PreviewRequest,
)

router = APIRouter(prefix="/admin", tags=["Admin Assessments"])


@router.get("/assessments")
def list_assessments(
    category: Optional[str] = Query(None),
    is_active: Optional[bool] = Query(None, alias="isActive"),
    search: Optional[str] = Query(None),
    service: AssessmentAdminService = Depends(get_assessment_service),
):
    rows = service.list_definitions(
        category=category,
        is_active=is_active,
        search=search,
        limit=settings.ASSESSMENT_SEARCH_LIMIT,
    )
    return {"success": True, "data": [row.model_dump(by_alias=True) for row in rows]}


@router.get("/assessments/categories")
def list_categories(service: AssessmentAdminService = Depends(get_assessment_service)):
    return {"success": True, "data": service.categories()}


@router.get("/assessments/{assessment_id}")
def get_assessment(assessment_id: str, service: AssessmentAdminService = Depends(get_assessment_service)):
    return {"success": True, "data": service.get_definition(assessment_id).model_dump(by_alias=True)}


@router.post("/assessments", status_code=status.HTTP_201_CREATED)
def create_assessment(
    data: AssessmentDefinitionCreate,
    service: AssessmentAdminService = Depends(get_assessment_service),
):
    definition = service.create_definition(data)
    return {
        "success": True,
        "data": {"id": definition.id, "type": definition.type},
        "message": "Assessment created successfully",
    }


@router.put("/assessments/{assessment_id}")
def update_assessment(
    assessment_id: str,
    data: AssessmentDefinitionUpdate,
    service: AssessmentAdminService = Depends(get_assessment_service),
):
    service.update_definition(assessment_id, data)
    return {"success": True, "message": "Assessment updated successfully"}


@router.delete("/assessments/{assessment_id}")
def delete_assessment(assessment_id: str, service: AssessmentAdminService = Depends(get_assessment_service)):
    service.deactivate_definition(assessment_id)
    return {"success": True, "message": "Assessment deactivated successfully"}


@router.post("/assessments/{assessment_id}/duplicate", status_code=status.HTTP_201_CREATED)
def duplicate_assessment(assessment_id: str, service: AssessmentAdminService = Depends(get_assessment_service)):
    duplicate = service.duplicate_definition(assessment_id)
    return {
        "success": True,
        "data": {"id": duplicate.id, "type": duplicate.type},
        "message": "Assessment duplicated successfully",
    }


@router.post("/assessments/{assessment_id}/preview")
def preview_assessment(
    assessment_id: str,
    data: PreviewRequest,
    service: AssessmentAdminService = Depends(get_assessment_service),
):
    return {"success": True, "data": service.preview(assessment_id, data.responses)}


# ---------------------------------------------------------------------------
# Bulk operations
# ---------------------------------------------------------------------------

@router.post("/bulk/assessments/publish")
def bulk_publish_assessments(
    data: BulkPublishRequest,
    service: AssessmentAdminService = Depends(get_assessment_service),
):
    count = service.bulk_set_active(data.assessment_ids, data.published)
    action = "published" if data.published else "unpublished"
    return {
        "success": True,
        "data": {"updatedCount": count, "action": action},
        "message": f"Successfully {action} {count} assessment(s)",
    }


@router.delete("/bulk/assessments")
def bulk_delete_assessments(
    data: BulkAssessmentIds,
    service: AssessmentAdminService = Depends(get_assessment_service),
):
    count = service.bulk_delete(data.assessment_ids)
    return {
        "success": True,
        "data": {"deletedCount": count},
        "message": f"Successfully deleted {count} assessment(s)",
    }


@router.post("/bulk/assessments/tags")
def bulk_tag_assessments(
    data: BulkTagsRequest,
    service: AssessmentAdminService = Depends(get_assessment_service),
):
    count, tags = service.bulk_update_tags(data.assessment_ids, data.tags, data.action)
    return {
        "success": True,
        "data": {"updatedCount": count, "action": data.action, "tags": tags},
        "message": f"Successfully updated tags for {count} assessment(s)",
    }
