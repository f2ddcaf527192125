from .assessment_definition import (
    AssessmentDefinitionCreate,
    AssessmentDefinitionUpdate,
    AssessmentDefinitionSummary,
    AssessmentDefinitionDetail,
    PreviewRequest,
    BulkAssessmentIds,
    BulkPublishRequest,
    BulkTagsRequest,
)
from .activity_log import ActivityLogResponse, ActivityLogPage

__all__ = [
    "AssessmentDefinitionCreate",
    "AssessmentDefinitionUpdate",
    "AssessmentDefinitionSummary",
    "AssessmentDefinitionDetail",
    "PreviewRequest",
    "BulkAssessmentIds",
    "BulkPublishRequest",
    "BulkTagsRequest",
    "ActivityLogResponse",
    "ActivityLogPage",
]
