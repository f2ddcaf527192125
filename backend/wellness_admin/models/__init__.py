from .assessment_definition import AssessmentDefinition, AssessmentQuestion, ResponseOption
from .activity_log import ActivityLog

__all__ = [
    "AssessmentDefinition",
    "AssessmentQuestion",
    "ResponseOption",
    "ActivityLog",
]
