from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..components.scoring.rules import ASSESSMENT_TYPE_PATTERN
from ..components.scoring.schemas import ScoringConfig


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


ResponseType = Literal["likert", "likert_5", "binary", "multiple_choice"]


class ResponseOptionIn(_CamelModel):
    id: Optional[str] = None
    value: float
    text: str = Field(min_length=1, max_length=200)
    order: int = Field(ge=1)


class QuestionIn(_CamelModel):
    id: Optional[str] = None
    text: str = Field(min_length=5, max_length=500)
    order: int = Field(ge=1)
    response_type: ResponseType
    domain: Optional[str] = Field(default=None, max_length=50)
    reverse_scored: bool = False
    metadata: Optional[Dict[str, Any]] = None
    options: List[ResponseOptionIn] = Field(min_length=2)


class AssessmentDefinitionCreate(_CamelModel):
    name: str = Field(min_length=3, max_length=200)
    type: str = Field(min_length=3, max_length=100, pattern=ASSESSMENT_TYPE_PATTERN)
    category: str = Field(min_length=3, max_length=50)
    description: str = Field(min_length=10, max_length=2000)
    time_estimate: Optional[str] = Field(default=None, max_length=50)
    scoring_config: ScoringConfig
    questions: List[QuestionIn] = Field(min_length=1, max_length=100)
    is_active: bool = True


class AssessmentDefinitionUpdate(_CamelModel):
    name: Optional[str] = Field(default=None, min_length=3, max_length=200)
    type: Optional[str] = Field(default=None, min_length=3, max_length=100, pattern=ASSESSMENT_TYPE_PATTERN)
    category: Optional[str] = Field(default=None, min_length=3, max_length=50)
    description: Optional[str] = Field(default=None, min_length=10, max_length=2000)
    time_estimate: Optional[str] = Field(default=None, max_length=50)
    scoring_config: Optional[ScoringConfig] = None
    questions: Optional[List[QuestionIn]] = Field(default=None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class PreviewRequest(BaseModel):
    # questionId -> response value
    responses: Dict[str, str]


class ResponseOptionResponse(_CamelModel):
    id: str
    value: float
    text: str
    order: int


class QuestionResponse(_CamelModel):
    id: str
    text: str
    order: int
    response_type: str
    domain: Optional[str] = None
    reverse_scored: bool = False
    metadata: Optional[Dict[str, Any]] = None
    options: List[ResponseOptionResponse] = []


class AssessmentDefinitionSummary(_CamelModel):
    id: str
    name: str
    type: str
    category: str
    description: Optional[str] = None
    time_estimate: Optional[str] = None
    tags: List[str] = []
    is_active: bool
    question_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AssessmentDefinitionDetail(_CamelModel):
    id: str
    name: str
    type: str
    category: str
    description: Optional[str] = None
    time_estimate: Optional[str] = None
    tags: List[str] = []
    is_active: bool
    created_by: Optional[str] = None
    scoring_config: Optional[Dict[str, Any]] = None
    questions: List[QuestionResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class BulkAssessmentIds(_CamelModel):
    assessment_ids: List[str] = Field(min_length=1)


class BulkPublishRequest(BulkAssessmentIds):
    published: bool


class BulkTagsRequest(BulkAssessmentIds):
    tags: List[str] = Field(min_length=1)
    action: Literal["add", "remove", "replace"]
