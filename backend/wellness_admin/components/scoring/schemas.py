"""Pydantic models for scoring configuration and the score report payload."""

from __future__ import annotations

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Number = Union[int, float]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class InterpretationBand(_CamelModel):
    max: float = Field(ge=0)
    label: str = Field(min_length=1, max_length=100)
    color: Optional[str] = None


class ScoringDomain(_CamelModel):
    id: str = Field(min_length=1, max_length=50)
    label: str = Field(min_length=1, max_length=100)
    question_ids: List[str] = []
    min_score: float = Field(ge=0)
    max_score: float = Field(ge=0)
    interpretation_bands: Optional[List[InterpretationBand]] = None


class ScoringConfig(_CamelModel):
    min_score: float = Field(ge=0)
    max_score: float = Field(ge=0)
    interpretation_bands: List[InterpretationBand] = Field(min_length=1)
    # Legacy view of reverse scoring; the per-question flag is canonical
    reverse_scored: Optional[List[str]] = None
    domains: Optional[List[ScoringDomain]] = None
    higher_is_better: Optional[bool] = None


class DomainScore(BaseModel):
    score: Number
    normalized: int
    interpretation: str


class ScoreReport(_CamelModel):
    total_score: Number
    normalized_score: int
    interpretation: str
    domain_scores: Optional[Dict[str, DomainScore]] = None

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
