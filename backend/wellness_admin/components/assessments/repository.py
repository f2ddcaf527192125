"""Assessment definition DB helpers, serialization, and scoring-config plumbing."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from ...models.assessment_definition import AssessmentDefinition, AssessmentQuestion, ResponseOption
from ...schemas.assessment_definition import (
    AssessmentDefinitionDetail,
    AssessmentDefinitionSummary,
    QuestionIn,
)
from ...shared.utils import new_id
from ..scoring.records import OptionRecord, QuestionRecord
from ..scoring.schemas import ScoringConfig

logger = logging.getLogger(__name__)


class AssessmentDefinitionRepository:
    """Query and persistence handle over a request-scoped session."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, assessment_id: str) -> Optional[AssessmentDefinition]:
        return (
            self.db.query(AssessmentDefinition)
            .options(selectinload(AssessmentDefinition.questions).selectinload(AssessmentQuestion.options))
            .filter(AssessmentDefinition.id == assessment_id)
            .first()
        )

    def find_by_type(self, type_slug: str, exclude_id: Optional[str] = None) -> Optional[AssessmentDefinition]:
        query = self.db.query(AssessmentDefinition).filter(AssessmentDefinition.type == type_slug)
        if exclude_id is not None:
            query = query.filter(AssessmentDefinition.id != exclude_id)
        return query.first()

    def list(
        self,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[AssessmentDefinition]:
        query = self.db.query(AssessmentDefinition).options(selectinload(AssessmentDefinition.questions))
        if category:
            query = query.filter(AssessmentDefinition.category == category)
        if is_active is not None:
            query = query.filter(AssessmentDefinition.is_active == is_active)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.filter(
                or_(
                    AssessmentDefinition.name.ilike(pattern),
                    AssessmentDefinition.type.ilike(pattern),
                    AssessmentDefinition.description.ilike(pattern),
                )
            )
        query = query.order_by(AssessmentDefinition.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def list_by_ids(self, assessment_ids: Iterable[str]) -> List[AssessmentDefinition]:
        ids = list(dict.fromkeys(assessment_ids))
        if not ids:
            return []
        return self.db.query(AssessmentDefinition).filter(AssessmentDefinition.id.in_(ids)).all()

    def categories(self) -> List[str]:
        rows = self.db.query(AssessmentDefinition.category).distinct().all()
        return sorted(row[0] for row in rows if row[0])

    def add(self, definition: AssessmentDefinition) -> AssessmentDefinition:
        self.db.add(definition)
        return definition

    def clear_questions(self, definition: AssessmentDefinition) -> None:
        """Delete every question (options cascade) and flush before recreation."""
        for question in list(definition.questions):
            self.db.delete(question)
        self.db.flush()
        self.db.expire(definition, ["questions"])

    def delete(self, definition: AssessmentDefinition) -> None:
        self.db.delete(definition)


# ---------------------------------------------------------------------------
# Row builders
# ---------------------------------------------------------------------------

def build_questions(questions: Iterable[QuestionIn]) -> Tuple[List[AssessmentQuestion], Dict[str, str]]:
    """Build fresh question/option rows.

    Returns the rows plus a map from client-supplied question IDs to the
    newly generated ones, so scoring-config references can follow.
    """
    rows: List[AssessmentQuestion] = []
    id_map: Dict[str, str] = {}
    for question in questions:
        question_id = new_id()
        if question.id:
            id_map[question.id] = question_id
        rows.append(
            AssessmentQuestion(
                id=question_id,
                text=question.text,
                order=question.order,
                response_type=question.response_type,
                domain=question.domain or None,
                reverse_scored=bool(question.reverse_scored),
                metadata_json=json.dumps(question.metadata) if question.metadata else None,
                options=[
                    ResponseOption(id=new_id(), value=option.value, text=option.text, order=option.order)
                    for option in question.options
                ],
            )
        )
    return rows, id_map


def copy_questions(source: Iterable[AssessmentQuestion]) -> Tuple[List[AssessmentQuestion], Dict[str, str]]:
    rows: List[AssessmentQuestion] = []
    id_map: Dict[str, str] = {}
    for question in sorted(source, key=lambda q: q.order):
        question_id = new_id()
        id_map[question.id] = question_id
        rows.append(
            AssessmentQuestion(
                id=question_id,
                text=question.text,
                order=question.order,
                response_type=question.response_type,
                domain=question.domain,
                reverse_scored=bool(question.reverse_scored),
                metadata_json=question.metadata_json,
                options=[
                    ResponseOption(id=new_id(), value=option.value, text=option.text, order=option.order)
                    for option in question.options
                ],
            )
        )
    return rows, id_map


# ---------------------------------------------------------------------------
# Scoring config helpers
# ---------------------------------------------------------------------------

def load_scoring_config(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """Parse the stored JSON blob; None when absent or unparseable."""
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Failed to parse stored scoring config")
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_scoring_config(raw: Optional[str]) -> Optional[ScoringConfig]:
    payload = load_scoring_config(raw)
    if payload is None:
        return None
    try:
        return ScoringConfig.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Stored scoring config failed validation: %s", exc.errors())
        return None


def dump_scoring_config(config: ScoringConfig) -> str:
    return config.model_dump_json(by_alias=True, exclude_none=True)


def scoring_config_payload(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """Stored config as wire JSON; None unless it parses and validates."""
    config = parse_scoring_config(raw)
    if config is None:
        return None
    return config.model_dump(by_alias=True, exclude_none=True)


def remap_question_ids(config: ScoringConfig, id_map: Dict[str, str]) -> ScoringConfig:
    """Rewrite question ID references in the config after questions were recreated."""
    if not id_map:
        return config
    remapped = config.model_copy(deep=True)
    if remapped.reverse_scored:
        remapped.reverse_scored = [id_map.get(qid, qid) for qid in remapped.reverse_scored]
    for domain in remapped.domains or []:
        domain.question_ids = [id_map.get(qid, qid) for qid in domain.question_ids]
    return remapped


def sync_reverse_scoring(
    config: ScoringConfig,
    questions: Iterable[AssessmentQuestion],
    *,
    list_is_authoritative: bool = False,
) -> ScoringConfig:
    """Make the per-question flag and the config-level list agree.

    The per-question flag is canonical; a question named in the legacy
    config list gets its flag set, then the list is rewritten from the flags.
    With ``list_is_authoritative`` (a config-only edit that sends the list)
    the list also clears the flag of every question it omits.
    """
    questions = list(questions)
    listed = set(config.reverse_scored or [])
    overwrite = list_is_authoritative and config.reverse_scored is not None
    for question in questions:
        if overwrite:
            question.reverse_scored = question.id in listed
        elif question.id in listed:
            question.reverse_scored = True
    synced = config.model_copy(deep=True)
    synced.reverse_scored = [q.id for q in sorted(questions, key=lambda q: q.order) if q.reverse_scored]
    return synced


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------

def split_tags(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _load_metadata(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    if not raw:
        return None
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Failed to parse question metadata")
        return None
    return parsed if isinstance(parsed, dict) else None


def to_question_records(definition: AssessmentDefinition) -> List[QuestionRecord]:
    """Plain records for the scoring engine."""
    return [
        QuestionRecord(
            id=question.id,
            text=question.text,
            order=question.order,
            response_type=question.response_type,
            domain=question.domain,
            reverse_scored=bool(question.reverse_scored),
            options=tuple(
                OptionRecord(id=option.id, value=float(option.value), text=option.text, order=option.order)
                for option in sorted(question.options, key=lambda o: o.order)
            ),
        )
        for question in sorted(definition.questions, key=lambda q: q.order)
    ]


def definition_to_summary(definition: AssessmentDefinition) -> AssessmentDefinitionSummary:
    return AssessmentDefinitionSummary(
        id=definition.id,
        name=definition.name,
        type=definition.type,
        category=definition.category,
        description=definition.description,
        time_estimate=definition.time_estimate,
        tags=split_tags(definition.tags),
        is_active=bool(definition.is_active),
        question_count=len(definition.questions),
        created_at=definition.created_at,
        updated_at=definition.updated_at,
    )


def definition_to_detail(definition: AssessmentDefinition) -> AssessmentDefinitionDetail:
    return AssessmentDefinitionDetail.model_validate(
        {
            "id": definition.id,
            "name": definition.name,
            "type": definition.type,
            "category": definition.category,
            "description": definition.description,
            "time_estimate": definition.time_estimate,
            "tags": split_tags(definition.tags),
            "is_active": bool(definition.is_active),
            "created_by": definition.created_by,
            "scoring_config": scoring_config_payload(definition.scoring_config),
            "questions": [
                {
                    "id": question.id,
                    "text": question.text,
                    "order": question.order,
                    "response_type": question.response_type,
                    "domain": question.domain,
                    "reverse_scored": bool(question.reverse_scored),
                    "metadata": _load_metadata(question.metadata_json),
                    "options": [
                        {"id": option.id, "value": option.value, "text": option.text, "order": option.order}
                        for option in sorted(question.options, key=lambda o: o.order)
                    ],
                }
                for question in sorted(definition.questions, key=lambda q: q.order)
            ],
            "created_at": definition.created_at,
            "updated_at": definition.updated_at,
        }
    )
