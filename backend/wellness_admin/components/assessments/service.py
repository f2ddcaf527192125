"""Assessment definition administration: CRUD, duplication, preview scoring, bulk actions."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ...models.assessment_definition import AssessmentDefinition
from ...schemas.assessment_definition import (
    AssessmentDefinitionCreate,
    AssessmentDefinitionDetail,
    AssessmentDefinitionSummary,
    AssessmentDefinitionUpdate,
)
from ...shared.utils import new_id
from ..activity.service import ENTITY_ASSESSMENT, AdminContext, log_activity
from ..scoring.engine import score
from ..scoring.rules import DUPLICATE_NAME_SUFFIX
from ..scoring.schemas import ScoringConfig
from .repository import (
    AssessmentDefinitionRepository,
    build_questions,
    copy_questions,
    definition_to_detail,
    definition_to_summary,
    dump_scoring_config,
    parse_scoring_config,
    remap_question_ids,
    split_tags,
    sync_reverse_scoring,
    to_question_records,
)

logger = logging.getLogger(__name__)


def _ensure_positive_max_score(config: ScoringConfig) -> None:
    if config.max_score <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Max score must be greater than 0",
        )


class AssessmentAdminService:
    def __init__(self, repository: AssessmentDefinitionRepository, context: Optional[AdminContext] = None):
        self.repository = repository
        self.db = repository.db
        self.context = context or AdminContext()

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    @contextmanager
    def _write(self, verb: str) -> Iterator[None]:
        """Run a block as one transaction; a slug clash surfaces as 409, other database failures as 500."""
        try:
            yield
            self.db.commit()
        except IntegrityError as exc:
            # Only unique column is the slug; a concurrent writer won the race
            self.db.rollback()
            logger.warning("Integrity error on %s assessment: %s", verb, exc.orig)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Assessment type already exists") from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Failed to %s assessment", verb)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Failed to {verb} assessment",
            ) from exc
        except Exception:
            self.db.rollback()
            raise

    def _get_or_404(self, assessment_id: str) -> AssessmentDefinition:
        definition = self.repository.get(assessment_id)
        if definition is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assessment not found")
        return definition

    def _ensure_type_available(self, type_slug: str, exclude_id: Optional[str] = None) -> None:
        if self.repository.find_by_type(type_slug, exclude_id=exclude_id) is not None:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Assessment type already exists")

    def _log(self, action: str, entity_id: Optional[str] = None, entity_name: Optional[str] = None, details=None):
        log_activity(self.db, self.context, action, ENTITY_ASSESSMENT, entity_id, entity_name, details)

    # -----------------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------------

    def list_definitions(
        self,
        category: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[AssessmentDefinitionSummary]:
        rows = self.repository.list(category=category, is_active=is_active, search=search, limit=limit)
        return [definition_to_summary(row) for row in rows]

    def get_definition(self, assessment_id: str) -> AssessmentDefinitionDetail:
        return definition_to_detail(self._get_or_404(assessment_id))

    def categories(self) -> List[str]:
        return self.repository.categories()

    # -----------------------------------------------------------------------
    # Writes
    # -----------------------------------------------------------------------

    def create_definition(self, data: AssessmentDefinitionCreate) -> AssessmentDefinition:
        self._ensure_type_available(data.type)
        _ensure_positive_max_score(data.scoring_config)

        with self._write("create"):
            questions, id_map = build_questions(data.questions)
            config = sync_reverse_scoring(remap_question_ids(data.scoring_config, id_map), questions)
            definition = self.repository.add(
                AssessmentDefinition(
                    id=new_id(),
                    name=data.name,
                    type=data.type,
                    category=data.category,
                    description=data.description,
                    time_estimate=data.time_estimate,
                    scoring_config=dump_scoring_config(config),
                    is_active=data.is_active,
                    created_by=self.context.admin_email,
                    questions=questions,
                )
            )

        logger.info("Assessment created id=%s type=%s questions=%d", definition.id, definition.type, len(questions))
        self._log("CREATE", definition.id, definition.name, {"type": definition.type})
        return definition

    def update_definition(self, assessment_id: str, data: AssessmentDefinitionUpdate) -> AssessmentDefinition:
        definition = self._get_or_404(assessment_id)
        fields = data.model_dump(exclude_unset=True)

        if data.type and data.type != definition.type:
            self._ensure_type_available(data.type, exclude_id=definition.id)
        if data.scoring_config is not None:
            _ensure_positive_max_score(data.scoring_config)

        with self._write("update"):
            for field in ("name", "type", "category", "description"):
                value = getattr(data, field)
                if value:
                    setattr(definition, field, value)
            if "time_estimate" in fields:
                definition.time_estimate = data.time_estimate
            if data.is_active is not None:
                definition.is_active = data.is_active

            config = data.scoring_config
            config_only = config is not None and data.questions is None
            if data.questions is not None:
                if config is None:
                    config = parse_scoring_config(definition.scoring_config)
                self.repository.clear_questions(definition)
                questions, id_map = build_questions(data.questions)
                definition.questions = questions
                if config is not None:
                    config = remap_question_ids(config, id_map)
            if config is not None:
                # A config-only edit that sends reverseScored may also clear flags
                config = sync_reverse_scoring(
                    config,
                    definition.questions,
                    list_is_authoritative=config_only and "reverse_scored" in config.model_fields_set,
                )
                definition.scoring_config = dump_scoring_config(config)

        logger.info(
            "Assessment updated id=%s fields=%s questions_replaced=%s",
            definition.id,
            sorted(fields),
            data.questions is not None,
        )
        self._log("UPDATE", definition.id, definition.name, {"fields": sorted(fields)})
        return definition

    def duplicate_definition(self, assessment_id: str) -> AssessmentDefinition:
        original = self._get_or_404(assessment_id)

        with self._write("duplicate"):
            questions, id_map = copy_questions(original.questions)
            scoring_config = original.scoring_config
            config = parse_scoring_config(original.scoring_config)
            if config is not None:
                config = sync_reverse_scoring(remap_question_ids(config, id_map), questions)
                scoring_config = dump_scoring_config(config)
            duplicate = self.repository.add(
                AssessmentDefinition(
                    id=new_id(),
                    name=f"{original.name}{DUPLICATE_NAME_SUFFIX}",
                    type=f"{original.type}_copy_{int(time.time() * 1000)}",
                    category=original.category,
                    description=original.description,
                    time_estimate=original.time_estimate,
                    scoring_config=scoring_config,
                    tags=original.tags,
                    is_active=False,
                    created_by=self.context.admin_email,
                    questions=questions,
                )
            )

        logger.info("Assessment duplicated source=%s copy=%s", original.id, duplicate.id)
        self._log("DUPLICATE", duplicate.id, duplicate.name, {"sourceId": original.id})
        return duplicate

    def deactivate_definition(self, assessment_id: str) -> None:
        definition = self._get_or_404(assessment_id)
        with self._write("delete"):
            definition.is_active = False
        logger.info("Assessment deactivated id=%s", definition.id)
        self._log("DELETE", definition.id, definition.name)

    # -----------------------------------------------------------------------
    # Preview
    # -----------------------------------------------------------------------

    def preview(self, assessment_id: str, responses: Dict[str, Any]) -> Dict[str, Any]:
        definition = self._get_or_404(assessment_id)
        config = parse_scoring_config(definition.scoring_config)
        if config is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Assessment has no scoring configuration",
            )
        report = score(to_question_records(definition), responses, config)
        return {
            "assessmentName": definition.name,
            "assessmentType": definition.type,
            **report.to_payload(),
        }

    # -----------------------------------------------------------------------
    # Bulk actions
    # -----------------------------------------------------------------------

    def bulk_set_active(self, assessment_ids: List[str], published: bool) -> int:
        with self._write("update"):
            rows = self.repository.list_by_ids(assessment_ids)
            for row in rows:
                row.is_active = published
        self._log(
            "BULK_PUBLISH" if published else "BULK_UNPUBLISH",
            details={"count": len(rows), "assessmentIds": assessment_ids},
        )
        return len(rows)

    def bulk_delete(self, assessment_ids: List[str]) -> int:
        with self._write("delete"):
            rows = self.repository.list_by_ids(assessment_ids)
            for row in rows:
                self.repository.delete(row)
        logger.info("Assessments hard-deleted count=%d", len(rows))
        self._log("BULK_DELETE", details={"count": len(rows), "assessmentIds": assessment_ids})
        return len(rows)

    def bulk_update_tags(self, assessment_ids: List[str], tags: List[str], action: str) -> Tuple[int, List[str]]:
        """Returns the number of rows touched and the cleaned tag list that was applied."""
        cleaned = list(dict.fromkeys(tag.strip() for tag in tags if tag.strip()))
        if not cleaned:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="At least one non-blank tag is required")
        with self._write("update"):
            rows = self.repository.list_by_ids(assessment_ids)
            for row in rows:
                current = split_tags(row.tags)
                if action == "replace":
                    updated = cleaned
                elif action == "add":
                    updated = list(dict.fromkeys(current + cleaned))
                else:
                    updated = [tag for tag in current if tag not in cleaned]
                row.tags = ",".join(updated)
        self._log("BULK_TAG", details={"count": len(rows), "assessmentIds": assessment_ids, "action": action, "tags": cleaned})
        return len(rows), cleaned
