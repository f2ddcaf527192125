"""Tests for scoring-config plumbing between stored definitions and the engine."""

import json

from wellness_admin.components.assessments.repository import (
    build_questions,
    load_scoring_config,
    parse_scoring_config,
    remap_question_ids,
    scoring_config_payload,
    split_tags,
    sync_reverse_scoring,
    to_question_records,
)
from wellness_admin.components.scoring.schemas import ScoringConfig
from wellness_admin.models.assessment_definition import AssessmentDefinition
from wellness_admin.schemas.assessment_definition import QuestionIn
from tests.conftest import build_question


def _config(**extra):
    return ScoringConfig.model_validate(
        {"minScore": 0, "maxScore": 6, "interpretationBands": [{"max": 6, "label": "Any"}], **extra}
    )


def test_build_questions_maps_client_ids_to_new_ids():
    questions = [
        QuestionIn.model_validate(build_question(1, question_id="client-1")),
        QuestionIn.model_validate(build_question(2)),
    ]
    rows, id_map = build_questions(questions)
    assert len(rows) == 2
    assert set(id_map) == {"client-1"}
    assert id_map["client-1"] == rows[0].id
    assert rows[0].id != "client-1"
    assert [o.value for o in rows[0].options] == [0, 1, 2, 3]


def test_remap_rewrites_reverse_list_and_domain_members():
    config = _config(
        reverseScored=["old-1"],
        domains=[{"id": "d", "label": "D", "questionIds": ["old-1", "old-2", "other"], "minScore": 0, "maxScore": 6}],
    )
    remapped = remap_question_ids(config, {"old-1": "new-1", "old-2": "new-2"})
    assert remapped.reverse_scored == ["new-1"]
    assert remapped.domains[0].question_ids == ["new-1", "new-2", "other"]
    # source untouched
    assert config.reverse_scored == ["old-1"]


def test_sync_reverse_scoring_makes_flag_and_list_agree():
    questions = [
        QuestionIn.model_validate(build_question(1, reverse_scored=True)),
        QuestionIn.model_validate(build_question(2)),
        QuestionIn.model_validate(build_question(3)),
    ]
    rows, _ = build_questions(questions)
    config = _config(reverseScored=[rows[2].id])
    synced = sync_reverse_scoring(config, rows)
    assert synced.reverse_scored == [rows[0].id, rows[2].id]
    assert rows[2].reverse_scored is True
    assert rows[1].reverse_scored is False


def test_sync_reverse_scoring_with_authoritative_list_clears_omitted_flags():
    questions = [
        QuestionIn.model_validate(build_question(1, reverse_scored=True)),
        QuestionIn.model_validate(build_question(2)),
    ]
    rows, _ = build_questions(questions)
    synced = sync_reverse_scoring(_config(reverseScored=[rows[1].id]), rows, list_is_authoritative=True)
    assert synced.reverse_scored == [rows[1].id]
    assert [row.reverse_scored for row in rows] == [False, True]


def test_sync_reverse_scoring_authoritative_without_list_keeps_flags():
    rows, _ = build_questions([QuestionIn.model_validate(build_question(1, reverse_scored=True))])
    synced = sync_reverse_scoring(_config(), rows, list_is_authoritative=True)
    assert synced.reverse_scored == [rows[0].id]
    assert rows[0].reverse_scored is True


def test_load_scoring_config_handles_bad_json():
    assert load_scoring_config(None) is None
    assert load_scoring_config("{not json") is None
    assert load_scoring_config("[1, 2]") is None
    assert load_scoring_config('{"maxScore": 3}') == {"maxScore": 3}


def test_parse_scoring_config_rejects_invalid_shape():
    assert parse_scoring_config(json.dumps({"maxScore": 3})) is None
    parsed = parse_scoring_config(json.dumps({"minScore": 0, "maxScore": 3, "interpretationBands": [{"max": 3, "label": "A"}]}))
    assert parsed.max_score == 3


def test_split_tags():
    assert split_tags(None) == []
    assert split_tags("a, b,,c ") == ["a", "b", "c"]


def test_to_question_records_orders_questions_and_options():
    questions = [
        QuestionIn.model_validate(build_question(2, values=(3, 2, 1, 0))),
        QuestionIn.model_validate(build_question(1)),
    ]
    rows, _ = build_questions(questions)
    definition = AssessmentDefinition(id="x", name="n", type="t", category="c", questions=rows)
    records = to_question_records(definition)
    assert [r.order for r in records] == [1, 2]
    assert [o.order for o in records[1].options] == [1, 2, 3, 4]
    assert records[1].max_option_value == 3


def test_scoring_config_payload_requires_valid_config():
    assert scoring_config_payload('{"maxScore": "x"}') is None
    assert scoring_config_payload(None) is None
    payload = scoring_config_payload(
        json.dumps({"minScore": 0, "maxScore": 3, "interpretationBands": [{"max": 3, "label": "A"}]})
    )
    assert payload["maxScore"] == 3
    assert payload["interpretationBands"] == [{"max": 3, "label": "A"}]
