"""Tests for the questionnaire scoring engine."""

import pytest

from wellness_admin.components.scoring.engine import (
    interpret,
    normalize_score,
    normalize_value,
    reverse_scored_ids,
    score,
)
from wellness_admin.components.scoring.records import OptionRecord, QuestionRecord
from wellness_admin.components.scoring.schemas import InterpretationBand, ScoringConfig


def _question(qid, values=(0, 1, 2, 3), reverse_scored=False, domain=None, order=1):
    return QuestionRecord(
        id=qid,
        text=f"Question {qid}",
        order=order,
        response_type="likert",
        domain=domain,
        reverse_scored=reverse_scored,
        options=tuple(
            OptionRecord(id=f"{qid}-o{i}", value=float(v), text=f"Option {v}", order=i + 1)
            for i, v in enumerate(values)
        ),
    )


def _config(max_score=6, bands=None, **extra):
    return ScoringConfig.model_validate(
        {
            "minScore": 0,
            "maxScore": max_score,
            "interpretationBands": bands
            or [{"max": 2, "label": "Low"}, {"max": 6, "label": "High"}],
            **extra,
        }
    )


@pytest.fixture
def questions():
    return [_question("q1", order=1), _question("q2", order=2)]


class TestExampleScenarios:
    def test_plain_sum_low_band(self, questions):
        report = score(questions, {"q1": "1", "q2": "1"}, _config())
        assert report.total_score == 2
        assert report.normalized_score == 33
        assert report.interpretation == "Low"
        assert report.domain_scores is None

    def test_reverse_scored_question_flips_contribution(self):
        qs = [_question("q1", reverse_scored=True, order=1), _question("q2", order=2)]
        report = score(qs, {"q1": "1", "q2": "1"}, _config())
        assert report.total_score == 3
        assert report.interpretation == "High"

    def test_extra_question_id_ignored(self, questions):
        baseline = score(questions, {"q1": "1", "q2": "1"}, _config())
        report = score(questions, {"q1": "1", "q2": "1", "ghost": "3"}, _config())
        assert report.total_score == baseline.total_score

    def test_zero_max_score_normalizes_to_zero(self, questions):
        report = score(questions, {"q1": "3", "q2": "3"}, _config(max_score=0))
        assert report.total_score == 6
        assert report.normalized_score == 0

    def test_domain_reflects_only_its_questions(self, questions):
        config = _config(
            domains=[
                {
                    "id": "d1",
                    "label": "Domain one",
                    "questionIds": ["q1"],
                    "minScore": 0,
                    "maxScore": 3,
                    "interpretationBands": [{"max": 3, "label": "Mild"}],
                }
            ]
        )
        report = score(questions, {"q1": "2", "q2": "3"}, config)
        assert report.total_score == 5
        d1 = report.domain_scores["d1"]
        assert d1.score == 2
        assert d1.normalized == 67
        assert d1.interpretation == "Mild"


class TestProperties:
    def test_deterministic(self, questions):
        config = _config()
        first = score(questions, {"q1": "2", "q2": "0"}, config)
        second = score(questions, {"q1": "2", "q2": "0"}, config)
        assert first == second

    def test_empty_responses_total_zero(self, questions):
        report = score(questions, {}, _config())
        assert report.total_score == 0
        assert report.normalized_score == 0
        assert report.interpretation == "Low"

    @pytest.mark.parametrize("value,expected", [(0, 3), (1, 2), (2, 1), (3, 0)])
    def test_reverse_scoring_symmetry(self, value, expected):
        qs = [_question("q1", reverse_scored=True)]
        report = score(qs, {"q1": str(value)}, _config())
        assert report.total_score == expected

    def test_reverse_uses_max_option_value_when_unsorted_and_sparse(self):
        qs = [_question("q1", values=(4, 0, 10), reverse_scored=True)]
        report = score(qs, {"q1": "4"}, _config(max_score=10, bands=[{"max": 10, "label": "Any"}]))
        assert report.total_score == 6

    def test_normalized_within_bounds(self, questions):
        config = _config()
        for a in range(4):
            for b in range(4):
                report = score(questions, {"q1": str(a), "q2": str(b)}, config)
                assert 0 <= report.normalized_score <= 100

    def test_unmatched_response_is_noop(self, questions):
        omitted = score(questions, {"q1": "2"}, _config())
        garbage = score(questions, {"q1": "2", "q2": "banana"}, _config())
        out_of_range = score(questions, {"q1": "2", "q2": "7"}, _config())
        assert garbage.total_score == omitted.total_score
        assert out_of_range.total_score == omitted.total_score

    def test_band_boundary_is_inclusive(self, questions):
        report = score(questions, {"q1": "2", "q2": "0"}, _config())
        assert report.total_score == 2
        assert report.interpretation == "Low"

    def test_domain_independence(self, questions):
        qs = questions + [_question("q3", order=3)]
        config = _config(
            max_score=9,
            bands=[{"max": 9, "label": "Any"}],
            domains=[
                {"id": "a", "label": "A", "questionIds": ["q1"], "minScore": 0, "maxScore": 3},
                {"id": "b", "label": "B", "questionIds": ["q2"], "minScore": 0, "maxScore": 3},
            ],
        )
        without_q3 = score(qs, {"q1": "1", "q2": "2"}, config)
        with_q3 = score(qs, {"q1": "1", "q2": "2", "q3": "3"}, config)
        assert with_q3.domain_scores == without_q3.domain_scores
        assert with_q3.total_score == without_q3.total_score + 3


class TestInterpretation:
    def test_bands_sorted_before_scan(self):
        bands = [
            InterpretationBand(max=27, label="Severe"),
            InterpretationBand(max=4, label="Minimal"),
            InterpretationBand(max=9, label="Mild"),
        ]
        assert interpret(5, bands) == "Mild"
        assert interpret(4, bands) == "Minimal"

    def test_total_above_every_band_is_unknown(self):
        assert interpret(30, [InterpretationBand(max=27, label="Severe")]) == "Unknown"

    def test_domain_without_bands_is_unknown(self, questions):
        config = _config(
            domains=[{"id": "d", "label": "D", "questionIds": ["q1"], "minScore": 0, "maxScore": 3}]
        )
        report = score(questions, {"q1": "1"}, config)
        assert report.domain_scores["d"].interpretation == "Unknown"


class TestNormalization:
    def test_rounds_half_up(self):
        assert normalize_score(1, 8) == 13  # 12.5
        assert normalize_score(3, 8) == 38  # 37.5

    def test_negative_max_score(self):
        assert normalize_score(4, -1) == 0

    @pytest.mark.parametrize(
        "raw,expected",
        [(1.0, "1"), (1, "1"), ("1", "1"), (" 2 ", "2"), (0.5, "0.5"), ("abc", "abc")],
    )
    def test_normalize_value(self, raw, expected):
        assert normalize_value(raw) == expected

    def test_numeric_and_string_responses_match_the_same_option(self, questions):
        by_string = score(questions, {"q1": "2"}, _config())
        by_number = score(questions, {"q1": 2}, _config())
        assert by_string.total_score == by_number.total_score == 2

    def test_fractional_option_values(self):
        qs = [_question("q1", values=(0, 0.5, 1))]
        report = score(qs, {"q1": "0.5"}, _config(max_score=1, bands=[{"max": 1, "label": "Any"}]))
        assert report.total_score == 0.5
        assert report.normalized_score == 50


class TestReverseScoredSource:
    def test_config_level_list_is_honoured(self, questions):
        config = _config(reverseScored=["q1"])
        assert reverse_scored_ids(questions, config) == {"q1"}
        report = score(questions, {"q1": "0", "q2": "0"}, config)
        assert report.total_score == 3

    def test_flag_and_list_union(self):
        qs = [_question("q1", reverse_scored=True), _question("q2", order=2)]
        config = _config(reverseScored=["q2"])
        assert reverse_scored_ids(qs, config) == {"q1", "q2"}

    def test_report_payload_uses_wire_keys(self, questions):
        payload = score(questions, {"q1": "1"}, _config()).to_payload()
        assert set(payload) == {"totalScore", "normalizedScore", "interpretation"}
