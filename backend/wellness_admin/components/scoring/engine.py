"""Questionnaire scoring engine.

Pure functions over a questionnaire's questions, a respondent's raw answers
and the questionnaire's scoring configuration. No I/O, no shared state.

Lookup misses never raise: an unknown question ID, an unanswered question,
or an answer matching none of the question's options contributes nothing.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Set

from .records import QuestionRecord
from .rules import UNKNOWN_INTERPRETATION
from .schemas import DomainScore, InterpretationBand, ScoreReport, ScoringConfig


def normalize_value(value: Any) -> str:
    """String form used to match a response against an option value.

    Integral numbers render without a fractional part so that a stored
    option value of ``1.0`` matches a submitted ``"1"``.
    """
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return str(value).strip()


def _as_number(value: float):
    return int(value) if float(value).is_integer() else value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def normalize_score(total: float, max_score: float) -> int:
    """Rescale ``total`` to 0-100 against ``max_score``; 0 when the bound is not positive."""
    if max_score <= 0:
        return 0
    return _round_half_up((total / max_score) * 100)


def interpret(total: float, bands: Optional[Sequence[InterpretationBand]]) -> str:
    """Label of the lowest-max band containing ``total``."""
    for band in sorted(bands or [], key=lambda b: b.max):
        if total <= band.max:
            return band.label
    return UNKNOWN_INTERPRETATION


def reverse_scored_ids(questions: Iterable[QuestionRecord], config: ScoringConfig) -> Set[str]:
    ids = {q.id for q in questions if q.reverse_scored}
    ids.update(config.reverse_scored or [])
    return ids


def score_question(question: QuestionRecord, raw_value: Any, reverse: bool) -> Optional[float]:
    """Contribution of one answer, or None when it matches no option."""
    wanted = normalize_value(raw_value)
    option = next((o for o in question.options if normalize_value(o.value) == wanted), None)
    if option is None:
        return None
    points = float(option.value)
    if reverse:
        points = question.max_option_value - points
    return points


def _sum_scope(
    question_map: Mapping[str, QuestionRecord],
    responses: Mapping[str, Any],
    question_ids: Iterable[str],
    reverse_ids: Set[str],
) -> float:
    total = 0.0
    for question_id in question_ids:
        question = question_map.get(question_id)
        if question is None:
            continue
        raw_value = responses.get(question_id)
        if raw_value is None:
            continue
        points = score_question(question, raw_value, question_id in reverse_ids)
        if points is None:
            continue
        total += points
    return total


def score(
    questions: Sequence[QuestionRecord],
    responses: Mapping[str, Any],
    config: ScoringConfig,
) -> ScoreReport:
    question_map: Dict[str, QuestionRecord] = {q.id: q for q in questions}
    reverse_ids = reverse_scored_ids(questions, config)

    total = _sum_scope(question_map, responses, list(responses.keys()), reverse_ids)

    domain_scores: Optional[Dict[str, DomainScore]] = None
    if config.domains:
        domain_scores = {}
        for domain in config.domains:
            domain_total = _sum_scope(question_map, responses, domain.question_ids, reverse_ids)
            domain_scores[domain.id] = DomainScore(
                score=_as_number(domain_total),
                normalized=normalize_score(domain_total, domain.max_score),
                interpretation=interpret(domain_total, domain.interpretation_bands),
            )

    return ScoreReport(
        total_score=_as_number(total),
        normalized_score=normalize_score(total, config.max_score),
        interpretation=interpret(total, config.interpretation_bands),
        domain_scores=domain_scores,
    )
