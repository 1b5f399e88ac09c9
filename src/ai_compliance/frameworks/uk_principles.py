"""
UK AI Regulation Principle Scorer

Scores the five cross-sector UK AI principles from a 5x5 questionnaire on a
three-level implementation scale (0, 1 or 2 points per question).

An unanswered question contributes zero points; the denominator is always
question_count * 2, so skipping a question scores the same as NOT_ADDRESSED.
"""

import logging
from typing import Dict, List, Mapping

from .._types import ImplementationLevel
from ..errors import InvalidAnswerError
from .schema import UKAnswers, UKVerdict
from .catalog import UK_PRINCIPLES, UK_PRINCIPLES_BY_ID

logger = logging.getLogger(__name__)

# Principles below this percentage are reported as low-compliance gaps
LOW_COMPLIANCE_THRESHOLD = 50.0

# Re-bucketing thresholds for stored principle levels
FULLY_ADDRESSED_THRESHOLD = 75.0
PARTIALLY_ADDRESSED_THRESHOLD = 40.0


def normalize_answers(raw: Mapping[str, Mapping[str, str]]) -> UKAnswers:
    """
    Validate a raw answer sheet against the catalog and coerce levels.

    Raises:
        InvalidAnswerError: Unknown principle/question id or level value
    """
    answers: UKAnswers = {}
    for principle_id, responses in raw.items():
        principle = UK_PRINCIPLES_BY_ID.get(principle_id)
        if principle is None:
            raise InvalidAnswerError(f"Unknown UK principle: {principle_id}")

        if responses is not None and not isinstance(responses, Mapping):
            raise InvalidAnswerError(f"Answers for {principle_id} must be a mapping of question ids")

        question_ids = {q.id for q in principle.questions}
        answers[principle_id] = {}
        for question_id, level in (responses or {}).items():
            if question_id not in question_ids:
                raise InvalidAnswerError(f"Unknown question {principle_id}.{question_id}")
            try:
                answers[principle_id][question_id] = ImplementationLevel(level)
            except ValueError:
                raise InvalidAnswerError(
                    f"Invalid implementation level for {principle_id}.{question_id}: {level!r}"
                )
    return answers


def principle_score(answers: UKAnswers, principle_id: str) -> float:
    """
    Percentage score (0-100) for one principle.

    Args:
        answers: Answer sheet (may be partial)
        principle_id: Catalog principle id

    Returns:
        Points earned / (question_count * 2) * 100
    """
    principle = UK_PRINCIPLES_BY_ID[principle_id]
    max_score = len(principle.questions) * 2
    if max_score == 0:
        return 0.0

    responses = answers.get(principle_id) or {}
    actual = sum(ImplementationLevel(level).points for level in responses.values())
    return actual / max_score * 100


def overall_score(answers: UKAnswers) -> float:
    """Mean of all five principle scores; unanswered principles count as 0."""
    scores = [principle_score(answers, p.id) for p in UK_PRINCIPLES]
    return sum(scores) / len(scores) if scores else 0.0


def level_for_score(score: float) -> ImplementationLevel:
    """Re-bucket a principle percentage into an implementation level for storage"""
    if score >= FULLY_ADDRESSED_THRESHOLD:
        return ImplementationLevel.FULLY_ADDRESSED
    if score >= PARTIALLY_ADDRESSED_THRESHOLD:
        return ImplementationLevel.PARTIALLY_ADDRESSED
    return ImplementationLevel.NOT_ADDRESSED


def identify_gaps(answers: UKAnswers) -> List[str]:
    """
    List low-compliance principles and every unaddressed question.

    Per principle (catalog order): a "Low compliance" line when the principle
    scores under 50%, followed by one line per question that is unanswered
    or NOT_ADDRESSED.
    """
    gaps: List[str] = []
    for principle in UK_PRINCIPLES:
        score = principle_score(answers, principle.id)
        if score < LOW_COMPLIANCE_THRESHOLD:
            gaps.append(f"{principle.title}: Low compliance ({score:.1f}%)")

        responses = answers.get(principle.id) or {}
        for idx, question in enumerate(principle.questions, start=1):
            level = responses.get(question.id)
            if level is None or level == ImplementationLevel.NOT_ADDRESSED:
                gaps.append(f"{principle.title} - Question {idx}: Not addressed")
    return gaps


def score(answers: UKAnswers) -> UKVerdict:
    """
    Score a UK AI regulation questionnaire.

    Args:
        answers: principle_id -> question_id -> ImplementationLevel

    Returns:
        UKVerdict with per-principle scores and levels, overall score and gaps
    """
    principle_scores: Dict[str, float] = {
        p.id: principle_score(answers, p.id) for p in UK_PRINCIPLES
    }
    verdict = UKVerdict(
        principle_scores=principle_scores,
        principle_levels={pid: level_for_score(s) for pid, s in principle_scores.items()},
        overall_score=overall_score(answers),
        gaps=identify_gaps(answers),
    )
    logger.debug(f"UK principles scored: overall {verdict.overall_score:.1f}%")
    return verdict
