"""
NIST AI RMF Maturity Scorer

Scores the four AI RMF core functions (Govern, Map, Measure, Manage) from a
4x4 questionnaire on a 0-5 scale in half-point steps, then buckets the
overall mean into a maturity level.
"""

import logging
from typing import Dict, List, Mapping

from .._types import MaturityLevel
from ..errors import InvalidAnswerError
from .schema import NISTAnswers, NISTVerdict
from .catalog import NIST_FUNCTIONS, NIST_FUNCTIONS_BY_ID

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 5.0
SCORE_STEP = 0.5

# Inclusive upper bound of each maturity bucket; above the last -> OPTIMISING
MATURITY_THRESHOLDS = [
    (1.5, MaturityLevel.INITIAL),
    (2.5, MaturityLevel.DEVELOPING),
    (3.5, MaturityLevel.DEFINED),
    (4.5, MaturityLevel.MANAGED),
]

# Recommendation thresholds
BASIC_PROCESS_THRESHOLD = 2.0
STRENGTHEN_PROCESS_THRESHOLD = 3.5


def normalize_answers(raw: Mapping[str, Mapping[str, float]]) -> NISTAnswers:
    """
    Validate a raw answer sheet against the catalog and the 0-5 half-step scale.

    Raises:
        InvalidAnswerError: Unknown function/question id or out-of-scale value
    """
    answers: NISTAnswers = {}
    for function_id, responses in raw.items():
        function = NIST_FUNCTIONS_BY_ID.get(function_id)
        if function is None:
            raise InvalidAnswerError(f"Unknown NIST AI RMF function: {function_id}")

        if responses is not None and not isinstance(responses, Mapping):
            raise InvalidAnswerError(f"Answers for {function_id} must be a mapping of question ids")

        question_ids = {q.id for q in function.questions}
        answers[function_id] = {}
        for question_id, value in (responses or {}).items():
            if question_id not in question_ids:
                raise InvalidAnswerError(f"Unknown question {function_id}.{question_id}")
            if isinstance(value, bool):
                raise InvalidAnswerError(f"Score for {function_id}.{question_id} is not a number: {value!r}")
            try:
                value = float(value)
            except (TypeError, ValueError):
                raise InvalidAnswerError(f"Score for {function_id}.{question_id} is not a number: {value!r}")
            if not MIN_SCORE <= value <= MAX_SCORE or (value / SCORE_STEP) != int(value / SCORE_STEP):
                raise InvalidAnswerError(
                    f"Score for {function_id}.{question_id} must be 0-5 in steps of 0.5, got {value}"
                )
            answers[function_id][question_id] = value
    return answers


def function_score(answers: NISTAnswers, function_id: str) -> float:
    """
    Mean of the answered questions for one function.

    A function with no answers scores 0.
    """
    values = list((answers.get(function_id) or {}).values())
    return sum(values) / len(values) if values else 0.0


def overall_score(answers: NISTAnswers) -> float:
    """Mean of the four function scores."""
    scores = [function_score(answers, f.id) for f in NIST_FUNCTIONS]
    return sum(scores) / len(scores) if scores else 0.0


def maturity_for_score(score: float) -> MaturityLevel:
    """Bucket an overall 0-5 score into a maturity level (inclusive upper bounds)"""
    for upper_bound, level in MATURITY_THRESHOLDS:
        if score <= upper_bound:
            return level
    return MaturityLevel.OPTIMISING


def generate_recommendations(answers: NISTAnswers) -> List[str]:
    """One recommendation per function scoring under 3.5, in catalog order."""
    recommendations: List[str] = []
    for function in NIST_FUNCTIONS:
        fn_score = function_score(answers, function.id)
        if fn_score < BASIC_PROCESS_THRESHOLD:
            recommendations.append(
                f"{function.title}: Significant improvement needed - "
                f"establish basic {function.title.lower()} processes"
            )
        elif fn_score < STRENGTHEN_PROCESS_THRESHOLD:
            recommendations.append(
                f"{function.title}: Strengthen existing processes with more systematic approach"
            )
    return recommendations


def score(answers: NISTAnswers) -> NISTVerdict:
    """
    Score a NIST AI RMF questionnaire.

    Args:
        answers: function_id -> question_id -> 0..5

    Returns:
        NISTVerdict with function scores, overall score, maturity and recommendations
    """
    function_scores: Dict[str, float] = {
        f.id: function_score(answers, f.id) for f in NIST_FUNCTIONS
    }
    overall = overall_score(answers)
    verdict = NISTVerdict(
        function_scores=function_scores,
        overall_score=overall,
        maturity_level=maturity_for_score(overall),
        recommendations=generate_recommendations(answers),
    )
    logger.debug(f"NIST AI RMF scored: {overall:.2f} ({verdict.maturity_level})")
    return verdict
