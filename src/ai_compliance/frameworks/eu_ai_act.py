"""
EU AI Act Risk Classifier

Turns the three-part questionnaire (prohibited practices, Annex III
high-risk categories, transparency questions) into a risk tier plus the
obligations that come with it.

Precedence is strict, first match wins, no blending:
1. Any prohibited practice  -> PROHIBITED
2. Any high-risk category   -> HIGH_RISK
3. Any limited-risk trigger -> LIMITED_RISK
4. Otherwise                -> MINIMAL_RISK

The wizard (EUWizard) walks the questionnaire step by step and may jump
straight to the result, but always computes the verdict through classify()
so the shortcut and the full walk cannot diverge.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from .._types import RiskTier, HighRiskCategory
from ..errors import InvalidAnswerError, IncompleteStepError
from .schema import EUAnswers, EUVerdict
from .catalog import PROHIBITED_QUESTIONS, PROHIBITED_IDS, LIMITED_RISK_IDS

logger = logging.getLogger(__name__)


HIGH_RISK_REQUIREMENTS: List[str] = [
    "Risk management system required",
    "Data governance measures required",
    "Technical documentation required",
    "Record-keeping obligations",
    "Transparency requirements",
    "Human oversight required",
    "Accuracy, robustness, and cybersecurity measures required",
    "Conformity assessment required before deployment",
    "CE marking required",
]

HIGH_RISK_OBLIGATIONS: List[str] = [
    "Users must be informed they are interacting with an AI system",
    "Capabilities and limitations must be disclosed",
    "Instructions for use must be provided",
]

LIMITED_RISK_OBLIGATIONS: List[str] = [
    "Users must be informed they are interacting with an AI system",
    "Generated or manipulated content must be disclosed",
    "Content must be marked in a machine-readable format",
]

PROHIBITED_OBLIGATIONS: List[str] = [
    "This AI system is prohibited under the EU AI Act and cannot be deployed",
]

MINIMAL_RISK_OBLIGATIONS: List[str] = [
    "No specific EU AI Act obligations beyond general legal compliance",
]


def validate_answers(answers: EUAnswers) -> None:
    """
    Reject answer sheets keyed by ids outside the catalog.

    Raises:
        InvalidAnswerError: If an unknown question id is present
    """
    unknown = set(answers.prohibited) - set(PROHIBITED_IDS)
    if unknown:
        raise InvalidAnswerError(f"Unknown prohibited-practice questions: {sorted(unknown)}")

    unknown = set(answers.limited_risk) - set(LIMITED_RISK_IDS)
    if unknown:
        raise InvalidAnswerError(f"Unknown limited-risk questions: {sorted(unknown)}")


def prohibited_triggers(answers: EUAnswers) -> List[str]:
    """Texts of the prohibited-practice questions answered yes, in catalog order"""
    return [q.text for q in PROHIBITED_QUESTIONS if answers.prohibited.get(q.id) is True]


def classify(answers: EUAnswers) -> EUVerdict:
    """
    Classify an AI system under the EU AI Act.

    Args:
        answers: Prohibited, high-risk and limited-risk answers (may be partial)

    Returns:
        EUVerdict with tier, requirement and obligation lists and flags
    """
    triggers = prohibited_triggers(answers)
    if triggers:
        return EUVerdict(
            risk_tier=RiskTier.PROHIBITED,
            prohibited_trigger="; ".join(triggers),
            compliance_requirements=[],
            transparency_obligations=list(PROHIBITED_OBLIGATIONS),
        )

    if answers.high_risk_categories:
        return EUVerdict(
            risk_tier=RiskTier.HIGH_RISK,
            compliance_requirements=list(HIGH_RISK_REQUIREMENTS),
            transparency_obligations=list(HIGH_RISK_OBLIGATIONS),
            conformity_assessment_needed=True,
            ce_marking_required=True,
            human_oversight_required=True,
        )

    if any(value is True for value in answers.limited_risk.values()):
        return EUVerdict(
            risk_tier=RiskTier.LIMITED_RISK,
            compliance_requirements=[],
            transparency_obligations=list(LIMITED_RISK_OBLIGATIONS),
        )

    return EUVerdict(
        risk_tier=RiskTier.MINIMAL_RISK,
        compliance_requirements=[],
        transparency_obligations=list(MINIMAL_RISK_OBLIGATIONS),
    )


# =============================================================================
# Wizard State Machine
# =============================================================================

class WizardStep(str, Enum):
    """Steps of the EU AI Act questionnaire."""
    PROHIBITED_STEP = "prohibited"
    HIGH_RISK_STEP = "high_risk"
    LIMITED_RISK_STEP = "limited_risk"
    RESULT = "result"


_NEXT_STEP: Dict[WizardStep, WizardStep] = {
    WizardStep.PROHIBITED_STEP: WizardStep.HIGH_RISK_STEP,
    WizardStep.HIGH_RISK_STEP: WizardStep.LIMITED_RISK_STEP,
    WizardStep.LIMITED_RISK_STEP: WizardStep.RESULT,
}

_PREVIOUS_STEP: Dict[WizardStep, WizardStep] = {
    WizardStep.HIGH_RISK_STEP: WizardStep.PROHIBITED_STEP,
    WizardStep.LIMITED_RISK_STEP: WizardStep.HIGH_RISK_STEP,
}


class EUWizard:
    """
    Step-by-step EU AI Act questionnaire.

    Transitions:
        PROHIBITED_STEP  --any yes-->        RESULT
        PROHIBITED_STEP  --all no-->         HIGH_RISK_STEP
        HIGH_RISK_STEP   --any category-->   RESULT
        HIGH_RISK_STEP   --none-->           LIMITED_RISK_STEP
        LIMITED_RISK_STEP ------------->     RESULT

    Example usage:
        wizard = EUWizard()
        for qid in PROHIBITED_IDS:
            wizard.answer_prohibited(qid, False)
        wizard.advance()                      # -> HIGH_RISK_STEP
        wizard.select_category(HighRiskCategory.LAW_ENFORCEMENT)
        wizard.advance()                      # -> RESULT
        wizard.verdict.risk_tier              # "HIGH_RISK"
    """

    def __init__(self):
        self.step = WizardStep.PROHIBITED_STEP
        self.prohibited: Dict[str, bool] = {}
        self.high_risk_categories: List[HighRiskCategory] = []
        self.limited_risk: Dict[str, bool] = {}
        self.notes: str = ""
        self.verdict: Optional[EUVerdict] = None

    # ------------------------------------------------------------------
    # Answering
    # ------------------------------------------------------------------

    def answer_prohibited(self, question_id: str, value: bool) -> None:
        if question_id not in PROHIBITED_IDS:
            raise InvalidAnswerError(f"Unknown prohibited-practice question: {question_id}")
        self.prohibited[question_id] = bool(value)

    def answer_limited_risk(self, question_id: str, value: bool) -> None:
        if question_id not in LIMITED_RISK_IDS:
            raise InvalidAnswerError(f"Unknown limited-risk question: {question_id}")
        self.limited_risk[question_id] = bool(value)

    def select_category(self, category: HighRiskCategory, selected: bool = True) -> None:
        category = HighRiskCategory(category)
        if selected and category not in self.high_risk_categories:
            self.high_risk_categories.append(category)
        elif not selected and category in self.high_risk_categories:
            self.high_risk_categories.remove(category)

    @property
    def answers(self) -> EUAnswers:
        return EUAnswers(
            prohibited=dict(self.prohibited),
            high_risk_categories=list(self.high_risk_categories),
            limited_risk=dict(self.limited_risk),
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def can_advance(self) -> bool:
        """Whether every question shown on the current step has been answered"""
        if self.step == WizardStep.PROHIBITED_STEP:
            return all(qid in self.prohibited for qid in PROHIBITED_IDS)
        if self.step == WizardStep.HIGH_RISK_STEP:
            return True
        if self.step == WizardStep.LIMITED_RISK_STEP:
            return all(qid in self.limited_risk for qid in LIMITED_RISK_IDS)
        return False

    @property
    def can_go_back(self) -> bool:
        return self.step in _PREVIOUS_STEP

    def advance(self) -> WizardStep:
        """
        Move to the next step, jumping to RESULT when the tier is already decided.

        Raises:
            IncompleteStepError: If the current step still has unanswered questions
        """
        if not self.can_advance:
            raise IncompleteStepError(f"Step '{self.step.value}' has unanswered questions")

        if self.step == WizardStep.PROHIBITED_STEP and any(self.prohibited.values()):
            target = WizardStep.RESULT
        elif self.step == WizardStep.HIGH_RISK_STEP and self.high_risk_categories:
            target = WizardStep.RESULT
        else:
            target = _NEXT_STEP[self.step]

        if target == WizardStep.RESULT:
            self.verdict = classify(self.answers)
            logger.debug(f"EU wizard reached result from {self.step.value}: {self.verdict.risk_tier}")

        self.step = target
        return self.step

    def back(self) -> WizardStep:
        """Return to the previous question step (only from the middle steps)."""
        if self.can_go_back:
            self.step = _PREVIOUS_STEP[self.step]
        return self.step

    def reset(self) -> None:
        """Clear all answers and start a reassessment."""
        self.step = WizardStep.PROHIBITED_STEP
        self.prohibited = {}
        self.high_risk_categories = []
        self.limited_risk = {}
        self.notes = ""
        self.verdict = None
