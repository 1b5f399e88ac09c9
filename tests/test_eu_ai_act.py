"""
Tests for the EU AI Act risk classifier and wizard.

Tests cover:
- Tier precedence for every combination of triggers
- Fixed requirement/obligation lists per tier
- Prohibited trigger text ordering
- Wizard step gating, shortcuts, back and reset
"""

import itertools

import pytest

from ai_compliance._types import RiskTier, HighRiskCategory
from ai_compliance.errors import InvalidAnswerError, IncompleteStepError
from ai_compliance.frameworks.catalog import PROHIBITED_IDS, LIMITED_RISK_IDS, PROHIBITED_QUESTIONS
from ai_compliance.frameworks.schema import EUAnswers
from ai_compliance.frameworks.eu_ai_act import (
    classify,
    validate_answers,
    prohibited_triggers,
    EUWizard,
    WizardStep,
    HIGH_RISK_REQUIREMENTS,
    HIGH_RISK_OBLIGATIONS,
    LIMITED_RISK_OBLIGATIONS,
)


def all_no(ids):
    return {qid: False for qid in ids}


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def wizard():
    return EUWizard()


@pytest.fixture
def wizard_at_high_risk(wizard):
    for qid in PROHIBITED_IDS:
        wizard.answer_prohibited(qid, False)
    wizard.advance()
    return wizard


# =============================================================================
# Classification
# =============================================================================

class TestClassify:
    """Tests for classify()"""

    @pytest.mark.parametrize(
        "prohibited,high_risk,limited",
        list(itertools.product([False, True], repeat=3)),
    )
    def test_precedence(self, prohibited, high_risk, limited):
        """First matching tier wins for every trigger combination"""
        answers = EUAnswers(
            prohibited={**all_no(PROHIBITED_IDS), "social_scoring": prohibited},
            high_risk_categories=[HighRiskCategory.LAW_ENFORCEMENT] if high_risk else [],
            limited_risk={**all_no(LIMITED_RISK_IDS), "content_generation": limited},
        )

        verdict = classify(answers)

        if prohibited:
            expected = RiskTier.PROHIBITED
        elif high_risk:
            expected = RiskTier.HIGH_RISK
        elif limited:
            expected = RiskTier.LIMITED_RISK
        else:
            expected = RiskTier.MINIMAL_RISK
        assert verdict.risk_tier == expected

    def test_limited_risk_scenario(self):
        answers = EUAnswers(
            prohibited=all_no(PROHIBITED_IDS),
            high_risk_categories=[],
            limited_risk={**all_no(LIMITED_RISK_IDS), "human_interaction": True},
        )

        verdict = classify(answers)

        assert verdict.risk_tier == RiskTier.LIMITED_RISK
        assert verdict.transparency_obligations == LIMITED_RISK_OBLIGATIONS
        assert len(verdict.transparency_obligations) == 3
        assert verdict.compliance_requirements == []
        assert verdict.conformity_assessment_needed is False
        assert verdict.ce_marking_required is False
        assert verdict.human_oversight_required is False

    def test_high_risk_scenario(self):
        answers = EUAnswers(
            prohibited=all_no(PROHIBITED_IDS),
            high_risk_categories=[HighRiskCategory.BIOMETRIC_IDENTIFICATION],
        )

        verdict = classify(answers)

        assert verdict.risk_tier == RiskTier.HIGH_RISK
        assert verdict.compliance_requirements == HIGH_RISK_REQUIREMENTS
        assert len(verdict.compliance_requirements) == 9
        assert verdict.transparency_obligations == HIGH_RISK_OBLIGATIONS
        assert verdict.conformity_assessment_needed is True
        assert verdict.ce_marking_required is True
        assert verdict.human_oversight_required is True

    def test_prohibited_verdict(self):
        answers = EUAnswers(
            prohibited={**all_no(PROHIBITED_IDS), "subliminal": True},
            high_risk_categories=[HighRiskCategory.OTHER],
            limited_risk={"human_interaction": True},
        )

        verdict = classify(answers)

        assert verdict.risk_tier == RiskTier.PROHIBITED
        assert verdict.compliance_requirements == []
        assert verdict.transparency_obligations == [
            "This AI system is prohibited under the EU AI Act and cannot be deployed"
        ]
        assert verdict.conformity_assessment_needed is False
        assert verdict.ce_marking_required is False
        assert verdict.human_oversight_required is False

    def test_prohibited_trigger_in_catalog_order(self):
        """Trigger text follows catalog order, not answer order"""
        answers = EUAnswers(prohibited={"realtime_biometric": True, "subliminal": True})

        verdict = classify(answers)

        texts = {q.id: q.text for q in PROHIBITED_QUESTIONS}
        assert verdict.prohibited_trigger == f"{texts['subliminal']}; {texts['realtime_biometric']}"

    def test_minimal_risk_on_empty_answers(self):
        verdict = classify(EUAnswers())

        assert verdict.risk_tier == RiskTier.MINIMAL_RISK
        assert verdict.transparency_obligations == [
            "No specific EU AI Act obligations beyond general legal compliance"
        ]
        assert verdict.prohibited_trigger is None

    def test_prohibited_triggers_ignores_false(self):
        answers = EUAnswers(prohibited=all_no(PROHIBITED_IDS))
        assert prohibited_triggers(answers) == []

    def test_classify_is_deterministic(self):
        answers = EUAnswers(high_risk_categories=[HighRiskCategory.ESSENTIAL_SERVICES])
        assert classify(answers) == classify(answers)


class TestValidateAnswers:
    """Tests for answer sheet validation"""

    def test_unknown_prohibited_id(self):
        with pytest.raises(InvalidAnswerError):
            validate_answers(EUAnswers(prohibited={"mind_reading": True}))

    def test_unknown_limited_id(self):
        with pytest.raises(InvalidAnswerError):
            validate_answers(EUAnswers(limited_risk={"telepathy": False}))

    def test_known_ids_pass(self):
        validate_answers(EUAnswers(
            prohibited=all_no(PROHIBITED_IDS),
            limited_risk=all_no(LIMITED_RISK_IDS),
        ))


# =============================================================================
# Wizard
# =============================================================================

class TestWizardGating:
    """Tests for can_advance and IncompleteStepError"""

    def test_starts_on_prohibited_step(self, wizard):
        assert wizard.step == WizardStep.PROHIBITED_STEP
        assert wizard.verdict is None

    def test_prohibited_step_needs_all_answers(self, wizard):
        for qid in PROHIBITED_IDS[:-1]:
            wizard.answer_prohibited(qid, False)

        assert wizard.can_advance is False
        with pytest.raises(IncompleteStepError):
            wizard.advance()

        wizard.answer_prohibited(PROHIBITED_IDS[-1], False)
        assert wizard.can_advance is True

    def test_high_risk_step_always_advances(self, wizard_at_high_risk):
        assert wizard_at_high_risk.step == WizardStep.HIGH_RISK_STEP
        assert wizard_at_high_risk.can_advance is True

    def test_limited_step_needs_all_answers(self, wizard_at_high_risk):
        wizard = wizard_at_high_risk
        wizard.advance()
        assert wizard.step == WizardStep.LIMITED_RISK_STEP

        wizard.answer_limited_risk("human_interaction", False)
        assert wizard.can_advance is False
        with pytest.raises(IncompleteStepError):
            wizard.advance()

    def test_cannot_advance_from_result(self, wizard):
        wizard.answer_prohibited("subliminal", True)
        for qid in PROHIBITED_IDS[1:]:
            wizard.answer_prohibited(qid, False)
        wizard.advance()

        assert wizard.step == WizardStep.RESULT
        assert wizard.can_advance is False

    def test_unknown_question_rejected(self, wizard):
        with pytest.raises(InvalidAnswerError):
            wizard.answer_prohibited("unknown", True)
        with pytest.raises(InvalidAnswerError):
            wizard.answer_limited_risk("unknown", True)


class TestWizardTransitions:
    """Tests for shortcuts and the full walk"""

    def test_prohibited_shortcut(self, wizard):
        for qid in PROHIBITED_IDS:
            wizard.answer_prohibited(qid, qid == "social_scoring")

        assert wizard.advance() == WizardStep.RESULT
        assert wizard.verdict.risk_tier == RiskTier.PROHIBITED

    def test_high_risk_shortcut(self, wizard_at_high_risk):
        wizard = wizard_at_high_risk
        wizard.select_category(HighRiskCategory.CRITICAL_INFRASTRUCTURE)

        assert wizard.advance() == WizardStep.RESULT
        assert wizard.verdict.risk_tier == RiskTier.HIGH_RISK

    def test_full_walk(self, wizard_at_high_risk):
        wizard = wizard_at_high_risk
        assert wizard.advance() == WizardStep.LIMITED_RISK_STEP

        for qid in LIMITED_RISK_IDS:
            wizard.answer_limited_risk(qid, False)

        assert wizard.advance() == WizardStep.RESULT
        assert wizard.verdict.risk_tier == RiskTier.MINIMAL_RISK

    def test_shortcut_matches_full_classification(self, wizard_at_high_risk):
        """Shortcut verdict equals classify() over the complete answer set"""
        wizard = wizard_at_high_risk
        wizard.select_category(HighRiskCategory.MIGRATION_ASYLUM)
        wizard.advance()

        full = EUAnswers(
            prohibited=all_no(PROHIBITED_IDS),
            high_risk_categories=[HighRiskCategory.MIGRATION_ASYLUM],
            limited_risk={qid: True for qid in LIMITED_RISK_IDS},
        )
        assert wizard.verdict == classify(full)

    def test_deselect_category(self, wizard_at_high_risk):
        wizard = wizard_at_high_risk
        wizard.select_category(HighRiskCategory.OTHER)
        wizard.select_category(HighRiskCategory.OTHER, selected=False)

        assert wizard.advance() == WizardStep.LIMITED_RISK_STEP

    def test_select_category_is_idempotent(self, wizard):
        wizard.select_category(HighRiskCategory.OTHER)
        wizard.select_category(HighRiskCategory.OTHER)
        assert wizard.answers.high_risk_categories == [HighRiskCategory.OTHER]


class TestWizardBackAndReset:
    """Tests for back() and reset()"""

    def test_back_from_high_risk(self, wizard_at_high_risk):
        assert wizard_at_high_risk.back() == WizardStep.PROHIBITED_STEP

    def test_back_keeps_answers(self, wizard_at_high_risk):
        wizard = wizard_at_high_risk
        wizard.back()
        assert wizard.can_advance is True

    def test_back_on_first_step_is_noop(self, wizard):
        assert wizard.can_go_back is False
        assert wizard.back() == WizardStep.PROHIBITED_STEP

    def test_back_from_result_is_noop(self, wizard_at_high_risk):
        wizard = wizard_at_high_risk
        wizard.select_category(HighRiskCategory.OTHER)
        wizard.advance()

        assert wizard.back() == WizardStep.RESULT

    def test_reset(self, wizard_at_high_risk):
        wizard = wizard_at_high_risk
        wizard.select_category(HighRiskCategory.OTHER)
        wizard.notes = "first pass"
        wizard.advance()

        wizard.reset()

        assert wizard.step == WizardStep.PROHIBITED_STEP
        assert wizard.verdict is None
        assert wizard.notes == ""
        assert wizard.prohibited == {}
        assert wizard.high_risk_categories == []
        assert wizard.limited_risk == {}
