"""
Multi-Framework Assessment Service

Runs the three scorers against an AI system and persists the results.
This is the save path around the pure scoring functions.

Key responsibilities:
1. Guard saves (assessor required, answers valid) before touching the store
2. Build immutable assessment records, optionally signed
3. Keep the system's risk_classification in step with its latest EU verdict
4. Merge the latest result per framework into a coverage summary
5. Count systems per EU risk tier across the inventory
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Union, TYPE_CHECKING

from pydantic import ValidationError

from .._types import Framework, RiskTier
from ..errors import AssessmentValidationError, InvalidAnswerError, IncompleteStepError
from .. import crypto
from .schema import (
    AssessmentRecord,
    EUAnswers,
    EUAssessment,
    UKAssessment,
    NISTAssessment,
    FrameworkCoverage,
    CoverageSummary,
    RiskDistribution,
)
from .catalog import CATALOG_VERSION
from . import eu_ai_act, uk_principles, nist_rmf

if TYPE_CHECKING:
    from ..assessment_db import AssessmentStore

logger = logging.getLogger(__name__)


class FrameworkService:
    """
    Service for assessing AI systems against the EU, UK and NIST frameworks.

    Example usage:
        service = FrameworkService(AssessmentDatabase("inventory.db"))

        # EU AI Act: also updates the system's risk_classification
        record = service.assess_eu(
            system.system_id,
            {"limited_risk": {"human_interaction": True}},
            assessed_by="jane.doe",
        )
        # record.risk_tier == "LIMITED_RISK"

        # Cross-framework view
        coverage = service.coverage(system.system_id)
        coverage.summary  # "EU AI Act: LIMITED_RISK"
    """

    def __init__(
        self,
        store: "AssessmentStore",
        signer: Optional[crypto.Ed25519Signer] = None,
        catalog_version: str = CATALOG_VERSION,
    ):
        """
        Initialize the assessment service.

        Args:
            store: Record store (AssessmentDatabase or any AssessmentStore)
            signer: Signs every new record when given
            catalog_version: Catalog version stamped on new records
        """
        self.store = store
        self.signer = signer
        self.catalog_version = catalog_version

    # =========================================================================
    # Save guards
    # =========================================================================

    def _require_assessor(self, assessed_by: Optional[str]) -> str:
        if assessed_by is None or not assessed_by.strip():
            raise AssessmentValidationError("Assessor name is required")
        return assessed_by.strip()

    def _finalize(self, record: AssessmentRecord) -> AssessmentRecord:
        if self.signer is not None:
            record = crypto.sign_assessment(record, self.signer)
        return record

    def _coerce_eu_answers(self, answers: Union[EUAnswers, Mapping[str, Any]]) -> EUAnswers:
        if isinstance(answers, EUAnswers):
            return answers
        try:
            return EUAnswers.model_validate(dict(answers))
        except ValidationError as e:
            raise InvalidAnswerError(f"Invalid EU AI Act answers: {e}") from e

    # =========================================================================
    # EU AI Act
    # =========================================================================

    def assess_eu(
        self,
        system_id: str,
        answers: Union[EUAnswers, Mapping[str, Any]],
        assessed_by: str,
        notes: Optional[str] = None,
    ) -> EUAssessment:
        """
        Classify a system under the EU AI Act and save the result.

        The record insert and the system's risk_classification update are
        committed together; on failure neither is visible.

        Raises:
            AssessmentValidationError: Assessor is blank
            InvalidAnswerError: Unknown question id or category
            SystemNotFoundError: System does not exist
            PersistenceError: Store failure
        """
        assessed_by = self._require_assessor(assessed_by)
        answers = self._coerce_eu_answers(answers)
        eu_ai_act.validate_answers(answers)

        verdict = eu_ai_act.classify(answers)
        record = self._finalize(EUAssessment(
            system_id=system_id,
            assessed_by=assessed_by,
            notes=notes or None,
            catalog_version=self.catalog_version,
            verdict=verdict,
            answers=answers,
        ))

        save_eu = getattr(self.store, "save_eu_assessment", None)
        if save_eu is not None:
            save_eu(record)
        else:
            # Plain AssessmentStore: two writes, no shared transaction
            self.store.create(record)
            self.store.update_system_classification(system_id, RiskTier(verdict.risk_tier), assessed_by)

        return record

    def assess_eu_wizard(
        self,
        system_id: str,
        wizard: eu_ai_act.EUWizard,
        assessed_by: str,
    ) -> EUAssessment:
        """
        Save the outcome of a completed wizard walk.

        Raises:
            IncompleteStepError: Wizard has not reached the result step
        """
        if wizard.step != eu_ai_act.WizardStep.RESULT:
            raise IncompleteStepError(f"Wizard is still on step '{wizard.step.value}'")
        return self.assess_eu(system_id, wizard.answers, assessed_by, notes=wizard.notes)

    # =========================================================================
    # UK AI Regulation
    # =========================================================================

    def assess_uk(
        self,
        system_id: str,
        answers: Mapping[str, Mapping[str, str]],
        assessed_by: str,
        notes: Optional[str] = None,
        sector_specific_requirements: Optional[List[str]] = None,
    ) -> UKAssessment:
        """
        Score a system against the UK AI principles and save the result.

        Raises:
            AssessmentValidationError: Assessor is blank
            InvalidAnswerError: Unknown principle/question id or level
        """
        assessed_by = self._require_assessor(assessed_by)
        normalized = uk_principles.normalize_answers(answers)

        verdict = uk_principles.score(normalized)
        record = self._finalize(UKAssessment(
            system_id=system_id,
            assessed_by=assessed_by,
            notes=notes or None,
            catalog_version=self.catalog_version,
            verdict=verdict,
            answers=normalized,
            sector_specific_requirements=list(sector_specific_requirements or []),
        ))
        self.store.create(record)
        logger.info(
            f"UK assessment {record.assessment_id} for {system_id}: "
            f"{verdict.overall_score:.1f}%"
        )
        return record

    # =========================================================================
    # NIST AI RMF
    # =========================================================================

    def assess_nist(
        self,
        system_id: str,
        answers: Mapping[str, Mapping[str, float]],
        assessed_by: str,
        notes: Optional[str] = None,
        trustworthy_characteristics: Optional[Dict[str, Any]] = None,
    ) -> NISTAssessment:
        """
        Score a system's NIST AI RMF maturity and save the result.

        Raises:
            AssessmentValidationError: Assessor is blank
            InvalidAnswerError: Unknown function/question id or off-scale value
        """
        assessed_by = self._require_assessor(assessed_by)
        normalized = nist_rmf.normalize_answers(answers)

        verdict = nist_rmf.score(normalized)
        record = self._finalize(NISTAssessment(
            system_id=system_id,
            assessed_by=assessed_by,
            notes=notes or None,
            catalog_version=self.catalog_version,
            verdict=verdict,
            answers=normalized,
            trustworthy_characteristics=dict(trustworthy_characteristics or {}),
        ))
        self.store.create(record)
        logger.info(
            f"NIST assessment {record.assessment_id} for {system_id}: "
            f"{verdict.overall_score:.2f} ({verdict.maturity_level})"
        )
        return record

    # =========================================================================
    # Aggregation
    # =========================================================================

    def latest(self, framework: Framework, system_id: str) -> Optional[AssessmentRecord]:
        return self.store.find_latest(framework, system_id)

    def coverage(self, system_id: str) -> CoverageSummary:
        """
        Latest result per framework for one system.

        Each framework is looked up independently; a missing assessment is
        reported as not present rather than as an error.
        """
        entries: List[FrameworkCoverage] = []
        for framework in Framework:
            record = self.store.find_latest(framework, system_id)
            if record is None:
                entries.append(FrameworkCoverage(framework=framework))
                continue
            entries.append(FrameworkCoverage(
                framework=framework,
                present=True,
                headline=record.headline,
                assessment_id=record.assessment_id,
                assessment_date=record.assessment_date,
            ))
        return CoverageSummary(system_id=system_id, frameworks=entries)

    def risk_distribution(self) -> RiskDistribution:
        """
        Count systems per risk_classification across the inventory.

        Requires a store that can count (AssessmentDatabase).
        """
        by_tier = self.store.count_systems_by_classification()
        counts = {tier.value: by_tier.get(tier.value, 0) for tier in RiskTier}
        return RiskDistribution(
            total_systems=sum(by_tier.values()),
            total_assessments=self.store.count_assessments(Framework.EU_AI_ACT),
            counts=counts,
        )

    # =========================================================================
    # Signatures
    # =========================================================================

    def verify(self, record: AssessmentRecord) -> bool:
        """Check a record against this service's signing key."""
        if self.signer is None:
            raise ValueError("No signing key configured")
        verifier = crypto.Ed25519Verifier(self.signer.get_public_key_bytes())
        return crypto.verify_assessment(record, verifier)


# Global singleton instance
_framework_service: Optional[FrameworkService] = None


def get_framework_service() -> FrameworkService:
    """
    Get the global FrameworkService instance.

    Creates the instance on first call from the environment configuration.
    """
    global _framework_service
    if _framework_service is None:
        from ..config import load_config
        from ..assessment_db import AssessmentDatabase

        config = load_config()
        signer = None
        if config.sign_assessments:
            crypto.ensure_signing_key(config.signing_key_file)
            signer = crypto.Ed25519Signer(config.signing_key_file)
        _framework_service = FrameworkService(AssessmentDatabase(str(config.db_path)), signer=signer)
    return _framework_service
