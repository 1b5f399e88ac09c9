"""
Multi-Framework AI Assessment Schema.

Design Principle: Same AI system → one verdict per regulatory framework.
A chatbot can be LIMITED_RISK under the EU AI Act, 62% compliant with the
UK AI principles and DEVELOPING on the NIST AI RMF at the same time.

This module defines the data models for:
- Question catalog entries (EU, UK, NIST)
- Answer sheets per framework
- Verdicts produced by the scorers
- Immutable assessment records
- Per-system coverage and inventory risk distribution
"""

from typing import List, Dict, Optional, Any
from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime

from .._types import (
    Framework,
    RiskTier,
    HighRiskCategory,
    ImplementationLevel,
    MaturityLevel,
    FRAMEWORK_LABELS,
    now_utc,
    generate_id,
)


# =============================================================================
# Question Catalog Entries
# =============================================================================

class ProhibitedQuestion(BaseModel):
    """EU AI Act Article 5 prohibited-practice question."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    explanation: str


class HighRiskCategoryInfo(BaseModel):
    """EU AI Act Annex III high-risk category with examples."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: HighRiskCategory
    title: str
    description: str
    examples: List[str] = Field(default_factory=list)


class LimitedRiskQuestion(BaseModel):
    """EU AI Act transparency (limited risk) question."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str


class PrincipleQuestion(BaseModel):
    """Single question under a UK AI regulation principle."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str


class UKPrinciple(BaseModel):
    """
    One of the five UK AI regulation principles.

    Examples:
    - safety_security_robustness
    - contestability_redress
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    questions: List[PrincipleQuestion]


class NISTQuestion(BaseModel):
    """Single 0-5 maturity question under a NIST AI RMF function."""
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    tooltip: str = ""


class NISTFunction(BaseModel):
    """One of the four NIST AI RMF core functions (Govern, Map, Measure, Manage)."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    questions: List[NISTQuestion]


# =============================================================================
# Answer Sheets
# =============================================================================

class EUAnswers(BaseModel):
    """
    Answers to the EU AI Act wizard.

    A question is answered when its id is present, even if the value is False.
    """
    model_config = ConfigDict(use_enum_values=True, extra="forbid")

    prohibited: Dict[str, bool] = Field(default_factory=dict)
    high_risk_categories: List[HighRiskCategory] = Field(default_factory=list)
    limited_risk: Dict[str, bool] = Field(default_factory=dict)


# UK: principle_id -> question_id -> level
UKAnswers = Dict[str, Dict[str, ImplementationLevel]]

# NIST: function_id -> question_id -> 0..5
NISTAnswers = Dict[str, Dict[str, float]]


# =============================================================================
# Verdicts
# =============================================================================

class EUVerdict(BaseModel):
    """Outcome of EU AI Act risk classification."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    risk_tier: RiskTier
    prohibited_trigger: Optional[str] = None
    compliance_requirements: List[str] = Field(default_factory=list)
    transparency_obligations: List[str] = Field(default_factory=list)
    conformity_assessment_needed: bool = False
    ce_marking_required: bool = False
    human_oversight_required: bool = False


class UKVerdict(BaseModel):
    """Outcome of UK AI principle scoring (percentages 0-100)."""
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    principle_scores: Dict[str, float] = Field(default_factory=dict)
    principle_levels: Dict[str, ImplementationLevel] = Field(default_factory=dict)
    overall_score: float = 0.0
    gaps: List[str] = Field(default_factory=list)


class NISTVerdict(BaseModel):
    """Outcome of NIST AI RMF maturity scoring (scores 0-5)."""
    model_config = ConfigDict(frozen=True, use_enum_values=True, validate_default=True)

    function_scores: Dict[str, float] = Field(default_factory=dict)
    overall_score: float = 0.0
    maturity_level: MaturityLevel = MaturityLevel.INITIAL
    recommendations: List[str] = Field(default_factory=list)


# =============================================================================
# Assessment Records
# =============================================================================

class AssessmentRecord(BaseModel):
    """
    Base for an immutable assessment of one system against one framework.

    A reassessment creates a new record; the latest by assessment_date
    is authoritative for the system.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True, validate_default=True)

    assessment_id: str = Field(default_factory=generate_id)
    system_id: str
    framework: Framework
    assessed_by: str
    notes: Optional[str] = None
    assessment_date: datetime = Field(default_factory=now_utc)

    # Catalog version the raw answer snapshot is keyed against
    catalog_version: str

    # Ed25519 signature (hex) over signable_payload(), if signing is enabled
    signature: Optional[str] = None

    def signable_payload(self) -> Dict[str, Any]:
        """Canonical record content covered by the signature."""
        return self.model_dump(mode="json", exclude={"signature"})

    @property
    def headline(self) -> str:
        raise NotImplementedError


class EUAssessment(AssessmentRecord):
    """EU AI Act assessment record."""
    framework: Framework = Framework.EU_AI_ACT
    verdict: EUVerdict
    answers: EUAnswers

    @property
    def risk_tier(self) -> str:
        return RiskTier(self.verdict.risk_tier).value

    @property
    def headline(self) -> str:
        return self.risk_tier


class UKAssessment(AssessmentRecord):
    """UK AI regulation principles assessment record."""
    framework: Framework = Framework.UK_AI_REGULATION
    verdict: UKVerdict
    answers: UKAnswers = Field(default_factory=dict)
    sector_specific_requirements: List[str] = Field(default_factory=list)

    @property
    def overall_compliance_score(self) -> float:
        return self.verdict.overall_score

    @property
    def headline(self) -> str:
        return f"{self.verdict.overall_score:.1f}% compliance"


class NISTAssessment(AssessmentRecord):
    """NIST AI RMF maturity assessment record."""
    framework: Framework = Framework.NIST_AI_RMF
    verdict: NISTVerdict
    answers: NISTAnswers = Field(default_factory=dict)
    trustworthy_characteristics: Dict[str, Any] = Field(default_factory=dict)

    @property
    def maturity_level(self) -> str:
        return MaturityLevel(self.verdict.maturity_level).value

    @property
    def headline(self) -> str:
        return f"{self.maturity_level} maturity"


ASSESSMENT_MODELS = {
    Framework.EU_AI_ACT: EUAssessment,
    Framework.UK_AI_REGULATION: UKAssessment,
    Framework.NIST_AI_RMF: NISTAssessment,
}


# =============================================================================
# Coverage
# =============================================================================

class FrameworkCoverage(BaseModel):
    """Presence and headline of the latest assessment for one framework."""
    model_config = ConfigDict(use_enum_values=True)

    framework: Framework
    present: bool = False
    headline: Optional[str] = None
    assessment_id: Optional[str] = None
    assessment_date: Optional[datetime] = None


class CoverageSummary(BaseModel):
    """
    Cross-framework coverage for a single AI system.

    Pure presence/absence plus headline text; no scoring happens here.
    """
    model_config = ConfigDict(use_enum_values=True)

    system_id: str
    frameworks: List[FrameworkCoverage] = Field(default_factory=list)
    calculated_at: datetime = Field(default_factory=now_utc)

    def get(self, framework: Framework) -> Optional[FrameworkCoverage]:
        """Get coverage entry for a framework"""
        for entry in self.frameworks:
            if entry.framework == framework:
                return entry
        return None

    def is_present(self, framework: Framework) -> bool:
        entry = self.get(framework)
        return bool(entry and entry.present)

    @property
    def present_count(self) -> int:
        return sum(1 for f in self.frameworks if f.present)

    @property
    def cross_framework_ready(self) -> bool:
        """At least two frameworks assessed (needed for a cross-framework view)"""
        return self.present_count >= 2

    @property
    def summary(self) -> str:
        """Plain-text join of the headlines that are present"""
        return "; ".join(
            f"{FRAMEWORK_LABELS[Framework(f.framework)]}: {f.headline}"
            for f in self.frameworks
            if f.present
        )


class RiskDistribution(BaseModel):
    """Inventory-wide count of systems per EU risk tier."""
    model_config = ConfigDict(use_enum_values=True)

    total_systems: int = 0
    total_assessments: int = 0
    counts: Dict[RiskTier, int] = Field(default_factory=dict)

    def count(self, tier: RiskTier) -> int:
        return self.counts.get(RiskTier(tier).value, 0)
