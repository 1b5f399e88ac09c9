"""
Multi-Framework AI Risk Assessment

Scores the same AI system against three regulatory frameworks at once:
EU AI Act risk tiers, UK AI regulation principles and NIST AI RMF maturity.

Design Principle: Same system → one independent verdict per framework.
Only the EU tier flows back onto the system's risk_classification.
"""

from .schema import (
    EUAnswers,
    EUVerdict,
    UKVerdict,
    NISTVerdict,
    AssessmentRecord,
    EUAssessment,
    UKAssessment,
    NISTAssessment,
    FrameworkCoverage,
    CoverageSummary,
    RiskDistribution,
)
from .catalog import CATALOG_VERSION
from .eu_ai_act import classify, EUWizard, WizardStep

from .framework_service import FrameworkService, get_framework_service

__all__ = [
    "EUAnswers",
    "EUVerdict",
    "UKVerdict",
    "NISTVerdict",
    "AssessmentRecord",
    "EUAssessment",
    "UKAssessment",
    "NISTAssessment",
    "FrameworkCoverage",
    "CoverageSummary",
    "RiskDistribution",
    "CATALOG_VERSION",
    "classify",
    "EUWizard",
    "WizardStep",
    "FrameworkService",
    "get_framework_service",
]
