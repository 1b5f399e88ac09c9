"""
Single source of truth for all shared types in ai-compliance.

IMPORTANT: Import types from this module, not from individual files.
This keeps the enum values identical between the scorers, the store
and the CSV export.

Usage:
    from ai_compliance._types import (
        RiskTier, MaturityLevel, ImplementationLevel,
        Framework, HighRiskCategory,
        now_utc  # Use instead of datetime.utcnow()
    )
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict
import uuid


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def now_utc() -> datetime:
    """
    Get current UTC time with timezone info.

    Use this instead of datetime.utcnow() which is deprecated.
    """
    return datetime.now(timezone.utc)


def generate_id() -> str:
    """Generate a unique ID string (UUID4)."""
    return str(uuid.uuid4())


# =============================================================================
# ENUMS
# =============================================================================


class Framework(str, Enum):
    """Regulatory frameworks an AI system can be assessed against."""
    EU_AI_ACT = "eu_ai_act"
    UK_AI_REGULATION = "uk_ai_regulation"
    NIST_AI_RMF = "nist_ai_rmf"


class RiskTier(str, Enum):
    """
    EU AI Act risk tiers.

    Ordered from most to least severe. NOT_YET_ASSESSED is the sentinel
    carried by systems that have no EU assessment yet.
    """
    PROHIBITED = "PROHIBITED"
    HIGH_RISK = "HIGH_RISK"
    LIMITED_RISK = "LIMITED_RISK"
    MINIMAL_RISK = "MINIMAL_RISK"
    NOT_YET_ASSESSED = "NOT_YET_ASSESSED"


class HighRiskCategory(str, Enum):
    """EU AI Act Annex III high-risk use categories."""
    BIOMETRIC_IDENTIFICATION = "BIOMETRIC_IDENTIFICATION"
    CRITICAL_INFRASTRUCTURE = "CRITICAL_INFRASTRUCTURE"
    EDUCATION_EMPLOYMENT = "EDUCATION_EMPLOYMENT"
    ESSENTIAL_SERVICES = "ESSENTIAL_SERVICES"
    LAW_ENFORCEMENT = "LAW_ENFORCEMENT"
    MIGRATION_ASYLUM = "MIGRATION_ASYLUM"
    JUSTICE_DEMOCRACY = "JUSTICE_DEMOCRACY"
    OTHER = "OTHER"


class ImplementationLevel(str, Enum):
    """How well a UK principle question (or whole principle) is addressed."""
    NOT_ADDRESSED = "NOT_ADDRESSED"
    PARTIALLY_ADDRESSED = "PARTIALLY_ADDRESSED"
    FULLY_ADDRESSED = "FULLY_ADDRESSED"

    @property
    def points(self) -> int:
        """Point value used by the UK principle scorer."""
        return IMPLEMENTATION_POINTS[self]


IMPLEMENTATION_POINTS: Dict[ImplementationLevel, int] = {
    ImplementationLevel.NOT_ADDRESSED: 0,
    ImplementationLevel.PARTIALLY_ADDRESSED: 1,
    ImplementationLevel.FULLY_ADDRESSED: 2,
}


class MaturityLevel(str, Enum):
    """NIST AI RMF maturity buckets, lowest first."""
    INITIAL = "INITIAL"
    DEVELOPING = "DEVELOPING"
    DEFINED = "DEFINED"
    MANAGED = "MANAGED"
    OPTIMISING = "OPTIMISING"


class DeploymentStatus(str, Enum):
    """Lifecycle stage of an inventoried AI system."""
    DEVELOPMENT = "DEVELOPMENT"
    TESTING = "TESTING"
    PRODUCTION = "PRODUCTION"
    RETIRED = "RETIRED"


# Display labels used by the CSV export and the CLI
RISK_TIER_LABELS: Dict[RiskTier, str] = {
    RiskTier.NOT_YET_ASSESSED: "Not Yet Assessed",
    RiskTier.MINIMAL_RISK: "Minimal Risk",
    RiskTier.LIMITED_RISK: "Limited Risk",
    RiskTier.HIGH_RISK: "High Risk",
    RiskTier.PROHIBITED: "Prohibited",
}

FRAMEWORK_LABELS: Dict[Framework, str] = {
    Framework.EU_AI_ACT: "EU AI Act",
    Framework.UK_AI_REGULATION: "UK AI Regulation",
    Framework.NIST_AI_RMF: "NIST AI RMF",
}


def format_enum_value(value: str) -> str:
    """Turn an UPPER_SNAKE enum value into Title Case words."""
    return " ".join(word.capitalize() for word in value.split("_"))


def format_risk_tier(value: str) -> str:
    """Human label for a risk tier value, falling back to the raw value."""
    try:
        return RISK_TIER_LABELS[RiskTier(value)]
    except ValueError:
        return value
