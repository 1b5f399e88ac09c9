"""AI Compliance - Multi-Framework AI Risk Classification Engine"""

__version__ = "0.1.0"

from ._types import Framework, RiskTier, HighRiskCategory, ImplementationLevel, MaturityLevel
from .errors import (
    ComplianceEngineError,
    InvalidAnswerError,
    IncompleteStepError,
    AssessmentValidationError,
    PersistenceError,
    SystemNotFoundError,
    DuplicateSystemNameError,
)
from .assessment_db import AssessmentDatabase, AssessmentStore, AISystem
from .frameworks import FrameworkService, EUWizard, CoverageSummary

__all__ = [
    # Version
    "__version__",

    # Types
    "Framework",
    "RiskTier",
    "HighRiskCategory",
    "ImplementationLevel",
    "MaturityLevel",

    # Errors
    "ComplianceEngineError",
    "InvalidAnswerError",
    "IncompleteStepError",
    "AssessmentValidationError",
    "PersistenceError",
    "SystemNotFoundError",
    "DuplicateSystemNameError",

    # Store
    "AssessmentDatabase",
    "AssessmentStore",
    "AISystem",

    # Assessment
    "FrameworkService",
    "EUWizard",
    "CoverageSummary",
]
