"""
Error types raised by the assessment engine and its record store.

Scoring functions never raise for missing answers; a missing answer is
simply a zero contribution. Errors are reserved for the boundaries:
malformed answer sheets, save guards and store failures.
"""


class ComplianceEngineError(Exception):
    """Base exception for ai-compliance errors."""
    pass


class InvalidAnswerError(ComplianceEngineError):
    """Answer sheet references an unknown question or carries an invalid value."""
    pass


class IncompleteStepError(ComplianceEngineError):
    """Wizard step cannot advance until all of its questions are answered."""
    pass


class AssessmentValidationError(ComplianceEngineError):
    """Assessment cannot be saved (e.g. assessor name is blank)."""
    pass


class PersistenceError(ComplianceEngineError):
    """Record store failed; nothing from the attempted save was persisted."""
    pass


class SystemNotFoundError(ComplianceEngineError):
    """Referenced AI system does not exist in the inventory."""
    pass


class DuplicateSystemNameError(ComplianceEngineError):
    """An AI system with the same name is already inventoried."""
    pass
