"""
Error types for the MEDDPICC qualification engine.

Absence of an assessment is not an error: lookups return None / False.
"""


class QualificationError(Exception):
    """Base class for qualification engine errors."""


class ConfigurationError(QualificationError):
    """Malformed or zero-valued configuration or benchmark data."""


class ValidationError(QualificationError):
    """An answer references an unknown pillar, question or option."""

    def __init__(self, message: str, pillar: str = "", question_id: str = ""):
        super().__init__(message)
        self.pillar = pillar
        self.question_id = question_id


class StorageError(QualificationError):
    """The persistence layer failed or is unavailable."""
