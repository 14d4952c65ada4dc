class KeplerError(Exception):
    """Base exception for Kepler service."""


class TranscriptValidationError(KeplerError):
    """Raised when the transcript is missing, empty or not a string."""


class NoActiveRubricsError(KeplerError):
    """Raised when the rubric source yields no active rubric."""


class RubricSourceError(KeplerError):
    """Raised when rubrics cannot be loaded (missing or malformed file)."""
