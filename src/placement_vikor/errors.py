"""Error taxonomy for the placement engine.

Every failure here is deterministic for a given input, so callers should
fix the input rather than retry.
"""

from typing import Optional


class VikorError(Exception):
    """Base class for all placement engine errors."""


class InvalidWeightsError(VikorError):
    """Raised when the weight vector has the wrong length, a negative entry,
    or does not sum to 1.0 within tolerance."""


class EmptyInputError(VikorError):
    """Raised when there are no individuals or no alternatives to process."""


class ValidationFailure(VikorError):
    """Raised when one or more input rows are invalid.

    All row-level issues are collected before raising so the caller can
    fix the whole input in one pass.
    """

    def __init__(self, messages: list[str], subject: Optional[str] = None):
        self.messages = list(messages)
        self.subject = subject
        prefix = f"Validasi {subject} gagal" if subject else "Validasi gagal"
        super().__init__(f"{prefix}: {'; '.join(self.messages)}")


class NoAlternativesError(VikorError):
    """Raised when scoring is attempted with an empty alternative list."""
