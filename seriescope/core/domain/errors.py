"""
Error taxonomy for the analysis engine.

Every precondition failure is raised before any result is built, so a call
either returns a complete result or one of these errors.
"""


class AnalysisError(ValueError):
    """Base class for all engine errors."""


class InsufficientDataError(AnalysisError):
    """The series has fewer samples than the requested method needs."""

    def __init__(self, message: str, required: int | None = None, actual: int | None = None):
        super().__init__(message)
        self.required = required
        self.actual = actual


class InvalidInputError(AnalysisError):
    """A parameter is outside its accepted range (horizon, order, period...)."""
