"""
Estimation error types.

Every error is raised while validating inputs, before any volume, pass or
time is computed, and names the input field that caused it. All of them
derive from ValueError so callers that already catch ValueError keep
working.
"""

from __future__ import annotations


class EstimationError(ValueError):
    """Base class for rejected estimation inputs.

    Attributes:
        field: Name of the offending input field (e.g. "shell_thickness")
    """

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def __str__(self) -> str:
        message = super().__str__()
        if self.field:
            return f"{self.field}: {message}"
        return message


class InvalidGeometry(EstimationError):
    """Joint dimensions that make the groove geometrically impossible."""


class InvalidConfiguration(EstimationError):
    """Malformed process plan, settings, activity times or item fields."""


class ArithmeticDegenerate(EstimationError):
    """Inputs that collapse the weld length to zero."""
