"""
Pydantic schemas for template validation results.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ValidationIssue(BaseModel):
    """A single problem, addressed to the input that caused it."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., description="Originating field, e.g. 'body.text' or 'buttons.items[0].url'")
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating a template for one wizard step."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: List[ValidationIssue] = Field(default_factory=list)
    warnings: List[ValidationIssue] = Field(default_factory=list)

    def errors_for(self, field: str) -> List[ValidationIssue]:
        """Errors on a field or any of its children."""
        return [
            e
            for e in self.errors
            if e.field == field
            or e.field.startswith(f"{field}.")
            or e.field.startswith(f"{field}[")
        ]


__all__ = ["ValidationIssue", "ValidationResult"]
