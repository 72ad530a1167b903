"""Data models for pre-flight validation."""

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Outcome of validating a file before parsing.

    Errors make the file unusable; warnings are informational only.
    """

    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def error_message(self) -> str | None:
        return self.errors[0] if self.errors else None

    @classmethod
    def failure(cls, error: str) -> "ValidationResult":
        return cls(is_valid=False, errors=[error])
