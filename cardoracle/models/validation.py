"""
Validation result type.

Schema checks return a ValidationResult instead of raising, so callers
must handle the invalid case explicitly.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from cardoracle.models.failure import SchemaDriftError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class FieldIssue:
    """
    A single validation failure.

    Attributes:
        path: Dotted location of the offending field (e.g. "card_faces.0.name")
        message: Human readable description
        expected: Machine readable error type (e.g. "missing", "literal_error")
    """

    path: str
    message: str
    expected: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message} ({self.expected})"


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a validated value or the diagnostics explaining why not."""

    ok: bool
    value: T | None = None
    issues: tuple[FieldIssue, ...] = field(default_factory=tuple)

    @classmethod
    def success(cls, value: T) -> "ValidationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, issues: list[FieldIssue] | tuple[FieldIssue, ...]) -> "ValidationResult[T]":
        return cls(ok=False, issues=tuple(issues))

    @classmethod
    def from_error(cls, error: ValidationError) -> "ValidationResult[T]":
        issues = [
            FieldIssue(
                path=".".join(str(part) for part in err["loc"]),
                message=err["msg"],
                expected=err["type"],
            )
            for err in error.errors()
        ]
        return cls.failure(issues)

    @property
    def fields(self) -> set[str]:
        """Top-level field names that failed validation."""
        return {issue.path.split(".", 1)[0] for issue in self.issues}

    def unwrap(self) -> T:
        """
        Return the validated value.

        Raises:
            SchemaDriftError: If validation failed
        """
        if not self.ok or self.value is None:
            raise SchemaDriftError(self)
        return self.value

    def describe(self, limit: int = 10) -> str:
        """Summarize the issues, one per line."""
        if self.ok:
            return "valid"
        lines = [str(issue) for issue in self.issues[:limit]]
        remaining = len(self.issues) - limit
        if remaining > 0:
            lines.append(f"... and {remaining} more")
        return "\n".join(lines)


def validate_model(model_cls: type[M], raw: Any) -> ValidationResult[M]:
    """Validate raw JSON data against a pydantic model without raising."""
    try:
        return ValidationResult.success(model_cls.model_validate(raw))
    except ValidationError as e:
        return ValidationResult.from_error(e)
