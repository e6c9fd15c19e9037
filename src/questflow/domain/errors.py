from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class OptimizationError(Exception):
    """Base class for expected, user-facing optimization failures."""

    kind = "optimization_error"

    def __init__(self, message: str, warnings: Sequence[str] | None = None):
        super().__init__(message)
        self.message = message
        self.warnings = list(warnings or [])


class ValidationError(OptimizationError):
    """Raised when inputs fall outside the configured domain."""

    kind = "validation_error"

    def __init__(
        self,
        issues: Iterable[ValidationIssue],
        warnings: Sequence[str] | None = None,
    ):
        self.issues = list(issues)
        message = ", ".join(str(issue) for issue in self.issues)
        super().__init__(message or "Invalid input", warnings)


class NoActiveQuestsError(OptimizationError):
    kind = "no_active_quests"

    def __init__(self, warnings: Sequence[str] | None = None):
        super().__init__("No active quests to optimize", warnings)


class InsufficientTimeError(OptimizationError):
    kind = "insufficient_time"

    def __init__(self, warnings: Sequence[str] | None = None):
        super().__init__("Insufficient time to complete any quests", warnings)


class InvariantViolation(RuntimeError):
    """Internal arithmetic or bookkeeping produced an impossible state."""


def raise_if_issues(issues: Sequence[ValidationIssue]) -> None:
    if issues:
        raise ValidationError(issues)


__all__ = [
    "ValidationIssue",
    "OptimizationError",
    "ValidationError",
    "NoActiveQuestsError",
    "InsufficientTimeError",
    "InvariantViolation",
    "raise_if_issues",
]
