from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from questflow.domain.errors import OptimizationError
from questflow.domain.models.PlanModel import OptimizedPlan


def _empty_warnings() -> List[str]:
    return []


@dataclass(frozen=True)
class OptimizationResult:
    """Outcome of an optimizer run; exactly one of plan/error is set."""

    plan: Optional[OptimizedPlan] = None
    error: Optional[OptimizationError] = None
    warnings: List[str] = field(default_factory=_empty_warnings)

    @property
    def success(self) -> bool:
        return self.plan is not None and self.error is None

    @classmethod
    def ok(cls, plan: OptimizedPlan, warnings: List[str] | None = None) -> "OptimizationResult":
        return cls(plan=plan, warnings=list(warnings or []))

    @classmethod
    def fail(cls, error: OptimizationError) -> "OptimizationResult":
        return cls(error=error, warnings=list(error.warnings))

    def unwrap(self) -> OptimizedPlan:
        if self.error is not None:
            raise self.error
        if self.plan is None:  # pragma: no cover - guarded by constructors
            raise RuntimeError("Optimization result carries neither plan nor error")
        return self.plan


__all__ = ["OptimizationResult"]
