"""Validation outcome models.

- ValidationStep: one named, ordered check outcome
- PerPlotValidationResult: every step for one plot plus its verdict
- ValidationSummary: collection totals and the most frequent errors
- CollectionValidationResult: per-plot results, summary and gating decision

All models serialise to plain JSON-compatible dicts through
``to_dict()``; the key sets are pinned by ``models.contracts``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ValidationState(str, Enum):
    """Lifecycle of one validation run over a collection."""

    UNVALIDATED = "unvalidated"
    VALIDATING = "validating"
    ALL_VALID = "all_valid"
    HAS_ERRORS = "has_errors"


@dataclass(frozen=True, slots=True)
class ValidationStep:
    """Outcome of one named check.

    Attributes:
        name: Stable step name (e.g. ``"ring_closure"``).
        passed: Whether the check passed.
        message: Human-readable detail. Failed steps always carry one.
        category: ``"attribute"``, ``"geometry"`` or ``"area"``.
    """

    name: str
    passed: bool
    message: str | None = None
    category: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "passed": self.passed,
            "message": self.message,
            "category": self.category,
        }


@dataclass(frozen=True, slots=True)
class PerPlotValidationResult:
    """All validation steps for one plot.

    ``is_valid`` and ``errors`` are derived from ``steps`` by
    ``from_steps``; build results through it rather than by hand.
    """

    plot_id: str
    is_valid: bool
    errors: tuple[str, ...] = ()
    steps: tuple[ValidationStep, ...] = ()
    label: str | None = None

    @classmethod
    def from_steps(
        cls,
        plot_id: str,
        steps: list[ValidationStep],
        *,
        label: str | None = None,
    ) -> PerPlotValidationResult:
        errors = tuple(s.message or s.name for s in steps if not s.passed)
        return cls(
            plot_id=plot_id,
            is_valid=not errors,
            errors=errors,
            steps=tuple(steps),
            label=label,
        )

    @property
    def failed_steps(self) -> tuple[ValidationStep, ...]:
        return tuple(s for s in self.steps if not s.passed)

    def to_dict(self) -> dict[str, object]:
        return {
            "plot_id": self.plot_id,
            "label": self.label,
            "is_valid": self.is_valid,
            "errors": list(self.errors),
            "steps": [s.to_dict() for s in self.steps],
        }


@dataclass(frozen=True, slots=True)
class ValidationSummary:
    """Collection-level totals.

    Attributes:
        total_count: Number of plots validated.
        valid_count: Number of plots whose every step passed.
        top_errors: Most frequent error messages, most frequent first.
        aggregate_errors: Collection-level problems (e.g. duplicate ids).
    """

    total_count: int
    valid_count: int
    top_errors: tuple[str, ...] = ()
    aggregate_errors: tuple[str, ...] = ()

    @property
    def invalid_count(self) -> int:
        return self.total_count - self.valid_count

    def to_dict(self) -> dict[str, object]:
        return {
            "total_count": self.total_count,
            "valid_count": self.valid_count,
            "invalid_count": self.invalid_count,
            "top_errors": list(self.top_errors),
            "aggregate_errors": list(self.aggregate_errors),
        }


@dataclass(frozen=True, slots=True)
class CollectionValidationResult:
    """Per-plot results plus the all-or-nothing gating decision.

    Attributes:
        state: ``ALL_VALID`` or ``HAS_ERRORS``.
        results: One result per plot, in input order.
        summary: Collection totals.
        validated_plot_ids: Every plot id when the collection passed,
            otherwise empty. Never a partial subset.
    """

    state: ValidationState
    results: tuple[PerPlotValidationResult, ...] = ()
    summary: ValidationSummary = field(default_factory=lambda: ValidationSummary(0, 0))
    validated_plot_ids: tuple[str, ...] = ()

    @property
    def overall_valid(self) -> bool:
        return self.state is ValidationState.ALL_VALID

    @property
    def banner(self) -> str:
        """One-line collection status for the presentation layer."""
        total = self.summary.total_count
        if self.overall_valid:
            return f"All {total} plots valid, proceed"
        if total == 0:
            return "No plots to validate"
        if self.summary.invalid_count == 0:
            return f"All {total} plots valid but the collection has errors, fix and re-validate"
        return f"{self.summary.invalid_count} of {total} plots invalid, fix and re-validate"

    def result_for(self, plot_id: str) -> PerPlotValidationResult | None:
        for result in self.results:
            if result.plot_id == plot_id:
                return result
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "state": self.state.value,
            "overall_valid": self.overall_valid,
            "banner": self.banner,
            "validated_plot_ids": list(self.validated_plot_ids),
            "summary": self.summary.to_dict(),
            "results": [r.to_dict() for r in self.results],
        }
