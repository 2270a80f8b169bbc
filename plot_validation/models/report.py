"""Pydantic validation report.

The report is the record handed to the presentation layer or attached
to a submission: what was validated, the gating decision, every plot's
steps. It carries no timestamps, so validating the same collection
twice produces byte-identical JSON.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from plot_validation.models.results import CollectionValidationResult

# Schema version for forward compatibility
SCHEMA_VERSION = "plot-validation-report-v1"


class StepReport(BaseModel):
    """One validation step as rendered in the report."""

    name: str
    passed: bool
    message: str | None = None
    category: str = ""


class PlotReport(BaseModel):
    """Per-plot section of the report.

    Attributes:
        plot_id: Stable plot identifier.
        label: Optional display label (farmer name).
        is_valid: Whether every step passed.
        errors: Messages of the failed steps, in step order.
        steps: Every step, in evaluation order.
    """

    plot_id: str
    label: str | None = None
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    steps: list[StepReport] = Field(default_factory=list)


class SummaryReport(BaseModel):
    """Collection totals section of the report."""

    total_count: int = 0
    valid_count: int = 0
    invalid_count: int = 0
    top_errors: list[str] = Field(default_factory=list)
    aggregate_errors: list[str] = Field(default_factory=list)


class ValidationReport(BaseModel):
    """Complete report for one validation run.

    Attributes:
        schema_version: Report schema identifier.
        source_file: Name of the uploaded file, when known.
        state: Final run state (``all_valid`` or ``has_errors``).
        overall_valid: All-or-nothing gating decision.
        banner: Collection status sentence.
        validated_plot_ids: All plot ids when valid, otherwise empty.
        summary: Collection totals.
        plots: Per-plot sections, in input order.
    """

    schema_version: str = SCHEMA_VERSION
    source_file: str = ""
    state: str
    overall_valid: bool
    banner: str
    validated_plot_ids: list[str] = Field(default_factory=list)
    summary: SummaryReport = Field(default_factory=SummaryReport)
    plots: list[PlotReport] = Field(default_factory=list)


def build_validation_report(
    outcome: CollectionValidationResult,
    *,
    source_file: str = "",
) -> ValidationReport:
    """Build a ``ValidationReport`` from a collection validation result."""
    payload = outcome.to_dict()
    return ValidationReport(
        source_file=source_file,
        state=payload["state"],
        overall_valid=payload["overall_valid"],
        banner=payload["banner"],
        validated_plot_ids=payload["validated_plot_ids"],
        summary=SummaryReport.model_validate(payload["summary"]),
        plots=[PlotReport.model_validate(r) for r in payload["results"]],
    )
