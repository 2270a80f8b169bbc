"""Data models and schemas.

Defines the data structures used throughout the engine:
- Feature: One parsed plot with stable id, geometry and properties
- ValidationStep / PerPlotValidationResult: per-plot outcome
- ValidationSummary / CollectionValidationResult: collection outcome and gate
- ValidationReport: Pydantic report for presentation and submission
"""

from plot_validation.models.feature import Feature, PlotProperties
from plot_validation.models.report import ValidationReport, build_validation_report
from plot_validation.models.results import (
    CollectionValidationResult,
    PerPlotValidationResult,
    ValidationState,
    ValidationStep,
    ValidationSummary,
)

__all__ = [
    "CollectionValidationResult",
    "Feature",
    "PerPlotValidationResult",
    "PlotProperties",
    "ValidationReport",
    "ValidationState",
    "ValidationStep",
    "ValidationSummary",
    "build_validation_report",
]
