"""Canonical payload contracts for the engine's serialised output.

Every ``to_dict()`` shape is declared here as a ``TypedDict``. This
module is the single source of truth for field names; drift-detection
tests verify that the models emit exactly these keys.
"""

from __future__ import annotations

from typing import TypedDict


class FeaturePayload(TypedDict):
    """Serialised ``Feature``."""

    plot_id: str
    geometry_type: str
    coordinates: object
    properties: dict[str, object]
    feature_index: int


class StepPayload(TypedDict):
    """Serialised ``ValidationStep``."""

    name: str
    passed: bool
    message: str | None
    category: str


class PlotResultPayload(TypedDict):
    """Serialised ``PerPlotValidationResult``."""

    plot_id: str
    label: str | None
    is_valid: bool
    errors: list[str]
    steps: list[StepPayload]


class SummaryPayload(TypedDict):
    """Serialised ``ValidationSummary``."""

    total_count: int
    valid_count: int
    invalid_count: int
    top_errors: list[str]
    aggregate_errors: list[str]


class CollectionResultPayload(TypedDict):
    """Serialised ``CollectionValidationResult``."""

    state: str
    overall_valid: bool
    banner: str
    validated_plot_ids: list[str]
    summary: SummaryPayload
    results: list[PlotResultPayload]
