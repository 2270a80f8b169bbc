"""Per-plot validation: attribute steps followed by geometry steps."""

from __future__ import annotations

import logging

from plot_validation.core.config import ValidationConfig
from plot_validation.models.feature import Feature
from plot_validation.models.results import PerPlotValidationResult
from plot_validation.validation.attributes import declared_area, validate_attributes
from plot_validation.validation.geometry import validate_geometry

logger = logging.getLogger("plot_validation.validation.plot")


def validate_plot(
    feature: Feature,
    *,
    config: ValidationConfig | None = None,
) -> PerPlotValidationResult:
    """Validate one plot.

    The result depends only on *feature* and *config*: the same input
    always yields an equal result.

    Args:
        feature: The plot to validate. Not modified.
        config: Validation configuration (defaults when omitted).

    Returns:
        Every step in order, ``is_valid`` when all passed, and the
        failed steps' messages as ``errors``.
    """
    config = config or ValidationConfig()

    steps = validate_attributes(feature.properties, config=config)
    steps.extend(
        validate_geometry(
            feature.geometry_type,
            feature.coordinates,
            declared_area=declared_area(feature.properties),
            config=config,
        )
    )

    result = PerPlotValidationResult.from_steps(feature.plot_id, steps, label=feature.label)
    logger.debug(
        "Plot validated | plot_id=%s | valid=%s | failed_steps=%d",
        result.plot_id,
        result.is_valid,
        len(result.errors),
    )
    return result
