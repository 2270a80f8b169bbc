"""Validation configuration loaded from environment variables.

All configuration values have sensible defaults. Reference data (the
country table, the geometry-type whitelist) is injected here rather
than embedded in the validators, so it can be narrowed in tests and
refreshed without touching the algorithms.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range, so a bad deployment setting is
    caught before the first plot is validated.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from plot_validation.core.constants import (
    DEFAULT_AREA_TOLERANCE,
    DEFAULT_GEOMETRY_TYPES,
    DEFAULT_REQUIRED_FIELDS,
    DEFAULT_TOP_ERRORS,
    PLOT_ID_FIELD,
    POINT,
    POLYGON,
    SURVEY_ID_FIELD,
)
from plot_validation.core.countries import ISO_3166_ALPHA2
from plot_validation.core.exceptions import PlotValidationError


class ConfigValidationError(PlotValidationError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Immutable validation configuration.

    Attributes:
        area_tolerance: Relative tolerance between the computed planar
            area and the declared ``Area`` (0.10 = 10 %).
        top_errors_limit: How many of the most frequent error messages
            the summary reports.
        max_workers: Thread pool size for per-plot validation. ``1``
            validates sequentially.
        id_field: Primary identifier property.
        id_fallback_field: Identifier property used when ``id_field`` is absent.
        required_fields: Properties that must be present on every plot.
        geometry_types: Accepted GeoJSON geometry types.
        country_codes: Accepted ISO 3166-1 alpha-2 codes (uppercase).
    """

    area_tolerance: float = DEFAULT_AREA_TOLERANCE
    top_errors_limit: int = DEFAULT_TOP_ERRORS
    max_workers: int = 1
    id_field: str = PLOT_ID_FIELD
    id_fallback_field: str = SURVEY_ID_FIELD
    required_fields: tuple[str, ...] = DEFAULT_REQUIRED_FIELDS
    geometry_types: frozenset[str] = DEFAULT_GEOMETRY_TYPES
    country_codes: frozenset[str] = field(default=ISO_3166_ALPHA2)

    @classmethod
    def from_env(cls) -> ValidationConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a value is out of range or a
                required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``PLOT_AREA_TOLERANCE=abc``).
        """
        config = cls(
            area_tolerance=float(os.getenv("PLOT_AREA_TOLERANCE", str(DEFAULT_AREA_TOLERANCE))),
            top_errors_limit=int(os.getenv("PLOT_TOP_ERRORS", str(DEFAULT_TOP_ERRORS))),
            max_workers=int(os.getenv("PLOT_MAX_WORKERS", "1")),
            id_field=os.getenv("PLOT_ID_FIELD", PLOT_ID_FIELD),
            id_fallback_field=os.getenv("PLOT_ID_FALLBACK_FIELD", SURVEY_ID_FIELD),
            required_fields=_split_csv(
                os.getenv("PLOT_REQUIRED_FIELDS", ",".join(DEFAULT_REQUIRED_FIELDS))
            ),
            geometry_types=frozenset(
                _split_csv(os.getenv("PLOT_GEOMETRY_TYPES", f"{POLYGON},{POINT}"))
            ),
        )
        validate_config(config)
        return config


def _split_csv(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def validate_config(config: ValidationConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not 0.0 <= config.area_tolerance < 1.0:
        raise ConfigValidationError(
            "PLOT_AREA_TOLERANCE",
            config.area_tolerance,
            "must be >= 0 and < 1 (relative fraction)",
        )

    if config.top_errors_limit < 1:
        raise ConfigValidationError(
            "PLOT_TOP_ERRORS",
            config.top_errors_limit,
            "must be >= 1",
        )

    if config.max_workers < 1:
        raise ConfigValidationError(
            "PLOT_MAX_WORKERS",
            config.max_workers,
            "must be >= 1",
        )

    if not config.id_field:
        raise ConfigValidationError(
            "PLOT_ID_FIELD",
            config.id_field,
            "must not be empty",
        )

    unsupported = config.geometry_types - DEFAULT_GEOMETRY_TYPES
    if not config.geometry_types or unsupported:
        raise ConfigValidationError(
            "PLOT_GEOMETRY_TYPES",
            ",".join(sorted(config.geometry_types)),
            f"must be a non-empty subset of {sorted(DEFAULT_GEOMETRY_TYPES)}",
        )

    if not config.country_codes:
        raise ConfigValidationError(
            "country_codes",
            config.country_codes,
            "must not be empty",
        )
