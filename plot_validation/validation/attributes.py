"""Attribute checks for one plot's property bag.

Each recognised attribute yields exactly one ``ValidationStep``:

1. ``identifier``: ``plot_ID`` (or the ``Survey_ID`` fallback) present
2. ``area``: declared ``Area`` is a finite number > 0
3. ``producer_country``: ``ProducerCountry`` is a known ISO 3166-1 alpha-2 code
4. ``required:<field>``: any other configured required property is present

Unknown properties are ignored. Nothing here raises: every problem is a
failed step in the ``attribute`` category.
"""

from __future__ import annotations

import math

from plot_validation.core.config import ValidationConfig
from plot_validation.core.constants import (
    AREA_FIELD,
    CATEGORY_ATTRIBUTE,
    COUNTRY_FIELD,
    STEP_AREA,
    STEP_IDENTIFIER,
    STEP_PRODUCER_COUNTRY,
    STEP_REQUIRED_PREFIX,
)
from plot_validation.core.countries import normalize_country_code
from plot_validation.models.feature import PlotProperties
from plot_validation.models.results import ValidationStep


def validate_attributes(
    properties: dict[str, object],
    *,
    config: ValidationConfig | None = None,
) -> list[ValidationStep]:
    """Validate a plot's properties.

    Args:
        properties: The feature's property bag. Not modified.
        config: Identifier fields, required fields and the country table.

    Returns:
        Ordered attribute steps.
    """
    config = config or ValidationConfig()
    tagged = PlotProperties.from_mapping(properties)

    steps = [
        _check_identifier(properties, config),
        _check_area(tagged),
        _check_country(tagged, config),
    ]
    handled = {config.id_field, config.id_fallback_field, AREA_FIELD, COUNTRY_FIELD}
    steps.extend(
        _check_required(properties, name) for name in config.required_fields if name not in handled
    )
    return steps


# ---------------------------------------------------------------------------
# Coercion helpers (shared with the edit session)
# ---------------------------------------------------------------------------


def coerce_area(value: object) -> float | None:
    """Return *value* as a finite float, or ``None`` if it is not numeric.

    Strings are parsed after stripping, so a blank string is not numeric.
    Integers too large for a float are rejected, and so are booleans even
    though Python treats them as integers.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def declared_area(properties: dict[str, object]) -> float | None:
    """Usable declared area in hectares, or ``None`` when absent or invalid."""
    area = coerce_area(properties.get(AREA_FIELD))
    if area is None or area <= 0:
        return None
    return area


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_identifier(properties: dict[str, object], config: ValidationConfig) -> ValidationStep:
    for key in (config.id_field, config.id_fallback_field):
        if key and not _is_blank(properties.get(key)):
            return ValidationStep(
                STEP_IDENTIFIER, True, f"Plot identifier present ({key})", CATEGORY_ATTRIBUTE
            )
    fields = " or ".join(k for k in (config.id_field, config.id_fallback_field) if k)
    return ValidationStep(
        STEP_IDENTIFIER, False, f"Missing plot identifier ({fields})", CATEGORY_ATTRIBUTE
    )


def _check_area(tagged: PlotProperties) -> ValidationStep:
    if not tagged.has(AREA_FIELD) or tagged.area is None:
        return ValidationStep(STEP_AREA, True, "Area not declared", CATEGORY_ATTRIBUTE)

    area = coerce_area(tagged.area)
    if area is None:
        return ValidationStep(
            STEP_AREA,
            False,
            f"Area must be a finite number, got {tagged.area!r:.40}",
            CATEGORY_ATTRIBUTE,
        )
    if area <= 0:
        return ValidationStep(
            STEP_AREA,
            False,
            f"Area must be greater than 0, got {area:g}",
            CATEGORY_ATTRIBUTE,
        )
    return ValidationStep(STEP_AREA, True, f"Area {area:g} ha", CATEGORY_ATTRIBUTE)


def _check_country(tagged: PlotProperties, config: ValidationConfig) -> ValidationStep:
    if _is_blank(tagged.producer_country):
        if COUNTRY_FIELD in config.required_fields:
            return ValidationStep(
                STEP_PRODUCER_COUNTRY, False, f"Missing {COUNTRY_FIELD}", CATEGORY_ATTRIBUTE
            )
        return ValidationStep(
            STEP_PRODUCER_COUNTRY, True, f"{COUNTRY_FIELD} not declared", CATEGORY_ATTRIBUTE
        )

    code = normalize_country_code(tagged.producer_country)
    if code not in config.country_codes:
        return ValidationStep(
            STEP_PRODUCER_COUNTRY,
            False,
            f"Invalid {COUNTRY_FIELD} {tagged.producer_country!r}: "
            "not an ISO 3166-1 alpha-2 country code",
            CATEGORY_ATTRIBUTE,
        )
    return ValidationStep(
        STEP_PRODUCER_COUNTRY, True, f"{COUNTRY_FIELD} {code}", CATEGORY_ATTRIBUTE
    )


def _check_required(properties: dict[str, object], name: str) -> ValidationStep:
    step_name = f"{STEP_REQUIRED_PREFIX}{name}"
    if _is_blank(properties.get(name)):
        return ValidationStep(step_name, False, f"Missing {name}", CATEGORY_ATTRIBUTE)
    return ValidationStep(step_name, True, f"{name} present", CATEGORY_ATTRIBUTE)
