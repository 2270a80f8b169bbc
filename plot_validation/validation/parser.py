"""GeoJSON FeatureCollection parser.

Decomposes a FeatureCollection into ``Feature`` records. Only the
top-level shape is enforced here: the collection type, the
``features`` list, and a ``geometry`` and ``properties`` object on each
feature. Anything deeper (unsupported geometry types, bad coordinate
nesting, missing attributes) is left for the validators to report per
plot.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from plot_validation.core.config import ValidationConfig
from plot_validation.core.constants import FEATURE_COLLECTION_TYPE
from plot_validation.core.exceptions import StructuralError
from plot_validation.core.ingress import load_geojson_payload
from plot_validation.models.feature import Feature

logger = logging.getLogger("plot_validation.validation.parser")


def parse_feature_collection(
    raw: str | bytes | dict[str, Any],
    *,
    config: ValidationConfig | None = None,
) -> list[Feature]:
    """Parse a GeoJSON FeatureCollection into plot features.

    Args:
        raw: GeoJSON text, UTF-8 bytes, or an already-parsed dict.
        config: Supplies the identifier property names.

    Returns:
        One Feature per GeoJSON feature, in source order. The input is
        deep-copied, so later edits never reach the caller's object.

    Raises:
        StructuralError: If the input is not a FeatureCollection, has no
            ``features`` list, or a feature lacks a ``geometry`` or
            ``properties`` object.
    """
    config = config or ValidationConfig()
    payload = load_geojson_payload(raw)

    collection_type = payload.get("type")
    if collection_type != FEATURE_COLLECTION_TYPE:
        msg = f"Expected a FeatureCollection, got type {collection_type!r}"
        raise StructuralError(msg, code="NOT_A_FEATURE_COLLECTION")

    raw_features = payload.get("features")
    if not isinstance(raw_features, list):
        if raw_features is None:
            msg = "FeatureCollection has no 'features' member"
        else:
            msg = f"FeatureCollection 'features' must be a list, got {type(raw_features).__name__}"
        raise StructuralError(msg, code="FEATURES_NOT_A_LIST")

    features = [
        _parse_feature(raw_feature, index, config) for index, raw_feature in enumerate(raw_features)
    ]

    logger.info("Parsed %d plot feature(s)", len(features))
    return features


def _parse_feature(raw_feature: object, index: int, config: ValidationConfig) -> Feature:
    if not isinstance(raw_feature, dict):
        msg = f"Feature {index} must be an object, got {type(raw_feature).__name__}"
        raise StructuralError(msg, code="FEATURE_NOT_AN_OBJECT", feature_index=index)

    geometry = raw_feature.get("geometry")
    if not isinstance(geometry, dict):
        msg = f"Feature {index} has no geometry object"
        raise StructuralError(msg, code="FEATURE_MISSING_GEOMETRY", feature_index=index)

    properties = raw_feature.get("properties")
    if not isinstance(properties, dict):
        msg = f"Feature {index} has no properties object"
        raise StructuralError(msg, code="FEATURE_MISSING_PROPERTIES", feature_index=index)

    return Feature(
        plot_id=derive_plot_id(properties, index, config),
        geometry_type=str(geometry.get("type", "")),
        coordinates=copy.deepcopy(geometry.get("coordinates")),
        properties={str(k): copy.deepcopy(v) for k, v in properties.items()},
        feature_index=index,
    )


def derive_plot_id(properties: dict[str, Any], index: int, config: ValidationConfig) -> str:
    """Pick the plot id: primary field, then fallback field, then position.

    The positional fallback is 1-based (``plot-1`` is the first feature).
    """
    for key in (config.id_field, config.id_fallback_field):
        if not key:
            continue
        value = properties.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return f"plot-{index + 1}"
