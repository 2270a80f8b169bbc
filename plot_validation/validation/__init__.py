"""Plot validation engine.

Parses a GeoJSON FeatureCollection of plots and validates it plot by
plot, then gates the whole collection all-or-nothing.

The engine is split into focused stages:
- **parser**: FeatureCollection → ``Feature`` records (fail-fast on structure)
- **attributes**: identifier, declared area, producer country, required fields
- **geometry**: type, bounds, ring closure, self-intersection, area consistency
- **plot**: attribute + geometry steps for one plot
- **collection**: every plot, summary, duplicate ids, gating decision
- **session**: patch properties, then explicitly re-validate

Feature-level problems never raise: they are failed steps, so every
diagnostic for every plot is collected in one run. Only a malformed
top-level structure raises ``StructuralError``.
"""

from __future__ import annotations

from plot_validation.validation.attributes import coerce_area, validate_attributes
from plot_validation.validation.collection import (
    find_aggregate_errors,
    summarize,
    validate_collection,
)
from plot_validation.validation.geometry import (
    normalize_coordinates,
    planar_area_ha,
    segments_intersect,
    shoelace_area,
    validate_geometry,
)
from plot_validation.validation.parser import derive_plot_id, parse_feature_collection
from plot_validation.validation.plot import validate_plot
from plot_validation.validation.session import EditSession

__all__ = [
    "EditSession",
    "coerce_area",
    "derive_plot_id",
    "find_aggregate_errors",
    "normalize_coordinates",
    "parse_feature_collection",
    "planar_area_ha",
    "segments_intersect",
    "shoelace_area",
    "summarize",
    "validate_attributes",
    "validate_collection",
    "validate_geometry",
    "validate_plot",
]
