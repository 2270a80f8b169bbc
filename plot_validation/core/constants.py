"""Shared engine constants: single source of truth.

Property names, coordinate bounds, step names and error categories that
the validators, the edit session and the tests all agree on.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# GeoJSON structure
# ---------------------------------------------------------------------------

FEATURE_COLLECTION_TYPE: str = "FeatureCollection"
FEATURE_TYPE: str = "Feature"

POLYGON: str = "Polygon"
POINT: str = "Point"

DEFAULT_GEOMETRY_TYPES: frozenset[str] = frozenset({POLYGON, POINT})
"""Geometry types accepted unless the configuration narrows them."""

# ---------------------------------------------------------------------------
# Plot properties
# ---------------------------------------------------------------------------

PLOT_ID_FIELD: str = "plot_ID"
"""Primary identifier property."""

SURVEY_ID_FIELD: str = "Survey_ID"
"""Fallback identifier property when ``plot_ID`` is absent."""

AREA_FIELD: str = "Area"
"""Declared plot area, in hectares."""

COUNTRY_FIELD: str = "ProducerCountry"
"""ISO 3166-1 alpha-2 code of the producing country."""

FARMER_FIELD: str = "Farmer"
"""Optional display label shown next to the plot id."""

DEFAULT_REQUIRED_FIELDS: tuple[str, ...] = (COUNTRY_FIELD,)

# ---------------------------------------------------------------------------
# WGS 84 coordinate bounds
# ---------------------------------------------------------------------------

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0

# Minimum positions for a valid ring (3 distinct + closing = 4)
MIN_RING_POSITIONS = 4

# ---------------------------------------------------------------------------
# Area arithmetic
# ---------------------------------------------------------------------------

EARTH_RADIUS_M = 6_371_008.8
"""Mean earth radius (IUGG) used by the equirectangular approximation."""

SQ_METRES_PER_HECTARE = 10_000.0

DEFAULT_AREA_TOLERANCE = 0.10
"""Relative tolerance between computed and declared area."""

DEFAULT_TOP_ERRORS = 2

# ---------------------------------------------------------------------------
# Step names
# ---------------------------------------------------------------------------

STEP_IDENTIFIER = "identifier"
STEP_AREA = "area"
STEP_PRODUCER_COUNTRY = "producer_country"
STEP_REQUIRED_PREFIX = "required:"
STEP_GEOMETRY_TYPE = "geometry_type"
STEP_COORDINATES_STRUCTURE = "coordinates_structure"
STEP_COORDINATE_BOUNDS = "coordinate_bounds"
STEP_RING_CLOSURE = "ring_closure"
STEP_SELF_INTERSECTION = "self_intersection"
STEP_AREA_CONSISTENCY = "area_consistency"

# ---------------------------------------------------------------------------
# Error categories
# ---------------------------------------------------------------------------

CATEGORY_ATTRIBUTE = "attribute"
CATEGORY_GEOMETRY = "geometry"
CATEGORY_AREA = "area"
CATEGORY_AGGREGATE = "aggregate"
