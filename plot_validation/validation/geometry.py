"""Geometry checks for one plot.

Responsibilities, in step order:
- Geometry type whitelist (short-circuits on failure)
- Coordinate nesting (malformed input degrades to one failed step)
- WGS 84 coordinate bounds
- Polygon ring closure and minimum vertex count (never auto-closed)
- Polygon self-intersection: O(n^2) pairwise segment test per ring,
  plus ring-against-ring checks for holes
- Polygon area consistency against the declared ``Area``

Area is computed in hectares, the unit the declared ``Area`` property is
assumed to use. Positions are projected to metres with a local
equirectangular projection centred on the plot, then measured with the
shoelace formula. The projection ignores the ellipsoid, which is well
inside the tolerance for plots of a few hundred hectares away from the
poles.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from plot_validation.core.config import ValidationConfig
from plot_validation.core.constants import (
    CATEGORY_AREA,
    CATEGORY_GEOMETRY,
    EARTH_RADIUS_M,
    MAX_LATITUDE,
    MAX_LONGITUDE,
    MIN_LATITUDE,
    MIN_LONGITUDE,
    MIN_RING_POSITIONS,
    POINT,
    POLYGON,
    SQ_METRES_PER_HECTARE,
    STEP_AREA_CONSISTENCY,
    STEP_COORDINATE_BOUNDS,
    STEP_COORDINATES_STRUCTURE,
    STEP_GEOMETRY_TYPE,
    STEP_RING_CLOSURE,
    STEP_SELF_INTERSECTION,
)
from plot_validation.models.results import ValidationStep

logger = logging.getLogger("plot_validation.validation.geometry")

Position = tuple[float, float]
Ring = list[Position]


class MalformedCoordinatesError(ValueError):
    """Coordinate nesting does not match the declared geometry type."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_geometry(
    geometry_type: str,
    coordinates: object,
    *,
    declared_area: float | None = None,
    config: ValidationConfig | None = None,
) -> list[ValidationStep]:
    """Validate one plot geometry.

    Args:
        geometry_type: GeoJSON geometry type.
        coordinates: Raw GeoJSON ``coordinates`` value. Not modified.
        declared_area: Declared plot area in hectares, or ``None`` to
            skip the area consistency step.
        config: Geometry whitelist and area tolerance.

    Returns:
        Ordered geometry steps. Never raises for bad coordinate data.
    """
    config = config or ValidationConfig()

    if geometry_type not in config.geometry_types:
        return [
            _failed(
                STEP_GEOMETRY_TYPE,
                f"Unsupported geometry type {geometry_type!r} "
                f"(expected {' or '.join(sorted(config.geometry_types))})",
            )
        ]
    steps = [_passed(STEP_GEOMETRY_TYPE, f"Geometry type {geometry_type}")]

    try:
        rings = normalize_coordinates(geometry_type, coordinates)
    except MalformedCoordinatesError as exc:
        steps.append(_failed(STEP_COORDINATES_STRUCTURE, f"Malformed coordinates: {exc}"))
        return steps
    steps.append(_passed(STEP_COORDINATES_STRUCTURE, "Coordinates well-formed"))

    steps.append(_check_bounds(rings, geometry_type))

    if geometry_type == POLYGON:
        steps.extend(_check_polygon(rings, declared_area, config.area_tolerance))

    return steps


def normalize_coordinates(geometry_type: str, coordinates: object) -> list[Ring]:
    """Convert raw GeoJSON coordinates to a list of ``(lon, lat)`` rings.

    A Point becomes a single one-position ring. Polygon positions may
    carry an altitude, which is dropped; a Point must be exactly
    ``[lon, lat]``.

    Raises:
        MalformedCoordinatesError: If the nesting or values are invalid.
    """
    if geometry_type == POINT:
        if not isinstance(coordinates, list | tuple) or len(coordinates) != 2:
            msg = "Point must be a single [longitude, latitude] pair"
            raise MalformedCoordinatesError(msg)
        return [[_to_position(coordinates, "position 0")]]

    if not isinstance(coordinates, list | tuple) or not coordinates:
        msg = "Polygon must be a non-empty list of rings"
        raise MalformedCoordinatesError(msg)

    rings: list[Ring] = []
    for ring_idx, raw_ring in enumerate(coordinates):
        if not isinstance(raw_ring, list | tuple):
            msg = f"ring {ring_idx} must be a list of positions, got {type(raw_ring).__name__}"
            raise MalformedCoordinatesError(msg)
        rings.append(
            [
                _to_position(raw_pos, f"ring {ring_idx}, position {pos_idx}")
                for pos_idx, raw_pos in enumerate(raw_ring)
            ]
        )
    return rings


def _to_position(raw: object, where: str) -> Position:
    if not isinstance(raw, list | tuple) or len(raw) < 2:
        msg = f"{where} must be a [longitude, latitude] pair, got {raw!r}"
        raise MalformedCoordinatesError(msg)
    values = []
    for value in raw[:2]:
        if isinstance(value, bool) or not isinstance(value, int | float):
            msg = f"{where} has a non-numeric value {value!r}"
            raise MalformedCoordinatesError(msg)
        try:
            number = float(value)
        except OverflowError:
            number = math.inf
        if not math.isfinite(number):
            msg = f"{where} has a non-finite value {value!r:.40}"
            raise MalformedCoordinatesError(msg)
        values.append(number)
    return (values[0], values[1])


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------


def _check_bounds(rings: list[Ring], geometry_type: str) -> ValidationStep:
    problems: list[str] = []
    for ring_idx, ring in enumerate(rings):
        for pos_idx, (lon, lat) in enumerate(ring):
            if MIN_LONGITUDE <= lon <= MAX_LONGITUDE and MIN_LATITUDE <= lat <= MAX_LATITUDE:
                continue
            where = (
                f"index {pos_idx}"
                if geometry_type == POINT
                else f"ring {ring_idx} index {pos_idx}"
            )
            problems.append(f"{where} ({lon:g}, {lat:g})")

    if problems:
        shown = ", ".join(problems[:3])
        more = f" and {len(problems) - 3} more" if len(problems) > 3 else ""
        return _failed(
            STEP_COORDINATE_BOUNDS,
            f"Coordinate out of WGS 84 range at {shown}{more}",
        )
    return _passed(STEP_COORDINATE_BOUNDS, "All coordinates within WGS 84 range")


# ---------------------------------------------------------------------------
# Polygon checks
# ---------------------------------------------------------------------------


def _check_polygon(
    rings: list[Ring],
    declared_area: float | None,
    tolerance: float,
) -> list[ValidationStep]:
    closure_problems = [
        problem
        for ring_idx, ring in enumerate(rings)
        if (problem := ring_closure_problem(ring, ring_idx)) is not None
    ]
    if closure_problems:
        # Crossing and area tests are meaningless on an open ring.
        return [_failed(STEP_RING_CLOSURE, "; ".join(closure_problems))]
    steps = [_passed(STEP_RING_CLOSURE, "All rings closed")]

    crossing_problems = [
        problem
        for ring_idx, ring in enumerate(rings)
        if (problem := ring_self_intersection(ring, ring_idx)) is not None
    ]
    if not crossing_problems and len(rings) > 1:
        crossing_problems.extend(_ring_relations(rings))
    if crossing_problems:
        steps.append(_failed(STEP_SELF_INTERSECTION, "; ".join(crossing_problems)))
        return steps
    steps.append(_passed(STEP_SELF_INTERSECTION, "No self-intersection"))

    if declared_area is not None:
        steps.append(_check_area(rings, declared_area, tolerance))
    return steps


def ring_closure_problem(ring: Ring, ring_idx: int = 0) -> str | None:
    """Describe why *ring* is not a closed ring, or return ``None``."""
    label = "Outer ring" if ring_idx == 0 else f"Hole {ring_idx}"
    if len(ring) < MIN_RING_POSITIONS:
        return f"{label} has {len(ring)} position(s), need at least {MIN_RING_POSITIONS}"
    if ring[0] != ring[-1]:
        return f"{label} is not closed: first position {ring[0]} != last position {ring[-1]}"
    if len(set(ring)) < 3:
        return f"{label} has fewer than 3 distinct positions"
    return None


def segments_intersect(p1: Position, p2: Position, q1: Position, q2: Position) -> bool:
    """Whether closed segments ``p1-p2`` and ``q1-q2`` share any point."""
    d1 = _orientation(q1, q2, p1)
    d2 = _orientation(q1, q2, p2)
    d3 = _orientation(p1, p2, q1)
    d4 = _orientation(p1, p2, q2)

    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and (
        (d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)
    ):
        return True

    return (
        (d1 == 0 and _on_segment(q1, q2, p1))
        or (d2 == 0 and _on_segment(q1, q2, p2))
        or (d3 == 0 and _on_segment(p1, p2, q1))
        or (d4 == 0 and _on_segment(p1, p2, q2))
    )


def ring_self_intersection(ring: Ring, ring_idx: int = 0) -> str | None:
    """Describe the first crossing within a closed ring, or return ``None``.

    Every pair of non-adjacent edges is tested. Contact that consists only
    of a shared endpoint is not a crossing. Adjacent edges only fail when
    they fold back over each other (a zero-width spike).
    """
    label = "Outer ring" if ring_idx == 0 else f"Hole {ring_idx}"
    points = _drop_repeated(ring)
    edges = [(points[i], points[i + 1]) for i in range(len(points) - 1)]
    n = len(edges)

    for i in range(n):
        a, b = edges[i]
        c = edges[(i + 1) % n][1]
        if _orientation(a, b, c) == 0 and _dot(a, b, b, c) < 0:
            return f"{label} self-intersects: spike at position {(i + 1) % n}"

    for i in range(n):
        for j in range(i + 2, n):
            if i == 0 and j == n - 1:
                continue
            (p1, p2), (q1, q2) = edges[i], edges[j]
            if not segments_intersect(p1, p2, q1, q2):
                continue
            if _touch_only_at_shared_endpoint(p1, p2, q1, q2):
                continue
            return f"{label} self-intersects: edge {i} crosses edge {j}"
    return None


def _ring_relations(rings: list[Ring]) -> list[str]:
    """Check holes lie inside the outer ring and do not overlap each other."""
    from shapely.errors import GEOSException
    from shapely.geometry import Polygon

    try:
        shell = Polygon(rings[0])
        holes = [Polygon(ring) for ring in rings[1:]]
        problems = [
            f"Hole {idx} crosses or lies outside the outer ring"
            for idx, hole in enumerate(holes, start=1)
            if not shell.contains(hole)
        ]
        for i, first in enumerate(holes, start=1):
            for j, second in enumerate(holes[i:], start=i + 1):
                if first.intersection(second).area > 0:
                    problems.append(f"Hole {i} overlaps hole {j}")
    except GEOSException as exc:
        return [f"Rings cannot be related: {exc}"]
    return problems


# ---------------------------------------------------------------------------
# Area
# ---------------------------------------------------------------------------


def planar_area_ha(rings: Sequence[Ring]) -> float:
    """Approximate polygon area in hectares (outer ring minus holes).

    Positions are projected to metres with an equirectangular projection
    centred on the outer ring's mean latitude and longitude, then measured
    with the shoelace formula.
    """
    outer = rings[0][:-1] if rings[0][0] == rings[0][-1] else rings[0]
    lon0 = sum(lon for lon, _ in outer) / len(outer)
    lat0 = sum(lat for _, lat in outer) / len(outer)
    cos_lat0 = math.cos(math.radians(lat0))

    def project(ring: Ring) -> Ring:
        return [
            (
                EARTH_RADIUS_M * math.radians(lon - lon0) * cos_lat0,
                EARTH_RADIUS_M * math.radians(lat - lat0),
            )
            for lon, lat in ring
        ]

    total = shoelace_area(project(rings[0]))
    for hole in rings[1:]:
        total -= shoelace_area(project(hole))
    return max(total, 0.0) / SQ_METRES_PER_HECTARE


def shoelace_area(ring: Ring) -> float:
    """Unsigned planar area of a ring (closed or not)."""
    if len(ring) < 3:
        return 0.0
    twice_area = 0.0
    for (x1, y1), (x2, y2) in zip(ring, ring[1:] + ring[:1], strict=True):
        twice_area += x1 * y2 - x2 * y1
    return abs(twice_area) / 2.0


def _check_area(rings: list[Ring], declared: float, tolerance: float) -> ValidationStep:
    computed = planar_area_ha(rings)
    deviation = abs(computed - declared) / declared
    if deviation > tolerance:
        return ValidationStep(
            STEP_AREA_CONSISTENCY,
            False,
            f"Declared Area {declared:g} ha differs from computed area "
            f"{computed:.2f} ha by {deviation:.0%} (tolerance {tolerance:.0%})",
            CATEGORY_AREA,
        )
    return ValidationStep(
        STEP_AREA_CONSISTENCY,
        True,
        f"Computed area {computed:.2f} ha matches declared Area {declared:g} ha",
        CATEGORY_AREA,
    )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _passed(name: str, message: str) -> ValidationStep:
    return ValidationStep(name, True, message, CATEGORY_GEOMETRY)


def _failed(name: str, message: str) -> ValidationStep:
    return ValidationStep(name, False, message, CATEGORY_GEOMETRY)


def _orientation(a: Position, b: Position, c: Position) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def _dot(a: Position, b: Position, c: Position, d: Position) -> float:
    return (b[0] - a[0]) * (d[0] - c[0]) + (b[1] - a[1]) * (d[1] - c[1])


def _on_segment(a: Position, b: Position, p: Position) -> bool:
    """Whether collinear point *p* lies within the bounding box of ``a-b``."""
    return min(a[0], b[0]) <= p[0] <= max(a[0], b[0]) and min(a[1], b[1]) <= p[1] <= max(
        a[1], b[1]
    )


def _touch_only_at_shared_endpoint(p1: Position, p2: Position, q1: Position, q2: Position) -> bool:
    shared = {p1, p2} & {q1, q2}
    if len(shared) != 1:
        return False
    (point,) = shared
    other_p = p2 if p1 == point else p1
    other_q = q2 if q1 == point else q1
    # Collinear overlap beyond the shared point is still a crossing.
    overlaps = (_orientation(p1, p2, other_q) == 0 and _on_segment(p1, p2, other_q)) or (
        _orientation(q1, q2, other_p) == 0 and _on_segment(q1, q2, other_p)
    )
    return not overlaps


def _drop_repeated(ring: Ring) -> Ring:
    """Remove consecutive duplicate positions (zero-length edges)."""
    points: Ring = []
    for position in ring:
        if not points or points[-1] != position:
            points.append(position)
    return points
