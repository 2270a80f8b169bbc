"""Data model for a parsed plot feature.

A Feature is a single land parcel taken from a GeoJSON
FeatureCollection: its stable plot id, geometry type, the raw
coordinate nesting and its property bag. This is the output of the
parser, the unit the edit session patches, and the input to the
per-plot validator.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace

from plot_validation.core.constants import (
    AREA_FIELD,
    COUNTRY_FIELD,
    FARMER_FIELD,
    FEATURE_TYPE,
    PLOT_ID_FIELD,
    SURVEY_ID_FIELD,
)

_KNOWN_FIELDS = frozenset({PLOT_ID_FIELD, SURVEY_ID_FIELD, AREA_FIELD, COUNTRY_FIELD, FARMER_FIELD})


@dataclass(frozen=True, slots=True)
class Feature:
    """A single plot extracted from a GeoJSON FeatureCollection.

    Features are immutable. The edit session replaces a feature with a
    patched copy; validators only ever read them.

    Attributes:
        plot_id: Stable identifier assigned at parse time.
        geometry_type: GeoJSON geometry type (e.g. ``"Polygon"``).
        coordinates: Raw GeoJSON ``coordinates`` value, not normalised,
            so malformed nesting can still be diagnosed.
        properties: The feature's property bag.
        feature_index: Zero-based index of this feature within the source.
    """

    plot_id: str
    geometry_type: str = ""
    coordinates: object = None
    properties: dict[str, object] = field(default_factory=dict)
    feature_index: int = 0

    def to_dict(self) -> dict[str, object]:
        """Serialise to a plain dict (see ``FeaturePayload``)."""
        return {
            "plot_id": self.plot_id,
            "geometry_type": self.geometry_type,
            "coordinates": copy.deepcopy(self.coordinates),
            "properties": copy.deepcopy(self.properties),
            "feature_index": self.feature_index,
        }

    def to_geojson(self) -> dict[str, object]:
        """Serialise back to an RFC 7946 ``Feature`` object."""
        return {
            "type": FEATURE_TYPE,
            "geometry": {
                "type": self.geometry_type,
                "coordinates": copy.deepcopy(self.coordinates),
            },
            "properties": copy.deepcopy(self.properties),
        }

    def clone(self) -> Feature:
        """Copy that shares no mutable coordinates or property values with this one."""
        return replace(
            self,
            coordinates=copy.deepcopy(self.coordinates),
            properties=copy.deepcopy(self.properties),
        )

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Feature:
        """Deserialise from a ``FeaturePayload`` dict.

        Raises:
            TypeError: If ``properties`` is not a dict.
        """
        properties_raw = data.get("properties", {})
        if not isinstance(properties_raw, dict):
            msg = f"properties must be a dict, got {type(properties_raw).__name__}"
            raise TypeError(msg)
        return cls(
            plot_id=str(data.get("plot_id", "")),
            geometry_type=str(data.get("geometry_type", "")),
            coordinates=copy.deepcopy(data.get("coordinates")),
            properties={str(k): v for k, v in properties_raw.items()},
            feature_index=int(data.get("feature_index", 0)),  # type: ignore[arg-type]
        )

    @property
    def label(self) -> str | None:
        """Display label (the farmer name), if the plot declares one."""
        value = self.properties.get(FARMER_FIELD)
        if value is None or not str(value).strip():
            return None
        return str(value).strip()


@dataclass(frozen=True, slots=True)
class PlotProperties:
    """Tagged view of a property bag: known fields plus an ignored bucket.

    Values are kept exactly as supplied; typing and domain checks are the
    attribute validator's job.
    """

    plot_id: object = None
    survey_id: object = None
    area: object = None
    producer_country: object = None
    farmer: object = None
    present: frozenset[str] = frozenset()
    extra: dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, properties: dict[str, object]) -> PlotProperties:
        return cls(
            plot_id=properties.get(PLOT_ID_FIELD),
            survey_id=properties.get(SURVEY_ID_FIELD),
            area=properties.get(AREA_FIELD),
            producer_country=properties.get(COUNTRY_FIELD),
            farmer=properties.get(FARMER_FIELD),
            present=frozenset(k for k in properties if k in _KNOWN_FIELDS),
            extra={k: v for k, v in properties.items() if k not in _KNOWN_FIELDS},
        )

    def has(self, name: str) -> bool:
        """Whether the known field *name* was present in the source bag."""
        return name in self.present
