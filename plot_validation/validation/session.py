"""Identity-preserving edit workspace for a parsed collection.

An ``EditSession`` holds the current plots between the upload and the
submission. Callers patch individual properties and then explicitly
re-run validation; a patch never triggers validation by itself, and it
always discards the previous result so a stale verdict can never be
mistaken for a fresh one.

The session keeps private copies of its plots. Features passed in or
handed out are deep copies, so ``patch`` is the only way to change one.

A session is owned by one caller and is not thread-safe.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from typing import Any

from plot_validation.core.config import ValidationConfig
from plot_validation.core.constants import AREA_FIELD, COUNTRY_FIELD, FEATURE_COLLECTION_TYPE
from plot_validation.core.countries import normalize_country_code
from plot_validation.core.exceptions import SessionError, SubmissionGateError, UnknownPlotError
from plot_validation.models.feature import Feature
from plot_validation.models.results import CollectionValidationResult, ValidationState
from plot_validation.validation.attributes import coerce_area
from plot_validation.validation.collection import validate_collection
from plot_validation.validation.parser import parse_feature_collection

logger = logging.getLogger("plot_validation.validation.session")

_REMOVE = object()


class EditSession:
    """Mutable workspace over immutable ``Feature`` records.

    Args:
        features: Plots as returned by the parser.
        config: Validation configuration used by ``validate()``.
    """

    def __init__(
        self,
        features: Sequence[Feature],
        *,
        config: ValidationConfig | None = None,
    ) -> None:
        self._config = config or ValidationConfig()
        self._original: tuple[Feature, ...] = tuple(f.clone() for f in features)
        self._features: list[Feature] = [f.clone() for f in self._original]
        self._state = ValidationState.UNVALIDATED
        self._last_result: CollectionValidationResult | None = None

    @classmethod
    def from_geojson(
        cls,
        raw: str | bytes | dict[str, Any],
        *,
        config: ValidationConfig | None = None,
    ) -> EditSession:
        """Parse *raw* and open a session over its plots.

        Raises:
            StructuralError: If *raw* is not a well-formed FeatureCollection.
        """
        return cls(parse_feature_collection(raw, config=config), config=config)

    # -- state ---------------------------------------------------------------

    @property
    def state(self) -> ValidationState:
        return self._state

    @property
    def last_result(self) -> CollectionValidationResult | None:
        """Result of the latest ``validate()`` since the last edit, if any."""
        return self._last_result

    @property
    def plot_ids(self) -> list[str]:
        return [feature.plot_id for feature in self._features]

    @property
    def has_changes(self) -> bool:
        """Whether any plot differs from what was parsed."""
        return tuple(self._features) != self._original

    def __len__(self) -> int:
        return len(self._features)

    # -- edits ---------------------------------------------------------------

    def patch(self, plot_id: str, field: str, value: object) -> Feature:
        """Set one property on the plot identified by *plot_id*.

        ``Area`` values are converted to numbers when they parse as one
        (otherwise kept as given so validation reports them), and
        ``ProducerCountry`` is trimmed and upper-cased. ``None`` or an
        empty string removes the property. The plot id and geometry are
        never changed, even when an identifier property is edited.

        Returns:
            A copy of the patched feature.

        Raises:
            UnknownPlotError: If no plot has this id.
            SessionError: If several plots share this id; use
                ``patch_index`` instead.
        """
        matches = [i for i, f in enumerate(self._features) if f.plot_id == plot_id]
        if not matches:
            raise UnknownPlotError(plot_id)
        if len(matches) > 1:
            msg = f"Plot id {plot_id!r} is shared by {len(matches)} plots; patch by index"
            raise SessionError(msg, code="AMBIGUOUS_PLOT_ID")
        return self.patch_index(matches[0], field, value)

    def patch_index(self, index: int, field: str, value: object) -> Feature:
        """Set one property on the plot at position *index*.

        Raises:
            SessionError: If *index* is out of range.
        """
        if not 0 <= index < len(self._features):
            msg = f"Plot index {index} out of range (0..{len(self._features) - 1})"
            raise SessionError(msg, code="PLOT_INDEX_OUT_OF_RANGE")

        current = self._features[index]
        properties = dict(current.properties)
        coerced = coerce_patch_value(field, value)
        if coerced is _REMOVE:
            properties.pop(field, None)
        else:
            properties[field] = coerced

        patched = dataclasses.replace(current, properties=properties)
        self._features[index] = patched
        self._invalidate()

        logger.debug(
            "Plot patched | plot_id=%s | field=%s | value=%r",
            patched.plot_id,
            field,
            properties.get(field),
        )
        return patched.clone()

    def reset(self) -> None:
        """Discard every edit and return to the parsed plots."""
        self._features = [f.clone() for f in self._original]
        self._invalidate()

    def _invalidate(self) -> None:
        self._last_result = None
        self._state = ValidationState.UNVALIDATED

    # -- validation ----------------------------------------------------------

    def validate(self) -> CollectionValidationResult:
        """Validate the current plots and remember the result."""
        self._state = ValidationState.VALIDATING
        result = validate_collection(self._features, config=self._config)
        self._last_result = result
        self._state = result.state
        return result

    def validated_features(self) -> list[Feature]:
        """Plots to hand to the submission step.

        Raises:
            SubmissionGateError: Unless the latest ``validate()`` since the
                last edit passed for the whole collection.
        """
        if self._last_result is None or not self._last_result.overall_valid:
            msg = (
                "Collection has not passed validation"
                if self._last_result is not None
                else "Collection must be validated after the last edit"
            )
            raise SubmissionGateError(msg)
        return self.snapshot()

    # -- export --------------------------------------------------------------

    def snapshot(self) -> list[Feature]:
        """Current plots, in order.

        Every feature is a deep copy, so changing one never reaches the
        session. Edits go through ``patch``.
        """
        return [feature.clone() for feature in self._features]

    def to_geojson(self) -> dict[str, object]:
        """Current plots as a GeoJSON FeatureCollection."""
        return {
            "type": FEATURE_COLLECTION_TYPE,
            "features": [feature.to_geojson() for feature in self._features],
        }


def coerce_patch_value(field: str, value: object) -> object:
    """Apply the field-specific conversion for an edited value.

    Returns the module's removal sentinel for ``None`` and blank strings.
    """
    if field == COUNTRY_FIELD and isinstance(value, dict) and "value" in value:
        # Select-widget option object: {"value": "BR", "label": "Brazil (BR)"}
        value = value["value"]
    if value is None or (isinstance(value, str) and not value.strip()):
        return _REMOVE

    if field == AREA_FIELD:
        area = coerce_area(value)
        return value if area is None else area
    if field == COUNTRY_FIELD:
        return normalize_country_code(value) if isinstance(value, str) else value
    return value
