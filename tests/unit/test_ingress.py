"""Tests for the raw GeoJSON ingress boundary.

Validates that ``load_geojson_payload`` accepts text, bytes and dicts
and raises ``StructuralError`` for anything that is not a JSON object.
"""

from __future__ import annotations

import json

import pytest

from plot_validation.core.exceptions import StructuralError
from plot_validation.core.ingress import load_geojson_payload


class TestLoadGeojsonPayload:
    """Normalise raw upload content to a dict."""

    def test_json_string_parsed(self) -> None:
        raw = json.dumps({"type": "FeatureCollection", "features": []})
        assert load_geojson_payload(raw) == {"type": "FeatureCollection", "features": []}

    def test_utf8_bytes_parsed(self) -> None:
        raw = json.dumps({"name": "Fazenda São João"}, ensure_ascii=False).encode("utf-8")
        assert load_geojson_payload(raw) == {"name": "Fazenda São João"}

    def test_byte_order_mark_tolerated(self) -> None:
        raw = b"\xef\xbb\xbf" + b'{"type": "FeatureCollection"}'
        assert load_geojson_payload(raw) == {"type": "FeatureCollection"}

    def test_dict_passthrough(self) -> None:
        payload = {"type": "FeatureCollection"}
        assert load_geojson_payload(payload) is payload

    def test_invalid_json_raises_structural_error(self) -> None:
        with pytest.raises(StructuralError, match="not valid JSON") as exc_info:
            load_geojson_payload("{not-json")
        assert exc_info.value.code == "INVALID_JSON"
        assert exc_info.value.stage == "parse"

    def test_invalid_utf8_raises_structural_error(self) -> None:
        with pytest.raises(StructuralError, match="UTF-8") as exc_info:
            load_geojson_payload(b"\xff\xfe\x00")
        assert exc_info.value.code == "INVALID_ENCODING"

    def test_json_array_raises_structural_error(self) -> None:
        with pytest.raises(StructuralError, match="must be a JSON object") as exc_info:
            load_geojson_payload("[1, 2, 3]")
        assert exc_info.value.code == "INVALID_INPUT_TYPE"

    def test_unexpected_type_raises_structural_error(self) -> None:
        with pytest.raises(StructuralError, match="Unexpected GeoJSON input type"):
            load_geojson_payload(42)
