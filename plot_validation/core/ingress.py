"""Thin ingress boundary for raw GeoJSON payloads.

The upload collaborator hands the engine either the file contents
(``str`` or UTF-8 ``bytes``) or an object it already decoded. This
module normalises all three to a plain ``dict`` and raises
``StructuralError`` for anything that is not a JSON object.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from plot_validation.core.exceptions import StructuralError

logger = logging.getLogger("plot_validation.core.ingress")


def load_geojson_payload(raw: str | bytes | dict[str, Any] | object) -> dict[str, Any]:
    """Normalise raw GeoJSON input to a plain dict.

    Args:
        raw: File contents as ``str``/``bytes``, or an already-parsed dict.

    Returns:
        Parsed dict payload. A dict input is returned as-is.

    Raises:
        StructuralError: If *raw* is not valid JSON, is not UTF-8, or
            does not decode to a JSON object.
    """
    if isinstance(raw, bytes | bytearray):
        try:
            raw = bytes(raw).decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            msg = f"GeoJSON input is not valid UTF-8: {exc}"
            raise StructuralError(msg, code="INVALID_ENCODING") from exc
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw)
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"GeoJSON input is not valid JSON: {exc}"
            raise StructuralError(msg, code="INVALID_JSON") from exc
        if not isinstance(parsed, dict):
            msg = f"GeoJSON input must be a JSON object, got {type(parsed).__name__}"
            raise StructuralError(msg, code="INVALID_INPUT_TYPE")
        logger.debug("Decoded GeoJSON text | chars=%d", len(raw))
        return parsed
    if isinstance(raw, dict):
        return raw
    msg = f"Unexpected GeoJSON input type: {type(raw).__name__}"
    raise StructuralError(msg, code="INVALID_INPUT_TYPE")
