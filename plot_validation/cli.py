"""Command-line entry point: validate a GeoJSON file and print the report.

Exit codes: 0 when every plot is valid, 1 when any plot (or the
collection) has errors, 2 when the file cannot be read or is not a
FeatureCollection, or the configuration is invalid.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from plot_validation.core.config import ConfigValidationError, ValidationConfig, validate_config
from plot_validation.core.exceptions import StructuralError
from plot_validation.models.report import build_validation_report
from plot_validation.validation.session import EditSession

logger = logging.getLogger("plot_validation.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plot-validation",
        description="Validate EUDR plot geometries and attributes in a GeoJSON file.",
    )
    parser.add_argument("geojson", help="Path to a GeoJSON FeatureCollection")
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Relative area tolerance (default: PLOT_AREA_TOLERANCE or 0.10)",
    )
    parser.add_argument(
        "--top-errors",
        type=int,
        default=None,
        help="Number of most frequent errors in the summary",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Thread pool size for per-plot validation",
    )
    parser.add_argument("--verbose", action="store_true", help="Log per-plot details")
    return parser


def _load_config(args: argparse.Namespace) -> ValidationConfig:
    config = ValidationConfig.from_env()
    overrides: dict[str, object] = {}
    if args.tolerance is not None:
        overrides["area_tolerance"] = args.tolerance
    if args.top_errors is not None:
        overrides["top_errors_limit"] = args.top_errors
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    if overrides:
        config = dataclasses.replace(config, **overrides)
        validate_config(config)
    return config


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    path = Path(args.geojson)
    try:
        config = _load_config(args)
        session = EditSession.from_geojson(path.read_bytes(), config=config)
    except OSError as exc:
        logger.error("Cannot read %s: %s", path, exc)
        return 2
    except (StructuralError, ConfigValidationError, ValueError) as exc:
        logger.error("%s", exc)
        return 2

    outcome = session.validate()
    report = build_validation_report(outcome, source_file=path.name)
    print(report.model_dump_json(indent=2))
    logger.info("%s", outcome.banner)
    return 0 if outcome.overall_valid else 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
