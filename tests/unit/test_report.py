"""Tests for the pydantic validation report."""

from __future__ import annotations

import json

from plot_validation.models.report import SCHEMA_VERSION, ValidationReport, build_validation_report
from plot_validation.validation.collection import validate_collection
from tests.builders import make_feature, valid_properties


class TestValidationReport:
    def test_valid_collection(self) -> None:
        outcome = validate_collection([make_feature("A")])
        report = build_validation_report(outcome, source_file="plots.geojson")

        assert report.schema_version == SCHEMA_VERSION
        assert report.source_file == "plots.geojson"
        assert report.state == "all_valid"
        assert report.overall_valid
        assert report.validated_plot_ids == ["A"]
        assert report.summary.valid_count == 1
        assert report.plots[0].steps[0].name == "identifier"

    def test_invalid_collection(self) -> None:
        features = [
            make_feature("A"),
            make_feature("B", properties=valid_properties("B", ProducerCountry="ZZ")),
        ]
        report = build_validation_report(validate_collection(features))

        assert report.state == "has_errors"
        assert not report.overall_valid
        assert report.validated_plot_ids == []
        assert report.summary.invalid_count == 1
        assert report.plots[1].errors[0].startswith("Invalid ProducerCountry 'ZZ'")
        assert report.banner == "1 of 2 plots invalid, fix and re-validate"

    def test_json_deterministic(self) -> None:
        features = [make_feature("A"), make_feature("B")]
        first = build_validation_report(validate_collection(features)).model_dump_json()
        second = build_validation_report(validate_collection(features)).model_dump_json()
        assert first == second

    def test_json_round_trip(self) -> None:
        report = build_validation_report(validate_collection([make_feature("A")]))
        restored = ValidationReport.model_validate(json.loads(report.model_dump_json()))
        assert restored == report
