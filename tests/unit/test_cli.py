"""Tests for the command-line entry point."""

from __future__ import annotations

import json
import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from plot_validation.cli import main
from tests.builders import geojson_feature, make_collection


@pytest.fixture(autouse=True)
def _clean_env() -> Iterator[None]:
    with patch.dict(os.environ, {}, clear=True):
        yield


class TestExitCodes:
    def test_valid_file_exits_zero(
        self, valid_plots_geojson: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([str(valid_plots_geojson)]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["overall_valid"] is True
        assert report["source_file"] == "01_valid_plots.geojson"

    def test_invalid_plots_exit_one(
        self, mixed_plots_geojson: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([str(mixed_plots_geojson)]) == 1
        report = json.loads(capsys.readouterr().out)
        assert report["summary"]["valid_count"] == 1
        assert report["summary"]["top_errors"][0] == "Missing ProducerCountry"

    def test_not_a_collection_exits_two(
        self, not_a_collection_geojson: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([str(not_a_collection_geojson)]) == 2
        assert capsys.readouterr().out == ""

    def test_truncated_json_exits_two(self, edge_cases_dir: Path) -> None:
        assert main([str(edge_cases_dir / "04_truncated_json.geojson")]) == 2

    def test_missing_file_exits_two(self, tmp_path: Path) -> None:
        assert main([str(tmp_path / "absent.geojson")]) == 2

    def test_bad_tolerance_exits_two(self, valid_plots_geojson: Path) -> None:
        assert main([str(valid_plots_geojson), "--tolerance", "1.5"]) == 2

    def test_bad_env_exits_two(self, valid_plots_geojson: Path) -> None:
        with patch.dict(os.environ, {"PLOT_TOP_ERRORS": "0"}):
            assert main([str(valid_plots_geojson)]) == 2


class TestOptions:
    def test_tolerance_override(self, tmp_path: Path) -> None:
        path = tmp_path / "plot.geojson"
        properties = {"plot_ID": "A", "Area": 1.5, "ProducerCountry": "BR"}
        path.write_text(json.dumps(make_collection(geojson_feature(properties))))
        assert main([str(path)]) == 1
        assert main([str(path), "--tolerance", "0.25"]) == 0

    def test_workers_and_top_errors(
        self, mixed_plots_geojson: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main([str(mixed_plots_geojson), "--workers", "3", "--top-errors", "1"]) == 1
        report = json.loads(capsys.readouterr().out)
        assert report["summary"]["top_errors"] == ["Missing ProducerCountry"]
