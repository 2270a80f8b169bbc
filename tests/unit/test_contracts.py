"""Contract drift detection: ``to_dict()`` keys must match the TypedDicts."""

from __future__ import annotations

from typing import get_type_hints

import pytest

from plot_validation.models.contracts import (
    CollectionResultPayload,
    FeaturePayload,
    PlotResultPayload,
    StepPayload,
    SummaryPayload,
)
from plot_validation.models.feature import Feature
from plot_validation.models.results import CollectionValidationResult
from plot_validation.validation.collection import validate_collection
from tests.builders import bowtie_ring, make_feature


def _keys(contract: type) -> set[str]:
    return set(get_type_hints(contract))


@pytest.fixture()
def outcome() -> CollectionValidationResult:
    return validate_collection([make_feature("A"), make_feature("B", coordinates=[bowtie_ring()])])


class TestContractDrift:
    def test_feature(self) -> None:
        assert set(make_feature().to_dict()) == _keys(FeaturePayload)

    def test_step(self, outcome: CollectionValidationResult) -> None:
        assert set(outcome.results[0].steps[0].to_dict()) == _keys(StepPayload)

    def test_plot_result(self, outcome: CollectionValidationResult) -> None:
        assert set(outcome.results[1].to_dict()) == _keys(PlotResultPayload)

    def test_summary(self, outcome: CollectionValidationResult) -> None:
        assert set(outcome.summary.to_dict()) == _keys(SummaryPayload)

    def test_collection(self, outcome: CollectionValidationResult) -> None:
        assert set(outcome.to_dict()) == _keys(CollectionResultPayload)


class TestFeatureRoundTrip:
    def test_from_dict_restores_feature(self) -> None:
        feature = make_feature("A", feature_index=4)
        assert Feature.from_dict(feature.to_dict()) == feature

    def test_from_dict_rejects_bad_properties(self) -> None:
        with pytest.raises(TypeError, match="properties must be a dict"):
            Feature.from_dict({"plot_id": "A", "properties": []})
