"""Tests for the attribute validator.

Covers:
- Step order and categories
- Identifier presence (primary and fallback)
- Area coercion and the Area = 0 boundary
- ProducerCountry normalisation and the ISO table
- Configured required fields, ignored extra properties
"""

from __future__ import annotations

import math

import pytest

from plot_validation.core.config import ValidationConfig
from plot_validation.models.results import ValidationStep
from plot_validation.validation.attributes import coerce_area, declared_area, validate_attributes


def _step(steps: list[ValidationStep], name: str) -> ValidationStep:
    return next(s for s in steps if s.name == name)


class TestStepShape:
    """Every call yields one step per recognised attribute."""

    def test_step_order(self) -> None:
        steps = validate_attributes({"plot_ID": "A", "ProducerCountry": "BR"})
        assert [s.name for s in steps] == ["identifier", "area", "producer_country"]

    def test_all_attribute_category(self) -> None:
        steps = validate_attributes({})
        assert {s.category for s in steps} == {"attribute"}

    def test_failed_steps_carry_messages(self) -> None:
        steps = validate_attributes({"Area": "abc", "ProducerCountry": "XX"})
        assert all(s.message for s in steps if not s.passed)

    def test_unknown_properties_ignored(self) -> None:
        steps = validate_attributes(
            {"plot_ID": "A", "ProducerCountry": "BR", "commodity": None, "notes": 3}
        )
        assert all(s.passed for s in steps)
        assert len(steps) == 3

    def test_input_not_modified(self) -> None:
        props = {"plot_ID": "A", "ProducerCountry": " us ", "Area": "2"}
        validate_attributes(props)
        assert props == {"plot_ID": "A", "ProducerCountry": " us ", "Area": "2"}


class TestIdentifier:
    def test_primary_present(self) -> None:
        step = _step(validate_attributes({"plot_ID": "A"}), "identifier")
        assert step.passed

    def test_fallback_present(self) -> None:
        step = _step(validate_attributes({"Survey_ID": "S-1"}), "identifier")
        assert step.passed
        assert "Survey_ID" in step.message

    def test_missing(self) -> None:
        step = _step(validate_attributes({"plot_ID": ""}), "identifier")
        assert not step.passed
        assert step.message == "Missing plot identifier (plot_ID or Survey_ID)"


class TestArea:
    def test_absent_passes(self) -> None:
        assert _step(validate_attributes({}), "area").passed

    @pytest.mark.parametrize("value", [1.5, 3, "2.75", " 4 "])
    def test_positive_numbers_pass(self, value: object) -> None:
        assert _step(validate_attributes({"Area": value}), "area").passed

    @pytest.mark.parametrize("value", [0, 0.0, "0"])
    def test_zero_fails(self, value: object) -> None:
        step = _step(validate_attributes({"Area": value}), "area")
        assert not step.passed
        assert "greater than 0" in step.message

    def test_negative_fails(self) -> None:
        step = _step(validate_attributes({"Area": -2}), "area")
        assert not step.passed
        assert "-2" in step.message

    @pytest.mark.parametrize("value", ["abc", True, [1], float("nan"), float("inf"), "inf"])
    def test_non_numeric_fails(self, value: object) -> None:
        step = _step(validate_attributes({"Area": value}), "area")
        assert not step.passed
        assert "finite number" in step.message

    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_string_fails(self, value: str) -> None:
        step = _step(validate_attributes({"Area": value}), "area")
        assert not step.passed
        assert "finite number" in step.message

    def test_null_is_not_declared(self) -> None:
        step = _step(validate_attributes({"Area": None}), "area")
        assert step.passed
        assert step.message == "Area not declared"

    def test_huge_integer_fails_without_raising(self) -> None:
        steps = validate_attributes({"plot_ID": "a", "Area": 10**400, "ProducerCountry": "BR"})
        step = _step(steps, "area")
        assert not step.passed
        assert "finite number" in step.message
        assert len(step.message) < 100


class TestCoerceArea:
    def test_parses_strings(self) -> None:
        assert coerce_area("12.5") == 12.5

    def test_rejects_bool(self) -> None:
        assert coerce_area(False) is None

    def test_rejects_nan(self) -> None:
        assert coerce_area(math.nan) is None

    def test_rejects_integer_beyond_float_range(self) -> None:
        assert coerce_area(-(10**400)) is None

    def test_rejects_blank_string(self) -> None:
        assert coerce_area("  ") is None

    def test_declared_area_ignores_unusable(self) -> None:
        assert declared_area({"Area": 0}) is None
        assert declared_area({"Area": "x"}) is None
        assert declared_area({}) is None
        assert declared_area({"Area": "3"}) == 3.0


class TestProducerCountry:
    def test_missing_fails_when_required(self) -> None:
        step = _step(validate_attributes({"plot_ID": "A"}), "producer_country")
        assert not step.passed
        assert step.message == "Missing ProducerCountry"

    def test_missing_passes_when_not_required(self) -> None:
        cfg = ValidationConfig(required_fields=())
        assert _step(validate_attributes({}, config=cfg), "producer_country").passed

    def test_unknown_code_fails(self) -> None:
        step = _step(validate_attributes({"ProducerCountry": "XX"}), "producer_country")
        assert not step.passed
        assert "'XX'" in step.message

    def test_lowercase_normalised(self) -> None:
        step = _step(validate_attributes({"ProducerCountry": "us"}), "producer_country")
        assert step.passed
        assert step.message == "ProducerCountry US"

    def test_non_string_fails(self) -> None:
        assert not _step(validate_attributes({"ProducerCountry": 76}), "producer_country").passed

    def test_injected_country_table(self) -> None:
        cfg = ValidationConfig(country_codes=frozenset({"EE"}))
        steps = validate_attributes({"ProducerCountry": "ee"}, config=cfg)
        assert _step(steps, "producer_country").passed
        assert not _step(
            validate_attributes({"ProducerCountry": "BR"}, config=cfg), "producer_country"
        ).passed


class TestRequiredFields:
    def test_extra_required_field_step(self) -> None:
        cfg = ValidationConfig(required_fields=("ProducerCountry", "Farmer"))
        steps = validate_attributes({"plot_ID": "A", "ProducerCountry": "BR"}, config=cfg)
        assert [s.name for s in steps][-1] == "required:Farmer"
        assert steps[-1].message == "Missing Farmer"
        assert not steps[-1].passed

    def test_extra_required_field_present(self) -> None:
        cfg = ValidationConfig(required_fields=("Farmer",))
        steps = validate_attributes({"plot_ID": "A", "Farmer": "Ana"}, config=cfg)
        assert all(s.passed for s in steps)
